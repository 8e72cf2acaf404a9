"""Numeric tolerances and field limits shared by validators and the differ."""

from decimal import Decimal

# Capital and voting ratios must sum to FULL_OWNERSHIP within this tolerance.
RATIO_EPSILON = Decimal("0.000001")

# Tolerance when comparing a live holding against a requested transfer.
HOLDING_EPSILON = Decimal("0.000000001")

FULL_OWNERSHIP = Decimal("100")

MIN_OPERATING_YEARS = 1
MAX_OPERATING_YEARS = 200

DIVISION_LEVELS = (1, 2, 3)

# Text limits
COMPANY_NAME_MIN = 2
COMPANY_NAME_MAX = 120
BRAND_NAME_MAX = 40
INDUSTRY_FEATURE_MAX = 40
AUTHORITY_NAME_MAX = 80
DOMICILE_ADDRESS_MAX = 200
BUSINESS_SCOPE_MAX = 2000
REASON_MAX = 200
COMMENT_MAX = 500
