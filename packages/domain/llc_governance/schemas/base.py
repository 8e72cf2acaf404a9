"""Base classes and type system for LLC governance models.

This module provides the foundational types, validators, and base classes
used throughout the governance schema system.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from ..constants import FULL_OWNERSHIP, REASON_MAX

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all governance domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Frozen instances (submitted values never change after construction)
    - camelCase aliases so payloads keep the caller's vocabulary
    - Construction by Python field name as well as by alias
    - Enum value serialization
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

def _within_percent(value: Decimal) -> Decimal:
    if value < 0 or value > FULL_OWNERSHIP:
        raise PydanticCustomError(
            "ratio_out_of_range",
            "ratio must be between 0 and 100, got {value}",
            {"value": str(value)},
        )
    return value


def _strictly_positive_percent(value: Decimal) -> Decimal:
    if value <= 0 or value > FULL_OWNERSHIP:
        raise PydanticCustomError(
            "ratio_out_of_range",
            "ratio must be greater than 0 and at most 100, got {value}",
            {"value": str(value)},
        )
    return value


Ratio = Annotated[
    Decimal,
    AfterValidator(_within_percent),
    Field(description="Percentage as 0..100 (60 = 60%)"),
]

PositiveRatio = Annotated[
    Decimal,
    AfterValidator(_strictly_positive_percent),
    Field(description="Percentage in (0, 100]"),
]

MoneyAmount = Annotated[
    Decimal,
    Field(ge=0, description="Currency amount (non-negative)"),
]


# =============================================================================
# Type Aliases - Identifiers and Text
# =============================================================================

OfficerId = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1),
    Field(description="Identifier of a natural person holding an office"),
]

Reason = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=REASON_MAX),
    Field(description="Free-text justification attached to a change request"),
]
