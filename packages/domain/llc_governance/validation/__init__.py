"""Cross-field rules of the governance engine.

Schemas check the shape of a payload; the functions here check how its
parts fit together, returning ``FieldError`` lists so violations can be
accumulated.
"""

from .exclusive import ExclusiveChoice, resolve_exclusive_or_fallback, require_exclusive
from .shareholders import validate_shareholders, voting_rights_violations, resolve_voting_rights
from .voting import Holding, with_effective_voting, holding_of
from .roster import validate_roster, diff_officers
from .divisions import division_path_violations, check_division_level
from .applications import validate_application

__all__ = [
    "ExclusiveChoice",
    "resolve_exclusive_or_fallback",
    "require_exclusive",
    "validate_shareholders",
    "voting_rights_violations",
    "resolve_voting_rights",
    "Holding",
    "with_effective_voting",
    "holding_of",
    "validate_roster",
    "diff_officers",
    "division_path_violations",
    "check_division_level",
    "validate_application",
]
