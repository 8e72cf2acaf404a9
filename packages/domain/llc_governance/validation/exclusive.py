"""Exclusive-or presence with fallback resolution.

Several inputs come as two alternative fields of which one is enough:
registration authority (company id or name), company type (code or id),
industry (code or id). All of them resolve through this one combinator.
When the primary is present the secondary is dropped; filling it back in
from a lookup is left to the caller.
"""

from typing import Any, List, Literal, Optional

from ..errors import ErrorKind, FieldError, field_error
from ..schemas.base import DomainModel

Branch = Literal["primary", "secondary", "none"]


class ExclusiveChoice(DomainModel):
    """Which of two alternative fields was used, and its value."""

    branch: Branch
    value: Optional[Any] = None

    @property
    def present(self) -> bool:
        return self.branch != "none"


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def resolve_exclusive_or_fallback(primary: Any, secondary: Any) -> ExclusiveChoice:
    """Pick the primary value if present, else the secondary.

    Blank strings count as absent.

    Example:
        resolve_exclusive_or_fallback("corp-1", "Registry Office")
        → ExclusiveChoice(branch="primary", value="corp-1")
    """
    if _is_present(primary):
        value = primary.strip() if isinstance(primary, str) else primary
        return ExclusiveChoice(branch="primary", value=value)
    if _is_present(secondary):
        value = secondary.strip() if isinstance(secondary, str) else secondary
        return ExclusiveChoice(branch="secondary", value=value)
    return ExclusiveChoice(branch="none")


def require_exclusive(
    primary: Any,
    secondary: Any,
    *,
    path: str,
    errors: List[FieldError],
    label: str = "value",
) -> ExclusiveChoice:
    """Resolve a required pair, recording MissingRequiredField at ``path`` when neither is set."""
    choice = resolve_exclusive_or_fallback(primary, secondary)
    if not choice.present:
        errors.append(
            field_error(
                ErrorKind.MISSING_REQUIRED_FIELD,
                path,
                f"{label} is required, given either way",
            )
        )
    return choice
