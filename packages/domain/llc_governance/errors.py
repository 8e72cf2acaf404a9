"""Error taxonomy and exceptions for the governance engine.

Every violation carries an ``ErrorKind`` and the path of the offending field,
so the boundary layer can map kinds to user-facing messages.

Usage:
    from llc_governance.errors import ApplicationValidationError, ErrorKind

    try:
        validate_application("REGISTRATION", payload)
    except ApplicationValidationError as exc:
        for error in exc.errors:
            print(error.kind, error.path, error.message)
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ErrorKind(str, Enum):
    """Machine-readable violation kinds."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_REFERENCE_KIND = "invalid_reference_kind"
    RATIO_OUT_OF_RANGE = "ratio_out_of_range"
    SUM_MISMATCH = "sum_mismatch"
    VOTING_SUM_MISMATCH = "voting_sum_mismatch"
    MISSING_VOTING_RATIO = "missing_voting_ratio"
    ROLE_NOT_IN_SET = "role_not_in_set"
    CONFLICTING_ROLE = "conflicting_role"
    DUPLICATE_PARTY = "duplicate_party"
    AMBIGUOUS_CHANGE_TYPE = "ambiguous_change_type"
    NO_OP_CHANGE = "no_op_change"
    INSUFFICIENT_HOLDING = "insufficient_holding"
    INCONSISTENT_CHANGE_TYPE = "inconsistent_change_type"
    DIVISION_LEVEL_MISMATCH = "division_level_mismatch"
    INVALID_FIELD_VALUE = "invalid_field_value"


_KIND_BY_CODE = {kind.value: kind for kind in ErrorKind}

PathPart = Union[str, int]


class FieldError(BaseModel):
    """A single violation tied to a field path such as ``shareholders[1].capitalRatio``."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    path: str = Field(description="Dotted path; list positions in brackets, '' for the payload root")
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {"kind": self.kind.value, "path": self.path, "message": self.message}
        if self.context:
            result["context"] = dict(self.context)
        return result


def format_path(parts: Iterable[PathPart]) -> str:
    """Render ``("shareholders", 1, "capitalRatio")`` as ``shareholders[1].capitalRatio``."""
    rendered = ""
    for part in parts:
        if isinstance(part, int):
            rendered += f"[{part}]"
        elif rendered:
            rendered += f".{part}"
        else:
            rendered = str(part)
    return rendered


def join_path(prefix: str, *parts: PathPart) -> str:
    """Extend an already rendered path with more segments."""
    tail = format_path(parts)
    if not prefix:
        return tail
    if not tail:
        return prefix
    return prefix + tail if tail.startswith("[") else f"{prefix}.{tail}"


def field_error(kind: ErrorKind, path: str, message: str, **context: Any) -> FieldError:
    return FieldError(kind=kind, path=path, message=message, context=context)


def _kind_for(error: Dict[str, Any]) -> ErrorKind:
    error_type = error.get("type", "")
    if error_type in _KIND_BY_CODE:
        return _KIND_BY_CODE[error_type]
    if error_type in ("missing", "union_tag_not_found"):
        return ErrorKind.MISSING_REQUIRED_FIELD
    value = error.get("input")
    # null for a required value, or a string that is blank once stripped
    if value is None and error_type.endswith("_type"):
        return ErrorKind.MISSING_REQUIRED_FIELD
    if error_type == "string_too_short" and isinstance(value, str) and not value.strip():
        return ErrorKind.MISSING_REQUIRED_FIELD
    return ErrorKind.INVALID_FIELD_VALUE


_UNION_TAGS = {"INDEFINITE", "LONG_TERM", "YEARS"}


def _clean_loc(loc: Sequence[PathPart]) -> Tuple[PathPart, ...]:
    # Tagged-union branches and function validators add non-field entries to loc.
    return tuple(
        part for part in loc
        if isinstance(part, int) or not (part.startswith("function-") or part in _UNION_TAGS)
    )


def translate_validation_error(exc: ValidationError, prefix: str = "") -> List[FieldError]:
    """Convert a pydantic ``ValidationError`` into governance ``FieldError``s.

    Args:
        exc: The pydantic error raised while parsing a payload section
        prefix: Rendered path of the section inside the whole payload

    Returns:
        One FieldError per pydantic error, in pydantic's order
    """
    translated = []
    for error in exc.errors():
        path = join_path(prefix, *_clean_loc(error["loc"]))
        context = {k: str(v) for k, v in (error.get("ctx") or {}).items()}
        translated.append(
            FieldError(kind=_kind_for(error), path=path, message=error["msg"], context=context)
        )
    return translated


# =============================================================================
# Exceptions
# =============================================================================

class GovernanceError(Exception):
    """Base exception for all governance engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional context for the boundary layer
    """

    error_code: str = "GOVERNANCE_ERROR"

    def __init__(self, message: str = "Governance rule violated", *, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ApplicationValidationError(GovernanceError):
    """Raised when a submitted payload has one or more violations.

    All violations found in one validation pass are carried together.
    """

    error_code = "APPLICATION_INVALID"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(
            message or f"Application has {len(self.errors)} violation(s)",
            details={"errors": [e.to_dict() for e in self.errors]},
        )

    @property
    def kinds(self) -> List[ErrorKind]:
        return [e.kind for e in self.errors]

    def errors_at(self, path: str) -> List[FieldError]:
        return [e for e in self.errors if e.path == path]


class KindedError(GovernanceError):
    """A single violation raised outside accumulated validation."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        path: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.kind = ErrorKind(kind)
        self.path = path
        merged = {"kind": self.kind.value, "path": path}
        merged.update(details or {})
        super().__init__(message, details=merged)

    @property
    def field_error(self) -> FieldError:
        return FieldError(kind=self.kind, path=self.path, message=self.message)


class VotingRightsError(KindedError):
    """Raised when effective voting rights cannot be resolved."""

    error_code = "VOTING_RIGHTS_INVALID"


class DiffError(KindedError):
    """Raised when a proposed application cannot be applied to the current state."""

    error_code = "CHANGE_REJECTED"


class NoOpChangeError(DiffError):
    """Raised when a change request does not change anything."""

    error_code = "NO_OP_CHANGE"

    def __init__(self, message: str = "Proposed change is identical to the current state", **kwargs: Any):
        super().__init__(ErrorKind.NO_OP_CHANGE, message, **kwargs)


class InsufficientHoldingError(DiffError):
    """Raised when a transferor holds less than the requested transfer."""

    error_code = "INSUFFICIENT_HOLDING"

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(ErrorKind.INSUFFICIENT_HOLDING, message, **kwargs)


class DivisionLevelMismatchError(DiffError):
    """Raised when a division id does not resolve to the declared level."""

    error_code = "DIVISION_LEVEL_MISMATCH"

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(ErrorKind.DIVISION_LEVEL_MISMATCH, message, **kwargs)
