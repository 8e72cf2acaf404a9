"""LLC Governance Engine - validation and change computation for company applications.

This package decides whether a registration or amendment application is
well-formed and what it would change:
- Party references, shareholder sets and voting rights
- Governance roster rules
- Per-kind application validation with accumulated violations
- Change sets against the company's state of record

The engine is:
- Pure (no I/O, no shared mutable state)
- Framework-agnostic (pydantic models in, pydantic models out)
"""

from .schemas import *  # noqa: F403, F401
from .errors import (
    ErrorKind,
    FieldError,
    GovernanceError,
    ApplicationValidationError,
    VotingRightsError,
    DiffError,
    NoOpChangeError,
    InsufficientHoldingError,
    DivisionLevelMismatchError,
)
from .validation import validate_application, resolve_voting_rights
from .differ import diff_against_current_state
from .consents import required_consents

__version__ = "0.1.0"
