"""Change sets: ordered atomic changes computed by the differ.

A ``ChangeSet`` is what the approval and persistence layer writes once an
application is approved. Each ``Change`` is tagged by ``op``.

Ordering within a change set:
    1. update_field (scalar and nested profile fields)
    2. shareholder changes (add/remove/update)
    3. officer changes (add/remove seats)
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import Field

from .applications import ApplicationKind, CapitalChangeType
from .base import DomainModel
from .parties import PartyReference


class OfficerRole(str, Enum):
    """Multi-seat roles whose membership changes are listed seat by seat."""

    DIRECTOR = "DIRECTOR"
    SUPERVISOR = "SUPERVISOR"


class ConsentRole(str, Enum):
    """Capacity in which a party has to consent to an application."""

    LEGAL_REPRESENTATIVE = "LEGAL_REPRESENTATIVE"
    SHAREHOLDER = "SHAREHOLDER"
    DIRECTOR = "DIRECTOR"
    CHAIRPERSON = "CHAIRPERSON"
    VICE_CHAIRPERSON = "VICE_CHAIRPERSON"
    MANAGER = "MANAGER"
    DEPUTY_MANAGER = "DEPUTY_MANAGER"
    SUPERVISOR = "SUPERVISOR"
    SUPERVISOR_CHAIRPERSON = "SUPERVISOR_CHAIRPERSON"
    FINANCIAL_OFFICER = "FINANCIAL_OFFICER"
    TRANSFEREE = "TRANSFEREE"


# =============================================================================
# Shareholder Changes
# =============================================================================

class ShareholderAdded(DomainModel):
    op: Literal["add_shareholder"] = "add_shareholder"
    party: PartyReference
    capital_ratio: Decimal
    voting_ratio: Decimal


class ShareholderRemoved(DomainModel):
    op: Literal["remove_shareholder"] = "remove_shareholder"
    party: PartyReference
    capital_ratio: Decimal = Field(description="Holding before removal")
    voting_ratio: Decimal = Field(description="Voting share before removal")


class ShareholderUpdated(DomainModel):
    op: Literal["update_shareholder"] = "update_shareholder"
    party: PartyReference
    old_capital_ratio: Decimal
    new_capital_ratio: Decimal
    old_voting_ratio: Decimal
    new_voting_ratio: Decimal


# =============================================================================
# Officer and Field Changes
# =============================================================================

class OfficerAdded(DomainModel):
    op: Literal["add_officer"] = "add_officer"
    role: OfficerRole
    officer_id: str


class OfficerRemoved(DomainModel):
    op: Literal["remove_officer"] = "remove_officer"
    role: OfficerRole
    officer_id: str


class FieldUpdated(DomainModel):
    """Replacement of a scalar or nested field, e.g. ``roster.managerId``.

    Values are JSON-ready (nested models are dumped by alias).
    """

    op: Literal["update_field"] = "update_field"
    field: str = Field(description="camelCase path of the field in the company state")
    old_value: Any = None
    new_value: Any = None


Change = Annotated[
    Union[
        FieldUpdated,
        ShareholderAdded,
        ShareholderRemoved,
        ShareholderUpdated,
        OfficerAdded,
        OfficerRemoved,
    ],
    Field(discriminator="op"),
]


class ConsentRequirement(DomainModel):
    """A party whose consent the application needs, and in what capacity."""

    party: PartyReference
    role: ConsentRole


class ChangeSet(DomainModel):
    """Approved delta between the state of record and an application."""

    kind: ApplicationKind = Field(description="Kind of the application the change set was computed for")
    changes: List[Change] = Field(default_factory=list)
    required_consents: List[ConsentRequirement] = Field(default_factory=list)
    change_type: Optional[CapitalChangeType] = Field(
        default=None, description="Resolved direction of a capital change"
    )

    def of_op(self, op: str) -> List[Any]:
        return [change for change in self.changes if change.op == op]
