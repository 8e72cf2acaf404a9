"""Parties whose consent an application needs before it can be approved.

Officers are natural persons and are listed as person references.
Organization shareholders are listed by party; finding the person who
signs for them is left to the caller.
"""

from typing import List, Optional, Sequence, Tuple

from .schemas.applications import ApplicationKind, NormalizedApplication
from .schemas.changes import ConsentRequirement, ConsentRole
from .schemas.company import CompanyState
from .schemas.parties import PartyReference
from .schemas.roster import GovernanceRoster
from .schemas.shareholders import Shareholder

_SINGLE_ROLES: Tuple[Tuple[str, ConsentRole], ...] = (
    ("chairperson_id", ConsentRole.CHAIRPERSON),
    ("vice_chairperson_id", ConsentRole.VICE_CHAIRPERSON),
    ("manager_id", ConsentRole.MANAGER),
    ("deputy_manager_id", ConsentRole.DEPUTY_MANAGER),
    ("supervisor_chairperson_id", ConsentRole.SUPERVISOR_CHAIRPERSON),
    ("financial_officer_id", ConsentRole.FINANCIAL_OFFICER),
)

_MANAGEMENT_ROLES = {
    "manager_id": ConsentRole.MANAGER,
    "deputy_manager_id": ConsentRole.DEPUTY_MANAGER,
    "financial_officer_id": ConsentRole.FINANCIAL_OFFICER,
}


class _ConsentList:
    """Requirements in first-seen order, unique by (party, role)."""

    def __init__(self):
        self.items: List[ConsentRequirement] = []
        self._seen = set()

    def add(self, party: PartyReference, role: ConsentRole) -> None:
        key = (party.identity, role)
        if key not in self._seen:
            self._seen.add(key)
            self.items.append(ConsentRequirement(party=party, role=role))

    def add_person(self, person_id: Optional[str], role: ConsentRole) -> None:
        if person_id:
            self.add(PartyReference.person(person_id), role)

    def add_shareholders(self, shareholders: Sequence[Shareholder]) -> None:
        for shareholder in shareholders:
            self.add(shareholder.party, ConsentRole.SHAREHOLDER)

    def add_roster(self, roster: GovernanceRoster) -> None:
        self.add_person(roster.legal_representative_id, ConsentRole.LEGAL_REPRESENTATIVE)
        for director_id in roster.director_ids:
            self.add_person(director_id, ConsentRole.DIRECTOR)
        for supervisor_id in roster.supervisor_ids:
            self.add_person(supervisor_id, ConsentRole.SUPERVISOR)
        for field_name, role in _SINGLE_ROLES:
            self.add_person(getattr(roster, field_name), role)


def required_consents(
    current_state: Optional[CompanyState],
    application: NormalizedApplication,
) -> List[ConsentRequirement]:
    """Consents needed for ``application`` given the company's current state.

    Args:
        current_state: State of record; None for a registration
        application: Validated application

    Returns:
        Requirements, deduplicated by party and role
    """
    consents = _ConsentList()
    payload = application.payload
    current_shareholders = current_state.shareholders if current_state else []
    kind = ApplicationKind(application.kind)

    if kind == ApplicationKind.REGISTRATION:
        consents.add_person(payload.roster.legal_representative_id, ConsentRole.LEGAL_REPRESENTATIVE)
        consents.add_shareholders(payload.shareholders)
        consents.add_roster(payload.roster)

    elif kind == ApplicationKind.CAPITAL_CHANGE:
        consents.add_shareholders(current_shareholders)
        consents.add_shareholders(payload.shareholders)

    elif kind == ApplicationKind.OFFICER_CHANGE:
        roster = current_state.roster if current_state else GovernanceRoster()
        consents.add_shareholders(current_shareholders)
        directors = roster.director_ids if payload.director_ids is None else payload.director_ids
        supervisors = roster.supervisor_ids if payload.supervisor_ids is None else payload.supervisor_ids
        for director_id in directors:
            consents.add_person(director_id, ConsentRole.DIRECTOR)
        for supervisor_id in supervisors:
            consents.add_person(supervisor_id, ConsentRole.SUPERVISOR)

    elif kind == ApplicationKind.MANAGEMENT_CHANGE:
        roster = current_state.roster if current_state else GovernanceRoster()
        for director_id in roster.director_ids:
            consents.add_person(director_id, ConsentRole.DIRECTOR)
        for field_name in payload.changed_roles:
            consents.add_person(getattr(payload, field_name), _MANAGEMENT_ROLES[field_name])

    elif kind == ApplicationKind.EQUITY_TRANSFER:
        consents.add(payload.transferee, ConsentRole.TRANSFEREE)

    else:
        consents.add_shareholders(current_shareholders)

    return consents.items
