"""Change-request differ: what an application changes in the state of record.

Every application kind is projected onto the current ``CompanyState``; the
proposed state is then compared with the current one field by field. An
application that reproduces the current state is rejected as a no-op.

Failures here depend on the external state and are terminal: the first
one found is raised as a ``DiffError``.

Usage:
    from llc_governance import diff_against_current_state

    change_set = diff_against_current_state(state, application)
    for change in change_set.changes:
        print(change.op)
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from .constants import HOLDING_EPSILON
from .consents import required_consents
from .errors import DiffError, ErrorKind, InsufficientHoldingError, NoOpChangeError
from .logging_config import get_logger
from .schemas.applications import (
    ApplicationKind,
    BusinessScopeChangePayload,
    CapitalChangePayload,
    CapitalChangeType,
    DeregistrationPayload,
    DomicileChangePayload,
    EquityTransferPayload,
    ManagementChangePayload,
    NormalizedApplication,
    OfficerChangePayload,
    RegistrationPayload,
    RenamePayload,
)
from .schemas.changes import (
    Change,
    ChangeSet,
    FieldUpdated,
    OfficerAdded,
    OfficerRemoved,
    OfficerRole,
    ShareholderAdded,
    ShareholderRemoved,
    ShareholderUpdated,
)
from .schemas.company import CompanyState, CompanyStatus, Domicile
from .schemas.divisions import DivisionDirectory
from .schemas.parties import PartyKind
from .schemas.roster import GovernanceRoster, RosterPolicy
from .schemas.shareholders import Shareholder, VotingRightsMode
from .validation.applications import change_type_violation
from .validation.divisions import check_division_level
from .validation.roster import diff_officers, validate_roster
from .validation.voting import effective_voting_ratio, holding_of, with_effective_voting

logger = get_logger(__name__)

Projection = Tuple[CompanyState, Optional[CapitalChangeType]]

# (state attribute, camelCase name), in change-set order
_STATE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("name", "name"),
    ("status", "status"),
    ("registered_capital", "registeredCapital"),
    ("voting_rights_mode", "votingRightsMode"),
    ("domicile", "domicile"),
    ("registration_authority", "registrationAuthority"),
    ("business_scope", "businessScope"),
    ("operating_term", "operatingTerm"),
    ("brand_name", "brandName"),
    ("industry_feature", "industryFeature"),
    ("company_type", "companyType"),
    ("industry", "industry"),
)

_ROSTER_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("chairperson_id", "roster.chairpersonId"),
    ("vice_chairperson_id", "roster.viceChairpersonId"),
    ("manager_id", "roster.managerId"),
    ("deputy_manager_id", "roster.deputyManagerId"),
    ("supervisor_chairperson_id", "roster.supervisorChairpersonId"),
    ("legal_representative_id", "roster.legalRepresentativeId"),
    ("financial_officer_id", "roster.financialOfficerId"),
)


# =============================================================================
# State comparison
# =============================================================================

def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    return value


def _field_changes(old: CompanyState, new: CompanyState) -> List[Change]:
    changes: List[Change] = []
    pairs = [(getattr(old, a), getattr(new, a), name) for a, name in _STATE_FIELDS]
    pairs += [(getattr(old.roster, a), getattr(new.roster, a), name) for a, name in _ROSTER_FIELDS]
    for old_value, new_value, name in pairs:
        if _plain(old_value) != _plain(new_value):
            changes.append(FieldUpdated(field=name, old_value=_plain(old_value), new_value=_plain(new_value)))
    return changes


def _shareholder_changes(old: CompanyState, new: CompanyState) -> List[Change]:
    before: Dict[Tuple[str, str], Tuple[Shareholder, Decimal]] = {
        s.party.identity: (s, effective_voting_ratio(s, old.voting_rights_mode)) for s in old.shareholders
    }
    after_ids = {s.party.identity for s in new.shareholders}
    changes: List[Change] = []

    for shareholder in new.shareholders:
        voting = effective_voting_ratio(shareholder, new.voting_rights_mode)
        previous = before.get(shareholder.party.identity)
        if previous is None:
            changes.append(
                ShareholderAdded(
                    party=shareholder.party,
                    capital_ratio=shareholder.capital_ratio,
                    voting_ratio=voting,
                )
            )
        elif previous[0].capital_ratio != shareholder.capital_ratio or previous[1] != voting:
            changes.append(
                ShareholderUpdated(
                    party=shareholder.party,
                    old_capital_ratio=previous[0].capital_ratio,
                    new_capital_ratio=shareholder.capital_ratio,
                    old_voting_ratio=previous[1],
                    new_voting_ratio=voting,
                )
            )

    for identity, (shareholder, voting) in before.items():
        if identity not in after_ids:
            changes.append(
                ShareholderRemoved(
                    party=shareholder.party,
                    capital_ratio=shareholder.capital_ratio,
                    voting_ratio=voting,
                )
            )
    return changes


def _officer_changes(old: CompanyState, new: CompanyState) -> List[Change]:
    delta = diff_officers(old.roster, new.roster, explicit_change=False)
    changes: List[Change] = []
    changes += [OfficerRemoved(role=OfficerRole.DIRECTOR, officer_id=i) for i in delta.removed_directors]
    changes += [OfficerAdded(role=OfficerRole.DIRECTOR, officer_id=i) for i in delta.added_directors]
    changes += [OfficerRemoved(role=OfficerRole.SUPERVISOR, officer_id=i) for i in delta.removed_supervisors]
    changes += [OfficerAdded(role=OfficerRole.SUPERVISOR, officer_id=i) for i in delta.added_supervisors]
    return changes


def diff_states(old: CompanyState, new: CompanyState) -> List[Change]:
    """Ordered changes turning ``old`` into ``new``: fields, shareholders, officers."""
    return _field_changes(old, new) + _shareholder_changes(old, new) + _officer_changes(old, new)


# =============================================================================
# Checks against the state
# =============================================================================

def _check_not_self_held(state: CompanyState) -> None:
    if not state.company_id:
        return
    for index, shareholder in enumerate(state.shareholders):
        party = shareholder.party
        if party.kind == PartyKind.ORGANIZATION and party.organization_id == state.company_id:
            raise DiffError(
                ErrorKind.CONFLICTING_ROLE,
                f"Company {state.company_id} cannot hold its own equity",
                path=f"shareholders[{index}].party",
            )


def _check_roster(roster: GovernanceRoster) -> None:
    violations = validate_roster(roster, RosterPolicy.from_settings())
    if violations:
        first = violations[0]
        raise DiffError(
            first.kind,
            f"Resulting roster is invalid: {first.message}",
            path=first.path,
            details={"errors": [v.to_dict() for v in violations]},
        )


def _check_division(
    divisions: Optional[DivisionDirectory], division_id: Optional[str], level: Optional[int]
) -> None:
    if divisions is not None and division_id:
        check_division_level(divisions, division_id, level)


# =============================================================================
# Projections, one per application kind
# =============================================================================

def _project_registration(
    state: CompanyState, payload: RegistrationPayload, application: NormalizedApplication, divisions
) -> Projection:
    _check_division(divisions, payload.domicile_division_id, payload.administrative_division_level)
    proposed = CompanyState.from_registration(application, company_id=state.company_id)
    return proposed, None


def _project_capital_change(
    state: CompanyState, payload: CapitalChangePayload, application: NormalizedApplication, divisions
) -> Projection:
    proposed = state.model_copy(
        update={
            "registered_capital": payload.new_registered_capital,
            "shareholders": with_effective_voting(payload.shareholders, payload.voting_rights_mode),
            "voting_rights_mode": payload.voting_rights_mode,
        }
    )
    if not diff_states(state, proposed):
        raise NoOpChangeError("Capital and shareholders are identical to the current state")

    change_type, violation = change_type_violation(
        payload.change_type, payload.new_registered_capital, state.registered_capital
    )
    if violation is not None:
        raise DiffError(violation.kind, violation.message, path=violation.path)
    return proposed, change_type


def _project_officer_change(
    state: CompanyState, payload: OfficerChangePayload, application: NormalizedApplication, divisions
) -> Projection:
    roster = state.roster
    directors = roster.director_ids if payload.director_ids is None else payload.director_ids
    supervisors = roster.supervisor_ids if payload.supervisor_ids is None else payload.supervisor_ids

    # Chair roles go with the seat they belong to.
    new_roster = roster.model_copy(
        update={
            "director_ids": list(directors),
            "supervisor_ids": list(supervisors),
            "chairperson_id": roster.chairperson_id if roster.chairperson_id in directors else None,
            "vice_chairperson_id": (
                roster.vice_chairperson_id if roster.vice_chairperson_id in directors else None
            ),
            "supervisor_chairperson_id": (
                roster.supervisor_chairperson_id if roster.supervisor_chairperson_id in supervisors else None
            ),
        }
    )
    diff_officers(roster, new_roster, explicit_change=True)
    _check_roster(new_roster)
    return state.model_copy(update={"roster": new_roster}), None


def _project_management_change(
    state: CompanyState, payload: ManagementChangePayload, application: NormalizedApplication, divisions
) -> Projection:
    update = {name: getattr(payload, name) for name in payload.changed_roles}
    new_roster = state.roster.model_copy(update=update)
    if new_roster != state.roster:
        _check_roster(new_roster)
    return state.model_copy(update={"roster": new_roster}), None


def _project_equity_transfer(
    state: CompanyState, payload: EquityTransferPayload, application: NormalizedApplication, divisions
) -> Projection:
    mode = state.voting_rights_mode
    capital, voting = payload.capital_ratio, payload.voting_ratio
    transferor, transferee = payload.transferor, payload.transferee

    holding = holding_of(state.shareholders, mode, transferor)
    if holding is None:
        raise InsufficientHoldingError(
            f"{transferor.key} holds no equity in the company",
            path="transferor",
            details={"party": transferor.key},
        )
    if holding.capital_ratio + HOLDING_EPSILON < capital or holding.voting_ratio + HOLDING_EPSILON < voting:
        raise InsufficientHoldingError(
            f"{transferor.key} holds {holding.capital_ratio}% capital and {holding.voting_ratio}% votes, "
            f"cannot transfer {capital}% and {voting}%",
            path="capitalRatio" if holding.capital_ratio + HOLDING_EPSILON < capital else "votingRatio",
            details={
                "party": transferor.key,
                "held_capital_ratio": str(holding.capital_ratio),
                "held_voting_ratio": str(holding.voting_ratio),
            },
        )

    shareholders: List[Shareholder] = []
    received = False
    for shareholder in state.shareholders:
        held_capital = shareholder.capital_ratio
        held_voting = effective_voting_ratio(shareholder, mode)
        if shareholder.party.identity == transferor.identity:
            held_capital = max(held_capital - capital, Decimal("0"))
            held_voting = max(held_voting - voting, Decimal("0"))
            # A transferor keeping votes stays listed, with zero capital if need be.
            if held_capital <= HOLDING_EPSILON and held_voting <= HOLDING_EPSILON:
                continue
        elif shareholder.party.identity == transferee.identity:
            held_capital += capital
            held_voting += voting
            received = True
        shareholders.append(
            shareholder.model_copy(update={"capital_ratio": held_capital, "voting_ratio": held_voting})
        )
    if not received:
        shareholders.append(Shareholder(party=transferee, capital_ratio=capital, voting_ratio=voting))

    new_mode = mode
    if any(s.capital_ratio != s.voting_ratio for s in shareholders):
        new_mode = VotingRightsMode.CUSTOM

    proposed = state.model_copy(update={"shareholders": shareholders, "voting_rights_mode": new_mode})
    return proposed, None


def _project_domicile_change(
    state: CompanyState, payload: DomicileChangePayload, application: NormalizedApplication, divisions
) -> Projection:
    current = state.domicile or Domicile(address="")
    if payload.domicile_division_id is not None:
        _check_division(divisions, payload.domicile_division_id, payload.administrative_division_level)
        domicile = Domicile(
            address=payload.domicile_address,
            division_id=payload.domicile_division_id,
            division_path=payload.domicile_division_path,
            administrative_division_level=payload.administrative_division_level,
        )
    else:
        domicile = current.model_copy(update={"address": payload.domicile_address})

    update: Dict[str, Any] = {"domicile": domicile}
    if payload.registration_authority is not None:
        update["registration_authority"] = payload.registration_authority
    return state.model_copy(update=update), None


def _project_rename(
    state: CompanyState, payload: RenamePayload, application: NormalizedApplication, divisions
) -> Projection:
    return state.model_copy(update={"name": payload.new_name}), None


def _project_business_scope_change(
    state: CompanyState, payload: BusinessScopeChangePayload, application: NormalizedApplication, divisions
) -> Projection:
    return state.model_copy(update={"business_scope": payload.business_scope}), None


def _project_deregistration(
    state: CompanyState, payload: DeregistrationPayload, application: NormalizedApplication, divisions
) -> Projection:
    return state.model_copy(update={"status": CompanyStatus.DEREGISTERED}), None


_PROJECTIONS: Dict[str, Callable[..., Projection]] = {
    ApplicationKind.REGISTRATION.value: _project_registration,
    ApplicationKind.CAPITAL_CHANGE.value: _project_capital_change,
    ApplicationKind.OFFICER_CHANGE.value: _project_officer_change,
    ApplicationKind.MANAGEMENT_CHANGE.value: _project_management_change,
    ApplicationKind.EQUITY_TRANSFER.value: _project_equity_transfer,
    ApplicationKind.DOMICILE_CHANGE.value: _project_domicile_change,
    ApplicationKind.RENAME.value: _project_rename,
    ApplicationKind.BUSINESS_SCOPE_CHANGE.value: _project_business_scope_change,
    ApplicationKind.DEREGISTRATION.value: _project_deregistration,
}


# =============================================================================
# Entry point
# =============================================================================

def diff_against_current_state(
    current_state: Optional[CompanyState],
    application: NormalizedApplication,
    *,
    divisions: Optional[DivisionDirectory] = None,
) -> ChangeSet:
    """Compute the change set an approved application writes to the state.

    Args:
        current_state: State of record; may be None only for a registration
        application: Output of ``validate_application``
        divisions: Optional hierarchy lookup for division-level checks

    Returns:
        ChangeSet with ordered changes and required consents

    Raises:
        NoOpChangeError: the application changes nothing
        InsufficientHoldingError: the transferor holds too little
        DivisionLevelMismatchError: division unknown or at another level
        DiffError: other conflicts with the current state
    """
    kind = ApplicationKind(application.kind)
    try:
        if current_state is None and kind != ApplicationKind.REGISTRATION:
            raise DiffError(
                ErrorKind.MISSING_REQUIRED_FIELD,
                f"A {kind.value} application needs the company's current state",
                path="currentState",
            )
        state = current_state or CompanyState()
        proposed, change_type = _PROJECTIONS[kind.value](state, application.payload, application, divisions)
        _check_not_self_held(proposed)
        changes = diff_states(state, proposed)
        if not changes:
            raise NoOpChangeError()
    except DiffError as exc:
        logger.info("Rejected %s change: %s", kind.value, exc.kind.value)
        raise

    change_set = ChangeSet(
        kind=kind,
        changes=changes,
        required_consents=required_consents(current_state, application),
        change_type=change_type,
    )
    logger.info("Computed %s change set with %d change(s)", kind.value, len(changes))
    return change_set
