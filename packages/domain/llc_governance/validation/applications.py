"""Application validator: one rule set per application kind.

Every call accumulates all violations before failing. The payload is first
parsed as a whole; when that fails, the sections that do parse on their
own (shareholders, roster, division path, ...) still go through the
cross-field rules, so the caller gets the complete correction list.

Usage:
    from llc_governance import validate_application

    application = validate_application("REGISTRATION", payload)
    application.payload.shareholders   # carry effective voting ratios
"""

from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import (
    ApplicationValidationError,
    ErrorKind,
    FieldError,
    field_error,
    join_path,
    translate_validation_error,
)
from ..logging_config import get_logger
from ..schemas.applications import (
    ApplicationKind,
    BusinessScopeChangePayload,
    CapitalChangePayload,
    CapitalChangeType,
    DeregistrationPayload,
    DivisionId,
    DivisionLevel,
    DomicileChangePayload,
    EquityTransferPayload,
    ManagementChangePayload,
    NormalizedApplication,
    OfficerChangePayload,
    RegistrationPayload,
    RenamePayload,
)
from ..schemas.base import MoneyAmount, OfficerId
from ..schemas.divisions import DivisionPath
from ..schemas.parties import PartyReference
from ..schemas.references import CatalogReference, RegistrationAuthority
from ..schemas.roster import GovernanceRoster, RosterPolicy
from ..schemas.shareholders import Shareholder, VotingRightsMode
from .divisions import division_path_violations
from .exclusive import ExclusiveChoice, require_exclusive, resolve_exclusive_or_fallback
from .roster import duplicate_seat_violations, segregation_violations, validate_roster
from .shareholders import capital_sum_violations, shareholder_entry_violations, voting_rights_violations
from .voting import with_effective_voting

logger = get_logger(__name__)

# Section parsers used when the payload as a whole does not parse
_SECTIONS: Dict[str, TypeAdapter] = {
    "voting_rights_mode": TypeAdapter(VotingRightsMode),
    "roster": TypeAdapter(GovernanceRoster),
    "domicile_division_id": TypeAdapter(DivisionId),
    "domicile_division_path": TypeAdapter(DivisionPath),
    "administrative_division_level": TypeAdapter(DivisionLevel),
    "change_type": TypeAdapter(CapitalChangeType),
    "new_registered_capital": TypeAdapter(MoneyAmount),
    "current_registered_capital": TypeAdapter(MoneyAmount),
    "director_ids": TypeAdapter(List[OfficerId]),
    "supervisor_ids": TypeAdapter(List[OfficerId]),
    "transferor": TypeAdapter(PartyReference),
    "transferee": TypeAdapter(PartyReference),
}

_SHAREHOLDER = TypeAdapter(Shareholder)
_CAPITAL_RATIO = TypeAdapter(Decimal)
_CAPITAL_KEYS = ("capitalRatio", "ratio", "capital_ratio")

Outcome = Tuple[Optional[BaseModel], List[FieldError]]


# =============================================================================
# Payload access helpers
# =============================================================================

def _raw(payload: Mapping[str, Any], name: str) -> Any:
    """Value of field ``name`` under its camelCase or snake_case key."""
    for key in (to_camel(name), name):
        if key in payload:
            return payload[key]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _has_key(payload: Mapping[str, Any], name: str) -> bool:
    return to_camel(name) in payload or name in payload


def _parse(model: type, payload: Mapping[str, Any]) -> Outcome:
    try:
        return model.model_validate(payload), []
    except ValidationError as exc:
        return None, translate_validation_error(exc)


def _field(model: Optional[BaseModel], payload: Mapping[str, Any], name: str) -> Any:
    """Parsed value of one field, from the model or from its own section.

    Returns None when the field is absent or does not parse on its own;
    its shape error is already in the list from the whole-payload parse.
    """
    if model is not None:
        return getattr(model, name)
    raw = _raw(payload, name)
    if raw is None:
        return None
    adapter = _SECTIONS.get(name)
    if adapter is None:
        return (raw.strip() or None) if isinstance(raw, str) else raw
    try:
        return adapter.validate_python(raw)
    except ValidationError:
        return None


def _parse_shareholder(raw: Any) -> Optional[Shareholder]:
    try:
        return _SHAREHOLDER.validate_python(raw)
    except ValidationError:
        return None


def _entry_capital(raw: Any, parsed: Optional[Shareholder]) -> Optional[Decimal]:
    """Capital ratio of one entry, read from the raw mapping when it did not parse."""
    if parsed is not None:
        return parsed.capital_ratio
    if not isinstance(raw, Mapping):
        return None
    for key in _CAPITAL_KEYS:
        if key in raw:
            try:
                return _CAPITAL_RATIO.validate_python(raw[key])
            except ValidationError:
                return None
    return None


def _shareholder_rules(
    model: Optional[BaseModel], payload: Mapping[str, Any], errors: List[FieldError]
) -> None:
    """Set-level shareholder rules, run over every entry that parses.

    An entry that fails to parse keeps its slot so the other entries are
    still reported under their own index.
    """
    mode = _field(model, payload, "voting_rights_mode") or VotingRightsMode.BY_CAPITAL_RATIO
    if model is not None:
        entries: List[Optional[Shareholder]] = list(model.shareholders)
        ratios: List[Optional[Decimal]] = [s.capital_ratio for s in entries]
    else:
        raw = _raw(payload, "shareholders")
        if not isinstance(raw, list):
            return
        entries = [_parse_shareholder(item) for item in raw]
        ratios = [_entry_capital(item, parsed) for item, parsed in zip(raw, entries)]

    errors.extend(shareholder_entry_violations(entries, "shareholders"))
    if all(ratio is not None for ratio in ratios):
        errors.extend(capital_sum_violations(ratios, "shareholders"))
    errors.extend(voting_rights_violations(entries, mode, "shareholders"))


def _authority(choice: ExclusiveChoice) -> Optional[RegistrationAuthority]:
    if choice.branch == "primary":
        return RegistrationAuthority(company_id=choice.value, source="primary")
    if choice.branch == "secondary":
        return RegistrationAuthority(name=choice.value, source="secondary")
    return None


def _catalog(choice: ExclusiveChoice) -> Optional[CatalogReference]:
    if choice.branch == "primary":
        return CatalogReference(code=choice.value, source="primary")
    if choice.branch == "secondary":
        return CatalogReference(id=choice.value, source="secondary")
    return None


# =============================================================================
# Per-kind rule sets
# =============================================================================

def _validate_registration(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
    model, errors = _parse(RegistrationPayload, payload)

    _shareholder_rules(model, payload, errors)
    roster = _field(model, payload, "roster")
    if roster is not None:
        errors.extend(validate_roster(roster, policy, "roster"))

    authority = require_exclusive(
        _field(model, payload, "registration_authority_company_id"),
        _field(model, payload, "registration_authority_name"),
        path="registrationAuthorityCompanyId",
        errors=errors,
        label="registration authority",
    )
    company_type = resolve_exclusive_or_fallback(
        _field(model, payload, "type_code"), _field(model, payload, "type_id")
    )
    industry = resolve_exclusive_or_fallback(
        _field(model, payload, "industry_code"), _field(model, payload, "industry_id")
    )

    errors.extend(
        division_path_violations(
            _field(model, payload, "domicile_division_id"),
            _field(model, payload, "domicile_division_path"),
            _field(model, payload, "administrative_division_level"),
        )
    )

    if errors:
        return None, errors
    return (
        model.model_copy(
            update={
                "shareholders": with_effective_voting(model.shareholders, model.voting_rights_mode),
                "registration_authority": _authority(authority),
                "registration_authority_name": (
                    model.registration_authority_name if authority.branch == "secondary" else None
                ),
                "company_type": _catalog(company_type),
                "type_id": model.type_id if company_type.branch == "secondary" else None,
                "industry": _catalog(industry),
                "industry_id": model.industry_id if industry.branch == "secondary" else None,
            }
        ),
        [],
    )


def infer_change_type(new_capital, current_capital) -> Optional[CapitalChangeType]:
    """INCREASE or DECREASE from the two capitals; None when they are equal."""
    if new_capital > current_capital:
        return CapitalChangeType.INCREASE
    if new_capital < current_capital:
        return CapitalChangeType.DECREASE
    return None


def change_type_violation(
    declared: Optional[str], new_capital, current_capital
) -> Tuple[Optional[CapitalChangeType], Optional[FieldError]]:
    """Resolve the change type of a capital change against the current capital.

    Returns:
        The resolved change type and the violation, if any
    """
    inferred = infer_change_type(new_capital, current_capital)
    if inferred is None and declared is None:
        return None, field_error(
            ErrorKind.AMBIGUOUS_CHANGE_TYPE,
            "changeType",
            f"registered capital stays at {current_capital}; the change type cannot be inferred",
        )
    if declared is not None and CapitalChangeType(declared) != inferred:
        return None, field_error(
            ErrorKind.INCONSISTENT_CHANGE_TYPE,
            "changeType",
            f"{CapitalChangeType(declared).value} does not match a change from "
            f"{current_capital} to {new_capital}",
        )
    return inferred, None


def _validate_capital_change(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
    model, errors = _parse(CapitalChangePayload, payload)
    _shareholder_rules(model, payload, errors)

    resolved = None
    current = _field(model, payload, "current_registered_capital")
    new = _field(model, payload, "new_registered_capital")
    declared = _field(model, payload, "change_type")
    # A declared type that failed to parse is already reported.
    unparsed = declared is None and not _is_blank(_raw(payload, "change_type"))
    if current is not None and new is not None and not unparsed:
        resolved, violation = change_type_violation(declared, new, current)
        if violation is not None:
            errors.append(violation)

    if errors:
        return None, errors
    return (
        model.model_copy(
            update={
                "shareholders": with_effective_voting(model.shareholders, model.voting_rights_mode),
                "change_type": model.change_type or resolved,
            }
        ),
        [],
    )


def _validate_officer_change(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
    model, errors = _parse(OfficerChangePayload, payload)

    if _raw(payload, "director_ids") is None and _raw(payload, "supervisor_ids") is None:
        errors.append(
            field_error(
                ErrorKind.NO_OP_CHANGE,
                "",
                "neither directorIds nor supervisorIds is given; nothing would change",
            )
        )

    directors = _field(model, payload, "director_ids")
    supervisors = _field(model, payload, "supervisor_ids")
    if directors is not None:
        errors.extend(duplicate_seat_violations(directors, "directorIds", "director"))
    if supervisors is not None:
        errors.extend(duplicate_seat_violations(supervisors, "supervisorIds", "supervisor"))
    if directors is not None and supervisors is not None:
        errors.extend(segregation_violations(directors, supervisors, "supervisorIds"))

    return (None, errors) if errors else (model, [])


def _validate_management_change(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
    model, errors = _parse(ManagementChangePayload, payload)

    roles = ("manager_id", "deputy_manager_id", "financial_officer_id")
    if not any(_has_key(payload, name) for name in roles):
        errors.append(
            field_error(
                ErrorKind.NO_OP_CHANGE,
                "",
                "no management role is given; nothing would change",
            )
        )

    manager = _field(model, payload, "manager_id")
    deputy = _field(model, payload, "deputy_manager_id")
    if manager is not None and manager == deputy:
        errors.append(
            field_error(
                ErrorKind.CONFLICTING_ROLE,
                "deputyManagerId",
                f"{manager} cannot be both manager and deputy manager",
                officer_id=manager,
            )
        )

    return (None, errors) if errors else (model, [])


def _validate_equity_transfer(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
    model, errors = _parse(EquityTransferPayload, payload)

    transferor = _field(model, payload, "transferor")
    transferee = _field(model, payload, "transferee")
    if transferor is not None and transferee is not None and transferor.identity == transferee.identity:
        errors.append(
            field_error(
                ErrorKind.DUPLICATE_PARTY,
                "transferee",
                f"{transferor.key} cannot transfer equity to itself",
                party=transferor.key,
            )
        )

    return (None, errors) if errors else (model, [])


def _validate_domicile_change(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
    model, errors = _parse(DomicileChangePayload, payload)

    division_id = _field(model, payload, "domicile_division_id")
    level = _field(model, payload, "administrative_division_level")
    authority_id = _field(model, payload, "registration_authority_company_id")
    authority_name = _field(model, payload, "registration_authority_name")
    authority = resolve_exclusive_or_fallback(authority_id, authority_name)

    if division_id is not None:
        authority = require_exclusive(
            authority_id,
            authority_name,
            path="registrationAuthorityCompanyId",
            errors=errors,
            label="registration authority",
        )
        if level is None and _raw(payload, "administrative_division_level") is None:
            errors.append(
                field_error(
                    ErrorKind.MISSING_REQUIRED_FIELD,
                    "administrativeDivisionLevel",
                    "a new division needs its administrative level",
                )
            )
    elif level is not None:
        errors.append(
            field_error(
                ErrorKind.MISSING_REQUIRED_FIELD,
                "domicileDivisionId",
                "an administrative level needs the division it refers to",
            )
        )

    errors.extend(
        division_path_violations(division_id, _field(model, payload, "domicile_division_path"), level)
    )

    if errors:
        return None, errors
    return (
        model.model_copy(
            update={
                "registration_authority": _authority(authority),
                "registration_authority_name": (
                    model.registration_authority_name if authority.branch == "secondary" else None
                ),
            }
        ),
        [],
    )


def _shape_only(model_cls: type) -> Callable[[Mapping[str, Any], RosterPolicy], Outcome]:
    def validate(payload: Mapping[str, Any], policy: RosterPolicy) -> Outcome:
        return _parse(model_cls, payload)

    validate.__name__ = f"_validate_{model_cls.__name__}"
    return validate


_VALIDATORS: Dict[str, Callable[[Mapping[str, Any], RosterPolicy], Outcome]] = {
    ApplicationKind.REGISTRATION.value: _validate_registration,
    ApplicationKind.CAPITAL_CHANGE.value: _validate_capital_change,
    ApplicationKind.OFFICER_CHANGE.value: _validate_officer_change,
    ApplicationKind.MANAGEMENT_CHANGE.value: _validate_management_change,
    ApplicationKind.EQUITY_TRANSFER.value: _validate_equity_transfer,
    ApplicationKind.DOMICILE_CHANGE.value: _validate_domicile_change,
    ApplicationKind.RENAME.value: _shape_only(RenamePayload),
    ApplicationKind.BUSINESS_SCOPE_CHANGE.value: _shape_only(BusinessScopeChangePayload),
    ApplicationKind.DEREGISTRATION.value: _shape_only(DeregistrationPayload),
}


# =============================================================================
# Entry point
# =============================================================================

def validate_application(
    kind: Any,
    payload: Any,
    *,
    policy: Optional[RosterPolicy] = None,
) -> NormalizedApplication:
    """Validate a submitted payload and normalise it.

    Args:
        kind: ApplicationKind (or its name)
        payload: Raw mapping (camelCase or snake_case keys) or a payload model
        policy: Roster policy; defaults to ``RosterPolicy.from_settings()``

    Returns:
        The SUBMITTED application with its normalised payload

    Raises:
        ApplicationValidationError: carrying every violation found
    """
    try:
        kind = ApplicationKind(kind)
    except ValueError:
        raise ApplicationValidationError(
            [field_error(ErrorKind.INVALID_FIELD_VALUE, "kind", f"unknown application kind {kind!r}")]
        ) from None

    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True, exclude_unset=True)
    if not isinstance(payload, Mapping):
        raise ApplicationValidationError(
            [field_error(ErrorKind.MISSING_REQUIRED_FIELD, "", "payload must be an object")]
        )

    normalized, errors = _VALIDATORS[kind.value](payload, policy or RosterPolicy.from_settings())
    if errors:
        logger.info("Rejected %s application with %d violation(s)", kind.value, len(errors))
        raise ApplicationValidationError(errors)

    logger.debug("Accepted %s application", kind.value)
    return NormalizedApplication(kind=kind, payload=normalized)
