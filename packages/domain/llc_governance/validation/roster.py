"""Governance roster rules and officer deltas."""

from typing import List, Optional, Sequence

from ..errors import ErrorKind, FieldError, NoOpChangeError, field_error, join_path
from ..schemas.roster import GovernanceRoster, OfficerDelta, RosterPolicy


def duplicate_seat_violations(ids: Sequence[str], path: str, label: str) -> List[FieldError]:
    seen = set()
    errors = []
    for index, officer_id in enumerate(ids):
        if officer_id in seen:
            errors.append(
                field_error(
                    ErrorKind.DUPLICATE_PARTY,
                    join_path(path, index),
                    f"{officer_id} holds more than one {label} seat",
                    officer_id=officer_id,
                )
            )
        seen.add(officer_id)
    return errors


def _not_in_set(
    officer_id: Optional[str], members: Sequence[str], path: str, role: str, seat: str
) -> List[FieldError]:
    if officer_id is None or officer_id in members:
        return []
    return [
        field_error(
            ErrorKind.ROLE_NOT_IN_SET,
            path,
            f"{role} {officer_id} must hold a {seat} seat",
            officer_id=officer_id,
        )
    ]


def segregation_violations(
    director_ids: Sequence[str],
    supervisor_ids: Sequence[str],
    path: str = "supervisorIds",
) -> List[FieldError]:
    """One ConflictingRole per supervisor who also holds a board seat."""
    directors = set(director_ids)
    errors = []
    reported = set()
    for index, officer_id in enumerate(supervisor_ids):
        if officer_id in directors and officer_id not in reported:
            reported.add(officer_id)
            errors.append(
                field_error(
                    ErrorKind.CONFLICTING_ROLE,
                    join_path(path, index),
                    f"{officer_id} cannot be both director and supervisor",
                    officer_id=officer_id,
                )
            )
    return errors


def validate_roster(
    roster: GovernanceRoster,
    policy: Optional[RosterPolicy] = None,
    path: str = "roster",
) -> List[FieldError]:
    """Check role membership and segregation of duties.

    Officers need not hold equity, so the shareholder set plays no part
    here and is not taken.

    Args:
        roster: Roster to check
        policy: Opt-in rules; defaults to ``RosterPolicy.from_settings()``
        path: Rendered path of the roster inside the payload

    Returns:
        Violations found; an empty list means the roster is valid
    """
    policy = policy or RosterPolicy.from_settings()
    errors: List[FieldError] = []
    directors = roster.director_ids
    supervisors = roster.supervisor_ids

    if not directors:
        errors.append(
            field_error(
                ErrorKind.MISSING_REQUIRED_FIELD,
                join_path(path, "directorIds"),
                "at least one director is required",
            )
        )
    errors += duplicate_seat_violations(directors, join_path(path, "directorIds"), "director")
    errors += _not_in_set(
        roster.chairperson_id, directors, join_path(path, "chairpersonId"), "chairperson", "director"
    )
    errors += _not_in_set(
        roster.vice_chairperson_id,
        directors,
        join_path(path, "viceChairpersonId"),
        "vice chairperson",
        "director",
    )

    errors += duplicate_seat_violations(supervisors, join_path(path, "supervisorIds"), "supervisor")
    errors += segregation_violations(directors, supervisors, join_path(path, "supervisorIds"))
    errors += _not_in_set(
        roster.supervisor_chairperson_id,
        supervisors,
        join_path(path, "supervisorChairpersonId"),
        "supervisor chairperson",
        "supervisor",
    )

    if roster.legal_representative_id is None:
        errors.append(
            field_error(
                ErrorKind.MISSING_REQUIRED_FIELD,
                join_path(path, "legalRepresentativeId"),
                "a legal representative is required",
            )
        )

    errors += _policy_violations(roster, policy, path)
    return errors


def _policy_violations(roster: GovernanceRoster, policy: RosterPolicy, path: str) -> List[FieldError]:
    errors: List[FieldError] = []
    directors = roster.director_ids

    if policy.legal_representative_from_officers and roster.legal_representative_id is not None:
        eligible = list(directors) + ([roster.manager_id] if roster.manager_id else [])
        errors += _not_in_set(
            roster.legal_representative_id,
            eligible,
            join_path(path, "legalRepresentativeId"),
            "legal representative",
            "director or manager",
        )

    if policy.enforce_board_size and len(set(directors)) == 2:
        errors.append(
            field_error(
                ErrorKind.INVALID_FIELD_VALUE,
                join_path(path, "directorIds"),
                "a board has either a single director or at least three",
                count=2,
            )
        )

    if policy.require_board_chairperson and len(set(directors)) > 1 and roster.chairperson_id is None:
        errors.append(
            field_error(
                ErrorKind.MISSING_REQUIRED_FIELD,
                join_path(path, "chairpersonId"),
                "a board with several directors needs a chairperson",
            )
        )

    if (
        policy.distinct_management
        and roster.manager_id is not None
        and roster.manager_id == roster.deputy_manager_id
    ):
        errors.append(
            field_error(
                ErrorKind.CONFLICTING_ROLE,
                join_path(path, "deputyManagerId"),
                f"{roster.manager_id} cannot be both manager and deputy manager",
                officer_id=roster.manager_id,
            )
        )

    if policy.strict_supervisor_segregation:
        management = {roster.manager_id, roster.deputy_manager_id, roster.financial_officer_id} - {None}
        for index, officer_id in enumerate(roster.supervisor_ids):
            if officer_id in management:
                errors.append(
                    field_error(
                        ErrorKind.CONFLICTING_ROLE,
                        join_path(path, "supervisorIds", index),
                        f"supervisor {officer_id} cannot also hold a management role",
                        officer_id=officer_id,
                    )
                )
    return errors


def diff_officers(
    old: GovernanceRoster,
    new: GovernanceRoster,
    explicit_change: bool = True,
) -> OfficerDelta:
    """Seats gained and lost between two rosters.

    Raises:
        NoOpChangeError: if nothing changed and ``explicit_change`` is set
    """
    delta = OfficerDelta(
        added_directors=[d for d in new.director_ids if d not in old.director_ids],
        removed_directors=[d for d in old.director_ids if d not in new.director_ids],
        added_supervisors=[s for s in new.supervisor_ids if s not in old.supervisor_ids],
        removed_supervisors=[s for s in old.supervisor_ids if s not in new.supervisor_ids],
    )
    if delta.is_empty and explicit_change:
        raise NoOpChangeError("Director and supervisor seats are unchanged")
    return delta
