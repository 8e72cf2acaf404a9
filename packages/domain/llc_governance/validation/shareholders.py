"""Shareholder set validation and voting-rights resolution.

Ratios are compared with Decimal arithmetic against ``RATIO_EPSILON``.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from ..constants import FULL_OWNERSHIP, RATIO_EPSILON
from ..errors import ErrorKind, FieldError, VotingRightsError, field_error, join_path
from ..logging_config import get_logger
from ..schemas.parties import PartyReference
from ..schemas.shareholders import Shareholder, VotingRightsMode

logger = get_logger(__name__)


def sums_to_full(values: Sequence[Decimal]) -> bool:
    """True when ``values`` add up to 100 within ``RATIO_EPSILON``."""
    return abs(sum(values, Decimal("0")) - FULL_OWNERSHIP) <= RATIO_EPSILON


def shareholder_entry_violations(
    shareholders: Sequence[Optional[Shareholder]], path: str = "shareholders"
) -> List[FieldError]:
    """Range and uniqueness of each entry.

    ``None`` marks an entry that did not parse; it keeps its position so
    paths of the other entries stay correct.
    """
    errors: List[FieldError] = []
    seen: Set[Tuple[str, str]] = set()

    for index, shareholder in enumerate(shareholders):
        if shareholder is None:
            continue
        ratio = shareholder.capital_ratio
        if ratio <= 0 or ratio > FULL_OWNERSHIP:
            errors.append(
                field_error(
                    ErrorKind.RATIO_OUT_OF_RANGE,
                    join_path(path, index, "capitalRatio"),
                    f"capital ratio must be greater than 0 and at most 100, got {ratio}",
                    value=str(ratio),
                )
            )
        identity = shareholder.party.identity
        if identity in seen:
            errors.append(
                field_error(
                    ErrorKind.DUPLICATE_PARTY,
                    join_path(path, index, "party"),
                    f"{shareholder.party.key} appears more than once",
                    party=shareholder.party.key,
                )
            )
        seen.add(identity)
    return errors


def capital_sum_violations(ratios: Sequence[Decimal], path: str = "shareholders") -> List[FieldError]:
    """SumMismatch when the capital ratios do not add up to 100."""
    total = sum(ratios, Decimal("0"))
    if sums_to_full([total]):
        return []
    return [
        field_error(
            ErrorKind.SUM_MISMATCH,
            path,
            f"capital ratios must sum to 100, got {total}",
            total=str(total),
        )
    ]


def validate_shareholders(shareholders: Sequence[Shareholder], path: str = "shareholders") -> List[FieldError]:
    """Check capital ratios, their total, and party uniqueness.

    Args:
        shareholders: Proposed shareholder set, in submission order
        path: Rendered path of the list inside the payload

    Returns:
        Violations found; an empty list means the set is valid
    """
    errors = shareholder_entry_violations(shareholders, path)
    errors += capital_sum_violations([s.capital_ratio for s in shareholders], path)
    return errors


def voting_rights_violations(
    shareholders: Sequence[Optional[Shareholder]],
    mode: Union[VotingRightsMode, str],
    path: str = "shareholders",
) -> List[FieldError]:
    """Return the voting-rights failures of a shareholder set under ``mode``.

    Entries that did not parse (``None``) are skipped, and the voting total
    is only checked when every entry parsed.
    """
    if VotingRightsMode(mode) == VotingRightsMode.BY_CAPITAL_RATIO:
        return []

    errors = [
        field_error(
            ErrorKind.MISSING_VOTING_RATIO,
            join_path(path, index, "votingRatio"),
            f"{shareholder.party.key} needs a voting ratio under CUSTOM voting rights",
            party=shareholder.party.key,
        )
        for index, shareholder in enumerate(shareholders)
        if shareholder is not None and shareholder.voting_ratio is None
    ]
    if errors or any(s is None for s in shareholders):
        return errors

    total = sum((s.voting_ratio for s in shareholders), Decimal("0"))
    if not sums_to_full([total]):
        errors.append(
            field_error(
                ErrorKind.VOTING_SUM_MISMATCH,
                path,
                f"voting ratios must sum to 100, got {total}",
                total=str(total),
            )
        )
    return errors


def resolve_voting_rights(
    shareholders: Sequence[Shareholder],
    mode: Union[VotingRightsMode, str],
) -> Dict[PartyReference, Decimal]:
    """Effective voting percentage per party.

    Under BY_CAPITAL_RATIO voting follows capital and any supplied voting
    ratio is ignored. Under CUSTOM every shareholder supplies one and the
    supplied ratios must sum to 100.

    Raises:
        VotingRightsError: MissingVotingRatio or VotingSumMismatch
    """
    violations = voting_rights_violations(shareholders, mode)
    if violations:
        first = violations[0]
        logger.debug("Voting rights unresolved: %s at %s", first.kind.value, first.path)
        raise VotingRightsError(
            first.kind,
            first.message,
            path=first.path,
            details={"errors": [v.to_dict() for v in violations]},
        )

    if VotingRightsMode(mode) == VotingRightsMode.BY_CAPITAL_RATIO:
        return {s.party: s.capital_ratio for s in shareholders}
    return {s.party: s.voting_ratio for s in shareholders}
