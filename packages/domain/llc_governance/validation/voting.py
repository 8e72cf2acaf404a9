"""Voting rights over proposed and live shareholder sets.

Registration applies these to the initial set; capital changes and equity
transfers apply them to sets that are not yet the state of record.
"""

from decimal import Decimal
from typing import List, Optional, Sequence, Union

from ..errors import ErrorKind, VotingRightsError
from ..schemas.base import DomainModel
from ..schemas.parties import PartyReference
from ..schemas.shareholders import Shareholder, VotingRightsMode
from .shareholders import resolve_voting_rights


class Holding(DomainModel):
    """A party's capital and effective voting share."""

    capital_ratio: Decimal
    voting_ratio: Decimal


def with_effective_voting(
    shareholders: Sequence[Shareholder],
    mode: Union[VotingRightsMode, str],
) -> List[Shareholder]:
    """Copy ``shareholders`` with ``voting_ratio`` set to the effective value.

    Raises:
        VotingRightsError: when the set's voting rights cannot be resolved
    """
    effective = resolve_voting_rights(shareholders, mode)
    return [s.model_copy(update={"voting_ratio": effective[s.party]}) for s in shareholders]


def effective_voting_ratio(shareholder: Shareholder, mode: Union[VotingRightsMode, str]) -> Decimal:
    """Voting share of a single shareholder, without checking the whole set."""
    if VotingRightsMode(mode) == VotingRightsMode.BY_CAPITAL_RATIO:
        return shareholder.capital_ratio
    if shareholder.voting_ratio is None:
        raise VotingRightsError(
            ErrorKind.MISSING_VOTING_RATIO,
            f"{shareholder.party.key} has no voting ratio under CUSTOM voting rights",
        )
    return shareholder.voting_ratio


def holding_of(
    shareholders: Sequence[Shareholder],
    mode: Union[VotingRightsMode, str],
    party: PartyReference,
) -> Optional[Holding]:
    """The party's holding in ``shareholders``, or None when it holds nothing."""
    for shareholder in shareholders:
        if shareholder.party.identity == party.identity:
            return Holding(
                capital_ratio=shareholder.capital_ratio,
                voting_ratio=effective_voting_ratio(shareholder, mode),
            )
    return None
