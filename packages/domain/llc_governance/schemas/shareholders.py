"""Shareholders and voting-rights modes."""

from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, model_validator

from .base import DomainModel, Ratio
from .parties import PartyReference


class VotingRightsMode(str, Enum):
    """How effective voting percentages are derived from the shareholder set.

    BY_CAPITAL_RATIO: voting follows capital, supplied voting ratios ignored
    CUSTOM: every shareholder supplies a voting ratio, summing to 100
    """

    BY_CAPITAL_RATIO = "BY_CAPITAL_RATIO"
    CUSTOM = "CUSTOM"


# Keys of the legacy flat shape {kind, userId|companyId, ratio, votingRatio}
_FLAT_PARTY_KEYS = (
    "kind",
    "personId",
    "person_id",
    "userId",
    "organizationId",
    "organization_id",
    "companyId",
)


class Shareholder(DomainModel):
    """One capital contribution in a shareholder set.

    Ratios are percentages (60 = 60%). ``voting_ratio`` only matters under
    ``VotingRightsMode.CUSTOM``; after normalisation it carries the
    effective voting percentage whatever the mode.
    """

    party: PartyReference = Field(description="Who holds the contribution")

    capital_ratio: Decimal = Field(
        validation_alias=AliasChoices("capitalRatio", "ratio", "capital_ratio"),
        serialization_alias="capitalRatio",
        description="Share of registered capital; its range is checked with the rest of the set",
    )

    voting_ratio: Optional[Ratio] = Field(
        default=None,
        description="Share of voting power (CUSTOM mode)",
    )

    @model_validator(mode="before")
    @classmethod
    def fold_flat_party(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "party" in data or "kind" not in data:
            return data
        party = {k: data[k] for k in _FLAT_PARTY_KEYS if k in data}
        folded = {k: v for k, v in data.items() if k not in _FLAT_PARTY_KEYS}
        folded["party"] = party
        return folded


ShareholderSet = List[Shareholder]
