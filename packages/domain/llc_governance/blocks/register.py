"""Shareholder register block.

Output DataFrames:
- shareholder_register: one row per shareholder with effective voting
- register_summary: single-row totals for the set
"""

from typing import List

import pandas as pd

from .base import Block, BlockContext
from ..schemas.parties import PartyKind
from ..schemas.shareholders import VotingRightsMode
from ..validation.shareholders import resolve_voting_rights, sums_to_full

REGISTER_COLUMNS = [
    "party_key",
    "party_kind",
    "party_id",
    "capital_ratio",
    "voting_ratio",
    "voting_diverges",
]


class ShareholderRegisterBlock(Block):
    """Tabulates a shareholder set with its effective voting percentages.

    Inputs (from context):
        - shareholders: list of Shareholder
        - voting_rights_mode: VotingRightsMode (or its name)

    Outputs (to context):
        - shareholder_register: DataFrame with columns:
            * party_key: e.g. PERSON:u1
            * party_kind: PERSON or ORGANIZATION
            * party_id: person or organization identifier
            * capital_ratio: share of registered capital (percent)
            * voting_ratio: effective share of votes (percent)
            * voting_diverges: True when votes differ from capital

        - register_summary: DataFrame with single row:
            * shareholders_count, person_count, organization_count
            * capital_total, voting_total
            * voting_rights_mode
            * capital_balanced: capital sums to 100 within tolerance
    """

    def __init__(self, shareholders_key: str = "shareholders", mode_key: str = "voting_rights_mode"):
        self.shareholders_key = shareholders_key
        self.mode_key = mode_key

    def inputs(self) -> List[str]:
        return [self.shareholders_key, self.mode_key]

    def outputs(self) -> List[str]:
        return ["shareholder_register", "register_summary"]

    def execute(self, context: BlockContext) -> None:
        shareholders = context.get(self.shareholders_key)
        mode = VotingRightsMode(context.get(self.mode_key))
        voting = resolve_voting_rights(shareholders, mode)

        rows = [
            {
                "party_key": s.party.key,
                "party_kind": s.party.kind,
                "party_id": s.party.party_id,
                "capital_ratio": float(s.capital_ratio),
                "voting_ratio": float(voting[s.party]),
                "voting_diverges": s.capital_ratio != voting[s.party],
            }
            for s in shareholders
        ]
        register = pd.DataFrame(rows, columns=REGISTER_COLUMNS)
        if not register.empty:
            register = register.sort_values("capital_ratio", ascending=False, kind="stable").reset_index(
                drop=True
            )
        context.set("shareholder_register", register)

        summary = pd.DataFrame(
            [
                {
                    "shareholders_count": len(shareholders),
                    "person_count": sum(1 for s in shareholders if s.party.kind == PartyKind.PERSON),
                    "organization_count": sum(
                        1 for s in shareholders if s.party.kind == PartyKind.ORGANIZATION
                    ),
                    "capital_total": float(register["capital_ratio"].sum()) if not register.empty else 0.0,
                    "voting_total": float(register["voting_ratio"].sum()) if not register.empty else 0.0,
                    "voting_rights_mode": mode.value,
                    "capital_balanced": sums_to_full([s.capital_ratio for s in shareholders]),
                }
            ]
        )
        context.set("register_summary", summary)
