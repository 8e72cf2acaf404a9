"""Officer table block: one row per role held."""

from typing import List

import pandas as pd

from .base import Block, BlockContext
from ..schemas.changes import ConsentRole
from ..schemas.roster import GovernanceRoster

OFFICER_COLUMNS = ["role", "officer_id"]

_SINGLE_ROLES = (
    (ConsentRole.LEGAL_REPRESENTATIVE, "legal_representative_id"),
    (ConsentRole.CHAIRPERSON, "chairperson_id"),
    (ConsentRole.VICE_CHAIRPERSON, "vice_chairperson_id"),
    (ConsentRole.SUPERVISOR_CHAIRPERSON, "supervisor_chairperson_id"),
    (ConsentRole.MANAGER, "manager_id"),
    (ConsentRole.DEPUTY_MANAGER, "deputy_manager_id"),
    (ConsentRole.FINANCIAL_OFFICER, "financial_officer_id"),
)


class RosterBlock(Block):
    """Lists the roster as (role, officer_id) rows.

    Inputs: roster (GovernanceRoster)
    Outputs: officer_table
    """

    def __init__(self, roster_key: str = "roster"):
        self.roster_key = roster_key

    def inputs(self) -> List[str]:
        return [self.roster_key]

    def outputs(self) -> List[str]:
        return ["officer_table"]

    def execute(self, context: BlockContext) -> None:
        roster: GovernanceRoster = context.get(self.roster_key)
        rows = [{"role": ConsentRole.DIRECTOR.value, "officer_id": d} for d in roster.director_ids]
        rows += [{"role": ConsentRole.SUPERVISOR.value, "officer_id": s} for s in roster.supervisor_ids]
        for role, field_name in _SINGLE_ROLES:
            officer_id = getattr(roster, field_name)
            if officer_id:
                rows.append({"role": role.value, "officer_id": officer_id})
        context.set("officer_table", pd.DataFrame(rows, columns=OFFICER_COLUMNS))
