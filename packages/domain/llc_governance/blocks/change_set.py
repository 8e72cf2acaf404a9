"""Change set block.

Output DataFrames:
- change_table: one row per atomic change, in change-set order
- consent_table: one row per required consent
"""

from typing import Any, List

import pandas as pd

from .base import Block, BlockContext
from ..schemas.changes import ChangeSet

CHANGE_COLUMNS = ["position", "op", "subject", "old_value", "new_value"]
CONSENT_COLUMNS = ["party_key", "party_kind", "role"]


def _display(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class ChangeSetBlock(Block):
    """Tabulates a ChangeSet for reviewers.

    Inputs: change_set (ChangeSet)
    Outputs: change_table, consent_table
    """

    def __init__(self, change_set_key: str = "change_set"):
        self.change_set_key = change_set_key

    def inputs(self) -> List[str]:
        return [self.change_set_key]

    def outputs(self) -> List[str]:
        return ["change_table", "consent_table"]

    def execute(self, context: BlockContext) -> None:
        change_set: ChangeSet = context.get(self.change_set_key)
        rows = [self._row(position, change) for position, change in enumerate(change_set.changes, start=1)]
        context.set("change_table", pd.DataFrame(rows, columns=CHANGE_COLUMNS))

        consents = [
            {"party_key": c.party.key, "party_kind": c.party.kind, "role": c.role}
            for c in change_set.required_consents
        ]
        context.set("consent_table", pd.DataFrame(consents, columns=CONSENT_COLUMNS))

    def _row(self, position: int, change: Any) -> dict:
        row = {"position": position, "op": change.op, "subject": None, "old_value": None, "new_value": None}
        if change.op == "update_field":
            row.update(subject=change.field, old_value=change.old_value, new_value=change.new_value)
        elif change.op in ("add_officer", "remove_officer"):
            row.update(subject=f"{change.role}:{change.officer_id}")
        elif change.op == "add_shareholder":
            row.update(subject=change.party.key, new_value=f"{change.capital_ratio}% / {change.voting_ratio}%")
        elif change.op == "remove_shareholder":
            row.update(subject=change.party.key, old_value=f"{change.capital_ratio}% / {change.voting_ratio}%")
        else:
            row.update(
                subject=change.party.key,
                old_value=f"{change.old_capital_ratio}% / {change.old_voting_ratio}%",
                new_value=f"{change.new_capital_ratio}% / {change.new_voting_ratio}%",
            )
        row["old_value"] = _display(row["old_value"])
        row["new_value"] = _display(row["new_value"])
        return row
