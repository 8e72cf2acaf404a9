"""Computation blocks for governance review.

Architecture:
    Schemas (validated data) → Blocks (computation) → DataFrames (review output)

Available blocks:
- ShareholderRegisterBlock: shareholder set with effective voting, plus totals
- RosterBlock: officer roles as a table
- ChangeSetBlock: change set and required consents as tables

Usage:
    from llc_governance.blocks import BlockContext, BlockExecutor, RosterBlock

    context = BlockExecutor([RosterBlock()]).execute(BlockContext({"roster": roster}))
    officers_df = context.get("officer_table")
"""

from .base import Block, BlockContext, BlockExecutor, CircularDependencyError, topological_sort
from .register import ShareholderRegisterBlock
from .roster import RosterBlock
from .change_set import ChangeSetBlock

__all__ = [
    "Block",
    "BlockContext",
    "BlockExecutor",
    "CircularDependencyError",
    "topological_sort",
    "ShareholderRegisterBlock",
    "RosterBlock",
    "ChangeSetBlock",
]
