"""Tests for the review blocks.

Tests cover:
- BlockContext get/set/has operations
- Topological sort and dependency resolution
- BlockExecutor input and output checks
- ShareholderRegisterBlock, RosterBlock, ChangeSetBlock output frames
"""

from decimal import Decimal

import pytest

from llc_governance import diff_against_current_state, validate_application
from llc_governance.blocks import (
    Block,
    BlockContext,
    BlockExecutor,
    ChangeSetBlock,
    CircularDependencyError,
    RosterBlock,
    ShareholderRegisterBlock,
    topological_sort,
)
from llc_governance.errors import VotingRightsError
from llc_governance.schemas import PartyReference, Shareholder


# =============================================================================
# BlockContext Tests
# =============================================================================

def test_block_context_initial_values():
    context = BlockContext({"roster": None})
    assert context.has("roster")
    context.set("key1", "value1")
    assert set(context.keys()) == {"roster", "key1"}


def test_block_context_get_missing_key():
    with pytest.raises(KeyError, match="Key 'missing' not found"):
        BlockContext().get("missing")


# =============================================================================
# Dependency Resolution Tests
# =============================================================================

class SimpleBlock(Block):
    """Copies its inputs into each of its outputs."""

    def __init__(self, name, inputs, outputs, writes=True):
        self.name = name
        self._inputs = inputs
        self._outputs = outputs
        self._writes = writes

    def inputs(self):
        return self._inputs

    def outputs(self):
        return self._outputs

    def execute(self, context):
        if self._writes:
            for key in self._outputs:
                context.set(key, self.name)


def test_topological_sort_orders_producers_first():
    c = SimpleBlock("C", ["b"], ["c"])
    b = SimpleBlock("B", ["a"], ["b"])
    a = SimpleBlock("A", [], ["a"])
    assert [block.name for block in topological_sort([c, b, a])] == ["A", "B", "C"]


def test_topological_sort_keeps_given_order_for_ties():
    blocks = [SimpleBlock("X", ["seed"], ["x"]), SimpleBlock("Y", ["seed"], ["y"])]
    assert [block.name for block in topological_sort(blocks)] == ["X", "Y"]


def test_topological_sort_circular_dependency():
    blocks = [SimpleBlock("A", ["b"], ["a"]), SimpleBlock("B", ["a"], ["b"])]
    with pytest.raises(CircularDependencyError, match="Circular dependency"):
        topological_sort(blocks)


def test_topological_sort_duplicate_output():
    blocks = [SimpleBlock("A", [], ["x"]), SimpleBlock("B", [], ["x"])]
    with pytest.raises(ValueError, match="Multiple blocks produce 'x'"):
        topological_sort(blocks)


def test_executor_missing_input():
    executor = BlockExecutor([SimpleBlock("A", ["seed"], ["a"])])
    with pytest.raises(KeyError, match="requires inputs"):
        executor.execute(BlockContext())


def test_executor_unwritten_output():
    executor = BlockExecutor([SimpleBlock("A", [], ["a"], writes=False)])
    with pytest.raises(ValueError, match="didn't write"):
        executor.execute(BlockContext())


# =============================================================================
# Governance Blocks
# =============================================================================

def test_shareholder_register(company_state):
    context = BlockExecutor([ShareholderRegisterBlock()]).execute(
        BlockContext({"shareholders": company_state.shareholders, "voting_rights_mode": "BY_CAPITAL_RATIO"})
    )

    register = context.get("shareholder_register")
    assert list(register["party_key"]) == ["PERSON:u1", "PERSON:u2"]
    assert list(register["capital_ratio"]) == [60.0, 40.0]
    assert not register["voting_diverges"].any()

    summary = context.get("register_summary").iloc[0]
    assert summary["shareholders_count"] == 2
    assert summary["person_count"] == 2
    assert summary["capital_total"] == pytest.approx(100.0)
    assert bool(summary["capital_balanced"])


def test_shareholder_register_custom_voting():
    shareholders = [
        Shareholder(party=PartyReference.person("u1"), capital_ratio=Decimal("30"), voting_ratio=Decimal("60")),
        Shareholder(
            party=PartyReference.organization("c9"), capital_ratio=Decimal("70"), voting_ratio=Decimal("40")
        ),
    ]
    context = BlockContext({"shareholders": shareholders, "voting_rights_mode": "CUSTOM"})
    ShareholderRegisterBlock().execute(context)

    register = context.get("shareholder_register")
    assert list(register["party_id"]) == ["c9", "u1"]
    assert list(register["voting_ratio"]) == [40.0, 60.0]
    assert register["voting_diverges"].all()
    summary = context.get("register_summary").iloc[0]
    assert summary["organization_count"] == 1
    assert summary["voting_rights_mode"] == "CUSTOM"


def test_shareholder_register_unresolved_voting():
    shareholders = [Shareholder(party=PartyReference.person("u1"), capital_ratio=Decimal("100"))]
    context = BlockContext({"shareholders": shareholders, "voting_rights_mode": "CUSTOM"})
    with pytest.raises(VotingRightsError):
        ShareholderRegisterBlock().execute(context)


def test_roster_block(company_state):
    roster = company_state.roster.model_copy(update={"chairperson_id": "d1"})
    context = BlockContext({"roster": roster})
    RosterBlock().execute(context)

    table = context.get("officer_table")
    assert list(zip(table["role"], table["officer_id"])) == [
        ("DIRECTOR", "d1"),
        ("SUPERVISOR", "s1"),
        ("LEGAL_REPRESENTATIVE", "d1"),
        ("CHAIRPERSON", "d1"),
        ("MANAGER", "m1"),
    ]


def test_change_set_block(company_state):
    application = validate_application(
        "EQUITY_TRANSFER",
        {
            "transferor": {"kind": "PERSON", "personId": "u1"},
            "transferee": {"kind": "PERSON", "personId": "u3"},
            "capitalRatio": "10",
            "votingRatio": "20",
        },
    )
    change_set = diff_against_current_state(company_state, application)
    context = BlockExecutor([ChangeSetBlock()]).execute(BlockContext({"change_set": change_set}))

    changes = context.get("change_table")
    assert list(changes["position"]) == [1, 2, 3]
    assert list(changes["op"]) == ["update_field", "update_shareholder", "add_shareholder"]
    assert changes.loc[0, "subject"] == "votingRightsMode"
    assert changes.loc[1, "old_value"] == "60% / 60%"
    assert changes.loc[1, "new_value"] == "50% / 40%"
    assert changes.loc[2, "new_value"] == "10% / 20%"

    consents = context.get("consent_table")
    assert list(consents["party_key"]) == ["PERSON:u3"]
    assert list(consents["role"]) == ["TRANSFEREE"]


def test_blocks_run_together(company_state, registration):
    change_set = diff_against_current_state(None, registration)
    executor = BlockExecutor([ChangeSetBlock(), RosterBlock(), ShareholderRegisterBlock()])
    context = executor.execute(
        BlockContext(
            {
                "shareholders": company_state.shareholders,
                "voting_rights_mode": company_state.voting_rights_mode,
                "roster": company_state.roster,
                "change_set": change_set,
            }
        )
    )
    for key in ("shareholder_register", "register_summary", "officer_table", "change_table", "consent_table"):
        assert context.has(key)
