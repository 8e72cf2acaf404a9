"""Tests for shareholder sets and voting-rights resolution."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from llc_governance import resolve_voting_rights
from llc_governance.constants import RATIO_EPSILON
from llc_governance.errors import ErrorKind, VotingRightsError
from llc_governance.schemas import PartyReference, Shareholder, VotingRightsMode
from llc_governance.validation import holding_of, validate_shareholders, voting_rights_violations, with_effective_voting
from llc_governance.validation.shareholders import capital_sum_violations, shareholder_entry_violations


def kinds(errors):
    return [e.kind for e in errors]


class TestShareholderModel:

    def test_capital_ratio_range_left_to_set_check(self):
        shareholder = Shareholder.model_validate({"party": {"kind": "PERSON", "personId": "u1"}, "capitalRatio": "100.5"})
        assert shareholder.capital_ratio == Decimal("100.5")
        errors = validate_shareholders([shareholder])
        assert [(e.kind, e.path) for e in errors] == [
            (ErrorKind.RATIO_OUT_OF_RANGE, "shareholders[0].capitalRatio"),
            (ErrorKind.SUM_MISMATCH, "shareholders"),
        ]

    def test_voting_ratio_above_100_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Shareholder.model_validate(
                {"party": {"kind": "PERSON", "personId": "u1"}, "capitalRatio": "100", "votingRatio": "100.5"}
            )
        assert exc_info.value.errors()[0]["type"] == "ratio_out_of_range"

    def test_legacy_flat_shape(self):
        shareholder = Shareholder.model_validate({"kind": "USER", "userId": "u1", "ratio": 60, "votingRatio": 55})
        assert shareholder.party == PartyReference.person("u1")
        assert shareholder.capital_ratio == Decimal("60")
        assert shareholder.voting_ratio == Decimal("55")


class TestValidateShareholders:
    """Ratios in (0,100], sum 100 within epsilon, distinct parties."""

    def test_valid_set(self, make_holder):
        assert validate_shareholders([make_holder("u1", 60), make_holder("u2", 40)]) == []

    def test_single_shareholder_at_100(self, make_holder):
        assert validate_shareholders([make_holder("u1", 100)]) == []

    def test_sum_mismatch(self, make_holder):
        errors = validate_shareholders([make_holder("u1", 60), make_holder("u2", 30)])
        assert kinds(errors) == [ErrorKind.SUM_MISMATCH]
        assert errors[0].path == "shareholders"

    def test_empty_set_sums_to_zero(self):
        assert kinds(validate_shareholders([])) == [ErrorKind.SUM_MISMATCH]

    def test_epsilon_constant(self):
        assert RATIO_EPSILON == Decimal("0.000001")

    def test_sum_within_epsilon(self, make_holder):
        assert validate_shareholders([make_holder("u1", "50"), make_holder("u2", "49.9999995")]) == []
        assert validate_shareholders([make_holder("u1", "50"), make_holder("u2", "50.000001")]) == []

    def test_sum_just_outside_epsilon(self, make_holder):
        errors = validate_shareholders([make_holder("u1", "50"), make_holder("u2", "49.999998")])
        assert kinds(errors) == [ErrorKind.SUM_MISMATCH]

    def test_thirds_do_not_drift(self, make_holder):
        shares = [make_holder("u1", "33.333333"), make_holder("u2", "33.333333"), make_holder("u3", "33.333334")]
        assert validate_shareholders(shares) == []

    def test_zero_ratio_out_of_range(self, make_holder):
        errors = validate_shareholders([make_holder("u1", 0), make_holder("u2", 100)])
        assert kinds(errors) == [ErrorKind.RATIO_OUT_OF_RANGE]
        assert errors[0].path == "shareholders[0].capitalRatio"

    def test_duplicate_party_reported_on_repeat(self, make_holder):
        errors = validate_shareholders([make_holder("u1", 60), make_holder("u1", 40)])
        assert kinds(errors) == [ErrorKind.DUPLICATE_PARTY]
        assert errors[0].path == "shareholders[1].party"

    def test_same_id_different_kind_is_distinct(self):
        shares = [
            Shareholder(party=PartyReference.person("x1"), capital_ratio=Decimal("50")),
            Shareholder(party=PartyReference.organization("x1"), capital_ratio=Decimal("50")),
        ]
        assert validate_shareholders(shares) == []

    def test_all_violations_reported(self, make_holder):
        errors = validate_shareholders([make_holder("u1", 0), make_holder("u1", 30)], path="proposed")
        assert kinds(errors) == [ErrorKind.RATIO_OUT_OF_RANGE, ErrorKind.DUPLICATE_PARTY, ErrorKind.SUM_MISMATCH]
        assert errors[-1].path == "proposed"

    def test_unparsed_entry_keeps_its_slot(self, make_holder):
        errors = shareholder_entry_violations([make_holder("u1", 60), None, make_holder("u1", 40)])
        assert [(e.kind, e.path) for e in errors] == [(ErrorKind.DUPLICATE_PARTY, "shareholders[2].party")]

    def test_capital_sum(self):
        assert capital_sum_violations([Decimal("60"), Decimal("40")]) == []
        errors = capital_sum_violations([Decimal("60"), Decimal("30")], path="proposed")
        assert [(e.kind, e.path) for e in errors] == [(ErrorKind.SUM_MISMATCH, "proposed")]
        assert errors[0].context["total"] == "90"

    def test_voting_total_skipped_with_unparsed_entry(self, make_holder):
        entries = [make_holder("u1", 60, voting=10), None]
        assert voting_rights_violations(entries, "CUSTOM") == []
        entries = [make_holder("u1", 60), None]
        assert kinds(voting_rights_violations(entries, "CUSTOM")) == [ErrorKind.MISSING_VOTING_RATIO]


class TestResolveVotingRights:

    def test_by_capital_ratio(self, make_holder):
        """Voting follows capital."""
        voting = resolve_voting_rights([make_holder("u1", 60), make_holder("u2", 40)], "BY_CAPITAL_RATIO")
        assert voting == {PartyReference.person("u1"): Decimal("60"), PartyReference.person("u2"): Decimal("40")}

    def test_by_capital_ratio_ignores_supplied_voting(self, make_holder):
        voting = resolve_voting_rights(
            [make_holder("u1", 60, voting=10), make_holder("u2", 40, voting=10)],
            VotingRightsMode.BY_CAPITAL_RATIO,
        )
        assert list(voting.values()) == [Decimal("60"), Decimal("40")]

    def test_custom_without_voting_ratio(self, make_holder):
        """CUSTOM mode needs every voting ratio."""
        with pytest.raises(VotingRightsError) as exc_info:
            resolve_voting_rights([make_holder("u1", 60), make_holder("u2", 40)], VotingRightsMode.CUSTOM)
        assert exc_info.value.kind == ErrorKind.MISSING_VOTING_RATIO
        assert exc_info.value.path == "shareholders[0].votingRatio"
        assert len(exc_info.value.details["errors"]) == 2

    def test_custom_voting_sum_mismatch(self, make_holder):
        with pytest.raises(VotingRightsError, match="voting ratios must sum to 100") as exc_info:
            resolve_voting_rights([make_holder("u1", 60, 50), make_holder("u2", 40, 40)], "CUSTOM")
        assert exc_info.value.kind == ErrorKind.VOTING_SUM_MISMATCH

    def test_custom_voting(self, make_holder):
        voting = resolve_voting_rights([make_holder("u1", 60, 30), make_holder("u2", 40, 70)], "CUSTOM")
        assert voting[PartyReference.person("u2")] == Decimal("70")

    def test_with_effective_voting(self, make_holder):
        shares = with_effective_voting([make_holder("u1", 60, 1), make_holder("u2", 40)], "BY_CAPITAL_RATIO")
        assert [s.voting_ratio for s in shares] == [Decimal("60"), Decimal("40")]

    def test_holding_of(self, make_holder):
        shares = [make_holder("u1", 60, 30), make_holder("u2", 40, 70)]
        holding = holding_of(shares, "CUSTOM", PartyReference.person("u2"))
        assert (holding.capital_ratio, holding.voting_ratio) == (Decimal("40"), Decimal("70"))
        assert holding_of(shares, "CUSTOM", PartyReference.person("u9")) is None
