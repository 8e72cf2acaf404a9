"""Tests for party references and operating terms."""

import pytest
from pydantic import TypeAdapter, ValidationError

from llc_governance.errors import ErrorKind, translate_validation_error
from llc_governance.schemas import FixedTerm, IndefiniteTerm, OperatingTerm, PartyKind, PartyReference

TERM = TypeAdapter(OperatingTerm)


def error_types(exc_info):
    return [e["type"] for e in exc_info.value.errors()]


class TestPartyReference:
    """Tag-selected identifier rule."""

    def test_person_reference(self):
        party = PartyReference.model_validate({"kind": "PERSON", "personId": "u1"})
        assert party.kind == PartyKind.PERSON
        assert party.person_id == "u1"
        assert party.organization_id is None
        assert party.key == "PERSON:u1"

    def test_legacy_user_and_company_tags(self):
        user = PartyReference.model_validate({"kind": "USER", "userId": "u1"})
        company = PartyReference.model_validate({"kind": "COMPANY", "companyId": "c9"})
        assert user == PartyReference.person("u1")
        assert company == PartyReference.organization("c9")
        assert company.identity == ("ORGANIZATION", "c9")

    def test_missing_identifier_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            PartyReference.model_validate({"kind": "PERSON"})
        assert error_types(exc_info) == ["invalid_reference_kind"]

    def test_identifier_of_other_kind_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            PartyReference.model_validate({"kind": "ORGANIZATION", "personId": "u1"})
        assert error_types(exc_info) == ["invalid_reference_kind"]

    def test_both_identifiers_fail(self):
        with pytest.raises(ValidationError) as exc_info:
            PartyReference.model_validate({"kind": "PERSON", "personId": "u1", "organizationId": "c1"})
        assert error_types(exc_info) == ["invalid_reference_kind"]

    def test_blank_identifier_counts_as_absent(self):
        with pytest.raises(ValidationError) as exc_info:
            PartyReference.model_validate({"kind": "PERSON", "personId": "   "})
        assert error_types(exc_info) == ["invalid_reference_kind"]

    def test_unknown_kind_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            PartyReference.model_validate({"kind": "ROBOT", "personId": "u1"})
        errors = translate_validation_error(exc_info.value, "transferor")
        assert [e.kind for e in errors] == [ErrorKind.INVALID_REFERENCE_KIND]
        assert errors[0].path == "transferor"

    def test_structural_equality_and_hashing(self):
        a = PartyReference.person("u1")
        b = PartyReference.model_validate({"kind": "USER", "userId": "u1"})
        assert a == b
        assert {a: 1}[b] == 1
        assert a != PartyReference.organization("u1")

    def test_reference_is_immutable(self):
        party = PartyReference.person("u1")
        with pytest.raises(ValidationError):
            party.person_id = "u2"


class TestOperatingTerm:
    """Tagged duration."""

    def test_indefinite(self):
        term = TERM.validate_python({"type": "INDEFINITE"})
        assert isinstance(term, IndefiniteTerm)

    def test_long_term_is_indefinite(self):
        term = TERM.validate_python({"type": "LONG_TERM"})
        assert isinstance(term, IndefiniteTerm)
        assert term.type == "INDEFINITE"

    def test_indefinite_ignores_years(self):
        term = TERM.validate_python({"type": "INDEFINITE", "years": 5})
        assert isinstance(term, IndefiniteTerm)
        assert not hasattr(term, "years")

    def test_fixed_years(self):
        term = TERM.validate_python({"type": "YEARS", "years": 30})
        assert isinstance(term, FixedTerm)
        assert term.years == 30

    def test_years_without_count_is_missing(self):
        """{type: YEARS} without years is reported on the years field."""
        with pytest.raises(ValidationError) as exc_info:
            TERM.validate_python({"type": "YEARS"})
        errors = translate_validation_error(exc_info.value, "operatingTerm")
        assert [(e.kind, e.path) for e in errors] == [(ErrorKind.MISSING_REQUIRED_FIELD, "operatingTerm.years")]

    @pytest.mark.parametrize("years", [0, 201, -3])
    def test_years_out_of_range(self, years):
        with pytest.raises(ValidationError) as exc_info:
            TERM.validate_python({"type": "YEARS", "years": years})
        assert error_types(exc_info) == ["missing_required_field"]

    @pytest.mark.parametrize("years", [1, 200])
    def test_years_bounds_inclusive(self, years):
        assert TERM.validate_python({"type": "YEARS", "years": years}).years == years

    def test_unknown_type_is_invalid(self):
        with pytest.raises(ValidationError) as exc_info:
            TERM.validate_python({"type": "FOREVER"})
        errors = translate_validation_error(exc_info.value)
        assert errors[0].kind == ErrorKind.INVALID_FIELD_VALUE
