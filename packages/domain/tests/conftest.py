"""Shared fixtures for governance engine tests."""

import copy
from decimal import Decimal

import pytest

from llc_governance import validate_application
from llc_governance.config import get_settings
from llc_governance.schemas import (
    CompanyState,
    DivisionNode,
    InMemoryDivisionDirectory,
    PartyReference,
    Shareholder,
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Each test sees default settings unless it sets LLC_GOVERNANCE_* itself."""
    for name in (
        "LLC_GOVERNANCE_LOG_LEVEL",
        "LLC_GOVERNANCE_LEGAL_REPRESENTATIVE_FROM_OFFICERS",
        "LLC_GOVERNANCE_ENFORCE_BOARD_SIZE",
        "LLC_GOVERNANCE_REQUIRE_BOARD_CHAIRPERSON",
        "LLC_GOVERNANCE_DISTINCT_MANAGEMENT",
        "LLC_GOVERNANCE_STRICT_SUPERVISOR_SEGREGATION",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def holder(person_id: str, capital, voting=None) -> Shareholder:
    return Shareholder(
        party=PartyReference.person(person_id),
        capital_ratio=Decimal(str(capital)),
        voting_ratio=None if voting is None else Decimal(str(voting)),
    )


@pytest.fixture
def make_holder():
    """Build a person shareholder from plain numbers."""
    return holder


REGISTRATION = {
    "name": "Acme Trading LLC",
    "domicileDivisionId": "d-3",
    "domicileDivisionPath": {
        "level1": {"id": "d-1", "name": "North"},
        "level2": {"id": "d-2", "name": "Harbor"},
        "level3": {"id": "d-3", "name": "Old Town"},
    },
    "administrativeDivisionLevel": 3,
    "domicileAddress": "12 Quay Street",
    "registeredCapital": "100000",
    "brandName": "Acme",
    "industryFeature": "Trading",
    "registrationAuthorityName": "City Registry",
    "operatingTerm": {"type": "YEARS", "years": 20},
    "businessScope": "Wholesale of general goods",
    "shareholders": [
        {"party": {"kind": "PERSON", "personId": "u1"}, "capitalRatio": "60"},
        {"party": {"kind": "PERSON", "personId": "u2"}, "capitalRatio": "40"},
    ],
    "roster": {
        "directorIds": ["d1"],
        "supervisorIds": ["s1"],
        "managerId": "m1",
        "legalRepresentativeId": "d1",
    },
}


@pytest.fixture
def registration_payload():
    """A valid REGISTRATION payload; tests may mutate their copy."""
    return copy.deepcopy(REGISTRATION)


@pytest.fixture
def registration(registration_payload):
    return validate_application("REGISTRATION", registration_payload)


@pytest.fixture
def company_state(registration):
    """State of record of company c-1 right after registration."""
    return CompanyState.from_registration(registration, company_id="c-1")


@pytest.fixture
def divisions():
    return InMemoryDivisionDirectory(
        [
            DivisionNode(id="d-1", name="North", level=1),
            DivisionNode(id="d-2", name="Harbor", level=2, parent_id="d-1"),
            DivisionNode(id="d-3", name="Old Town", level=3, parent_id="d-2"),
            DivisionNode(id="d-9", name="Bay", level=2, parent_id="d-1"),
        ]
    )
