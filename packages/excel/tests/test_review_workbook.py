"""Tests for ReviewWorkbookRenderer.

The workbook must show exactly what the domain blocks compute:
1. Sheet layout - one sheet per review table, in a fixed order
2. Values - shareholder and change rows match the block DataFrames
"""

from openpyxl import load_workbook
import pytest

from llc_governance import diff_against_current_state, validate_application
from llc_governance.schemas import CompanyState
from llc_review_excel import ReviewWorkbookRenderer


# =============================================================================
# Test Data Builders
# =============================================================================

def build_company_state() -> CompanyState:
    """Founded company: two person shareholders, one director, one supervisor."""
    registration = validate_application(
        "REGISTRATION",
        {
            "name": "Harbor Foods LLC",
            "domicileDivisionId": "d-2",
            "administrativeDivisionLevel": 2,
            "domicileAddress": "4 Pier Lane",
            "registeredCapital": "50000",
            "brandName": "Harbor",
            "industryFeature": "Foods",
            "registrationAuthorityCompanyId": "corp-1",
            "operatingTerm": {"type": "INDEFINITE"},
            "businessScope": "Food processing",
            "shareholders": [
                {"party": {"kind": "PERSON", "personId": "u1"}, "capitalRatio": "70"},
                {"party": {"kind": "ORGANIZATION", "organizationId": "c9"}, "capitalRatio": "30"},
            ],
            "roster": {"directorIds": ["d1"], "supervisorIds": ["s1"], "legalRepresentativeId": "d1"},
        },
    )
    return CompanyState.from_registration(registration, company_id="c-1")


def sheet_rows(sheet, first_row=4):
    return [list(row) for row in sheet.iter_rows(min_row=first_row, values_only=True)]


@pytest.fixture
def state():
    return build_company_state()


# =============================================================================
# Layout
# =============================================================================

class TestLayout:

    def test_sheets_without_change_set(self, state, tmp_path):
        path = ReviewWorkbookRenderer(state).render(str(tmp_path / "review.xlsx"))
        wb = load_workbook(path)
        assert wb.sheetnames == ["Summary", "Shareholders", "Officers"]

    def test_sheets_with_change_set(self, state, tmp_path):
        application = validate_application("RENAME", {"newName": "Harbor Foods Group LLC"})
        change_set = diff_against_current_state(state, application)
        path = ReviewWorkbookRenderer(state, change_set).render(str(tmp_path / "review.xlsx"))

        wb = load_workbook(path)
        assert wb.sheetnames == ["Summary", "Shareholders", "Officers", "Changes", "Consents"]
        assert wb["Changes"]["A1"].value == "Harbor Foods LLC - Changes"

    def test_header_row(self, state):
        sheet = ReviewWorkbookRenderer(state).build_workbook()["Shareholders"]
        headers = [cell.value for cell in sheet[3]]
        assert headers == ["Party Key", "Party Kind", "Party Id", "Capital Ratio", "Voting Ratio", "Voting Diverges"]
        assert sheet["A3"].font.bold
        assert sheet.freeze_panes == "A4"


# =============================================================================
# Values
# =============================================================================

class TestValues:

    def test_shareholder_rows_match_register(self, state, tmp_path):
        renderer = ReviewWorkbookRenderer(state)
        register = renderer.compute_frames()["shareholder_register"]
        wb = load_workbook(renderer.render(str(tmp_path / "review.xlsx")))

        rows = sheet_rows(wb["Shareholders"])
        assert rows == [
            ["PERSON:u1", "PERSON", "u1", 70.0, 70.0, False],
            ["ORGANIZATION:c9", "ORGANIZATION", "c9", 30.0, 30.0, False],
        ]
        assert len(rows) == len(register)
        assert wb["Shareholders"]["D4"].number_format == "0.000000"

    def test_officer_rows(self, state):
        sheet = ReviewWorkbookRenderer(state).build_workbook()["Officers"]
        assert sheet_rows(sheet) == [
            ["DIRECTOR", "d1"],
            ["SUPERVISOR", "s1"],
            ["LEGAL_REPRESENTATIVE", "d1"],
        ]

    def test_change_and_consent_rows(self, state):
        application = validate_application("RENAME", {"newName": "Harbor Foods Group LLC"})
        change_set = diff_against_current_state(state, application)
        wb = ReviewWorkbookRenderer(state, change_set).build_workbook()

        assert sheet_rows(wb["Changes"]) == [
            [1, "update_field", "name", "Harbor Foods LLC", "Harbor Foods Group LLC"]
        ]
        assert sheet_rows(wb["Consents"]) == [
            ["PERSON:u1", "PERSON", "SHAREHOLDER"],
            ["ORGANIZATION:c9", "ORGANIZATION", "SHAREHOLDER"],
        ]

    def test_summary_totals(self, state):
        sheet = ReviewWorkbookRenderer(state).build_workbook()["Summary"]
        summary = dict(zip([c.value for c in sheet[3]], sheet_rows(sheet)[0]))
        assert summary["Shareholders Count"] == 2
        assert summary["Organization Count"] == 1
        assert summary["Capital Total"] == pytest.approx(100.0)
        assert summary["Voting Rights Mode"] == "BY_CAPITAL_RATIO"
        assert summary["Capital Balanced"] is True
