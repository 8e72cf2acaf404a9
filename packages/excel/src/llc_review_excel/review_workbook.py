"""Reviewer workbook: the tables an administrative reviewer works from.

One sheet per DataFrame produced by the governance blocks, header row
styled, columns sized to their content. No formulas; every value is
computed by the domain blocks.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from llc_governance.blocks import (
    BlockContext,
    BlockExecutor,
    ChangeSetBlock,
    RosterBlock,
    ShareholderRegisterBlock,
)
from llc_governance.schemas import ChangeSet, CompanyState

# (context key, sheet title), in sheet order
SHEETS: Tuple[Tuple[str, str], ...] = (
    ("register_summary", "Summary"),
    ("shareholder_register", "Shareholders"),
    ("officer_table", "Officers"),
    ("change_table", "Changes"),
    ("consent_table", "Consents"),
)

PERCENT_COLUMNS = {"capital_ratio", "voting_ratio", "capital_total", "voting_total"}
MAX_COLUMN_WIDTH = 60


class ReviewWorkbookRenderer:
    """Render a company state (and optionally a change set) to an .xlsx workbook.

    Example:
        renderer = ReviewWorkbookRenderer(proposed_state, change_set)
        renderer.render("review.xlsx")
    """

    def __init__(self, state: CompanyState, change_set: Optional[ChangeSet] = None):
        self.state = state
        self.change_set = change_set

        self.title_font = Font(size=14, bold=True)
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
        self.header_align = Alignment(horizontal="center", vertical="center", wrap_text=True)
        self.header_border = Border(right=Side(style="thin", color="FFFFFF"))
        self.flag_fill = PatternFill(start_color="FFFACD", end_color="FFFACD", fill_type="solid")

    def compute_frames(self) -> Dict[str, pd.DataFrame]:
        """Run the review blocks and return their DataFrames by context key."""
        blocks = [ShareholderRegisterBlock(), RosterBlock()]
        context = BlockContext(
            {
                "shareholders": self.state.shareholders,
                "voting_rights_mode": self.state.voting_rights_mode,
                "roster": self.state.roster,
            }
        )
        if self.change_set is not None:
            blocks.append(ChangeSetBlock())
            context.set("change_set", self.change_set)

        BlockExecutor(blocks).execute(context)
        return {key: context.get(key) for key, _ in SHEETS if context.has(key)}

    def render(self, output_path: str) -> str:
        wb = self.build_workbook()
        wb.save(output_path)
        return output_path

    def build_workbook(self) -> Workbook:
        wb = Workbook()
        wb.remove(wb.active)
        frames = self.compute_frames()
        for key, title in SHEETS:
            if key in frames:
                self._render_frame(wb, title, frames[key])
        return wb

    def _render_frame(self, wb: Workbook, title: str, df: pd.DataFrame) -> None:
        sheet = wb.create_sheet(title=title)
        sheet["A1"] = f"{self.state.name or 'Company'} - {title}"
        sheet["A1"].font = self.title_font

        header_row = 3
        columns: List[str] = list(df.columns)
        for col_idx, column in enumerate(columns, start=1):
            cell = sheet.cell(row=header_row, column=col_idx, value=column.replace("_", " ").title())
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_align
            cell.border = self.header_border

        for row_offset, record in enumerate(df.itertuples(index=False), start=1):
            for col_idx, value in enumerate(record, start=1):
                cell = sheet.cell(row=header_row + row_offset, column=col_idx, value=_cell_value(value))
                if columns[col_idx - 1] in PERCENT_COLUMNS:
                    cell.number_format = "0.000000"
                if columns[col_idx - 1] == "voting_diverges" and bool(value):
                    cell.fill = self.flag_fill

        sheet.freeze_panes = sheet.cell(row=header_row + 1, column=1)
        self._size_columns(sheet, columns, df.itertuples(index=False))

    def _size_columns(self, sheet, columns: Sequence[str], records) -> None:
        widths = [len(column) + 2 for column in columns]
        for record in records:
            for idx, value in enumerate(record):
                widths[idx] = max(widths[idx], len(str(value)) + 2)
        for idx, width in enumerate(widths, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = min(width, MAX_COLUMN_WIDTH)


def _cell_value(value):
    # openpyxl only writes scalars; numpy scalars go through item()
    if value is None:
        return None
    if hasattr(value, "item"):
        return value.item()
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
