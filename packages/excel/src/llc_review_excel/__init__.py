"""Reviewer workbook export for governance applications."""

from .review_workbook import ReviewWorkbookRenderer

__all__ = ["ReviewWorkbookRenderer"]
