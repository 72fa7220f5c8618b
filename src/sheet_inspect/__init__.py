"""Spreadsheet Inspector.

Audits unfamiliar spreadsheet workbooks before they are imported into a
pipeline: sheet inventories, per-column fill-rate and cardinality
statistics, embedded image inventories and extraction, and cross-sheet
reference checks between columns.
"""

__version__ = "1.0.0"
__author__ = "sheet-inspect contributors"

from sheet_inspect.models.data_models import (
    ColumnProfile,
    Config,
    CrossSheetMatch,
    CrossSheetSummary,
    ImageReport,
    InspectionReport,
    InspectionRequest,
    SheetIdentity,
    SheetReport,
)
from sheet_inspect.analysis.column_profiler import ColumnProfiler
from sheet_inspect.analysis.cross_sheet_matcher import CrossSheetMatcher
from sheet_inspect.analysis.sheet_analyzer import SheetAnalyzer
from sheet_inspect.images.image_inventory import ImageInventory
from sheet_inspect.inspector import SpreadsheetInspector
from sheet_inspect.processors.workbook_reader import WorkbookReader

__all__ = [
    "ColumnProfile",
    "Config",
    "CrossSheetMatch",
    "CrossSheetSummary",
    "ImageReport",
    "InspectionReport",
    "InspectionRequest",
    "SheetIdentity",
    "SheetReport",
    "ColumnProfiler",
    "CrossSheetMatcher",
    "SheetAnalyzer",
    "ImageInventory",
    "SpreadsheetInspector",
    "WorkbookReader",
]
