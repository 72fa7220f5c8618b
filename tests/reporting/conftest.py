"""Report fixtures shared by the renderer tests."""

from datetime import datetime
from pathlib import Path

import pytest

from sheet_inspect.models.data_models import (
    ColumnProfile,
    CrossSheetMatch,
    CrossSheetSummary,
    DrawingSample,
    ExtractionResult,
    ImageReport,
    SheetIdentity,
    SheetReport,
)
from sheet_inspect.reporting import ReportBuilder


@pytest.fixture
def sheets():
    return (SheetIdentity(1, "Orders"), SheetIdentity(2, "Shipments"), SheetIdentity(3, "Notes"))


@pytest.fixture
def sheet_report() -> SheetReport:
    return SheetReport(
        total_rows=4,
        headers=("Order", "Customer", "Bild"),
        columns=(
            ColumnProfile("Order", 4, 4, 100.0, ((2, 2), (1, 1), (3, 1)), 3),
            ColumnProfile(
                "Customer", 4, 3, 75.0,
                (("Alice <admin>", 2),), 2, has_more=True, remaining=1,
            ),
            ColumnProfile("Bild", 4, 0, 0.0, image_hint=True),
        ),
    )


@pytest.fixture
def image_report() -> ImageReport:
    return ImageReport(
        total=2,
        by_column={"D": 2},
        by_row={"2": 1, "4": 1},
        samples=(DrawingSample("D2", "Picture 1", None), DrawingSample("D4", None, "logo")),
    )


@pytest.fixture
def cross_sheet(sheets) -> CrossSheetSummary:
    return CrossSheetSummary(
        source_sheet=sheets[0],
        source_column="Order",
        total=4,
        found=3,
        percent=75.0,
        matches=(CrossSheetMatch(sheets[1], "Order", 3, (2, 3)),),
    )


@pytest.fixture
def full_report(sheets, sheet_report, image_report, cross_sheet):
    """A report with every section filled in."""
    return (
        ReportBuilder(Path("/data/orders.xlsx"), sheets, generated_at=datetime(2024, 3, 1, 12, 0, 0))
        .with_selected_sheet(sheets[0])
        .with_sheet_report(sheet_report)
        .with_image_report(image_report, ExtractionResult(Path("/tmp/out"), 2, 0))
        .with_cross_sheet(cross_sheet)
        .warn("Skipping sheet 'Notes' (3): column 'Order' not found")
        .build()
    )
