"""Tests for assembling inspection reports."""

from datetime import datetime
from pathlib import Path

from sheet_inspect.models.data_models import ExtractionResult, InspectionReport
from sheet_inspect.reporting import ReportBuilder


class TestReportBuilder:
    """Test cases for ReportBuilder."""

    def test_minimal_report(self, sheets):
        """Test a sheet listing only."""
        report = ReportBuilder("book.xlsx", sheets).build()

        assert isinstance(report, InspectionReport)
        assert report.file_name == "book.xlsx"
        assert report.file_path == Path("book.xlsx")
        assert report.sheets == sheets
        assert report.selected_sheet is None
        assert report.sheet_report is None
        assert report.warnings == ()
        assert report.no_data is False
        assert isinstance(report.generated_at, datetime)

    def test_full_report(self, full_report, sheets, sheet_report, cross_sheet):
        """Test that all fragments end up in the report."""
        assert full_report.selected_sheet == sheets[0]
        assert full_report.sheet_report is sheet_report
        assert full_report.cross_sheet is cross_sheet
        assert full_report.generated_at == datetime(2024, 3, 1, 12, 0, 0)
        assert len(full_report.warnings) == 1

    def test_extraction_is_attached_to_image_report(self, image_report):
        """Test that extraction results are merged without mutating the fragment."""
        extraction = ExtractionResult(Path("out"), 2, 0)
        report = ReportBuilder("book.xlsx").with_image_report(image_report, extraction).build()

        assert report.image_report.extraction == extraction
        assert report.image_report.total == 2
        assert image_report.extraction is None

    def test_mark_no_data(self, sheets):
        """Test flagging a report without data rows."""
        report = (
            ReportBuilder("book.xlsx", sheets)
            .with_selected_sheet(sheets[2])
            .mark_no_data("No data found in the sheet.")
            .build()
        )

        assert report.no_data is True
        assert report.warnings == ("No data found in the sheet.",)

    def test_build_returns_independent_reports(self, sheets):
        """Test that later warnings do not leak into earlier reports."""
        builder = ReportBuilder("book.xlsx", sheets)
        first = builder.build()
        builder.warn("later")

        assert first.warnings == ()
        assert builder.build().warnings == ("later",)
