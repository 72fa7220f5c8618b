"""Assembly of an InspectionReport from the fragments of each analysis stage.

Each stage returns an immutable fragment (SheetReport, ImageReport,
CrossSheetSummary); the builder collects them and produces the final report
in one go, so no stage ever writes into a shared report object.
"""

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from sheet_inspect.models.data_models import (
    CrossSheetSummary,
    ExtractionResult,
    ImageReport,
    InspectionReport,
    SheetIdentity,
    SheetReport,
)


class ReportBuilder:
    """Collects report fragments and builds an InspectionReport."""

    def __init__(
        self,
        file_path: Union[str, Path],
        sheets: Iterable[SheetIdentity] = (),
        generated_at: Optional[datetime] = None,
    ):
        self.file_path = Path(file_path)
        self.generated_at = generated_at or datetime.now()
        self._sheets = tuple(sheets)
        self._selected: Optional[SheetIdentity] = None
        self._sheet_report: Optional[SheetReport] = None
        self._image_report: Optional[ImageReport] = None
        self._cross_sheet: Optional[CrossSheetSummary] = None
        self._warnings: List[str] = []
        self._no_data = False

    def with_selected_sheet(self, sheet: SheetIdentity) -> "ReportBuilder":
        self._selected = sheet
        return self

    def with_sheet_report(self, report: SheetReport) -> "ReportBuilder":
        self._sheet_report = report
        return self

    def with_image_report(
        self,
        report: ImageReport,
        extraction: Optional[ExtractionResult] = None,
    ) -> "ReportBuilder":
        if extraction is not None:
            report = replace(report, extraction=extraction)
        self._image_report = report
        return self

    def with_cross_sheet(self, summary: CrossSheetSummary) -> "ReportBuilder":
        self._cross_sheet = summary
        return self

    def warn(self, message: str) -> "ReportBuilder":
        self._warnings.append(message)
        return self

    def mark_no_data(self, message: str) -> "ReportBuilder":
        self._no_data = True
        return self.warn(message)

    def build(self) -> InspectionReport:
        """Combine the collected fragments into a report."""
        return InspectionReport(
            file_name=self.file_path.name,
            file_path=self.file_path,
            generated_at=self.generated_at,
            sheets=self._sheets,
            selected_sheet=self._selected,
            sheet_report=self._sheet_report,
            image_report=self._image_report,
            cross_sheet=self._cross_sheet,
            warnings=tuple(self._warnings),
            no_data=self._no_data,
        )
