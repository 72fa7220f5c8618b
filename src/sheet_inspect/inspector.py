"""Inspection workflow for one workbook.

The SpreadsheetInspector wires the workbook reader to the analysis engine:
it resolves the requested sheet, runs sheet statistics, the image inventory
and the cross-sheet check as requested, and hands the fragments to the
report builder.
"""

from pathlib import Path
from typing import List, Optional, Union

from sheet_inspect.analysis.cross_sheet_matcher import CrossSheetMatcher, column_values
from sheet_inspect.analysis.sheet_analyzer import SheetAnalyzer
from sheet_inspect.analysis.value_normalizer import normalize_row
from sheet_inspect.images.image_inventory import ImageInventory
from sheet_inspect.models.data_models import (
    ColumnNotFoundError,
    Config,
    CrossSheetSummary,
    InspectionReport,
    InspectionRequest,
    Row,
    SheetIdentity,
    SheetNotFoundError,
)
from sheet_inspect.processors.workbook_reader import WorkbookReader, resolve_sheet
from sheet_inspect.reporting.report_builder import ReportBuilder
from sheet_inspect.utils.logger import get_inspection_logger
from sheet_inspect.utils.logging_decorators import log_operation


class SpreadsheetInspector:
    """Runs the requested analyses on a workbook and builds the report.

    Example:
        >>> inspector = SpreadsheetInspector()
        >>> report = inspector.inspect("orders.xlsx", InspectionRequest(sheet="1"))
        >>> [column.name for column in report.sheet_report.columns]
        ['Order', 'Customer', 'Date']
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize the inspector.

        Args:
            config: Application configuration (None for defaults)
        """
        self.config = config or Config()
        self.logger = get_inspection_logger(__name__)

        self.sheet_analyzer = SheetAnalyzer(self.config.analysis)
        self.image_inventory = ImageInventory()
        self.matcher = CrossSheetMatcher(self.config.analysis)

    @log_operation("inspect_workbook", log_args=True)
    def inspect(
        self,
        file_path: Union[str, Path],
        request: Optional[InspectionRequest] = None,
    ) -> InspectionReport:
        """Inspect a workbook.

        Args:
            file_path: Path to the workbook
            request: What to inspect (defaults to listing sheets only)

        Returns:
            Inspection report

        Raises:
            WorkbookError: If the workbook cannot be opened
            SheetNotFoundError: If a sheet selector does not resolve
            ColumnNotFoundError: If the source column is missing
        """
        request = request or InspectionRequest(sheets_only=True)
        file_path = Path(file_path).expanduser()

        with WorkbookReader(file_path, self.config.workbook) as reader:
            return self._inspect(reader, request)

    def _inspect(self, reader: WorkbookReader, request: InspectionRequest) -> InspectionReport:
        sheets = reader.sheets()
        builder = ReportBuilder(reader.file_path, sheets)

        if request.sheets_only:
            return builder.build()

        selected = resolve_sheet(sheets, request.sheet)
        builder.with_selected_sheet(selected)

        rows = [normalize_row(row) for row in reader.read_rows(selected.index)]
        if not rows:
            message = f"No data found in sheet '{selected.name}' ({selected.index})"
            self.logger.warning(message)
            return builder.mark_no_data(message).build()

        if request.column is None:
            builder.with_sheet_report(self.sheet_analyzer.analyze(rows, selected.name))

        if request.wants_images:
            self._inspect_images(reader, selected, request, builder)

        if request.column is not None:
            summary = self._check_cross_sheet(reader, sheets, selected, rows, request)
            builder.with_cross_sheet(summary)
            for skipped in summary.skipped:
                builder.warn(f"Sheet '{skipped.sheet.name}' ({skipped.sheet.index}) skipped: {skipped.reason}")

        return builder.build()

    def _inspect_images(
        self,
        reader: WorkbookReader,
        sheet: SheetIdentity,
        request: InspectionRequest,
        builder: ReportBuilder,
    ) -> None:
        drawings = reader.read_drawings(sheet.index)
        report = self.image_inventory.inventory(drawings)

        if report.total == 0:
            builder.warn("No images found in this sheet.")
            builder.with_image_report(report)
            return

        extraction = None
        if request.extract_images is not None:
            extraction = self.image_inventory.extract(
                drawings,
                request.extract_images.expanduser(),
                sheet.name,
                debug=request.debug,
            )
            if extraction.failed:
                builder.warn(f"Failed to extract {extraction.failed} image(s)")

        builder.with_image_report(report, extraction)

    def _check_cross_sheet(
        self,
        reader: WorkbookReader,
        sheets: List[SheetIdentity],
        source: SheetIdentity,
        rows: List[Row],
        request: InspectionRequest,
    ) -> CrossSheetSummary:
        if request.column not in rows[0]:
            raise ColumnNotFoundError(
                f"Column '{request.column}' not found in sheet '{source.name}'",
                reader.file_path,
            )
        source_values = column_values(rows, request.column)

        only_sheet = None
        if request.cross_sheet:
            try:
                only_sheet = resolve_sheet(sheets, request.cross_sheet)
            except SheetNotFoundError as e:
                raise SheetNotFoundError(
                    f"Cross-sheet '{request.cross_sheet}' not found: {e.message}",
                    reader.file_path,
                    sheets=e.sheets,
                ) from e

        targets = self.matcher.select_targets(sheets, source, only_sheet)
        self.logger.info(
            f"Cross-sheet reference check for column '{request.column}' in sheet {source.name}: "
            f"{len(source_values)} values against {len(targets)} sheet(s)"
        )

        return self.matcher.check(
            source,
            request.column,
            source_values,
            ((sheet, reader.read_rows(sheet.index)) for sheet in targets),
            target_column=request.target_column,
            debug=request.debug,
        )
