"""Sheet-level statistics built from per-column profiles."""

from dataclasses import replace
from typing import List, Optional, Sequence

from sheet_inspect.analysis.column_profiler import ColumnProfiler
from sheet_inspect.analysis.value_normalizer import cell
from sheet_inspect.models.data_models import (
    AnalysisConfig,
    ColumnProfile,
    NoDataError,
    Row,
    SheetReport,
)
from sheet_inspect.utils.logger import get_inspection_logger
from sheet_inspect.utils.logging_decorators import log_operation


class SheetAnalyzer:
    """Runs the column profiler over every column of a sheet.

    Headers are taken from the first row, in order. Later rows may lack some
    of those headers; a missing cell counts as blank. Columns whose header
    contains the image keyword ("bild", case-insensitive) and that hold no
    values are flagged with ``image_hint``: such workbooks usually keep their
    photos as floating drawings anchored next to an empty cell.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.profiler = ColumnProfiler(self.config)
        self.logger = get_inspection_logger(__name__)

    @log_operation("analyze_sheet")
    def analyze(self, rows: Sequence[Row], sheet_name: str = "") -> SheetReport:
        """Profile every column of a sheet.

        Args:
            rows: Normalized rows of the sheet
            sheet_name: Sheet name, used for logging only

        Returns:
            Sheet report with one profile per header

        Raises:
            NoDataError: If the sheet has no rows
        """
        if not rows:
            raise NoDataError(f"No data found in sheet '{sheet_name}'")

        headers = list(rows[0].keys())
        total = len(rows)
        columns: List[ColumnProfile] = []

        for header in headers:
            profile = self.profiler.profile(header, (cell(row, header) for row in rows), total)
            if profile.filled == 0 and self._looks_like_image_column(header):
                profile = replace(profile, image_hint=True)
            columns.append(profile)

        self.logger.log_sheet_analysis(sheet_name, total, len(columns))
        return SheetReport(total_rows=total, headers=tuple(headers), columns=tuple(columns))

    def _looks_like_image_column(self, header: str) -> bool:
        return self.config.image_hint_keyword.lower() in str(header).lower()
