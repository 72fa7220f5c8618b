"""Markdown rendering of inspection reports.

This module turns an InspectionReport into the markdown-flavoured text that
the ``inspect`` command prints to the console: sheet list, column
statistics, image inventory and the cross-sheet reference summary.
"""

from pathlib import Path
from typing import Any, List, Optional, Union

from sheet_inspect.models.data_models import (
    AnalysisConfig,
    ColumnProfile,
    CrossSheetSummary,
    ImageReport,
    InspectionReport,
    SheetReport,
)
from sheet_inspect.utils.logger import get_inspection_logger

ELLIPSIS = "…"

# Match lists longer than this are summarized by their count only.
MATCH_VALUES_SHOWN = 10


def truncate_value(value: Any, max_length: int = 100) -> str:
    """Stringify a value for display, cutting it at ``max_length`` characters.

    Args:
        value: Value to display
        max_length: Maximum number of characters kept

    Returns:
        The value as text, followed by a single ellipsis when it was cut
    """
    text = str(value)
    if len(text) > max_length:
        return text[:max_length] + ELLIPSIS
    return text


def format_percent(percent: float) -> str:
    """Format a percentage without trailing zeros (70.0 -> "70")."""
    return f"{percent:g}"


class ReportGenerator:
    """Renders inspection reports as markdown text.

    Example:
        >>> generator = ReportGenerator()
        >>> print(generator.render(report))
        ## Available sheets
        ...
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, debug: bool = False):
        """Initialize the report generator.

        Args:
            config: Analysis configuration (value display length, top values)
            debug: Include debug-only details such as drawing samples
        """
        self.config = config or AnalysisConfig()
        self.debug = debug
        self.logger = get_inspection_logger(__name__)

    def render(self, report: InspectionReport) -> str:
        """Render a report as markdown.

        Args:
            report: Inspection report

        Returns:
            Markdown text
        """
        content = []
        content.extend(self._generate_sheet_list(report))

        if report.selected_sheet is not None and not report.no_data:
            sheet = report.selected_sheet
            content.append(f"# Sheet `{sheet.name}` (Index: {sheet.index})")
            content.append("")

        if report.sheet_report is not None:
            content.extend(self._generate_sheet_statistics(report.sheet_report))

        if report.image_report is not None:
            content.extend(self._generate_images(report))

        if report.cross_sheet is not None:
            content.extend(self._generate_cross_sheet(report.cross_sheet))

        if report.warnings:
            content.extend(self._generate_warnings(report.warnings))

        return "\n".join(content).rstrip() + "\n"

    def generate_report(self, report: InspectionReport, output_path: Union[str, Path]) -> Path:
        """Write the markdown rendering of a report to a file.

        Args:
            report: Inspection report
            output_path: Destination file

        Returns:
            Path to the written file
        """
        report_path = Path(output_path).expanduser()
        report_path.parent.mkdir(parents=True, exist_ok=True)

        with open(report_path, "w", encoding="utf-8") as f:
            f.write(self.render(report))

        self.logger.info(f"Markdown report written to {report_path}")
        return report_path

    def _generate_sheet_list(self, report: InspectionReport) -> List[str]:
        content = ["## Available sheets", ""]
        for sheet in report.sheets:
            content.append(f"- **[{sheet.index}]** `{sheet.name}`")
        content.append("")
        return content

    def _generate_sheet_statistics(self, sheet_report: SheetReport) -> List[str]:
        content = [
            "## Sheet statistics",
            "",
            f"- **Rows** (excluding header): `{sheet_report.total_rows}`",
            "",
        ]
        for column in sheet_report.columns:
            content.extend(self._generate_column(column))
        return content

    def _generate_column(self, column: ColumnProfile) -> List[str]:
        filled = f"- **Filled**: `{column.filled} / {column.total}` ({format_percent(column.percent)}%)"
        if column.image_hint:
            filled += " *Images may be embedded as drawings (use --images)*"

        content = [
            f"### `{column.name}`",
            "",
            filled,
            f"- **Distinct**: `{column.distinct_count}`",
        ]

        if column.values:
            content.append("")
            if column.has_more:
                content.append(f"  Top {len(column.values)} (of {column.distinct_count}):")
            else:
                content.append("  Values:")

            for value, occurrences in column.values:
                content.append(f"  - `{self._display(value)}` ({occurrences})")

            if column.has_more:
                content.append(f"  - *{ELLIPSIS} and {column.remaining} more*")

        content.append("")
        return content

    def _generate_images(self, report: InspectionReport) -> List[str]:
        images: ImageReport = report.image_report
        sheet_name = report.selected_sheet.name if report.selected_sheet else "Unknown"

        content = [
            f"## Images in sheet `{sheet_name}`",
            "",
            f"- **Total images found**: `{images.total}`",
            "",
        ]
        if images.total == 0:
            return content

        content.extend(["### Images by column", ""])
        for column, count in images.by_column.items():
            content.append(f"- **Column {column}**: `{count}` image(s)")

        content.extend([
            "",
            "### Distribution",
            "",
            f"- **Rows with images**: `{images.rows_with_images}`",
            "",
        ])

        if images.extraction is not None:
            content.append(f"Extracted {images.extraction.extracted} image(s) to: {images.extraction.directory}")
            content.append("")

        if self.debug and images.samples:
            content.append(f"Sample image details (first {len(images.samples)}):")
            for sample in images.samples:
                content.append(
                    f"   [{sample.anchor}] Name: {sample.name or 'unnamed'}, "
                    f"Description: {sample.description or 'none'}"
                )
            content.append("")

        return content

    def _generate_cross_sheet(self, summary: CrossSheetSummary) -> List[str]:
        content = [
            f"Cross-sheet reference check for column '{summary.source_column}' "
            f"in sheet {summary.source_sheet.name}:",
        ]
        if summary.partial:
            content.append(
                f"*Partial result: only the first {summary.row_limit} rows of each target sheet were checked*"
            )

        content.append(f"Values found: {summary.found} / {summary.total} ({format_percent(summary.percent)}%)")

        for match in summary.matches:
            content.append(
                f" - In sheet {match.sheet.name} ({match.sheet.index}), "
                f"column '{match.column}' → {match.count} match(es)"
            )
            if len(match.values) <= MATCH_VALUES_SHOWN:
                content.append("   → " + ", ".join(self._display(value) for value in match.values))

        content.append("")
        return content

    def _generate_warnings(self, warnings) -> List[str]:
        content = ["## Warnings", ""]
        for warning in warnings:
            content.append(f"- {warning}")
        content.append("")
        return content

    def _display(self, value: Any) -> str:
        return truncate_value(value, self.config.value_display_length)
