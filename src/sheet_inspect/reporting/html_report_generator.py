"""HTML report generation for inspection results.

The page is a single self-contained document (inline stylesheet, no remote
assets) with the sheet list, one card per column, the image inventory and
the cross-sheet reference table.
"""

from html import escape
from pathlib import Path
from typing import Any, List, Optional, Union

from sheet_inspect.models.data_models import (
    AnalysisConfig,
    ColumnProfile,
    CrossSheetSummary,
    ImageReport,
    InspectionReport,
)
from sheet_inspect.reporting.report_generator import (
    ELLIPSIS,
    format_percent,
    truncate_value,
)
from sheet_inspect.utils.logger import get_inspection_logger

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

STYLESHEET = """
        * { box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, sans-serif;
            line-height: 1.6;
            max-width: 1000px;
            margin: 0 auto;
            padding: 20px;
            padding-top: 10px;
            color: #333;
        }
        h1 { color: #6b7280; border-bottom: 3px solid #9ca3af; padding-bottom: 10px; margin-top: 0; }
        h2 { color: #6b7280; margin-top: 30px; border-bottom: 1px solid #d1d5db; padding-bottom: 5px; }
        h3 { color: #9ca3af; margin-top: 20px; }
        .meta { color: #6b7280; font-size: 0.9em; margin-bottom: 20px; }
        .stat { background: #f3f4f6; padding: 3px 8px; border-radius: 4px; font-family: monospace; }
        .column-card {
            background: #f9fafb;
            border: 1px solid #e5e7eb;
            border-radius: 8px;
            padding: 15px;
            margin: 15px 0;
        }
        .column-name { font-weight: bold; color: #374151; font-size: 1.1em; }
        .hint { color: #b45309; font-style: italic; }
        .values-list {
            background: white;
            border: 1px solid #e5e7eb;
            border-radius: 4px;
            padding: 10px;
            margin-top: 10px;
        }
        .value-item { padding: 3px 0; border-bottom: 1px solid #f3f4f6; }
        .value-item:last-child { border-bottom: none; }
        .count { color: #6b7280; font-size: 0.9em; }
        .progress-bar { background: #e5e7eb; border-radius: 4px; height: 8px; margin-top: 5px; }
        .progress-fill { background: #22c55e; height: 100%; border-radius: 4px; }
        .sheet-list { list-style: none; padding: 0; }
        .sheet-list li {
            padding: 8px 12px;
            background: #f9fafb;
            margin: 5px 0;
            border-radius: 4px;
            border-left: 4px solid #3b82f6;
        }
        .sheet-list li.selected { border-left-color: #28a745; }
        .sheet-list .index { color: #6b7280; font-weight: bold; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        th, td { padding: 10px; text-align: left; border-bottom: 1px solid #e5e7eb; }
        th { background: #f9fafb; font-weight: 600; }
        .image-stats { display: flex; gap: 20px; flex-wrap: wrap; }
        .image-stat { background: #dbeafe; padding: 10px 15px; border-radius: 8px; }
        .warnings li { color: #b45309; }
        footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #9ca3af; font-size: 0.85em; }
"""


class HTMLReportGenerator:
    """Generates standalone HTML reports for inspection results."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """Initialize the HTML report generator.

        Args:
            config: Analysis configuration (value display length)
        """
        self.config = config or AnalysisConfig()
        self.logger = get_inspection_logger(__name__)

    def generate_report(self, report: InspectionReport, output_path: Union[str, Path]) -> Path:
        """Write the HTML rendering of a report.

        Args:
            report: Inspection report
            output_path: Destination file

        Returns:
            Path to the generated HTML file
        """
        report_path = Path(output_path).expanduser()
        report_path.parent.mkdir(parents=True, exist_ok=True)

        with open(report_path, "w", encoding="utf-8") as f:
            f.write(self.render(report))

        self.logger.info(f"HTML report written to {report_path}")
        return report_path

    def render(self, report: InspectionReport) -> str:
        """Render a report as an HTML document."""
        generated = report.generated_at.strftime(TIMESTAMP_FORMAT)
        file_name = escape(report.file_name)

        content = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '    <meta charset="UTF-8">',
            '    <meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"    <title>Spreadsheet Report: {file_name}</title>",
            f"    <style>{STYLESHEET}    </style>",
            "</head>",
            "<body>",
            "    <h1>Spreadsheet Report</h1>",
            '    <div class="meta">',
            f"        <strong>File:</strong> {file_name}<br>",
            f"        <strong>Generated:</strong> {generated}",
            "    </div>",
        ]

        content.extend(self._create_sheet_list(report))

        if report.sheet_report is not None:
            sheet_name = escape(report.selected_sheet.name) if report.selected_sheet else ""
            content.append(f"    <h2>Sheet Analysis: {sheet_name}</h2>")
            content.append(
                f'    <p><strong>Total Rows:</strong> <span class="stat">{report.sheet_report.total_rows}</span></p>'
            )
            for column in report.sheet_report.columns:
                content.extend(self._create_column_card(column))

        if report.image_report is not None:
            content.extend(self._create_images(report.image_report))

        if report.cross_sheet is not None:
            content.extend(self._create_cross_sheet(report.cross_sheet))

        if report.warnings:
            content.append("    <h2>Warnings</h2>")
            content.append('    <ul class="warnings">')
            for warning in report.warnings:
                content.append(f"        <li>{escape(warning)}</li>")
            content.append("    </ul>")

        content.extend([
            "    <footer>",
            f"        Generated by <strong>sheet-inspect</strong> &bull; {generated}",
            "    </footer>",
            "</body>",
            "</html>",
        ])
        return "\n".join(content) + "\n"

    def _create_sheet_list(self, report: InspectionReport) -> List[str]:
        content = ["    <h2>Available Sheets</h2>", '    <ul class="sheet-list">']
        for sheet in report.sheets:
            selected = ' class="selected"' if sheet == report.selected_sheet else ""
            content.append(
                f'        <li{selected}><span class="index">[{sheet.index}]</span> {escape(sheet.name)}</li>'
            )
        content.append("    </ul>")
        return content

    def _create_column_card(self, column: ColumnProfile) -> List[str]:
        percent = format_percent(column.percent)
        content = [
            '    <div class="column-card">',
            f'        <div class="column-name">{escape(column.name)}</div>',
            f"        <p><strong>Filled:</strong> {column.filled} / {column.total} ({percent}%)</p>",
            f'        <div class="progress-bar"><div class="progress-fill" style="width: {percent}%"></div></div>',
            f"        <p><strong>Distinct Values:</strong> {column.distinct_count}</p>",
        ]
        if column.image_hint:
            content.append('        <p class="hint">Images may be embedded as drawings (use --images)</p>')

        if column.values:
            content.append('        <div class="values-list">')
            for value, occurrences in column.values:
                content.append(
                    f'            <div class="value-item"><code>{self._display(value)}</code> '
                    f'<span class="count">({occurrences})</span></div>'
                )
            if column.has_more:
                content.append(
                    f'            <div class="value-item"><em>{ELLIPSIS} and {column.remaining} more</em></div>'
                )
            content.append("        </div>")

        content.append("    </div>")
        return content

    def _create_images(self, images: ImageReport) -> List[str]:
        content = [
            "    <h2>Images in Sheet</h2>",
            f'    <p><strong>Total Images:</strong> <span class="stat">{images.total}</span></p>',
        ]
        if images.total == 0:
            return content

        content.append('    <div class="image-stats">')
        for column, count in images.by_column.items():
            content.append(
                f'        <div class="image-stat"><strong>Column {escape(column)}:</strong> {count} image(s)</div>'
            )
        content.append("    </div>")
        content.append(f"    <p><strong>Rows with images:</strong> {images.rows_with_images}</p>")

        if images.extraction is not None:
            extraction = images.extraction
            content.append(
                f"    <p><strong>Extracted:</strong> {extraction.extracted} image(s) to "
                f"<code>{escape(str(extraction.directory))}</code>"
                + (f" ({extraction.failed} failed)" if extraction.failed else "")
                + "</p>"
            )
        return content

    def _create_cross_sheet(self, summary: CrossSheetSummary) -> List[str]:
        content = [
            "    <h2>Cross-Sheet References</h2>",
            f"    <p><strong>Source Column:</strong> {escape(summary.source_column)}</p>",
            f"    <p><strong>Values Found:</strong> {summary.found} / {summary.total} "
            f"({format_percent(summary.percent)}%)</p>",
        ]
        if summary.partial:
            content.append(
                f"    <p><em>Partial result: only the first {summary.row_limit} rows "
                f"of each target sheet were checked.</em></p>"
            )

        if summary.matches:
            content.append("    <table><thead><tr><th>Sheet</th><th>Column</th><th>Matches</th></tr></thead><tbody>")
            for match in summary.matches:
                content.append(
                    f"        <tr><td>{escape(match.sheet.name)} ({match.sheet.index})</td>"
                    f"<td>{escape(match.column)}</td><td>{match.count}</td></tr>"
                )
            content.append("    </tbody></table>")
        return content

    def _display(self, value: Any) -> str:
        return escape(truncate_value(value, self.config.value_display_length))
