"""PDF report generation for inspection results.

This module lays out an InspectionReport as a paginated A4 document with
reportlab: file header, sheet list, per-column statistics tables, the image
inventory and the cross-sheet reference table.
"""

from html import escape
from pathlib import Path
from typing import Any, List, Optional, Union

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.flowables import HRFlowable

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
from sheet_inspect.utils.logging_decorators import log_operation

KEY_VALUE_STYLE = [
    ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
    ('FONTSIZE', (0, 0), (-1, -1), 10),
    ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
    ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ('GRID', (0, 0), (-1, -1), 0.5, colors.lightgrey),
]

HEADER_ROW_STYLE = [
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
    ('FONTSIZE', (0, 0), (-1, -1), 10),
    ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
    ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
    ('GRID', (0, 0), (-1, -1), 1, colors.grey),
]


class PDFReportGenerator:
    """Generates PDF reports for inspection results."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """Initialize the PDF report generator.

        Args:
            config: Analysis configuration (value display length)
        """
        self.config = config or AnalysisConfig()
        self.logger = get_inspection_logger(__name__)

        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Set up custom paragraph styles for the PDF."""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            spaceAfter=24,
            alignment=TA_CENTER,
            textColor=colors.darkslategray
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=15,
            spaceBefore=18,
            spaceAfter=10,
            textColor=colors.darkslategray
        ))

        self.styles.add(ParagraphStyle(
            name='ColumnHeader',
            parent=self.styles['Heading3'],
            fontSize=12,
            spaceBefore=10,
            spaceAfter=6,
            textColor=colors.dimgray
        ))

        self.styles.add(ParagraphStyle(
            name='Metric',
            parent=self.styles['Normal'],
            fontSize=10,
            spaceBefore=2,
            spaceAfter=2,
            leftIndent=20
        ))

        self.styles.add(ParagraphStyle(
            name='Hint',
            parent=self.styles['Normal'],
            textColor=colors.darkorange,
            fontSize=10,
            fontName='Helvetica-Oblique'
        ))

        self.styles.add(ParagraphStyle(
            name='Warning',
            parent=self.styles['Normal'],
            textColor=colors.orange,
            fontSize=10,
            fontName='Helvetica-Oblique'
        ))

    @log_operation("generate_pdf_report")
    def generate_report(self, report: InspectionReport, output_path: Union[str, Path]) -> Path:
        """Generate a PDF report.

        Args:
            report: Inspection report
            output_path: Destination file

        Returns:
            Path to the generated PDF file
        """
        report_path = Path(output_path).expanduser()
        report_path.parent.mkdir(parents=True, exist_ok=True)

        doc = SimpleDocTemplate(
            str(report_path),
            pagesize=A4,
            rightMargin=60,
            leftMargin=60,
            topMargin=60,
            bottomMargin=40,
            title=f"Spreadsheet Report: {report.file_name}",
        )
        doc.build(self.build_story(report))

        self.logger.info(f"PDF report written to {report_path}")
        return report_path

    def build_story(self, report: InspectionReport) -> List:
        """Build the list of flowables for a report."""
        story = []
        story.extend(self._create_header(report))
        story.extend(self._create_sheet_list(report))

        if report.sheet_report is not None:
            story.extend(self._create_sheet_analysis(report))

        if report.image_report is not None:
            story.extend(self._create_images(report.image_report))

        if report.cross_sheet is not None:
            story.extend(self._create_cross_sheet(report.cross_sheet))

        if report.warnings:
            story.append(Paragraph("Warnings", self.styles['SectionHeader']))
            for warning in report.warnings:
                story.append(Paragraph(f"&bull; {escape(warning)}", self.styles['Warning']))

        return story

    def _create_header(self, report: InspectionReport) -> List:
        story = [Paragraph("Spreadsheet Report", self.styles['CustomTitle'])]

        file_info_data = [
            ['File:', report.file_name],
            ['Generated:', report.generated_at.strftime('%Y-%m-%d %H:%M:%S')],
        ]
        if report.selected_sheet is not None:
            file_info_data.append(['Sheet:', str(report.selected_sheet)])

        file_info_table = Table(file_info_data, colWidths=[1.3*inch, 4.5*inch])
        file_info_table.setStyle(TableStyle(KEY_VALUE_STYLE))

        story.append(file_info_table)
        story.append(Spacer(1, 12))
        return story

    def _create_sheet_list(self, report: InspectionReport) -> List:
        story = [Paragraph("Available Sheets", self.styles['SectionHeader'])]

        sheet_data = [['Index', 'Name']]
        for sheet in report.sheets:
            sheet_data.append([str(sheet.index), sheet.name])

        sheet_table = Table(sheet_data, colWidths=[0.8*inch, 5*inch])
        sheet_table.setStyle(TableStyle(HEADER_ROW_STYLE))

        for row, sheet in enumerate(report.sheets, 1):
            if sheet == report.selected_sheet:
                sheet_table.setStyle(TableStyle([
                    ('TEXTCOLOR', (0, row), (-1, row), colors.darkgreen),
                    ('FONTNAME', (0, row), (-1, row), 'Helvetica-Bold'),
                ]))

        story.append(sheet_table)
        story.append(Spacer(1, 12))
        return story

    def _create_sheet_analysis(self, report: InspectionReport) -> List:
        sheet_report = report.sheet_report
        sheet_name = report.selected_sheet.name if report.selected_sheet else ""

        story = [
            Paragraph(f"Sheet Analysis: {escape(sheet_name)}", self.styles['SectionHeader']),
            Paragraph(f"Total rows (excluding header): {sheet_report.total_rows:,}", self.styles['Normal']),
            Spacer(1, 6),
        ]

        for column in sheet_report.columns:
            story.append(KeepTogether(self._create_column(column)))
            story.append(HRFlowable(width="100%", thickness=0.5, lineCap='round', color=colors.lightgrey))

        return story

    def _create_column(self, column: ColumnProfile) -> List:
        content = [Paragraph(escape(column.name), self.styles['ColumnHeader'])]

        metrics_data = [
            ['Filled', f"{column.filled} / {column.total} ({format_percent(column.percent)}%)"],
            ['Distinct', str(column.distinct_count)],
        ]
        metrics_table = Table(metrics_data, colWidths=[1.3*inch, 2.5*inch])
        metrics_table.setStyle(TableStyle(KEY_VALUE_STYLE))
        content.append(metrics_table)

        if column.image_hint:
            content.append(Paragraph("Images may be embedded as drawings (use --images)", self.styles['Hint']))

        if column.values:
            label = f"Top {len(column.values)} (of {column.distinct_count}):" if column.has_more else "Values:"
            content.append(Spacer(1, 4))
            content.append(Paragraph(label, self.styles['Normal']))
            for value, occurrences in column.values:
                content.append(Paragraph(f"&bull; {self._display(value)} ({occurrences})", self.styles['Metric']))
            if column.has_more:
                content.append(Paragraph(f"<i>{ELLIPSIS} and {column.remaining} more</i>", self.styles['Metric']))

        content.append(Spacer(1, 6))
        return content

    def _create_images(self, images: ImageReport) -> List:
        story = [
            Paragraph("Images in Sheet", self.styles['SectionHeader']),
            Paragraph(f"Total images: {images.total}", self.styles['Normal']),
        ]
        if images.total == 0:
            return story

        image_data = [['Column', 'Images']]
        for column, count in images.by_column.items():
            image_data.append([column, str(count)])

        image_table = Table(image_data, colWidths=[1.3*inch, 1.3*inch])
        image_table.setStyle(TableStyle(HEADER_ROW_STYLE))

        story.append(Spacer(1, 6))
        story.append(image_table)
        story.append(Spacer(1, 6))
        story.append(Paragraph(f"Rows with images: {images.rows_with_images}", self.styles['Normal']))

        if images.extraction is not None:
            extraction = images.extraction
            story.append(Paragraph(
                f"Extracted {extraction.extracted} image(s) to {escape(str(extraction.directory))}"
                + (f", {extraction.failed} failed" if extraction.failed else ""),
                self.styles['Normal']
            ))

        return story

    def _create_cross_sheet(self, summary: CrossSheetSummary) -> List:
        story = [
            Paragraph("Cross-Sheet References", self.styles['SectionHeader']),
            Paragraph(f"Source column: {escape(summary.source_column)}", self.styles['Normal']),
            Paragraph(
                f"Values found: {summary.found} / {summary.total} ({format_percent(summary.percent)}%)",
                self.styles['Normal']
            ),
        ]
        if summary.partial:
            story.append(Paragraph(
                f"Partial result: only the first {summary.row_limit} rows of each target sheet were checked.",
                self.styles['Warning']
            ))

        if summary.matches:
            match_data = [['Sheet', 'Column', 'Matches']]
            for match in summary.matches:
                match_data.append([str(match.sheet), match.column, str(match.count)])

            match_table = Table(match_data, colWidths=[2.6*inch, 2*inch, 1*inch])
            match_table.setStyle(TableStyle(HEADER_ROW_STYLE + [('ALIGN', (2, 1), (2, -1), 'RIGHT')]))

            story.append(Spacer(1, 6))
            story.append(match_table)

        return story

    def _display(self, value: Any) -> str:
        return escape(truncate_value(value, self.config.value_display_length))
