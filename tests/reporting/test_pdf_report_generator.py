"""Tests for PDF report generation."""

from pathlib import Path

from reportlab.platypus import KeepTogether, Paragraph, Table

from sheet_inspect.reporting import PDFReportGenerator, ReportBuilder


def paragraph_texts(story):
    texts = []
    for flowable in story:
        if isinstance(flowable, KeepTogether):
            texts.extend(paragraph_texts(flowable._content))
        elif isinstance(flowable, Paragraph):
            texts.append(flowable.text)
    return texts


class TestPDFReportGenerator:
    """Test cases for PDFReportGenerator."""

    def test_custom_styles(self):
        """Test that the custom paragraph styles are registered."""
        generator = PDFReportGenerator()

        for name in ("CustomTitle", "SectionHeader", "ColumnHeader", "Metric", "Hint", "Warning"):
            assert name in generator.styles

    def test_story_sections(self, full_report):
        """Test that every report section is laid out."""
        texts = paragraph_texts(PDFReportGenerator().build_story(full_report))

        assert "Spreadsheet Report" in texts
        assert "Available Sheets" in texts
        assert "Sheet Analysis: Orders" in texts
        assert "Images in Sheet" in texts
        assert "Cross-Sheet References" in texts
        assert "Warnings" in texts
        assert "Values found: 3 / 4 (75%)" in texts

    def test_values_are_escaped(self, full_report):
        """Test that markup characters in values do not break paragraphs."""
        texts = paragraph_texts(PDFReportGenerator().build_story(full_report))

        assert "&bull; Alice &lt;admin&gt; (2)" in texts

    def test_sheet_list_only(self, sheets):
        """Test a story with just the header and the sheet table."""
        story = PDFReportGenerator().build_story(ReportBuilder("book.xlsx", sheets).build())
        tables = [flowable for flowable in story if isinstance(flowable, Table)]

        assert len(tables) == 2
        assert "Sheet Analysis: Orders" not in paragraph_texts(story)

    def test_generate_report(self, full_report, temp_dir: Path):
        """Test writing a PDF file."""
        path = PDFReportGenerator().generate_report(full_report, temp_dir / "pdf" / "orders.pdf")

        assert path.exists()
        assert path.read_bytes().startswith(b"%PDF")
