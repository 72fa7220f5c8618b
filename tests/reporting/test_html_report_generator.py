"""Tests for HTML report rendering."""

from pathlib import Path

from sheet_inspect.reporting import HTMLReportGenerator, ReportBuilder


class TestHTMLReportGenerator:
    """Test cases for HTMLReportGenerator."""

    def test_document_structure(self, full_report):
        """Test the standalone document skeleton."""
        html = HTMLReportGenerator().render(full_report)

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Spreadsheet Report: orders.xlsx</title>" in html
        assert "<style>" in html
        assert "http" not in html
        assert "Generated by <strong>sheet-inspect</strong>" in html
        assert "2024-03-01 12:00:00" in html
        assert html.rstrip().endswith("</html>")

    def test_sheet_list_marks_selection(self, full_report):
        """Test that the selected sheet is highlighted."""
        html = HTMLReportGenerator().render(full_report)

        assert '<li class="selected"><span class="index">[1]</span> Orders</li>' in html
        assert '<li><span class="index">[2]</span> Shipments</li>' in html

    def test_column_cards(self, full_report):
        """Test column statistics and the progress bar."""
        html = HTMLReportGenerator().render(full_report)

        assert html.count('<div class="column-card">') == 3
        assert "<strong>Filled:</strong> 3 / 4 (75%)" in html
        assert 'style="width: 75%"' in html
        assert "… and 1 more" in html
        assert '<p class="hint">Images may be embedded as drawings (use --images)</p>' in html

    def test_values_are_escaped(self, full_report):
        """Test that cell values cannot inject markup."""
        html = HTMLReportGenerator().render(full_report)

        assert "Alice &lt;admin&gt;" in html
        assert "Alice <admin>" not in html

    def test_images_and_cross_sheet(self, full_report):
        """Test the image and cross-sheet sections."""
        html = HTMLReportGenerator().render(full_report)

        assert "<strong>Column D:</strong> 2 image(s)" in html
        assert "<strong>Rows with images:</strong> 2" in html
        assert "<strong>Extracted:</strong> 2 image(s)" in html
        assert "<strong>Values Found:</strong> 3 / 4 (75%)" in html
        assert "<tr><td>Shipments (2)</td><td>Order</td><td>3</td></tr>" in html

    def test_warnings(self, full_report):
        """Test that warnings are escaped list items."""
        html = HTMLReportGenerator().render(full_report)

        assert "<li>Skipping sheet &#x27;Notes&#x27; (3): column &#x27;Order&#x27; not found</li>" in html

    def test_sheet_list_only(self, sheets):
        """Test a report without analysis sections."""
        html = HTMLReportGenerator().render(ReportBuilder("book.xlsx", sheets).build())

        assert "Available Sheets" in html
        assert "Sheet Analysis" not in html
        assert "Cross-Sheet References" not in html

    def test_generate_report(self, full_report, temp_dir: Path):
        """Test writing the document to a nested path."""
        path = HTMLReportGenerator().generate_report(full_report, temp_dir / "reports" / "orders.html")

        assert path.exists()
        assert "Sheet Analysis: Orders" in path.read_text(encoding="utf-8")
