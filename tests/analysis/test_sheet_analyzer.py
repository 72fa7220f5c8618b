"""Unit tests for the sheet analyzer."""

import logging

import pytest

from sheet_inspect.analysis.sheet_analyzer import SheetAnalyzer
from sheet_inspect.models.data_models import AnalysisConfig, NoDataError, SheetReport


def profiles(report):
    return {column.name: column for column in report.columns}


@pytest.fixture
def rows() -> list:
    """Ten rows; the Letter column is filled in seven of them."""
    letters = ["a", "a", "a", "b", "b", "c", "c", None, "", None]
    return [
        {"ID": index, "Letter": letter, "Produktbild": None}
        for index, letter in enumerate(letters, 1)
    ]


class TestSheetAnalyzer:
    """Test cases for SheetAnalyzer class."""

    def test_analyze_profiles_every_header(self, rows):
        """Test that every header of the first row is profiled in order."""
        report = SheetAnalyzer().analyze(rows, "Data")

        assert isinstance(report, SheetReport)
        assert report.total_rows == 10
        assert report.headers == ("ID", "Letter", "Produktbild")
        assert [column.name for column in report.columns] == ["ID", "Letter", "Produktbild"]

    def test_fill_statistics(self, rows):
        """Test fill rate, distinct count and ordering of a column."""
        letter = profiles(SheetAnalyzer().analyze(rows))["Letter"]

        assert letter.filled == 7
        assert letter.percent == 70.0
        assert letter.distinct_count == 3
        assert letter.values == (("a", 3), ("b", 2), ("c", 2))

    def test_image_hint_for_empty_image_column(self, rows):
        """Test the hint on an empty column whose header mentions 'bild'."""
        report = SheetAnalyzer().analyze(rows)

        assert profiles(report)["Produktbild"].image_hint
        assert not profiles(report)["Letter"].image_hint

    def test_no_image_hint_when_filled(self):
        """Test that a filled image column carries no hint."""
        report = SheetAnalyzer().analyze([{"BILD": "photo.jpg"}])

        assert not profiles(report)["BILD"].image_hint

    def test_image_keyword_is_configurable(self):
        """Test a custom image keyword."""
        config = AnalysisConfig(image_hint_keyword="photo")
        report = SheetAnalyzer(config).analyze([{"Photo": None, "Bild": None}])

        assert profiles(report)["Photo"].image_hint
        assert not profiles(report)["Bild"].image_hint

    def test_missing_keys_in_later_rows_are_blank(self):
        """Test that rows lacking a header count as not filled."""
        rows = [{"A": 1, "B": 2}, {"A": 3}, {"B": 4, "C": 5}]
        report = SheetAnalyzer().analyze(rows)

        assert report.headers == ("A", "B")
        assert profiles(report)["A"].filled == 2
        assert profiles(report)["B"].filled == 2
        assert "C" not in profiles(report)

    def test_empty_rows_raise_no_data(self):
        """Test that an empty sheet is reported as having no data."""
        with pytest.raises(NoDataError, match="No data found in sheet 'Empty'"):
            SheetAnalyzer().analyze([], "Empty")

    def test_logs_analysis(self, rows, caplog):
        """Test that the analysis is logged."""
        with caplog.at_level(logging.INFO, logger="sheet_inspect.analysis.sheet_analyzer"):
            SheetAnalyzer().analyze(rows, "Data")

        assert "Analyzed sheet 'Data': 10 rows, 3 columns" in caplog.text
