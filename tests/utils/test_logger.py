"""Tests for logging setup and the inspection logger adapter."""

import json
import sys
import logging
import logging.handlers
from pathlib import Path

import pytest

from sheet_inspect.models.data_models import LoggingConfig
from sheet_inspect.utils.correlation import CorrelationContext
from sheet_inspect.utils.logger import (
    InspectionLoggerAdapter,
    JSONFormatter,
    LoggerManager,
)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="sheet_inspect.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test cases for JSONFormatter."""

    def test_basic_fields(self):
        """Test that the standard fields are present."""
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "sheet_inspect.test"
        assert entry["message"] == "hello"
        assert entry["line"] == 10
        assert "timestamp" in entry

    def test_context_fields(self):
        """Test that inspection context attributes are copied."""
        record = make_record(sheet_name="Orders", event_type="sheet_analysis", unrelated="x")
        entry = json.loads(JSONFormatter().format(record))

        assert entry["sheet_name"] == "Orders"
        assert entry["event_type"] == "sheet_analysis"
        assert "unrelated" not in entry

    def test_correlation_id(self):
        """Test that the active correlation ID is included."""
        with CorrelationContext("abc123"):
            entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["correlation_id"] == "abc123"

    def test_non_ascii_message(self):
        """Test that umlauts are written as-is."""
        output = JSONFormatter().format(make_record("Übersicht"))

        assert "Übersicht" in output

    def test_exception(self):
        """Test that exception information is formatted."""
        try:
            raise ValueError("broken")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: broken" in entry["exception"]


class TestInspectionLoggerAdapter:
    """Test cases for InspectionLoggerAdapter."""

    @pytest.fixture
    def adapter(self):
        return InspectionLoggerAdapter(logging.getLogger("sheet_inspect.adapter_test"), {"file_path": "a.xlsx"})

    def test_context_is_added(self, adapter, caplog):
        """Test that adapter context ends up on the record."""
        with caplog.at_level(logging.INFO, logger="sheet_inspect.adapter_test"):
            adapter.info("plain message")

        assert caplog.records[0].file_path == "a.xlsx"

    def test_log_sheet_analysis(self, adapter, caplog):
        """Test logging a finished sheet analysis."""
        with caplog.at_level(logging.INFO, logger="sheet_inspect.adapter_test"):
            adapter.log_sheet_analysis("Orders", 4, 3)

        record = caplog.records[0]
        assert record.getMessage() == "Analyzed sheet 'Orders': 4 rows, 3 columns"
        assert record.event_type == "sheet_analysis"
        assert record.column_count == 3

    def test_log_cross_sheet_skip(self, adapter, caplog):
        """Test logging a skipped target sheet."""
        with caplog.at_level(logging.INFO, logger="sheet_inspect.adapter_test"):
            adapter.log_cross_sheet_skip("Notes", 3, "column 'Order' not found")

        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert record.sheet_index == 3

    def test_log_image_extraction(self, adapter, caplog):
        """Test that failed extractions raise the level to warning."""
        with caplog.at_level(logging.INFO, logger="sheet_inspect.adapter_test"):
            adapter.log_image_extraction(Path("out"), 2, 0)
            adapter.log_image_extraction(Path("out"), 2, 1)

        assert caplog.records[0].levelno == logging.INFO
        assert caplog.records[1].levelno == logging.WARNING
        assert caplog.records[1].getMessage().endswith("1 failed")

    def test_log_error(self, adapter, caplog):
        """Test logging an inspection error with context."""
        with caplog.at_level(logging.INFO, logger="sheet_inspect.adapter_test"):
            adapter.log_error("sheet_not_found", "no such sheet", file_path=Path("b.xlsx"),
                              sheet_name="X", exc_info=False)

        record = caplog.records[0]
        assert record.levelno == logging.ERROR
        assert record.error_type == "sheet_not_found"
        assert record.sheet_name == "X"
        # Adapter context overrides per-call values
        assert record.file_path == "a.xlsx"


class TestLoggerManager:
    """Test cases for LoggerManager."""

    def test_get_inspection_logger_is_cached(self):
        """Test that adapters are reused per name and context."""
        manager = LoggerManager()

        first = manager.get_inspection_logger("x", {"a": 1})
        assert manager.get_inspection_logger("x", {"a": 1}) is first
        assert manager.get_inspection_logger("x") is not first

    def test_setup_console_only(self, restore_root_logger):
        """Test the default console setup."""
        manager = LoggerManager()
        manager.setup_logging(LoggingConfig(level="INFO"))

        root = restore_root_logger
        assert manager.configured
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
        assert logging.getLogger("openpyxl").level == logging.WARNING

    def test_setup_file_and_structured(self, temp_dir: Path, restore_root_logger):
        """Test file and structured JSON handlers."""
        log_file = temp_dir / "logs" / "inspect.log"
        config = LoggingConfig(
            level="DEBUG",
            console_enabled=False,
            file_enabled=True,
            file_path=log_file,
            structured_enabled=True,
        )
        LoggerManager().setup_logging(config)

        root = restore_root_logger
        assert len(root.handlers) == 2
        assert all(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)

        logging.getLogger("sheet_inspect.file_test").info("written to disk")
        for handler in root.handlers:
            handler.flush()

        assert "written to disk" in log_file.read_text(encoding="utf-8")
        lines = log_file.with_suffix(".json").read_text(encoding="utf-8").splitlines()
        assert any(json.loads(line)["message"] == "written to disk" for line in lines)
