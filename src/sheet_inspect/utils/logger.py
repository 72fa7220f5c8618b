"""Logging utilities for the spreadsheet inspector.

This module provides logging setup with support for:
- Structured JSON logging
- Console (stderr) and rotating file handlers
- Domain-specific logging methods for inspection events
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sheet_inspect.models.data_models import LoggingConfig
from sheet_inspect.utils.correlation import CorrelationContext


class JSONFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    CONTEXT_FIELDS = (
        "event_type", "file_path", "sheet_name", "sheet_index", "column",
        "error_type", "structured",
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "correlation_id": CorrelationContext.get_correlation_id(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for name in self.CONTEXT_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class InspectionLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds inspection context to log records."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        if "extra" not in kwargs:
            kwargs["extra"] = {}

        kwargs["extra"].update(self.extra)
        return msg, kwargs

    def log_sheet_analysis(self, sheet_name: str, total_rows: int, column_count: int) -> None:
        """Log completion of a sheet statistics run.

        Args:
            sheet_name: Name of the analyzed sheet
            total_rows: Number of data rows
            column_count: Number of profiled columns
        """
        extra = {
            "event_type": "sheet_analysis",
            "sheet_name": sheet_name,
            "total_rows": total_rows,
            "column_count": column_count,
        }
        self.info(
            f"Analyzed sheet '{sheet_name}': {total_rows} rows, {column_count} columns",
            extra=extra,
        )

    def log_cross_sheet_skip(self, sheet_name: str, sheet_index: int, reason: str) -> None:
        """Log a target sheet that was left out of a cross-sheet check."""
        extra = {
            "event_type": "cross_sheet_skip",
            "sheet_name": sheet_name,
            "sheet_index": sheet_index,
            "reason": reason,
        }
        self.warning(f"Skipping sheet '{sheet_name}' ({sheet_index}): {reason}", extra=extra)

    def log_image_extraction(
        self,
        directory: Union[str, Path],
        extracted: int,
        failed: int,
    ) -> None:
        """Log the outcome of an image extraction run.

        Args:
            directory: Target directory
            extracted: Number of files written
            failed: Number of drawings that could not be written
        """
        extra = {
            "event_type": "image_extraction",
            "directory": str(directory),
            "extracted": extracted,
            "failed": failed,
        }
        message = f"Extracted {extracted} image(s) to {directory}"
        if failed:
            self.warning(f"{message}, {failed} failed", extra=extra)
        else:
            self.info(message, extra=extra)

    def log_error(
        self,
        error_type: str,
        message: str,
        file_path: Optional[Union[str, Path]] = None,
        sheet_name: Optional[str] = None,
        exc_info: bool = True,
    ) -> None:
        """Log an inspection error with context.

        Args:
            error_type: Type of error
            message: Error message
            file_path: Optional workbook path where error occurred
            sheet_name: Optional sheet where error occurred
            exc_info: Whether to include exception information
        """
        extra = {
            "event_type": "inspection_error",
            "error_type": error_type,
        }

        if file_path:
            extra["file_path"] = str(file_path)
        if sheet_name:
            extra["sheet_name"] = sheet_name

        self.error(message, extra=extra, exc_info=exc_info)


class LoggerManager:
    """Manages logger setup and configuration."""

    THIRD_PARTY_LOGGERS = ("pandas", "openpyxl", "PIL", "reportlab", "matplotlib")

    def __init__(self):
        self._configured = False
        self._adapters: Dict[str, InspectionLoggerAdapter] = {}

    @property
    def configured(self) -> bool:
        return self._configured

    def setup_logging(self, config: LoggingConfig) -> None:
        """Set up logging configuration.

        Args:
            config: Logging configuration
        """
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.setLevel(config.log_level)

        if config.console_enabled:
            self._add_handler(logging.StreamHandler(sys.stderr), config)

        if config.file_enabled:
            config.file_path.parent.mkdir(parents=True, exist_ok=True)
            self._add_handler(self._rotating_handler(config.file_path), config)

        if config.structured_enabled:
            structured_path = config.file_path.with_suffix(".json")
            structured_path.parent.mkdir(parents=True, exist_ok=True)
            handler = self._rotating_handler(structured_path)
            handler.setLevel(config.log_level)
            handler.setFormatter(JSONFormatter())
            root_logger.addHandler(handler)

        for name in self.THIRD_PARTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        self._configured = True
        logging.getLogger(__name__).debug(
            "Logging configured: level=%s console=%s file=%s structured=%s",
            config.level, config.console_enabled, config.file_enabled, config.structured_enabled,
        )

    def _add_handler(self, handler: logging.Handler, config: LoggingConfig) -> None:
        handler.setLevel(config.log_level)
        handler.setFormatter(logging.Formatter(fmt=config.format, datefmt="%Y-%m-%d %H:%M:%S"))
        logging.getLogger().addHandler(handler)

    @staticmethod
    def _rotating_handler(path: Path) -> logging.handlers.RotatingFileHandler:
        return logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )

    def get_inspection_logger(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> InspectionLoggerAdapter:
        """Get an inspection logger adapter with context.

        Args:
            name: Logger name
            context: Additional context for all log records

        Returns:
            Inspection logger adapter
        """
        cache_key = f"{name}:{sorted((context or {}).items())}"

        if cache_key not in self._adapters:
            self._adapters[cache_key] = InspectionLoggerAdapter(logging.getLogger(name), context)

        return self._adapters[cache_key]


# Global logger manager instance
logger_manager = LoggerManager()


def setup_logging(config: LoggingConfig) -> None:
    """Set up application logging."""
    logger_manager.setup_logging(config)


def get_inspection_logger(
    name: str,
    context: Optional[Dict[str, Any]] = None,
) -> InspectionLoggerAdapter:
    """Get inspection logger with context.

    Args:
        name: Logger name (typically __name__)
        context: Additional context for log records

    Returns:
        Inspection logger adapter
    """
    return logger_manager.get_inspection_logger(name, context)
