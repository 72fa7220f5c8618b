"""Logging decorators and context managers for operation tracking.

Operations log a START record, then SUCCESS or ERROR with their duration,
all tagged with the current correlation ID.
"""

import functools
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, Optional, Union

from .correlation import CorrelationContext


@dataclass
class OperationTiming:
    """Duration and metadata of one logged operation."""

    operation_name: str
    correlation_id: Optional[str]
    start_time: float = field(default_factory=time.perf_counter)
    duration_ms: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def complete(self) -> None:
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value


def _shorten(value: Any, limit: int = 200) -> str:
    text = str(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _describe_args(args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Summarize call arguments for logging without dumping whole row sets."""
    described: Dict[str, Any] = {}
    if args:
        described["args_count"] = len(args)
        for i, arg in enumerate(args[:3]):
            described[f"arg_{i}"] = _shorten(arg)
    for key, value in list(kwargs.items())[:5]:
        described[key] = _shorten(value)
    return described


def log_operation(operation_name: str, log_args: bool = False) -> Callable:
    """Decorator for automatic operation logging.

    Args:
        operation_name: Name of the operation being logged
        log_args: Whether to log a summary of the call arguments

    Returns:
        Decorated function with logging
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(func.__module__)
            timing = OperationTiming(operation_name, CorrelationContext.get_correlation_id())

            start_data: Dict[str, Any] = {"operation": operation_name, "status": "START"}
            if log_args:
                start_data["args"] = _describe_args(args, kwargs)
            logger.debug("Operation started", extra={"structured": start_data})

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                timing.complete()
                logger.debug(
                    "Operation failed",
                    extra={"structured": {
                        "operation": operation_name,
                        "status": "ERROR",
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                        "duration_ms": timing.duration_ms,
                    }},
                )
                raise

            timing.complete()
            logger.debug(
                "Operation completed successfully",
                extra={"structured": {
                    "operation": operation_name,
                    "status": "SUCCESS",
                    "duration_ms": timing.duration_ms,
                }},
            )
            return result

        return wrapper
    return decorator


@contextmanager
def operation_context(
    operation_name: str,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    **metadata: Any,
) -> Generator[OperationTiming, None, None]:
    """Context manager for operation tracking with logging.

    Args:
        operation_name: Name of the operation
        logger: Logger to use (defaults to this module's logger)
        **metadata: Additional metadata to include

    Yields:
        OperationTiming for the operation
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    timing = OperationTiming(operation_name, CorrelationContext.get_correlation_id())
    for key, value in metadata.items():
        timing.add_metadata(key, value)

    logger.debug(
        "Operation context started",
        extra={"structured": {"operation": operation_name, "status": "START", **metadata}},
    )

    try:
        yield timing
    except Exception as e:
        timing.complete()
        logger.warning(
            f"{operation_name} failed after {timing.duration_ms:.1f}ms: {e}",
            extra={"structured": {
                "operation": operation_name,
                "status": "ERROR",
                "error_type": type(e).__name__,
                "error_message": str(e),
                "duration_ms": timing.duration_ms,
                **timing.metadata,
            }},
        )
        raise

    timing.complete()
    logger.debug(
        "Operation context completed successfully",
        extra={"structured": {
            "operation": operation_name,
            "status": "SUCCESS",
            "duration_ms": timing.duration_ms,
            **timing.metadata,
        }},
    )
