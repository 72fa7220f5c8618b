"""Correlation ID management for tracing one inspection across components.

Every CLI invocation runs inside a correlation context so that log records
written by the reader, the analyzers and the renderers can be grouped.
"""

import contextvars
import uuid
from typing import Optional


class CorrelationContext:
    """Context manager for correlation ID tracking."""

    _context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
        "correlation_id", default=None
    )

    @classmethod
    def set_correlation_id(cls, correlation_id: str) -> None:
        cls._context.set(correlation_id)

    @classmethod
    def get_correlation_id(cls) -> Optional[str]:
        """Get the correlation ID from the current context, if any."""
        return cls._context.get()

    @classmethod
    def generate_correlation_id(cls) -> str:
        """Generate a short inspection ID."""
        return uuid.uuid4().hex[:12]

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or self.generate_correlation_id()
        self.token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self.token = self._context.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.token is not None:
            self._context.reset(self.token)
            self.token = None
