"""Correlation ID management for scheduled messages."""

from __future__ import annotations

from contextvars import ContextVar

# ContextVar for correlation/causation tracking across async boundaries.
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_causation_id: ContextVar[str | None] = ContextVar("causation_id", default=None)


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


def get_causation_id() -> str | None:
    """Get current causation ID from context."""
    return _causation_id.get()


def set_causation_id(causation_id: str | None) -> None:
    """Set causation ID in context."""
    _causation_id.set(causation_id)

