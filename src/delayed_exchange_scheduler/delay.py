"""Delay encoding for the ``x-delay`` header."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Union

from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

# Largest delay the delayed message exchange plugin accepts.
MAX_DELAY_MS = 2**32 - 1

_ONE_MS = timedelta(milliseconds=1)

DelayLike = Union[timedelta, int, float]


def encode_delay(delay: DelayLike) -> int:
    """Convert *delay* to whole milliseconds.

    ``timedelta`` values are used as-is; ints and floats are seconds.
    Sub-millisecond remainders are truncated. Delays at or below zero encode
    as ``0`` so a target time that has already passed is delivered at once.

    Raises:
        InvalidArgumentError: the value is not a duration, or is longer than
            the plugin maximum of ``2**32 - 1`` ms.
    """
    if isinstance(delay, bool) or not isinstance(delay, (timedelta, int, float)):
        raise InvalidArgumentError(
            f"delay must be a timedelta or a number of seconds, got {delay!r}"
        )
    if not isinstance(delay, timedelta):
        try:
            delay = timedelta(seconds=delay)
        except (OverflowError, ValueError) as e:
            raise InvalidArgumentError(f"delay {delay!r} is out of range") from e

    if delay <= timedelta(0):
        if delay < timedelta(0):
            logger.debug("Negative delay %s clamped to 0 ms", delay)
        return 0

    delay_ms = delay // _ONE_MS
    if delay_ms > MAX_DELAY_MS:
        raise InvalidArgumentError(
            f"delay of {delay_ms} ms exceeds the maximum of {MAX_DELAY_MS} ms"
        )
    return delay_ms


def delay_until(execute_at: datetime, *, now: datetime | None = None) -> timedelta:
    """Return the time left until *execute_at*; naive datetimes are UTC."""
    if execute_at.tzinfo is None:
        execute_at = execute_at.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return execute_at - now
