"""Tests for delay encoding."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from delayed_exchange_scheduler.delay import MAX_DELAY_MS, delay_until, encode_delay
from delayed_exchange_scheduler.exceptions import InvalidArgumentError


def test_timedelta_whole_milliseconds_are_exact() -> None:
    assert encode_delay(timedelta(milliseconds=5000)) == 5000
    assert encode_delay(timedelta(days=1, milliseconds=1)) == 86_400_001


def test_seconds_as_numbers() -> None:
    assert encode_delay(5) == 5000
    assert encode_delay(0.25) == 250
    assert encode_delay(0.001) == 1


def test_sub_millisecond_remainder_is_truncated() -> None:
    assert encode_delay(timedelta(microseconds=1999)) == 1


def test_zero_and_negative_clamp_to_zero() -> None:
    assert encode_delay(timedelta(0)) == 0
    assert encode_delay(timedelta(seconds=-30)) == 0
    assert encode_delay(-1.5) == 0


def test_maximum_delay_is_accepted() -> None:
    assert encode_delay(timedelta(milliseconds=MAX_DELAY_MS)) == MAX_DELAY_MS


def test_delay_above_plugin_maximum_raises() -> None:
    with pytest.raises(InvalidArgumentError, match="exceeds the maximum"):
        encode_delay(timedelta(milliseconds=MAX_DELAY_MS + 1))


@pytest.mark.parametrize("value", ["5", None, True, [1], math.nan, math.inf])
def test_non_duration_raises(value: object) -> None:
    with pytest.raises(InvalidArgumentError):
        encode_delay(value)  # type: ignore[arg-type]


def test_huge_float_raises_invalid_argument() -> None:
    with pytest.raises(InvalidArgumentError):
        encode_delay(1e300)


def test_delay_until_with_fixed_now() -> None:
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert delay_until(now + timedelta(seconds=10), now=now) == timedelta(seconds=10)
    assert delay_until(now - timedelta(seconds=10), now=now) == timedelta(seconds=-10)


def test_delay_until_treats_naive_as_utc() -> None:
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    naive_target = datetime(2026, 1, 1, 12, 0, 3)
    assert delay_until(naive_target, now=now) == timedelta(seconds=3)


def test_delay_until_defaults_to_wall_clock() -> None:
    target = datetime.now(timezone.utc) + timedelta(seconds=10)
    remaining = delay_until(target)
    assert timedelta(seconds=9) < remaining <= timedelta(seconds=10)
