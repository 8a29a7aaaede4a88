"""Tests for scheduler exceptions."""

from __future__ import annotations

from delayed_exchange_scheduler.exceptions import (
    BrokerOperationError,
    CancellationKeyNotSupportedError,
    CancellationNotSupportedError,
    DelayedExchangeUnavailableError,
    InvalidArgumentError,
    MessagingConnectionError,
    MessagingError,
    SchedulerError,
    TopologyConflictError,
)


def test_broker_errors_are_messaging_errors() -> None:
    for cls in (
        MessagingConnectionError,
        TopologyConflictError,
        DelayedExchangeUnavailableError,
    ):
        assert issubclass(cls, BrokerOperationError)
    assert issubclass(BrokerOperationError, MessagingError)
    assert issubclass(MessagingError, SchedulerError)


def test_broker_error_carries_operation_and_target() -> None:
    e = BrokerOperationError("rejected", operation="bind", target="A->B")
    assert e.operation == "bind"
    assert e.target == "A->B"
    assert str(e) == "rejected"


def test_invalid_argument_is_value_error() -> None:
    assert issubclass(InvalidArgumentError, ValueError)


def test_cancellation_errors_are_not_implemented() -> None:
    assert issubclass(CancellationNotSupportedError, NotImplementedError)
    e = CancellationKeyNotSupportedError("k-1")
    assert isinstance(e, InvalidArgumentError)
    assert "not supported" in str(e)
