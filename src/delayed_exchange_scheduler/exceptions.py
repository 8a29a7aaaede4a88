"""Exceptions raised by the delayed-exchange scheduler."""

from __future__ import annotations

CANCELLATION_NOT_SUPPORTED_MESSAGE = (
    "Future message cancellation is not supported by the delayed exchange "
    "scheduler; use a scheduler backed by a timer store instead."
)


class SchedulerError(Exception):
    """Root exception for the delayed-exchange scheduler."""


class InvalidArgumentError(SchedulerError, ValueError):
    """Raised when a caller passes an argument the scheduler cannot use."""


class SchedulingNotSupportedError(SchedulerError, NotImplementedError):
    """Raised when a scheduling feature is not available on this scheduler."""


class CancellationNotSupportedError(SchedulingNotSupportedError):
    """Raised on every cancellation attempt.

    A message published into a delay exchange is held by the broker and
    cannot be retracted from the producer side.
    """

    def __init__(self, message: str = CANCELLATION_NOT_SUPPORTED_MESSAGE) -> None:
        super().__init__(message)


class CancellationKeyNotSupportedError(
    CancellationNotSupportedError, InvalidArgumentError
):
    """Raised when ``schedule_at`` is given a cancellation key."""

    def __init__(self, cancellation_key: str) -> None:
        self.cancellation_key = cancellation_key
        super().__init__()


class MessagingError(SchedulerError):
    """Base class for all messaging-related infrastructure errors."""


class MessagingSerializationError(MessagingError):
    """Raised when message serialization or deserialization fails."""


class BrokerOperationError(MessagingError):
    """Raised when the broker rejects a declaration, binding or publish.

    ``operation`` names the broker call (``declare_exchange``, ``bind``, ...)
    and ``target`` the object it was issued against.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        target: str | None = None,
    ) -> None:
        self.operation = operation
        self.target = target
        super().__init__(message)


class MessagingConnectionError(BrokerOperationError):
    """Raised when connectivity to the message broker fails."""


class TopologyConflictError(BrokerOperationError):
    """Raised when an object is redeclared with different parameters."""


class DelayedExchangeUnavailableError(BrokerOperationError):
    """Raised when the broker does not know the ``x-delayed-message`` type."""
