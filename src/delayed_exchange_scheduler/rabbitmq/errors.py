"""Translation of aio-pika / aiormq failures into scheduler exceptions."""

from __future__ import annotations

from aio_pika.exceptions import AMQPError

from ..exceptions import (
    BrokerOperationError,
    DelayedExchangeUnavailableError,
    MessagingConnectionError,
    TopologyConflictError,
)
from ..topology import DELAYED_EXCHANGE_TYPE

BROKER_ERRORS = (AMQPError, ConnectionError, OSError)

PRECONDITION_FAILED = 406

PLUGIN_MISSING_MESSAGE = (
    "RabbitMQ rejected exchange type 'x-delayed-message' while declaring "
    "{target!r}; enable the rabbitmq_delayed_message_exchange plugin"
)


def _reply(exc: BaseException) -> tuple[int | None, str]:
    """Return the AMQP reply code and text carried by a close frame, if any."""
    for arg in exc.args:
        reply_text = getattr(arg, "reply_text", None)
        if reply_text:
            return getattr(arg, "reply_code", None), str(reply_text)
    return None, str(exc)


def translate(exc: BaseException, operation: str, target: str) -> BrokerOperationError:
    """Map a broker-side failure to the matching BrokerOperationError."""
    code, text = _reply(exc)
    if (
        operation == "declare_exchange"
        and "invalid exchange type" in text.lower()
        and DELAYED_EXCHANGE_TYPE in text
    ):
        return DelayedExchangeUnavailableError(
            PLUGIN_MISSING_MESSAGE.format(target=target),
            operation=operation,
            target=target,
        )
    if code == PRECONDITION_FAILED or "PRECONDITION_FAILED" in text:
        return TopologyConflictError(text, operation=operation, target=target)
    if isinstance(exc, OSError):
        return MessagingConnectionError(text, operation=operation, target=target)
    return BrokerOperationError(text, operation=operation, target=target)
