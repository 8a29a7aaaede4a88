"""RabbitMQRawPublisher — IRawPublisher with publisher confirms."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aio_pika

from ..serialization import EnvelopeSerializer
from .errors import BROKER_ERRORS, translate

if TYPE_CHECKING:
    from ..envelope import ScheduledEnvelope
    from ..topology import ExchangeHandle
    from .connection import RabbitMQConnectionManager

logger = logging.getLogger(__name__)


def build_message(
    envelope: ScheduledEnvelope, serializer: EnvelopeSerializer
) -> aio_pika.Message:
    """Turn a ScheduledEnvelope into an AMQP message carrying ``x-delay``."""
    message = envelope.message
    return aio_pika.Message(
        body=serializer.serialize(message),
        content_type=serializer.content_type,
        delivery_mode=aio_pika.DeliveryMode(int(envelope.delivery_mode)),
        headers=envelope.headers,
        message_id=message.message_id,
        correlation_id=message.correlation_id,
        timestamp=message.timestamp,
        type=message.event_type,
    )


class RabbitMQRawPublisher:
    """RabbitMQ adapter implementing IRawPublisher.

    Publishes to an exchange by name; the exchange must already be declared.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        serializer: EnvelopeSerializer | None = None,
    ) -> None:
        """Configure publisher.

        Args:
            connection: Shared connection manager.
            serializer: Used to serialize envelopes; default EnvelopeSerializer().
        """
        self._connection = connection
        self._serializer = serializer or EnvelopeSerializer()

    async def publish(
        self,
        exchange: ExchangeHandle,
        routing_key: str,
        *,
        mandatory: bool,
        immediate: bool,
        envelope: ScheduledEnvelope,
    ) -> None:
        await self._connection.connect()
        message = build_message(envelope, self._serializer)
        try:
            target = await self._connection.channel.get_exchange(
                exchange.name, ensure=False
            )
            await target.publish(
                message,
                routing_key=routing_key,
                mandatory=mandatory,
                immediate=immediate,
            )
        except BROKER_ERRORS as e:
            raise translate(e, "publish", exchange.name) from e
        logger.debug(
            "Published %s to %s (x-delay=%d ms)",
            envelope.message.message_id,
            exchange.name,
            envelope.delay_ms,
        )

    async def health_check(self) -> bool:
        """Return True if the connection is healthy."""
        return await self._connection.health_check()
