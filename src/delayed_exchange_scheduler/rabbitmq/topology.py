"""RabbitMQTopologyDeclarator — ITopologyDeclarator over aio-pika."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aio_pika

from ..topology import (
    DELAYED_TYPE_ARGUMENT,
    BindingHandle,
    ExchangeHandle,
    QueueHandle,
    TopologyOptions,
)
from .errors import BROKER_ERRORS, translate

if TYPE_CHECKING:
    from ..topology import ExchangeType
    from .connection import RabbitMQConnectionManager

logger = logging.getLogger(__name__)


class RabbitMQTopologyDeclarator:
    """RabbitMQ adapter implementing ITopologyDeclarator.

    Every method issues its declare/bind on each call; RabbitMQ treats an
    identical redeclaration as a no-op. Delayed exchanges are declared with
    type ``x-delayed-message`` and the routing kind in ``x-delayed-type``.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        options: TopologyOptions | None = None,
    ) -> None:
        """Configure declarator.

        Args:
            connection: Shared connection manager.
            options: Durability flags applied to every exchange and queue.
        """
        self._connection = connection
        self._options = options or TopologyOptions()

    async def declare_exchange(
        self,
        name: str,
        kind: ExchangeType,
        *,
        delayed: bool = False,
    ) -> ExchangeHandle:
        await self._connection.connect()
        exchange_type: aio_pika.ExchangeType = aio_pika.ExchangeType(kind.value)
        arguments: dict[str, Any] | None = None
        if delayed:
            exchange_type = aio_pika.ExchangeType.X_DELAYED_MESSAGE
            arguments = {DELAYED_TYPE_ARGUMENT: kind.value}
        try:
            await self._connection.channel.declare_exchange(
                name,
                exchange_type,
                durable=self._options.durable,
                auto_delete=self._options.auto_delete,
                arguments=arguments,
            )
        except BROKER_ERRORS as e:
            raise translate(e, "declare_exchange", name) from e
        logger.debug("Declared exchange %s (%s, delayed=%s)", name, kind.value, delayed)
        return ExchangeHandle(
            name=name,
            kind=kind,
            delayed=delayed,
            durable=self._options.durable,
            auto_delete=self._options.auto_delete,
        )

    async def declare_queue(self, name: str) -> QueueHandle:
        await self._connection.connect()
        try:
            await self._connection.channel.declare_queue(
                name,
                durable=self._options.durable,
                auto_delete=self._options.auto_delete,
            )
        except BROKER_ERRORS as e:
            raise translate(e, "declare_queue", name) from e
        logger.debug("Declared queue %s", name)
        return QueueHandle(
            name=name,
            durable=self._options.durable,
            auto_delete=self._options.auto_delete,
        )

    async def bind(
        self,
        source: ExchangeHandle,
        destination: ExchangeHandle | QueueHandle,
        routing_key: str,
    ) -> BindingHandle:
        await self._connection.connect()
        channel = self._connection.channel
        to_queue = isinstance(destination, QueueHandle)
        target = f"{source.name}->{destination.name}"
        try:
            # ensure=False builds a reference without another declare round trip.
            if to_queue:
                queue = await channel.get_queue(destination.name, ensure=False)
                await queue.bind(source.name, routing_key=routing_key)
            else:
                exchange = await channel.get_exchange(destination.name, ensure=False)
                await exchange.bind(source.name, routing_key=routing_key)
        except BROKER_ERRORS as e:
            raise translate(e, "bind", target) from e
        logger.debug("Bound %s with %r", target, routing_key)
        return BindingHandle(
            source=source.name,
            destination=destination.name,
            routing_key=routing_key,
            to_queue=to_queue,
        )
