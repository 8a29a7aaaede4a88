"""Wiring helper for a RabbitMQ-backed DelayedExchangeScheduler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..orchestrator import DelayedPublishOrchestrator
from ..scheduler import DelayedExchangeScheduler
from .publisher import RabbitMQRawPublisher
from .topology import RabbitMQTopologyDeclarator

if TYPE_CHECKING:
    import asyncio

    from ..ports.conventions import IDeliveryModeStrategy, INamingConventions
    from ..serialization import EnvelopeSerializer
    from ..topology import TopologyOptions
    from .connection import RabbitMQConnectionManager


def create_rabbitmq_scheduler(
    connection: RabbitMQConnectionManager,
    *,
    conventions: INamingConventions | None = None,
    delivery_mode_strategy: IDeliveryModeStrategy | None = None,
    serializer: EnvelopeSerializer | None = None,
    options: TopologyOptions | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
    blocking_timeout: float | None = None,
) -> DelayedExchangeScheduler:
    """Build a scheduler whose topology and publishes go through *connection*.

    For blocking use without *loop*, release the connection with
    ``scheduler.close(connection.close())`` so it is closed on the loop that
    opened it.
    """
    orchestrator = DelayedPublishOrchestrator(
        RabbitMQTopologyDeclarator(connection, options=options),
        RabbitMQRawPublisher(connection, serializer=serializer),
        conventions=conventions,
        delivery_mode_strategy=delivery_mode_strategy,
    )
    return DelayedExchangeScheduler(
        orchestrator, loop=loop, blocking_timeout=blocking_timeout
    )
