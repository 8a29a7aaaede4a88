"""DelayedPublishOrchestrator — declare the delay topology, then publish.

For a message type ``T`` with exchange name ``E`` and queue name ``Q``::

    E_delayed (x-delayed-message, direct) --#--> E (topic) --#--> Q

The message is published into ``E_delayed`` with an ``x-delay`` header; the
broker holds it for that long and then routes it on to ``E`` as if it had
been published there directly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from .conventions import Conventions, type_name
from .correlation import get_correlation_id
from .delay import encode_delay
from .delivery_mode import DeliveryModeStrategy
from .envelope import ScheduledEnvelope, to_envelope
from .exceptions import InvalidArgumentError
from .instrumentation import get_hook_registry
from .topology import MATCH_ALL_ROUTING_KEY, ExchangeType, delayed_exchange_name

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from .delay import DelayLike
    from .ports.conventions import IDeliveryModeStrategy, INamingConventions
    from .ports.topology import IRawPublisher, ITopologyDeclarator

logger = logging.getLogger("delayed_exchange_scheduler.orchestrator")


async def _gather_or_raise(*aws: Awaitable[Any]) -> list[Any]:
    """Await all of *aws* concurrently; raise the first failure, if any.

    Every awaitable runs to completion before anything is raised, so a
    failure never leaves a sibling broker call running unobserved.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class DelayedPublishOrchestrator:
    """Publishes a message through the delay exchange of its type.

    Declarations are repeated on every call. They are idempotent on the
    broker, which stays the only record of what exists.
    """

    def __init__(
        self,
        topology: ITopologyDeclarator,
        publisher: IRawPublisher,
        *,
        conventions: INamingConventions | None = None,
        delivery_mode_strategy: IDeliveryModeStrategy | None = None,
    ) -> None:
        self._topology = topology
        self._publisher = publisher
        self._conventions = conventions or Conventions()
        self._delivery_modes = delivery_mode_strategy or DeliveryModeStrategy()

    async def publish_delayed(
        self,
        message_type: Any,
        delay: DelayLike,
        message: Any,
    ) -> ScheduledEnvelope:
        """Route *message* to the destination of *message_type* after *delay*.

        Returns the envelope that was published.

        Raises:
            InvalidArgumentError: *message* is None or *delay* is unusable.
            BrokerOperationError: a declaration, binding or publish failed.
                Topology declared before the failure is left in place.
        """
        if message is None:
            raise InvalidArgumentError("message must not be None")
        name = type_name(message_type)
        delay_ms = encode_delay(delay)

        exchange_name = self._conventions.exchange_name(message_type)
        attributes: dict[str, Any] = {
            "message_type": name,
            "exchange": exchange_name,
            "delay_ms": delay_ms,
            "correlation_id": get_correlation_id(),
        }

        async def _run() -> ScheduledEnvelope:
            return await self._publish_delayed(
                message_type, name, exchange_name, delay_ms, message
            )

        return await get_hook_registry().execute_all(
            f"scheduler.publish_delayed.{name}", attributes, _run
        )

    async def _publish_delayed(
        self,
        message_type: Any,
        name: str,
        exchange_name: str,
        delay_ms: int,
        message: Any,
    ) -> ScheduledEnvelope:
        delayed_name = delayed_exchange_name(exchange_name)
        queue_name = self._conventions.queue_name(message_type, "")
        try:
            delayed_exchange, exchange, queue = await _gather_or_raise(
                self._topology.declare_exchange(
                    delayed_name, ExchangeType.DIRECT, delayed=True
                ),
                self._topology.declare_exchange(exchange_name, ExchangeType.TOPIC),
                self._topology.declare_queue(queue_name),
            )
            await _gather_or_raise(
                self._topology.bind(delayed_exchange, exchange, MATCH_ALL_ROUTING_KEY),
                self._topology.bind(exchange, queue, MATCH_ALL_ROUTING_KEY),
            )

            envelope = ScheduledEnvelope(
                message=to_envelope(message, name),
                delivery_mode=self._delivery_modes.delivery_mode_for(message_type),
                delay_ms=delay_ms,
            )
            await self._publisher.publish(
                delayed_exchange,
                MATCH_ALL_ROUTING_KEY,
                mandatory=False,
                immediate=False,
                envelope=envelope,
            )
        except Exception as e:
            logger.warning(
                "Delayed publish of %s via %s failed: %s", name, delayed_name, e
            )
            raise

        logger.info(
            "Scheduled %s (message_id=%s) via %s with x-delay=%d ms",
            name,
            envelope.message.message_id,
            delayed_name,
            delay_ms,
        )
        return envelope
