"""Broker-facing ports: topology declaration and raw publishing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..envelope import ScheduledEnvelope
    from ..topology import BindingHandle, ExchangeHandle, ExchangeType, QueueHandle


@runtime_checkable
class ITopologyDeclarator(Protocol):
    """
    Port for declaring exchanges, queues and bindings on a broker.

    Every call must be idempotent: repeating it with identical arguments
    succeeds and leaves a single broker-side object. Declaring an existing
    name with different parameters raises ``TopologyConflictError``.
    """

    async def declare_exchange(
        self,
        name: str,
        kind: ExchangeType,
        *,
        delayed: bool = False,
    ) -> ExchangeHandle:
        """
        Declare exchange *name*.

        Args:
            name: Exchange name.
            kind: Routing kind. For a delayed exchange this is the routing
                applied once the delay has elapsed.
            delayed: Declare a delay-capable exchange.
        """
        ...

    async def declare_queue(self, name: str) -> QueueHandle:
        """Declare queue *name*."""
        ...

    async def bind(
        self,
        source: ExchangeHandle,
        destination: ExchangeHandle | QueueHandle,
        routing_key: str,
    ) -> BindingHandle:
        """Route messages from *source* to *destination* matching *routing_key*."""
        ...


@runtime_checkable
class IRawPublisher(Protocol):
    """
    Port for publishing an already-built envelope to a named exchange.
    """

    async def publish(
        self,
        exchange: ExchangeHandle,
        routing_key: str,
        *,
        mandatory: bool,
        immediate: bool,
        envelope: ScheduledEnvelope,
    ) -> None:
        """
        Publish *envelope* to *exchange*; returns once the broker accepted it.
        """
        ...
