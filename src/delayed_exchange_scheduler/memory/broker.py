"""InMemoryBroker — topology declarator and publisher for tests."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ..exceptions import (
    BrokerOperationError,
    DelayedExchangeUnavailableError,
    TopologyConflictError,
)
from ..topology import BindingHandle, ExchangeHandle, QueueHandle, TopologyOptions

if TYPE_CHECKING:
    from ..envelope import ScheduledEnvelope
    from ..topology import ExchangeType


class InMemoryBroker:
    """Records topology and publishes the way a broker would see them.

    Implements both :class:`ITopologyDeclarator` and :class:`IRawPublisher`.
    Declarations are idempotent; redeclaring with other parameters raises
    :class:`TopologyConflictError`, binding or publishing to an undeclared
    object raises :class:`BrokerOperationError`. Each call yields to the event
    loop once, standing in for the network round trip.

    ``fail_on(operation, name, exc)`` makes the next matching call raise, and
    ``operations`` lists every call in the order it reached the broker.
    """

    def __init__(
        self,
        options: TopologyOptions | None = None,
        *,
        supports_delayed: bool = True,
    ) -> None:
        self._options = options or TopologyOptions()
        self._supports_delayed = supports_delayed
        self.exchanges: dict[str, ExchangeHandle] = {}
        self.queues: dict[str, QueueHandle] = {}
        self.bindings: set[BindingHandle] = set()
        self.published: list[tuple[str, str, bool, bool, ScheduledEnvelope]] = []
        self.operations: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], BaseException] = {}

    def fail_on(
        self,
        operation: str,
        name: str,
        exc: BaseException | None = None,
    ) -> None:
        """Make the next *operation* against *name* raise *exc*."""
        self._failures[(operation, name)] = exc or BrokerOperationError(
            f"simulated {operation} failure for {name!r}",
            operation=operation,
            target=name,
        )

    async def _round_trip(self, operation: str, name: str) -> None:
        await asyncio.sleep(0)
        failure = self._failures.pop((operation, name), None)
        if failure is not None:
            raise failure
        self.operations.append((operation, name))

    async def declare_exchange(
        self,
        name: str,
        kind: ExchangeType,
        *,
        delayed: bool = False,
    ) -> ExchangeHandle:
        await self._round_trip("declare_exchange", name)
        if delayed and not self._supports_delayed:
            raise DelayedExchangeUnavailableError(
                "invalid exchange type 'x-delayed-message'",
                operation="declare_exchange",
                target=name,
            )
        handle = ExchangeHandle(
            name=name,
            kind=kind,
            delayed=delayed,
            durable=self._options.durable,
            auto_delete=self._options.auto_delete,
        )
        return self._declare(self.exchanges, handle, "declare_exchange")

    async def declare_queue(self, name: str) -> QueueHandle:
        await self._round_trip("declare_queue", name)
        handle = QueueHandle(
            name=name,
            durable=self._options.durable,
            auto_delete=self._options.auto_delete,
        )
        return self._declare(self.queues, handle, "declare_queue")

    @staticmethod
    def _declare(registry: dict[str, Any], handle: Any, operation: str) -> Any:
        existing = registry.setdefault(handle.name, handle)
        if existing != handle:
            raise TopologyConflictError(
                f"PRECONDITION_FAILED - inequivalent arguments for {handle.name!r}",
                operation=operation,
                target=handle.name,
            )
        return existing

    async def bind(
        self,
        source: ExchangeHandle,
        destination: ExchangeHandle | QueueHandle,
        routing_key: str,
    ) -> BindingHandle:
        await self._round_trip("bind", f"{source.name}->{destination.name}")
        to_queue = isinstance(destination, QueueHandle)
        targets: dict[str, Any] = self.queues if to_queue else self.exchanges
        endpoints = ((source.name, self.exchanges), (destination.name, targets))
        for name, registry in endpoints:
            if name not in registry:
                raise BrokerOperationError(
                    f"NOT_FOUND - no exchange or queue {name!r}",
                    operation="bind",
                    target=name,
                )
        binding = BindingHandle(
            source=source.name,
            destination=destination.name,
            routing_key=routing_key,
            to_queue=to_queue,
        )
        self.bindings.add(binding)
        return binding

    async def publish(
        self,
        exchange: ExchangeHandle,
        routing_key: str,
        *,
        mandatory: bool,
        immediate: bool,
        envelope: ScheduledEnvelope,
    ) -> None:
        await self._round_trip("publish", exchange.name)
        if exchange.name not in self.exchanges:
            raise BrokerOperationError(
                f"NOT_FOUND - no exchange {exchange.name!r}",
                operation="publish",
                target=exchange.name,
            )
        self.published.append(
            (exchange.name, routing_key, mandatory, immediate, envelope)
        )

    # --- Test helpers ---

    def published_to(self, exchange_name: str) -> list[ScheduledEnvelope]:
        """Return envelopes published to *exchange_name*, in order."""
        return [env for name, _, _, _, env in self.published if name == exchange_name]

    def assert_published(self, event_type: str, count: int = 1) -> None:
        """Assert that exactly `count` messages with this event_type were published."""
        matching = [
            env for *_, env in self.published if env.message.event_type == event_type
        ]
        assert len(matching) == count, (
            f"Expected {count} message(s) with event_type={event_type!r}, "
            f"got {len(matching)}. Published: "
            f"{[env.message.event_type for *_, env in self.published]}"
        )

    def clear(self) -> None:
        """Forget all topology, publishes and pending failures."""
        self.exchanges.clear()
        self.queues.clear()
        self.bindings.clear()
        self.published.clear()
        self.operations.clear()
        self._failures.clear()
