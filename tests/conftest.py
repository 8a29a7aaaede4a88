"""Pytest fixtures for scheduler tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from delayed_exchange_scheduler.instrumentation import HookRegistry, set_hook_registry
from delayed_exchange_scheduler.memory import InMemoryBroker
from delayed_exchange_scheduler.orchestrator import DelayedPublishOrchestrator
from delayed_exchange_scheduler.scheduler import DelayedExchangeScheduler


@pytest.fixture
def broker() -> InMemoryBroker:
    return InMemoryBroker()


@pytest.fixture
def orchestrator(broker: InMemoryBroker) -> DelayedPublishOrchestrator:
    return DelayedPublishOrchestrator(broker, broker)


@pytest.fixture
def scheduler(
    orchestrator: DelayedPublishOrchestrator,
) -> Iterator[DelayedExchangeScheduler]:
    scheduler = DelayedExchangeScheduler(orchestrator)
    yield scheduler
    scheduler.close()


@pytest.fixture(autouse=True)
def _fresh_hook_registry() -> None:
    set_hook_registry(HookRegistry())
