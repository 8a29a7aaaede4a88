"""Tests for instrumentation hooks."""

from __future__ import annotations

from typing import Any

import pytest

from delayed_exchange_scheduler.instrumentation import (
    HookRegistry,
    InstrumentationHook,
    get_hook_registry,
    set_hook_registry,
)


def _recording_hook(name: str, calls: list[str]) -> Any:
    async def hook(
        operation: str, attributes: dict[str, Any], next_handler: Any
    ) -> Any:
        calls.append(f"{name}:{operation}")
        return await next_handler()

    return hook


@pytest.mark.asyncio
async def test_no_hooks_runs_handler() -> None:
    async def handler() -> str:
        return "done"

    assert await HookRegistry().execute_all("op", {}, handler) == "done"


@pytest.mark.asyncio
async def test_hooks_run_in_priority_order() -> None:
    calls: list[str] = []
    registry = HookRegistry()
    registry.register(_recording_hook("late", calls), priority=10)
    registry.register(_recording_hook("early", calls), priority=-1)

    async def handler() -> int:
        calls.append("handler")
        return 1

    assert await registry.execute_all("scheduler.publish_delayed.X", {}, handler) == 1
    assert calls == [
        "early:scheduler.publish_delayed.X",
        "late:scheduler.publish_delayed.X",
        "handler",
    ]


@pytest.mark.asyncio
async def test_operation_and_message_type_filters() -> None:
    calls: list[str] = []
    registry = HookRegistry()
    registry.register(_recording_hook("ops", calls), operations=["scheduler.*"])
    registry.register(_recording_hook("types", calls), message_types=["OrderPlaced"])
    registry.register(_recording_hook("off", calls), enabled=False)

    async def handler() -> None:
        return None

    await registry.execute_all("other", {"message_type": "AuditTrail"}, handler)
    await registry.execute_all("scheduler.x", {"message_type": "OrderPlaced"}, handler)
    assert calls == ["ops:scheduler.x", "types:scheduler.x"]


def test_hook_protocol_and_context_registry() -> None:
    assert isinstance(_recording_hook("h", []), InstrumentationHook)
    registry = HookRegistry()
    set_hook_registry(registry)
    assert get_hook_registry() is registry
    registry.register(_recording_hook("h", []))
    registry.clear()
    assert registry._registrations == []
