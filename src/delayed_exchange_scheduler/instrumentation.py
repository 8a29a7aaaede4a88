"""Instrumentation hooks wrapped around scheduler broker operations.

Hooks are async callables that receive the operation name, a dict of
attributes and a ``next_handler`` to await. They can time, trace or count
delayed publishes without the orchestrator knowing about them::

    async def timing_hook(operation, attributes, next_handler):
        started = time.monotonic()
        try:
            return await next_handler()
        finally:
            metrics.observe(operation, time.monotonic() - started)

    get_hook_registry().register(timing_hook, operations=["scheduler.*"])
"""

from __future__ import annotations

import fnmatch
import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("delayed_exchange_scheduler.instrumentation")

_MATCH_CACHE_MAX_SIZE = 2048


@runtime_checkable
class InstrumentationHook(Protocol):
    """Protocol for instrumentation hooks (tracing, metrics, etc.)."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Wrap an operation with instrumentation."""
        ...


class HookRegistration:
    """A registered hook with operation / message-type filters and priority."""

    def __init__(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: list[str] | None = None,
        message_types: list[str] | None = None,
        enabled: bool = True,
    ) -> None:
        self.hook = hook
        self.priority = priority
        self.operations = operations or []
        self.message_types = message_types or []
        self.enabled = enabled
        self._match_cache: dict[str, bool] = {}

    def matches(self, operation: str, attributes: dict[str, Any]) -> bool:
        """Check if this registration applies to the operation."""
        if not self.enabled:
            return False
        if not self._matches_operation(operation):
            return False
        if not self.message_types:
            return True
        message_type = attributes.get("message_type")
        return message_type is None or message_type in self.message_types

    def _matches_operation(self, operation: str) -> bool:
        if not self.operations:
            return True
        if operation in self._match_cache:
            return self._match_cache[operation]
        matched = any(
            fnmatch.fnmatch(operation, pattern) for pattern in self.operations
        )
        if len(self._match_cache) >= _MATCH_CACHE_MAX_SIZE:
            self._match_cache.clear()
        self._match_cache[operation] = matched
        return matched

    def clear_cache(self) -> None:
        self._match_cache.clear()


class HookRegistry:
    """Ordered collection of hooks; lower priority runs outermost."""

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: list[str] | None = None,
        message_types: list[str] | None = None,
        enabled: bool = True,
    ) -> HookRegistration:
        """Register a hook with optional filtering."""
        registration = HookRegistration(
            hook,
            priority=priority,
            operations=operations,
            message_types=message_types,
            enabled=enabled,
        )
        self._registrations.append(registration)
        self._registrations.sort(key=lambda r: r.priority)
        logger.debug(
            "Registered instrumentation hook %r (priority=%d)", hook, priority
        )
        return registration

    async def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run ``next_handler`` through every matching hook in priority order."""
        matching = [r for r in self._registrations if r.matches(operation, attributes)]
        if not matching:
            return await next_handler()

        async def pipeline(index: int = 0) -> Any:
            if index >= len(matching):
                return await next_handler()
            registration = matching[index]
            return await registration.hook(
                operation,
                attributes,
                lambda: pipeline(index + 1),
            )

        return await pipeline()

    def clear(self) -> None:
        """Remove all registrations and clear caches."""
        for registration in self._registrations:
            registration.clear_cache()
        self._registrations.clear()


_hook_registry_var: ContextVar[HookRegistry | None] = ContextVar(
    "hook_registry", default=None
)


def get_hook_registry() -> HookRegistry:
    """Get the hook registry for the current context.

    A fresh ``HookRegistry`` is created on first access within each context,
    so tests do not leak hooks into each other.
    """
    registry = _hook_registry_var.get()
    if registry is None:
        registry = HookRegistry()
        _hook_registry_var.set(registry)
    return registry


def set_hook_registry(registry: HookRegistry) -> None:
    """Set a custom hook registry in the current context."""
    _hook_registry_var.set(registry)
