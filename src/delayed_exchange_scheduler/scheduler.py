"""DelayedExchangeScheduler — IScheduler backed by a broker delay exchange."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar

from .conventions import resolve_message_type
from .delay import delay_until
from .exceptions import (
    CancellationKeyNotSupportedError,
    CancellationNotSupportedError,
    InvalidArgumentError,
)
from .ports.scheduling import IScheduler

if TYPE_CHECKING:
    from collections.abc import Coroutine
    from datetime import datetime

    from .delay import DelayLike
    from .envelope import ScheduledEnvelope
    from .orchestrator import DelayedPublishOrchestrator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DelayedExchangeScheduler(IScheduler):
    """Schedules messages through the broker's delayed message exchange.

    Nothing runs in this process once a call returns: the broker holds the
    message and delivers it when the delay has elapsed. The flip side is
    that a scheduled message cannot be cancelled.

    The ``async`` methods return once the broker accepted the message. The
    ``*_sync`` variants block the calling thread until then. Pass ``loop``
    when the broker connection lives on an event loop in another thread; the
    blocking variants then submit to that loop and wait at most
    ``blocking_timeout`` seconds. A timeout only stops the wait, the message
    may still be scheduled. Without ``loop`` they run on a private event loop
    that is kept between calls, so a broker connection opened by the first
    call stays usable; :meth:`close` releases it.

    An empty ``cancellation_key`` counts as no key.
    """

    def __init__(
        self,
        orchestrator: DelayedPublishOrchestrator,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        blocking_timeout: float | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._loop = loop
        self._blocking_timeout = blocking_timeout
        self._private_loop: asyncio.AbstractEventLoop | None = None
        self._private_lock = threading.Lock()

    async def schedule_at(
        self,
        execute_at: datetime,
        message: Any,
        *,
        cancellation_key: str | None = None,
        message_type: Any = None,
    ) -> ScheduledEnvelope:
        if cancellation_key:
            raise CancellationKeyNotSupportedError(cancellation_key)
        return await self.schedule_after(
            delay_until(execute_at), message, message_type=message_type
        )

    async def schedule_after(
        self,
        delay: DelayLike,
        message: Any,
        *,
        message_type: Any = None,
    ) -> ScheduledEnvelope:
        if message is None:
            raise InvalidArgumentError("message must not be None")
        if message_type is None:
            message_type = resolve_message_type(message)
        return await self._orchestrator.publish_delayed(message_type, delay, message)

    async def cancel(self, cancellation_key: str) -> None:
        logger.debug("Rejected cancellation of %r", cancellation_key)
        raise CancellationNotSupportedError

    # --- Blocking variants ---

    def schedule_at_sync(
        self,
        execute_at: datetime,
        message: Any,
        *,
        cancellation_key: str | None = None,
        message_type: Any = None,
    ) -> ScheduledEnvelope:
        if cancellation_key:
            raise CancellationKeyNotSupportedError(cancellation_key)
        return self._run_blocking(
            self.schedule_at(execute_at, message, message_type=message_type)
        )

    def schedule_after_sync(
        self,
        delay: DelayLike,
        message: Any,
        *,
        message_type: Any = None,
    ) -> ScheduledEnvelope:
        return self._run_blocking(
            self.schedule_after(delay, message, message_type=message_type)
        )

    def cancel_sync(self, cancellation_key: str) -> None:
        logger.debug("Rejected cancellation of %r", cancellation_key)
        raise CancellationNotSupportedError

    def _run_blocking(self, coro: Coroutine[Any, Any, T]) -> T:
        try:
            running: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        # Blocking on the loop that has to do the work would deadlock.
        if running is not None and self._loop in (None, running):
            coro.close()
            raise RuntimeError(
                "Blocking scheduler call made from a running event loop; "
                "await the async variant instead"
            )
        if self._loop is not None:
            future = asyncio.run_coroutine_threadsafe(coro, self._loop)
            return future.result(timeout=self._blocking_timeout)
        with self._private_lock:
            if self._private_loop is None or self._private_loop.is_closed():
                self._private_loop = asyncio.new_event_loop()
            return self._private_loop.run_until_complete(coro)

    def close(self, *pending: Coroutine[Any, Any, Any]) -> None:
        """Close the private loop used by blocking calls made without ``loop``.

        Coroutines in *pending*, such as ``connection.close()``, run on that
        loop first so resources opened there are released on it.
        """
        with self._private_lock:
            loop, self._private_loop = self._private_loop, None
        if loop is None or loop.is_closed():
            for coro in pending:
                coro.close()
            return
        try:
            for coro in pending:
                loop.run_until_complete(coro)
            loop.run_until_complete(loop.shutdown_asyncgens())
        finally:
            loop.close()
