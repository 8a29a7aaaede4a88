"""IScheduler — protocol for publishing messages in the future."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from ..delay import DelayLike


@runtime_checkable
class IScheduler(Protocol):
    """Port for scheduling messages to be delivered at a future time.

    Usage::

        scheduler = create_rabbitmq_scheduler(connection)

        # Deliver in 5 seconds
        await scheduler.schedule_after(timedelta(seconds=5), OrderPlaced(...))

        # Deliver at an absolute time (UTC)
        await scheduler.schedule_at(
            datetime.now(timezone.utc) + timedelta(hours=1),
            OrderPlaced(...),
        )
    """

    async def schedule_at(
        self,
        execute_at: datetime,
        message: Any,
        *,
        cancellation_key: str | None = None,
        message_type: Any = None,
    ) -> Any:
        """Deliver *message* at *execute_at*.

        Args:
            execute_at: When consumers should see the message.
            message: The message to publish.
            cancellation_key: Key for a later ``cancel``; only schedulers that
                support cancellation accept it.
            message_type: Overrides the type inferred from *message*.
        """
        ...

    async def schedule_after(
        self,
        delay: DelayLike,
        message: Any,
        *,
        message_type: Any = None,
    ) -> Any:
        """Deliver *message* once *delay* has elapsed."""
        ...

    async def cancel(self, cancellation_key: str) -> None:
        """Cancel messages scheduled with *cancellation_key*."""
        ...
