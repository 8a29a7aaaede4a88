"""Naming and delivery-mode policy ports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..delivery_mode import DeliveryMode


@runtime_checkable
class INamingConventions(Protocol):
    """Derives exchange and queue names from a message type.

    Implementations must be deterministic and free of side effects.
    """

    def exchange_name(self, message_type: Any) -> str: ...

    def queue_name(self, message_type: Any, seed: str = "") -> str: ...


@runtime_checkable
class IDeliveryModeStrategy(Protocol):
    """Chooses persistent or transient delivery per message type."""

    def delivery_mode_for(self, message_type: Any) -> DeliveryMode: ...
