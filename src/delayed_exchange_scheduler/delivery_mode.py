"""Delivery-mode policy: which message types are persisted by the broker."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

from .conventions import type_name
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class DeliveryMode(IntEnum):
    """AMQP ``delivery_mode`` property values."""

    NON_PERSISTENT = 1
    PERSISTENT = 2


class DeliveryModeStrategy:
    """Default :class:`IDeliveryModeStrategy`.

    Every message type is delivered with ``default`` unless an override was
    registered for it, by name or by class.
    """

    def __init__(
        self,
        default: DeliveryMode | int = DeliveryMode.PERSISTENT,
        overrides: dict[Any, DeliveryMode | int] | None = None,
    ) -> None:
        self._default = _to_delivery_mode(default)
        self._overrides: dict[str, DeliveryMode] = {}
        for message_type, mode in (overrides or {}).items():
            self.register(message_type, mode)

    def register(self, message_type: Any, mode: DeliveryMode | int) -> None:
        """Use *mode* for *message_type* (a class or a type name)."""
        name = type_name(message_type)
        delivery_mode = _to_delivery_mode(mode)
        self._overrides[name] = delivery_mode
        logger.debug("Delivery mode for %s set to %s", name, delivery_mode.name)

    def delivery_mode_for(self, message_type: Any) -> DeliveryMode:
        return self._overrides.get(type_name(message_type), self._default)


def _to_delivery_mode(mode: DeliveryMode | int) -> DeliveryMode:
    try:
        return DeliveryMode(mode)
    except ValueError as e:
        raise InvalidArgumentError(f"unknown delivery mode {mode!r}") from e
