"""Naming conventions: message type -> exchange and queue names."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Callable


def type_name(message_type: Any) -> str:
    """Return the logical name of *message_type* (a class or a string)."""
    if isinstance(message_type, str):
        if not message_type:
            raise InvalidArgumentError("message type name must not be empty")
        return message_type
    if isinstance(message_type, type):
        return message_type.__name__
    raise InvalidArgumentError(
        f"message type must be a class or a name, got {type(message_type).__name__}"
    )


def resolve_message_type(message: Any) -> Any:
    """Infer the message type when the caller did not name one.

    Envelopes and dicts carry it in ``event_type``; any other object is
    typed by its class.
    """
    event_type = getattr(message, "event_type", None)
    if isinstance(message, Mapping):
        event_type = message.get("event_type")
        if not event_type:
            raise InvalidArgumentError(
                "dict messages need an 'event_type' key or an explicit message_type"
            )
        return str(event_type)
    if isinstance(event_type, str) and event_type:
        return event_type
    return type(message)


def default_exchange_naming(message_type: Any) -> str:
    return type_name(message_type)


def default_queue_naming(message_type: Any, seed: str) -> str:
    name = type_name(message_type)
    return f"{name}_{seed}" if seed else name


class Conventions:
    """Default :class:`INamingConventions`.

    Pass callables to override either rule; both must stay deterministic
    because every process that schedules a type must derive the same names.
    """

    def __init__(
        self,
        exchange_naming: Callable[[Any], str] | None = None,
        queue_naming: Callable[[Any, str], str] | None = None,
    ) -> None:
        self._exchange_naming = exchange_naming or default_exchange_naming
        self._queue_naming = queue_naming or default_queue_naming

    def exchange_name(self, message_type: Any) -> str:
        return self._exchange_naming(message_type)

    def queue_name(self, message_type: Any, seed: str = "") -> str:
        return self._queue_naming(message_type, seed)
