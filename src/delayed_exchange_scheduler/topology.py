"""Broker topology value types: exchange kinds, handles and declare options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

MATCH_ALL_ROUTING_KEY = "#"
DELAYED_EXCHANGE_SUFFIX = "_delayed"

# Names understood by the rabbitmq_delayed_message_exchange plugin.
DELAYED_EXCHANGE_TYPE = "x-delayed-message"
DELAYED_TYPE_ARGUMENT = "x-delayed-type"
DELAY_HEADER = "x-delay"


class ExchangeType(str, Enum):
    """Routing kind of an exchange."""

    DIRECT = "direct"
    TOPIC = "topic"
    FANOUT = "fanout"
    HEADERS = "headers"


class TopologyOptions(BaseModel):
    """Parameters applied to every exchange and queue the scheduler declares.

    All processes scheduling the same message type must agree on these, or
    the broker rejects the second declaration as a conflict.
    """

    model_config = ConfigDict(frozen=True)

    durable: bool = True
    auto_delete: bool = False


@dataclass(frozen=True)
class ExchangeHandle:
    """A declared exchange."""

    name: str
    kind: ExchangeType
    delayed: bool = False
    durable: bool = True
    auto_delete: bool = False


@dataclass(frozen=True)
class QueueHandle:
    """A declared queue."""

    name: str
    durable: bool = True
    auto_delete: bool = False


@dataclass(frozen=True)
class BindingHandle:
    """A binding from an exchange to an exchange or a queue."""

    source: str
    destination: str
    routing_key: str
    to_queue: bool


def delayed_exchange_name(exchange_name: str) -> str:
    """Return the delay exchange paired with *exchange_name*."""
    return f"{exchange_name}{DELAYED_EXCHANGE_SUFFIX}"
