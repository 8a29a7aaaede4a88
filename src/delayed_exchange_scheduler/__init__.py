"""Future message publishing through RabbitMQ's delayed message exchange."""

from __future__ import annotations

from .conventions import Conventions, resolve_message_type, type_name
from .correlation import set_causation_id, set_correlation_id
from .delay import MAX_DELAY_MS, delay_until, encode_delay
from .delivery_mode import DeliveryMode, DeliveryModeStrategy
from .envelope import MessageEnvelope, ScheduledEnvelope
from .exceptions import (
    BrokerOperationError,
    CancellationKeyNotSupportedError,
    CancellationNotSupportedError,
    DelayedExchangeUnavailableError,
    InvalidArgumentError,
    MessagingConnectionError,
    MessagingError,
    MessagingSerializationError,
    SchedulerError,
    SchedulingNotSupportedError,
    TopologyConflictError,
)
from .memory import InMemoryBroker
from .orchestrator import DelayedPublishOrchestrator
from .scheduler import DelayedExchangeScheduler
from .serialization import EnvelopeSerializer
from .topology import (
    BindingHandle,
    ExchangeHandle,
    ExchangeType,
    QueueHandle,
    TopologyOptions,
    delayed_exchange_name,
)

__all__ = [
    "MAX_DELAY_MS",
    "BindingHandle",
    "BrokerOperationError",
    "CancellationKeyNotSupportedError",
    "CancellationNotSupportedError",
    "Conventions",
    "DelayedExchangeScheduler",
    "DelayedExchangeUnavailableError",
    "DelayedPublishOrchestrator",
    "DeliveryMode",
    "DeliveryModeStrategy",
    "EnvelopeSerializer",
    "ExchangeHandle",
    "ExchangeType",
    "InMemoryBroker",
    "InvalidArgumentError",
    "MessageEnvelope",
    "MessagingConnectionError",
    "MessagingError",
    "MessagingSerializationError",
    "QueueHandle",
    "ScheduledEnvelope",
    "SchedulerError",
    "SchedulingNotSupportedError",
    "TopologyConflictError",
    "TopologyOptions",
    "delay_until",
    "delayed_exchange_name",
    "encode_delay",
    "resolve_message_type",
    "set_causation_id",
    "set_correlation_id",
    "type_name",
]
