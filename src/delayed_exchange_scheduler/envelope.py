"""MessageEnvelope and ScheduledEnvelope — what goes over the wire."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .correlation import get_causation_id, get_correlation_id
from .delay import MAX_DELAY_MS
from .delivery_mode import DeliveryMode
from .topology import DELAY_HEADER


class MessageEnvelope(BaseModel):
    """Immutable wrapper for messages over the wire.

    Carries payload and tracing IDs.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str = Field(..., description="Logical message type, e.g. 'OrderPlaced'")
    payload: dict[str, object] = Field(default_factory=dict)
    correlation_id: str | None = None
    causation_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    headers: dict[str, str] = Field(default_factory=dict)


class ScheduledEnvelope(BaseModel):
    """A message plus the broker metadata that delays its delivery."""

    model_config = ConfigDict(frozen=True)

    message: MessageEnvelope
    delivery_mode: DeliveryMode = DeliveryMode.PERSISTENT
    delay_ms: int = Field(default=0, ge=0, le=MAX_DELAY_MS)

    @property
    def headers(self) -> dict[str, Any]:
        """Broker headers: ``x-delay`` and the message's event type."""
        return {
            **self.message.headers,
            "event_type": self.message.event_type,
            DELAY_HEADER: self.delay_ms,
        }


def to_envelope(message: Any, event_type: str) -> MessageEnvelope:
    """Wrap *message* in a MessageEnvelope unless it already is one.

    Correlation and causation IDs default to the current context.
    """
    if isinstance(message, MessageEnvelope):
        if message.correlation_id is None and get_correlation_id() is not None:
            return message.model_copy(update={"correlation_id": get_correlation_id()})
        return message
    payload: dict[str, object]
    if hasattr(message, "model_dump"):
        payload = message.model_dump(mode="json")
    elif isinstance(message, dict):
        payload = message
    else:
        payload = {"value": message}
    return MessageEnvelope(
        event_type=event_type,
        payload=payload,
        correlation_id=get_correlation_id(),
        causation_id=get_causation_id(),
    )
