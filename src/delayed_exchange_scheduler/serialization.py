"""EnvelopeSerializer — JSON body encoding for scheduled messages."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from .envelope import MessageEnvelope
from .exceptions import MessagingSerializationError


def _json_serializer(obj: Any) -> Any:
    """Serialize datetime and other non-JSON types."""
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class EnvelopeSerializer:
    """Serialize/deserialize MessageEnvelope to/from JSON bytes."""

    content_type = "application/json"

    def serialize(self, envelope: MessageEnvelope) -> bytes:
        """Encode envelope to JSON bytes."""
        try:
            data = envelope.model_dump(mode="json")
            return json.dumps(data, default=_json_serializer).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise MessagingSerializationError(str(e)) from e

    def deserialize(self, raw: bytes) -> MessageEnvelope:
        """Decode JSON bytes to MessageEnvelope (e.g. on the consuming side)."""
        try:
            data = json.loads(raw.decode("utf-8"))
            ts = data.get("timestamp")
            if isinstance(ts, str):
                data["timestamp"] = datetime.fromisoformat(ts.replace("Z", "+00:00"))
            return MessageEnvelope.model_validate(data)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise MessagingSerializationError(str(e)) from e
