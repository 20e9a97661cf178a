from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

__all__ = ["EventEmitter", "StructuredEvent"]


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class StructuredEvent:
    name: str
    service: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: float | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "service": self.service,
            "timestamp": self.timestamp.isoformat(),
            "duration_ms": self.duration_ms,
            **self.fields,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=_default_serializer)


class EventEmitter:
    """Buffers StructuredEvents until they are drained.

    Events are emitted from the save worker thread, so the buffer is guarded
    by a lock.
    """

    def __init__(self) -> None:
        self._buffer: list[StructuredEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: StructuredEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def drain(self) -> list[StructuredEvent]:
        with self._lock:
            events = list(self._buffer)
            self._buffer.clear()
        return events

    @property
    def buffered(self) -> list[StructuredEvent]:
        with self._lock:
            return list(self._buffer)
