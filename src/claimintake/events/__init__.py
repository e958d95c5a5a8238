"""Events module - Domain event emission for downstream consumers."""

from __future__ import annotations

from claimintake.events.emitter import DEFAULT_TOPIC, EventEmitter
from claimintake.events.publisher import InMemoryPublisher, LoggingPublisher, MessagePublisher


__all__ = [
    "DEFAULT_TOPIC",
    "EventEmitter",
    "InMemoryPublisher",
    "LoggingPublisher",
    "MessagePublisher",
]
