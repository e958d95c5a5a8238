"""Message publisher abstraction and implementations."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any


logger = logging.getLogger(__name__)


class MessagePublisher(ABC):
    """Abstract base class for message transports."""

    @abstractmethod
    def publish(self, topic: str, key: str, event: dict[str, Any]) -> None:
        """Publish one event keyed by claim identifier.

        Raises:
            EventPublishError: If the transport cannot accept the event.
        """
        ...


class InMemoryPublisher(MessagePublisher):
    """Publisher that keeps every published message in a list."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.messages: list[tuple[str, str, dict[str, Any]]] = []

    def publish(self, topic: str, key: str, event: dict[str, Any]) -> None:
        with self._lock:
            self.messages.append((topic, key, event))

    def events_for(self, claim_id: str) -> list[dict[str, Any]]:
        with self._lock:
            return [event for _, key, event in self.messages if key == claim_id]


class LoggingPublisher(MessagePublisher):
    """Publisher that writes each event as JSON to the log."""

    def publish(self, topic: str, key: str, event: dict[str, Any]) -> None:
        logger.info("[%s] %s %s", topic, key, json.dumps(event, default=str))
