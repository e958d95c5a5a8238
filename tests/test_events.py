"""Tests for event emission and publishers."""

from __future__ import annotations

import threading
from typing import Any

import pytest

from claimintake.core.errors import EventPublishError
from claimintake.core.models import Claim
from claimintake.core.types import ClaimStatus, EventType
from claimintake.events import EventEmitter, InMemoryPublisher, LoggingPublisher, MessagePublisher


@pytest.fixture
def claim(submission) -> Claim:
    return Claim.from_submission(
        submission,
        claim_id="CLM-TEST",
        tracking_number="TRK000000001",
        status=ClaimStatus.SUBMITTED,
    )


class FailingPublisher(MessagePublisher):
    def __init__(self) -> None:
        self.attempts = 0

    def publish(self, topic: str, key: str, event: dict[str, Any]) -> None:
        self.attempts += 1
        raise EventPublishError("broker unavailable")


class BlockingPublisher(InMemoryPublisher):
    """Holds every publish until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.release = threading.Event()

    def publish(self, topic: str, key: str, event: dict[str, Any]) -> None:
        self.release.wait(timeout=5)
        super().publish(topic, key, event)


class TestEventEmitter:
    def test_sync_emit_publishes_once(self, claim):
        publisher = InMemoryPublisher()
        emitter = EventEmitter(publisher, topic="claims.test")

        event = emitter.emit(EventType.SUBMITTED, claim)

        assert len(publisher.messages) == 1
        topic, key, message = publisher.messages[0]
        assert topic == "claims.test"
        assert key == "CLM-TEST"
        assert message["event_type"] == "claim.submitted"
        assert message["claim_id"] == "CLM-TEST"
        assert message["status"] == "SUBMITTED"
        assert message["timestamp"] == event.to_message()["timestamp"]

    def test_publish_failure_is_logged_not_raised(self, claim, caplog):
        publisher = FailingPublisher()
        emitter = EventEmitter(publisher)

        with caplog.at_level("ERROR"):
            emitter.emit(EventType.REPROCESSING, claim)

        assert publisher.attempts == 1
        assert "Failed to publish claim.reprocessing event for claim CLM-TEST" in caplog.text

    def test_async_dispatch_flush_waits(self, claim):
        publisher = BlockingPublisher()
        emitter = EventEmitter(publisher, async_dispatch=True)
        try:
            emitter.emit(EventType.SUBMITTED, claim)
            emitter.emit(EventType.REPROCESSING, claim)
            assert publisher.messages == []

            publisher.release.set()
            emitter.flush(timeout=5)

            assert [m["event_type"] for m in publisher.events_for("CLM-TEST")] == [
                "claim.submitted",
                "claim.reprocessing",
            ]
        finally:
            publisher.release.set()
            emitter.close()

    def test_async_failure_is_swallowed(self, claim):
        publisher = FailingPublisher()
        emitter = EventEmitter(publisher, async_dispatch=True)

        emitter.emit(EventType.SUBMITTED, claim)
        emitter.close()

        assert publisher.attempts == 1

    def test_flush_without_pending_is_noop(self):
        emitter = EventEmitter(InMemoryPublisher())
        emitter.flush()
        emitter.close()


class TestPublishers:
    def test_in_memory_filters_by_claim(self):
        publisher = InMemoryPublisher()
        publisher.publish("t", "A", {"n": 1})
        publisher.publish("t", "B", {"n": 2})
        publisher.publish("t", "A", {"n": 3})

        assert publisher.events_for("A") == [{"n": 1}, {"n": 3}]

    def test_logging_publisher_writes_json(self, caplog):
        with caplog.at_level("INFO", logger="claimintake.events.publisher"):
            LoggingPublisher().publish("claims.events", "CLM-1", {"status": "SUBMITTED"})

        assert '[claims.events] CLM-1 {"status": "SUBMITTED"}' in caplog.text
