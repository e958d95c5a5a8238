"""Best-effort event emission for claim state changes."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING

from claimintake.core.models import ClaimEvent


if TYPE_CHECKING:
    from claimintake.core.models import Claim
    from claimintake.core.types import EventType
    from claimintake.events.publisher import MessagePublisher

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "claims.events"


class EventEmitter:
    """Publishes claim events without ever failing the caller.

    Each event gets a single publish attempt. Failures are logged and
    dropped, so consumers must tolerate missed events. With
    ``async_dispatch`` the attempt runs on a background worker; call
    ``flush`` to wait for pending attempts.
    """

    def __init__(
        self,
        publisher: MessagePublisher,
        topic: str = DEFAULT_TOPIC,
        async_dispatch: bool = False,
    ) -> None:
        self._publisher = publisher
        self.topic = topic
        self._executor = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="claim-events")
            if async_dispatch
            else None
        )
        self._pending: list[Future[None]] = []
        self._lock = threading.Lock()

    def emit(self, event_type: EventType, claim: Claim) -> ClaimEvent:
        """Emit an event for a claim whose state is already committed."""
        event = ClaimEvent(
            event_type=event_type.value, claim_id=claim.claim_id, status=claim.status
        )
        if self._executor is None:
            self._publish(event)
        else:
            future = self._executor.submit(self._publish, event)
            with self._lock:
                self._pending = [f for f in self._pending if not f.done()]
                self._pending.append(future)
        return event

    def _publish(self, event: ClaimEvent) -> None:
        try:
            self._publisher.publish(self.topic, event.claim_id, event.to_message())
        except Exception:
            logger.exception(
                "Failed to publish %s event for claim %s", event.event_type, event.claim_id
            )
            return
        logger.debug("Published %s for claim %s", event.event_type, event.claim_id)

    def flush(self, timeout: float | None = None) -> None:
        """Wait for background publish attempts to finish."""
        with self._lock:
            pending, self._pending = self._pending, []
        if pending:
            wait(pending, timeout=timeout)

    def close(self) -> None:
        self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
