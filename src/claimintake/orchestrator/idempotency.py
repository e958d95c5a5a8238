"""Idempotency guard for claim resubmissions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from claimintake.core.errors import StorageError


if TYPE_CHECKING:
    from claimintake.core.models import Claim
    from claimintake.storage.base import ClaimStore

logger = logging.getLogger(__name__)


class IdempotencyGuard:
    """Detects replays of a submission by its idempotency key.

    ``check`` is only a fast path. Uniqueness itself is enforced by the
    store when the claim is inserted; the loser of a concurrent race gets
    ``IdempotencyConflictError`` and calls ``resolve_conflict``.
    """

    def __init__(self, store: ClaimStore) -> None:
        self._store = store

    def check(self, idempotency_key: str | None) -> Claim | None:
        """Return the claim already holding the key, or None for a fresh submission."""
        if not idempotency_key:
            return None
        existing = self._store.find_by_idempotency_key(idempotency_key)
        if existing is not None:
            logger.info(
                "Idempotency key %s already used by claim %s", idempotency_key, existing.claim_id
            )
        return existing

    def resolve_conflict(self, idempotency_key: str) -> Claim:
        """Read back the claim that won an insert race for the key."""
        winner = self._store.find_by_idempotency_key(idempotency_key)
        if winner is None:
            msg = f"Idempotency conflict on key {idempotency_key} but no claim holds it"
            raise StorageError(msg)
        logger.info(
            "Concurrent submission for key %s lost to claim %s", idempotency_key, winner.claim_id
        )
        return winner
