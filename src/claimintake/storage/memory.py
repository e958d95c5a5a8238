"""In-process claim store with the same atomicity contract as the SQLite one."""

from __future__ import annotations

import threading
from collections import Counter
from typing import TYPE_CHECKING

from claimintake.core.errors import (
    ClaimNotFoundError,
    IdempotencyConflictError,
    StaleClaimError,
    StorageError,
)
from claimintake.storage.base import ClaimStore


if TYPE_CHECKING:
    from claimintake.core.models import Claim, StatusChange
    from claimintake.core.types import ClaimStatus


class InMemoryClaimStore(ClaimStore):
    """Thread-safe dictionary-backed store.

    Claims are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claims: dict[str, Claim] = {}
        self._by_key: dict[str, str] = {}

    def find_by_id(self, claim_id: str) -> Claim | None:
        with self._lock:
            claim = self._claims.get(claim_id)
            return claim.model_copy(deep=True) if claim else None

    def find_by_idempotency_key(self, key: str) -> Claim | None:
        with self._lock:
            claim_id = self._by_key.get(key)
            if claim_id is None:
                return None
            return self._claims[claim_id].model_copy(deep=True)

    def insert(self, claim: Claim) -> Claim:
        with self._lock:
            if claim.claim_id in self._claims:
                msg = f"Claim {claim.claim_id} already exists"
                raise StorageError(msg)
            key = claim.idempotency_key
            if key is not None and key in self._by_key:
                raise IdempotencyConflictError(key)
            self._claims[claim.claim_id] = claim.model_copy(deep=True)
            if key is not None:
                self._by_key[key] = claim.claim_id
        return claim

    def update_status(
        self, claim_id: str, expected_status: ClaimStatus, change: StatusChange
    ) -> Claim:
        with self._lock:
            stored = self._claims.get(claim_id)
            if stored is None:
                raise ClaimNotFoundError(claim_id)
            if stored.status is not expected_status:
                raise StaleClaimError(claim_id, expected_status, stored.status)
            stored.status = change.to_status
            stored.status_reason = change.reason
            stored.updated_at = change.changed_at
            stored.status_history.append(change.model_copy())
            return stored.model_copy(deep=True)

    def count_by_status(self) -> dict[str, int]:
        with self._lock:
            counts = Counter(c.status.value for c in self._claims.values())
        return dict(sorted(counts.items()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._claims)
