"""Claim store abstraction used by the pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from claimintake.core.models import Claim, StatusChange
    from claimintake.core.types import ClaimStatus


class ClaimStore(ABC):
    """Abstract base class for claim persistence.

    ``insert`` is atomic. Implementations must enforce idempotency-key
    uniqueness inside that single operation and raise
    ``IdempotencyConflictError`` when another claim already holds the key.

    ``update_status`` is a compare-and-set on the stored status. Status
    history is append-only; earlier entries are never rewritten.
    """

    @abstractmethod
    def find_by_id(self, claim_id: str) -> Claim | None:
        """Return the claim with the given identifier, if any."""
        ...

    @abstractmethod
    def find_by_idempotency_key(self, key: str) -> Claim | None:
        """Return the claim holding the given idempotency key, if any."""
        ...

    @abstractmethod
    def insert(self, claim: Claim) -> Claim:
        """Persist a new claim with its lines, diagnoses and history.

        Raises:
            IdempotencyConflictError: If another claim holds the idempotency key.
            StorageError: If the claim id already exists or the store fails.
        """
        ...

    @abstractmethod
    def update_status(
        self, claim_id: str, expected_status: ClaimStatus, change: StatusChange
    ) -> Claim:
        """Apply ``change`` only if the stored status is still ``expected_status``.

        The claim's status, reason and ``updated_at`` are taken from
        ``change``, which is appended to the status history.

        Raises:
            ClaimNotFoundError: If no claim exists for ``claim_id``.
            StaleClaimError: If the stored status differs from ``expected_status``.
            StorageError: If the store fails.
        """
        ...

    @abstractmethod
    def count_by_status(self) -> dict[str, int]:
        """Return claim counts keyed by status value."""
        ...
