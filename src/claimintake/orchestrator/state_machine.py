"""Claim lifecycle state machine.

Every status change is validated against ``ALLOWED_TRANSITIONS``, stamped,
recorded in the claim's status history and persisted before it is returned.
Callers emit events only for claims returned from here.

    SUBMITTED    -> PROCESSING | REPROCESSING | ERROR
    PROCESSING   -> UNDER_REVIEW | APPROVED | REJECTED | REPROCESSING | ERROR
    UNDER_REVIEW -> APPROVED | REJECTED | REPROCESSING | ERROR
    REPROCESSING -> PROCESSING | REPROCESSING | ERROR

APPROVED, REJECTED, DUPLICATE and ERROR are terminal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from claimintake.core.errors import InvalidTransitionError, StaleClaimError
from claimintake.core.models import StatusChange
from claimintake.core.types import ClaimStatus
from claimintake.core.utils import utcnow


if TYPE_CHECKING:
    from claimintake.core.models import Claim
    from claimintake.storage.base import ClaimStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    ClaimStatus.SUBMITTED: frozenset(
        {ClaimStatus.PROCESSING, ClaimStatus.REPROCESSING, ClaimStatus.ERROR}
    ),
    ClaimStatus.PROCESSING: frozenset({
        ClaimStatus.UNDER_REVIEW,
        ClaimStatus.APPROVED,
        ClaimStatus.REJECTED,
        ClaimStatus.REPROCESSING,
        ClaimStatus.ERROR,
    }),
    ClaimStatus.UNDER_REVIEW: frozenset({
        ClaimStatus.APPROVED,
        ClaimStatus.REJECTED,
        ClaimStatus.REPROCESSING,
        ClaimStatus.ERROR,
    }),
    ClaimStatus.REPROCESSING: frozenset(
        {ClaimStatus.PROCESSING, ClaimStatus.REPROCESSING, ClaimStatus.ERROR}
    ),
}

INITIAL_STATUSES = frozenset({ClaimStatus.SUBMITTED, ClaimStatus.REJECTED})


class ClaimStateMachine:
    """Owns claim creation and every subsequent status change."""

    def __init__(self, store: ClaimStore) -> None:
        self._store = store

    @staticmethod
    def can_transition(current: ClaimStatus, target: ClaimStatus) -> bool:
        return target in ALLOWED_TRANSITIONS.get(current, frozenset())

    def create(self, claim: Claim, status: ClaimStatus, reason: str | None = None) -> Claim:
        """Persist a new claim in its initial status.

        Raises:
            ValueError: If ``status`` is not a valid initial status.
            IdempotencyConflictError: If another claim holds the idempotency key.
            StorageError: If the store fails.
        """
        if status not in INITIAL_STATUSES:
            msg = f"Claims cannot be created in status {status.value}"
            raise ValueError(msg)
        created = claim.model_copy(deep=True)
        created.status = status
        created.status_reason = reason
        created.updated_at = created.created_at
        created.status_history = [
            StatusChange(to_status=status, reason=reason, changed_at=created.created_at)
        ]
        saved = self._store.insert(created)
        logger.info("Created claim %s in status %s", saved.claim_id, status.value)
        return saved

    def transition(self, claim: Claim, target: ClaimStatus, reason: str | None = None) -> Claim:
        """Move a persisted claim to ``target`` and persist the change.

        The store applies the change only if the claim is still in the status
        ``claim`` was read in. The passed claim is left untouched; the
        persisted copy is returned.

        Raises:
            InvalidTransitionError: If the move is not allowed from the stored status.
            StaleClaimError: If the claim changed since it was read but the
                move is still allowed from its new status.
            StorageError: If the store fails.
        """
        current = claim.status
        if not self.can_transition(current, target):
            raise InvalidTransitionError(claim.claim_id, current, target)
        change = StatusChange(
            from_status=current, to_status=target, reason=reason, changed_at=utcnow()
        )
        try:
            saved = self._store.update_status(claim.claim_id, current, change)
        except StaleClaimError as e:
            if not self.can_transition(e.actual, target):
                raise InvalidTransitionError(claim.claim_id, e.actual, target) from e
            raise
        logger.info(
            "Claim %s moved from %s to %s", saved.claim_id, current.value, target.value
        )
        return saved

    def begin_processing(self, claim: Claim) -> Claim:
        return self.transition(claim, ClaimStatus.PROCESSING)

    def reprocess(self, claim: Claim, reason: str | None = None) -> Claim:
        return self.transition(claim, ClaimStatus.REPROCESSING, reason)

    def refer_for_review(self, claim: Claim, reason: str | None = None) -> Claim:
        return self.transition(claim, ClaimStatus.UNDER_REVIEW, reason)

    def adjudicate(self, claim: Claim, approved: bool, reason: str | None = None) -> Claim:
        """Record an adjudication decision made outside this pipeline."""
        target = ClaimStatus.APPROVED if approved else ClaimStatus.REJECTED
        return self.transition(claim, target, reason)

    def fail(self, claim: Claim, reason: str) -> Claim:
        return self.transition(claim, ClaimStatus.ERROR, reason)
