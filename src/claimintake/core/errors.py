"""Exception hierarchy for the claims pipeline.

Validation failures, eligibility denials and duplicate submissions are
reported through ``SubmissionResult`` and never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from claimintake.core.types import ClaimStatus


class ClaimsError(Exception):
    """Base class for all claims pipeline errors."""


class ClaimNotFoundError(ClaimsError):
    """Raised when no claim exists for the requested identifier."""

    def __init__(self, claim_id: str) -> None:
        super().__init__(f"Claim not found: {claim_id}")
        self.claim_id = claim_id


class InvalidTransitionError(ClaimsError):
    """Raised when a status change is not permitted by the state machine."""

    def __init__(self, claim_id: str, current: ClaimStatus, target: ClaimStatus) -> None:
        super().__init__(
            f"Claim {claim_id} cannot move from {current.value} to {target.value}"
        )
        self.claim_id = claim_id
        self.current = current
        self.target = target


class StaleClaimError(ClaimsError):
    """Raised when a claim's stored status changed since it was read."""

    def __init__(self, claim_id: str, expected: ClaimStatus, actual: ClaimStatus) -> None:
        super().__init__(
            f"Claim {claim_id} is {actual.value}, expected {expected.value}"
        )
        self.claim_id = claim_id
        self.expected = expected
        self.actual = actual


class StorageError(ClaimsError):
    """Raised when the claim store cannot complete an operation."""


class IdempotencyConflictError(StorageError):
    """Raised when another claim already holds the idempotency key."""

    def __init__(self, idempotency_key: str) -> None:
        super().__init__(f"Idempotency key already in use: {idempotency_key}")
        self.idempotency_key = idempotency_key


class EligibilityError(ClaimsError):
    """Raised by eligibility clients on transport or response failures."""


class EventPublishError(ClaimsError):
    """Raised by message publishers when an event cannot be delivered."""
