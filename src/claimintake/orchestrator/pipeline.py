"""Pipeline orchestrator for claim submission and reprocessing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from claimintake.config.settings import Settings
from claimintake.core.errors import ClaimNotFoundError, IdempotencyConflictError, StorageError
from claimintake.core.models import Claim, Finding, SubmissionResult
from claimintake.core.types import ClaimStatus, EventType, FindingCode, Severity, SubmissionStatus
from claimintake.core.utils import generate_claim_id, generate_tracking_number
from claimintake.eligibility.gate import EligibilityGate
from claimintake.events.emitter import EventEmitter
from claimintake.orchestrator.idempotency import IdempotencyGuard
from claimintake.orchestrator.state_machine import ClaimStateMachine
from claimintake.validation.engine import ValidationEngine, has_blocking_errors


if TYPE_CHECKING:
    from claimintake.core.models import ClaimSubmission
    from claimintake.eligibility.client import EligibilityClient
    from claimintake.events.publisher import MessagePublisher
    from claimintake.storage.base import ClaimStore

logger = logging.getLogger(__name__)


class ClaimsPipeline:
    """Orchestrates the claim submission pipeline.

    Stages run in order and each can short-circuit: idempotency guard,
    validation, eligibility gate, state machine (persist), event emission.
    """

    def __init__(
        self,
        store: ClaimStore,
        eligibility_client: EligibilityClient,
        publisher: MessagePublisher,
        settings: Settings | None = None,
        validator: ValidationEngine | None = None,
    ) -> None:
        if settings is None:
            settings = Settings()
        self.settings = settings
        self._store = store

        self._idempotency = IdempotencyGuard(store)
        self._validator = validator or ValidationEngine()
        self._eligibility = EligibilityGate(eligibility_client)
        self._state_machine = ClaimStateMachine(store)
        self._events = EventEmitter(
            publisher,
            topic=settings.events.topic,
            async_dispatch=settings.events.async_dispatch,
        )

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        mock: bool = False,
        mock_eligible: bool = True,
    ) -> ClaimsPipeline:
        """Factory method wiring the SQLite store, eligibility client and publisher."""
        from claimintake.eligibility.client import HttpEligibilityClient, StaticEligibilityClient
        from claimintake.events.publisher import LoggingPublisher
        from claimintake.storage.repository import SQLiteClaimRepository

        if settings is None:
            settings = Settings()
        store = SQLiteClaimRepository(
            settings.storage.db_path, timeout=settings.storage.timeout_seconds
        )
        client: EligibilityClient
        if mock:
            client = StaticEligibilityClient(default=mock_eligible)
        else:
            client = HttpEligibilityClient(settings.eligibility)
        return cls(store, client, LoggingPublisher(), settings=settings)

    @property
    def state_machine(self) -> ClaimStateMachine:
        return self._state_machine

    def submit_claim(self, submission: ClaimSubmission) -> SubmissionResult:
        """Run a submission through the full pipeline."""
        logger.info(
            "Submitting %s claim for member %s from provider %s",
            submission.claim_type,
            submission.member_id,
            submission.provider_id,
        )

        # Stage 1: Idempotency
        try:
            existing = self._idempotency.check(submission.idempotency_key)
        except StorageError as e:
            return self._storage_failure(e)
        if existing is not None:
            return SubmissionResult.for_claim(existing, SubmissionStatus.DUPLICATE)

        # Stage 2: Validation
        findings = self._validator.validate(submission)

        # Stage 3: Eligibility
        if not self._eligibility.check_eligibility(submission.member_id, submission.payer_id):
            logger.info(
                "Rejected submission for member %s: not eligible with payer %s",
                submission.member_id,
                submission.payer_id,
            )
            return SubmissionResult(
                status=SubmissionStatus.REJECTED,
                findings=[Finding(
                    severity=Severity.ERROR,
                    code=FindingCode.ELIGIBILITY_FAILED,
                    message="Member is not eligible for benefits",
                    field="member_id",
                )],
            )

        # Stage 4: Persist
        rejected = has_blocking_errors(findings)
        claim = Claim.from_submission(
            submission,
            claim_id=generate_claim_id(),
            tracking_number=generate_tracking_number(),
            status=ClaimStatus.SUBMITTED,
            findings=findings,
        )
        try:
            if rejected:
                claim = self._state_machine.create(
                    claim, ClaimStatus.REJECTED, reason=FindingCode.VALIDATION_FAILED.value
                )
            else:
                claim = self._state_machine.create(claim, ClaimStatus.SUBMITTED)
        except IdempotencyConflictError as e:
            return self._resolve_duplicate(e.idempotency_key)
        except StorageError as e:
            return self._storage_failure(e)

        if rejected:
            logger.info(
                "Rejected claim %s with %d validation errors",
                claim.claim_id,
                sum(1 for f in findings if f.is_blocking),
            )
            return SubmissionResult.for_claim(claim, SubmissionStatus.REJECTED, findings)

        # Stage 5: Notify
        self._events.emit(EventType.SUBMITTED, claim)
        logger.info("Claim %s submitted, tracking %s", claim.claim_id, claim.tracking_number)
        return SubmissionResult.for_claim(
            claim, SubmissionStatus.SUBMITTED, [f for f in findings if not f.is_blocking]
        )

    def reprocess_claim(self, claim_id: str) -> SubmissionResult:
        """Send an existing claim back for processing.

        Validation and eligibility are not re-run.

        Raises:
            ClaimNotFoundError: If no claim exists for ``claim_id``.
            InvalidTransitionError: If the claim is in a terminal status,
                including one committed concurrently after it was read.
            StaleClaimError: If the claim changed concurrently to another
                non-terminal status.
        """
        try:
            claim = self._store.find_by_id(claim_id)
        except StorageError as e:
            return self._storage_failure(e, claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)

        try:
            claim = self._state_machine.reprocess(claim)
        except StorageError as e:
            return self._storage_failure(e, claim_id)

        self._events.emit(EventType.REPROCESSING, claim)
        return SubmissionResult.for_claim(claim, SubmissionStatus.REPROCESSING)

    def get_claim(self, claim_id: str) -> Claim:
        """Look up a claim and its current status.

        Raises:
            ClaimNotFoundError: If no claim exists for ``claim_id``.
        """
        claim = self._store.find_by_id(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim

    def get_stats(self) -> dict[str, int]:
        return self._store.count_by_status()

    def flush_events(self, timeout: float | None = None) -> None:
        self._events.flush(timeout)

    def close(self) -> None:
        self._events.close()

    def _resolve_duplicate(self, idempotency_key: str) -> SubmissionResult:
        try:
            winner = self._idempotency.resolve_conflict(idempotency_key)
        except StorageError as e:
            return self._storage_failure(e)
        return SubmissionResult.for_claim(winner, SubmissionStatus.DUPLICATE)

    def _storage_failure(
        self, error: StorageError, claim_id: str | None = None
    ) -> SubmissionResult:
        logger.error("Storage failure%s: %s", f" for claim {claim_id}" if claim_id else "", error)
        return SubmissionResult(
            status=SubmissionStatus.ERROR,
            claim_id=claim_id,
            findings=[Finding(
                severity=Severity.ERROR,
                code=FindingCode.STORAGE_FAILURE,
                message=str(error),
            )],
        )
