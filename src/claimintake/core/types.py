"""Core type definitions and enums."""

from __future__ import annotations

from enum import Enum


class ClaimStatus(str, Enum):
    """Lifecycle states of a persisted claim."""

    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    REPROCESSING = "REPROCESSING"
    DUPLICATE = "DUPLICATE"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.DUPLICATE, ClaimStatus.ERROR}
)


class SubmissionStatus(str, Enum):
    """Outcome reported to the caller of a submit or reprocess operation."""

    SUBMITTED = "SUBMITTED"
    REJECTED = "REJECTED"
    DUPLICATE = "DUPLICATE"
    REPROCESSING = "REPROCESSING"
    ERROR = "ERROR"


class Severity(str, Enum):
    """Severity levels for validation findings."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class FindingCode(str, Enum):
    """Machine-readable finding codes."""

    MISSING_CLAIM_LINES = "MISSING_CLAIM_LINES"
    MISSING_DIAGNOSIS = "MISSING_DIAGNOSIS"
    AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
    INVALID_SERVICE_CODE = "INVALID_SERVICE_CODE"
    INVALID_DIAGNOSIS_CODE = "INVALID_DIAGNOSIS_CODE"
    PRIMARY_DIAGNOSIS = "PRIMARY_DIAGNOSIS"
    ELIGIBILITY_FAILED = "ELIGIBILITY_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class EventType(str, Enum):
    """Domain events published for downstream consumers."""

    SUBMITTED = "claim.submitted"
    REPROCESSING = "claim.reprocessing"
