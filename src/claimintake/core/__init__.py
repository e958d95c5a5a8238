"""Core module - Models, enums, errors and shared helpers."""

from __future__ import annotations

from claimintake.core.errors import (
    ClaimNotFoundError,
    ClaimsError,
    EligibilityError,
    EventPublishError,
    IdempotencyConflictError,
    InvalidTransitionError,
    StaleClaimError,
    StorageError,
)
from claimintake.core.models import (
    Claim,
    ClaimEvent,
    ClaimLine,
    ClaimLineSubmission,
    ClaimSubmission,
    DiagnosisCode,
    DiagnosisCodeSubmission,
    Finding,
    StatusChange,
    SubmissionResult,
)
from claimintake.core.types import (
    ClaimStatus,
    EventType,
    FindingCode,
    Severity,
    SubmissionStatus,
)
from claimintake.core.utils import generate_claim_id, generate_tracking_number, to_money


__all__ = [
    # Models
    "Claim",
    "ClaimEvent",
    "ClaimLine",
    "ClaimLineSubmission",
    # Errors
    "ClaimNotFoundError",
    # Types
    "ClaimStatus",
    "ClaimSubmission",
    "ClaimsError",
    "DiagnosisCode",
    "DiagnosisCodeSubmission",
    "EligibilityError",
    "EventPublishError",
    "EventType",
    "Finding",
    "FindingCode",
    "IdempotencyConflictError",
    "InvalidTransitionError",
    "Severity",
    "StaleClaimError",
    "StatusChange",
    "StorageError",
    "SubmissionResult",
    "SubmissionStatus",
    # Utils
    "generate_claim_id",
    "generate_tracking_number",
    "to_money",
]
