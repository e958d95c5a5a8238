"""claimintake - Healthcare claim submission pipeline.

This package provides the claim intake core:
- Idempotent claim submission
- Structural and business rule validation
- Fail-closed member eligibility checks
- Claim lifecycle state machine
- Best-effort domain event emission
"""

from __future__ import annotations

from claimintake.config.settings import Settings
from claimintake.core.models import (
    Claim,
    ClaimSubmission,
    Finding,
    SubmissionResult,
)
from claimintake.core.types import ClaimStatus, SubmissionStatus
from claimintake.orchestrator.pipeline import ClaimsPipeline


__version__ = "0.1.0"

__all__ = [
    "Claim",
    "ClaimStatus",
    "ClaimSubmission",
    "ClaimsPipeline",
    "Finding",
    "Settings",
    "SubmissionResult",
    "SubmissionStatus",
]
