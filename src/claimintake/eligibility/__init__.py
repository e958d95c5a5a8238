"""Eligibility module - External eligibility checks behind a fail-closed gate."""

from __future__ import annotations

from claimintake.eligibility.client import (
    EligibilityClient,
    EligibilityResponse,
    HttpEligibilityClient,
    StaticEligibilityClient,
)
from claimintake.eligibility.gate import EligibilityGate


__all__ = [
    "EligibilityClient",
    "EligibilityGate",
    "EligibilityResponse",
    "HttpEligibilityClient",
    "StaticEligibilityClient",
]
