"""Orchestrator module - Submission pipeline and claim lifecycle."""

from __future__ import annotations

from claimintake.orchestrator.idempotency import IdempotencyGuard
from claimintake.orchestrator.pipeline import ClaimsPipeline
from claimintake.orchestrator.state_machine import ALLOWED_TRANSITIONS, ClaimStateMachine


__all__ = ["ALLOWED_TRANSITIONS", "ClaimStateMachine", "ClaimsPipeline", "IdempotencyGuard"]
