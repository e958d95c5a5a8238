"""Validation module - Pure rule evaluation for claim submissions."""

from __future__ import annotations

from claimintake.validation.engine import ValidationEngine, has_blocking_errors
from claimintake.validation.registry import RuleRegistry, ValidationRule
from claimintake.validation.rules import DEFAULT_RULES


__all__ = [
    "DEFAULT_RULES",
    "RuleRegistry",
    "ValidationEngine",
    "ValidationRule",
    "has_blocking_errors",
]
