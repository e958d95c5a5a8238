"""Validation engine evaluating every registered rule against a submission."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from claimintake.validation.registry import RuleRegistry
from claimintake.validation.rules import DEFAULT_RULES


if TYPE_CHECKING:
    from collections.abc import Iterable

    from claimintake.core.models import ClaimSubmission, Finding
    from claimintake.validation.registry import ValidationRule

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Runs all rules in registration order and accumulates their findings.

    Evaluation never stops at the first error; callers decide what blocks.
    """

    def __init__(self, rules: Iterable[ValidationRule] | None = None) -> None:
        self._registry = RuleRegistry(DEFAULT_RULES if rules is None else rules)

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def validate(self, submission: ClaimSubmission) -> list[Finding]:
        findings: list[Finding] = []
        for rule in self._registry.active_rules():
            findings.extend(rule(submission))
        logger.debug(
            "Validation produced %d findings (%d blocking)",
            len(findings),
            sum(1 for f in findings if f.is_blocking),
        )
        return findings


def has_blocking_errors(findings: Iterable[Finding]) -> bool:
    return any(f.is_blocking for f in findings)
