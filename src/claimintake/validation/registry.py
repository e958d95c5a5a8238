"""Rule registry holding validation rules in evaluation order."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from claimintake.core.models import ClaimSubmission, Finding


ValidationRule = Callable[[ClaimSubmission], list[Finding]]


class RuleRegistry:
    def __init__(self, rules: Iterable[ValidationRule] | None = None) -> None:
        self._rules: list[ValidationRule] = []
        if rules:
            self.extend(rules)

    def register(self, rule: ValidationRule) -> None:
        if rule not in self._rules:
            self._rules.append(rule)

    def extend(self, rules: Iterable[ValidationRule]) -> None:
        for rule in rules:
            self.register(rule)

    def active_rules(self) -> tuple[ValidationRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
