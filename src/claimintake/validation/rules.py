"""Built-in claim validation rules.

Each rule takes a ``ClaimSubmission`` and returns the findings it produces.
Rules are pure and never raise for malformed content; they report it.
"""

from __future__ import annotations

import re
from decimal import Decimal

from claimintake.core.models import ClaimSubmission, Finding
from claimintake.core.types import FindingCode, Severity


SERVICE_CODE_PATTERN = re.compile(r"\d{4,5}[A-Z]?")
ICD10_PATTERN = re.compile(r"[A-Z]\d{2}(\.[0-9A-Z]{1,4})?")
ICD10_CODE_TYPE = "ICD-10"


def structural_rule(submission: ClaimSubmission) -> list[Finding]:
    """Require at least one claim line and one diagnosis code."""
    findings: list[Finding] = []
    if not submission.claim_lines:
        findings.append(Finding(
            severity=Severity.ERROR,
            code=FindingCode.MISSING_CLAIM_LINES,
            message="At least one claim line is required",
            field="claim_lines",
        ))
    if not submission.diagnosis_codes:
        findings.append(Finding(
            severity=Severity.ERROR,
            code=FindingCode.MISSING_DIAGNOSIS,
            message="At least one diagnosis code is required",
            field="diagnosis_codes",
        ))
    return findings


def amount_reconciliation_rule(submission: ClaimSubmission) -> list[Finding]:
    """Warn when the declared total differs from the sum of line charges."""
    calculated = sum((line.line_total for line in submission.claim_lines), Decimal("0.00"))
    if calculated == submission.total_amount:
        return []
    return [Finding(
        severity=Severity.WARNING,
        code=FindingCode.AMOUNT_MISMATCH,
        message=(
            f"Total amount {submission.total_amount} does not match "
            f"sum of claim line amounts {calculated}"
        ),
        field="total_amount",
    )]


def service_code_rule(submission: ClaimSubmission) -> list[Finding]:
    findings: list[Finding] = []
    for index, line in enumerate(submission.claim_lines):
        code = line.service_code or ""
        if not SERVICE_CODE_PATTERN.fullmatch(code):
            findings.append(Finding(
                severity=Severity.ERROR,
                code=FindingCode.INVALID_SERVICE_CODE,
                message=f"Invalid service code: {code}",
                field=f"claim_lines[{index}].service_code",
            ))
    return findings


def diagnosis_code_rule(submission: ClaimSubmission) -> list[Finding]:
    """ICD-10 codes must match the ICD-10 shape; other systems must be non-blank."""
    findings: list[Finding] = []
    for index, diag in enumerate(submission.diagnosis_codes):
        code = diag.code or ""
        if diag.code_type == ICD10_CODE_TYPE:
            valid = ICD10_PATTERN.fullmatch(code) is not None
        else:
            valid = bool(code.strip())
        if not valid:
            findings.append(Finding(
                severity=Severity.ERROR,
                code=FindingCode.INVALID_DIAGNOSIS_CODE,
                message=f"Invalid diagnosis code: {code}",
                field=f"diagnosis_codes[{index}].code",
            ))
    return findings


def primary_diagnosis_rule(submission: ClaimSubmission) -> list[Finding]:
    if not submission.diagnosis_codes:
        return []
    primary_count = sum(1 for diag in submission.diagnosis_codes if diag.is_primary)
    if primary_count == 1:
        return []
    return [Finding(
        severity=Severity.WARNING,
        code=FindingCode.PRIMARY_DIAGNOSIS,
        message=f"Exactly one primary diagnosis expected, found {primary_count}",
        field="diagnosis_codes",
    )]


DEFAULT_RULES = (
    structural_rule,
    amount_reconciliation_rule,
    service_code_rule,
    diagnosis_code_rule,
    primary_diagnosis_rule,
)
