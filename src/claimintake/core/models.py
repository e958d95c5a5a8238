"""Data models for the claims pipeline."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from claimintake.core.types import (  # noqa: TC001 - Pydantic needs at runtime
    ClaimStatus,
    FindingCode,
    Severity,
    SubmissionStatus,
)
from claimintake.core.utils import to_money, utcnow


Money = Annotated[Decimal, BeforeValidator(to_money)]


class Finding(BaseModel):
    """A single validation or processing finding."""

    severity: Severity
    code: FindingCode
    message: str
    field: str | None = None

    model_config = {"frozen": True}

    @property
    def is_blocking(self) -> bool:
        return self.severity is Severity.ERROR


class ClaimLineSubmission(BaseModel):
    """One billable service line as submitted by the provider."""

    service_code: str
    service_date: date | None = None
    units: int = Field(gt=0)
    charged_amount: Money = Field(gt=0)
    place_of_service: str | None = None
    modifiers: list[str] = Field(default_factory=list)
    description: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.charged_amount * self.units


class DiagnosisCodeSubmission(BaseModel):
    """One diagnosis as submitted by the provider."""

    code: str
    code_type: str = "ICD-10"
    description: str | None = None
    is_primary: bool = False
    sequence_number: int | None = None


class ClaimSubmission(BaseModel):
    """Incoming claim submission request."""

    provider_id: str = Field(min_length=1)
    member_id: str = Field(min_length=1)
    payer_id: str = Field(min_length=1)
    service_date: date
    total_amount: Money
    claim_type: str = Field(min_length=1)
    idempotency_key: str | None = None
    created_by: str = "system"
    claim_lines: list[ClaimLineSubmission] = Field(default_factory=list)
    diagnosis_codes: list[DiagnosisCodeSubmission] = Field(default_factory=list)

    @field_validator("claim_type")
    @classmethod
    def _normalize_claim_type(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("idempotency_key")
    @classmethod
    def _blank_key_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class ClaimLine(BaseModel):
    """A persisted billable service line owned by a claim."""

    line_number: int
    service_code: str
    service_date: date
    units: int = Field(gt=0)
    charged_amount: Money
    approved_amount: Money | None = None
    place_of_service: str | None = None
    modifiers: list[str] = Field(default_factory=list)
    description: str | None = None


class DiagnosisCode(BaseModel):
    """A persisted diagnosis owned by a claim."""

    code: str
    code_type: str
    description: str | None = None
    is_primary: bool = False
    sequence_number: int | None = None


class StatusChange(BaseModel):
    """One entry of a claim's status history."""

    from_status: ClaimStatus | None = None
    to_status: ClaimStatus
    reason: str | None = None
    changed_at: datetime = Field(default_factory=utcnow)


class Claim(BaseModel):
    """Root claim entity. Status changes go through the state machine only."""

    claim_id: str
    tracking_number: str
    provider_id: str
    member_id: str
    payer_id: str
    service_date: date
    total_amount: Money
    claim_type: str
    status: ClaimStatus
    status_reason: str | None = None
    idempotency_key: str | None = None
    created_by: str = "system"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    claim_lines: list[ClaimLine] = Field(default_factory=list)
    diagnosis_codes: list[DiagnosisCode] = Field(default_factory=list)
    status_history: list[StatusChange] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    @classmethod
    def from_submission(
        cls,
        submission: ClaimSubmission,
        *,
        claim_id: str,
        tracking_number: str,
        status: ClaimStatus,
        findings: list[Finding] | None = None,
    ) -> Claim:
        """Build a claim entity with its lines and diagnoses from a submission."""
        now = utcnow()
        return cls(
            claim_id=claim_id,
            tracking_number=tracking_number,
            provider_id=submission.provider_id,
            member_id=submission.member_id,
            payer_id=submission.payer_id,
            service_date=submission.service_date,
            total_amount=submission.total_amount,
            claim_type=submission.claim_type,
            status=status,
            idempotency_key=submission.idempotency_key,
            created_by=submission.created_by,
            created_at=now,
            updated_at=now,
            claim_lines=[
                ClaimLine(
                    line_number=index,
                    service_code=line.service_code,
                    service_date=line.service_date or submission.service_date,
                    units=line.units,
                    charged_amount=line.charged_amount,
                    place_of_service=line.place_of_service,
                    modifiers=list(line.modifiers),
                    description=line.description,
                )
                for index, line in enumerate(submission.claim_lines, start=1)
            ],
            diagnosis_codes=[
                DiagnosisCode(
                    code=diag.code,
                    code_type=diag.code_type,
                    description=diag.description,
                    is_primary=diag.is_primary,
                    sequence_number=(
                        diag.sequence_number if diag.sequence_number is not None else index
                    ),
                )
                for index, diag in enumerate(submission.diagnosis_codes, start=1)
            ],
            findings=list(findings or []),
        )


class SubmissionResult(BaseModel):
    """Result returned by the orchestrator for submit and reprocess calls."""

    status: SubmissionStatus
    claim_id: str | None = None
    tracking_number: str | None = None
    submission_date: datetime | None = None
    findings: list[Finding] = Field(default_factory=list)

    @classmethod
    def for_claim(
        cls, claim: Claim, status: SubmissionStatus, findings: list[Finding] | None = None
    ) -> SubmissionResult:
        return cls(
            status=status,
            claim_id=claim.claim_id,
            tracking_number=claim.tracking_number,
            submission_date=claim.created_at,
            findings=list(findings or []),
        )


class ClaimEvent(BaseModel):
    """Domain event published after a committed state change."""

    event_type: str
    claim_id: str
    status: ClaimStatus
    timestamp: datetime = Field(default_factory=utcnow)

    def to_message(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
