"""Converters between database rows and claim models."""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from claimintake.core.models import Claim, ClaimLine, DiagnosisCode, Finding, StatusChange
from claimintake.core.types import ClaimStatus


if TYPE_CHECKING:
    import sqlite3


def claim_to_row(claim: Claim) -> dict[str, Any]:
    return {
        "claim_id": claim.claim_id,
        "tracking_number": claim.tracking_number,
        "provider_id": claim.provider_id,
        "member_id": claim.member_id,
        "payer_id": claim.payer_id,
        "service_date": claim.service_date.isoformat(),
        "total_amount": str(claim.total_amount),
        "claim_type": claim.claim_type,
        "status": claim.status.value,
        "status_reason": claim.status_reason,
        "idempotency_key": claim.idempotency_key,
        "created_by": claim.created_by,
        "created_at": claim.created_at.isoformat(),
        "updated_at": claim.updated_at.isoformat(),
        "findings": json.dumps([f.model_dump(mode="json") for f in claim.findings]),
    }


def line_to_row(claim_id: str, line: ClaimLine) -> tuple[Any, ...]:
    return (
        claim_id,
        line.line_number,
        line.service_code,
        line.service_date.isoformat(),
        line.units,
        str(line.charged_amount),
        str(line.approved_amount) if line.approved_amount is not None else None,
        line.place_of_service,
        json.dumps(line.modifiers),
        line.description,
    )


def history_to_row(claim_id: str, position: int, change: StatusChange) -> tuple[Any, ...]:
    return (
        claim_id,
        position,
        change.from_status.value if change.from_status else None,
        change.to_status.value,
        change.reason,
        change.changed_at.isoformat(),
    )


def row_to_claim(row: sqlite3.Row, conn: sqlite3.Connection) -> Claim:
    """Convert a claims row plus its child rows to a Claim object."""
    claim_id = row["claim_id"]
    line_rows = conn.execute(
        "SELECT * FROM claim_lines WHERE claim_id = ? ORDER BY line_number", (claim_id,)
    ).fetchall()
    diag_rows = conn.execute(
        "SELECT * FROM diagnosis_codes WHERE claim_id = ? ORDER BY position", (claim_id,)
    ).fetchall()
    history_rows = conn.execute(
        "SELECT * FROM claim_status_history WHERE claim_id = ? ORDER BY position", (claim_id,)
    ).fetchall()

    claim_lines = [
        ClaimLine(
            line_number=r["line_number"],
            service_code=r["service_code"],
            service_date=date.fromisoformat(r["service_date"]),
            units=r["units"],
            charged_amount=Decimal(r["charged_amount"]),
            approved_amount=Decimal(r["approved_amount"]) if r["approved_amount"] else None,
            place_of_service=r["place_of_service"],
            modifiers=json.loads(r["modifiers"] or "[]"),
            description=r["description"],
        )
        for r in line_rows
    ]
    diagnosis_codes = [
        DiagnosisCode(
            code=r["code"],
            code_type=r["code_type"],
            description=r["description"],
            is_primary=bool(r["is_primary"]),
            sequence_number=r["sequence_number"],
        )
        for r in diag_rows
    ]
    status_history = [
        StatusChange(
            from_status=ClaimStatus(r["from_status"]) if r["from_status"] else None,
            to_status=ClaimStatus(r["to_status"]),
            reason=r["reason"],
            changed_at=datetime.fromisoformat(r["changed_at"]),
        )
        for r in history_rows
    ]
    findings = [Finding(**f) for f in json.loads(row["findings"] or "[]")]

    return Claim(
        claim_id=claim_id,
        tracking_number=row["tracking_number"],
        provider_id=row["provider_id"],
        member_id=row["member_id"],
        payer_id=row["payer_id"],
        service_date=date.fromisoformat(row["service_date"]),
        total_amount=Decimal(row["total_amount"]),
        claim_type=row["claim_type"],
        status=ClaimStatus(row["status"]),
        status_reason=row["status_reason"],
        idempotency_key=row["idempotency_key"],
        created_by=row["created_by"] or "system",
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        claim_lines=claim_lines,
        diagnosis_codes=diagnosis_codes,
        status_history=status_history,
        findings=findings,
    )
