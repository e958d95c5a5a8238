"""Tests for the claim stores."""

from __future__ import annotations

import sqlite3
from decimal import Decimal

import pytest

from claimintake.core.errors import (
    ClaimNotFoundError,
    IdempotencyConflictError,
    StaleClaimError,
    StorageError,
)
from claimintake.core.models import Claim, ClaimSubmission, Finding, StatusChange
from claimintake.core.types import ClaimStatus, FindingCode, Severity
from claimintake.core.utils import generate_claim_id, generate_tracking_number
from claimintake.storage import SQLiteClaimRepository


def _claim(submission: ClaimSubmission, status: ClaimStatus = ClaimStatus.SUBMITTED) -> Claim:
    claim = Claim.from_submission(
        submission,
        claim_id=generate_claim_id(),
        tracking_number=generate_tracking_number(),
        status=status,
        findings=[Finding(
            severity=Severity.WARNING,
            code=FindingCode.AMOUNT_MISMATCH,
            message="mismatch",
            field="total_amount",
        )],
    )
    claim.status_history = [StatusChange(to_status=status, changed_at=claim.created_at)]
    return claim


class TestClaimStoreContract:
    """Behavior shared by every ClaimStore implementation."""

    def test_round_trip(self, store, make_submission):
        submission = make_submission(
            idempotency_key="key-1",
            total_amount="200.50",
            claim_lines=[
                {"service_code": "99213", "units": 1, "charged_amount": "150.00",
                 "place_of_service": "11", "modifiers": ["25", "59"], "description": "Visit"},
                {"service_code": "36415", "service_date": "2024-03-16", "units": 2,
                 "charged_amount": "25.25"},
            ],
            diagnosis_codes=[
                {"code": "E11.9", "code_type": "ICD-10", "is_primary": True},
                {"code": "I10", "code_type": "ICD-10", "description": "Hypertension",
                 "sequence_number": 7},
            ],
        )
        claim = _claim(submission)
        store.insert(claim)

        loaded = store.find_by_id(claim.claim_id)

        assert loaded == claim
        assert loaded.total_amount == Decimal("200.50")
        assert loaded.claim_lines[1].charged_amount == Decimal("25.25")
        assert loaded.claim_lines[1].approved_amount is None
        assert loaded.claim_lines[0].modifiers == ["25", "59"]
        assert [d.sequence_number for d in loaded.diagnosis_codes] == [1, 7]

    def test_find_by_idempotency_key(self, store, make_submission):
        claim = _claim(make_submission(idempotency_key="abc"))
        store.insert(claim)

        assert store.find_by_idempotency_key("abc").claim_id == claim.claim_id
        assert store.find_by_idempotency_key("other") is None

    def test_unknown_claim(self, store):
        assert store.find_by_id("CLM-NOPE") is None

    def test_duplicate_idempotency_key_conflicts(self, store, make_submission):
        store.insert(_claim(make_submission(idempotency_key="same")))

        with pytest.raises(IdempotencyConflictError) as exc_info:
            store.insert(_claim(make_submission(idempotency_key="same")))
        assert exc_info.value.idempotency_key == "same"
        assert store.count_by_status() == {"SUBMITTED": 1}

    def test_claims_without_key_do_not_conflict(self, store, submission):
        store.insert(_claim(submission))
        store.insert(_claim(submission))

        assert store.count_by_status() == {"SUBMITTED": 2}

    def test_duplicate_claim_id_is_rejected(self, store, submission):
        claim = _claim(submission)
        store.insert(claim)

        with pytest.raises(StorageError):
            store.insert(claim)
        assert store.count_by_status() == {"SUBMITTED": 1}

    def test_update_status_appends_history(self, store, make_submission):
        claim = _claim(make_submission(idempotency_key="k"))
        store.insert(claim)
        change = StatusChange(
            from_status=ClaimStatus.SUBMITTED, to_status=ClaimStatus.PROCESSING, reason="picked up"
        )

        updated = store.update_status(claim.claim_id, ClaimStatus.SUBMITTED, change)

        assert updated == store.find_by_id(claim.claim_id)
        assert updated.status is ClaimStatus.PROCESSING
        assert updated.status_reason == "picked up"
        assert updated.updated_at == change.changed_at
        assert updated.tracking_number == claim.tracking_number
        assert updated.created_at == claim.created_at
        assert updated.status_history == [*claim.status_history, change]

    def test_update_status_with_wrong_expected_status(self, store, submission):
        claim = _claim(submission)
        store.insert(claim)
        store.update_status(
            claim.claim_id,
            ClaimStatus.SUBMITTED,
            StatusChange(from_status=ClaimStatus.SUBMITTED, to_status=ClaimStatus.PROCESSING),
        )

        with pytest.raises(StaleClaimError) as exc_info:
            store.update_status(
                claim.claim_id,
                ClaimStatus.SUBMITTED,
                StatusChange(from_status=ClaimStatus.SUBMITTED, to_status=ClaimStatus.ERROR),
            )

        assert exc_info.value.actual is ClaimStatus.PROCESSING
        loaded = store.find_by_id(claim.claim_id)
        assert loaded.status is ClaimStatus.PROCESSING
        assert [h.to_status for h in loaded.status_history] == [
            ClaimStatus.SUBMITTED,
            ClaimStatus.PROCESSING,
        ]

    def test_update_status_unknown_claim(self, store):
        with pytest.raises(ClaimNotFoundError):
            store.update_status(
                "CLM-NOPE", ClaimStatus.SUBMITTED, StatusChange(to_status=ClaimStatus.ERROR)
            )

    def test_returned_claims_are_detached(self, store, submission):
        claim = _claim(submission)
        store.insert(claim)

        loaded = store.find_by_id(claim.claim_id)
        loaded.status = ClaimStatus.ERROR

        assert store.find_by_id(claim.claim_id).status is ClaimStatus.SUBMITTED

    def test_count_by_status(self, store, submission):
        store.insert(_claim(submission))
        store.insert(_claim(submission, ClaimStatus.REJECTED))
        store.insert(_claim(submission, ClaimStatus.REJECTED))

        assert store.count_by_status() == {"REJECTED": 2, "SUBMITTED": 1}


class TestSQLiteClaimRepository:
    def test_amounts_stored_as_exact_text(self, sqlite_repo, submission):
        claim = _claim(submission)
        sqlite_repo.insert(claim)

        conn = sqlite3.connect(sqlite_repo.db_path)
        try:
            total = conn.execute(
                "SELECT total_amount FROM claims WHERE claim_id = ?", (claim.claim_id,)
            ).fetchone()[0]
        finally:
            conn.close()
        assert total == "150.00"

    def test_data_survives_reopen(self, tmp_path, submission):
        claim = _claim(submission)
        SQLiteClaimRepository(tmp_path / "c.db").insert(claim)

        assert SQLiteClaimRepository(tmp_path / "c.db").find_by_id(claim.claim_id) == claim

    def test_failed_insert_leaves_no_partial_claim(self, sqlite_repo, make_submission):
        sqlite_repo.insert(_claim(make_submission(idempotency_key="dup")))
        loser = _claim(make_submission(idempotency_key="dup"))

        with pytest.raises(IdempotencyConflictError):
            sqlite_repo.insert(loser)

        assert sqlite_repo.find_by_id(loser.claim_id) is None

    def test_unusable_path_raises_storage_error(self, tmp_path):
        with pytest.raises(StorageError):
            SQLiteClaimRepository(tmp_path / "missing-dir" / "claims.db")
