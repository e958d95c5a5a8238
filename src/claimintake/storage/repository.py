"""SQLite-based claim repository with atomic idempotent inserts."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from claimintake.core.errors import (
    ClaimNotFoundError,
    IdempotencyConflictError,
    StaleClaimError,
    StorageError,
)
from claimintake.core.types import ClaimStatus
from claimintake.storage.base import ClaimStore
from claimintake.storage.converters import (
    claim_to_row,
    history_to_row,
    line_to_row,
    row_to_claim,
)
from claimintake.storage.schema import INIT_SCHEMA


if TYPE_CHECKING:
    from collections.abc import Iterator

    from claimintake.core.models import Claim, StatusChange

logger = logging.getLogger(__name__)

INSERT_CLAIM_SQL = """
INSERT INTO claims
    (claim_id, tracking_number, provider_id, member_id, payer_id, service_date,
     total_amount, claim_type, status, status_reason, idempotency_key, created_by,
     created_at, updated_at, findings)
VALUES
    (:claim_id, :tracking_number, :provider_id, :member_id, :payer_id, :service_date,
     :total_amount, :claim_type, :status, :status_reason, :idempotency_key, :created_by,
     :created_at, :updated_at, :findings)
"""

UPDATE_STATUS_SQL = """
UPDATE claims
SET status = ?, status_reason = ?, updated_at = ?
WHERE claim_id = ? AND status = ?
"""


class SQLiteClaimRepository(ClaimStore):
    """SQLite repository for storing and retrieving claims.

    The unique index on ``idempotency_key`` makes the insert itself the
    uniqueness check, so two concurrent submissions with the same key can
    never both commit. Status updates are conditional on the stored status,
    so a writer holding a stale copy cannot overwrite a newer decision.
    """

    def __init__(self, db_path: str | Path = "claims.db", timeout: float = 5.0) -> None:
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._init_db()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        try:
            with self._connection() as conn:
                conn.executescript(INIT_SCHEMA)
        except sqlite3.Error as e:
            msg = f"Failed to initialize claims database at {self.db_path}: {e}"
            raise StorageError(msg) from e

    def find_by_id(self, claim_id: str) -> Claim | None:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT * FROM claims WHERE claim_id = ?", (claim_id,)
                ).fetchone()
                return row_to_claim(row, conn) if row else None
        except sqlite3.Error as e:
            msg = f"Failed to load claim {claim_id}: {e}"
            raise StorageError(msg) from e

    def find_by_idempotency_key(self, key: str) -> Claim | None:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT * FROM claims WHERE idempotency_key = ?", (key,)
                ).fetchone()
                return row_to_claim(row, conn) if row else None
        except sqlite3.Error as e:
            msg = f"Failed to look up idempotency key {key}: {e}"
            raise StorageError(msg) from e

    def insert(self, claim: Claim) -> Claim:
        try:
            with self._connection() as conn:
                conn.execute(INSERT_CLAIM_SQL, claim_to_row(claim))
                conn.executemany(
                    "INSERT INTO claim_lines VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    [line_to_row(claim.claim_id, line) for line in claim.claim_lines],
                )
                conn.executemany(
                    "INSERT INTO diagnosis_codes VALUES (?, ?, ?, ?, ?, ?, ?)",
                    [
                        (claim.claim_id, pos, d.code, d.code_type, d.description,
                         int(d.is_primary), d.sequence_number)
                        for pos, d in enumerate(claim.diagnosis_codes)
                    ],
                )
                conn.executemany(
                    "INSERT INTO claim_status_history VALUES (?, ?, ?, ?, ?, ?)",
                    [
                        history_to_row(claim.claim_id, pos, change)
                        for pos, change in enumerate(claim.status_history)
                    ],
                )
        except sqlite3.IntegrityError as e:
            if claim.idempotency_key and "idempotency_key" in str(e):
                raise IdempotencyConflictError(claim.idempotency_key) from e
            msg = f"Failed to insert claim {claim.claim_id}: {e}"
            raise StorageError(msg) from e
        except sqlite3.Error as e:
            msg = f"Failed to insert claim {claim.claim_id}: {e}"
            raise StorageError(msg) from e
        logger.debug("Inserted claim %s with status %s", claim.claim_id, claim.status.value)
        return claim

    def update_status(
        self, claim_id: str, expected_status: ClaimStatus, change: StatusChange
    ) -> Claim:
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    UPDATE_STATUS_SQL,
                    (change.to_status.value, change.reason, change.changed_at.isoformat(),
                     claim_id, expected_status.value),
                )
                if cursor.rowcount == 0:
                    row = conn.execute(
                        "SELECT status FROM claims WHERE claim_id = ?", (claim_id,)
                    ).fetchone()
                    if row is None:
                        raise ClaimNotFoundError(claim_id)
                    raise StaleClaimError(claim_id, expected_status, ClaimStatus(row["status"]))
                position = conn.execute(
                    "SELECT COUNT(*) FROM claim_status_history WHERE claim_id = ?", (claim_id,)
                ).fetchone()[0]
                conn.execute(
                    "INSERT INTO claim_status_history VALUES (?, ?, ?, ?, ?, ?)",
                    history_to_row(claim_id, position, change),
                )
                row = conn.execute(
                    "SELECT * FROM claims WHERE claim_id = ?", (claim_id,)
                ).fetchone()
                updated = row_to_claim(row, conn)
        except sqlite3.Error as e:
            msg = f"Failed to update claim {claim_id}: {e}"
            raise StorageError(msg) from e
        logger.debug("Updated claim %s to status %s", claim_id, change.to_status.value)
        return updated

    def count_by_status(self) -> dict[str, int]:
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT status, COUNT(*) as cnt FROM claims GROUP BY status ORDER BY status"
                ).fetchall()
        except sqlite3.Error as e:
            msg = f"Failed to count claims: {e}"
            raise StorageError(msg) from e
        return {r["status"]: r["cnt"] for r in rows}
