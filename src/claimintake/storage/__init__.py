"""Storage layer for claim persistence."""

from __future__ import annotations

from claimintake.storage.base import ClaimStore
from claimintake.storage.memory import InMemoryClaimStore
from claimintake.storage.repository import SQLiteClaimRepository


__all__ = ["ClaimStore", "InMemoryClaimStore", "SQLiteClaimRepository"]
