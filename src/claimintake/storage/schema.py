"""Database schema initialization for the claim repository."""

from __future__ import annotations


INIT_SCHEMA = """
-- Claim header
CREATE TABLE IF NOT EXISTS claims (
    claim_id TEXT PRIMARY KEY,
    tracking_number TEXT NOT NULL UNIQUE,
    provider_id TEXT NOT NULL,
    member_id TEXT NOT NULL,
    payer_id TEXT NOT NULL,
    service_date TEXT NOT NULL,
    total_amount TEXT NOT NULL,            -- Decimal as text, 2 dp
    claim_type TEXT NOT NULL,
    status TEXT NOT NULL,
    status_reason TEXT,
    idempotency_key TEXT,
    created_by TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    findings TEXT                          -- JSON list
);

-- Claim line details
CREATE TABLE IF NOT EXISTS claim_lines (
    claim_id TEXT NOT NULL,
    line_number INTEGER NOT NULL,
    service_code TEXT NOT NULL,
    service_date TEXT NOT NULL,
    units INTEGER NOT NULL CHECK (units > 0),
    charged_amount TEXT NOT NULL,
    approved_amount TEXT,
    place_of_service TEXT,
    modifiers TEXT,                        -- JSON list
    description TEXT,
    PRIMARY KEY (claim_id, line_number),
    FOREIGN KEY (claim_id) REFERENCES claims(claim_id) ON DELETE CASCADE
);

-- Diagnosis codes
CREATE TABLE IF NOT EXISTS diagnosis_codes (
    claim_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    code TEXT NOT NULL,
    code_type TEXT NOT NULL,
    description TEXT,
    is_primary INTEGER NOT NULL DEFAULT 0,
    sequence_number INTEGER,
    PRIMARY KEY (claim_id, position),
    FOREIGN KEY (claim_id) REFERENCES claims(claim_id) ON DELETE CASCADE
);

-- Status history
CREATE TABLE IF NOT EXISTS claim_status_history (
    claim_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    from_status TEXT,
    to_status TEXT NOT NULL,
    reason TEXT,
    changed_at TEXT NOT NULL,
    PRIMARY KEY (claim_id, position),
    FOREIGN KEY (claim_id) REFERENCES claims(claim_id) ON DELETE CASCADE
);

-- Indexes
CREATE UNIQUE INDEX IF NOT EXISTS idx_claims_idempotency_key ON claims(idempotency_key);
CREATE INDEX IF NOT EXISTS idx_claims_status ON claims(status);
CREATE INDEX IF NOT EXISTS idx_claims_provider ON claims(provider_id);
CREATE INDEX IF NOT EXISTS idx_claims_member ON claims(member_id);
"""
