"""Tests for the command-line interface."""

from __future__ import annotations

import json
import logging
import sqlite3

import pytest

from claimintake.cli import build_parser, main
from claimintake.storage.repository import SQLiteClaimRepository


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")


@pytest.fixture
def request_file(tmp_path, submission_data):
    path = tmp_path / "claim.json"
    path.write_text(json.dumps(submission_data), encoding="utf-8")
    return path


def _run(*argv: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


def test_parser_requires_claim_id_for_status():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["status"])


def test_mock_flags_are_exclusive(request_file):
    with pytest.raises(SystemExit):
        build_parser().parse_args(
            ["submit", str(request_file), "--mock-eligible", "--mock-ineligible"]
        )


def test_no_command_prints_help(capsys):
    assert _run() == 0
    assert "usage" in capsys.readouterr().out


def test_submit_and_reprocess(db_path, request_file):
    assert _run("--db", db_path, "submit", str(request_file), "--mock-eligible") == 0

    repo = SQLiteClaimRepository(db_path)
    assert repo.count_by_status() == {"SUBMITTED": 1}
    ((claim_id,),) = _claim_ids(db_path)

    assert _run("--db", db_path, "status", claim_id) == 0
    assert _run("--db", db_path, "reprocess", claim_id) == 0
    assert repo.count_by_status() == {"REPROCESSING": 1}
    assert _run("--db", db_path, "stats") == 0


def test_submit_ineligible_stores_nothing(db_path, request_file):
    assert _run("--db", db_path, "submit", str(request_file), "--mock-ineligible") == 0
    assert SQLiteClaimRepository(db_path).count_by_status() == {}


def test_submit_missing_file(db_path, tmp_path):
    assert _run("--db", db_path, "submit", str(tmp_path / "nope.json"), "--mock-eligible") == 1


def test_submit_invalid_body(db_path, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"provider_id": "P1"}), encoding="utf-8")

    assert _run("--db", db_path, "submit", str(path), "--mock-eligible") == 1


def test_unknown_claim_exits_not_found(db_path):
    assert _run("--db", db_path, "status", "CLM-NOPE") == 2
    assert _run("--db", db_path, "reprocess", "CLM-NOPE") == 2


def test_reprocess_terminal_claim_fails(db_path, tmp_path, submission_data):
    path = tmp_path / "rejected.json"
    path.write_text(json.dumps({**submission_data, "diagnosis_codes": []}), encoding="utf-8")
    assert _run("--db", db_path, "submit", str(path), "--mock-eligible") == 0
    ((claim_id,),) = _claim_ids(db_path)

    assert _run("--db", db_path, "reprocess", claim_id) == 1


def _claim_ids(db_path: str) -> list[tuple[str]]:
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute("SELECT claim_id FROM claims").fetchall()
    finally:
        conn.close()
