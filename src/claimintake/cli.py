"""Command-line interface for claimintake."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from claimintake.config.settings import Settings
from claimintake.console.logger import ClaimsConsole
from claimintake.core.errors import ClaimNotFoundError, ClaimsError
from claimintake.core.models import ClaimSubmission
from claimintake.core.types import SubmissionStatus
from claimintake.orchestrator.pipeline import ClaimsPipeline


console = ClaimsConsole()

EXIT_NOT_FOUND = 2


def _build_pipeline(args: argparse.Namespace) -> ClaimsPipeline:
    settings = Settings()
    if args.db:
        settings.storage.db_path = args.db
    console.verbose = args.verbose
    console.setup_logging(settings.log_level)
    mock = getattr(args, "mock_eligible", False) or getattr(args, "mock_ineligible", False)
    return ClaimsPipeline.create(
        settings, mock=mock, mock_eligible=not getattr(args, "mock_ineligible", False)
    )


def submit_claim(args: argparse.Namespace) -> int:
    """Submit a claim read from a JSON file."""
    request_path = Path(args.request_path)
    if not request_path.exists():
        console.print_error(f"Request file not found: {request_path}")
        return 1
    try:
        submission = ClaimSubmission.model_validate_json(request_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print_error(f"Invalid claim submission:\n{e}")
        return 1

    pipeline = _build_pipeline(args)
    console.print_header("Submission", str(request_path))
    try:
        result = pipeline.submit_claim(submission)
    finally:
        pipeline.close()
    console.print_submission_result(result)
    return 1 if result.status is SubmissionStatus.ERROR else 0


def show_status(args: argparse.Namespace) -> int:
    pipeline = _build_pipeline(args)
    try:
        claim = pipeline.get_claim(args.claim_id)
    finally:
        pipeline.close()
    console.print_claim(claim)
    return 0


def reprocess_claim(args: argparse.Namespace) -> int:
    pipeline = _build_pipeline(args)
    try:
        result = pipeline.reprocess_claim(args.claim_id)
    finally:
        pipeline.close()
    console.print_submission_result(result)
    return 1 if result.status is SubmissionStatus.ERROR else 0


def show_stats(args: argparse.Namespace) -> int:
    pipeline = _build_pipeline(args)
    try:
        stats = pipeline.get_stats()
    finally:
        pipeline.close()
    console.print_db_stats(stats)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claimintake", description="Healthcare claim submission pipeline"
    )
    parser.add_argument("--db", help="Claims database path (overrides CLAIMS_DB_PATH)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show pipeline logs")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sub = subparsers.add_parser("submit", help="Submit a claim from a JSON request file")
    sub.add_argument("request_path", help="Path to the claim submission JSON")
    mock = sub.add_mutually_exclusive_group()
    mock.add_argument(
        "--mock-eligible",
        action="store_true",
        help="Skip the eligibility service, treat as eligible",
    )
    mock.add_argument(
        "--mock-ineligible",
        action="store_true",
        help="Skip the eligibility service, treat as ineligible",
    )
    sub.set_defaults(handler=submit_claim)

    status = subparsers.add_parser("status", help="Show a claim and its status history")
    status.add_argument("claim_id", help="Claim identifier")
    status.set_defaults(handler=show_status)

    reprocess = subparsers.add_parser("reprocess", help="Send a claim back for processing")
    reprocess.add_argument("claim_id", help="Claim identifier")
    reprocess.set_defaults(handler=reprocess_claim)

    stats = subparsers.add_parser("stats", help="Show claim counts by status")
    stats.set_defaults(handler=show_stats)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        sys.exit(args.handler(args))
    except ClaimNotFoundError as e:
        console.print_error(str(e))
        sys.exit(EXIT_NOT_FOUND)
    except KeyboardInterrupt:
        console.console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except ClaimsError as e:
        console.print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
