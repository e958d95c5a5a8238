"""Display components for console output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from claimintake.core.types import Severity, SubmissionStatus


if TYPE_CHECKING:
    from rich.console import Console

    from claimintake.core.models import Claim, Finding, SubmissionResult


STATUS_STYLES = {
    SubmissionStatus.SUBMITTED: "green",
    SubmissionStatus.REPROCESSING: "cyan",
    SubmissionStatus.DUPLICATE: "yellow",
    SubmissionStatus.REJECTED: "red",
    SubmissionStatus.ERROR: "red",
}

SEVERITY_STYLES = {Severity.INFO: "dim", Severity.WARNING: "yellow", Severity.ERROR: "red"}


def print_findings(console: Console, findings: list[Finding]) -> None:
    """Print validation findings as a table."""
    if not findings:
        console.print("  [green]✓[/green] No findings")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Severity", width=9)
    table.add_column("Code", style="cyan")
    table.add_column("Message")
    table.add_column("Field", style="dim")
    for f in findings:
        style = SEVERITY_STYLES[f.severity]
        table.add_row(
            f"[{style}]{f.severity.value}[/{style}]", f.code.value, f.message, f.field or ""
        )
    console.print(table)


def print_submission_result(console: Console, result: SubmissionResult) -> None:
    """Print the outcome of a submit or reprocess call."""
    color = STATUS_STYLES[result.status]
    body = Text()
    body.append("Status: ", style="bold")
    body.append(f"{result.status.value}\n", style=color)
    body.append("Claim ID: ", style="bold")
    body.append(f"{result.claim_id or '-'}\n")
    body.append("Tracking: ", style="bold")
    body.append(result.tracking_number or "-")
    if result.submission_date:
        body.append("\nSubmitted: ", style="bold")
        body.append(result.submission_date.strftime("%Y-%m-%d %H:%M:%S"), style="dim")
    console.print(Panel(body, title=f"[{color}]Claim[/{color}]", border_style=color))
    print_findings(console, result.findings)


def print_claim(console: Console, claim: Claim) -> None:
    """Print a claim with its lines, diagnoses and status history."""
    header = Table.grid(padding=(0, 2))
    header.add_column(style="bold")
    header.add_column()
    header.add_row("Claim ID", claim.claim_id)
    header.add_row("Tracking", claim.tracking_number)
    status = claim.status.value
    if claim.status_reason:
        status += f" ({claim.status_reason})"
    header.add_row("Status", status)
    header.add_row("Type", claim.claim_type)
    header.add_row(
        "Provider / Member / Payer", f"{claim.provider_id} / {claim.member_id} / {claim.payer_id}"
    )
    header.add_row("Service date", claim.service_date.isoformat())
    header.add_row("Total", f"{claim.total_amount}")
    header.add_row("Updated", claim.updated_at.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(Panel(header, title="[bold]Claim[/bold]", border_style="blue"))

    lines = Table(title="Claim Lines", show_header=True, header_style="bold")
    lines.add_column("#", justify="right", width=3)
    lines.add_column("Code", style="cyan")
    lines.add_column("Date")
    lines.add_column("Units", justify="right")
    lines.add_column("Charged", justify="right")
    lines.add_column("POS")
    for line in claim.claim_lines:
        lines.add_row(
            str(line.line_number), line.service_code, line.service_date.isoformat(),
            str(line.units), f"{line.charged_amount}", line.place_of_service or "",
        )
    console.print(lines)

    diags = Table(title="Diagnoses", show_header=True, header_style="bold")
    diags.add_column("Seq", justify="right", width=4)
    diags.add_column("Code", style="cyan")
    diags.add_column("Type")
    diags.add_column("Primary", justify="center")
    for d in claim.diagnosis_codes:
        diags.add_row(
            str(d.sequence_number or ""), d.code, d.code_type, "✓" if d.is_primary else ""
        )
    console.print(diags)

    history = Table(title="Status History", show_header=True, header_style="bold")
    history.add_column("When", style="dim")
    history.add_column("From")
    history.add_column("To", style="bold")
    history.add_column("Reason", style="dim")
    for h in claim.status_history:
        history.add_row(
            h.changed_at.strftime("%Y-%m-%d %H:%M:%S"),
            h.from_status.value if h.from_status else "-",
            h.to_status.value,
            h.reason or "",
        )
    console.print(history)


def print_db_stats(console: Console, stats: dict[str, int]) -> None:
    """Print claim counts by status."""
    table = Table(title="Claims by Status", show_header=True, header_style="bold")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")
    for status, count in stats.items():
        table.add_row(status, str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{sum(stats.values())}[/bold]")
    console.print(table)
