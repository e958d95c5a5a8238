"""Console logging and output for the claims CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from claimintake.console.display import print_claim, print_db_stats, print_submission_result


if TYPE_CHECKING:
    from claimintake.core.models import Claim, SubmissionResult


class ClaimsConsole:
    """Rich console interface for pipeline results."""

    def __init__(self, verbose: bool = False) -> None:
        self.console = Console()
        self.verbose = verbose

    def setup_logging(self, level: str = "INFO") -> None:
        logging.basicConfig(
            level=level if self.verbose else "WARNING",
            format="%(message)s",
            handlers=[
                RichHandler(
                    console=self.console, rich_tracebacks=True, show_time=False, show_path=False
                )
            ],
            force=True,
        )

    def print_header(self, title: str, source: str) -> None:
        header = Text()
        header.append("claimintake", style="bold blue")
        header.append(" - Claim Submission Pipeline\n\n", style="dim")
        header.append(f"{title}: ", style="bold")
        header.append(source, style="green")
        self.console.print(Panel(header, border_style="blue"))
        self.console.print()

    def print_submission_result(self, result: SubmissionResult) -> None:
        print_submission_result(self.console, result)

    def print_claim(self, claim: Claim) -> None:
        print_claim(self.console, claim)

    def print_db_stats(self, stats: dict[str, int]) -> None:
        print_db_stats(self.console, stats)

    def print_error(self, error: str) -> None:
        self.console.print()
        self.console.print(
            Panel(f"[red]{error}[/red]", title="[red]Error[/red]", border_style="red")
        )
