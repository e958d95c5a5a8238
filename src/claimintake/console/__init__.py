"""Console output helpers."""

from __future__ import annotations

from claimintake.console.logger import ClaimsConsole


__all__ = ["ClaimsConsole"]
