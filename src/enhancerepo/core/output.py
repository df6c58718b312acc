from __future__ import annotations

"""Centralized console output for CLI commands."""

from enum import Enum
from typing import Any

from rich.console import Console


class OutputLevel(Enum):
    """Output verbosity level."""

    QUIET = 0  # Only errors
    NORMAL = 1
    VERBOSE = 2  # All details


class Outputter:
    """Console output handler honouring quiet/normal/verbose modes."""

    def __init__(self, level: OutputLevel = OutputLevel.NORMAL):
        """Initialize outputter.

        Args:
            level: Output verbosity level
        """
        self.level = level
        self.console = Console()
        self.err_console = Console(stderr=True)

    def phase(self, name: str) -> None:
        """Show phase marker."""
        if self.level == OutputLevel.QUIET:
            return

        self.console.print(f"\n=== {name} ===", style="bold cyan")

    def info(self, message: str) -> None:
        if self.level == OutputLevel.QUIET:
            return

        self.console.print(message)

    def verbose(self, message: str) -> None:
        if self.level != OutputLevel.VERBOSE:
            return

        self.console.print(message)

    def success(self, message: str) -> None:
        if self.level == OutputLevel.QUIET:
            return

        self.console.print(f"✓ {message}", style="green")

    def warning(self, message: str) -> None:
        if self.level == OutputLevel.QUIET:
            return

        self.console.print(f"⚠️  {message}", style="yellow")

    def error(self, message: str) -> None:
        """Show error message (always shown, even in quiet mode)."""
        self.err_console.print(f"✗ {message}", style="red")

    def summary(self, **stats: Any) -> None:
        """Show summary statistics.

        Args:
            **stats: Statistics as key-value pairs
        """
        if self.level == OutputLevel.QUIET:
            return

        self.console.print("\n=== Summary ===", style="bold")
        for key, value in stats.items():
            # Convert key from snake_case to Title Case
            display_key = key.replace("_", " ").title()
            self.console.print(f"  {display_key}: {value}")
