"""
Output - Console summaries for the maintenance commands.

Colors are only emitted when writing to a terminal.
"""

import sys
from typing import Optional, TextIO

from ..application.maintenance import MaintenanceResult


RESET = "\033[0m"

STYLES = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
    "highlight": "\033[43m",
}

# Errors listed in full before the rest are only counted
MAX_LISTED_ERRORS = 5


class Console:
    """Writes run banners, summaries and prompts."""

    def __init__(self, color: bool = True, verbose: bool = False, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.color = color and self.stream.isatty()
        self.verbose = verbose

    def _style(self, text: str, *names: str) -> str:
        if not self.color:
            return text
        return "".join(STYLES[name] for name in names) + text + RESET

    def print(self, text: str = "") -> None:
        print(text, file=self.stream)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def section(self, text: str) -> None:
        self.print()
        self.print(self._style(f"→ {text}", "bold", "blue"))

    def success(self, text: str) -> None:
        self.print(self._style(f"  ✓ {text}", "green"))

    def error(self, text: str) -> None:
        self.print(self._style(f"  ✗ {text}", "red"))

    def info(self, text: str) -> None:
        self.print(self._style(f"  ℹ {text}", "cyan"))

    def detail(self, text: str) -> None:
        self.print(self._style(f"    {text}", "dim"))

    def dry_run_banner(self) -> None:
        """Announce that nothing will be written."""
        banner = "  ⚙ DRY-RUN MODE - No issues will be changed (use --execute)"
        self.print()
        if self.color:
            self.print(self._style(banner, "highlight", "bold"))
        else:
            self.print(f"*** {banner} ***")
        self.print()

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Print left-aligned columns sized to their widest cell."""
        widths = [max(len(str(cell)) for cell in column) for column in zip(headers, *rows)]

        self.print("  " + "  ".join(
            self._style(header.ljust(width), "bold") for header, width in zip(headers, widths)
        ))
        self.print("  " + "  ".join("-" * width for width in widths))
        for row in rows:
            self.print("  " + "  ".join(str(cell).ljust(width) for cell, width in zip(row, widths)))

    # -------------------------------------------------------------------------
    # Summaries
    # -------------------------------------------------------------------------

    def maintenance_result(self, title: str, result: MaintenanceResult) -> None:
        """Summarize a retitle / relabel run."""
        self.section(f"{title} Summary")
        self.print()
        self.info("Mode: DRY-RUN (no changes made)" if result.dry_run else "Mode: LIVE EXECUTION")
        self.print()

        self.table(["Issues", "Count"], [
            ["Scanned", str(result.issues_scanned)],
            ["Matched", str(result.issues_matched)],
            ["Updated", str(result.issues_updated)],
        ])

        if result.changes:
            self.print()
            self.table(
                ["Issue", "Before", "After"],
                [[f"#{number}", old, new] for number, old, new in result.changes],
            )

        if result.errors:
            self.print()
            self.error(f"{len(result.errors)} issue(s) could not be updated:")
            for message in result.errors[:MAX_LISTED_ERRORS]:
                self.detail(message)
            hidden = len(result.errors) - MAX_LISTED_ERRORS
            if hidden > 0:
                self.detail(f"... and {hidden} more")

        self.print()
        if result.success:
            self.success(f"{title} finished")
        else:
            self.error(f"{title} finished with errors")

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; anything but yes declines."""
        try:
            answer = input(self._style(f"\n⚠ {message} (y/N): ", "yellow"))
        except (EOFError, KeyboardInterrupt):
            self.print()
            return False
        return answer.strip().lower() in ("y", "yes")
