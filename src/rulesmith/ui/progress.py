"""
Progress reporter implementations for different output contexts.

Provides three implementations:
- RichProgressReporter: Interactive terminal with spinners and colors
- CIProgressReporter: CI-friendly with simple lines, no spinners/ANSI
- NullProgressReporter: Silent for tests and library use
"""

import sys
from typing import Any

from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .console import BRAND_BORDER, err_console


class RichProgressReporter:
    """
    Interactive terminal reporter using Rich library.

    Writes to stderr so that documents printed on stdout stay clean.
    """

    def __init__(self):
        self._status: Any = None

    def banner(self, name: str, version: str) -> None:
        """Display a styled application banner."""
        title = Text()
        title.append(name, style=f"bold {BRAND_BORDER}")
        title.append(f" v{version}", style="dim")
        err_console.print(Panel(title, border_style=BRAND_BORDER, padding=(0, 2)))

    def info(self, message: str) -> None:
        err_console.print(f"[info]{escape(message)}[/info]")

    def warning(self, message: str) -> None:
        err_console.print(f"[warning]{escape(message)}[/warning]")

    def success(self, message: str) -> None:
        err_console.print(f"[success]{escape(message)}[/success]")

    def start_status(self, message: str) -> Any:
        """Start a status spinner and return a context handle."""
        self._status = err_console.status(f"[info]{escape(message)}[/info]", spinner="dots")
        self._status.start()
        return self._status

    def stop_status(self) -> None:
        if self._status:
            self._status.stop()
            self._status = None


class CIProgressReporter:
    """
    CI-friendly reporter with simple line output.

    Uses plain print() to stderr without ANSI codes or spinners.
    """

    def banner(self, name: str, version: str) -> None:
        print(f"=== {name} v{version} ===", file=sys.stderr)

    def info(self, message: str) -> None:
        print(f"[INFO] {message}", file=sys.stderr)

    def warning(self, message: str) -> None:
        print(f"[WARNING] {message}", file=sys.stderr)

    def success(self, message: str) -> None:
        print(f"[SUCCESS] {message}", file=sys.stderr)

    def start_status(self, message: str) -> Any:
        print(f"[INFO] {message}", file=sys.stderr)
        return None

    def stop_status(self) -> None:
        pass


class NullProgressReporter:
    """
    Silent reporter.

    All methods are no-ops; index builds use it when no reporter is given.
    """

    def banner(self, name: str, version: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def start_status(self, message: str) -> Any:
        return None

    def stop_status(self) -> None:
        pass


def get_reporter(quiet: bool = False):
    """Pick a reporter for the current terminal."""
    if quiet:
        return NullProgressReporter()
    if sys.stderr.isatty():
        return RichProgressReporter()
    return CIProgressReporter()
