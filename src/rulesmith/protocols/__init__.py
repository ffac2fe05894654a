"""
Port interfaces (protocols) for external dependencies.

These define the contracts that adapters must implement.
"""

from typing import Any, List, Protocol

from ..infrastructure.engine.args import EngineArgs
from ..infrastructure.engine.runner import EngineResult


class ProgressReporter(Protocol):
    """Where builds and commands send their status and skip warnings."""

    def banner(self, name: str, version: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        ...

    def start_status(self, message: str) -> Any:
        ...

    def stop_status(self) -> None:
        ...


class EngineClient(Protocol):
    def is_installed(self) -> bool:
        """Return True if the matching engine can be launched."""
        ...

    def execute(self, args: EngineArgs) -> EngineResult:
        """
        Run the matching engine.

        Args:
            args: Rules document, scan targets and flags

        Returns:
            The process exit code, raw streams and the parsed JSON output
        """
        ...

    def command(self, args: EngineArgs, config_path: str) -> List[str]:
        """Return the full command line for ``args`` with rules at ``config_path``."""
        ...
