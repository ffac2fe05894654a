"""
Subprocess wrapper around the matching engine CLI.

Writes the rule document to a temporary file, runs the engine against the
scan targets and parses its JSON output.
"""

import os
import subprocess
import tempfile
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from ...core.rules.models import RuleFile
from .args import EngineArgs, OutputFormat
from .exceptions import EngineNotFoundError, EngineOutputError, EngineTimeoutError
from .output import CliOutput


class EngineResult(BaseModel):
    """Exit code, raw streams and (for JSON runs) the parsed output of one run."""
    returncode: int
    stdout: str = ""
    stderr: str = ""
    output: Optional[CliOutput] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class EngineRunner:
    def __init__(self, binary: str = "semgrep", timeout: Optional[float] = None) -> None:
        self.binary = binary
        self.timeout = timeout

    def is_installed(self) -> bool:
        """Check if the engine binary exists and is runnable."""
        try:
            result = subprocess.run(
                [self.binary, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
            return result.returncode == 0
        except (FileNotFoundError, PermissionError, subprocess.TimeoutExpired):
            return False

    def command(self, args: EngineArgs, config_path: str) -> List[str]:
        return [self.binary, "--config", config_path, *args.to_list()]

    def execute(self, args: EngineArgs) -> EngineResult:
        """
        Run the engine with ``args``.

        The engine reports findings and scan errors inside its JSON output, so
        a non-zero exit code is returned rather than raised.

        Raises:
            RuleParseError: If ``args.rules`` is not a valid rule document
            EngineNotFoundError: If the binary cannot be launched
            EngineTimeoutError: If the run exceeds the configured timeout
            EngineOutputError: If a JSON run prints something that isn't the result schema
        """
        # Fail before spawning anything if the rules can't be loaded.
        RuleFile.parse(args.rules)

        fd, config_path = tempfile.mkstemp(prefix="rulesmith-", suffix=".yaml")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(args.rules)

            try:
                result = subprocess.run(
                    self.command(args, config_path),
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
            except FileNotFoundError as e:
                raise EngineNotFoundError(
                    f"{self.binary} is not installed or not on PATH, "
                    "try `python3 -m pip install semgrep`"
                ) from e
            except subprocess.TimeoutExpired as e:
                raise EngineTimeoutError(
                    f"{self.binary} did not finish within {self.timeout} seconds"
                ) from e
        finally:
            os.remove(config_path)

        output = None
        if args.output_format == OutputFormat.JSON:
            try:
                output = CliOutput.from_json(result.stdout)
            except ValidationError as e:
                raise EngineOutputError(
                    f"Cannot parse {self.binary} output (exit code {result.returncode}): "
                    f"{result.stderr.strip() or e}"
                ) from e

        return EngineResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            output=output,
        )
