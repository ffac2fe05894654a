"""
Matching engine adapter.

Builds the engine command line, runs it as a subprocess and parses the JSON
results.
"""

from .args import EngineArgs, OutputFormat
from .exceptions import EngineError, EngineNotFoundError, EngineOutputError, EngineTimeoutError
from .output import CliError, CliMatch, CliOutput, CliPaths, CliTiming
from .runner import EngineResult, EngineRunner

__all__ = [
    "EngineArgs",
    "OutputFormat",
    "EngineRunner",
    "EngineResult",
    "CliOutput",
    "CliMatch",
    "CliError",
    "CliPaths",
    "CliTiming",
    "EngineError",
    "EngineNotFoundError",
    "EngineTimeoutError",
    "EngineOutputError",
]
