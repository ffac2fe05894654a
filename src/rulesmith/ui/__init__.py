"""Console output for rulesmith."""

from .console import console, err_console
from .progress import CIProgressReporter, NullProgressReporter, RichProgressReporter, get_reporter

__all__ = [
    "console",
    "err_console",
    "RichProgressReporter",
    "CIProgressReporter",
    "NullProgressReporter",
    "get_reporter",
]
