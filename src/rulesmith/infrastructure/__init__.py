"""
Infrastructure layer for rulesmith.

Contains adapter implementations for external processes.
"""

from .engine import EngineRunner

__all__ = [
    "EngineRunner",
]
