"""
rulesmith - index YAML rule registries and compose them into policies.
"""

__version__ = "0.1.0"

from .core.policies import Policy, PolicyIndex
from .core.rules import (
    Diagnostic,
    EmptyIndexError,
    KeyMode,
    Rule,
    RuleFile,
    RuleIndex,
    RulesError,
    find_files,
)

__all__ = [
    "__version__",
    "Rule",
    "RuleFile",
    "RuleIndex",
    "KeyMode",
    "Diagnostic",
    "Policy",
    "PolicyIndex",
    "RulesError",
    "EmptyIndexError",
    "find_files",
]
