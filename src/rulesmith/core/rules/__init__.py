"""
Rules package.

Discovers rule files on disk, models them as opaque documents and indexes
them by key.

Public API:
    RuleIndex: Key -> rule mapping built from registry paths
    RuleFile: Ordered list of rules from one YAML document
    Rule: A single opaque rule
    find_files / find_files_in: Registry scanning
"""

from .exceptions import (
    CatalogNotLoadedError,
    EmptyIndexError,
    MissingRuleIdError,
    NotADirectoryPathError,
    PathNotFoundError,
    PolicyParseError,
    RuleParseError,
    RuleSerializeError,
    RulesError,
    UnresolvedRulesError,
)
from .index import RuleIndex
from .models import (
    Diagnostic,
    DiagnosticKind,
    KeyMode,
    Resolution,
    Rule,
    RuleFile,
    rule_key,
)
from .scanner import RULE_EXTENSIONS, TEST_SUFFIXES, check_path, find_files, find_files_in

__all__ = [
    'RuleIndex',
    'RuleFile',
    'Rule',
    'Resolution',
    'KeyMode',
    'Diagnostic',
    'DiagnosticKind',
    'rule_key',
    'find_files',
    'find_files_in',
    'check_path',
    'RULE_EXTENSIONS',
    'TEST_SUFFIXES',
    'RulesError',
    'RuleParseError',
    'MissingRuleIdError',
    'RuleSerializeError',
    'PolicyParseError',
    'EmptyIndexError',
    'UnresolvedRulesError',
    'PathNotFoundError',
    'NotADirectoryPathError',
    'CatalogNotLoadedError',
]
