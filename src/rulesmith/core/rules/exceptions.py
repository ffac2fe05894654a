"""
Rule-specific exceptions.

These exceptions are raised while scanning, parsing, indexing and composing
rule documents and policies.
"""

from typing import List, Optional, Sequence


class RulesError(Exception):
    """Base class for every error raised by the rule and policy layers."""
    pass


class RuleParseError(RulesError, ValueError):
    """
    Raised when a rule document cannot be turned into a RuleFile.

    This indicates issues such as:
    - Invalid YAML syntax
    - Missing or malformed top-level 'rules' key
    - A rule entry that is not a mapping
    """
    pass


class MissingRuleIdError(RulesError):
    """Raised when a rule has no 'id' field or the field is not a string."""
    pass


class RuleSerializeError(RulesError):
    """Raised when a RuleFile cannot be rendered back to YAML."""
    pass


class PolicyParseError(RulesError, ValueError):
    """Raised when a policy definition is not valid YAML or lacks name/rules."""
    pass


class EmptyIndexError(RulesError):
    """
    Raised when an index build finished with zero usable entries.

    Attributes:
        kind: Which aggregate failed ("rule" or "policy")
        roots: The paths that were scanned
        diagnostics: Per-file records explaining what was skipped
    """

    def __init__(
        self,
        kind: str,
        roots: Sequence[str] = (),
        diagnostics: Sequence = (),
    ):
        self.kind = kind
        self.roots = [str(r) for r in roots]
        self.diagnostics = list(diagnostics)

        where = ", ".join(self.roots) if self.roots else "no paths"
        message = (
            f"{kind.capitalize()} index is empty: "
            f"found 0 valid {kind}s in {where}"
        )
        if self.diagnostics:
            message += f" ({len(self.diagnostics)} input(s) skipped)"
        super().__init__(message)


class UnresolvedRulesError(RulesError):
    """Raised by strict resolution when a policy references unknown rule IDs."""

    def __init__(self, unresolved: List[str], policy: Optional[str] = None):
        self.unresolved = list(unresolved)
        self.policy = policy
        owner = f"Policy '{policy}'" if policy else "Request"
        super().__init__(
            f"{owner} references {len(self.unresolved)} unknown rule ID(s): "
            + ", ".join(self.unresolved)
        )


class PathNotFoundError(RulesError):
    """Raised when a registry path does not exist."""
    pass


class NotADirectoryPathError(RulesError):
    """Raised when a registry path exists but is not a directory."""
    pass


class CatalogNotLoadedError(RulesError):
    """Raised when a catalog snapshot is requested before the first load."""
    pass
