"""
Rule index.

Merges every rule file found under a set of registry roots into a single
key -> rule mapping, and composes subsets of it into new rule documents.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ...ui.progress import NullProgressReporter
from .exceptions import EmptyIndexError, MissingRuleIdError, RuleParseError
from .models import (
    Diagnostic,
    DiagnosticKind,
    KeyMode,
    Resolution,
    Rule,
    RuleFile,
    read_text,
    rule_key,
)
from .scanner import find_files_in

if TYPE_CHECKING:
    from ...protocols import ProgressReporter

PathLike = Union[str, Path]


class RuleIndex:
    """
    Read-only mapping from rule key to rule.

    Built once from a set of paths; rebuilding means building a new index.
    Lookups hand out copies so callers can never change the indexed rules.
    """

    def __init__(
        self,
        rules: Dict[str, Rule],
        mode: KeyMode = KeyMode.SIMPLE,
        diagnostics: Iterable[Diagnostic] = (),
    ):
        self._index: Dict[str, Rule] = dict(rules)
        self._mode = KeyMode(mode)
        self._diagnostics: Tuple[Diagnostic, ...] = tuple(diagnostics)

    @classmethod
    def build(
        cls,
        roots: Iterable[PathLike],
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
        mode: KeyMode = KeyMode.SIMPLE,
        path_only_keys: bool = False,
        reporter: Optional["ProgressReporter"] = None,
    ) -> "RuleIndex":
        """
        Scan ``roots`` and index every rule found.

        Files that cannot be read or parsed, and rules without a usable ID,
        are skipped and recorded in ``diagnostics``; they never abort the build.

        Args:
            roots: Registry directories (or single files) to scan
            include: Rule file extensions, defaults to yml/yaml
            exclude: Path suffixes to ignore, defaults to rule test files
            mode: SIMPLE keys by rule ID, COMPLETE by file path plus rule ID
            path_only_keys: In COMPLETE mode, key by file path alone
            reporter: Receives a warning for every skipped input

        Raises:
            EmptyIndexError: If no rule could be indexed
        """
        reporter = reporter or NullProgressReporter()
        roots = [str(r) for r in roots]
        mode = KeyMode(mode)

        index: Dict[str, Rule] = {}
        diagnostics: List[Diagnostic] = []

        def skip(path: PathLike, kind: DiagnosticKind, message: str) -> None:
            diagnostic = Diagnostic(path=str(path), kind=kind, message=message)
            diagnostics.append(diagnostic)
            reporter.warning(f"Skipping {diagnostic}")

        for path in find_files_in(roots, include, exclude):
            try:
                content = read_text(path)
            except OSError as e:
                skip(path, DiagnosticKind.IO_ERROR, f"Error reading file: {e}")
                continue

            try:
                rule_file = RuleFile.parse(content)
            except RuleParseError as e:
                skip(path, DiagnosticKind.PARSE_ERROR, f"Error deserializing file: {e}")
                continue

            for rule in rule_file.rules:
                try:
                    key = rule_key(rule, path, mode, path_only_keys)
                except MissingRuleIdError as e:
                    skip(path, DiagnosticKind.MISSING_ID, str(e))
                    continue
                index[key] = rule

        if not index:
            raise EmptyIndexError("rule", roots, diagnostics)

        reporter.info(f"Indexed {len(index)} rule(s) from {', '.join(roots)}")
        return cls(index, mode, diagnostics)

    @classmethod
    def from_paths_simple(cls, roots: Iterable[PathLike]) -> "RuleIndex":
        """Build with default extensions and simple keys."""
        return cls.build(roots)

    @classmethod
    def from_rules(
        cls,
        rules: Iterable[Rule],
        diagnostics: Iterable[Diagnostic] = (),
    ) -> "RuleIndex":
        """
        Index rules that are already in memory, keyed by their own IDs.

        Raises:
            MissingRuleIdError: If a rule has no usable ID
            EmptyIndexError: If ``rules`` is empty
        """
        index = {}
        for rule in rules:
            rule = rule if isinstance(rule, Rule) else Rule(rule)
            index[rule.identifier()] = rule.clone()
        if not index:
            raise EmptyIndexError("rule", (), diagnostics)
        return cls(index, KeyMode.SIMPLE, diagnostics)

    @property
    def mode(self) -> KeyMode:
        return self._mode

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self._diagnostics

    def get(self, rule_id: str) -> Optional[Rule]:
        """Return a copy of the rule stored under ``rule_id``, or None."""
        rule = self._index.get(rule_id)
        return rule.clone() if rule is not None else None

    def ids(self) -> List[str]:
        return list(self._index)

    def resolve(self, rule_ids: Iterable[str]) -> RuleFile:
        """
        Combine the requested rules into one RuleFile.

        Rules come out in the order requested. IDs the index doesn't know are
        dropped without an error; use ``resolve_strict`` to collect them.

        In complete mode the keys are path-derived, so the ``ids()`` of the
        result are rule IDs rather than keys and do not resolve again.
        """
        return RuleFile(
            rules=[self._index[i].clone() for i in rule_ids if i in self._index]
        )

    def resolve_strict(self, rule_ids: Iterable[str]) -> Resolution:
        """Like ``resolve`` but report the IDs that could not be found."""
        rule_ids = list(rule_ids)
        unresolved = [i for i in rule_ids if i not in self._index]
        return Resolution(rule_file=self.resolve(rule_ids), unresolved=unresolved)

    def resolve_all(self) -> RuleFile:
        return self.resolve(self.ids())

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())

    def __repr__(self) -> str:
        return f"RuleIndex(rules={len(self)}, mode={self._mode.value})"
