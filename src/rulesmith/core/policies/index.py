"""
Policy index.

Loads policy definitions from policy directories, resolves each against a
RuleIndex and always adds the synthesized 'all' policy.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ...ui.progress import NullProgressReporter
from ..rules.exceptions import EmptyIndexError, PolicyParseError
from ..rules.index import RuleIndex
from ..rules.models import Diagnostic, DiagnosticKind
from ..rules.scanner import find_files_in
from .models import ALL_POLICY, Policy, create_all_policy

if TYPE_CHECKING:
    from ...protocols import ProgressReporter

PathLike = Union[str, Path]


class PolicyIndex:
    """Read-only mapping from policy name to resolved Policy."""

    def __init__(
        self,
        policies: Dict[str, Policy],
        diagnostics: Iterable[Diagnostic] = (),
    ):
        self._index: Dict[str, Policy] = dict(policies)
        self._diagnostics: Tuple[Diagnostic, ...] = tuple(diagnostics)

    @classmethod
    def build(
        cls,
        roots: Iterable[PathLike],
        index: RuleIndex,
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
        reporter: Optional["ProgressReporter"] = None,
    ) -> "PolicyIndex":
        """
        Load every policy under ``roots`` and resolve it against ``index``.

        Policy files that cannot be read or parsed are skipped and recorded in
        ``diagnostics``. Unknown rule IDs inside a policy are dropped.

        Args:
            roots: Policy directories (or single files) to scan
            index: Rules the policies refer to
            include: Policy file extensions, defaults to yml/yaml
            exclude: Path suffixes to ignore, defaults to rule test files
            reporter: Receives a warning for every skipped input

        Raises:
            EmptyIndexError: If roots were given but no policy could be loaded
            RuleSerializeError: If a policy's rules cannot be rendered
        """
        roots = [str(r) for r in roots]
        if not roots:
            return cls.empty(index)

        reporter = reporter or NullProgressReporter()
        policies: Dict[str, Policy] = {}
        sources: Dict[str, PathLike] = {}
        diagnostics: List[Diagnostic] = []

        def note(path: PathLike, kind: DiagnosticKind, message: str) -> None:
            diagnostic = Diagnostic(path=str(path), kind=kind, message=message)
            diagnostics.append(diagnostic)
            reporter.warning(str(diagnostic))

        for path in find_files_in(roots, include, exclude):
            try:
                policy = Policy.from_file(path)
            except OSError as e:
                note(path, DiagnosticKind.IO_ERROR, f"Error reading file: {e}")
                continue
            except PolicyParseError as e:
                note(path, DiagnosticKind.PARSE_ERROR, f"Error deserializing file: {e}")
                continue

            policy.resolve(index)

            if policy.name in policies:
                note(
                    path,
                    DiagnosticKind.DUPLICATE_POLICY,
                    f"Policy '{policy.name}' was already defined, replacing it",
                )
            policies[policy.name] = policy
            sources[policy.name] = path

        if not policies:
            raise EmptyIndexError("policy", roots, diagnostics)

        if ALL_POLICY in policies:
            note(
                sources[ALL_POLICY],
                DiagnosticKind.RESERVED_NAME,
                f"Policy name '{ALL_POLICY}' is reserved, the user-defined policy is replaced",
            )
        policies[ALL_POLICY] = create_all_policy(index)

        reporter.info(f"Indexed {len(policies) - 1} policy(ies) from {', '.join(roots)}")
        return cls(policies, diagnostics)

    @classmethod
    def from_paths_simple(cls, roots: Iterable[PathLike], index: RuleIndex) -> "PolicyIndex":
        return cls.build(roots, index)

    @classmethod
    def empty(cls, index: RuleIndex) -> "PolicyIndex":
        """Create an index that only holds the 'all' policy."""
        return cls({ALL_POLICY: create_all_policy(index)})

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self._diagnostics

    def get(self, name: str) -> Optional[Policy]:
        """Return a copy of the policy called ``name``, or None."""
        policy = self._index.get(name)
        return policy.model_copy(deep=True) if policy is not None else None

    def ids(self) -> List[str]:
        return list(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())

    def __repr__(self) -> str:
        return f"PolicyIndex(policies={len(self)})"
