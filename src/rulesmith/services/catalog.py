"""
Rule catalog with atomic snapshot swaps.

Indexes are immutable, so picking up changes on disk means building a new
RuleIndex/PolicyIndex pair and publishing it in one step. Readers holding the
previous snapshot keep using it until they ask for a new one.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..core.policies import PolicyIndex
from ..core.rules import CatalogNotLoadedError, KeyMode, RuleIndex
from ..ui.progress import NullProgressReporter

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CatalogSnapshot:
    """One consistent view of the rules and the policies resolved against them."""
    rules: RuleIndex
    policies: PolicyIndex
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def diagnostics(self) -> List:
        return list(self.rules.diagnostics) + list(self.policies.diagnostics)


class RuleCatalog:
    """
    Owns the currently published snapshot.

    ``reload`` builds the replacement outside the lock; only the swap itself
    is serialized. If a rebuild fails the previous snapshot stays published
    and the error propagates.
    """

    def __init__(
        self,
        rule_paths: Iterable[PathLike],
        policy_paths: Optional[Iterable[PathLike]] = None,
        mode: KeyMode = KeyMode.SIMPLE,
        path_only_keys: bool = False,
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
        reporter=None,
    ):
        self.rule_paths = [str(p) for p in rule_paths]
        self.policy_paths = [str(p) for p in policy_paths or []]
        self.mode = KeyMode(mode)
        self.path_only_keys = path_only_keys
        self.include = None if include is None else list(include)
        self.exclude = None if exclude is None else list(exclude)
        self.reporter = reporter or NullProgressReporter()

        self._lock = threading.Lock()
        self._snapshot: Optional[CatalogSnapshot] = None

    def _build(self) -> CatalogSnapshot:
        rules = RuleIndex.build(
            self.rule_paths,
            include=self.include,
            exclude=self.exclude,
            mode=self.mode,
            path_only_keys=self.path_only_keys,
            reporter=self.reporter,
        )
        policies = PolicyIndex.build(self.policy_paths, rules, reporter=self.reporter)
        return CatalogSnapshot(rules=rules, policies=policies)

    def load(self) -> CatalogSnapshot:
        """Build a fresh snapshot and publish it."""
        snapshot = self._build()
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def reload(self) -> CatalogSnapshot:
        """Force a rebuild from disk."""
        return self.load()

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._snapshot is not None

    def snapshot(self) -> CatalogSnapshot:
        """
        Return the published snapshot.

        Raises:
            CatalogNotLoadedError: If ``load`` has never succeeded
        """
        with self._lock:
            snapshot = self._snapshot
        if snapshot is None:
            raise CatalogNotLoadedError("Rule catalog has not been loaded yet")
        return snapshot

    def policy_content(self, name: str) -> Optional[str]:
        """Resolved rule document of policy ``name`` in the current snapshot, or None."""
        policy = self.snapshot().policies.get(name)
        return policy.content if policy is not None else None
