"""
Command-line arguments for the matching engine.

Only a small subset of the engine's flags is modelled; anything else goes in
``extra`` and is passed through as-is. The final command looks like:

    semgrep --config <rules file> --json --metrics=off [extra...] [paths...]
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Output formats understood by the engine."""
    TEXT = "text"
    EMACS = "emacs"
    JSON = "json"
    GITLAB_SAST = "gitlab-sast"
    GITLAB_SECRETS = "gitlab-secrets"
    JUNIT_XML = "junit-xml"
    SARIF = "sarif"
    VIM = "vim"

    @property
    def flag(self) -> str:
        return f"--{self.value}"

    @classmethod
    def from_name(cls, name: str) -> "OutputFormat":
        """
        Convert a format name such as 'json' or 'sarif'.

        Raises:
            ValueError: If the name is not a known format
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"invalid output format: {name}") from None


class EngineArgs(BaseModel):
    """
    Arguments for one engine run.

    ``rules`` is the rule document itself, not a path; the runner writes it
    to a temporary file.
    """
    rules: str = Field(..., description="Rule document (YAML text)")
    paths: List[str] = Field(default_factory=list, description="Targets to scan")
    metrics: bool = Field(default=False, description="Value of --metrics, off unless enabled")
    output_format: OutputFormat = OutputFormat.JSON
    extra: Optional[List[str]] = Field(default=None, description="Flags passed before the paths")

    def enable_metrics(self) -> None:
        self.metrics = True

    def disable_metrics(self) -> None:
        self.metrics = False

    def add_extra(self, extra: List[str]) -> None:
        """Append flags to the current extra arguments."""
        if self.extra is None:
            self.extra = []
        self.extra.extend(extra)

    @property
    def metrics_flag(self) -> str:
        return "--metrics=on" if self.metrics else "--metrics=off"

    def to_list(self) -> List[str]:
        """Return every argument except the rules, in command-line order."""
        out = [self.output_format.flag, self.metrics_flag]
        if self.extra:
            out.extend(self.extra)
        out.extend(self.paths)
        return out

    def __str__(self) -> str:
        return " ".join(self.to_list())
