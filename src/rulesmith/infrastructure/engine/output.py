"""
Models for the engine's JSON output.

Covers the parts of the result schema callers use: matches, errors, scanned
and skipped paths, and timing. Fields outside these models are kept as extra
data so newer engine versions still parse.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Position(EngineModel):
    line: int
    col: int
    offset: Optional[int] = None


class Location(EngineModel):
    path: str
    start: Position
    end: Position


class ErrorSpan(EngineModel):
    file: str
    start: Position
    end: Position
    source_hash: Optional[str] = None
    config_start: Optional[Position] = None
    config_end: Optional[Position] = None
    config_path: Optional[List[str]] = None
    context_start: Optional[Position] = None
    context_end: Optional[Position] = None


class CliError(EngineModel):
    code: int
    level: str
    type_: Any = Field(..., alias="type")  # a string, or [kind, details] for some errors
    rule_id: Optional[str] = None
    message: Optional[str] = None
    path: Optional[str] = None
    long_msg: Optional[str] = None
    short_msg: Optional[str] = None
    spans: Optional[List[ErrorSpan]] = None
    help: Optional[str] = None


class FixRegex(EngineModel):
    regex: str
    replacement: str
    count: Optional[int] = None


class CliMatchExtra(EngineModel):
    message: str = ""
    severity: str = ""
    lines: str = ""
    fingerprint: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    engine_kind: Optional[str] = None
    is_ignored: Optional[bool] = None
    metavars: Optional[Dict[str, Any]] = None
    fix: Optional[str] = None
    fix_regex: Optional[FixRegex] = None
    fixed_lines: Optional[List[str]] = None
    dataflow_trace: Optional[Dict[str, Any]] = None


class CliMatch(EngineModel):
    check_id: str
    path: str
    start: Position
    end: Position
    extra: CliMatchExtra


class CliSkippedTarget(EngineModel):
    path: str
    reason: str


class CliPaths(EngineModel):
    scanned: List[str] = Field(default_factory=list)
    comment: Optional[str] = Field(default=None, alias="_comment")
    skipped: Optional[List[CliSkippedTarget]] = None


class CliTargetTimes(EngineModel):
    path: str
    num_bytes: float
    match_times: List[float] = Field(default_factory=list)
    parse_times: List[float] = Field(default_factory=list)
    run_time: float


class RuleIdDict(EngineModel):
    id: str


class CliTiming(EngineModel):
    rules: List[RuleIdDict] = Field(default_factory=list)
    rules_parse_time: float = 0.0
    profiling_times: Any = None  # list in older engine versions, mapping in newer ones
    targets: List[CliTargetTimes] = Field(default_factory=list)
    total_bytes: float = 0.0
    max_memory_bytes: Optional[float] = None


class CliOutput(EngineModel):
    """Top-level JSON document printed by the engine with --json."""
    results: List[CliMatch] = Field(default_factory=list)
    errors: List[CliError] = Field(default_factory=list)
    paths: CliPaths = Field(default_factory=CliPaths)
    version: Optional[str] = None
    time: Optional[CliTiming] = None
    explanations: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "CliOutput":
        """
        Parse the engine's JSON output.

        Raises:
            pydantic.ValidationError: If the text is not JSON or doesn't fit the schema
        """
        return cls.model_validate_json(text)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "CliOutput":
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    def rule_ids(self) -> List[str]:
        """IDs of the rules that produced at least one match, first seen first."""
        seen: Dict[str, None] = {}
        for match in self.results:
            seen.setdefault(match.check_id, None)
        return list(seen)
