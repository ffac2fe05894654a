"""
Rule domain models.

A Rule is an opaque, order-preserving mapping; only its 'id' field has meaning
to this package. A RuleFile is the ordered list of rules held by one YAML
document under the top-level 'rules' key.
"""

import copy
import os
from enum import Enum
from pathlib import Path, PurePath
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, RootModel

from .exceptions import MissingRuleIdError, RuleParseError, RuleSerializeError
from .parser import dump_yaml, load_yaml_mapping

# Joins path components (and the rule ID) in complete-mode keys.
RULE_SEPARATOR = "."


class KeyMode(str, Enum):
    """How rules are keyed inside a RuleIndex."""
    SIMPLE = "simple"  # the rule's own id
    COMPLETE = "complete"  # path of the rule file + id


class DiagnosticKind(str, Enum):
    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"
    MISSING_ID = "missing_id"
    DUPLICATE_POLICY = "duplicate_policy"
    RESERVED_NAME = "reserved_name"


class Diagnostic(BaseModel):
    """An input that an index build skipped or overrode, and why."""
    path: str
    kind: DiagnosticKind
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.kind.value}: {self.message}"


class Rule(RootModel[Dict[Any, Any]]):
    """
    One pattern-matching rule.

    The content is passed through untouched; pattern syntax, languages,
    severities and metadata are never interpreted here.
    """

    def identifier(self) -> str:
        """
        Return the rule's 'id' field.

        Raises:
            MissingRuleIdError: If the field is absent or not a string
        """
        if "id" not in self.root:
            raise MissingRuleIdError("The rule doesn't have an 'id' field.")
        rule_id = self.root["id"]
        if not isinstance(rule_id, str):
            raise MissingRuleIdError(
                f"The rule's 'id' field must be a string, got {type(rule_id).__name__}."
            )
        return rule_id

    def clone(self) -> "Rule":
        return Rule(copy.deepcopy(self.root))

    def to_dict(self) -> Dict[Any, Any]:
        return copy.deepcopy(self.root)

    def to_yaml(self) -> str:
        """Serialize this rule as a one-rule document."""
        return RuleFile.singleton(self).serialize()


class RuleFile(BaseModel):
    """An ordered list of rules backed by one YAML document."""
    rules: List[Rule] = Field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "RuleFile":
        """
        Deserialize a YAML document into a RuleFile.

        Raises:
            RuleParseError: If the YAML is malformed or not shaped like a rule file
        """
        data = load_yaml_mapping(text, RuleParseError, "Rule file")

        if "rules" not in data:
            raise RuleParseError("Rule file has no top-level 'rules' key")

        rules = data["rules"]
        if not isinstance(rules, list):
            raise RuleParseError(
                f"'rules' must be a list, got {type(rules).__name__}"
            )

        for i, item in enumerate(rules):
            if not isinstance(item, dict):
                raise RuleParseError(
                    f"Rule at index {i} must be a dictionary, got {type(item).__name__}"
                )

        return cls(rules=[Rule(item) for item in rules])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RuleFile":
        """Read and parse a rule file. OSError propagates to the caller."""
        return cls.parse(read_text(path))

    @classmethod
    def singleton(cls, rule: Rule) -> "RuleFile":
        return cls(rules=[rule.clone()])

    def serialize(self) -> str:
        """
        Render the file as YAML with the same shape it was parsed from.

        Raises:
            RuleSerializeError: If a rule holds a value YAML cannot represent
        """
        return dump_yaml(
            {"rules": [rule.root for rule in self.rules]},
            RuleSerializeError,
            "rule file",
        )

    def to_file(self, path: Union[str, Path]) -> None:
        Path(path).write_text(self.serialize(), encoding="utf-8")

    def split(self) -> List["RuleFile"]:
        """Return one single-rule file per rule, in order."""
        return [RuleFile.singleton(rule) for rule in self.rules]

    def ids(self) -> List[str]:
        """Identifiers of the rules that have one, in file order."""
        ids = []
        for rule in self.rules:
            try:
                ids.append(rule.identifier())
            except MissingRuleIdError:
                continue
        return ids

    def __len__(self) -> int:
        return len(self.rules)


class Resolution(BaseModel):
    """Result of a strict resolve: the rules found plus the IDs that were not."""
    rule_file: RuleFile
    unresolved: List[str] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.unresolved


def path_prefix(path: Union[str, PurePath]) -> str:
    """
    Turn a rule file location into a dotted key prefix.

    'rules/cpp/buffer-overflow.yaml' becomes 'rules.cpp.buffer-overflow'.
    """
    stem = str(PurePath(path).with_suffix(""))
    stem = stem.replace(os.sep, RULE_SEPARATOR)
    if os.altsep:
        stem = stem.replace(os.altsep, RULE_SEPARATOR)
    return stem


def rule_key(
    rule: Rule,
    path: Union[str, PurePath],
    mode: KeyMode = KeyMode.SIMPLE,
    path_only: bool = False,
) -> str:
    """
    Compute the index key of a rule found in the file at ``path``.

    In complete mode the key is the dotted path prefix followed by the rule's
    own id. With ``path_only`` the id is left out, so every rule of a file
    shares one key and only the last of them survives in an index.

    Raises:
        MissingRuleIdError: If the key needs the rule's id and it has none
    """
    if mode == KeyMode.SIMPLE:
        return rule.identifier()

    prefix = path_prefix(path) + RULE_SEPARATOR
    if path_only:
        return prefix
    return prefix + rule.identifier()


def read_text(path: Union[str, Path]) -> str:
    """Read a UTF-8 file; decoding problems surface as OSError like other read failures."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise OSError(f"{path} is not valid UTF-8: {e}") from e
