"""
Policy model.

A policy is a named list of rule IDs. Resolving it against a RuleIndex
produces the rule document that is handed to the matching engine.
"""

from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..rules.exceptions import PolicyParseError, UnresolvedRulesError
from ..rules.index import RuleIndex
from ..rules.models import read_text
from ..rules.parser import dump_yaml, load_yaml_mapping

# Name of the synthesized policy holding every indexed rule.
ALL_POLICY = "all"


class Policy(BaseModel):
    """
    A named, ordered subset of rule IDs.

    ``content`` is derived by ``resolve`` and never written to policy files.
    """
    name: str = Field(..., description="Unique policy name, e.g. 'cpp-memory'")
    rules: List[str] = Field(..., description="Rule IDs in the order they should be emitted")
    content: str = Field(default="", exclude=True)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure the policy has a usable name"""
        if not v or not v.strip():
            raise ValueError("Policy name must be a non-empty string")
        return v.strip()

    @classmethod
    def from_yaml(cls, text: str) -> "Policy":
        """
        Create a policy from a YAML definition with 'name' and 'rules' keys.

        Raises:
            PolicyParseError: If the YAML is malformed or the fields are invalid
        """
        data = load_yaml_mapping(text, PolicyParseError, "Policy file")
        data.pop("content", None)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise PolicyParseError(f"Invalid policy definition: {e}") from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Policy":
        """Read and parse a policy file. OSError propagates to the caller."""
        return cls.from_yaml(read_text(path))

    def to_yaml(self) -> str:
        """Serialize the policy definition (name and rules only)."""
        return dump_yaml(self.model_dump(), PolicyParseError, f"policy '{self.name}'")

    def to_file(self, path: Union[str, Path]) -> None:
        Path(path).write_text(self.to_yaml(), encoding="utf-8")

    def unresolved(self, index: RuleIndex) -> List[str]:
        """Rule IDs in this policy that ``index`` doesn't contain."""
        return [rule_id for rule_id in self.rules if rule_id not in index]

    def resolve(self, index: RuleIndex, strict: bool = False) -> str:
        """
        Populate ``content`` with the policy's rules from ``index``.

        Unknown rule IDs are dropped unless ``strict`` is set, in which case
        they raise and ``content`` is left as it was.

        Raises:
            UnresolvedRulesError: In strict mode, if any rule ID is unknown
            RuleSerializeError: If the resolved rules cannot be rendered
        """
        if strict:
            resolution = index.resolve_strict(self.rules)
            if not resolution.complete:
                raise UnresolvedRulesError(resolution.unresolved, policy=self.name)
            rule_file = resolution.rule_file
        else:
            rule_file = index.resolve(self.rules)

        self.content = rule_file.serialize()
        return self.content


def create_all_policy(index: RuleIndex) -> Policy:
    """Create and resolve the policy that holds every rule in ``index``."""
    policy = Policy(name=ALL_POLICY, rules=index.ids())
    policy.resolve(index)
    return policy
