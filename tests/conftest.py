"""Shared pytest fixtures for all tests."""

import os
from pathlib import Path

import pytest
import yaml

from rulesmith.config import reset_settings
from rulesmith.core.rules.index import RuleIndex
from rulesmith.core.rules.models import Rule


@pytest.fixture
def data_dir():
    """Get the path to the sample rule registry."""
    return Path(__file__).parent / "rules" / "data"


@pytest.fixture
def policy_dir():
    """Get the path to the sample policy directory."""
    return Path(__file__).parent / "policies" / "data"


@pytest.fixture
def make_rule():
    """Build a minimal rule mapping with the given ID."""
    def _make(rule_id, **fields):
        data = {
            "id": rule_id,
            "languages": ["python"],
            "severity": "WARNING",
            "message": f"Finding from {rule_id}",
            "pattern": f"{rule_id}(...)",
        }
        data.update(fields)
        return data

    return _make


@pytest.fixture
def write_rules(tmp_path, make_rule):
    """Write a rule file under tmp_path holding rules with the given IDs."""
    def _write(relative: str, *rule_ids, rules=None):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        content = rules if rules is not None else [make_rule(i) for i in rule_ids]
        path.write_text(yaml.safe_dump({"rules": content}, sort_keys=False))
        return path

    return _write


@pytest.fixture
def abc_index(make_rule):
    """An in-memory index holding rules 'a', 'b' and 'c'."""
    return RuleIndex.from_rules([Rule(make_rule(i)) for i in ("a", "b", "c")])


@pytest.fixture
def engine_data_dir():
    """Get the path to recorded engine output."""
    return Path(__file__).parent / "engine" / "data"


@pytest.fixture
def scan_output_json(engine_data_dir):
    return (engine_data_dir / "scan-output.json").read_text()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep the user's config file and RULESMITH_* variables out of every test."""
    for name in list(os.environ):
        if name.startswith("RULESMITH_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("RULESMITH_CONFIG", str(tmp_path / "config.toml"))
    reset_settings()
    yield
    reset_settings()
