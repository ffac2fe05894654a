"""Tests for the rulesmith CLI."""

import pytest
import yaml
from click.testing import CliRunner

from rulesmith.apps.cli import main as cli
from rulesmith.core.rules.models import RuleFile
from rulesmith.infrastructure.engine.runner import EngineResult
from rulesmith.infrastructure.engine.output import CliOutput


@pytest.fixture
def runner():
    return CliRunner()


class FakeEngineRunner:
    """Stands in for EngineRunner and records the arguments it is given."""

    calls = []
    installed = True
    stdout = ""
    returncode = 0

    def __init__(self, binary="semgrep", timeout=None):
        self.binary = binary
        self.timeout = timeout

    def is_installed(self):
        return self.installed

    def execute(self, args):
        FakeEngineRunner.calls.append(args)
        output = CliOutput.from_json(self.stdout) if args.output_format == "json" else None
        return EngineResult(returncode=self.returncode, stdout=self.stdout, output=output)


@pytest.fixture
def fake_engine(monkeypatch, scan_output_json):
    FakeEngineRunner.calls = []
    FakeEngineRunner.installed = True
    FakeEngineRunner.stdout = scan_output_json
    FakeEngineRunner.returncode = 0
    monkeypatch.setattr(cli, "EngineRunner", FakeEngineRunner)
    return FakeEngineRunner


class TestCombine:
    """Tests for the combine command."""

    def test_combine_all_rules(self, runner, data_dir, tmp_path):
        out = tmp_path / "combined.yaml"

        result = runner.invoke(cli.main, ["combine", str(data_dir), "-o", str(out), "-q"])

        assert result.exit_code == 0
        assert sorted(RuleFile.from_file(out).ids()) == [
            "memcpy-insecure-use",
            "python-eval",
            "python-exec",
            "snprintf-insecure-use",
        ]

    def test_combine_reports_skipped_files(self, runner, data_dir, tmp_path):
        out = tmp_path / "combined.yaml"

        result = runner.invoke(cli.main, ["combine", str(data_dir), "-o", str(out)])

        assert result.exit_code == 0
        assert "bad-syntax.yaml" in result.output
        assert "Wrote 4 rule(s)" in result.output

    def test_combine_policy(self, runner, data_dir, policy_dir, tmp_path):
        out = tmp_path / "python.yaml"

        result = runner.invoke(
            cli.main,
            ["combine", str(data_dir), "-o", str(out), "--policies", str(policy_dir), "-p", "python", "-q"],
        )

        assert result.exit_code == 0
        assert RuleFile.from_file(out).ids() == ["python-exec", "python-eval"]

    def test_combine_strict_policy_fails(self, runner, data_dir, policy_dir, tmp_path):
        """Test --strict rejects a policy naming a rule that isn't indexed."""
        out = tmp_path / "python.yaml"

        result = runner.invoke(
            cli.main,
            ["combine", str(data_dir), "-o", str(out), "--policies", str(policy_dir),
             "-p", "python", "--strict", "-q"],
        )

        assert result.exit_code == 1
        assert "python-pickle" in result.output
        assert not out.exists()

    def test_combine_all_policy_without_policy_paths(self, runner, data_dir, tmp_path):
        out = tmp_path / "all.yaml"

        result = runner.invoke(cli.main, ["combine", str(data_dir), "-o", str(out), "-p", "all", "-q"])

        assert result.exit_code == 0
        assert len(RuleFile.from_file(out)) == 4

    def test_combine_unknown_policy(self, runner, data_dir, policy_dir, tmp_path):
        result = runner.invoke(
            cli.main,
            ["combine", str(data_dir), "-o", str(tmp_path / "x.yaml"), "--policies", str(policy_dir),
             "-p", "golang", "-q"],
        )

        assert result.exit_code == 1
        assert "Unknown policy 'golang'" in result.output
        assert "cpp-memory" in result.output

    def test_combine_complete_keys(self, runner, write_rules, tmp_path):
        """Test --complete keeps same-ID rules from different files."""
        write_rules("rules/java/crypto.yaml", "weak-hash")
        write_rules("rules/go/crypto.yaml", "weak-hash")
        out = tmp_path / "out.yaml"

        result = runner.invoke(cli.main, ["combine", str(tmp_path / "rules"), "-o", str(out), "--complete", "-q"])

        assert result.exit_code == 0
        assert len(RuleFile.from_file(out)) == 2

    def test_combine_missing_path(self, runner, tmp_path):
        result = runner.invoke(cli.main, ["combine", str(tmp_path / "nope"), "-o", str(tmp_path / "o.yaml")])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_combine_empty_registry(self, runner, tmp_path):
        (tmp_path / "empty").mkdir()

        result = runner.invoke(
            cli.main, ["combine", str(tmp_path / "empty"), "-o", str(tmp_path / "o.yaml"), "-q"]
        )

        assert result.exit_code == 1
        assert "Rule index is empty" in result.output

    def test_combine_uses_configured_key_mode(self, runner, write_rules, tmp_path, monkeypatch):
        write_rules("rules/a/x.yaml", "same")
        write_rules("rules/b/x.yaml", "same")
        monkeypatch.setenv("RULESMITH_KEY_MODE", "complete")
        out = tmp_path / "out.yaml"

        result = runner.invoke(cli.main, ["combine", str(tmp_path / "rules"), "-o", str(out), "-q"])

        assert result.exit_code == 0
        assert len(RuleFile.from_file(out)) == 2


class TestRun:
    """Tests for the run command."""

    def test_run_passes_rules_and_targets(self, runner, data_dir, fake_engine, scan_output_json):
        result = runner.invoke(cli.main, ["run", "src", "lib", "-c", str(data_dir), "-q"])

        assert result.exit_code == 0
        assert result.output == scan_output_json

        args = fake_engine.calls[0]
        assert args.paths == ["src", "lib"]
        assert args.metrics is False
        assert args.extra is None
        assert len(RuleFile.parse(args.rules)) == 4

    def test_run_policy_and_flags(self, runner, data_dir, policy_dir, fake_engine):
        result = runner.invoke(
            cli.main,
            ["run", "src", "-c", str(data_dir), "--policies", str(policy_dir), "-p", "cpp-memory",
             "--metrics", "-f", "sarif", "--extra=--jobs", "--extra=4", "-q"],
        )

        assert result.exit_code == 0
        args = fake_engine.calls[0]
        assert RuleFile.parse(args.rules).ids() == ["memcpy-insecure-use", "snprintf-insecure-use"]
        assert args.to_list() == ["--sarif", "--metrics=on", "--jobs", "4", "src"]

    def test_run_exit_code_is_forwarded(self, runner, data_dir, fake_engine):
        fake_engine.returncode = 1

        result = runner.invoke(cli.main, ["run", "src", "-c", str(data_dir), "-q"])

        assert result.exit_code == 1

    def test_run_writes_output_file(self, runner, data_dir, fake_engine, scan_output_json, tmp_path):
        out = tmp_path / "results.json"

        result = runner.invoke(cli.main, ["run", "src", "-c", str(data_dir), "-o", str(out), "-q"])

        assert result.exit_code == 0
        assert out.read_text() == scan_output_json

    def test_run_engine_missing(self, runner, data_dir, fake_engine):
        fake_engine.installed = False

        result = runner.invoke(cli.main, ["run", "src", "-c", str(data_dir), "-q"])

        assert result.exit_code == 1
        assert "not installed" in result.output
        assert fake_engine.calls == []

    def test_run_uses_configured_binary(self, runner, data_dir, monkeypatch):
        seen = {}

        class Recorder(FakeEngineRunner):
            def __init__(self, binary="semgrep", timeout=None):
                seen["binary"], seen["timeout"] = binary, timeout
                super().__init__(binary, timeout)

            def is_installed(self):
                return False

        monkeypatch.setattr(cli, "EngineRunner", Recorder)
        monkeypatch.setenv("RULESMITH_ENGINE_BINARY", "/opt/bin/semgrep")
        monkeypatch.setenv("RULESMITH_ENGINE_TIMEOUT", "90")

        runner.invoke(cli.main, ["run", "src", "-c", str(data_dir), "-q"])

        assert seen == {"binary": "/opt/bin/semgrep", "timeout": 90.0}


class TestPolicies:
    def test_list_policies(self, runner, data_dir, policy_dir):
        result = runner.invoke(cli.main, ["policies", str(data_dir), "--policies", str(policy_dir), "-q"])

        assert result.exit_code == 0
        assert "cpp-memory" in result.output
        assert "python-pickle" in result.output
        assert "all" in result.output

    def test_strict_flags_unresolved(self, runner, data_dir, policy_dir):
        result = runner.invoke(
            cli.main, ["policies", str(data_dir), "--policies", str(policy_dir), "--strict", "-q"]
        )

        assert result.exit_code == 1
        assert "1 policy(ies) reference unknown rule IDs: python" in result.output

    def test_policy_paths_from_config(self, runner, data_dir, policy_dir, monkeypatch):
        monkeypatch.setenv("RULESMITH_POLICY_PATHS", f'["{policy_dir}"]')

        result = runner.invoke(cli.main, ["policies", str(data_dir), "-q"])

        assert result.exit_code == 0
        assert "cpp-memory" in result.output


class TestShow:
    def test_show_rule(self, runner, data_dir):
        result = runner.invoke(cli.main, ["show", "python-eval", str(data_dir)])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["rules"][0]["id"] == "python-eval"

    def test_show_missing_rule(self, runner, data_dir):
        result = runner.invoke(cli.main, ["show", "nope", str(data_dir)])

        assert result.exit_code == 1
        assert "Rule 'nope' not found" in result.output


class TestSplit:
    def test_split(self, runner, write_rules, make_rule, tmp_path):
        source = write_rules(
            "pack.yaml",
            rules=[make_rule("one"), make_rule("weird/id"), {"message": "no id"}, make_rule("one")],
        )
        out = tmp_path / "split"

        result = runner.invoke(cli.main, ["split", str(source), "-o", str(out)])

        assert result.exit_code == 0
        assert sorted(p.name for p in out.iterdir()) == [
            "one-4.yaml",
            "one.yaml",
            "rule-3.yaml",
            "weird_id.yaml",
        ]
        assert RuleFile.from_file(out / "weird_id.yaml").ids() == ["weird/id"]

    def test_split_invalid_file(self, runner, tmp_path):
        source = tmp_path / "bad.yaml"
        source.write_text("nothing: here\n")

        result = runner.invoke(cli.main, ["split", str(source), "-o", str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "no top-level 'rules' key" in result.output


def test_version(runner):
    result = runner.invoke(cli.main, ["--version"])

    assert result.exit_code == 0
    assert "rulesmith" in result.output
