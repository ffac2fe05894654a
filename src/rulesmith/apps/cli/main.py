"""
CLI for rulesmith - combine rule registries and run the matching engine.

Usage:
    rulesmith combine RULES... -o OUT          # Merge rules into one file
    rulesmith run TARGETS... -c RULES          # Run the engine with the rules
    rulesmith policies RULES... --policies DIR # List policies
    rulesmith show RULE_ID RULES...            # Print a single rule
    rulesmith split FILE -o DIR                # One file per rule
"""

import re
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.markup import escape
from rich.table import Table

from ... import __version__
from ...config import get_settings
from ...core.policies import ALL_POLICY, PolicyIndex
from ...core.rules import (
    KeyMode,
    RuleFile,
    RuleIndex,
    RulesError,
    check_path,
)
from ...infrastructure.engine import EngineArgs, EngineError, EngineRunner, OutputFormat
from ...protocols import EngineClient
from ...ui.console import console
from ...ui.progress import get_reporter


def fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def load_rule_index(paths: Tuple[str, ...], complete: bool, quiet: bool) -> RuleIndex:
    """Build a rule index from the command's paths using the configured filters."""
    settings = get_settings()
    for path in paths:
        if not Path(path).is_file():
            check_path(path)

    mode = KeyMode.COMPLETE if complete else settings.KEY_MODE
    return RuleIndex.build(
        paths,
        include=settings.RULE_EXTENSIONS,
        exclude=settings.EXCLUDE_SUFFIXES,
        mode=mode,
        path_only_keys=settings.PATH_ONLY_KEYS,
        reporter=get_reporter(quiet),
    )


def load_policy_index(index: RuleIndex, policy_paths: Tuple[str, ...], quiet: bool) -> PolicyIndex:
    paths = list(policy_paths) or get_settings().POLICY_PATHS
    return PolicyIndex.build(paths, index, reporter=get_reporter(quiet))


def resolve_content(
    index: RuleIndex,
    policy_paths: Tuple[str, ...],
    policy_name: Optional[str],
    strict: bool,
    quiet: bool,
) -> str:
    """Return the rule document for ``policy_name``, or every rule when no policy is given."""
    if not policy_name:
        return index.resolve_all().serialize()

    if policy_name == ALL_POLICY and not (policy_paths or get_settings().POLICY_PATHS):
        policies = PolicyIndex.empty(index)
    else:
        policies = load_policy_index(index, policy_paths, quiet)

    policy = policies.get(policy_name)
    if policy is None:
        fail(f"Unknown policy '{policy_name}'. Available: {', '.join(sorted(policies.ids()))}")

    if strict:
        policy.resolve(index, strict=True)
    return policy.content


@click.group()
@click.version_option(version=__version__, prog_name="rulesmith")
def main():
    """rulesmith - rule registry indexing and policy composition."""
    pass


@main.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("-o", "--output", "output", type=click.Path(dir_okay=False, path_type=Path), required=True,
              help="Path to the combined rule file.")
@click.option("--complete", is_flag=True, help="Key rules by file path plus rule ID.")
@click.option("--policies", "policy_paths", multiple=True, help="Policy directory (repeatable).")
@click.option("-p", "--policy", "policy_name", default=None, help="Only write the rules of this policy.")
@click.option("--strict", is_flag=True, help="Fail if the policy references unknown rule IDs.")
@click.option("-q", "--quiet", is_flag=True, help="Don't report skipped files.")
def combine(
    paths: Tuple[str, ...],
    output: Path,
    complete: bool,
    policy_paths: Tuple[str, ...],
    policy_name: Optional[str],
    strict: bool,
    quiet: bool,
):
    """Combine the rules in PATHS into one rule file."""
    try:
        index = load_rule_index(paths, complete, quiet)
        content = resolve_content(index, policy_paths, policy_name, strict, quiet)
        output.write_text(content, encoding="utf-8")
    except (RulesError, OSError) as e:
        fail(str(e))

    if not quiet:
        get_reporter().success(f"Wrote {len(RuleFile.parse(content))} rule(s) to {output}")


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option("-c", "--config", "config", multiple=True, required=True,
              help="Rule file or registry directory (repeatable).")
@click.option("--policies", "policy_paths", multiple=True, help="Policy directory (repeatable).")
@click.option("-p", "--policy", "policy_name", default=None, help="Run only the rules of this policy.")
@click.option("--strict", is_flag=True, help="Fail if the policy references unknown rule IDs.")
@click.option("--metrics/--no-metrics", default=None, help="Turn engine metrics on or off (default from config).")
@click.option("-f", "--format", "output_format", default=None,
              type=click.Choice([f.value for f in OutputFormat]), help="Engine output format.")
@click.option("-o", "--output", "output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the engine output to this file instead of stdout.")
@click.option("-x", "--extra", "extra", multiple=True,
              help="Flag passed to the engine as-is, e.g. -x --jobs -x 4 (repeatable).")
@click.option("-q", "--quiet", is_flag=True, help="Don't report progress or skipped files.")
def run(
    targets: Tuple[str, ...],
    config: Tuple[str, ...],
    policy_paths: Tuple[str, ...],
    policy_name: Optional[str],
    strict: bool,
    metrics: Optional[bool],
    output_format: Optional[str],
    output: Optional[Path],
    extra: Tuple[str, ...],
    quiet: bool,
):
    """Run the matching engine on TARGETS with the rules in --config."""
    settings = get_settings()
    reporter = get_reporter(quiet)
    reporter.banner("rulesmith", __version__)
    runner: EngineClient = EngineRunner(binary=settings.ENGINE_BINARY, timeout=settings.ENGINE_TIMEOUT)

    if not runner.is_installed():
        fail(
            f"{settings.ENGINE_BINARY} is not installed or detected, "
            "try `python3 -m pip install semgrep`."
        )

    try:
        index = load_rule_index(config, False, quiet)
        content = resolve_content(index, policy_paths, policy_name, strict, quiet)

        args = EngineArgs(
            rules=content,
            paths=list(targets),
            metrics=settings.METRICS if metrics is None else metrics,
            output_format=OutputFormat(output_format) if output_format else settings.OUTPUT_FORMAT,
            extra=list(extra) or None,
        )
        reporter.info(f"Running: {settings.ENGINE_BINARY} {args}")

        reporter.start_status(f"Scanning {len(targets)} path(s) with {len(index)} rule(s)...")
        try:
            result = runner.execute(args)
        finally:
            reporter.stop_status()
    except (RulesError, EngineError, OSError) as e:
        fail(str(e))

    if result.output is not None:
        reporter.info(
            f"{len(result.output.results)} finding(s), {len(result.output.errors)} error(s), "
            f"{len(result.output.paths.scanned)} path(s) scanned"
        )

    if output:
        output.write_text(result.stdout, encoding="utf-8")
        reporter.success(f"Wrote the results to {output}")
    else:
        click.echo(result.stdout, nl=False)

    sys.exit(result.returncode)


@main.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--policies", "policy_paths", multiple=True, help="Policy directory (repeatable).")
@click.option("--complete", is_flag=True, help="Key rules by file path plus rule ID.")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any policy has unresolved rule IDs.")
@click.option("-q", "--quiet", is_flag=True, help="Don't report skipped files.")
def policies(
    paths: Tuple[str, ...],
    policy_paths: Tuple[str, ...],
    complete: bool,
    strict: bool,
    quiet: bool,
):
    """List the policies available for the rules in PATHS."""
    try:
        index = load_rule_index(paths, complete, quiet)
        policy_index = load_policy_index(index, policy_paths, quiet)
    except (RulesError, OSError) as e:
        fail(str(e))

    table = Table(title=f"{len(policy_index)} policies, {len(index)} rules", border_style="brand")
    table.add_column("Policy", style="rule_id")
    table.add_column("Rules", justify="right")
    table.add_column("Unresolved", style="warning")

    incomplete = []
    for name in sorted(policy_index.ids()):
        policy = policy_index.get(name)
        resolved = len(RuleFile.parse(policy.content))
        unresolved = policy.unresolved(index)
        if unresolved:
            incomplete.append(name)
        table.add_row(escape(name), str(resolved), escape(", ".join(unresolved)))

    console.print(table)

    if strict and incomplete:
        fail(f"{len(incomplete)} policy(ies) reference unknown rule IDs: {', '.join(incomplete)}")


@main.command()
@click.argument("rule_id")
@click.argument("paths", nargs=-1, required=True)
@click.option("--complete", is_flag=True, help="Key rules by file path plus rule ID.")
def show(rule_id: str, paths: Tuple[str, ...], complete: bool):
    """Print the rule RULE_ID found in PATHS."""
    try:
        index = load_rule_index(paths, complete, quiet=True)
    except (RulesError, OSError) as e:
        fail(str(e))

    rule = index.get(rule_id)
    if rule is None:
        fail(f"Rule '{rule_id}' not found in {len(index)} indexed rule(s)")

    click.echo(rule.to_yaml(), nl=False)


def _safe_filename(rule_id: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", rule_id).strip("._") or "rule"


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", "output", type=click.Path(file_okay=False, path_type=Path), required=True,
              help="Directory that receives one file per rule.")
def split(file: Path, output: Path):
    """Split a rule FILE into one file per rule, named after the rule ID."""
    try:
        rule_file = RuleFile.from_file(file)
    except (RulesError, OSError) as e:
        fail(str(e))

    output.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    for position, single in enumerate(rule_file.split(), start=1):
        ids = single.ids()
        name = _safe_filename(ids[0]) if ids else f"rule-{position}"
        target = output / f"{name}.yaml"
        if target in written:
            target = output / f"{name}-{position}.yaml"
        single.to_file(target)
        written.append(target)

    get_reporter().success(f"Wrote {len(written)} rule file(s) to {output}")


if __name__ == "__main__":
    main()
