from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple
import json
import logging

import numpy as np
import typer
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from .config import load_runtime_settings
from .errors import BanditError
from .insights import ranking_rows, render_ranking, render_top
from .lint import ERROR, has_errors, lint_roster
from .roster import Roster, load_roster, new_roster, reset_roster, save_roster
from .runner import run_steps


app = typer.Typer(help="Biased Thompson Sampling for multi-armed bandits: prioritize scripts by "
                  "their likelihood to be interesting and their runtime.")

logger = logging.getLogger(__name__)


@app.callback()
def _root_callback(
    debug: bool = typer.Option(False, "--debug", help="Log at DEBUG level"),
):
    """tsbandit CLI root."""
    load_dotenv()
    settings = load_runtime_settings()
    level = logging.DEBUG if debug else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _fail(message: str) -> None:
    typer.echo(f"ERROR: {message}", err=True)
    raise typer.Exit(1)


def _load(config: Path) -> Roster:
    try:
        return load_roster(config)
    except (ValidationError, json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        _fail(f"Invalid roster {config}: {exc}")


def _make_rng(seed: Optional[int]) -> np.random.Generator:
    settings = load_runtime_settings()
    return np.random.default_rng(seed if seed is not None else settings.seed)


def parse_mapping(raw: str) -> Tuple[str, str]:
    """Split ``name=command`` on the first '='; the command may contain more."""
    name, sep, command = raw.partition("=")
    if not sep or not name.strip() or not command.strip():
        raise typer.BadParameter(f"Mapping should be in the format name=command, got '{raw}'")
    return name.strip(), command.strip()


@app.command("new")
def cmd_new(
    path: Path = typer.Argument(..., dir_okay=False, help="Output location for the new roster"),
    tests: List[str] = typer.Option([], "--test", "-t", help="name=command mapping (repeatable)"),
):
    """Create a new roster for the given list of scripts."""
    pairs = [parse_mapping(raw) for raw in tests]
    try:
        roster = new_roster(pairs)
    except ValidationError as exc:
        _fail(str(exc))
    save_roster(roster, path)
    typer.echo(f"Wrote {path} ({len(roster.scripts)} scripts)")


@app.command("run")
def cmd_run(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Roster to run"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output location for the updated roster"),
    steps: Optional[int] = typer.Option(None, min=0, help="Number of script invocations to perform"),
    ignore_runtime: bool = typer.Option(False, "--ignore-runtime", "-i", help="Ignore runtime when ranking scripts"),
    seed: Optional[int] = typer.Option(None, help="Seed for the Thompson draws"),
    timeout: Optional[float] = typer.Option(None, help="Per-script timeout in seconds"),
):
    """Repeatedly prioritize and run scripts by their likelihood to discover interesting cases."""
    settings = load_runtime_settings()
    roster = _load(config)
    if not roster.scripts:
        _fail("No scripts to execute")
    n_steps = steps if steps is not None else settings.steps
    out = output or settings.output_path
    try:
        results = run_steps(
            roster,
            n_steps,
            rng=_make_rng(seed),
            ignore_runtime=ignore_runtime,
            timeout=timeout if timeout is not None else settings.timeout_s,
        )
    except BanditError as exc:
        # keep whatever was learned before the failure
        save_roster(roster, out)
        _fail(str(exc))
    if len(results) < n_steps:
        typer.echo(f"Stopped after {len(results)} of {n_steps} steps: every script reached its limit", err=True)
    save_roster(roster, out)
    typer.echo(f"Wrote {out}")
    try:
        render_top(Console(), load_roster(out), ignore_runtime=ignore_runtime)
    except BanditError as exc:
        _fail(str(exc))


@app.command("rank")
def cmd_rank(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Roster to rank"),
    ignore_runtime: bool = typer.Option(False, "--ignore-runtime", "-i", help="Ignore runtime when ranking scripts"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show counts, runtimes and posterior summaries"),
    seed: Optional[int] = typer.Option(None, help="Seed for the Thompson draws"),
):
    """Print one Thompson ranking of the roster."""
    roster = _load(config)
    console = Console()
    try:
        if verbose:
            render_top(console, roster, ignore_runtime=ignore_runtime)
        rows = ranking_rows(roster, rng=_make_rng(seed), ignore_runtime=ignore_runtime)
    except BanditError as exc:
        _fail(str(exc))
    render_ranking(console, rows, verbose=verbose)


@app.command("reset")
def cmd_reset(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Roster to reset"),
    script: Optional[str] = typer.Option(None, help="Only reset this script"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output location for the reset roster"),
):
    """Reset a roster to clear learned statistics and runtimes."""
    roster = _load(config)
    if not roster.scripts:
        typer.echo("No scripts to reset. Exiting...")
        return
    try:
        reset_roster(roster, script)
    except KeyError:
        _fail(f"Could not find specified script '{script}' to reset")
    out = output or load_runtime_settings().output_path
    save_roster(roster, out)
    typer.echo(f"Wrote {out}")


@app.command("summarize")
def cmd_summarize(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Roster to summarize"),
    ignore_runtime: bool = typer.Option(False, "--ignore-runtime", "-i", help="Ignore runtime when ranking scripts"),
    seed: Optional[int] = typer.Option(None, help="Seed for the Thompson draws"),
):
    """Summarize the roster: top scripts plus a detailed ranking."""
    roster = _load(config)
    console = Console()
    try:
        render_top(console, roster, ignore_runtime=ignore_runtime)
        rows = ranking_rows(roster, rng=_make_rng(seed), ignore_runtime=ignore_runtime)
    except BanditError as exc:
        _fail(str(exc))
    render_ranking(console, rows, verbose=True)


@app.command("lint")
def cmd_lint(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Roster to lint"),
):
    """Lint an existing roster to ensure it is valid."""
    roster = _load(config)
    findings = lint_roster(roster)
    for finding in findings:
        label = "ERROR" if finding.level == ERROR else "Warning"
        typer.echo(f"{finding.script} {label}: {finding.message}")
    if not findings:
        typer.echo(f"{config}: OK ({len(roster.scripts)} scripts)")
    if has_errors(findings):
        raise typer.Exit(1)


def main():
    app()


if __name__ == "__main__":
    main()
