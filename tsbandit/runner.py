from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .errors import ScriptExecutionError
from .roster import Roster, Script
from .selector import select_best
from .telemetry import timed
from .types import UniformSource

logger = logging.getLogger(__name__)

# Exit status a script uses to report an interesting case.
INTERESTING_EXIT_CODE = 1


@dataclass
class ScriptResult:
    interesting: int
    uninteresting: int
    runtime_ms: float


def run_script(script: Script, timeout: Optional[float] = None) -> ScriptResult:
    """Execute ``script.command`` once and classify the outcome by exit status.

    0 is uninteresting, 1 is interesting, anything else counts toward the
    runtime average only.
    """
    argv = shlex.split(script.command)
    if not argv:
        raise ScriptExecutionError(f"Script '{script.name}' has an empty command", command=script.command)

    with timed("run_script", {"script": script.name}) as watch:
        try:
            proc = subprocess.run(argv, capture_output=True, text=True, timeout=timeout)
        except FileNotFoundError as exc:
            raise ScriptExecutionError(f"Could not launch '{argv[0]}': {exc}", command=script.command) from exc
        except subprocess.TimeoutExpired as exc:
            raise ScriptExecutionError(
                f"Script '{script.name}' exceeded timeout of {timeout}s", command=script.command
            ) from exc
    runtime_ms = watch.elapsed_ms

    if proc.returncode == 0:
        logger.debug("Script %s exited 0 (uninteresting). Output: %s", script.name, proc.stdout)
        return ScriptResult(interesting=0, uninteresting=1, runtime_ms=runtime_ms)
    if proc.returncode == INTERESTING_EXIT_CODE:
        logger.warning("Script %s exited 1, logging as interesting. Error: %s", script.name, proc.stderr)
        return ScriptResult(interesting=1, uninteresting=0, runtime_ms=runtime_ms)
    logger.warning(
        "Script %s exited with unrecognized status %s; counting runtime only. Error: %s",
        script.name,
        proc.returncode,
        proc.stderr,
    )
    return ScriptResult(interesting=0, uninteresting=0, runtime_ms=runtime_ms)


def update_state(script: Script, result: ScriptResult) -> None:
    """Fold one result into the script's counts and running-mean runtime."""
    stats = script.statistics().observe(result.interesting, result.uninteresting)
    total_ms = (script.avgruntime_ms or 0.0) * script.runcount
    script.runcount += 1
    # floor keeps the stored estimate positive for sub-resolution runtimes
    script.avgruntime_ms = max((total_ms + result.runtime_ms) / script.runcount, 1e-6)
    script.results.interesting = stats.interesting
    script.results.uninteresting = stats.uninteresting


def eligible_indices(roster: Roster) -> List[int]:
    """Roster indices of scripts that have not reached their interesting-case limit."""
    return [
        idx
        for idx, script in enumerate(roster.scripts)
        if script.limit is None or script.results.interesting < script.limit
    ]


def choose_script(
    roster: Roster,
    rng: Optional[UniformSource] = None,
    ignore_runtime: bool = False,
) -> Optional[int]:
    """Thompson-select among eligible scripts; returns a roster index or None."""
    candidates = eligible_indices(roster)
    scripts = [roster.scripts[idx] for idx in candidates]
    runtimes = None if ignore_runtime else [s.avgruntime_ms for s in scripts]
    picked = select_best(
        [s.statistics() for s in scripts],
        runtimes,
        [s.bias for s in scripts],
        rng,
    )
    if picked is None:
        return None
    return candidates[picked]


def step(
    roster: Roster,
    rng: Optional[UniformSource] = None,
    ignore_runtime: bool = False,
    timeout: Optional[float] = None,
) -> Optional[ScriptResult]:
    """Select one script, run it, and record the outcome. None when nothing is eligible."""
    index = choose_script(roster, rng, ignore_runtime)
    if index is None:
        logger.info("No eligible scripts to execute")
        return None
    script = roster.scripts[index]
    logger.debug("Running script %s (%s)...", index, script.name)
    result = run_script(script, timeout=timeout)
    logger.debug("Script %s finished. Result: %s", index, result)
    update_state(script, result)
    return result


def run_steps(
    roster: Roster,
    steps: int,
    rng: Optional[UniformSource] = None,
    ignore_runtime: bool = False,
    timeout: Optional[float] = None,
) -> List[ScriptResult]:
    rng = rng or np.random.default_rng()
    results: List[ScriptResult] = []
    for _ in range(steps):
        result = step(roster, rng, ignore_runtime=ignore_runtime, timeout=timeout)
        if result is None:
            break
        results.append(result)
    return results


__all__ = [
    "ScriptResult",
    "choose_script",
    "eligible_indices",
    "run_script",
    "run_steps",
    "step",
    "update_state",
]
