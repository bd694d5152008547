from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .constants import CREDIBLE_MASS_DEFAULT
from .ibeta import beta_pdf
from .posterior import credible_interval, quantile
from .roster import Roster, Script
from .selector import rank
from .skew import skew_percentile
from .types import ArmStatistics, UniformSource

_BLOCKS = "▁▂▃▄▅▆▇█"


@dataclass
class RankingRow:
    position: int
    index: int
    name: str
    interesting: int
    uninteresting: int
    avgruntime_ms: Optional[float]
    bias: float
    median: float
    ci_lo: float
    ci_hi: float


def _row(position: int, index: int, script: Script, mass: float) -> RankingRow:
    stats = script.statistics()
    lo, hi = credible_interval(stats, mass)
    return RankingRow(
        position=position,
        index=index,
        name=script.name,
        interesting=stats.interesting,
        uninteresting=stats.uninteresting,
        avgruntime_ms=script.avgruntime_ms,
        bias=script.bias,
        median=quantile(stats, 0.5),
        ci_lo=lo,
        ci_hi=hi,
    )


def ranking_rows(
    roster: Roster,
    rng: Optional[UniformSource] = None,
    ignore_runtime: bool = False,
    mass: float = CREDIBLE_MASS_DEFAULT,
) -> List[RankingRow]:
    """One Thompson ranking of the roster, annotated with posterior summaries."""
    scripts = roster.scripts
    runtimes = None if ignore_runtime else [s.avgruntime_ms for s in scripts]
    order = rank([s.statistics() for s in scripts], runtimes, [s.bias for s in scripts], rng)
    return [_row(pos, idx, scripts[idx], mass) for pos, idx in enumerate(order, start=1)]


def _fmt_runtime(value: Optional[float]) -> str:
    return "unknown" if value is None else f"{value:.1f}"


def render_ranking(console: Console, rows: List[RankingRow], verbose: bool = False) -> None:
    table = Table(title="Thompson ranking", expand=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Script", style="magenta")
    if verbose:
        table.add_column("Interesting", justify="right")
        table.add_column("Uninteresting", justify="right")
        table.add_column("Avg runtime (ms)", justify="right")
        table.add_column("Bias", justify="right")
        table.add_column("Median", justify="right")
        table.add_column("Credible interval", justify="right")
    for row in rows:
        cells = [str(row.position), row.name]
        if verbose:
            cells += [
                str(row.interesting),
                str(row.uninteresting),
                _fmt_runtime(row.avgruntime_ms),
                f"{row.bias:g}",
                f"{row.median:.3f}",
                f"[{row.ci_lo:.3f}, {row.ci_hi:.3f}]",
            ]
        table.add_row(*cells)
    console.print(table)


def density_sparkline(stats: ArmStatistics, width: int = 40) -> str:
    """Unicode sketch of the posterior density over [0, 1]."""
    a, b = stats.posterior_parameters
    values = [beta_pdf((i + 0.5) / width, a, b) for i in range(width)]
    peak = max(values)
    if peak <= 0.0:
        return _BLOCKS[0] * width
    top = len(_BLOCKS) - 1
    return "".join(_BLOCKS[min(top, int(round(v / peak * top)))] for v in values)


def render_top(console: Console, roster: Roster, n: int = 3, ignore_runtime: bool = False) -> None:
    """Posterior sketches for the ``n`` scripts with the highest posterior median."""
    scored = sorted(
        ((quantile(s.statistics(), 0.5), s) for s in roster.scripts),
        key=lambda pair: pair[0],
        reverse=True,
    )[:n]
    table = Table(title=f"Top {len(scored)} by believed interesting-rate", expand=False)
    table.add_column("Script", style="magenta")
    table.add_column("Posterior over [0, 1]")
    table.add_column("Median", justify="right")
    table.add_column("Credible interval", justify="right")
    if not ignore_runtime:
        table.add_column("Median score", justify="right")
    for median, script in scored:
        stats = script.statistics()
        lo, hi = credible_interval(stats)
        cells = [script.name, density_sparkline(stats), f"{median:.3f}", f"[{lo:.3f}, {hi:.3f}]"]
        if not ignore_runtime:
            if script.avgruntime_ms is None:
                cells.append("unknown runtime")
            else:
                cells.append(f"{skew_percentile(median, script.avgruntime_ms, script.bias):.4g}")
        table.add_row(*cells)
    console.print(table)


__all__ = ["RankingRow", "density_sparkline", "ranking_rows", "render_ranking", "render_top"]
