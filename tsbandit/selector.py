from __future__ import annotations

from typing import Any, List, Optional, Sequence

import numpy as np

from .errors import InvalidDomain
from .posterior import draw_percentile
from .skew import plain_score, skew_percentile, validate_bias, validate_runtime
from .types import ArmStatistics, UniformSource


def _as_statistics(entry: Any) -> ArmStatistics:
    if isinstance(entry, ArmStatistics):
        return entry
    return ArmStatistics(entry.interesting, entry.uninteresting)


def score_arms(
    stats: Sequence[Any],
    runtimes: Optional[Sequence[Optional[float]]] = None,
    biases: Optional[Sequence[float]] = None,
    rng: Optional[UniformSource] = None,
) -> List[float]:
    """Draw one Thompson score per arm.

    ``runtimes=None`` selects the runtime-ignorant score; otherwise each
    sample is skewed by its arm's runtime estimate. ``biases=None`` weights
    every arm by 1.0. All inputs are validated before any draw is made.
    """
    arms = [_as_statistics(entry) for entry in stats]
    n = len(arms)
    weights = [1.0] * n if biases is None else [validate_bias(b) for b in biases]
    if len(weights) != n:
        raise InvalidDomain(f"expected {n} biases, got {len(weights)}")
    costs = None
    if runtimes is not None:
        costs = [validate_runtime(r) for r in runtimes]
        if len(costs) != n:
            raise InvalidDomain(f"expected {n} runtimes, got {len(costs)}")
    if n == 0:
        return []

    rng = rng or np.random.default_rng()
    scores: List[float] = []
    for idx, arm in enumerate(arms):
        percentile = draw_percentile(arm, rng)
        if costs is None:
            scores.append(plain_score(percentile, weights[idx]))
        else:
            scores.append(skew_percentile(percentile, costs[idx], weights[idx]))
    return scores


def select_best(
    stats: Sequence[Any],
    runtimes: Optional[Sequence[Optional[float]]] = None,
    biases: Optional[Sequence[float]] = None,
    rng: Optional[UniformSource] = None,
) -> Optional[int]:
    """Index of the highest-scoring arm, or None when no arms are given.

    Ties go to the first arm encountered.
    """
    best_index: Optional[int] = None
    best_score = 0.0
    for idx, score in enumerate(score_arms(stats, runtimes, biases, rng)):
        if best_index is None or score > best_score:
            best_index = idx
            best_score = score
    return best_index


def rank(
    stats: Sequence[Any],
    runtimes: Optional[Sequence[Optional[float]]] = None,
    biases: Optional[Sequence[float]] = None,
    rng: Optional[UniformSource] = None,
) -> List[int]:
    """Arm indices ordered best to worst.

    Ex. [0, 2, 1]: the first arm ranked first, the third second and the
    second last. Equal scores keep their original index order.
    """
    scores = score_arms(stats, runtimes, biases, rng)
    return sorted(range(len(scores)), key=lambda idx: scores[idx], reverse=True)


__all__ = ["rank", "score_arms", "select_best"]
