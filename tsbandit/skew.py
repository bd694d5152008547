from __future__ import annotations

import math
from typing import Optional

from .constants import KNOWN_RUNTIME_SCORE_CEILING, MAX_SCORE, RUNTIME_SCALE
from .errors import InvalidDomain


def validate_bias(bias: float) -> float:
    bias = float(bias)
    if not math.isfinite(bias):
        raise InvalidDomain(f"bias must be finite, got {bias}")
    if bias < 0.0:
        raise InvalidDomain(f"bias must be >= 0 (negative bias rewards slower discovery), got {bias}")
    return bias


def validate_runtime(runtime: Optional[float]) -> Optional[float]:
    if runtime is None:
        return None
    runtime = float(runtime)
    if not (math.isfinite(runtime) and runtime > 0.0):
        raise InvalidDomain(f"runtime estimate must be finite and > 0, got {runtime}")
    return runtime


def skew_percentile(percentile: float, runtime: Optional[float], bias: float) -> float:
    """Weight a posterior sample by speed and user bias.

    A bias of ``k`` makes an arm worth the same as an otherwise identical
    arm that runs ``k`` times faster. Unknown runtimes score MAX_SCORE so the
    arm is tried until its runtime has been measured.
    """
    runtime = validate_runtime(runtime)
    bias = validate_bias(bias)
    if runtime is None:
        return MAX_SCORE
    weight = float(percentile) * bias
    # RUNTIME_SCALE / runtime overflows to inf for subnormal runtimes; 0 * inf is nan
    if weight == 0.0:
        return 0.0
    return min(weight * (RUNTIME_SCALE / runtime), KNOWN_RUNTIME_SCORE_CEILING)


def plain_score(percentile: float, bias: float) -> float:
    """Runtime-ignorant score."""
    return float(percentile) * validate_bias(bias)


__all__ = ["plain_score", "skew_percentile", "validate_bias", "validate_runtime"]
