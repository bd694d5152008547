from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .constants import CREDIBLE_MASS_DEFAULT
from .errors import InvalidDomain, Nonconvergence
from .ibeta import inverse_regularized_incomplete_beta
from .types import ArmStatistics, UniformSource


def posterior_percentile(stats: ArmStatistics, u: float) -> float:
    """Map a uniform draw ``u`` through the posterior quantile function.

    Inverse-CDF sampling: for ``u ~ U[0, 1)`` the result is distributed as
    Beta(interesting + 1, uninteresting + 1). A non-converged inversion still
    yields a usable in-range estimate for ranking, so that estimate is used.
    """
    a, b = stats.posterior_parameters
    try:
        return inverse_regularized_incomplete_beta(u, a, b)
    except Nonconvergence as exc:
        return exc.estimate


def draw_percentile(stats: ArmStatistics, rng: Optional[UniformSource] = None) -> float:
    """One Thompson draw for ``stats`` using the injected uniform source."""
    rng = rng or np.random.default_rng()
    return posterior_percentile(stats, float(rng.random()))


def quantile(stats: ArmStatistics, probability: float) -> float:
    """Posterior quantile at ``probability``; read-only query for reporting."""
    a, b = stats.posterior_parameters
    return inverse_regularized_incomplete_beta(probability, a, b)


def credible_interval(stats: ArmStatistics, mass: float = CREDIBLE_MASS_DEFAULT) -> Tuple[float, float]:
    """Equal-tailed credible interval holding ``mass`` of the posterior."""
    mass = float(mass)
    if not (0.0 < mass < 1.0):
        raise InvalidDomain(f"credible mass must lie in (0, 1), got {mass}")
    tail = (1.0 - mass) / 2.0
    return quantile(stats, tail), quantile(stats, 1.0 - tail)


def posterior_mean(stats: ArmStatistics) -> float:
    a, b = stats.posterior_parameters
    return a / (a + b)


__all__ = [
    "credible_interval",
    "draw_percentile",
    "posterior_mean",
    "posterior_percentile",
    "quantile",
]
