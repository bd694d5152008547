"""
Regularized Incomplete Beta Function and Its Inverse

I_x(a, b) is the CDF of Beta(a, b). The forward direction is evaluated with a
continued fraction (modified Lentz), routed through the symmetry
I_x(a, b) = 1 - I_{1-x}(b, a) so the fraction is only ever used where it
converges quickly. The inverse (quantile function) starts from an asymptotic
guess and refines it with Newton-Raphson steps that use the Beta density as
the derivative, falling back to bisection inside a maintained bracket.

Everything here is pure and deterministic. Invalid arguments raise
InvalidDomain; an exhausted iteration budget raises Nonconvergence carrying
the best in-range estimate.
"""
from __future__ import annotations

import math
import sys
from typing import Tuple

from .constants import (
    CF_EPSILON,
    CF_MAX_ITERATIONS,
    CF_TINY,
    INVERSE_ABS_TOL,
    INVERSE_MAX_ITERATIONS,
    INVERSE_REL_TOL,
)
from .errors import InvalidDomain, Nonconvergence

_RESIDUAL_ULPS = 4.0


def _validate_shape(a: float, b: float) -> Tuple[float, float]:
    a = float(a)
    b = float(b)
    if not (math.isfinite(a) and a > 0.0):
        raise InvalidDomain(f"shape parameter a must be finite and > 0, got {a}")
    if not (math.isfinite(b) and b > 0.0):
        raise InvalidDomain(f"shape parameter b must be finite and > 0, got {b}")
    return a, b


def _validate_unit(name: str, value: float) -> float:
    value = float(value)
    # NaN fails both comparisons
    if not (0.0 <= value <= 1.0):
        raise InvalidDomain(f"{name} must lie in [0, 1], got {value}")
    return value


def _log_beta(a: float, b: float) -> float:
    return math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b)


def _continued_fraction(x: float, a: float, b: float) -> Tuple[float, bool]:
    """Evaluate the continued fraction for I_x(a, b) by modified Lentz.

    Returns the fraction and whether it converged within CF_MAX_ITERATIONS.
    """
    qab = a + b
    qap = a + 1.0
    qam = a - 1.0
    c = 1.0
    d = 1.0 - qab * x / qap
    if abs(d) < CF_TINY:
        d = CF_TINY
    d = 1.0 / d
    h = d
    for m in range(1, CF_MAX_ITERATIONS + 1):
        m2 = 2 * m
        # even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1.0 + aa * d
        if abs(d) < CF_TINY:
            d = CF_TINY
        c = 1.0 + aa / c
        if abs(c) < CF_TINY:
            c = CF_TINY
        d = 1.0 / d
        h *= d * c
        # odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1.0 + aa * d
        if abs(d) < CF_TINY:
            d = CF_TINY
        c = 1.0 + aa / c
        if abs(c) < CF_TINY:
            c = CF_TINY
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < CF_EPSILON:
            return h, True
    return h, False


def _incomplete_beta_tails(x: float, a: float, b: float) -> Tuple[float, float, bool]:
    """Lower tail I_x(a, b), upper tail 1 - I_x(a, b), and a convergence flag.

    Arguments are already validated. Whichever tail the continued fraction
    evaluates directly keeps full relative precision; the other is its
    complement.
    """
    if x == 0.0:
        return 0.0, 1.0, True
    if x == 1.0:
        return 1.0, 0.0, True
    front = math.exp(a * math.log(x) + b * math.log1p(-x) - _log_beta(a, b))
    if x < (a + 1.0) / (a + b + 2.0):
        cf, converged = _continued_fraction(x, a, b)
        lower = front * cf / a
        if not math.isfinite(lower):
            # no usable partial sum; only reachable on a non-converged fraction
            return x, 1.0 - x, False
        lower = min(max(lower, 0.0), 1.0)
        return lower, 1.0 - lower, converged
    cf, converged = _continued_fraction(1.0 - x, b, a)
    upper = front * cf / b
    if not math.isfinite(upper):
        return x, 1.0 - x, False
    upper = min(max(upper, 0.0), 1.0)
    return 1.0 - upper, upper, converged


def regularized_incomplete_beta(x: float, a: float, b: float) -> float:
    """Return I_x(a, b), the Beta(a, b) CDF evaluated at ``x``."""
    a, b = _validate_shape(a, b)
    x = _validate_unit("x", x)
    value, _, converged = _incomplete_beta_tails(x, a, b)
    if not converged:
        raise Nonconvergence(
            f"continued fraction for I_{x}({a}, {b}) did not converge",
            estimate=value,
            iterations=CF_MAX_ITERATIONS,
        )
    return value


def _density(x: float, a: float, b: float, log_norm: float) -> float:
    if x <= 0.0 or x >= 1.0:
        edge_shape = a if x <= 0.0 else b
        if edge_shape < 1.0:
            return math.inf
        if edge_shape == 1.0:
            return math.exp(-log_norm)
        return 0.0
    return math.exp((a - 1.0) * math.log(x) + (b - 1.0) * math.log1p(-x) - log_norm)


def beta_pdf(x: float, a: float, b: float) -> float:
    """Beta(a, b) density at ``x``. Infinite at an edge where the shape is < 1."""
    a, b = _validate_shape(a, b)
    x = _validate_unit("x", x)
    return _density(x, a, b, _log_beta(a, b))


def _initial_guess(p: float, a: float, b: float) -> float:
    if a >= 1.0 and b >= 1.0:
        # Abramowitz & Stegun 26.2.22 normal deviate, mapped through 26.5.22
        pp = p if p < 0.5 else 1.0 - p
        t = math.sqrt(-2.0 * math.log(pp))
        z = (2.30753 + t * 0.27061) / (1.0 + t * (0.99229 + t * 0.04481)) - t
        if p < 0.5:
            z = -z
        al = (z * z - 3.0) / 6.0
        h = 2.0 / (1.0 / (2.0 * a - 1.0) + 1.0 / (2.0 * b - 1.0))
        w = z * math.sqrt(al + h) / h - (1.0 / (2.0 * b - 1.0) - 1.0 / (2.0 * a - 1.0)) * (
            al + 5.0 / 6.0 - 2.0 / (3.0 * h)
        )
        x = a / (a + b * math.exp(min(2.0 * w, 700.0)))
    else:
        # small shapes: invert the leading power-law term of whichever tail p falls in
        lna = math.log(a / (a + b))
        lnb = math.log(b / (a + b))
        t = math.exp(a * lna) / a
        u = math.exp(b * lnb) / b
        w = t + u
        if p < t / w:
            x = math.pow(a * w * p, 1.0 / a)
        else:
            x = 1.0 - math.pow(b * w * (1.0 - p), 1.0 / b)
    if not (0.0 < x < 1.0):
        return 0.5
    return x


def inverse_regularized_incomplete_beta(p: float, a: float, b: float) -> float:
    """Return ``x`` such that I_x(a, b) == p (the Beta(a, b) quantile function).

    Newton-Raphson with the density as derivative, safeguarded by a bracket
    [lo, hi] that always contains the root. A bisection step is taken when
    the Newton step would leave the bracket, the density is zero or infinite,
    or the previous Newton step did not shrink the residual.
    """
    a, b = _validate_shape(a, b)
    p = _validate_unit("p", p)
    if p == 0.0:
        return 0.0
    if p == 1.0:
        return 1.0

    q = 1.0 - p
    # residual below this is rounding noise in the tail being matched
    floor = _RESIDUAL_ULPS * sys.float_info.epsilon * min(p, q)
    log_norm = _log_beta(a, b)
    lo, hi = 0.0, 1.0
    x = _initial_guess(p, a, b)
    prev_residual = math.inf
    last_was_newton = False

    for iteration in range(1, INVERSE_MAX_ITERATIONS + 1):
        lower, upper, cf_converged = _incomplete_beta_tails(x, a, b)
        # match the smaller tail so upper quantiles keep relative precision
        residual = lower - p if p <= 0.5 else q - upper
        if abs(residual) <= floor and cf_converged:
            return x
        # I_x is increasing in x
        if residual < 0.0:
            lo = x
        else:
            hi = x

        use_newton = not (last_was_newton and abs(residual) >= abs(prev_residual))
        candidate = None
        density = _density(x, a, b, log_norm)
        if density > 0.0 and math.isfinite(density):
            newton_step = residual / density
            # x is already within tolerance of the root; the bracket may have collapsed onto it
            if cf_converged and abs(newton_step) <= INVERSE_ABS_TOL + INVERSE_REL_TOL * abs(x):
                return x
            if use_newton:
                candidate = x - newton_step
                if not (lo < candidate < hi):
                    candidate = None

        if candidate is None:
            x_next = 0.5 * (lo + hi)
            last_was_newton = False
        else:
            x_next = candidate
            last_was_newton = True
        prev_residual = residual

        tol = INVERSE_ABS_TOL + INVERSE_REL_TOL * abs(x_next)
        if abs(x_next - x) <= tol or (hi - lo) <= tol:
            if not cf_converged:
                raise Nonconvergence(
                    f"I_x({a}, {b}) could not be evaluated to full precision near x={x_next}",
                    estimate=x_next,
                    iterations=iteration,
                )
            return x_next
        x = x_next

    raise Nonconvergence(
        f"inverse of I_x({a}, {b}) at p={p} did not converge in {INVERSE_MAX_ITERATIONS} iterations",
        estimate=x,
        iterations=INVERSE_MAX_ITERATIONS,
    )


__all__ = [
    "beta_pdf",
    "inverse_regularized_incomplete_beta",
    "regularized_incomplete_beta",
]
