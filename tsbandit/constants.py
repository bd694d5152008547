"""
Named numeric constants shared by the sampling core.

Kept in one place so iteration caps, tolerances and the score scale are never
written as bare numbers inside the algorithms.
"""
from __future__ import annotations

import math
import sys

# Runtime skew scale (K). Any positive value preserves the ordering among
# known-runtime arms; its magnitude sets how bias units trade against
# runtime units, so it must stay fixed for reproducible rankings.
RUNTIME_SCALE: float = 100.0

# Score given to arms whose runtime is still unknown.
MAX_SCORE: float = sys.float_info.max
# Known-runtime scores are capped here so they can never tie the sentinel.
KNOWN_RUNTIME_SCORE_CEILING: float = math.nextafter(MAX_SCORE, 0.0)

# Continued fraction for I_x(a, b). Terms needed grow like sqrt(max(a, b)).
CF_MAX_ITERATIONS: int = 10000
CF_EPSILON: float = 1e-15
CF_TINY: float = 1e-300

# Newton/bisection inversion of I_x(a, b).
INVERSE_MAX_ITERATIONS: int = 100
INVERSE_ABS_TOL: float = 1e-12
INVERSE_REL_TOL: float = 1e-12

# Default probability mass for reported credible intervals.
CREDIBLE_MASS_DEFAULT: float = 0.90
