from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Protocol, Tuple

from .errors import InvalidDomain


class UniformSource(Protocol):
    """Anything that yields uniform floats in ``[0, 1)``.

    ``numpy.random.Generator`` and ``random.Random`` both qualify.
    """

    def random(self) -> float: ...


@dataclass(frozen=True)
class ArmStatistics:
    """Outcome counts for one arm.

    Counts only grow, except on an explicit reset to ``ArmStatistics()``.
    """

    interesting: int = 0
    uninteresting: int = 0

    def __post_init__(self) -> None:
        for field_name in ("interesting", "uninteresting"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidDomain(f"{field_name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidDomain(f"{field_name} must be >= 0, got {value}")
            # numpy integer counts are normalized to plain ints
            object.__setattr__(self, field_name, int(value))

    @property
    def posterior_parameters(self) -> Tuple[float, float]:
        # Uniform Beta(1, 1) prior updated with the observed counts.
        return float(self.interesting + 1), float(self.uninteresting + 1)

    @property
    def trials(self) -> int:
        return self.interesting + self.uninteresting

    def observe(self, interesting: int = 0, uninteresting: int = 0) -> "ArmStatistics":
        return ArmStatistics(self.interesting + interesting, self.uninteresting + uninteresting)


__all__ = ["ArmStatistics", "UniformSource"]
