from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FixedDraw:
    """Uniform source that returns the same value on every call."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


class SequenceDraw:
    """Uniform source that replays a fixed sequence of draws."""

    def __init__(self, values):
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self._values[self.calls]
        self.calls += 1
        return value


@pytest.fixture
def fixed_draw():
    return FixedDraw


@pytest.fixture
def sequence_draw():
    return SequenceDraw


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(12345)
