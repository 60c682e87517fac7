"""
Randomness sources for forecast perturbation.

The forecast engine draws exactly two uniform values per projected period
(income first, then expense). Everything else in the engine is
deterministic, so swapping the source is enough to make a run reproducible.
"""

from typing import Iterable, Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def random(self) -> float:
        ...


class SeededRandomSource:
    """
    numpy-backed uniform source.

    With ``seed=None`` the generator is seeded from OS entropy, which is
    what production runs use unless a seed is configured.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._generator = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._generator.random())


class FixedRandomSource:
    """Always returns the same value. 0.5 disables perturbation entirely."""

    def __init__(self, value: float = 0.5):
        if not 0.0 <= value < 1.0:
            raise ValueError("Fixed random value must be in [0, 1)")
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRandomSource:
    """Replays a given sequence of draws, cycling when exhausted."""

    def __init__(self, values: Iterable[float]):
        self.values = list(values)
        if not self.values:
            raise ValueError("At least one value is required")
        self._index = 0

    def random(self) -> float:
        value = self.values[self._index % len(self.values)]
        self._index += 1
        return value
