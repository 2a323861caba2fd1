"""Seeded random source for a single simulation run.

One run draws everything (the initial shuffle, waiting times and event
selection) from a single NumPy Generator so that the whole trajectory is
reproducible from one real seed in [0, 1).
"""

from __future__ import annotations

import math
from typing import MutableSequence, Optional, Union

import numpy as np

from .exceptions import InvalidParameterError


def draw_seed() -> float:
    """Draw a fresh, non-reproducible seed in [0, 1) from system entropy."""
    return float(np.random.default_rng().random())


def validate_seed(seed: float) -> float:
    """Return the seed as a float, rejecting values outside [0, 1)."""
    try:
        value = float(seed)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"seed must be a real number in [0, 1), got {seed!r}") from exc
    if not math.isfinite(value) or not 0.0 <= value < 1.0:
        raise InvalidParameterError(f"seed must be in [0, 1), got {value!r}")
    return value


def _entropy_from_seed(seed: float) -> int:
    # The IEEE-754 bit pattern is unique per float, so distinct seeds never collide.
    return int(np.float64(seed).view(np.uint64))


class RandomSource:
    """Uniform, exponential and shuffle draws derived from one seed.

    Instances are owned by exactly one run; concurrent runs each build their
    own source.
    """

    def __init__(self, seed: Optional[float] = None) -> None:
        self.seed = draw_seed() if seed is None else validate_seed(seed)
        self._rng = np.random.default_rng(_entropy_from_seed(self.seed))

    def uniform(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(self._rng.random())

    def exponential(self, rate: float) -> float:
        """Exponential draw with the given rate (mean 1 / rate)."""
        if not rate > 0:
            raise InvalidParameterError(f"exponential rate must be positive, got {rate!r}")
        return float(self._rng.exponential(1.0 / rate))

    def shuffle(self, values: Union[np.ndarray, MutableSequence]) -> None:
        """Shuffle values in place (unbiased Fisher-Yates)."""
        self._rng.shuffle(values)

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed!r})"
