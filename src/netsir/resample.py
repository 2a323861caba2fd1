"""Resampling of the event-time trajectory.

Each simulation step happens at an irregular time, so the trajectory is
mapped onto a uniform grid by carrying the last observed S/I/R forward
(a step function, not a linear interpolation).
"""


import math
from typing import Sequence, Tuple

import numpy as np

from .results import GridRow, RawRow


def raw_rows(
    T: Sequence[float], S: Sequence[int], I: Sequence[int], R: Sequence[int]
) -> Tuple[RawRow, ...]:
    """One row per simulation step."""
    return tuple(
        RawRow(index=k, time=float(T[k]), susceptible=int(S[k]), infected=int(I[k]), recovered=int(R[k]))
        for k in range(len(T))
    )


def grid_times(t_end: float, dt: float) -> np.ndarray:
    """Grid points k * dt for k = 0..floor(t_end / dt)."""
    if dt <= 0:
        raise ValueError("dt must be positive")
    M = int(math.floor(t_end / dt))
    return np.arange(M + 1) * dt


def carried_forward_indices(T: Sequence[float], points: np.ndarray) -> np.ndarray:
    """Index of the last step with T <= point, for every grid point.

    Found as (first index with T > point) - 1; when no step exceeds the
    point, the last step is used.
    """
    T = np.asarray(T, dtype=float)
    # side="right" gives the first index strictly greater than the point.
    first_greater = np.searchsorted(T, points, side="right")
    return np.clip(first_greater - 1, 0, T.size - 1)


def interpolate_rows(
    T: Sequence[float],
    S: Sequence[int],
    I: Sequence[int],
    R: Sequence[int],
    t_end: float,
    dt: float,
) -> Tuple[GridRow, ...]:
    """Last-observation-carried-forward values on the uniform grid."""
    points = grid_times(t_end, dt)
    indices = carried_forward_indices(T, points)
    return tuple(
        GridRow(time=float(point), susceptible=int(S[k]), infected=int(I[k]), recovered=int(R[k]))
        for point, k in zip(points, indices)
    )
