"""Result rows and the completed-run result container.

`SimulationResult` carries the raw per-event trajectory and the
grid-resampled view, plus a few read-only summaries (peaks, final size)
used by the scripts and plots.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Tuple

import numpy as np
from scipy.signal import find_peaks


@dataclass(frozen=True)
class RawRow:
    index: int
    time: float
    susceptible: int
    infected: int
    recovered: int


@dataclass(frozen=True)
class GridRow:
    time: float
    susceptible: int
    infected: int
    recovered: int


@dataclass(frozen=True)
class SimulationResult:
    """Both result views of a completed run.

    Attributes:
        raw (tuple): One RawRow per simulation step, irregular time spacing.
        interpolated (tuple): One GridRow per grid point k * dt, k = 0..floor(t_end / dt).
            Values are carried forward from the last event at or before each point.
    """

    raw: Tuple[RawRow, ...]
    interpolated: Tuple[GridRow, ...]

    def to_arrays(self, which: str = "interpolated") -> Tuple[np.ndarray, np.ndarray]:
        """Return (times, outputs) with outputs of shape (T, 3) in S, I, R order."""
        if which == "interpolated":
            rows = self.interpolated
        elif which == "raw":
            rows = self.raw
        else:
            raise ValueError("which must be 'interpolated' or 'raw'")
        times = np.asarray([row.time for row in rows], dtype=float)
        outputs = np.asarray(
            [(row.susceptible, row.infected, row.recovered) for row in rows], dtype=int
        ).reshape(len(rows), 3)
        return times, outputs

    def to_records(self, which: str = "interpolated") -> List[Dict]:
        """Rows as plain dicts (for CSV export)."""
        rows = self.interpolated if which == "interpolated" else self.raw
        return [asdict(row) for row in rows]

    def peak_positions(self, thres: float = 0.5, min_dist: int = 1) -> np.ndarray:
        """Grid indices of peaks of the infected curve.

        This position can be translated to time with the grid times or to a
        value with the infected column of `to_arrays()`.
        """
        _, outputs = self.to_arrays("interpolated")
        infected = outputs[:, 1].astype(float)
        if infected.size < 3 or np.ptp(infected) == 0:
            return np.array([], dtype=int)
        # thres is relative to the range of the curve.
        height = thres * np.ptp(infected) + infected.min()
        peaks, _ = find_peaks(infected, height=height, distance=max(int(min_dist), 1))
        return peaks.astype(int)

    def peak_infected(self) -> Tuple[float, int]:
        """(time, count) of the highest infected value on the raw trajectory."""
        times, outputs = self.to_arrays("raw")
        idx = int(np.argmax(outputs[:, 1]))
        return float(times[idx]), int(outputs[idx, 1])

    def final_size(self) -> int:
        """Number of nodes ever infected by the end of the grid (recovered plus still infected)."""
        last = self.interpolated[-1]
        return last.recovered + last.infected
