"""Central defaults for network SIR simulations.

Defines the Defaults dataclass with shared simulation settings (rates, time
grid, tail step, termination threshold, output paths). Imported by the engine
and the scripts so single runs and ensembles stay consistent.
"""


from dataclasses import dataclass
from pathlib import Path


# Central defaults for reproducible runs.
@dataclass(frozen=True)
class Defaults:
    seed: float = 0.42
    i0: int = 1
    tau: float = 1.0
    gamma: float = 1.0
    dt: float = 0.5
    t_end: float = 5.0
    # Fixed spacing of the flat tail appended after an early stop.
    time_increment: float = 0.5
    # Total rate below this means nothing can happen any more.
    rate_epsilon: float = 1e-6
    # Event history sentinel for the "no node selected" stop.
    no_event: int = -1
    runs_dir: Path = Path("runs")
    cache_dir: Path = Path("data/processed/ensembles")


# Shared defaults instance used across modules and scripts.
DEFAULTS = Defaults()
