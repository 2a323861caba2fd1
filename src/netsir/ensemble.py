"""Monte Carlo ensembles of independent Gillespie runs.

A thin caller of the engine: each seed gets its own GillespieSIR (and so
its own random source); runs share only the read-only adjacency. Runs are
farmed out to worker processes and their grid outputs stacked for summary.
"""


from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import DEFAULTS
from .engine import GillespieSIR, Outcome, SimulationReport
from .network import AdjacencyLike, NetworkView
from .random_source import RandomSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnsembleResult:
    """Stacked grid outputs of an ensemble.

    Attributes:
        times (np.ndarray): Grid times, shape (T,).
        outputs (np.ndarray): S, I, R per run and grid point, shape (n_runs, T, 3).
        seeds (tuple): Seed of each run, same order as outputs.
        reports (tuple): SimulationReport of each run.
    """

    times: np.ndarray
    outputs: np.ndarray
    seeds: Tuple[float, ...]
    reports: Tuple[SimulationReport, ...]

    @property
    def n_runs(self) -> int:
        return self.outputs.shape[0]


def spawn_seeds(n: int, base_seed: float = DEFAULTS.seed) -> List[float]:
    """Derive n reproducible run seeds in [0, 1) from one base seed."""
    if n <= 0:
        raise ValueError("n must be positive")
    source = RandomSource(base_seed)
    return [source.uniform() for _ in range(n)]


def _run_one(
    adjacency: NetworkView,
    seed: float,
    i0: int,
    tau: float,
    gamma: float,
    dt: float,
    t_end: float,
) -> Tuple[np.ndarray, np.ndarray, SimulationReport]:
    # Module-level so it can be pickled into worker processes.
    sim = GillespieSIR(adjacency, i0=i0, tau=tau, gamma=gamma, dt=dt, t_end=t_end, seed=seed)
    report = sim.run()
    times, outputs = sim.result.to_arrays("interpolated")
    return times, outputs, report


def run_ensemble(
    adjacency: AdjacencyLike,
    seeds: Iterable[float],
    i0: int = DEFAULTS.i0,
    tau: float = DEFAULTS.tau,
    gamma: float = DEFAULTS.gamma,
    dt: float = DEFAULTS.dt,
    t_end: float = DEFAULTS.t_end,
    max_workers: Optional[int] = None,
) -> EnsembleResult:
    """Run one independent simulation per seed and stack the grid outputs.

    With max_workers=1 runs execute sequentially in this process, which is
    handy for tests and debugging; otherwise a process pool is used.
    """
    seeds = [float(s) for s in seeds]
    if not seeds:
        raise ValueError("seeds must not be empty")
    # Validate once up front; workers receive the read-only view.
    network = adjacency if isinstance(adjacency, NetworkView) else NetworkView(adjacency)
    args = (i0, tau, gamma, dt, t_end)

    logger.info("Ensemble: %d runs (N=%d, max_workers=%s)", len(seeds), network.n_nodes, max_workers)
    if max_workers == 1:
        results = [_run_one(network, seed, *args) for seed in seeds]
    else:
        with ProcessPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(_run_one, network, seed, *args) for seed in seeds]
            results = [f.result() for f in futures]

    times = results[0][0]
    outputs = np.stack([r[1] for r in results])
    reports = tuple(r[2] for r in results)
    n_extinct = sum(1 for rep in reports if rep.outcome is Outcome.EXTINCT)
    logger.info("Ensemble done: %d/%d runs went extinct before the horizon", n_extinct, len(reports))
    return EnsembleResult(times=times, outputs=outputs, seeds=tuple(seeds), reports=reports)


def summarize(
    ensemble: EnsembleResult, quantiles: Sequence[float] = (5.0, 50.0, 95.0)
) -> Dict[str, np.ndarray]:
    """Mean and percentile bands over runs, each of shape (T, 3)."""
    summary = {"mean": ensemble.outputs.mean(axis=0)}
    for q in quantiles:
        summary[f"q{q:g}"] = np.percentile(ensemble.outputs, q, axis=0)
    return summary


def summary_rows(ensemble: EnsembleResult, summary: Dict[str, np.ndarray]) -> List[Dict]:
    """Flatten a summary into CSV-friendly rows, one per grid point."""
    rows = []
    for k, t in enumerate(ensemble.times):
        row = {"time": float(t)}
        for label, values in summary.items():
            for c, name in enumerate(("susceptible", "infected", "recovered")):
                row[f"{name}_{label}"] = float(values[k, c])
        rows.append(row)
    return rows


def run_rows(ensemble: EnsembleResult) -> List[Dict]:
    """One CSV-friendly row per run: seed, final size and its report fields."""
    final_sizes = ensemble.outputs[:, -1, 1] + ensemble.outputs[:, -1, 2]
    rows = []
    for k, (seed, report) in enumerate(zip(ensemble.seeds, ensemble.reports)):
        rows.append(
            {
                "run": k,
                "seed": seed,
                "final_size": int(final_sizes[k]),
                "outcome": report.outcome.value,
                "n_events": report.n_events,
                "degenerate": report.degenerate,
                "duration_ms": report.duration_ms,
            }
        )
    return rows
