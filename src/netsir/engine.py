"""Gillespie (SSA) simulation of SIR spread on a contact network.

Provides the GillespieSIR class: validate the inputs, place the initial
infections, run the direct-method event loop until extinction or the time
horizon, pad an early stop with a flat tail, and resample the trajectory
onto a uniform grid. Results are read back through the `result` property
once `run()` (or the awaitable `simulate()`) has completed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
import math
import time as _time
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULTS
from .exceptions import InvalidParameterError, InvalidStateError
from .network import AdjacencyLike, NetworkView
from .random_source import RandomSource
from .resample import interpolate_rows, raw_rows
from .results import SimulationResult
from .state import NodeStatus, SimulationState


logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    RUNNING = "running"
    EXTINCT = "extinct"
    HORIZON_REACHED = "horizon_reached"


@dataclass(frozen=True)
class SimulationReport:
    """Completion signal of a run."""

    duration_ms: float
    seed: float
    outcome: Outcome
    n_events: int
    degenerate: bool = False

    @property
    def message(self) -> str:
        return f"Simulation completed in {self.duration_ms:.3f} ms with seed {self.seed}"

    def to_dict(self) -> dict:
        return {
            "duration_ms": self.duration_ms,
            "seed": self.seed,
            "outcome": self.outcome.value,
            "n_events": self.n_events,
            "degenerate": self.degenerate,
        }


def _require_positive(name: str, value: float, allow_zero: bool = False) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}") from exc
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise InvalidParameterError(f"{name} must be {bound}, got {value!r}")
    return value


class GillespieSIR:
    """Continuous-time SIR epidemic on a fixed network.

    Attributes:
        network (NetworkView): Validated contact network.
        i0 (int): Initial number of infected nodes.
        tau (float): Infection rate per infected neighbour.
        gamma (float): Recovery rate.
        dt (float): Spacing of the resampled grid.
        t_end (float): Time horizon.
        seed (float): Seed in [0, 1) the run is reproducible from.
        time_increment (float): Spacing of the flat tail after an early stop.
    """

    def __init__(
        self,
        adjacency: AdjacencyLike,
        i0: int,
        tau: float,
        gamma: float,
        dt: float,
        t_end: float,
        seed: Optional[float] = None,
        time_increment: float = DEFAULTS.time_increment,
        rate_epsilon: float = DEFAULTS.rate_epsilon,
    ) -> None:
        self.network = adjacency if isinstance(adjacency, NetworkView) else NetworkView(adjacency)
        N = self.network.n_nodes

        if isinstance(i0, bool) or not isinstance(i0, (int, np.integer)):
            raise InvalidParameterError(f"i0 must be an integer, got {i0!r}")
        if not 0 < i0 <= N:
            raise InvalidParameterError(f"i0 must be in (0, {N}], got {i0}")
        self.i0 = int(i0)
        # tau == 0 is a valid no-transmission scenario.
        self.tau = _require_positive("tau", tau, allow_zero=True)
        self.gamma = _require_positive("gamma", gamma)
        self.dt = _require_positive("dt", dt)
        self.t_end = _require_positive("t_end", t_end)
        self.time_increment = _require_positive("time_increment", time_increment)
        self.rate_epsilon = _require_positive("rate_epsilon", rate_epsilon)

        self._rng = RandomSource(seed)
        self.seed = self._rng.seed

        self._state = SimulationState.initialise(self.network, self.i0, self.tau, self.gamma, self._rng)
        self.outcome = Outcome.RUNNING
        self.sim_duration = 0.0
        self._started = False
        self._result: Optional[SimulationResult] = None
        self._report: Optional[SimulationReport] = None

    @property
    def n_nodes(self) -> int:
        return self.network.n_nodes

    @property
    def _end_time(self) -> float:
        # The margin guarantees the trajectory covers the whole grid.
        return self.t_end + self.time_increment

    def _select_node(self, total_rate: float) -> int:
        """Weighted choice of the next event node, or -1 if the scan finds none."""
        cumulative = np.cumsum(self._state.rates)
        threshold = self._rng.uniform() * total_rate
        hits = np.flatnonzero(cumulative > threshold)
        if hits.size == 0:
            return DEFAULTS.no_event
        return int(hits[0])

    def _event_loop(self) -> bool:
        """Run the SSA loop; return True if it stopped on the degenerate scan."""
        state = self._state
        time = 0.0
        while time <= self._end_time:
            s, i, r = state.S[-1], state.I[-1], state.R[-1]

            total_rate = state.total_rate
            if total_rate < self.rate_epsilon:
                self.outcome = Outcome.EXTINCT
                logger.debug("Total rate %.3g below threshold at t=%.6g", total_rate, time)
                return False

            wait = self._rng.exponential(total_rate)
            event_time = state.T[-1] + wait

            node = self._select_node(total_rate)
            state.record_event(node)
            if node == DEFAULTS.no_event:
                # Rounding left the cumulative sum below the threshold; stop as if extinct.
                self.outcome = Outcome.EXTINCT
                logger.warning(
                    "No event node found (total_rate=%.6g, seed=%s); ending run at t=%.6g",
                    total_rate,
                    self.seed,
                    time,
                )
                return True

            neighbors = state.susceptible_neighbors(self.network, node)
            status = state.status[node]
            if status == NodeStatus.SUSCEPTIBLE:
                s, i = s - 1, i + 1
                state.infect(node, neighbors)
            elif status == NodeStatus.INFECTED:
                i, r = i - 1, r + 1
                state.recover(node, neighbors)
            else:
                raise InvalidStateError(f"recovered node {node} selected for an event")

            state.record_step(event_time, s, i, r)
            logger.debug("t=%.6g node=%d S=%d I=%d R=%d", event_time, node, s, i, r)
            time = event_time

        self.outcome = Outcome.HORIZON_REACHED
        return False

    def _extend_tail(self) -> None:
        """Pad the trajectory with constant rows up past the horizon."""
        state = self._state
        time = state.T[-1]
        while time <= self._end_time:
            time = state.T[-1] + self.time_increment
            state.extend_flat(time)

    def run(self) -> SimulationReport:
        """Run the simulation to completion. Callable once."""
        if self._started:
            raise InvalidStateError("simulation has already been run; build a new instance")
        self._started = True

        logger.info(
            "Gillespie run: N=%d i0=%d tau=%s gamma=%s t_end=%s seed=%s",
            self.n_nodes,
            self.i0,
            self.tau,
            self.gamma,
            self.t_end,
            self.seed,
        )
        start = _time.perf_counter()

        degenerate = self._event_loop()
        n_events = len(self._state.T) - 1
        if self.outcome is not Outcome.HORIZON_REACHED:
            self._extend_tail()

        self._state.freeze()
        T, S, I, R = self._state.trajectory()
        self._result = SimulationResult(
            raw=raw_rows(T, S, I, R),
            interpolated=interpolate_rows(T, S, I, R, self.t_end, self.dt),
        )

        self.sim_duration = (_time.perf_counter() - start) * 1000.0
        self._report = SimulationReport(
            duration_ms=self.sim_duration,
            seed=self.seed,
            outcome=self.outcome,
            n_events=n_events,
            degenerate=degenerate,
        )
        logger.info("%s (%s, %d events)", self._report.message, self.outcome.value, n_events)
        return self._report

    async def simulate(self) -> SimulationReport:
        """Awaitable run; the computation itself is synchronous and runs in a worker thread."""
        return await asyncio.to_thread(self.run)

    @property
    def completed(self) -> bool:
        return self._result is not None

    def _require_completed(self) -> None:
        if self._result is None:
            raise InvalidStateError("simulation has not completed; call run() or await simulate() first")

    @property
    def result(self) -> SimulationResult:
        """Raw and interpolated views of the completed run."""
        self._require_completed()
        return self._result

    @property
    def data(self) -> dict:
        """Result as {"raw": [...], "interpolated": [...]} dict rows."""
        result = self.result
        return {"raw": result.to_records("raw"), "interpolated": result.to_records("interpolated")}

    @property
    def report(self) -> SimulationReport:
        self._require_completed()
        return self._report

    @property
    def event_history(self) -> Tuple[int, ...]:
        return self._state.event_history

    @property
    def rate_history(self) -> np.ndarray:
        return self._state.rate_history

    @property
    def status_history(self) -> np.ndarray:
        return self._state.status_history
