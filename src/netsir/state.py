"""Mutable per-run simulation state.

Holds node statuses, the per-node rate vector, the S/I/R/T trajectory and
the step-by-step histories. Owned by a single run; the engine is the only
writer and freezes the state once the run completes.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Tuple

import numpy as np

from .exceptions import InvalidStateError
from .network import NetworkView
from .random_source import RandomSource


class NodeStatus(IntEnum):
    SUSCEPTIBLE = 0
    INFECTED = 1
    RECOVERED = 2


class SimulationState:
    """Statuses, rates and histories for one run.

    A susceptible node's rate is tau times its number of infected
    neighbours, so it is exactly 0.0 once the last one recovers.

    Attributes:
        status (np.ndarray): NodeStatus value per node (int8).
        rates (np.ndarray): Instantaneous hazard of each node's next event.
        pressure (np.ndarray): Number of infected neighbours per node.
        S, I, R (list): Compartment counts per simulation step.
        T (list): Simulation time per step, strictly increasing.
    """

    def __init__(self, n_nodes: int, tau: float, gamma: float) -> None:
        self.n_nodes = n_nodes
        self.tau = tau
        self.gamma = gamma
        self.status = np.full(n_nodes, NodeStatus.SUSCEPTIBLE, dtype=np.int8)
        self.rates = np.zeros(n_nodes, dtype=float)
        self.pressure = np.zeros(n_nodes, dtype=np.int64)
        self.S: List[int] = []
        self.I: List[int] = []
        self.R: List[int] = []
        self.T: List[float] = []
        self._rate_history: List[np.ndarray] = []
        self._status_history: List[np.ndarray] = []
        self._event_history: List[int] = []
        self._frozen = False

    @classmethod
    def initialise(
        cls,
        network: NetworkView,
        i0: int,
        tau: float,
        gamma: float,
        rng: RandomSource,
    ) -> "SimulationState":
        """Build step 0: I0 randomly placed infections and their rates."""
        state = cls(network.n_nodes, tau, gamma)
        # First I0 nodes infected, then shuffled with the run's own source.
        state.status[:i0] = NodeStatus.INFECTED
        rng.shuffle(state.status)

        for node in range(state.n_nodes):
            if state.status[node] == NodeStatus.SUSCEPTIBLE:
                state.pressure[node] = sum(
                    1 for n in network.neighbors(node) if state.status[n] == NodeStatus.INFECTED
                )
                state.rates[node] = tau * int(state.pressure[node])
            elif state.status[node] == NodeStatus.INFECTED:
                state.rates[node] = gamma

        state.S.append(state.n_nodes - i0)
        state.I.append(i0)
        state.R.append(0)
        state.T.append(0.0)
        state._snapshot()
        return state

    def _check_writable(self) -> None:
        if self._frozen:
            raise InvalidStateError("simulation state is read-only after the run completes")

    def _snapshot(self) -> None:
        self._rate_history.append(self.rates.copy())
        self._status_history.append(self.status.copy())

    def susceptible_neighbors(self, network: NetworkView, node: int) -> List[int]:
        return [n for n in network.neighbors(node) if self.status[n] == NodeStatus.SUSCEPTIBLE]

    def _add_pressure(self, neighbors: List[int], delta: int) -> None:
        for neighbor in neighbors:
            self.pressure[neighbor] += delta
            self.rates[neighbor] = self.tau * int(self.pressure[neighbor])

    def infect(self, node: int, susceptible_neighbors: List[int]) -> None:
        """Susceptible -> Infected; the node now pressures its susceptible neighbours."""
        self._check_writable()
        self.status[node] = NodeStatus.INFECTED
        self.rates[node] = self.gamma
        self._add_pressure(susceptible_neighbors, 1)

    def recover(self, node: int, susceptible_neighbors: List[int]) -> None:
        """Infected -> Recovered; withdraw the pressure the node contributed."""
        self._check_writable()
        self.status[node] = NodeStatus.RECOVERED
        self.rates[node] = 0.0
        self._add_pressure(susceptible_neighbors, -1)

    def record_event(self, node: int) -> None:
        self._check_writable()
        self._event_history.append(node)

    def record_step(self, time: float, s: int, i: int, r: int) -> None:
        """Append one event step to the trajectory along with rate/status snapshots."""
        self._check_writable()
        self.T.append(time)
        self.S.append(s)
        self.I.append(i)
        self.R.append(r)
        self._snapshot()

    def extend_flat(self, time: float) -> None:
        """Append a row with unchanged S/I/R (tail extension, no snapshot)."""
        self._check_writable()
        self.T.append(time)
        self.S.append(self.S[-1])
        self.I.append(self.I[-1])
        self.R.append(self.R[-1])

    def freeze(self) -> None:
        """Make the state read-only; further transitions or records raise InvalidStateError."""
        self._frozen = True
        for array in (self.status, self.rates, self.pressure):
            array.setflags(write=False)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def total_rate(self) -> float:
        return float(np.sum(self.rates))

    @property
    def rate_history(self) -> np.ndarray:
        """Rate vector after every event step, shape (steps, N), read-only copy."""
        out = np.stack(self._rate_history)
        out.setflags(write=False)
        return out

    @property
    def status_history(self) -> np.ndarray:
        """Node statuses after every event step, shape (steps, N), read-only copy."""
        out = np.stack(self._status_history)
        out.setflags(write=False)
        return out

    @property
    def event_history(self) -> Tuple[int, ...]:
        return tuple(self._event_history)

    def trajectory(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Return (T, S, I, R) as NumPy arrays."""
        return (
            np.asarray(self.T, dtype=float),
            np.asarray(self.S, dtype=int),
            np.asarray(self.I, dtype=int),
            np.asarray(self.R, dtype=int),
        )
