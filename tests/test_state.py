import numpy as np
import pytest

from netsir.exceptions import InvalidStateError
from netsir.network import NetworkView
from netsir.random_source import RandomSource
from netsir.state import NodeStatus, SimulationState


def _expected_rates(net, status, tau, gamma):
    rates = np.zeros(net.n_nodes)
    for node in range(net.n_nodes):
        if status[node] == NodeStatus.INFECTED:
            rates[node] = gamma
        elif status[node] == NodeStatus.SUSCEPTIBLE:
            rates[node] = tau * sum(status[n] == NodeStatus.INFECTED for n in net.neighbors(node))
    return rates


@pytest.mark.parametrize("seed", [0.1, 0.42, 0.9])
def test_initialise_places_i0_infections(path4, seed):
    net = NetworkView(path4)
    state = SimulationState.initialise(net, 2, tau=0.5, gamma=2.0, rng=RandomSource(seed))
    assert int(np.sum(state.status == NodeStatus.INFECTED)) == 2
    assert (state.S, state.I, state.R, state.T) == ([2], [2], [0], [0.0])
    assert np.allclose(state.rates, _expected_rates(net, state.status, 0.5, 2.0))
    assert state.rate_history.shape == (1, 4)
    assert state.status_history.shape == (1, 4)
    assert state.event_history == ()


def test_initial_placement_depends_on_seed(complete5):
    net = NetworkView(complete5)
    placements = {
        tuple(SimulationState.initialise(net, 1, 1.0, 1.0, RandomSource(s)).status) for s in np.linspace(0, 0.99, 30)
    }
    assert len(placements) > 1


def test_infect_and_recover_update_rates(path4):
    net = NetworkView(path4)
    state = SimulationState(4, tau=1.5, gamma=0.5)

    state.infect(1, state.susceptible_neighbors(net, 1))
    assert state.status.tolist() == [0, 1, 0, 0]
    assert state.rates.tolist() == [1.5, 0.5, 1.5, 0.0]

    state.infect(2, state.susceptible_neighbors(net, 2))
    assert state.rates.tolist() == [1.5, 0.5, 0.5, 1.5]

    state.recover(1, state.susceptible_neighbors(net, 1))
    assert state.status.tolist() == [0, 2, 1, 0]
    assert state.rates.tolist() == [0.0, 0.0, 0.5, 1.5]


def test_histories_are_read_only(path4):
    state = SimulationState.initialise(NetworkView(path4), 1, 1.0, 1.0, RandomSource(0.3))
    with pytest.raises(ValueError):
        state.rate_history[0, 0] = 5.0


def test_rate_is_exactly_zero_once_pressure_is_gone():
    # Hub 0 surrounded by leaves 1..3.
    A = np.zeros((4, 4), dtype=int)
    A[0, 1:] = A[1:, 0] = 1
    net = NetworkView(A)
    state = SimulationState(4, tau=0.1, gamma=1.0)
    for leaf in (1, 2, 3):
        state.infect(leaf, state.susceptible_neighbors(net, leaf))
    assert state.rates[0] == 0.1 * 3
    for leaf in (1, 2, 3):
        state.recover(leaf, state.susceptible_neighbors(net, leaf))
    assert state.rates[0] == 0.0
    assert state.pressure[0] == 0


def test_frozen_state_rejects_mutation(path4):
    net = NetworkView(path4)
    state = SimulationState.initialise(net, 1, 1.0, 1.0, RandomSource(0.3))
    state.freeze()
    assert state.frozen
    with pytest.raises(InvalidStateError):
        state.record_step(1.0, 3, 1, 0)
    with pytest.raises(InvalidStateError):
        state.recover(0, [])
    with pytest.raises(InvalidStateError):
        state.extend_flat(2.0)
    with pytest.raises(ValueError):
        state.status[0] = NodeStatus.RECOVERED
    assert state.T == [0.0]
