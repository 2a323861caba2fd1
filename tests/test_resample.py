import numpy as np
import pytest

from netsir.resample import carried_forward_indices, grid_times, interpolate_rows, raw_rows


T = [0.0, 1.0, 2.5, 4.0]
S = [3, 2, 2, 2]
I = [1, 2, 1, 0]
R = [0, 0, 1, 2]


def test_carried_forward_uses_last_step_at_or_before_point():
    points = np.array([0.0, 0.5, 1.0, 3.0, 4.0, 10.0])
    assert carried_forward_indices(T, points).tolist() == [0, 0, 1, 2, 3, 3]


def test_grid_times_cover_floor_of_horizon():
    assert grid_times(5.0, 0.5).tolist() == [k * 0.5 for k in range(11)]
    assert len(grid_times(1.0, 0.3)) == 4
    assert len(grid_times(0.2, 0.5)) == 1


def test_grid_times_rejects_non_positive_step():
    with pytest.raises(ValueError):
        grid_times(5.0, 0.0)


def test_interpolate_rows_step_function():
    rows = interpolate_rows(T, S, I, R, t_end=5.0, dt=1.0)
    assert [r.time for r in rows] == [0.0, 1.0, 2.0, 3.0, 4.0, 5.0]
    assert [r.infected for r in rows] == [1, 2, 2, 1, 0, 0]
    assert [r.recovered for r in rows] == [0, 0, 0, 1, 2, 2]
    assert all(r.susceptible + r.infected + r.recovered == 4 for r in rows)


def test_raw_rows_one_per_step():
    rows = raw_rows(T, S, I, R)
    assert [r.index for r in rows] == [0, 1, 2, 3]
    assert rows[2].time == 2.5
    assert (rows[2].susceptible, rows[2].infected, rows[2].recovered) == (2, 1, 1)
