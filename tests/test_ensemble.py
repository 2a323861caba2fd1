import numpy as np
import pytest

from netsir.engine import GillespieSIR
from netsir.ensemble import run_ensemble, run_rows, spawn_seeds, summarize, summary_rows


def test_spawn_seeds_reproducible_and_in_range():
    seeds = spawn_seeds(8, 0.42)
    assert seeds == spawn_seeds(8, 0.42)
    assert len(set(seeds)) == 8
    assert all(0.0 <= s < 1.0 for s in seeds)
    with pytest.raises(ValueError):
        spawn_seeds(0)


def test_sequential_ensemble_matches_single_runs(complete5):
    seeds = spawn_seeds(3, 0.1)
    ens = run_ensemble(complete5, seeds, i0=1, tau=0.5, gamma=0.5, dt=0.5, t_end=5.0, max_workers=1)
    assert ens.n_runs == 3
    assert ens.outputs.shape == (3, 11, 3)
    assert ens.seeds == tuple(seeds)
    for k, seed in enumerate(seeds):
        sim = GillespieSIR(complete5, i0=1, tau=0.5, gamma=0.5, dt=0.5, t_end=5.0, seed=seed)
        sim.run()
        times, outputs = sim.result.to_arrays()
        assert np.array_equal(ens.times, times)
        assert np.array_equal(ens.outputs[k], outputs)


def test_process_pool_matches_sequential(path4):
    seeds = spawn_seeds(4, 0.7)
    seq = run_ensemble(path4, seeds, max_workers=1)
    par = run_ensemble(path4, seeds, max_workers=2)
    assert np.array_equal(seq.outputs, par.outputs)
    assert [r.seed for r in par.reports] == seeds


def test_summarize_bands(complete5):
    ens = run_ensemble(complete5, spawn_seeds(6, 0.3), t_end=4.0, max_workers=1)
    summary = summarize(ens, quantiles=(5.0, 95.0))
    assert set(summary) == {"mean", "q5", "q95"}
    for values in summary.values():
        assert values.shape == (9, 3)
    assert np.all(summary["q5"] <= summary["mean"] + 1e-12)
    assert np.all(summary["mean"] <= summary["q95"] + 1e-12)
    assert np.allclose(summary["mean"].sum(axis=1), 5.0)

    rows = summary_rows(ens, summary)
    assert len(rows) == 9
    assert set(rows[0]) >= {"time", "infected_mean", "recovered_q95"}


def test_empty_seeds_rejected(path4):
    with pytest.raises(ValueError):
        run_ensemble(path4, [], max_workers=1)


def test_run_rows_carry_report_fields(path4):
    seeds = spawn_seeds(3, 0.9)
    ens = run_ensemble(path4, seeds, max_workers=1)
    rows = run_rows(ens)
    assert [row["run"] for row in rows] == [0, 1, 2]
    assert list(rows[0]) == ["run", "seed", "final_size", "outcome", "n_events", "degenerate", "duration_ms"]
    for row, seed, report in zip(rows, seeds, ens.reports):
        assert row["seed"] == seed
        assert row["outcome"] == report.outcome.value
        assert row["n_events"] == report.n_events
        assert 1 <= row["final_size"] <= 4
