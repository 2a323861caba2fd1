import matplotlib.pyplot as plt

from netsir.engine import GillespieSIR
from netsir.ensemble import run_ensemble, spawn_seeds, summarize
from netsir.visualize import plot_ensemble, plot_trajectory, save_figure


def test_plot_trajectory_and_save(tmp_path, path4):
    sim = GillespieSIR(path4, i0=1, tau=1.0, gamma=1.0, dt=0.5, t_end=5.0, seed=0.42)
    sim.run()
    fig, ax = plt.subplots()
    plot_trajectory(sim.result, title="run", ax=ax)
    # Three grid curves plus three raw curves.
    assert len(ax.lines) == 6
    path = save_figure(fig, tmp_path / "figures" / "trajectory.png")
    plt.close(fig)
    assert path.exists()


def test_plot_ensemble(complete5):
    ens = run_ensemble(complete5, spawn_seeds(3, 0.5), max_workers=1)
    fig = plot_ensemble(ens, summarize(ens))
    assert len(fig.axes[0].lines) == 3
    plt.close(fig)
