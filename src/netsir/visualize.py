"""Plotting utilities for network SIR runs.

Reusable Matplotlib helpers to visualize:
- a single run (S/I/R step curves on the grid, raw event steps underneath)
- an ensemble (mean curves with percentile bands)
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from .ensemble import EnsembleResult
from .io import ensure_dir
from .results import SimulationResult


COMPARTMENTS = ("susceptible", "infected", "recovered")
COLORS = {"susceptible": "tab:blue", "infected": "tab:red", "recovered": "tab:green"}


def save_figure(fig: plt.Figure, path: Path | str, dpi: int = 150) -> Path:
    """Save a Matplotlib figure and ensure the parent directory exists."""
    path = Path(path)
    ensure_dir(path.parent)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    return path


def plot_trajectory(
    result: SimulationResult,
    show_raw: bool = True,
    title: Optional[str] = None,
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """Plot S/I/R of one run as step functions."""
    ax = ax or plt.gca()
    times, outputs = result.to_arrays("interpolated")
    if show_raw:
        raw_times, raw_outputs = result.to_arrays("raw")
    for c, name in enumerate(COMPARTMENTS):
        if show_raw:
            ax.step(raw_times, raw_outputs[:, c], where="post", color=COLORS[name], alpha=0.25, lw=1)
        ax.step(times, outputs[:, c], where="post", color=COLORS[name], label=name)
    if title:
        ax.set_title(title)
    ax.set_xlabel("t")
    ax.set_ylabel("nodes")
    ax.legend(fontsize=8)
    return ax


def plot_ensemble(
    ensemble: EnsembleResult,
    summary: Dict[str, np.ndarray],
    band: Tuple[str, str] = ("q5", "q95"),
    compartments: Sequence[str] = COMPARTMENTS,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (7, 4),
) -> plt.Figure:
    """Plot mean curves with a percentile band for each compartment."""
    fig, ax = plt.subplots(1, 1, figsize=figsize)
    lo, hi = band
    for name in compartments:
        c = COMPARTMENTS.index(name)
        ax.plot(ensemble.times, summary["mean"][:, c], color=COLORS[name], label=f"{name} (mean)")
        if lo in summary and hi in summary:
            ax.fill_between(
                ensemble.times, summary[lo][:, c], summary[hi][:, c], color=COLORS[name], alpha=0.2
            )
    ax.set_xlabel("t")
    ax.set_ylabel("nodes")
    ax.legend(fontsize=8)
    if title:
        fig.suptitle(title)
    else:
        fig.suptitle(f"{ensemble.n_runs} runs")
    return fig
