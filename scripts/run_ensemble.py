"""Monte Carlo ensemble of Gillespie SIR runs.

Derives one seed per run from a base seed, runs the simulations in worker
processes, caches the ensemble (per-run reports included) keyed by a config
hash, and writes config.json, summary.csv and runs.csv under runs/.
Typical usage:
  python scripts/run_ensemble.py --adjacency data/network.npy --n-runs 200 --save-plots
"""


from __future__ import annotations

import argparse
from datetime import datetime
import logging
from pathlib import Path

import numpy as np

from netsir.cache import cache_exists, hash_adjacency, hash_config, load_ensemble, save_ensemble
from netsir.config import DEFAULTS
from netsir.ensemble import run_ensemble, run_rows, spawn_seeds, summarize, summary_rows
from netsir.io import ensure_dir, load_adjacency, path_graph, save_csv, save_json
from netsir.logging_utils import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an ensemble of Gillespie SIR simulations.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--adjacency", type=str, default=None)
    source.add_argument("--path-nodes", type=int, default=20)
    parser.add_argument("--n-runs", type=int, default=100)
    parser.add_argument("--base-seed", type=float, default=DEFAULTS.seed)
    parser.add_argument("--i0", type=int, default=DEFAULTS.i0)
    parser.add_argument("--tau", type=float, default=DEFAULTS.tau)
    parser.add_argument("--gamma", type=float, default=DEFAULTS.gamma)
    parser.add_argument("--dt", type=float, default=DEFAULTS.dt)
    parser.add_argument("--t-end", type=float, default=DEFAULTS.t_end)
    parser.add_argument("--max-workers", type=int, default=None)
    parser.add_argument("--quantiles", type=float, nargs="+", default=[5.0, 50.0, 95.0])
    parser.add_argument("--cache-dir", type=str, default=str(DEFAULTS.cache_dir))
    parser.add_argument("--no-cache", action="store_true")
    parser.add_argument("--save-plots", action="store_true")
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument("--log-file", type=str, default=None)
    parser.add_argument("--no-log-file", action="store_true")
    parser.add_argument("--no-console-log", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(args.out_dir) if args.out_dir else DEFAULTS.runs_dir / f"ensemble_{timestamp}"
    ensure_dir(out_dir)

    log_file = None
    if not args.no_log_file:
        log_file = Path(args.log_file) if args.log_file else out_dir / "run.log"
    setup_logging(level=args.log_level, log_file=log_file, console=not args.no_console_log)
    logger = logging.getLogger(__name__)

    A = load_adjacency(args.adjacency) if args.adjacency else path_graph(args.path_nodes)
    seeds = spawn_seeds(args.n_runs, args.base_seed)

    # Cache the ensemble so re-plotting does not re-simulate.
    cache_config = {
        "network": hash_adjacency(A),
        "n_runs": args.n_runs,
        "base_seed": args.base_seed,
        "i0": args.i0,
        "tau": args.tau,
        "gamma": args.gamma,
        "dt": args.dt,
        "t_end": args.t_end,
    }
    cache_key = hash_config(cache_config)
    logger.info("Cache key: %s", cache_key)

    if not args.no_cache and cache_exists(args.cache_dir, cache_key):
        logger.info("Loading cached ensemble from %s", args.cache_dir)
        ensemble, _ = load_ensemble(args.cache_dir, cache_key)
    else:
        ensemble = run_ensemble(
            A,
            seeds,
            i0=args.i0,
            tau=args.tau,
            gamma=args.gamma,
            dt=args.dt,
            t_end=args.t_end,
            max_workers=args.max_workers,
        )
        if not args.no_cache:
            logger.info("Saving cache to %s", args.cache_dir)
            save_ensemble(args.cache_dir, cache_key, ensemble, cache_config)

    summary = summarize(ensemble, quantiles=args.quantiles)
    final_sizes = ensemble.outputs[:, -1, 1] + ensemble.outputs[:, -1, 2]
    logger.info(
        "Final size over %d runs: mean=%.2f p50=%.1f p90=%.1f",
        ensemble.n_runs,
        float(np.mean(final_sizes)),
        float(np.percentile(final_sizes, 50)),
        float(np.percentile(final_sizes, 90)),
    )

    config = vars(args)
    config.update({"timestamp": timestamp, "cache_key": cache_key, "n_nodes": int(A.shape[0])})
    save_json(out_dir / "config.json", config)
    save_csv(out_dir / "summary.csv", summary_rows(ensemble, summary))
    save_csv(out_dir / "runs.csv", run_rows(ensemble))
    logger.info("Saved summary to %s", out_dir / "summary.csv")

    if args.save_plots:
        import matplotlib.pyplot as plt

        from netsir.visualize import plot_ensemble, save_figure

        q = sorted(args.quantiles)
        band = (f"q{q[0]:g}", f"q{q[-1]:g}")
        fig = plot_ensemble(ensemble, summary, band=band)
        path = save_figure(fig, out_dir / "figures" / "ensemble.png")
        plt.close(fig)
        logger.info("Saved plot to %s", path)


if __name__ == "__main__":
    main()
