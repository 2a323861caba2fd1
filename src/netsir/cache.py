"""On-disk cache for finished ensembles.

An ensemble is stored under a short hash of the config that produced it:
grid times, stacked outputs and the per-run report fields go into one NPZ,
the config into JSON next to it. Loading rebuilds the same EnsembleResult,
reports included, so cached and fresh runs write identical artifacts."""


from __future__ import annotations

from pathlib import Path
import hashlib
import json
from typing import Dict, Tuple

import numpy as np

from .engine import Outcome, SimulationReport
from .ensemble import EnsembleResult


# Per-run report fields stored as parallel arrays.
REPORT_FIELDS = ("duration_ms", "seed", "outcome", "n_events", "degenerate")


def _stable_json(payload: Dict) -> str:
    """Serialize config deterministically for hashing."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)


def hash_config(payload: Dict, length: int = 12) -> str:
    """Create a short stable hash from a config dict."""
    raw = _stable_json(payload).encode("utf-8")
    digest = hashlib.sha256(raw).hexdigest()
    # Truncate for readable folder names.
    return digest[:length]


def hash_adjacency(adjacency: np.ndarray, length: int = 12) -> str:
    """Short hash of an adjacency matrix, so configs can refer to the network by content."""
    A = np.ascontiguousarray(np.asarray(adjacency, dtype=np.int8))
    digest = hashlib.sha256(A.tobytes() + str(A.shape).encode("utf-8")).hexdigest()
    return digest[:length]


def cache_paths(base_dir: Path | str, key: str) -> Tuple[Path, Path, Path]:
    """Return (dir, arrays_path, config_path) for a cache key."""
    base = Path(base_dir) / key
    return base, base / "ensemble.npz", base / "config.json"


def cache_exists(base_dir: Path | str, key: str) -> bool:
    _, arrays_path, config_path = cache_paths(base_dir, key)
    return arrays_path.exists() and config_path.exists()


def _reports_to_arrays(reports: Tuple[SimulationReport, ...]) -> Dict[str, np.ndarray]:
    return {
        "report_duration_ms": np.asarray([r.duration_ms for r in reports], dtype=float),
        "report_seed": np.asarray([r.seed for r in reports], dtype=float),
        "report_outcome": np.asarray([r.outcome.value for r in reports], dtype=str),
        "report_n_events": np.asarray([r.n_events for r in reports], dtype=np.int64),
        "report_degenerate": np.asarray([r.degenerate for r in reports], dtype=bool),
    }


def _reports_from_arrays(arrays: Dict[str, np.ndarray]) -> Tuple[SimulationReport, ...]:
    columns = [arrays[f"report_{name}"] for name in REPORT_FIELDS]
    return tuple(
        SimulationReport(
            duration_ms=float(duration),
            seed=float(seed),
            outcome=Outcome(str(outcome)),
            n_events=int(n_events),
            degenerate=bool(degenerate),
        )
        for duration, seed, outcome, n_events, degenerate in zip(*columns)
    )


def save_ensemble(base_dir: Path | str, key: str, ensemble: EnsembleResult, config: Dict) -> Path:
    """Persist an ensemble and the config that produced it under a cache key."""
    cache_dir, arrays_path, config_path = cache_paths(base_dir, key)
    cache_dir.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        arrays_path,
        times=ensemble.times,
        outputs=ensemble.outputs,
        seeds=np.asarray(ensemble.seeds, dtype=float),
        **_reports_to_arrays(ensemble.reports),
    )
    with config_path.open("w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, sort_keys=True, default=str)
    return cache_dir


def load_ensemble(base_dir: Path | str, key: str) -> Tuple[EnsembleResult, Dict]:
    """Rebuild a cached EnsembleResult (reports included) and its config."""
    _, arrays_path, config_path = cache_paths(base_dir, key)
    # No object arrays are written, so pickle stays disabled.
    with np.load(arrays_path, allow_pickle=False) as data:
        arrays = {k: data[k] for k in data.files}
    with config_path.open("r", encoding="utf-8") as f:
        config = json.load(f)
    ensemble = EnsembleResult(
        times=arrays["times"],
        outputs=arrays["outputs"],
        seeds=tuple(float(s) for s in arrays["seeds"]),
        reports=_reports_from_arrays(arrays),
    )
    return ensemble, config
