"""Run I/O helpers.

Small utilities to create output folders, load adjacency matrices for the
scripts, and persist configs/results as JSON and CSV. The simulation core
itself never touches files; these are for callers.
"""


from pathlib import Path
import json
import csv
from typing import Dict, Iterable, Tuple, Union

import numpy as np

from .engine import SimulationReport
from .exceptions import InvalidParameterError
from .results import SimulationResult


def ensure_dir(path: Union[Path, str]) -> Path:
    path = Path(path)
    # Create output folder if needed.
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(path: Union[Path, str], payload: Dict) -> None:
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        # Stable formatting helps diffs and reproducibility; Paths and enums become strings.
        json.dump(payload, f, indent=2, sort_keys=True, default=str)


def save_csv(path: Union[Path, str], rows: Iterable[Dict]) -> None:
    path = Path(path)
    rows = list(rows)
    if not rows:
        # Avoid creating empty CSVs.
        return
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)


def load_adjacency(path: Union[Path, str]) -> np.ndarray:
    """Load an N x N adjacency matrix from .npy or delimited text (comma or whitespace)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    if path.suffix == ".npy":
        A = np.load(path, allow_pickle=False)
    else:
        text = path.read_text(encoding="utf-8")
        delimiter = "," if "," in text else None
        A = np.loadtxt(path, delimiter=delimiter, ndmin=2)
    if A.ndim != 2:
        raise InvalidParameterError(f"adjacency in {path} must be 2D, got {A.ndim}D")
    return A.astype(int)


def path_graph(n_nodes: int) -> np.ndarray:
    """Adjacency of the path 0-1-...-(n-1); a quick built-in network for checks."""
    if n_nodes <= 0:
        raise ValueError("n_nodes must be positive")
    A = np.zeros((n_nodes, n_nodes), dtype=int)
    idx = np.arange(n_nodes - 1)
    A[idx, idx + 1] = 1
    A[idx + 1, idx] = 1
    return A


def save_result(
    out_dir: Union[Path, str], result: SimulationResult, report: SimulationReport
) -> Tuple[Path, Path, Path]:
    """Write raw.csv, interpolated.csv and report.json for one run."""
    out_dir = ensure_dir(out_dir)
    raw_path = out_dir / "raw.csv"
    grid_path = out_dir / "interpolated.csv"
    report_path = out_dir / "report.json"
    save_csv(raw_path, result.to_records("raw"))
    save_csv(grid_path, result.to_records("interpolated"))
    payload = report.to_dict()
    payload.update({"final_size": result.final_size(), "peak_infected": result.peak_infected()[1]})
    save_json(report_path, payload)
    return raw_path, grid_path, report_path
