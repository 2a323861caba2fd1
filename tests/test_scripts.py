import logging
from pathlib import Path
import runpy
import sys

import pytest


SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


@pytest.fixture
def reset_root_logger():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)


def _run_ensemble_script(monkeypatch, out_dir: Path, cache_dir: Path) -> None:
    argv = [
        "run_ensemble.py",
        "--path-nodes", "5",
        "--n-runs", "4",
        "--t-end", "3",
        "--max-workers", "1",
        "--cache-dir", str(cache_dir),
        "--out-dir", str(out_dir),
        "--no-console-log",
        "--no-log-file",
    ]
    monkeypatch.setattr(sys, "argv", argv)
    runpy.run_path(str(SCRIPTS / "run_ensemble.py"), run_name="__main__")


def test_cached_ensemble_writes_same_run_table(tmp_path, monkeypatch, reset_root_logger):
    cache_dir = tmp_path / "cache"
    _run_ensemble_script(monkeypatch, tmp_path / "first", cache_dir)
    assert len(list(cache_dir.iterdir())) == 1
    _run_ensemble_script(monkeypatch, tmp_path / "second", cache_dir)

    first = (tmp_path / "first" / "runs.csv").read_text(encoding="utf-8")
    second = (tmp_path / "second" / "runs.csv").read_text(encoding="utf-8")
    header = first.splitlines()[0].split(",")
    assert header == ["run", "seed", "final_size", "outcome", "n_events", "degenerate", "duration_ms"]
    assert len(first.splitlines()) == 5
    assert second == first
    assert (tmp_path / "second" / "summary.csv").read_text(encoding="utf-8") == (
        tmp_path / "first" / "summary.csv"
    ).read_text(encoding="utf-8")
