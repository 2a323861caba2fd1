import sys
from pathlib import Path

# Ensure package import for tests when not installed.
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from netsir.io import path_graph


@pytest.fixture
def path4() -> np.ndarray:
    """Path graph 0-1-2-3."""
    return path_graph(4)


@pytest.fixture
def complete5() -> np.ndarray:
    A = np.ones((5, 5), dtype=int)
    np.fill_diagonal(A, 0)
    return A
