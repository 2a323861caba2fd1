"""Stochastic SIR simulation on contact networks.

Provides a small namespace that re-exports the common entry points so
notebooks and scripts can import from netsir without deep module paths.
"""


# Re-export core helpers for convenience (avoid heavy imports here).
from .config import DEFAULTS  # noqa: F401
from .exceptions import InvalidParameterError, InvalidStateError, NetsirError  # noqa: F401
from .network import NetworkView  # noqa: F401
from .random_source import RandomSource, draw_seed  # noqa: F401
from .state import NodeStatus  # noqa: F401
from .results import GridRow, RawRow, SimulationResult  # noqa: F401
from .engine import GillespieSIR, Outcome, SimulationReport  # noqa: F401
from .ensemble import run_ensemble, spawn_seeds, summarize  # noqa: F401
