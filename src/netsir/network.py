"""Read-only view over a binary, undirected adjacency matrix.

Validates the matrix once and precomputes ascending neighbour lists so the
event loop can answer neighbour queries without touching the matrix again.
"""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np

from .exceptions import InvalidParameterError


AdjacencyLike = Union[np.ndarray, Sequence[Sequence[float]]]


def validate_adjacency(adjacency: AdjacencyLike) -> np.ndarray:
    """Return the adjacency as an int8 array or raise InvalidParameterError.

    Requires a non-empty square matrix with 0/1 entries, symmetric, and no
    self-loops.
    """
    try:
        A = np.asarray(adjacency, dtype=float)
    except (TypeError, ValueError) as exc:
        # Ragged nested lists or non-numeric entries.
        raise InvalidParameterError("adjacency must be a numeric N x N matrix") from exc

    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise InvalidParameterError(f"adjacency must be square, got shape {A.shape}")
    if A.shape[0] == 0:
        raise InvalidParameterError("adjacency must contain at least one node")
    if not np.all((A == 0) | (A == 1)):
        raise InvalidParameterError("adjacency entries must be 0 or 1")
    if not np.array_equal(A, A.T):
        raise InvalidParameterError("adjacency must be symmetric (undirected edges)")
    if np.any(np.diag(A) != 0):
        raise InvalidParameterError("adjacency must not contain self-loops")
    return A.astype(np.int8)


class NetworkView:
    """Neighbour queries over a fixed contact network."""

    def __init__(self, adjacency: AdjacencyLike) -> None:
        self._adjacency = validate_adjacency(adjacency)
        self._adjacency.setflags(write=False)
        # Ascending order keeps rate updates reproducible.
        self._neighbors: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(int(j) for j in np.flatnonzero(row)) for row in self._adjacency
        )

    @property
    def n_nodes(self) -> int:
        return self._adjacency.shape[0]

    @property
    def n_edges(self) -> int:
        return int(self._adjacency.sum()) // 2

    @property
    def adjacency(self) -> np.ndarray:
        """Read-only int8 adjacency matrix."""
        return self._adjacency

    def neighbors(self, node: int) -> Tuple[int, ...]:
        """Indices adjacent to node, ascending."""
        return self._neighbors[node]

    def degrees(self) -> np.ndarray:
        return self._adjacency.sum(axis=1).astype(int)

    def __len__(self) -> int:
        return self.n_nodes

    def __repr__(self) -> str:
        return f"NetworkView(n_nodes={self.n_nodes}, n_edges={self.n_edges})"
