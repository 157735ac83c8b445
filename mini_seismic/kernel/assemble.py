# mini_seismic/kernel/assemble.py
"""
COMPOSE: Node-Indexed Global Matrix Assembly
============================================

PURPOSE:
--------
This module builds a system matrix from local element blocks that are
addressed by node identifiers instead of global DOF indices. Node ids can be
anything hashable ('ground', 3, ('wall', 2)) and do not need to be known in
advance: the first time a node shows up it gets the next free contiguous
range of rows.

Each contribution is a pair (block grid, node ids):

    # spring between nodes 0 and 1, two DOFs per node
    ([[k,  -k],
      [-k,  k]], [0, 1])

    # lumped mass at node 0 (self term)
    ([[m]], [0])

Blocks that land on the same node pair are summed, which is the usual
scatter-add of finite-element assembly.

USAGE:
------
    K, ranges = compose([
        ([[k1, -k1], [-k1, k1]], [0, 1]),
        ([[k2, -k2], [-k2, k2]], [1, 2]),
    ])
    ranges[1]   # → range(2, 4) for 2×2 blocks

Pass `node_ranges` to pin some nodes to known rows (for example to line the
result up with a KeyedAssembly built elsewhere).
"""

from typing import Dict, Hashable, Iterable, Optional, Sequence, Tuple

import numpy as np


Contribution = Tuple[Sequence[Sequence[np.ndarray]], Sequence[Hashable]]


def _next_range(ranges: Dict[Hashable, range], length: int) -> range:
    start = max((r.stop for r in ranges.values()), default=0)
    return range(start, start + length)


def _grow(matrix: np.ndarray, size: int) -> np.ndarray:
    """Zero-pad a square matrix up to size × size."""
    grown = np.zeros((size, size))
    n = matrix.shape[0]
    grown[:n, :n] = matrix
    return grown


def compose(
    contributions: Iterable[Contribution],
    node_ranges: Optional[Dict[Hashable, range]] = None
) -> Tuple[np.ndarray, Dict[Hashable, range]]:
    """
    Compose local block grids into one system matrix.

    ALGORITHM:
    ----------
    for each (grid, nodes):
        for each cell (node_a, node_b) of the grid, row by row:
            node without a range yet → next contiguous range after the
                                       largest index in use
            grow the running matrix if the target lies outside it
            running[range_a, range_b] += cell

    Parameters:
    -----------
    contributions : iterable of (grid, node_ids)
        grid is an n×n nested sequence of 2-D blocks, n = len(node_ids).
        A 1×1 grid with one node is a self term (lumped mass, grounded spring).
    node_ranges : dict, optional
        Seed map node_id → range. It is not modified.

    Returns:
    --------
    composed : np.ndarray
        Square system matrix covering every range touched by a block.
    ranges : dict
        Final node_id → range map, including the seeded entries.

    Raises:
    -------
    ValueError
        If a grid is not n×n for its node list, or a block does not match
        the ranges already assigned to its nodes.

    Examples:
    ---------
    >>> K, ranges = compose([
    ...     ([[np.diag([10.0, 10.0])]], [0]),
    ...     ([[np.diag([5.0, 5.0])]], [1]),
    ... ])
    >>> np.diag(K)
    array([10., 10.,  5.,  5.])
    >>> ranges
    {0: range(0, 2), 1: range(2, 4)}
    """
    ranges: Dict[Hashable, range] = dict(node_ranges or {})
    composed = np.zeros((0, 0))

    for number, (grid, nodes) in enumerate(contributions):
        nodes = list(nodes)
        grid = list(grid)
        if len(grid) != len(nodes) or any(len(row) != len(nodes) for row in grid):
            raise ValueError(
                f"contribution {number}: block grid must be {len(nodes)}×{len(nodes)} "
                f"for nodes {nodes!r}"
            )

        for row, node_a in zip(grid, nodes):
            for block, node_b in zip(row, nodes):
                block = np.asarray(block, dtype=float)
                if block.ndim != 2:
                    raise ValueError(
                        f"contribution {number}: block ({node_a!r}, {node_b!r}) must be 2-D, "
                        f"got shape {block.shape}"
                    )
                if node_a not in ranges:
                    ranges[node_a] = _next_range(ranges, block.shape[0])
                if node_b not in ranges:
                    ranges[node_b] = _next_range(ranges, block.shape[1])

                range_a, range_b = ranges[node_a], ranges[node_b]
                if block.shape != (len(range_a), len(range_b)):
                    raise ValueError(
                        f"contribution {number}: block ({node_a!r}, {node_b!r}) has shape "
                        f"{block.shape}, expected {(len(range_a), len(range_b))}"
                    )

                size = max(range_a.stop, range_b.stop)
                if size > composed.shape[0]:
                    composed = _grow(composed, size)
                composed[range_a.start:range_a.stop, range_b.start:range_b.stop] += block

    return composed, ranges


def compose_vector(
    contributions: Iterable[Tuple[Sequence[np.ndarray], Sequence[Hashable]]],
    node_ranges: Dict[Hashable, range]
) -> np.ndarray:
    """
    Assemble a load or displacement vector on ranges produced by `compose`.

    Every node must already have a range; vector assembly never assigns new
    ones.

    Args:
        contributions: Iterable of (list of local vectors, node ids)
        node_ranges: node_id → range map, usually the second output of compose

    Returns:
        Vector of length max(range.stop)
    """
    size = max((r.stop for r in node_ranges.values()), default=0)
    F = np.zeros(size)

    for pieces, nodes in contributions:
        for piece, node in zip(pieces, nodes):
            if node not in node_ranges:
                raise KeyError(f"node {node!r} has no assigned range")
            target = node_ranges[node]
            piece = np.asarray(piece, dtype=float)
            if piece.shape != (len(target),):
                raise ValueError(
                    f"vector at node {node!r} has shape {piece.shape}, expected ({len(target)},)"
                )
            F[target.start:target.stop] += piece

    return F
