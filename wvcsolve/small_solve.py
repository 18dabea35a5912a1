"""Exact minimum weight vertex cover for graphs of at most 16 nodes."""

from __future__ import annotations

import numpy as np

MAX_NODES = 16
_INT32_MAX = 2**31 - 1


class SmallSolver:
    """Brute-force solver for tiny induced subgraphs.

    Nodes are added under arbitrary labels; edges whose endpoints were not
    both added are ignored. The best cost found is kept across calls to
    :meth:`solve` until :meth:`reset` is called.
    """

    def __init__(self) -> None:
        self._labels: list[int] = []
        self._weights: list[int] = []
        self._adjacency: list[int] = []
        self._cost = _INT32_MAX
        self._solution = 0

    def reset(self) -> None:
        """Forget all nodes, edges and the best solution."""
        self._labels = []
        self._weights = []
        self._adjacency = []
        self._cost = _INT32_MAX
        self._solution = 0

    def add_node(self, u: int, weight: int) -> None:
        if len(self._labels) >= MAX_NODES:
            raise ValueError(f"at most {MAX_NODES} nodes are supported")
        self._labels.append(u)
        self._weights.append(weight)
        self._adjacency.append(0)

    def _position(self, u: int) -> int | None:
        try:
            return self._labels.index(u)
        except ValueError:
            return None

    def add_edge(self, u: int, v: int) -> None:
        """Connect two added nodes; edges to unknown labels are ignored."""
        pu, pv = self._position(u), self._position(v)
        if pu is None or pv is None:
            return
        self._adjacency[pu] |= 1 << pv
        self._adjacency[pv] |= 1 << pu

    def solve(self) -> int:
        """Return the weight of a minimum vertex cover (or an earlier, lower one)."""
        n = len(self._labels)
        total = ((1 << n) + 3) // 4 * 4
        masks = np.arange(total, dtype=np.int64)
        valid = np.ones(total, dtype=bool)
        costs = np.zeros(total, dtype=np.int64)
        for j, (edges, weight) in enumerate(zip(self._adjacency, self._weights)):
            chosen = ((masks >> j) & 1).astype(bool)
            covered = (masks & edges) == edges
            valid &= chosen | covered
            costs += np.where(chosen, weight, 0)
        costs = np.where(valid, costs, _INT32_MAX)

        # Residue classes of the mask are examined in the order 3, 2, 1, 0;
        # within a class the smallest mask of least cost wins.
        for lane in (3, 2, 1, 0):
            lane_costs = costs[lane::4]
            i = int(np.argmin(lane_costs))
            lane_best = int(lane_costs[i])
            if lane_best >= _INT32_MAX:
                lane_best, lane_mask = _INT32_MAX, 0
            else:
                lane_mask = int(masks[lane::4][i])
            if lane_best < self._cost:
                self._cost = lane_best
                self._solution = lane_mask & 0xFFFF
        return self._cost

    def in_solution(self, u: int) -> bool:
        """True if node ``u`` belongs to the best cover found."""
        slots = self._labels + [0] * (MAX_NODES - len(self._labels))
        try:
            pos = slots.index(u)
        except ValueError:
            return False
        return bool((self._solution >> pos) & 1)