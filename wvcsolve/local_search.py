"""Weighted local search that improves a vertex cover by swapping nodes."""

from __future__ import annotations

import math
import time
from typing import Iterable, Sequence

from .reduction_graph import ReductionGraph
from .reductions import VertexCover

_UINT32 = 0xFFFFFFFF


def _ratio(a: float, b: float) -> float:
    if b:
        return a / b
    return math.inf if a else math.nan


class LocalSearch:
    """Edge-weighted local search on a vertex cover.

    Each step removes the cover node whose loss per unit weight is smallest
    and re-covers its edges by adding the uncovered neighbours.
    """

    def __init__(
        self,
        weights: Sequence[int],
        edges: Iterable[tuple[int, int]],
        cover: Sequence[bool | None],
    ) -> None:
        self._w = list(weights)
        n = len(self._w)
        self._n = n
        self._edges = [(int(u), int(v)) for u, v in edges]
        if len(cover) < n:
            raise ValueError("cover must hold an entry for every node")
        self._edge_w = [1] * len(self._edges)
        self._adj: list[list[tuple[int, int]]] = [[] for _ in range(n)]
        for i, (u, v) in enumerate(self._edges):
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"edge ({u}, {v}) has an endpoint out of range")
            self._adj[u].append((v, i))
            self._adj[v].append((u, i))

        self._in = [False] * n
        self._cost = 0
        for i in range(n):
            if cover[i] is None:
                raise ValueError(f"node {i} is undecided in the cover")
            if cover[i]:
                self._in[i] = True
                self._cost += self._w[i]

        self._dscore = [0] * n
        for u, v in self._edges:
            if self._in[u] and not self._in[v]:
                self._dscore[u] += 1
            elif not self._in[u] and self._in[v]:
                self._dscore[v] += 1
        for u in range(n):
            if self._in[u] and self._dscore[u] == 0:
                self._in[u] = False
                self._cost -= self._w[u]
                for v, _ in self._adj[u]:
                    self._dscore[v] += 1

        self._age = [0] * n
        self._conf = [True] * n
        self._best = list(self._in)
        self._best_cost = self._cost
        self._best_seen = _UINT32
        self._step = 0
        self._heap = list(range(n))
        self._pos = list(range(n))
        for i in range(n, 0, -1):
            self._move_down(self._heap[i - 1])

    @classmethod
    def from_reduced(cls, vc: VertexCover, g: ReductionGraph) -> "LocalSearch":
        """Start from the part of ``vc`` that covers the current nodes of ``g``."""
        n = len(g)
        weights = [g.weight(i) for i in range(n)]
        edges = [(i, u) for i in range(n) for u in g.neighbors(i) if u > i]
        cover = [vc.assignment[g.org_label(i)] for i in range(n)]
        search = cls(weights, edges, cover)
        search._best_seen = search._cost
        return search

    # ------------------------------------------------------------------- heap

    def _before(self, u: int, v: int) -> bool:
        if not self._conf[u] or not self._in[u]:
            return False
        if not self._conf[v] or not self._in[v]:
            return True
        us = _ratio(self._dscore[u], self._w[u])
        vs = _ratio(self._dscore[v], self._w[v])
        return us < vs or (not (vs < us) and self._age[u] < self._age[v])

    def _swap(self, i: int, j: int) -> None:
        heap, pos = self._heap, self._pos
        pos[heap[i]], pos[heap[j]] = pos[heap[j]], pos[heap[i]]
        heap[i], heap[j] = heap[j], heap[i]

    def _move_up(self, u: int) -> None:
        i = self._pos[u]
        while i != 0:
            p = (i - 1) // 2
            if not self._before(self._heap[i], self._heap[p]):
                break
            self._swap(i, p)
            i = p

    def _min_child(self, i: int) -> int:
        left, right = 2 * i + 1, 2 * i + 2
        if right >= self._n or self._before(self._heap[left], self._heap[right]):
            return left
        return right

    def _move_down(self, u: int) -> None:
        i = self._pos[u]
        child = self._min_child(i)
        while child < self._n and self._before(self._heap[child], self._heap[i]):
            self._swap(i, child)
            i = child
            child = self._min_child(i)

    def _update(self, u: int) -> None:
        self._move_up(u)
        self._move_down(u)

    # ----------------------------------------------------------------- search

    def search(self, iterations: int, time_limit: float) -> bool:
        """Run up to ``iterations`` steps within ``time_limit`` seconds.

        Returns True if the final cover is cheaper than the best one so far,
        in which case it becomes the new best.
        """
        started = time.perf_counter()
        w, s, dscore, edge_w, age = self._w, self._in, self._dscore, self._edge_w, self._age
        for _ in range(iterations):
            self._step += 1
            if time.perf_counter() - started >= time_limit:
                break
            if not self._heap:
                break
            u = self._heap[0]
            if not s[u]:
                for v in range(self._n):
                    if s[v] and not self._conf[v]:
                        self._conf[v] = True
                        self._update(v)
                continue

            s[u] = False
            self._cost -= w[u]
            dscore[u] = 0
            age[u] = self._step
            self._update(u)

            outside = [e for e in self._adj[u] if not s[e[0]]]
            inside = [e for e in self._adj[u] if s[e[0]]]
            outside.sort(key=lambda e: (-_ratio(edge_w[e[1]], w[e[0]]), age[e[0]]))
            self._adj[u] = outside + inside

            count = 1
            for v, eid in self._adj[u]:
                if not s[v]:
                    age[v] = self._step
                    s[v] = True
                    self._cost += w[v]
                    edge_w[eid] += count
                    dscore[v] = edge_w[eid]
                    self._update(v)
                    for x, xid in self._adj[v]:
                        if x == u:
                            continue
                        dscore[x] = (dscore[x] - edge_w[xid]) & _UINT32
                        self._update(x)
                    count += 1
                else:
                    dscore[v] = (dscore[v] + edge_w[eid]) & _UINT32
                    self._update(v)
            self._best_seen = min(self._best_seen, self._cost)

        if self._cost < self._best_cost:
            self._best_cost = self._cost
            self._best = list(s)
            return True
        return False

    # ---------------------------------------------------------------- results

    def apply_to(self, vc: VertexCover, g: ReductionGraph) -> int:
        """Write the best cover into ``vc`` for the nodes of ``g``; return its cost."""
        for i in range(self._n):
            org = g.org_label(i)
            current = vc.assignment[org]
            if current and not self._best[i]:
                vc.cost -= g.weight(i)
            elif not current and self._best[i]:
                vc.cost += g.weight(i)
            vc.assignment[org] = self._best[i]
        return self._best_cost

    def best_cover(self) -> list[bool]:
        """Membership of each node in the best cover found."""
        return list(self._best)

    @property
    def best_cost(self) -> int:
        return self._best_cost

    @property
    def cost(self) -> int:
        return self._cost

    @property
    def best_seen(self) -> int:
        """Lowest cost reached during any search step."""
        return self._best_seen