"""Maximum flow by FIFO push-relabel with global relabelling and gaps."""

from __future__ import annotations

from collections import deque
from typing import Iterable


class FlowGraph:
    """Residual network built from directed capacitated edges."""

    def __init__(self, n: int, edges: Iterable[tuple[int, int, int]]) -> None:
        self._adj: list[list[list[int]]] = [[] for _ in range(n)]
        total = 0
        edge_count = 0
        for u, v, w in edges:
            if not (0 <= u < n and 0 <= v < n):
                raise IndexError(f"edge ({u}, {v}) has an endpoint out of range")
            if w < 0:
                raise ValueError("capacities must not be negative")
            self._adj[u].append([v, w])
            self._adj[v].append([u, 0])
            total += w
            edge_count += 1
        for entries in self._adj:
            entries.sort()
        self._first: list[dict[int, int]] = []
        for entries in self._adj:
            first: dict[int, int] = {}
            for i, (v, _) in enumerate(entries):
                first.setdefault(v, i)
            self._first.append(first)

        self._residual_count = 2 * edge_count
        self._unbounded = total + 1
        self._distance = [0] * n
        self._count = [0] * (2 * n + 1)
        self._excess = [0] * n
        self._active = [False] * n
        self._queue: deque[int] = deque()
        self._work = 0

    def __len__(self) -> int:
        return len(self._adj)

    def neighbors(self, u: int) -> list[tuple[int, int]]:
        """Sorted ``(neighbour, residual capacity)`` pairs of ``u``."""
        if not 0 <= u < len(self._adj):
            raise IndexError(f"node {u} out of range")
        return [(v, c) for v, c in self._adj[u]]

    def _entry(self, u: int, v: int) -> list[int]:
        return self._adj[u][self._first[u][v]]

    def _activate(self, u: int) -> None:
        if not self._active[u] and self._excess[u] > 0:
            self._active[u] = True
            self._queue.append(u)

    def _push(self, u: int, v: int) -> None:
        forward = self._entry(u, v)
        backward = self._entry(v, u)
        c = min(self._excess[u], forward[1])
        forward[1] -= c
        backward[1] += c
        self._excess[u] -= c
        self._excess[v] += c
        if not self._active[v] and c > 0 and self._excess[v] == c:
            self._active[v] = True
            self._queue.append(v)

    def _relabel(self, u: int) -> None:
        n = len(self._adj)
        dist = self._distance
        self._count[dist[u]] -= 1
        level = 2 * n
        self._work += 10 + len(self._adj[u])
        for v, c in self._adj[u]:
            if c > 0:
                level = min(level, dist[v] + 1)
        dist[u] = level
        self._count[level] += 1
        self._activate(u)

    def _global_relabel(self, s: int, t: int) -> None:
        n = len(self._adj)
        dist = self._distance
        for u in range(n):
            dist[u] = max(dist[u], n)
        visited = [False] * n
        visited[s] = visited[t] = True
        dist[t] = 0
        queue = deque([t])
        while queue:
            u = queue.popleft()
            for v, _ in self._adj[u]:
                if visited[v]:
                    continue
                if self._entry(v, u)[1] > 0:
                    self._count[dist[v]] -= 1
                    dist[v] = dist[u] + 1
                    self._count[dist[v]] += 1
                    queue.append(v)
                    visited[v] = True

    def _gap(self, level: int) -> None:
        n = len(self._adj)
        dist = self._distance
        for u in range(n):
            if dist[u] < level:
                continue
            self._count[dist[u]] -= 1
            dist[u] = max(dist[u], n)
            self._count[dist[u]] += 1
            self._activate(u)

    def _discharge(self, u: int) -> None:
        dist = self._distance
        for entry in self._adj[u]:
            v, c = entry
            if c > 0 and dist[u] > dist[v]:
                self._push(u, v)
            if self._excess[u] == 0:
                break
        if self._excess[u] > 0:
            if self._count[dist[u]] == 1 and dist[u] < len(self._adj):
                self._gap(dist[u])
            else:
                self._relabel(u)

    def solve(self, s: int, t: int) -> int:
        """Push the maximum flow from ``s`` to ``t`` and return its value."""
        n = len(self._adj)
        if not (0 <= s < n and 0 <= t < n):
            raise IndexError("source or sink out of range")
        self._distance[s] = n
        self._count[0] = n - 1
        self._count[n] = 1
        self._active[s] = True
        self._active[t] = True

        self._excess[s] = self._unbounded
        for u, _ in list(self._adj[s]):
            self._push(s, u)
        self._global_relabel(s, t)

        threshold = (4 * n + self._residual_count) // 2
        while self._queue:
            u = self._queue.popleft()
            self._active[u] = False
            if u != s and u != t:
                self._discharge(u)
            if self._work > threshold:
                self._work = 0
                self._global_relabel(s, t)

        return sum(c for _, c in self._adj[t])