"""Undirected node-weighted graph whose reductions can be undone in order."""

from __future__ import annotations

import enum
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Iterable, Sequence


class Action(enum.Enum):
    """Kinds of entries in the graph's action log."""

    NODE_REMOVE = enum.auto()  # (action, u, 0)
    NEIGHBORHOOD_REMOVE = enum.auto()  # (action, u, 0)
    NEIGHBORHOOD_FOLD = enum.auto()  # (action, u, new_node)
    TWIN_FOLD = enum.auto()  # (action, u, v): v folds into u
    ISOLATED_FOLD = enum.auto()  # (action, u, 0)
    RELABEL = enum.auto()  # (action, old_size, 0)


@dataclass(slots=True)
class _Node:
    """Per-node state; hidden neighbours sit in ``adj[:start]``."""

    weight: int
    org: int
    active: bool = True
    nweight: int = 0
    adj: list[int] = field(default_factory=list)
    start: int = 0

    def neighbors(self) -> list[int]:
        return self.adj[self.start:]

    def hide(self, v: int) -> None:
        """Move neighbour ``v`` out of the visible part of the list."""
        i = bisect_left(self.adj, v, self.start)
        assert i < len(self.adj) and self.adj[i] == v
        del self.adj[i]
        self.adj.insert(self.start, v)
        self.start += 1

    def unhide(self) -> int:
        """Bring back the most recently hidden neighbour."""
        self.start -= 1
        v = self.adj.pop(self.start)
        self.adj.insert(bisect_left(self.adj, v, self.start), v)
        return v


class ReductionGraph:
    """Graph for vertex cover reductions with an undo log.

    Nodes are labelled ``0 .. len(graph) - 1``; every change is logged
    and can be reverted with :meth:`pop_action`.
    """

    def __init__(self, weights: Sequence[int], edges: Iterable[tuple[int, int]]) -> None:
        weights = list(weights)
        edge_list = [tuple(e) for e in edges]
        if any(a > b for a, b in zip(edge_list, edge_list[1:])):
            raise ValueError("edges must be sorted")
        n = len(weights)
        self._nodes: list[_Node] = [_Node(weight=w, org=i) for i, w in enumerate(weights)]
        for u, v in edge_list:
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"edge ({u}, {v}) has an endpoint out of range")
            self._nodes[u].adj.append(v)
            self._nodes[v].adj.append(u)
            self._nodes[u].nweight += weights[v]
            self._nodes[v].nweight += weights[u]
        self._n = n
        self._log: list[tuple[Action, int, int]] = []

    # ------------------------------------------------------------------ queries

    def _check(self, u: int) -> _Node:
        if not 0 <= u < self._n:
            raise IndexError(f"node {u} out of range")
        return self._nodes[u]

    def _require_active(self, u: int) -> _Node:
        node = self._check(u)
        if not node.active:
            raise ValueError(f"node {u} is not active")
        return node

    def __len__(self) -> int:
        return self._n

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReductionGraph):
            return NotImplemented
        return (
            self._n == other._n
            and len(self._log) == len(other._log)
            and self._nodes == other._nodes
        )

    __hash__ = None  # type: ignore[assignment]

    def timestamp(self) -> int:
        """Number of actions in the log."""
        return len(self._log)

    def org_label(self, u: int) -> int:
        """Label that node ``u`` had when it was created."""
        if not 0 <= u < len(self._nodes):
            raise IndexError(f"node {u} out of range")
        return self._nodes[u].org

    def degree(self, u: int) -> int:
        node = self._check(u)
        return len(node.adj) - node.start

    def weight(self, u: int) -> int:
        return self._check(u).weight

    def neighborhood_weight(self, u: int) -> int:
        return self._check(u).nweight

    def neighbors(self, u: int) -> list[int]:
        """Sorted list of the current neighbours of ``u``."""
        return self._check(u).neighbors()

    def is_active(self, u: int) -> bool:
        return self._check(u).active

    def is_twin(self, u: int, v: int) -> bool:
        nu, nv = self._check(u), self._check(v)
        if u == v or self.degree(u) != self.degree(v) or nu.nweight != nv.nweight:
            return False
        return nu.neighbors() == nv.neighbors()

    def is_isolated(self, u: int) -> bool:
        """True if every neighbour of ``u`` dominates it."""
        return all(self.is_dominating(v, u) for v in self.neighbors(u))

    def is_dominating(self, u: int, v: int) -> bool:
        """True if ``u`` dominates ``v``: N(v) without ``u`` lies inside N(u)."""
        nu, nv = self._check(u), self._check(v)
        if self.degree(u) < self.degree(v) or nu.weight + nu.nweight < nv.weight + nv.nweight:
            return False
        u_neighbors = set(nu.neighbors())
        return all(w in u_neighbors for w in nv.neighbors() if w != u)

    def has_independent_neighbors(self, u: int) -> bool:
        """True if no two neighbours of ``u`` are adjacent."""
        nbrs = set(self.neighbors(u))
        return all(nbrs.isdisjoint(self._nodes[v].neighbors()) for v in nbrs)

    # -------------------------------------------------------------- reductions

    def remove_node(self, u: int) -> None:
        node = self._require_active(u)
        node.active = False
        self._log.append((Action.NODE_REMOVE, u, 0))
        for v in node.neighbors():
            nv = self._nodes[v]
            nv.hide(u)
            nv.nweight -= node.weight

    def _undo_remove_node(self, u: int) -> None:
        node = self._nodes[u]
        node.active = True
        for v in node.neighbors():
            nv = self._nodes[v]
            nv.unhide()
            nv.nweight += node.weight

    def remove_neighborhood(self, u: int) -> None:
        node = self._require_active(u)
        node.active = False
        self._log.append((Action.NEIGHBORHOOD_REMOVE, u, 0))
        nbrs = node.neighbors()
        for v in nbrs:
            self._nodes[v].active = False
        for v in nbrs:
            nv = self._nodes[v]
            for w in nv.neighbors():
                nw = self._nodes[w]
                if not nw.active:
                    continue
                nw.hide(v)
                nw.nweight -= nv.weight

    def _undo_remove_neighborhood(self, u: int) -> None:
        node = self._nodes[u]
        nbrs = node.neighbors()
        for v in nbrs:
            nv = self._nodes[v]
            for w in nv.neighbors():
                nw = self._nodes[w]
                if not nw.active:
                    continue
                nw.unhide()
                nw.nweight += nv.weight
        node.active = True
        for v in nbrs:
            self._nodes[v].active = True

    def fold_neighborhood(self, u: int) -> None:
        """Replace N[u] by one new node of weight NW(u) - W(u)."""
        node = self._require_active(u)
        nodes = self._nodes
        n = self._n
        new = _Node(weight=node.nweight - node.weight, org=len(nodes))
        nodes.append(new)
        if n != len(nodes) - 1:
            nodes[-1], nodes[n] = nodes[n], nodes[-1]

        node.active = False
        self._log.append((Action.NEIGHBORHOOD_FOLD, u, n))
        nbrs = node.neighbors()
        for v in nbrs:
            nodes[v].active = False

        attached: list[int] = []
        for v in nbrs:
            nv = nodes[v]
            for w in nv.neighbors():
                nw = nodes[w]
                if not nw.active:
                    continue
                nw.nweight -= nv.weight
                if nw.adj[-1] == n:
                    nw.hide(v)
                else:
                    del nw.adj[bisect_left(nw.adj, v, nw.start)]
                    nw.adj.append(n)
                    attached.append(w)
                    new.nweight += nw.weight
                    nw.nweight += new.weight

        self._n += 1
        new.adj = sorted(attached)

    def _undo_fold_neighborhood(self, u: int) -> None:
        nodes = self._nodes
        n = self._n
        new_label = n - 1
        new_weight = nodes[new_label].weight
        node = nodes[u]
        nbrs = node.neighbors()
        for v in nbrs:
            nv = nodes[v]
            for w in nv.neighbors():
                nw = nodes[w]
                if not nw.active:
                    continue
                nw.nweight += nv.weight
                if nw.adj[-1] == new_label:
                    nw.adj.pop()
                    nw.adj.insert(bisect_left(nw.adj, v, nw.start), v)
                    nw.nweight -= new_weight
                else:
                    nw.unhide()
        node.active = True
        for v in nbrs:
            nodes[v].active = True

        if n != len(nodes):
            nodes[-1], nodes[new_label] = nodes[new_label], nodes[-1]
        nodes.pop()
        self._n -= 1

    def fold_twin(self, u: int, v: int) -> None:
        """Fold ``v`` into its twin ``u``."""
        nu = self._require_active(u)
        nv = self._require_active(v)
        nv.active = False
        self._log.append((Action.TWIN_FOLD, u, v))
        for w in nv.neighbors():
            self._nodes[w].hide(v)
        nu.weight += nv.weight

    def _undo_fold_twin(self, u: int, v: int) -> None:
        nu, nv = self._nodes[u], self._nodes[v]
        nv.active = True
        for w in nv.neighbors():
            self._nodes[w].unhide()
        nu.weight -= nv.weight

    def fold_isolated(self, u: int) -> None:
        """Remove ``u`` and charge its weight to each of its neighbours."""
        node = self._require_active(u)
        node.active = False
        self._log.append((Action.ISOLATED_FOLD, u, 0))
        for v in node.neighbors():
            nv = self._nodes[v]
            nv.hide(u)
            nv.nweight -= node.weight
            nv.weight -= node.weight
            for w in nv.neighbors():
                if w != u:
                    self._nodes[w].nweight -= node.weight

    def _undo_fold_isolated(self, u: int) -> None:
        node = self._nodes[u]
        node.active = True
        for v in node.neighbors():
            nv = self._nodes[v]
            nv.unhide()
            nv.nweight += node.weight
            nv.weight += node.weight
            for w in nv.neighbors():
                if w != u:
                    self._nodes[w].nweight += node.weight

    # ------------------------------------------------------------- relabelling

    def _relabel_neighbors(self, n: int, new_label: list[int]) -> int:
        count = 0
        for node in self._nodes[:n]:
            if not node.active:
                continue
            count += 1
            node.adj[node.start:] = [new_label[v] for v in node.adj[node.start:]]
        return count

    def relabel(self) -> None:
        """Compact the active nodes into labels ``0 .. k - 1``, keeping their order."""
        nodes = self._nodes
        n = self._n
        if all(node.active for node in nodes[:n]):
            return
        self._log.append((Action.RELABEL, n, 0))

        def forward(start: int, flag: bool) -> int:
            return next((i for i in range(start, n) if nodes[i].active == flag), n)

        new_label = list(range(n))
        a, d = forward(0, True), forward(0, False)
        while a < n and d < n:
            if d < a:
                nodes[a], nodes[d] = nodes[d], nodes[a]
                new_label[a] = d
                a = forward(a, True)
                d = forward(d, False)
            else:
                a = forward(a + 1, True)
        self._n = self._relabel_neighbors(n, new_label)

    def _undo_relabel(self, n: int) -> None:
        nodes = self._nodes
        self._n = n

        def backward(start: int, flag: bool) -> int:
            return next((i for i in range(start, -1, -1) if nodes[i].active == flag), -1)

        new_label = list(range(n))
        i, j = backward(n - 1, True), backward(n - 1, False)
        while i >= 0 and j >= 0:
            if nodes[i].org > nodes[j].org:
                nodes[i], nodes[j] = nodes[j], nodes[i]
                new_label[i] = j
                i = backward(i, True)
                j = backward(j, False)
            else:
                j = backward(j - 1, False)
        self._relabel_neighbors(n, new_label)

    # --------------------------------------------------------------------- log

    def top_action(self) -> tuple[Action, int, int]:
        """Most recent log entry as ``(action, u, v)``."""
        if not self._log:
            raise IndexError("no actions recorded")
        return self._log[-1]

    def pop_action(self) -> None:
        """Undo the most recent action."""
        if not self._log:
            raise IndexError("no actions recorded")
        action, u, v = self._log.pop()
        match action:
            case Action.NODE_REMOVE:
                self._undo_remove_node(u)
            case Action.NEIGHBORHOOD_REMOVE:
                self._undo_remove_neighborhood(u)
            case Action.NEIGHBORHOOD_FOLD:
                self._undo_fold_neighborhood(u)
            case Action.TWIN_FOLD:
                self._undo_fold_twin(u, v)
            case Action.ISOLATED_FOLD:
                self._undo_fold_isolated(u)
            case Action.RELABEL:
                self._undo_relabel(u)