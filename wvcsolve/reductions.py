"""Exact reduction rules for minimum weight vertex cover."""

from __future__ import annotations

import enum
from collections import Counter
from typing import Callable

from .flow_graph import FlowGraph
from .reduction_graph import Action, ReductionGraph
from .small_solve import SmallSolver

MAX_SMALL_SOLVE = 8
MAX_REDUCTION_DEGREE = 20
LOCAL_RULE_COUNT = 7


class ReductionRule(enum.IntEnum):
    """Reduction rules; the first seven are applied node by node."""

    NEIGHBORHOOD_REDUCTION = 0
    TWIN_FOLD = 1
    DOMINATION_REDUCTION = 2
    ISOLATED_FOLD = 3
    INDEPENDENT_FOLD = 4
    NEIGHBOR_META_REDUCTION = 5
    NEIGHBORHOOD_META_REDUCTION = 6
    CRITICAL_WEIGHT_REDUCTION = 7


class VertexCover:
    """Partial cover: ``assignment[i]`` is True, False or None (undecided)."""

    def __init__(self, n: int) -> None:
        self.assignment: list[bool | None] = [None] * n
        self.cost = 0
        self.counts: Counter[ReductionRule] = Counter()

    def extend(self) -> None:
        """Add an undecided entry for a newly created node."""
        self.assignment.append(None)


class GraphSearch:
    """Per-rule work stacks of nodes still to be examined."""

    def __init__(self, n: int, rules: int = LOCAL_RULE_COUNT) -> None:
        self.rules = rules
        self.visited: list[list[bool]] = [[False] * n for _ in range(rules)]
        self.stacks: list[list[int]] = [list(range(n)) for _ in range(rules)]
        self.solver = SmallSolver()
        self.label_count = 0

    def push(self, u: int) -> None:
        """Queue ``u`` again for every rule that has already examined it."""
        if not 0 <= u < len(self.visited[0]):
            raise IndexError(f"node {u} out of range")
        for visited, stack in zip(self.visited, self.stacks):
            if visited[u]:
                stack.append(u)
            visited[u] = False

    def pop(self, rule: int) -> int:
        """Take the next node for ``rule`` and mark it examined."""
        u = self.stacks[rule].pop()
        visited = self.visited[rule]
        if u < len(visited):
            visited[u] = True
        return u

    def extend(self, u: int) -> None:
        """Make room for a new node ``u`` and queue it for every rule."""
        for visited, stack in zip(self.visited, self.stacks):
            visited.append(False)
            stack.append(u)


def unfold_graph(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, t: int) -> None:
    """Undo graph actions back to timestamp ``t``, completing the cover."""
    while g.timestamp() > t:
        action, u, v = g.top_action()
        s = vc.assignment
        if action is Action.TWIN_FOLD:
            s[g.org_label(v)] = s[g.org_label(u)]
        elif action is Action.ISOLATED_FOLD:
            s[g.org_label(u)] = any(not s[g.org_label(w)] for w in g.neighbors(u))
        elif action is Action.NEIGHBORHOOD_FOLD:
            folded = s[g.org_label(v)]
            s[g.org_label(u)] = not folded
            for w in g.neighbors(u):
                s[g.org_label(w)] = folded
            s.pop()
            for visited in gs.visited:
                visited.pop()
        g.pop_action()


def _assign(vc: VertexCover, g: ReductionGraph, u: int, value: bool) -> None:
    org = g.org_label(u)
    if vc.assignment[org] is not None:
        raise ValueError(f"node {u} is already decided")
    vc.assignment[org] = value


def select_neighborhood(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> None:
    """Exclude ``u`` from the cover and put all its neighbours in."""
    _assign(vc, g, u, False)
    gs.label_count += g.degree(u)
    for v in g.neighbors(u):
        _assign(vc, g, v, True)
        vc.cost += g.weight(v)

    g.remove_neighborhood(u)

    for v in g.neighbors(u):
        for w in g.neighbors(v):
            if g.is_active(w):
                gs.push(w)


def select_node(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> None:
    """Put ``u`` in the cover and remove it from the graph."""
    _assign(vc, g, u, True)
    gs.label_count += 1
    vc.cost += g.weight(u)
    for v in g.neighbors(u):
        gs.push(v)
    g.remove_node(u)


def neighborhood_reduction(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    if g.neighborhood_weight(u) <= g.weight(u):
        vc.counts[ReductionRule.NEIGHBORHOOD_REDUCTION] += g.degree(u) + 1
        select_neighborhood(g, vc, gs, u)
        return True
    return False


def twin_fold(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    nbrs = g.neighbors(u)
    if not nbrs:
        return False
    found = False
    for v in g.neighbors(nbrs[-1]):
        if v != u and g.is_twin(u, v):
            vc.counts[ReductionRule.TWIN_FOLD] += 1
            g.fold_twin(u, v)
            found = True
    if found:
        gs.push(u)
        for v in g.neighbors(u):
            gs.push(v)
    return found


def domination_reduction(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    for v in g.neighbors(u):
        if g.weight(v) >= g.weight(u) and g.is_dominating(u, v):
            vc.counts[ReductionRule.DOMINATION_REDUCTION] += 1
            select_node(g, vc, gs, u)
            return True
        if g.weight(v) <= g.weight(u) and g.is_dominating(v, u):
            vc.counts[ReductionRule.DOMINATION_REDUCTION] += 1
            select_node(g, vc, gs, v)
            return True
    return False


def neighborhood_difference(g: ReductionGraph, u: int, v: int, cutoff: int) -> list[int]:
    """Neighbours of ``u`` outside N(v), stopping once more than ``cutoff`` are found.

    Once N(v) is exhausted the rest of N(u) is appended unfiltered.
    """
    first, second = g.neighbors(u), g.neighbors(v)
    result: list[int] = []
    i = j = 0
    while i < len(first) and j < len(second):
        a, b = first[i], second[j]
        if a < b:
            if a != v:
                result.append(a)
                if len(result) > cutoff:
                    return result
            i += 1
        elif b < a:
            j += 1
        else:
            i += 1
            j += 1
    result.extend(first[i:])
    return result


def neighbor_meta_reduction(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    for v in g.neighbors(u):
        if g.weight(v) <= g.weight(u) or (
            g.degree(v) > g.degree(u) and g.degree(v) - g.degree(u) > MAX_SMALL_SOLVE
        ):
            continue
        rest = neighborhood_difference(g, v, u, MAX_SMALL_SOLVE)
        if len(rest) > MAX_SMALL_SOLVE:
            continue
        solver = gs.solver
        solver.reset()
        for x in rest:
            solver.add_node(x, g.weight(x))
            for y in g.neighbors(x):
                solver.add_edge(x, y)
        cover = solver.solve()
        total = sum(g.weight(x) for x in rest)
        if total - cover + g.weight(u) <= g.weight(v):
            vc.counts[ReductionRule.NEIGHBOR_META_REDUCTION] += 1
            select_node(g, vc, gs, u)
            return True
    return False


def neighborhood_meta_reduction(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    if g.degree(u) > MAX_SMALL_SOLVE:
        return False
    solver = gs.solver
    solver.reset()
    for v in g.neighbors(u):
        solver.add_node(v, g.weight(v))
        for w in g.neighbors(v):
            solver.add_edge(v, w)
    if g.weight(u) >= g.neighborhood_weight(u) - solver.solve():
        vc.counts[ReductionRule.NEIGHBORHOOD_META_REDUCTION] += g.degree(u) + 1
        select_neighborhood(g, vc, gs, u)
        return True
    return False


def independent_fold(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    nbrs = g.neighbors(u)
    if not nbrs:
        return False
    lightest = min(nbrs, key=g.weight)
    if g.weight(u) < g.neighborhood_weight(u) - g.weight(lightest):
        return False
    degree = g.degree(u)
    if g.has_independent_neighbors(u):
        gs.label_count += degree
        vc.counts[ReductionRule.INDEPENDENT_FOLD] += degree
        vc.cost += g.weight(u)
        g.fold_neighborhood(u)
        new = len(g) - 1
        gs.extend(new)
        vc.extend()
        for v in g.neighbors(new):
            gs.push(v)
    else:
        vc.counts[ReductionRule.INDEPENDENT_FOLD] += degree + 1
        select_neighborhood(g, vc, gs, u)
    return True


def isolated_fold(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, u: int) -> bool:
    if not g.is_isolated(u):
        return False
    # exactly one node of the clique around u stays out of the cover
    vc.cost += g.weight(u) * g.degree(u)
    g.fold_isolated(u)
    for v in g.neighbors(u):
        gs.push(v)
        for w in g.neighbors(v):
            gs.push(w)
    vc.counts[ReductionRule.ISOLATED_FOLD] += 1
    gs.label_count += 1
    return True


def critical_weight_reduction(g: ReductionGraph, vc: VertexCover, gs: GraphSearch) -> bool:
    """Exclude nodes of a critical independent set found by a max-flow."""
    n = len(g)
    s, t = 2 * n, 2 * n + 1
    edges: list[tuple[int, int, int]] = []
    for u in range(n):
        if not g.is_active(u):
            continue
        w = g.weight(u)
        edges.append((s, u, w))
        edges.append((n + u, t, w))
        edges.extend((u, n + v, w) for v in g.neighbors(u))
    flow = FlowGraph(t + 1, edges)
    flow.solve(s, t)

    critical = [False] * n
    for u, residual in flow.neighbors(s):
        critical[u] = residual > 0
    for u in range(n):
        if g.is_active(u) and critical[u]:
            for v in g.neighbors(u):
                critical[v] = False

    chosen = [u for u in range(n) if g.is_active(u) and critical[u]]
    for u in chosen:
        vc.counts[ReductionRule.CRITICAL_WEIGHT_REDUCTION] += g.degree(u) + 1
        select_neighborhood(g, vc, gs, u)
    return bool(chosen)


_LOCAL_RULES: dict[ReductionRule, Callable[[ReductionGraph, VertexCover, GraphSearch, int], bool]] = {
    ReductionRule.NEIGHBORHOOD_REDUCTION: neighborhood_reduction,
    ReductionRule.TWIN_FOLD: twin_fold,
    ReductionRule.DOMINATION_REDUCTION: domination_reduction,
    ReductionRule.ISOLATED_FOLD: isolated_fold,
    ReductionRule.INDEPENDENT_FOLD: independent_fold,
    ReductionRule.NEIGHBOR_META_REDUCTION: neighbor_meta_reduction,
    ReductionRule.NEIGHBORHOOD_META_REDUCTION: neighborhood_meta_reduction,
}


def reduce_graph(
    g: ReductionGraph, vc: VertexCover, gs: GraphSearch, do_critical: bool = False
) -> None:
    """Apply the local rules until none fires, optionally with the flow rule."""
    while True:
        rule = 0
        while rule < gs.rules:
            if not gs.stacks[rule]:
                rule += 1
                continue
            u = gs.pop(rule)
            if u >= len(g) or not g.is_active(u) or g.degree(u) > MAX_REDUCTION_DEGREE:
                continue
            handler = _LOCAL_RULES.get(ReductionRule(rule))
            if handler is not None and handler(g, vc, gs, u):
                rule = 0
        if not (do_critical and critical_weight_reduction(g, vc, gs)):
            break