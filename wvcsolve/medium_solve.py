"""Exact branch-and-reduce solver for medium sized vertex cover instances."""

from __future__ import annotations

import copy
from bisect import bisect_left

from .reduction_graph import ReductionGraph
from .reductions import (
    GraphSearch,
    VertexCover,
    reduce_graph,
    select_neighborhood,
    select_node,
    unfold_graph,
)

_MIN_DEGREE_BRANCH = 50


def _restore(vc: VertexCover, saved: VertexCover) -> None:
    vc.assignment = list(saved.assignment)
    vc.cost = saved.cost
    vc.counts = copy.copy(saved.counts)


def medium_solve_recursive(g: ReductionGraph, vc: VertexCover, gs: GraphSearch) -> None:
    """Solve ``g`` exactly, leaving the graph as it was and the cover complete."""
    nodes = sorted(range(len(g)), key=lambda a: -g.degree(a))
    k = max(len(g) // 4, _MIN_DEGREE_BRANCH)
    tk = 0
    while tk < len(nodes) and g.degree(nodes[tk]) > tk:
        tk += 1

    if tk >= k:
        saved = copy.deepcopy(vc)
        t = g.timestamp()
        # either every high-degree node is in the cover ...
        for u in nodes[:tk]:
            select_node(g, vc, gs, u)
        g.relabel()
        medium_solve_recursive(g, vc, gs)
        unfold_graph(g, vc, gs, t)
        best = copy.deepcopy(vc)
        _restore(vc, saved)

        # ... or one of them is left out
        for u in nodes[:tk]:
            select_neighborhood(g, vc, gs, u)
            g.relabel()
            medium_solve_recursive(g, vc, gs)
            unfold_graph(g, vc, gs, t)
            if best.cost > vc.cost:
                best = copy.deepcopy(vc)
            _restore(vc, saved)

        _restore(vc, best)
        return

    t1 = g.timestamp()
    reduce_graph(g, vc, gs, True)
    g.relabel()

    if len(g) == 0:
        unfold_graph(g, vc, gs, t1)
        return

    saved = copy.deepcopy(vc)
    t2 = g.timestamp()

    u = 0
    for v in range(1, len(g)):
        if g.degree(v) > g.degree(u):
            u = v

    select_neighborhood(g, vc, gs, u)
    g.relabel()
    medium_solve_recursive(g, vc, gs)
    unfold_graph(g, vc, gs, t2)

    best = copy.deepcopy(vc)
    _restore(vc, saved)

    select_node(g, vc, gs, u)
    g.relabel()
    medium_solve_recursive(g, vc, gs)
    unfold_graph(g, vc, gs, t2)

    if vc.cost > best.cost:
        _restore(vc, best)

    unfold_graph(g, vc, gs, t1)


def medium_solve(g: ReductionGraph, vc: VertexCover, gs: GraphSearch, nodes: list[int]) -> None:
    """Solve the subgraph induced by ``nodes`` exactly and apply the result to ``g``.

    ``nodes`` is sorted in place.
    """
    nodes.sort()
    weights = [g.weight(u) for u in nodes]
    edges: list[tuple[int, int]] = []
    for u_id, u in enumerate(nodes):
        for v in g.neighbors(u):
            if v < u:
                continue
            edges.append((u_id, bisect_left(nodes, v)))

    sub = ReductionGraph(weights, edges)
    sub_vc = VertexCover(len(weights))
    sub_gs = GraphSearch(len(weights))
    medium_solve_recursive(sub, sub_vc, sub_gs)

    for in_cover, u in zip(sub_vc.assignment, nodes):
        if not g.is_active(u):
            continue
        if not in_cover:
            select_neighborhood(g, vc, gs, u)
        else:
            select_node(g, vc, gs, u)