import random

import pytest

from wvcsolve.medium_solve import medium_solve, medium_solve_recursive
from wvcsolve.reduction_graph import ReductionGraph
from wvcsolve.reductions import GraphSearch, VertexCover
from wvcsolve.small_solve import SmallSolver


def _random_graph(seed, n=8, p=0.4):
    rng = random.Random(seed)
    weights = [rng.randint(1, 10) for _ in range(n)]
    edges = [(i, j) for i in range(n) for j in range(i + 1, n) if rng.random() < p]
    return weights, edges


def _optimum(labels, weights, edges):
    solver = SmallSolver()
    for u, w in zip(labels, weights):
        solver.add_node(u, w)
    for u, v in edges:
        solver.add_edge(u, v)
    return solver.solve()


def _cover_weight(weights, assignment, labels):
    return sum(weights[u] for u in labels if assignment[u])


def test_empty_graph():
    g = ReductionGraph([], [])
    vc = VertexCover(0)
    medium_solve_recursive(g, vc, GraphSearch(0))
    assert vc.cost == 0
    assert vc.assignment == []


@pytest.mark.parametrize("seed", range(6))
def test_recursive_solve_is_optimal(seed):
    weights, edges = _random_graph(seed)
    g = ReductionGraph(weights, edges)
    vc = VertexCover(len(weights))
    medium_solve_recursive(g, vc, GraphSearch(len(weights)))

    assert all(s is not None for s in vc.assignment)
    assert all(vc.assignment[u] or vc.assignment[v] for u, v in edges)
    assert _cover_weight(weights, vc.assignment, range(len(weights))) == vc.cost
    assert vc.cost == _optimum(range(len(weights)), weights, edges)
    assert g.timestamp() == 0
    assert len(g) == len(weights)


def test_recursive_solve_restores_graph():
    weights, edges = _random_graph(11, n=7, p=0.5)
    g = ReductionGraph(weights, edges)
    reference = ReductionGraph(weights, edges)
    medium_solve_recursive(g, VertexCover(len(weights)), GraphSearch(len(weights)))
    assert g == reference


def test_medium_solve_on_component():
    weights = [2, 3, 4, 5, 1, 6]
    edges = [(0, 3), (1, 2), (1, 4), (2, 4), (3, 5)]
    g = ReductionGraph(weights, edges)
    vc = VertexCover(len(weights))
    gs = GraphSearch(len(weights))
    nodes = [5, 0, 3]

    medium_solve(g, vc, gs, nodes)

    assert nodes == [0, 3, 5]
    assert not any(g.is_active(u) for u in nodes)
    assert all(g.is_active(u) for u in (1, 2, 4))
    assert all(vc.assignment[u] is None for u in (1, 2, 4))
    component_edges = [(0, 3), (3, 5)]
    assert all(vc.assignment[u] or vc.assignment[v] for u, v in component_edges)
    assert _cover_weight(weights, vc.assignment, nodes) == vc.cost
    assert vc.cost == _optimum(nodes, [weights[u] for u in nodes], component_edges)


def test_medium_solve_whole_graph():
    weights, edges = _random_graph(3, n=9, p=0.35)
    g = ReductionGraph(weights, edges)
    vc = VertexCover(len(weights))
    medium_solve(g, vc, GraphSearch(len(weights)), list(range(len(weights))))
    assert all(vc.assignment[u] or vc.assignment[v] for u, v in edges)
    assert vc.cost == _optimum(range(len(weights)), weights, edges)