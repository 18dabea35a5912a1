import itertools
import random

import pytest

from wvcsolve.small_solve import SmallSolver


def _brute_force(weights, edges):
    n = len(weights)
    best = None
    for r in range(n + 1):
        for subset in itertools.combinations(range(n), r):
            chosen = set(subset)
            if all(u in chosen or v in chosen for u, v in edges):
                cost = sum(weights[i] for i in chosen)
                if best is None or cost < best:
                    best = cost
    return best


def _build(weights, edges, labels=None):
    labels = labels or list(range(len(weights)))
    solver = SmallSolver()
    for label, w in zip(labels, weights):
        solver.add_node(label, w)
    for u, v in edges:
        solver.add_edge(labels[u], labels[v])
    return solver


def test_empty_solver_costs_nothing():
    assert SmallSolver().solve() == 0


def test_single_edge_picks_lighter_endpoint():
    solver = _build([5, 2], [(0, 1)])
    assert solver.solve() == 2
    assert solver.in_solution(1)
    assert not solver.in_solution(0)


@pytest.mark.parametrize("seed", range(12))
def test_random_graphs_match_exhaustive_search(seed):
    rng = random.Random(seed)
    n = rng.randint(1, 9)
    weights = [rng.randint(1, 20) for _ in range(n)]
    edges = [(u, v) for u in range(n) for v in range(u + 1, n) if rng.random() < 0.4]
    labels = [100 + 7 * i for i in range(n)]
    solver = _build(weights, edges, labels)
    cost = solver.solve()
    assert cost == _brute_force(weights, edges)
    chosen = [i for i in range(n) if solver.in_solution(labels[i])]
    assert sum(weights[i] for i in chosen) == cost
    assert all(u in chosen or v in chosen for u, v in edges)


def test_edges_to_unknown_labels_are_ignored():
    solver = _build([3, 4], [])
    solver.add_edge(0, 99)
    assert solver.solve() == 0


def test_best_cost_persists_until_reset():
    solver = _build([1, 1], [(0, 1)])
    first = solver.solve()
    solver.add_node(2, 50)
    solver.add_node(3, 50)
    solver.add_edge(2, 3)
    assert solver.solve() == first
    solver.reset()
    solver.add_node(2, 50)
    solver.add_node(3, 60)
    solver.add_edge(2, 3)
    assert solver.solve() == 50


def test_too_many_nodes_rejected():
    solver = SmallSolver()
    for i in range(16):
        solver.add_node(i, 1)
    with pytest.raises(ValueError):
        solver.add_node(16, 1)


def test_sixteen_node_path():
    weights = [1] * 16
    edges = [(i, i + 1) for i in range(15)]
    solver = _build(weights, edges)
    assert solver.solve() == _brute_force(weights, edges)