import random

import pytest

from wvcsolve.reduction_graph import Action, ReductionGraph

WEIGHTS = [3, 1, 4, 1, 5]
EDGES = [(0, 1), (0, 3), (1, 2), (2, 3), (3, 4)]

PATH_WEIGHTS = [2, 3, 1, 3, 2]
PATH_EDGES = [(0, 1), (1, 2), (2, 3), (3, 4)]


def _assert_consistent(g):
    orgs = []
    for u in range(len(g)):
        if not g.is_active(u):
            continue
        orgs.append(g.org_label(u))
        nbrs = g.neighbors(u)
        assert nbrs == sorted(nbrs)
        assert len(set(nbrs)) == len(nbrs)
        assert g.degree(u) == len(nbrs)
        for v in nbrs:
            assert g.is_active(v)
            assert u in g.neighbors(v)
        assert g.neighborhood_weight(u) == sum(g.weight(v) for v in nbrs)
    assert len(set(orgs)) == len(orgs)


def _random_graph(rng, n, p):
    weights = [rng.randint(1, 20) for _ in range(n)]
    edges = sorted((u, v) for u in range(n) for v in range(u + 1, n) if rng.random() < p)
    return weights, edges


def test_unsorted_edges_rejected():
    with pytest.raises(ValueError):
        ReductionGraph([1, 1, 1], [(1, 2), (0, 1)])


def test_edge_out_of_range_rejected():
    with pytest.raises(ValueError):
        ReductionGraph([1, 1], [(0, 2)])


def test_neighbors_degree_and_weights():
    g = ReductionGraph(WEIGHTS, EDGES)
    assert len(g) == len(WEIGHTS)
    assert g.neighbors(3) == [0, 2, 4]
    assert g.degree(3) == 3
    assert g.weight(4) == WEIGHTS[4]
    assert g.neighborhood_weight(3) == WEIGHTS[0] + WEIGHTS[2] + WEIGHTS[4]
    assert g.timestamp() == 0
    _assert_consistent(g)


def test_out_of_range_queries():
    g = ReductionGraph(WEIGHTS, EDGES)
    with pytest.raises(IndexError):
        g.neighbors(len(WEIGHTS))
    with pytest.raises(IndexError):
        g.org_label(len(WEIGHTS))
    with pytest.raises(IndexError):
        g.pop_action()
    with pytest.raises(IndexError):
        g.top_action()


def test_remove_node_and_undo():
    g = ReductionGraph(WEIGHTS, EDGES)
    g.remove_node(3)
    assert not g.is_active(3)
    assert g.neighbors(0) == [1]
    assert 3 not in g.neighbors(4)
    assert g.top_action() == (Action.NODE_REMOVE, 3, 0)
    assert g.timestamp() == 1
    _assert_consistent(g)
    with pytest.raises(ValueError):
        g.remove_node(3)
    g.pop_action()
    assert g == ReductionGraph(WEIGHTS, EDGES)


def test_remove_neighborhood_and_undo():
    g = ReductionGraph(WEIGHTS, EDGES)
    g.remove_neighborhood(4)
    assert not g.is_active(4)
    assert not g.is_active(3)
    assert g.neighbors(0) == [1]
    assert g.neighbors(2) == [1]
    assert g.top_action() == (Action.NEIGHBORHOOD_REMOVE, 4, 0)
    _assert_consistent(g)
    g.pop_action()
    assert g == ReductionGraph(WEIGHTS, EDGES)


def test_twin_fold_and_undo():
    weights = [2, 3, 1, 1]
    edges = [(0, 2), (0, 3), (1, 2), (1, 3)]
    g = ReductionGraph(weights, edges)
    assert g.is_twin(0, 1)
    assert not g.is_twin(0, 0)
    assert not g.is_twin(0, 2)
    g.fold_twin(0, 1)
    assert g.weight(0) == weights[0] + weights[1]
    assert not g.is_active(1)
    assert g.neighbors(2) == [0]
    assert g.top_action() == (Action.TWIN_FOLD, 0, 1)
    _assert_consistent(g)
    g.pop_action()
    assert g == ReductionGraph(weights, edges)


def test_isolated_fold_and_undo():
    weights = [1, 5, 6]
    edges = [(0, 1), (0, 2), (1, 2)]
    g = ReductionGraph(weights, edges)
    assert g.is_dominating(1, 0)
    assert not g.is_dominating(0, 1)
    assert g.is_isolated(0)
    assert not g.has_independent_neighbors(0)
    g.fold_isolated(0)
    assert g.weight(1) == weights[1] - weights[0]
    assert g.weight(2) == weights[2] - weights[0]
    assert g.neighbors(1) == [2]
    _assert_consistent(g)
    g.pop_action()
    assert g == ReductionGraph(weights, edges)


def test_fold_neighborhood_and_undo():
    g = ReductionGraph(PATH_WEIGHTS, PATH_EDGES)
    assert g.has_independent_neighbors(2)
    expected_weight = g.neighborhood_weight(2) - g.weight(2)
    g.fold_neighborhood(2)
    new = len(PATH_WEIGHTS)
    assert len(g) == new + 1
    assert g.weight(new) == expected_weight
    assert g.neighbors(new) == [0, 4]
    assert g.neighbors(0) == [new]
    assert g.org_label(new) == new
    assert g.top_action() == (Action.NEIGHBORHOOD_FOLD, 2, new)
    _assert_consistent(g)
    g.pop_action()
    assert len(g) == len(PATH_WEIGHTS)
    assert g == ReductionGraph(PATH_WEIGHTS, PATH_EDGES)


def test_relabel_compacts_and_undoes():
    g = ReductionGraph(PATH_WEIGHTS, PATH_EDGES)
    g.remove_node(1)
    g.relabel()
    assert len(g) == len(PATH_WEIGHTS) - 1
    assert g.top_action() == (Action.RELABEL, len(PATH_WEIGHTS), 0)
    assert [g.org_label(u) for u in range(len(g))] == [0, 2, 3, 4]
    assert [g.org_label(v) for v in g.neighbors(1)] == [3]
    assert g.neighbors(0) == []
    _assert_consistent(g)
    g.pop_action()
    g.pop_action()
    assert g == ReductionGraph(PATH_WEIGHTS, PATH_EDGES)


def test_relabel_without_removed_nodes_is_noop():
    g = ReductionGraph(WEIGHTS, EDGES)
    g.relabel()
    assert g.timestamp() == 0
    assert g == ReductionGraph(WEIGHTS, EDGES)


@pytest.mark.parametrize("seed", range(12))
def test_random_operations_unwind(seed):
    rng = random.Random(seed)
    weights, edges = _random_graph(rng, 10, 0.35)
    g = ReductionGraph(weights, edges)
    for _ in range(30):
        active = [u for u in range(len(g)) if g.is_active(u)]
        if not active:
            break
        u = rng.choice(active)
        op = rng.choice(["remove", "neighborhood", "twin", "isolated", "fold", "relabel"])
        if op == "remove":
            g.remove_node(u)
        elif op == "neighborhood":
            g.remove_neighborhood(u)
        elif op == "twin":
            twins = [v for v in active if g.is_twin(u, v)]
            if twins:
                g.fold_twin(u, twins[0])
        elif op == "isolated":
            if g.is_isolated(u):
                g.fold_isolated(u)
        elif op == "fold":
            if g.degree(u) > 0 and g.has_independent_neighbors(u):
                g.fold_neighborhood(u)
        else:
            g.relabel()
            assert all(g.is_active(v) for v in range(len(g)))
        _assert_consistent(g)
    while g.timestamp():
        g.pop_action()
        _assert_consistent(g)
    assert g == ReductionGraph(weights, edges)


@pytest.mark.parametrize("seed", range(6))
def test_fold_then_relabel_unwinds(seed):
    rng = random.Random(100 + seed)
    weights, edges = _random_graph(rng, 12, 0.25)
    g = ReductionGraph(weights, edges)
    for _ in range(8):
        candidates = [
            u for u in range(len(g))
            if g.is_active(u) and g.degree(u) > 0 and g.has_independent_neighbors(u)
        ]
        if not candidates:
            break
        g.fold_neighborhood(rng.choice(candidates))
        g.relabel()
        _assert_consistent(g)
    while g.timestamp():
        g.pop_action()
    assert g == ReductionGraph(weights, edges)