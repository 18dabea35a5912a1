# wvcsolve

A library for the minimum weight vertex cover problem on undirected graphs
with non-negative integer node weights.

## Contents

- `wvcsolve.reduction_graph` – `ReductionGraph`, a graph that supports
  removing and folding nodes, compacting labels with `relabel`, and undoing
  every change in reverse order (`timestamp`, `top_action`, `pop_action`).
  Log entries are tagged with the `Action` enum.
- `wvcsolve.reductions` – exact reduction rules (neighborhood reduction,
  twin fold, domination, isolated fold, independent fold, the two meta
  reductions and the flow-based `critical_weight_reduction`), driven by
  `reduce_graph`. `unfold_graph` undoes the graph changes back to a given
  timestamp and fills in the decisions for the folded nodes.
  `VertexCover` holds the partial assignment, its cost and per-rule counts;
  `GraphSearch` holds the per-rule work stacks.
- `wvcsolve.small_solve` – `SmallSolver`, an exhaustive solver for graphs
  of at most 16 nodes.
- `wvcsolve.flow_graph` – `FlowGraph`, a push–relabel maximum flow solver.
- `wvcsolve.medium_solve` – `medium_solve_recursive` and `medium_solve`,
  a branch-and-reduce exact solver for medium sized (sub)graphs.
- `wvcsolve.local_search` – `LocalSearch`, an edge-weighting local search
  that improves a given cover.
- `wvcsolve.matrix` – `dot`, `format_matrix` and `read_matrix` for
  float32 NumPy matrices and their plain text form.
- `wvcsolve.gnn` – `Model` for graph neural network inference built from
  `LinearLayer`, `GraphLayer`, `ReLU` and `Sigmoid`, with a plain text
  model format (`Model.parse`, `str(model)`).

## Installation

```
pip install .
```

Install `.[test]` to get the test dependencies, then run `pytest`.

## Usage

Edges are given as sorted pairs `(u, v)` with `u < v`; nodes are numbered
from 0.

```python
from wvcsolve.reduction_graph import ReductionGraph
from wvcsolve.reductions import GraphSearch, VertexCover, reduce_graph, unfold_graph

weights = [5, 3, 4]
edges = [(0, 1), (1, 2)]

g = ReductionGraph(weights, edges)
vc = VertexCover(len(g))
gs = GraphSearch(len(g), 7)

start = g.timestamp()
reduce_graph(g, vc, gs, True)
unfold_graph(g, vc, gs, start)

print(vc.assignment, vc.cost)     # [False, True, False] 3
```

When the reductions do not decide every node, the remaining graph can be
solved exactly with `medium_solve` or handled by local search.

A complete cover can be improved with local search:

```python
from wvcsolve.local_search import LocalSearch

ls = LocalSearch(weights, edges, [True, True, True])
ls.search(10_000, 1.0)
print(ls.best_cost, ls.best_cover())
```

`LocalSearch.from_reduced(vc, g)` starts from the current nodes of a
reduced graph, and `apply_to(vc, g)` writes the best cover found back into
the `VertexCover`.

## What the package does not do

There is no command line program and no reader for graph files: graphs are
built in code from a list of weights and a list of edges. There are no
trained models either; `Model.parse` reads a model from text supplied by the
caller.