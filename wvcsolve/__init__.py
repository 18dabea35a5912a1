"""Reductions, exact solvers, local search and GNN inference for minimum weight vertex cover."""

__version__ = "0.1.0"