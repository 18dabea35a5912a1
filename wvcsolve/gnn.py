"""Small graph neural network used to score nodes of a reduction graph."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from .matrix import dot, format_matrix, read_matrix
from .reduction_graph import ReductionGraph


def _empty() -> np.ndarray:
    return np.zeros((0, 0), dtype=np.float32)


@dataclass(eq=False)
class LinearLayer:
    """Affine map ``x @ weights + bias``."""

    weights: np.ndarray = field(default_factory=_empty)
    bias: np.ndarray = field(default_factory=_empty)

    @classmethod
    def random(cls, dim_in: int, dim_out: int, seed: int = 0) -> "LinearLayer":
        """Initialise uniformly in ``[-1/sqrt(dim_in + 1), 1/sqrt(dim_in + 1))``."""
        lim = np.float32(1.0 / math.sqrt(dim_in + 1))
        count = dim_in * dim_out + dim_out
        rng = np.random.RandomState(seed & 0xFFFFFFFF)
        raw = rng.randint(0, 2**32, size=count, dtype=np.uint64)
        canonical = raw.astype(np.float32) / np.float32(4294967296.0)
        below_one = np.nextafter(np.float32(1.0), np.float32(0.0))
        canonical = np.where(canonical >= np.float32(1.0), below_one, canonical).astype(np.float32)
        values = (canonical * (lim - (-lim)) + (-lim)).astype(np.float32)
        weights = values[: dim_in * dim_out].reshape(dim_in, dim_out)
        bias = values[dim_in * dim_out:].reshape(1, dim_out)
        return cls(weights=weights, bias=bias)

    def forward(self, x: np.ndarray) -> np.ndarray:
        out = dot(x, self.weights)
        return (out + np.asarray(self.bias, dtype=np.float32).reshape(1, -1)).astype(np.float32)


@dataclass
class GraphLayer:
    """Message passing over the graph's edges.

    Each output row holds the sum of the neighbours' inputs, then the node's
    own input; degree, weight and neighbourhood weight are written at
    columns ``w + 1``, ``w + 2`` and ``w + 3`` where ``w`` is the input width.
    """

    weight_scale: float = 120.0

    def forward(self, x: np.ndarray, g: ReductionGraph) -> np.ndarray:
        x = np.atleast_2d(np.asarray(x, dtype=np.float32))
        height, width = x.shape
        n = len(g)
        if height < n:
            raise ValueError(f"input has {height} rows but the graph has {n} nodes")
        out_width = 2 * width + 3
        flat = np.zeros(height * out_width, dtype=np.float32)
        scale = np.float32(self.weight_scale)
        for u in range(n):
            base = u * out_width
            row = flat[base:base + out_width]
            for v in g.neighbors(u):
                row[:width] += x[v]
            row[width:2 * width] = x[u]
            extras = (
                np.float32(g.degree(u)),
                np.float32(g.weight(u)) / scale,
                np.float32(g.neighborhood_weight(u)) / scale,
            )
            for offset, value in enumerate(extras, start=1):
                index = base + width + offset
                if index < flat.size:
                    flat[index] = value
        return flat.reshape(height, out_width)


@dataclass
class ReLU:
    def forward(self, x: np.ndarray) -> np.ndarray:
        return np.maximum(np.asarray(x, dtype=np.float32), np.float32(0.0))


@dataclass
class Sigmoid:
    def forward(self, x: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float32)
        with np.errstate(over="ignore"):
            return (np.float32(1.0) / (np.float32(1.0) + np.exp(-x))).astype(np.float32)


Layer = Union[LinearLayer, GraphLayer, ReLU, Sigmoid]


class Model:
    """Sequence of layers applied one after another."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.layers: list[Layer] = []

    def add_layer(self, layer: Layer) -> None:
        self.layers.append(layer)

    def predict(self, x: np.ndarray, g: ReductionGraph) -> np.ndarray:
        if not self.layers:
            raise ValueError("model has no layers")
        current = np.asarray(x, dtype=np.float32).copy()
        for layer in self.layers:
            if isinstance(layer, GraphLayer):
                current = layer.forward(current, g)
            else:
                current = layer.forward(current)
        return current

    def set_weight_scale(self, scale: float) -> None:
        for layer in self.layers:
            if isinstance(layer, GraphLayer):
                layer.weight_scale = scale

    def __str__(self) -> str:
        parts = [f"{self.name}\n", f"{len(self.layers)} Layers\n"]
        for layer in self.layers:
            if isinstance(layer, LinearLayer):
                parts.append("Linear_Layer\n")
                parts.append("Weights: " + format_matrix(layer.weights) + "\n")
                parts.append("Bias: " + format_matrix(layer.bias) + "\n\n")
            elif isinstance(layer, GraphLayer):
                parts.append("Graph_Layer\n\n")
            elif isinstance(layer, ReLU):
                parts.append("ReLU_Activation\n\n")
            elif isinstance(layer, Sigmoid):
                parts.append("Sigmoid_Activation\n\n")
        return "".join(parts)

    @classmethod
    def parse(cls, text: str) -> "Model":
        """Read a model in the format produced by ``str(model)``."""
        tokens = iter(text.split())
        try:
            model = cls(next(tokens))
            count = int(next(tokens))
            next(tokens)
            for _ in range(count):
                tag = next(tokens)
                if tag == "Linear_Layer":
                    next(tokens)
                    weights = read_matrix(tokens)
                    next(tokens)
                    bias = read_matrix(tokens)
                    model.add_layer(LinearLayer(weights=weights, bias=bias))
                elif tag == "Graph_Layer":
                    model.add_layer(GraphLayer())
                elif tag == "ReLU_Activation":
                    model.add_layer(ReLU())
                elif tag == "Sigmoid_Activation":
                    model.add_layer(Sigmoid())
        except StopIteration:
            raise ValueError("unexpected end of model data") from None
        return model