"""Text format and product helpers for float32 matrices."""

from __future__ import annotations

from typing import Iterator

import numpy as np


def format_matrix(m: np.ndarray) -> str:
    """Render as ``"h w"`` followed by one line per row, each value followed by a space."""
    m = np.atleast_2d(np.asarray(m, dtype=np.float32))
    height, width = m.shape
    lines = [f"{height} {width}\n"]
    for row in m:
        lines.append("".join(f"{float(x):g} " for x in row) + "\n")
    return "".join(lines)


def read_matrix(tokens: Iterator[str]) -> np.ndarray:
    """Read a matrix written by :func:`format_matrix` from a token iterator."""
    try:
        height = int(next(tokens))
        width = int(next(tokens))
        values = [float(next(tokens)) for _ in range(height * width)]
    except StopIteration:
        raise ValueError("unexpected end of matrix data") from None
    return np.array(values, dtype=np.float32).reshape(height, width)


def _resized(out: np.ndarray | None, shape: tuple[int, int]) -> np.ndarray:
    if out is None:
        return np.zeros(shape, dtype=np.float32)
    if out.shape == shape:
        return out
    flat = np.zeros(shape[0] * shape[1], dtype=np.float32)
    old = np.asarray(out, dtype=np.float32).ravel()
    keep = min(old.size, flat.size)
    flat[:keep] = old[:keep]
    return flat.reshape(shape)


def dot(
    a: np.ndarray,
    b: np.ndarray,
    transpose_a: bool = False,
    transpose_b: bool = False,
    beta: float = 0.0,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Return ``op(a) @ op(b) + beta * out``, storing into ``out`` when its shape fits."""
    a = np.asarray(a, dtype=np.float32)
    b = np.asarray(b, dtype=np.float32)
    left = a.T if transpose_a else a
    right = b.T if transpose_b else b
    if left.shape[1] != right.shape[0]:
        raise ValueError(f"cannot multiply {left.shape} by {right.shape}")
    result = _resized(out, (left.shape[0], right.shape[1]))
    product = left @ right
    if beta == 0.0:
        result[...] = product
    else:
        result[...] = product + np.float32(beta) * result
    return result