"""
NumPy CPU backend.

This module provides `NumpyBackend`, the reference numeric-kernel backend.
Each method validates operand shapes, computes the result with NumPy in
float32, and wraps it in a new `Array` that references this backend.

Design notes
------------
- The backend holds no per-call state and is safe to share across arrays,
  graphs and threads.
- Shape rules are strict: elementwise operations require identical shapes,
  and the only broadcasting case is `add_broadcast` ([N, K] + [K]). NumPy's
  own broadcasting is never relied on implicitly.
- Softmax subtracts the row maximum before exponentiating, so large logits
  do not overflow.
"""

from __future__ import annotations

import operator
from typing import Any, Optional, Sequence

import numpy as np

from ...domain._backend import IBackend
from ...domain._errors import ShapeError, ShapeMismatchError
from .._shape import Shape, ShapeLike
from ..array._array import DTYPE, Array


class NumpyBackend(IBackend):
    """
    CPU backend built on NumPy kernels.

    Notes
    -----
    All results are float32 and C-contiguous. Operands produced by another
    backend are accepted as long as they are `Array` values; the result
    always belongs to this backend.
    """

    name = "numpy"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _wrap(self, buf: np.ndarray) -> Array:
        return Array._from_buffer(buf, self)

    @staticmethod
    def _require_same_shape(op: str, a: Array, b: Array) -> None:
        if a.dims != b.dims:
            raise ShapeMismatchError(op, a.dims, b.dims)

    @staticmethod
    def _require_rank(op: str, a: Array, rank: int) -> None:
        if a.ndim != rank:
            raise ShapeMismatchError(
                op, a.dims, detail=f"requires a {rank}D array, got {a.ndim}D"
            )

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------
    def from_numpy(self, values: Any, shape: Optional[ShapeLike] = None) -> Array:
        """
        Build an array owned by this backend from array-like values.
        """
        return Array(values, shape, backend=self)

    def zeros(self, shape: ShapeLike) -> Array:
        return self._wrap(np.zeros(Shape.of(shape).dims, dtype=DTYPE))

    def ones(self, shape: ShapeLike) -> Array:
        return self._wrap(np.ones(Shape.of(shape).dims, dtype=DTYPE))

    def full(self, shape: ShapeLike, value: float) -> Array:
        return self._wrap(np.full(Shape.of(shape).dims, float(value), dtype=DTYPE))

    # ------------------------------------------------------------------
    # Linear algebra / layout
    # ------------------------------------------------------------------
    def matmul(self, a: Array, b: Array) -> Array:
        """
        2D matrix product: [M, K] @ [K, N] -> [M, N].
        """
        if a.ndim != 2 or b.ndim != 2:
            raise ShapeMismatchError(
                "matmul", a.dims, b.dims, detail="requires 2D operands"
            )
        if a.dims[1] != b.dims[0]:
            raise ShapeMismatchError(
                "matmul",
                a.dims,
                b.dims,
                detail=f"inner dims {a.dims[1]} vs {b.dims[0]}",
            )
        return self._wrap(np.matmul(a._buffer(), b._buffer()))

    def transpose(self, a: Array) -> Array:
        """
        Swap the two axes of a 2D array.
        """
        self._require_rank("transpose", a, 2)
        return self._wrap(a._buffer().T.copy())

    def reshape(self, a: Array, shape: ShapeLike) -> Array:
        """
        Reinterpret `a` with a new shape holding the same number of elements.
        """
        shp = Shape.of(shape)
        if shp.numel() != a.numel():
            raise ShapeMismatchError(
                "reshape", a.dims, shp.dims, detail="element counts differ"
            )
        return self._wrap(a._buffer().reshape(shp.dims).copy())

    def stack(self, arrays: Sequence[Array], axis: int = 0) -> Array:
        """
        Stack equally-shaped arrays along a new axis.

        Raises
        ------
        ShapeError
            If `arrays` is empty.
        ShapeMismatchError
            If the arrays do not all share one shape.
        """
        if len(arrays) == 0:
            raise ShapeError("stack requires at least one array")
        first = arrays[0]
        for other in arrays[1:]:
            self._require_same_shape("stack", first, other)
        axis = operator.index(axis)
        if not -(first.ndim + 1) <= axis <= first.ndim:
            raise ShapeMismatchError(
                "stack", first.dims, detail=f"axis {axis} out of range"
            )
        return self._wrap(np.stack([x._buffer() for x in arrays], axis=axis))

    # ------------------------------------------------------------------
    # Elementwise binary
    # ------------------------------------------------------------------
    def add(self, a: Array, b: Array) -> Array:
        self._require_same_shape("add", a, b)
        return self._wrap(a._buffer() + b._buffer())

    def sub(self, a: Array, b: Array) -> Array:
        self._require_same_shape("sub", a, b)
        return self._wrap(a._buffer() - b._buffer())

    def mul(self, a: Array, b: Array) -> Array:
        self._require_same_shape("mul", a, b)
        return self._wrap(a._buffer() * b._buffer())

    def div(self, a: Array, b: Array) -> Array:
        self._require_same_shape("div", a, b)
        return self._wrap(a._buffer() / b._buffer())

    def add_broadcast(self, a: Array, b: Array) -> Array:
        """
        [N, K] + [K]: add the vector `b` to every row of `a`.
        """
        if a.ndim != 2 or b.ndim != 1:
            raise ShapeMismatchError(
                "add_broadcast",
                a.dims,
                b.dims,
                detail="expects (matrix, vector) e.g. (N, K) + (K)",
            )
        if a.dims[1] != b.dims[0]:
            raise ShapeMismatchError(
                "add_broadcast", a.dims, b.dims, detail="last dim must match"
            )
        return self._wrap(a._buffer() + b._buffer()[np.newaxis, :])

    def scale(self, a: Array, s: float) -> Array:
        return self._wrap(a._buffer() * DTYPE(s))

    # ------------------------------------------------------------------
    # Elementwise unary
    # ------------------------------------------------------------------
    def relu(self, a: Array) -> Array:
        x = a._buffer()
        return self._wrap(np.where(x > 0.0, x, DTYPE(0.0)))

    def sigmoid(self, a: Array) -> Array:
        x = a._buffer()
        # split by sign so exp never overflows
        out = np.empty_like(x)
        pos = x >= 0
        out[pos] = 1.0 / (1.0 + np.exp(-x[pos]))
        ex = np.exp(x[~pos])
        out[~pos] = ex / (1.0 + ex)
        return self._wrap(out)

    def exp(self, a: Array) -> Array:
        return self._wrap(np.exp(a._buffer()))

    def log(self, a: Array) -> Array:
        """
        Natural log. Non-positive inputs give ``-inf`` / ``nan``.
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._wrap(np.log(a._buffer()))

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def sum(self, a: Array) -> Array:
        """
        Full reduction to a one-element array of shape [1].
        """
        return self._wrap(np.array([a._buffer().sum(dtype=DTYPE)], dtype=DTYPE))

    def sum_dim(self, a: Array, dim: int) -> Array:
        """
        Reduce along `dim`, keeping that axis with size 1.
        """
        dim = operator.index(dim)
        if not 0 <= dim < a.ndim:
            raise ShapeMismatchError(
                "sum_dim", a.dims, detail=f"dim {dim} out of range"
            )
        return self._wrap(a._buffer().sum(axis=dim, keepdims=True, dtype=DTYPE))

    # ------------------------------------------------------------------
    # Softmax
    # ------------------------------------------------------------------
    def softmax_last_dim(self, a: Array) -> Array:
        """
        Softmax along the last axis; each slice along it sums to 1.
        """
        if a.ndim < 1:
            raise ShapeMismatchError(
                "softmax", a.dims, detail="requires at least one dimension"
            )
        x = a._buffer()
        shifted = x - x.max(axis=-1, keepdims=True)
        e = np.exp(shifted)
        return self._wrap(e / e.sum(axis=-1, keepdims=True))

    # ------------------------------------------------------------------
    # Fused backward helpers
    # ------------------------------------------------------------------
    def relu_backward(self, grad_out: Array, x: Array) -> Array:
        """
        ``grad_out`` where ``x > 0``, else 0.
        """
        self._require_same_shape("relu_backward", grad_out, x)
        return self._wrap(np.where(x._buffer() > 0.0, grad_out._buffer(), DTYPE(0.0)))

    def sigmoid_backward(self, grad_out: Array, y: Array) -> Array:
        """
        ``grad_out * y * (1 - y)`` where `y` is the sigmoid output.
        """
        self._require_same_shape("sigmoid_backward", grad_out, y)
        yb = y._buffer()
        return self._wrap(grad_out._buffer() * yb * (1.0 - yb))

    def softmax_backward(self, grad_out: Array, y: Array) -> Array:
        """
        ``y * (grad_out - rowsum(grad_out * y))`` where `y` is the softmax
        output. This applies the softmax Jacobian without materializing it.
        """
        self._require_same_shape("softmax_backward", grad_out, y)
        g = grad_out._buffer()
        yb = y._buffer()
        dot = (g * yb).sum(axis=-1, keepdims=True)
        return self._wrap(yb * (g - dot))

    def __repr__(self) -> str:
        return "NumpyBackend()"
