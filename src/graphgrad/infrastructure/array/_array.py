"""
Concrete array value.

This module provides `Array`, the dense float32 value type that flows through
the graph. An `Array` owns a buffer, a `Shape`, and a shared reference to the
backend that produced it. It carries no gradient or graph state.

Design notes
------------
- Every arithmetic method delegates to `self.backend`; the array layer never
  computes anything itself.
- Arrays are values: the buffer is copied on construction and on export, and
  every operation returns a new array. The single in-place mutation is
  `zero_fill`, used for gradient resets.
- Binary operations require identical shapes; the only broadcasting case is
  `add_broadcast` ([N, K] + [K]).
"""

from __future__ import annotations

import numbers
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from ...domain._array import IArray
from ...domain._errors import ShapeError
from .._shape import Shape, ShapeLike

Number = Union[int, float]

DTYPE = np.float32

_DEFAULT_BACKEND = None


def default_backend():
    """
    Return the process-wide default backend (a shared `NumpyBackend`).

    The backend is stateless, so one instance is shared by every array that
    does not name its own.
    """
    global _DEFAULT_BACKEND
    if _DEFAULT_BACKEND is None:
        # local import: the backend module imports Array
        from ..backend._numpy_backend import NumpyBackend

        _DEFAULT_BACKEND = NumpyBackend()
    return _DEFAULT_BACKEND


class Array(IArray):
    """
    Dense float32 array value.

    Parameters
    ----------
    values : array-like
        Element values. Copied into an owned float32 buffer.
    shape : Shape | Iterable[int], optional
        Target shape. If omitted, the shape of ``np.asarray(values)`` is used.
        If given, `values` is read in row-major order and must hold exactly
        ``shape.numel()`` elements.
    backend : IBackend, optional
        Backend that performs this array's arithmetic. Defaults to the shared
        `NumpyBackend`.

    Raises
    ------
    ShapeError
        If the number of values does not match the shape's element count.
    """

    __slots__ = ("_data", "_shape", "_backend")

    def __init__(
        self,
        values: Any,
        shape: Optional[ShapeLike] = None,
        *,
        backend: Any = None,
    ) -> None:
        buf = np.array(values, dtype=DTYPE)
        if shape is None:
            shp = Shape(buf.shape)
        else:
            shp = Shape.of(shape)
            if buf.size != shp.numel():
                raise ShapeError(
                    f"data len {buf.size} != shape numel {shp.numel()} "
                    f"for shape {list(shp.dims)}"
                )
        self._data = buf.reshape(shp.dims)
        self._shape = shp
        self._backend = backend if backend is not None else default_backend()

    @classmethod
    def _from_buffer(cls, buf: np.ndarray, backend: Any) -> "Array":
        """
        Wrap a freshly computed buffer without copying.

        Backends call this for results they own outright; callers must not
        keep other references to `buf`.
        """
        out = cls.__new__(cls)
        data = np.ascontiguousarray(buf, dtype=DTYPE)
        out._data = data
        out._shape = Shape(data.shape)
        out._backend = backend
        return out

    # ------------------------------------------------------------------
    # Metadata / host interop
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def dims(self) -> Tuple[int, ...]:
        return self._shape.dims

    @property
    def ndim(self) -> int:
        return self._shape.rank

    @property
    def backend(self) -> Any:
        return self._backend

    def numel(self) -> int:
        return self._shape.numel()

    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the data as a NumPy array shaped like this array.
        """
        return self._data.copy()

    def tolist(self) -> Any:
        """Return the data as (nested) Python lists of floats."""
        return self._data.tolist()

    def flat(self) -> List[float]:
        """Return the data as a flat row-major list of floats."""
        return self._data.reshape(-1).tolist()

    def item(self) -> float:
        """
        Return the single element of a one-element array.

        Raises
        ------
        ShapeError
            If the array does not hold exactly one element.
        """
        if self.numel() != 1:
            raise ShapeError(
                f"item() requires a one-element array, got shape {list(self.dims)}"
            )
        return float(self._data.reshape(-1)[0])

    def copy(self) -> "Array":
        """
        Return an independent array with the same values, shape and backend.
        """
        return type(self)._from_buffer(self._data.copy(), self._backend)

    def zero_fill(self) -> None:
        """
        Overwrite every element with 0.0 in place.
        """
        self._data.fill(0.0)

    def _buffer(self) -> np.ndarray:
        """
        Return the owned buffer (read-only use by backends).
        """
        return self._data

    # ------------------------------------------------------------------
    # Backend delegation
    # ------------------------------------------------------------------
    def matmul(self, other: "Array") -> "Array":
        """Matrix multiply: ``self @ other`` for 2D operands."""
        return self._backend.matmul(self, _as_array(other, "matmul"))

    def add(self, other: "Array") -> "Array":
        return self._backend.add(self, _as_array(other, "add"))

    def sub(self, other: "Array") -> "Array":
        return self._backend.sub(self, _as_array(other, "sub"))

    def mul(self, other: "Array") -> "Array":
        return self._backend.mul(self, _as_array(other, "mul"))

    def div(self, other: "Array") -> "Array":
        return self._backend.div(self, _as_array(other, "div"))

    def add_broadcast(self, other: "Array") -> "Array":
        """Add a length-K vector to every row of this [N, K] matrix."""
        return self._backend.add_broadcast(self, _as_array(other, "add_broadcast"))

    def relu(self) -> "Array":
        return self._backend.relu(self)

    def sigmoid(self) -> "Array":
        return self._backend.sigmoid(self)

    def exp(self) -> "Array":
        return self._backend.exp(self)

    def log(self) -> "Array":
        return self._backend.log(self)

    def sum(self) -> "Array":
        """Reduce every element into a one-element array of shape [1]."""
        return self._backend.sum(self)

    def sum_dim(self, dim: int) -> "Array":
        """Reduce along `dim`, keeping it as a size-1 axis."""
        return self._backend.sum_dim(self, dim)

    def transpose(self) -> "Array":
        return self._backend.transpose(self)

    def scale(self, s: Number) -> "Array":
        return self._backend.scale(self, float(s))

    def reshape(self, shape: ShapeLike) -> "Array":
        return self._backend.reshape(self, shape)

    def softmax_last_dim(self) -> "Array":
        return self._backend.softmax_last_dim(self)

    def relu_backward(self, grad_out: "Array") -> "Array":
        """ReLU backward where `self` is the forward input."""
        return self._backend.relu_backward(_as_array(grad_out, "relu_backward"), self)

    def sigmoid_backward(self, grad_out: "Array") -> "Array":
        """Sigmoid backward where `self` is the forward output."""
        return self._backend.sigmoid_backward(
            _as_array(grad_out, "sigmoid_backward"), self
        )

    def softmax_backward(self, grad_out: "Array") -> "Array":
        """Softmax backward where `self` is the forward output."""
        return self._backend.softmax_backward(
            _as_array(grad_out, "softmax_backward"), self
        )

    # ------------------------------------------------------------------
    # Python operators
    # ------------------------------------------------------------------
    def __add__(self, other: "Array") -> "Array":
        return self.add(other)

    def __sub__(self, other: "Array") -> "Array":
        return self.sub(other)

    def __mul__(self, other: Union["Array", Number]) -> "Array":
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return self.mul(other)

    def __rmul__(self, other: Number) -> "Array":
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other: Union["Array", Number]) -> "Array":
        if isinstance(other, numbers.Real):
            return self.scale(1.0 / float(other))
        return self.div(other)

    def __matmul__(self, other: "Array") -> "Array":
        return self.matmul(other)

    def __neg__(self) -> "Array":
        return self.scale(-1.0)

    def __repr__(self) -> str:
        return f"Array(shape={list(self.dims)}, data={self._data.tolist()})"


def _as_array(x: Any, op: str) -> Array:
    if not isinstance(x, Array):
        raise TypeError(f"{op} expects an Array, got {type(x)!r}")
    return x
