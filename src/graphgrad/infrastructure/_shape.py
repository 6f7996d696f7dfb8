"""
Array shape descriptor.

A `Shape` is an immutable, ordered sequence of non-negative dimension sizes.
It defines the element count of an array (product of dimensions, 1 for a
rank-0 shape) and equality for elementwise compatibility checks.
"""

from __future__ import annotations

import operator
from typing import Iterable, Iterator, Tuple, Union

from ..domain._errors import ShapeError


ShapeLike = Union["Shape", Iterable[int]]


class Shape:
    """
    Immutable shape of an array.

    Parameters
    ----------
    dims : Iterable[int]
        Dimension sizes. Each must be an integer >= 0.

    Raises
    ------
    ShapeError
        If any dimension is negative or not an integer.

    Notes
    -----
    A `Shape` compares equal to another `Shape` or to a plain tuple/list with
    the same dimensions, which keeps assertions in tests short.
    """

    __slots__ = ("_dims",)

    def __init__(self, dims: Iterable[int]) -> None:
        out = []
        for d in dims:
            try:
                v = operator.index(d)
            except TypeError as e:
                raise ShapeError(
                    f"shape dimensions must be integers, got {d!r}"
                ) from e
            if v < 0:
                raise ShapeError(f"shape dimensions must be >= 0, got {v}")
            out.append(v)
        self._dims: Tuple[int, ...] = tuple(out)

    @classmethod
    def of(cls, shape: ShapeLike) -> "Shape":
        """
        Coerce a shape-like value into a `Shape`.
        """
        if isinstance(shape, Shape):
            return shape
        return cls(shape)

    @property
    def dims(self) -> Tuple[int, ...]:
        """Dimension sizes as a tuple."""
        return self._dims

    @property
    def rank(self) -> int:
        """Number of dimensions."""
        return len(self._dims)

    def numel(self) -> int:
        """Total number of elements (1 for a rank-0 shape)."""
        n = 1
        for d in self._dims:
            n *= d
        return n

    def same_as(self, other: ShapeLike) -> bool:
        """Return True if `other` has exactly the same dimensions."""
        return self._dims == Shape.of(other).dims

    def is_scalar(self) -> bool:
        """Return True for shapes holding at most one element."""
        return self.numel() <= 1

    def __len__(self) -> int:
        return len(self._dims)

    def __iter__(self) -> Iterator[int]:
        return iter(self._dims)

    def __getitem__(self, idx: int) -> int:
        return self._dims[idx]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Shape):
            return self._dims == other._dims
        if isinstance(other, (tuple, list)):
            return self._dims == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"Shape{list(self._dims)}"

    def __str__(self) -> str:
        return str(list(self._dims))
