"""
Array interface definitions.

This module defines the domain-level interface for dense array values using
structural typing. An array is pure data: a float buffer, a shape, and the
backend that performs its arithmetic. It carries no gradient or graph state;
those live on graph nodes.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class IArray(Protocol):
    """
    Array interface.

    Notes
    -----
    - Arrays are value types: every operation returns a new array.
    - The only in-place mutation is `zero_fill`, used for gradient resets.
    """

    @property
    def shape(self) -> Any:
        """
        Return the array shape.

        Returns
        -------
        Shape
            Immutable shape descriptor.
        """
        ...

    @property
    def dims(self) -> Tuple[int, ...]:
        """
        Return the shape as a plain tuple of ints.
        """
        ...

    @property
    def backend(self) -> Any:
        """
        Return the numeric-kernel backend that produced this array.
        """
        ...

    def numel(self) -> int:
        """
        Return the number of elements.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return a copy of the data as a NumPy array of the array's shape.
        """
        ...

    def copy(self) -> "IArray":
        """
        Return an independent array holding the same values.
        """
        ...

    def zero_fill(self) -> None:
        """
        Overwrite every element with 0.0 in place.
        """
        ...
