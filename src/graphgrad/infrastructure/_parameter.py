"""
Concrete trainable parameter implementation.

This module defines `Parameter`, an infrastructure-level implementation of the
domain contract `IParameter`, and `ParameterState`, its serializable form.

A `Parameter` is a long-lived, updatable value owned by a module. Graph nodes
never hold parameters directly: each training step copies a parameter's
current `data` into a fresh leaf, runs backward, and hands the leaf's gradient
back with `set_grad`.

Design notes
------------
- `data` is replaced, never mutated, on update; arrays are values.
- The `requires_grad` flag freezes a parameter without changing module
  structure; optimizers skip frozen parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from typing_extensions import Self

from ..domain._errors import ShapeError
from ..domain._parameter import IParameter
from ._shape import Shape
from .array._array import Array


@dataclass
class ParameterState:
    """
    Serializable snapshot of a parameter.

    Attributes
    ----------
    name : str
        Parameter name (may be empty).
    shape : tuple[int, ...]
        Parameter dimensions.
    data : list[float]
        Values in row-major order.
    """

    name: str
    shape: Tuple[int, ...]
    data: List[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.shape = tuple(int(d) for d in self.shape)
        expected = Shape(self.shape).numel()
        if len(self.data) != expected:
            raise ShapeError(
                f"parameter state {self.name!r}: {len(self.data)} values "
                f"for shape {list(self.shape)} ({expected} expected)"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "shape": list(self.shape), "data": list(self.data)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ParameterState":
        """
        Build a state from its dict form.

        Raises
        ------
        KeyError
            If a required key is missing.
        ShapeError
            If the data length does not match the shape.
        """
        return cls(
            name=str(d.get("name", "")),
            shape=tuple(d["shape"]),
            data=[float(v) for v in d["data"]],
        )


class Parameter(IParameter):
    """
    Trainable value wrapper.

    Parameters
    ----------
    data : Array
        Initial value.
    name : str, optional
        Human-readable name, used in state dicts.
    requires_grad : bool, optional
        Whether optimizers should update this parameter. Defaults to True.
    """

    def __init__(
        self,
        data: Array,
        *,
        name: Optional[str] = None,
        requires_grad: bool = True,
    ) -> None:
        if not isinstance(data, Array):
            raise TypeError(f"Parameter expects an Array, got {type(data)!r}")
        self._data = data
        self.name = name or ""
        self._requires_grad = bool(requires_grad)
        self._grad: Optional[Array] = None

    @property
    def data(self) -> Array:
        return self._data

    @data.setter
    def data(self, value: Array) -> None:
        """
        Replace the parameter value.

        Raises
        ------
        ShapeError
            If `value` has a different shape.
        """
        if not isinstance(value, Array):
            raise TypeError(f"Parameter data must be an Array, got {type(value)!r}")
        if value.shape != self._data.shape:
            raise ShapeError(
                f"cannot assign shape {value.shape} to parameter "
                f"{self.name!r} of shape {self._data.shape}"
            )
        self._data = value

    @property
    def shape(self) -> Shape:
        return self._data.shape

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        self._requires_grad = bool(value)

    @property
    def frozen(self) -> bool:
        """True when the parameter is excluded from updates."""
        return not self._requires_grad

    @property
    def grad(self) -> Optional[Array]:
        return self._grad

    def set_grad(self, grad: Optional[Array]) -> None:
        """
        Overwrite the stored gradient.

        Parameters
        ----------
        grad : Array | None
            New gradient, or None to clear.
        """
        self._grad = grad

    def zero_grad(self) -> None:
        self._grad = None

    def to_state(self) -> ParameterState:
        return ParameterState(
            name=self.name, shape=self._data.dims, data=self._data.flat()
        )

    @classmethod
    def from_state(cls, state: ParameterState, *, backend: Any = None) -> Self:
        """
        Build a parameter from a saved state.
        """
        return cls(
            Array(state.data, state.shape, backend=backend), name=state.name
        )

    def __repr__(self) -> str:
        return (
            f"Parameter(name={self.name!r}, shape={self._data.shape}, "
            f"requires_grad={self._requires_grad})"
        )
