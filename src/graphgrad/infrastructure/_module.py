"""
Infrastructure module base class.

This module provides a concrete `Module` implementation that satisfies the
domain-level `IModule` protocol. It implements common conveniences used by
layers, including:

- parameter and submodule registration by attribute assignment
- recursive parameter traversal (`parameters`, `named_parameters`)
- `__call__` forwarding to `forward` for ergonomic inference
- positional state dicts (`state_dict`, `load_state_dict`)

Subclasses implement two computations over the same parameters:

- `forward(x)`: plain inference on arrays, no graph involved;
- `forward_graph(graph, x_id)`: the same computation recorded into a graph,
  returning the output node id and the parameter leaf ids in
  `parameters()` order.
"""

from __future__ import annotations

import warnings
from abc import abstractmethod
from typing import Any, Iterator, List, Sequence, Tuple

from typing_extensions import Self

from ..domain._errors import ShapeError
from ..domain._module import IModule
from ._parameter import Parameter, ParameterState
from .array._array import Array


class Module(IModule):
    """
    Infrastructure base class for layers and models.

    Attributes
    ----------
    _parameters : Dict[str, Parameter]
        Parameters owned directly by this module, in registration order.
    _modules : Dict[str, Module]
        Child modules, in registration order.

    Notes
    -----
    Assigning a `Parameter` or `Module` to an attribute registers it, e.g.:

        self.weight = Parameter(...)
        self.block = Linear(...)

    Own parameters come before those of child modules in `parameters()`.
    """

    def __init__(self) -> None:
        super().__setattr__("_parameters", {})
        super().__setattr__("_modules", {})

    def __setattr__(self, name: str, value: Any) -> None:
        if name in {"_parameters", "_modules"}:
            super().__setattr__(name, value)
            return

        if value is None:
            self._parameters.pop(name, None)
            self._modules.pop(name, None)
        elif isinstance(value, Parameter):
            self._parameters[name] = value
        elif isinstance(value, Module):
            self._modules[name] = value

        super().__setattr__(name, value)

    def named_parameters(self, prefix: str = "") -> Iterator[Tuple[str, Parameter]]:
        """
        Return an iterator over (name, parameter) pairs (recursive).

        Parameters
        ----------
        prefix : str
            Prefix to prepend to parameter names (used for recursion).
        """
        base = prefix + "." if prefix else ""

        for name, p in self._parameters.items():
            yield (f"{base}{name}", p)

        for child_name, child in self._modules.items():
            yield from child.named_parameters(f"{base}{child_name}")

    def parameters(self) -> List[Parameter]:
        return [p for _, p in self.named_parameters()]

    @abstractmethod
    def forward(self, x: Array) -> Array:
        """
        Run inference on `x` without building a graph.
        """
        raise NotImplementedError

    @abstractmethod
    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        """
        Record the forward computation into `graph`.

        Each parameter's current value is added as a fresh leaf.

        Returns
        -------
        tuple[int, list[int]]
            Output node id and the parameter leaf ids, in `parameters()`
            order.
        """
        raise NotImplementedError

    def __call__(self, x: Array) -> Array:
        return self.forward(x)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def state_dict(self) -> List[ParameterState]:
        """
        Snapshot every parameter, in `parameters()` order.

        States are named with the fully qualified parameter name.
        """
        states = []
        for name, p in self.named_parameters():
            s = p.to_state()
            s.name = name
            states.append(s)
        return states

    def load_state_dict(self, states: Sequence[ParameterState]) -> Self:
        """
        Load parameter values by position.

        Parameters
        ----------
        states : Sequence[ParameterState]
            One state per parameter, in `parameters()` order.

        Returns
        -------
        Module
            This module.

        Raises
        ------
        ValueError
            If the number of states differs from the number of parameters.
        ShapeError
            If a state's shape differs from its parameter's.

        Notes
        -----
        Nothing is modified unless every state is compatible. A state whose
        name differs from the parameter it is loaded into triggers a warning.
        """
        named = list(self.named_parameters())
        if len(states) != len(named):
            raise ValueError(
                f"state dict has {len(states)} entries, "
                f"module has {len(named)} parameters"
            )

        for (name, p), s in zip(named, states):
            if tuple(s.shape) != p.data.dims:
                raise ShapeError(
                    f"state {s.name!r} has shape {list(s.shape)}, "
                    f"parameter {name!r} has shape {list(p.data.dims)}"
                )

        for (name, p), s in zip(named, states):
            if s.name and s.name != name:
                warnings.warn(
                    f"loading state {s.name!r} into parameter {name!r}",
                    RuntimeWarning,
                    stacklevel=2,
                )
            p.data = Array(s.data, s.shape, backend=p.data.backend)
            p.zero_grad()
        return self

    def extra_repr(self) -> str:
        return ""

    def __repr__(self) -> str:
        lines = [f"{type(self).__name__}({self.extra_repr()}"]
        for name, m in self._modules.items():
            child = repr(m).replace("\n", "\n  ")
            lines.append(f"  ({name}): {child}")
        if len(lines) == 1:
            return lines[0] + ")"
        return "\n".join(lines) + "\n)"
