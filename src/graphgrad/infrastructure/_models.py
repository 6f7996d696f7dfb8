"""
Model and container implementations.

This module defines model-level compositions built on `Module`:

- `Sequential`: applies child modules in order;
- `MLP2`: the two-layer perceptron ``Linear -> ReLU -> Linear``.

Both record their children's graphs in order and concatenate the returned
parameter ids, which matches the order of `parameters()`.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

from ._activations import ReLU
from ._linear import Linear
from ._module import Module
from .array._array import Array


class Sequential(Module):
    """
    Sequential container module.

    Applies a sequence of child modules in order:

        y = L_n(...L_2(L_1(x)))

    Parameters
    ----------
    *layers : Module
        Zero or more modules, in application order.
    """

    def __init__(self, *layers: Module) -> None:
        super().__init__()
        self._layers: List[Module] = []
        for layer in layers:
            self.add(layer)

    def add(self, layer: Module, name: Optional[str] = None) -> None:
        """
        Append a module to the container.

        Parameters
        ----------
        layer : Module
            The module to append.
        name : str, optional
            Explicit child name. Defaults to the layer's index ("0", "1", ...).

        Raises
        ------
        TypeError
            If `layer` is not a `Module`.
        ValueError
            If the name conflicts with an existing child.
        """
        if not isinstance(layer, Module):
            raise TypeError(f"Sequential.add expects a Module, got: {type(layer)}")

        layer_name = name if name is not None else str(len(self._layers))
        if layer_name in self._modules:
            raise ValueError(f"Duplicate layer name '{layer_name}' in Sequential.")

        self._layers.append(layer)
        self._modules[layer_name] = layer

    def forward(self, x: Array) -> Array:
        out = x
        for layer in self._layers:
            out = layer(out)
        return out

    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        out = x_id
        param_ids: List[int] = []
        for layer in self._layers:
            out, ids = layer.forward_graph(graph, out)
            param_ids.extend(ids)
        return out, param_ids

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Module]:
        return iter(self._layers)

    def __getitem__(self, idx: int) -> Module:
        return self._layers[idx]


class MLP2(Module):
    """
    Two-layer perceptron: ``linear2(relu(linear1(x)))``.

    Parameters
    ----------
    in_features : int
        Input width.
    hidden : int
        Hidden width.
    out_features : int
        Output width.
    backend : IBackend, optional
        Backend for parameter storage.

    Notes
    -----
    Parameters are ``[linear1.weight, linear1.bias, linear2.weight,
    linear2.bias]``, all zero until `init_xavier` is called.
    """

    def __init__(
        self,
        in_features: int,
        hidden: int,
        out_features: int,
        *,
        backend: Any = None,
    ) -> None:
        super().__init__()
        self.linear1 = Linear(in_features, hidden, name="linear1", backend=backend)
        self.act = ReLU()
        self.linear2 = Linear(hidden, out_features, name="linear2", backend=backend)

    def init_xavier(self, rng: np.random.Generator) -> "MLP2":
        """
        Xavier-initialize both layers from `rng`. Returns the model.
        """
        self.linear1.init_xavier(rng)
        self.linear2.init_xavier(rng)
        return self

    def forward(self, x: Array) -> Array:
        return self.linear2(self.act(self.linear1(x)))

    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        h, param_ids = self.linear1.forward_graph(graph, x_id)
        h, _ = self.act.forward_graph(graph, h)
        out, p2 = self.linear2.forward_graph(graph, h)
        return out, param_ids + p2
