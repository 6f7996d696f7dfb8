"""
Linear (fully-connected) layer implementation.

This module provides `Linear`, a trainable `Module` performing an affine
projection of 2D, batch-major inputs:

    y = x @ W + b

Shape conventions
-----------------
- x : (batch, in_features)
- W : (in_features, out_features)
- b : (out_features,)
- y : (batch, out_features)

The weight is stored input-major so the forward pass is a plain matmul, and
the bias is added with the graph's row-broadcast operator.

Design note
-----------
Parameters start at zero. `init_xavier(rng)` (or `init_he(rng)`) draws
weights from an explicit generator, so initialization is reproducible and
independent of construction.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

import numpy as np

from ._module import Module
from ._parameter import Parameter
from .array._array import Array, default_backend
from .utils.weight_initializer import WeightInitializer


class Linear(Module):
    """
    Fully-connected layer: ``y = x @ W + b``.

    Parameters
    ----------
    in_features : int
        Number of input features per example.
    out_features : int
        Number of output features per example.
    name : str, optional
        Prefix for parameter names (``"<name>.weight"``, ``"<name>.bias"``).
    backend : IBackend, optional
        Backend for parameter storage.

    Attributes
    ----------
    weight : Parameter
        Weight matrix of shape (in_features, out_features).
    bias : Parameter
        Bias vector of shape (out_features,).

    Raises
    ------
    ValueError
        If `in_features` or `out_features` is not positive.
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        *,
        name: Optional[str] = None,
        backend: Any = None,
    ) -> None:
        super().__init__()
        if in_features <= 0 or out_features <= 0:
            raise ValueError("in_features and out_features must be positive integers")

        self.in_features = int(in_features)
        self.out_features = int(out_features)
        self.name = name or ""
        prefix = f"{self.name}." if self.name else ""
        backend = backend if backend is not None else default_backend()

        self.weight = Parameter(
            backend.zeros((self.in_features, self.out_features)),
            name=f"{prefix}weight",
        )
        self.bias = Parameter(backend.zeros((self.out_features,)), name=f"{prefix}bias")

    def _reset_parameters(self, initializer: str, rng: np.random.Generator) -> None:
        backend = self.weight.data.backend
        self.weight.data = WeightInitializer(initializer)(
            self.weight.shape, rng=rng, backend=backend
        )
        self.bias.data = WeightInitializer("zeros")(
            self.bias.shape, rng=rng, backend=backend
        )

    def init_xavier(self, rng: np.random.Generator) -> "Linear":
        """
        Xavier-uniform weights, zero bias. Returns the layer.
        """
        self._reset_parameters("xavier_uniform", rng)
        return self

    def init_he(self, rng: np.random.Generator) -> "Linear":
        """
        He-uniform weights, zero bias. Returns the layer.
        """
        self._reset_parameters("he_uniform", rng)
        return self

    def forward(self, x: Array) -> Array:
        """
        Compute ``x @ W + b``.

        Raises
        ------
        ShapeMismatchError
            If `x` is not 2D or its feature dimension is not `in_features`.
        """
        return x.matmul(self.weight.data).add_broadcast(self.bias.data)

    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        w_id = graph.var(self.weight.data)
        b_id = graph.var(self.bias.data)
        out = graph.add_broadcast(graph.matmul(x_id, w_id), b_id)
        return out, [w_id, b_id]

    def extra_repr(self) -> str:
        return f"in_features={self.in_features}, out_features={self.out_features}"
