"""
Plain gradient descent.

`SGD` moves every trainable parameter against its stored gradient by a fixed
step size. Gradients are produced elsewhere (a `Trainer` copies them out of
the graph with `Parameter.set_grad`), so the optimizer never sees a graph.

Design notes
------------
- Frozen parameters and parameters without a gradient are left untouched.
- `data` is reassigned, never written in place; arrays are values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .._parameter import Parameter
from ._common import updatable


@dataclass
class SGD:
    """
    Gradient descent with optional coupled L2 decay.

    Update rule
    -----------
        g <- g + weight_decay * p      (only when weight_decay > 0)
        p <- p - lr * g

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to manage. The iterable is materialized into a list.
    lr : float, optional
        Step size, > 0. Defaults to 1e-3.
    weight_decay : float, optional
        L2 coefficient, >= 0. Defaults to 0.0.

    Raises
    ------
    ValueError
        If a hyperparameter is out of range.
    """

    params: List[Parameter]
    lr: float = 1e-3
    weight_decay: float = 0.0

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        weight_decay: float = 0.0,
    ) -> None:
        if lr <= 0.0:
            raise ValueError(f"SGD lr must be positive, got {lr}")
        if weight_decay < 0.0:
            raise ValueError(f"SGD weight_decay must be non-negative, got {weight_decay}")
        self.params = list(params)
        self.lr = float(lr)
        self.weight_decay = float(weight_decay)

    def zero_grad(self) -> None:
        for p in self.params:
            p.zero_grad()

    def step(self) -> None:
        """
        Update every trainable parameter once.

        Raises
        ------
        OptimizerError
            If a gradient's shape differs from its parameter's.
        """
        for p, g in updatable(self.params):
            if self.weight_decay:
                g = g + self.weight_decay * p.data
            p.data = p.data - self.lr * g
