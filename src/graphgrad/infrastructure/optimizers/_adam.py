"""
Adam: adaptive moment estimation.

Each trainable parameter gets running estimates of the gradient mean (first
moment) and uncentred variance (second moment), both bias-corrected by the
parameter's own step count. The estimates are float32 NumPy buffers created
on a parameter's first update and keyed by parameter identity.

Design notes
------------
- A parameter that is frozen or has no gradient does not advance its step
  count.
- The new value is written back through the parameter's own backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .._parameter import Parameter
from ._common import updatable


@dataclass
class _Moments:
    """Moment estimates and step count of one parameter."""

    t: int
    m: np.ndarray
    v: np.ndarray

    @classmethod
    def zeros(cls, dims: Tuple[int, ...]) -> "_Moments":
        return cls(
            t=0,
            m=np.zeros(dims, dtype=np.float32),
            v=np.zeros(dims, dtype=np.float32),
        )


@dataclass
class Adam:
    """
    Adam with optional coupled L2 decay (not AdamW).

    Update rule, at per-parameter step ``t``
    ----------------------------------------
        g     <- g + weight_decay * p            (only when weight_decay > 0)
        m     <- b1 * m + (1 - b1) * g
        v     <- b2 * v + (1 - b2) * g^2
        p     <- p - lr * (m / (1 - b1^t)) / (sqrt(v / (1 - b2^t)) + eps)

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to manage. The iterable is materialized into a list.
    lr : float, optional
        Step size, > 0. Defaults to 1e-3.
    betas : tuple[float, float], optional
        Moment decay rates ``(b1, b2)``, each strictly between 0 and 1.
    eps : float, optional
        Added to the denominator, > 0. Defaults to 1e-8.
    weight_decay : float, optional
        L2 coefficient, >= 0. Defaults to 0.0.

    Raises
    ------
    ValueError
        If a hyperparameter is out of range.
    """

    params: List[Parameter]
    lr: float = 1e-3
    betas: Tuple[float, float] = (0.9, 0.999)
    eps: float = 1e-8
    weight_decay: float = 0.0

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        betas: Tuple[float, float] = (0.9, 0.999),
        eps: float = 1e-8,
        weight_decay: float = 0.0,
    ) -> None:
        b1, b2 = (float(b) for b in betas)
        if lr <= 0.0:
            raise ValueError(f"Adam lr must be positive, got {lr}")
        if not (0.0 < b1 < 1.0 and 0.0 < b2 < 1.0):
            raise ValueError(f"Adam betas must lie in (0, 1), got {tuple(betas)}")
        if eps <= 0.0:
            raise ValueError(f"Adam eps must be positive, got {eps}")
        if weight_decay < 0.0:
            raise ValueError(f"Adam weight_decay must be non-negative, got {weight_decay}")

        self.params = list(params)
        self.lr = float(lr)
        self.betas = (b1, b2)
        self.eps = float(eps)
        self.weight_decay = float(weight_decay)
        self._state: Dict[int, _Moments] = {}

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
        b1, b2 = self.betas

        for p, g in updatable(self.params):
            st = self._state.get(id(p))
            if st is None:
                st = self._state[id(p)] = _Moments.zeros(p.data.dims)
            st.t += 1

            w = p.data.to_numpy()
            g_eff = g.to_numpy()
            if self.weight_decay:
                g_eff = g_eff + self.weight_decay * w

            st.m = b1 * st.m + (1.0 - b1) * g_eff
            st.v = b2 * st.v + (1.0 - b2) * np.square(g_eff)

            m_hat = st.m / (1.0 - b1**st.t)
            v_hat = st.v / (1.0 - b2**st.t)
            p.data = p.data.backend.from_numpy(
                w - self.lr * m_hat / (np.sqrt(v_hat) + self.eps)
            )
