"""
Finite-difference gradient checking.

`numerical_grad` estimates the gradient of a scalar function of one array by
central differences:

    df/dx_i ~= (f(x + eps * e_i) - f(x - eps * e_i)) / (2 * eps)

`check_gradients` builds a loss graph, runs `Graph.backward`, and compares
the gradient of every input leaf against that estimate. It is the harness
used to validate operator backward kernels.

Notes
-----
Arrays are float32, so the default step and tolerances are loose. Keep
inputs and losses of order one when checking.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

import numpy as np

from ...domain._errors import GradientCheckError
from ..array._array import Array
from ..ops import OperatorRegistry
from ._graph import Graph, NodeId

DEFAULT_EPS = 1e-4
DEFAULT_RTOL = 1e-2
DEFAULT_ATOL = 1e-2

BuildLoss = Callable[[Graph, Sequence[NodeId]], NodeId]


def numerical_grad(
    x: Array, f: Callable[[Array], float], eps: float = DEFAULT_EPS
) -> np.ndarray:
    """
    Central-difference gradient of `f` with respect to `x`.

    Parameters
    ----------
    x : Array
        Point at which to differentiate.
    f : Callable[[Array], float]
        Scalar function of an array of the same shape as `x`.
    eps : float
        Perturbation step.

    Returns
    -------
    np.ndarray
        Gradient estimate with the same shape as `x`.
    """
    base = x.to_numpy().astype(np.float64).reshape(-1)
    grad = np.zeros(base.size, dtype=np.float64)
    for i in range(base.size):
        plus = base.copy()
        minus = base.copy()
        plus[i] += eps
        minus[i] -= eps
        f_plus = f(Array(plus, x.shape, backend=x.backend))
        f_minus = f(Array(minus, x.shape, backend=x.backend))
        grad[i] = (float(f_plus) - float(f_minus)) / (2.0 * eps)
    return grad.reshape(x.dims)


def _loss_value(
    build_loss: BuildLoss,
    inputs: Sequence[Array],
    registry: Optional[OperatorRegistry],
) -> float:
    g = Graph(registry)
    ids = [g.var(a) for a in inputs]
    return float(g.data(build_loss(g, ids)).flat()[0])


def check_gradients(
    build_loss: BuildLoss,
    inputs: Sequence[Array],
    *,
    eps: float = DEFAULT_EPS,
    rtol: float = DEFAULT_RTOL,
    atol: float = DEFAULT_ATOL,
    registry: Optional[OperatorRegistry] = None,
) -> List[np.ndarray]:
    """
    Compare autograd gradients with finite-difference estimates.

    Parameters
    ----------
    build_loss : Callable[[Graph, Sequence[int]], int]
        Receives a fresh graph and the leaf ids of `inputs` (in order) and
        returns the id of the loss node. The first element of the loss value
        is treated as the scalar being differentiated.
    inputs : Sequence[Array]
        Input values, one leaf each.
    eps : float
        Finite-difference step.
    rtol, atol : float
        An element fails only when ``|a - n| > atol`` and
        ``|a - n| > rtol * max(|n|, 1e-8)``.
    registry : OperatorRegistry, optional
        Registry for the graphs built during the check.

    Returns
    -------
    list[np.ndarray]
        The analytic gradients, one per input.

    Raises
    ------
    GradientCheckError
        If an input receives no gradient or any element disagrees.
    """
    g = Graph(registry)
    input_ids = [g.var(a) for a in inputs]
    loss_id = build_loss(g, input_ids)
    g.backward(loss_id)

    analytic_grads: List[np.ndarray] = []
    for idx, (input_id, x) in enumerate(zip(input_ids, inputs)):
        grad = g.grad(input_id)
        if grad is None:
            raise GradientCheckError(
                idx, -1, float("nan"), float("nan"),
                detail=f"missing grad at input {idx}",
            )
        analytic = grad.to_numpy().astype(np.float64)

        def f(perturbed: Array, idx: int = idx) -> float:
            trial = list(inputs)
            trial[idx] = perturbed
            return _loss_value(build_loss, trial, registry)

        numerical = numerical_grad(x, f, eps)

        if analytic.size != numerical.size:
            raise GradientCheckError(
                idx, -1, float(analytic.size), float(numerical.size),
                detail=(
                    f"grad len mismatch input {idx}: "
                    f"{analytic.size} vs {numerical.size}"
                ),
            )
        a_flat = analytic.reshape(-1)
        n_flat = numerical.reshape(-1)
        for j, (a, n) in enumerate(zip(a_flat, n_flat)):
            diff = abs(a - n)
            if diff > atol and diff > rtol * max(abs(n), 1e-8):
                raise GradientCheckError(idx, j, float(a), float(n))
        analytic_grads.append(analytic)
    return analytic_grads
