"""
Loss functions.

Each loss comes in two forms:

- an array form (`mse`, `cross_entropy`) for evaluation, returning a
  one-element array;
- a graph form (`mse_graph`, `cross_entropy_graph`) that records the loss
  into a graph from primitive operators and returns the loss node id, so
  `Graph.backward` differentiates it with no dedicated loss kernel.

Constant factors (1/n, -1/B) enter the graph as one-element leaves combined
with `mul`; the target is likewise a leaf whose gradient is simply ignored.

Notes
-----
Cross entropy takes logits and one-hot (or probability) targets of shape
(B, C). It is computed as ``log(softmax(logits))`` without a fused
log-sum-exp, so extremely confident logits can underflow to ``log(0)``.
"""

from __future__ import annotations

from typing import Any

from ..domain._errors import ShapeMismatchError
from .array._array import Array


def _require_same_shape(op: str, pred: Array, target: Array) -> None:
    if pred.shape != target.shape:
        raise ShapeMismatchError(op, pred.dims, target.dims)


def _constant(graph: Any, value: float, backend: Any) -> int:
    return graph.var(backend.full((1,), value))


def mse(pred: Array, target: Array) -> Array:
    """
    Mean squared error: ``sum((pred - target)^2) / n``.

    Returns
    -------
    Array
        One-element array of shape [1].

    Raises
    ------
    ShapeMismatchError
        If `pred` and `target` differ in shape.
    """
    _require_same_shape("mse", pred, target)
    diff = pred - target
    return (diff * diff).sum().scale(1.0 / pred.numel())


def mse_graph(graph: Any, pred_id: int, target: Array) -> int:
    """
    Record mean squared error into `graph`.

    Parameters
    ----------
    graph : Graph
        Graph holding the prediction node.
    pred_id : int
        Prediction node id.
    target : Array
        Target values, same shape as the prediction.

    Returns
    -------
    int
        Loss node id (shape [1]).
    """
    pred = graph.data(pred_id)
    _require_same_shape("mse_graph", pred, target)
    target_id = graph.var(target)
    diff = graph.sub(pred_id, target_id)
    total = graph.sum(graph.mul(diff, diff))
    return graph.mul(total, _constant(graph, 1.0 / pred.numel(), pred.backend))


def cross_entropy(logits: Array, target: Array) -> Array:
    """
    Mean softmax cross entropy over a batch.

    ``-sum(target * log(softmax(logits))) / B`` for logits of shape (B, C).

    Raises
    ------
    ShapeMismatchError
        If the shapes differ or the logits are not 2D.
    """
    _require_same_shape("cross_entropy", logits, target)
    if logits.ndim != 2:
        raise ShapeMismatchError(
            "cross_entropy", logits.dims, detail="logits must be (batch, classes)"
        )
    log_p = logits.softmax_last_dim().log()
    return (target * log_p).sum().scale(-1.0 / logits.dims[0])


def cross_entropy_graph(graph: Any, logits_id: int, target: Array) -> int:
    """
    Record mean softmax cross entropy into `graph`.

    Parameters
    ----------
    graph : Graph
        Graph holding the logits node.
    logits_id : int
        Logits node id, shape (B, C).
    target : Array
        One-hot targets, shape (B, C).

    Returns
    -------
    int
        Loss node id (shape [1]).
    """
    logits = graph.data(logits_id)
    _require_same_shape("cross_entropy_graph", logits, target)
    if logits.ndim != 2:
        raise ShapeMismatchError(
            "cross_entropy_graph",
            logits.dims,
            detail="logits must be (batch, classes)",
        )
    target_id = graph.var(target)
    log_p = graph.log(graph.softmax(logits_id))
    total = graph.sum(graph.mul(target_id, log_p))
    return graph.mul(total, _constant(graph, -1.0 / logits.dims[0], logits.backend))
