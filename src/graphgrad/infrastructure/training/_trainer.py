"""
Training loop.

`Trainer` couples a `Module`, an optimizer and a loss. One step:

1. build a fresh `Graph` and add the input batch as a leaf;
2. record the model (`forward_graph`) and the loss into it;
3. clear parameter gradients and run `backward` from the loss;
4. copy each parameter leaf's gradient back onto its `Parameter`;
5. let the optimizer update the parameters.

The graph is discarded after every step.

Failures inside a step surface as `TrainingError`, with the original error
chained as its cause.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ...domain._errors import GraphGradError, TrainingError
from .._losses import cross_entropy_graph, mse_graph
from .._module import Module
from ..array._array import Array
from ..autograd._graph import Graph
from ..data._data_loader import DataLoader
from ..ops import OperatorRegistry
from ._history import History

logger = logging.getLogger(__name__)

LossGraphFn = Callable[[Graph, int, Array], int]

LOSSES: Dict[str, LossGraphFn] = {
    "mse": mse_graph,
    "cross_entropy": cross_entropy_graph,
}


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one training step.

    Attributes
    ----------
    loss : float
        Loss value before the parameter update.
    """

    loss: float


@dataclass(frozen=True)
class EpochResult:
    """
    Outcome of one pass over a loader.

    Attributes
    ----------
    loss : float
        Mean step loss, weighted by batch size.
    batches : int
        Number of steps taken.
    samples : int
        Number of samples seen.
    """

    loss: float
    batches: int
    samples: int


class Trainer:
    """
    Explicit training driver.

    Parameters
    ----------
    model : Module
        Model to train.
    optimizer : IOptimizer
        Optimizer managing (a subset of) the model's parameters.
    loss : str, optional
        ``"mse"`` (default) or ``"cross_entropy"`` (logits with one-hot
        targets).
    registry : OperatorRegistry, optional
        Registry for the per-step graphs.

    Raises
    ------
    ValueError
        If `loss` is not a known loss name.
    """

    def __init__(
        self,
        model: Module,
        optimizer: Any,
        *,
        loss: str = "mse",
        registry: Optional[OperatorRegistry] = None,
    ) -> None:
        if loss not in LOSSES:
            raise ValueError(
                f"unknown loss {loss!r}; expected one of {sorted(LOSSES)}"
            )
        self.model = model
        self.optimizer = optimizer
        self.loss = loss
        self._loss_fn = LOSSES[loss]
        self._registry = registry

    def step(self, x: Array, y: Array) -> StepResult:
        """
        Run one training step on a batch.

        Parameters
        ----------
        x : Array
            Input batch, e.g. (B, in_features).
        y : Array
            Target batch matching the model output.

        Raises
        ------
        TrainingError
            If graph construction, backward or the update fails.
        """
        try:
            g = Graph(self._registry)
            x_id = g.var(x)
            out_id, param_ids = self.model.forward_graph(g, x_id)
            loss_id = self._loss_fn(g, out_id, y)

            params = self.model.parameters()
            for p in params:
                p.zero_grad()

            g.backward(loss_id)

            for p, node_id in zip(params, param_ids):
                p.set_grad(g.grad(node_id))

            loss_val = g.data(loss_id).flat()[0]
            self.optimizer.step()
        except GraphGradError as e:
            raise TrainingError(f"training step failed: {e}") from e

        logger.debug("step loss=%.6f (graph nodes=%d)", loss_val, len(g))
        return StepResult(loss=loss_val)

    def run_epoch(self, loader: DataLoader) -> EpochResult:
        """
        Rewind `loader` and run one step per batch.

        Returns
        -------
        EpochResult
            Sample-weighted mean loss (0.0 for an empty pass), number of
            batches and number of samples.
        """
        loader.reset()
        loss_sum = 0.0
        seen = 0
        num_batches = 0
        for xb, yb in iter(loader.next_batch, None):
            bs = xb.dims[0] if xb.ndim else 1
            loss_sum += self.step(xb, yb).loss * bs
            seen += bs
            num_batches += 1
        return EpochResult(
            loss=loss_sum / seen if seen else 0.0,
            batches=num_batches,
            samples=seen,
        )

    def fit(self, loader: DataLoader, epochs: int = 1, verbose: int = 0) -> History:
        """
        Train for a fixed number of epochs.

        Parameters
        ----------
        loader : DataLoader
            Batch source; rewound at the start of every epoch.
        epochs : int, optional
            Number of epochs. Must be >= 1.
        verbose : int, optional
            If non-zero, print a one-line summary per epoch.

        Returns
        -------
        History
            Per-epoch ``loss`` (sample-weighted mean) and ``batches``.

        Raises
        ------
        ValueError
            If ``epochs < 1``.
        """
        if epochs < 1:
            raise ValueError("epochs must be >= 1")

        hist = History()
        for epoch_idx in range(epochs):
            res = self.run_epoch(loader)
            hist.append_epoch(epoch_idx, {"loss": res.loss, "batches": res.batches})

            if verbose:
                print(
                    f"Epoch {epoch_idx + 1}/{epochs} - "
                    f"loss: {res.loss:.6f} - seen: {res.samples}"
                )

        return hist
