"""
Domain-level optimizer contracts.

This module defines the `IOptimizer` protocol, the minimal interface required
by the training loop from optimizer implementations (e.g., SGD, Adam).

Notes
-----
- Optimizers update parameters from their stored gradients. How those
  gradients were computed (the graph engine) is outside this contract.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.
    """

    def step(self) -> None:
        """
        Apply one optimization step.

        Implementations skip parameters without a gradient and frozen
        parameters.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear gradients for all managed parameters.
        """
        ...

    @property
    def params(self) -> Iterable[object]:
        """
        Return the parameters managed by this optimizer.
        """
        ...
