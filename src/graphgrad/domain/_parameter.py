"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters used
by optimizers and the training loop. A parameter is long-lived and
updatable, unlike the arrays stored on graph nodes, which live only as long
as the graph that holds them.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ._array import IArray


@runtime_checkable
class IParameter(Protocol):
    """
    Domain-level interface for trainable parameters.

    Notes
    -----
    - Parameters may be frozen via `requires_grad = False`; optimizers skip
      frozen parameters.
    - `grad` is populated by the training loop after a backward pass.
    """

    @property
    def data(self) -> IArray:
        """
        Return the current parameter value.
        """
        ...

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this parameter is trainable.
        """
        ...

    @property
    def grad(self) -> Optional[IArray]:
        """
        Return the stored gradient, or None if absent.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear the stored gradient.
        """
        ...
