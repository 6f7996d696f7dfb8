"""
Module (layer) interface definitions.

This module defines the domain-level interface for model components using
structural subtyping via `typing.Protocol`. A module owns parameters and can
run either as plain inference (array in, array out) or by recording its
computation into a graph so gradients can flow back to its parameters.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Protocol, Tuple, runtime_checkable

from ._array import IArray
from ._parameter import IParameter


@runtime_checkable
class IModule(Protocol):
    """
    Domain-level module interface.

    Notes
    -----
    - `forward_graph` returns the parameter node ids in the same order as
      `parameters()`, so the training loop can copy gradients back.
    """

    def parameters(self) -> Iterable[IParameter]:
        """
        Return the trainable parameters of the module.
        """
        ...

    def forward(self, x: IArray) -> IArray:
        """
        Run inference without building a graph.
        """
        ...

    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        """
        Record the forward computation into `graph`.

        Parameters
        ----------
        graph : Graph
            Graph to append nodes to.
        x_id : int
            Node id of the module input (already in the graph).

        Returns
        -------
        tuple[int, list[int]]
            The output node id and the parameter leaf ids, in `parameters()`
            order.
        """
        ...
