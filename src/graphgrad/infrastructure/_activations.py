"""
Module-based activation layers.

Parameter-free `Module` wrappers around the ReLU and Sigmoid operators, so
activations compose with layers in models. `forward` applies the array
kernel directly; `forward_graph` records the matching graph operator.
"""

from typing import Any, List, Tuple

from ._module import Module
from .array._array import Array


class ReLU(Module):
    """
    ReLU activation module: ``max(0, x)`` elementwise.
    """

    def forward(self, x: Array) -> Array:
        return x.relu()

    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        return graph.relu(x_id), []


class Sigmoid(Module):
    """
    Sigmoid activation module: ``1 / (1 + exp(-x))`` elementwise.
    """

    def forward(self, x: Array) -> Array:
        return x.sigmoid()

    def forward_graph(self, graph: Any, x_id: int) -> Tuple[int, List[int]]:
        return graph.sigmoid(x_id), []
