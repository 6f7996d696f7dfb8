"""
Autograd engine: computation graph, backward pass and gradient checking.
"""

from ._graph import Graph, Node, NodeId
from ._check import (
    DEFAULT_ATOL,
    DEFAULT_EPS,
    DEFAULT_RTOL,
    check_gradients,
    numerical_grad,
)

__all__ = [
    Graph.__name__,
    Node.__name__,
    "NodeId",
    "DEFAULT_EPS",
    "DEFAULT_RTOL",
    "DEFAULT_ATOL",
    check_gradients.__name__,
    numerical_grad.__name__,
]
