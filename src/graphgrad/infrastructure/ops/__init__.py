"""
Operator catalogue public API.

Importing this package registers every built-in operator with
`OperatorRegistry` (import side effects of the operator modules) and exposes
`default_registry()`, the shared registry used by graphs that are not given
one explicitly.
"""

from functools import lru_cache

from ._registry import OperatorRegistry, OpId
from ._arithmetic import Add, AddBroadcast, Mul, Sub
from ._matmul import MatMul
from ._activations import ReLU, Sigmoid, Softmax
from ._reduction import Log, Sum


@lru_cache(maxsize=None)
def default_registry() -> OperatorRegistry:
    """
    Return the process-wide registry holding the built-in operators.
    """
    return OperatorRegistry()


__all__ = [
    OperatorRegistry.__name__,
    OpId.__name__,
    default_registry.__name__,
    Add.__name__,
    AddBroadcast.__name__,
    Sub.__name__,
    Mul.__name__,
    MatMul.__name__,
    ReLU.__name__,
    Sigmoid.__name__,
    Softmax.__name__,
    Sum.__name__,
    Log.__name__,
]
