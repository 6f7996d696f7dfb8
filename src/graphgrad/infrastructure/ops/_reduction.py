"""
Reduction and logarithm operators: Sum, Log.
"""

from typing import List, Sequence

from ...domain._errors import ShapeMismatchError
from ...domain._operator import Operator
from ..array._array import Array
from ._registry import OperatorRegistry, OpId


@OperatorRegistry.register(OpId.SUM)
class Sum(Operator):
    """
    Full reduction to a one-element array of shape [1].

    Backward
    --------
    `grad_out` holds a single value; every input element receives that
    value, so the gradient is ``ones(x.shape) * g``.
    """

    name = "Sum"
    arity = 1

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        return inputs[0].sum()

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        if grad_out.numel() != 1:
            raise ShapeMismatchError(
                "Sum backward", grad_out.dims, detail="grad_out must be scalar"
            )
        x = inputs[0]
        ones = x.backend.ones(x.shape)
        return [ones.scale(grad_out.item())]


@OperatorRegistry.register(OpId.LOG)
class Log(Operator):
    """
    Natural logarithm, elementwise.

    Backward: g / x
    """

    name = "Log"
    arity = 1

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        return inputs[0].log()

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [grad_out.div(inputs[0])]
