"""
Activation operators: ReLU, Sigmoid, Softmax.

ReLU differentiates through its input; Sigmoid and Softmax differentiate
through their forward output, which the graph hands to `backward` so
nothing has to be recomputed.
"""

from typing import List, Sequence

from ...domain._operator import Operator
from ..array._array import Array
from ._registry import OperatorRegistry, OpId


@OperatorRegistry.register(OpId.RELU)
class ReLU(Operator):
    """
    out = max(0, x)

    Backward: g where x > 0, else 0. The subgradient at exactly 0 is taken
    as 0.
    """

    name = "ReLU"
    arity = 1

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        return inputs[0].relu()

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [inputs[0].relu_backward(grad_out)]


@OperatorRegistry.register(OpId.SIGMOID)
class Sigmoid(Operator):
    """
    y = 1 / (1 + exp(-x))

    Backward: g * y * (1 - y)
    """

    name = "Sigmoid"
    arity = 1

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        return inputs[0].sigmoid()

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [output.sigmoid_backward(grad_out)]


@OperatorRegistry.register(OpId.SOFTMAX)
class Softmax(Operator):
    """
    Softmax along the last axis.

    Forward:

        y_i = exp(x_i) / sum_j exp(x_j)

    Backward (Jacobian-vector product, no Jacobian materialized):

        grad_x = y * (g - rowsum(g * y))
    """

    name = "Softmax"
    arity = 1

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        return inputs[0].softmax_last_dim()

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [output.softmax_backward(grad_out)]
