"""
Matrix multiplication operator.
"""

from typing import List, Sequence

from ...domain._operator import Operator
from ..array._array import Array
from ._registry import OperatorRegistry, OpId


@OperatorRegistry.register(OpId.MATMUL)
class MatMul(Operator):
    """
    2D matrix multiplication.

    Implements:

        out = a @ b,   a: [M, K], b: [K, N], out: [M, N]

    Backward:

        dL/da = g @ b^T    -> [M, K]
        dL/db = a^T @ g    -> [K, N]

    Notes
    -----
    Gradient shapes always mirror the forward operands, never the output.
    """

    name = "MatMul"
    arity = 2

    def forward(self, inputs: Sequence[Array]) -> Array:
        """
        Compute ``a @ b``.

        Raises
        ------
        ShapeMismatchError
            If either operand is not 2D or the inner dimensions differ.
        """
        self.check_arity(inputs)
        a, b = inputs
        return a.matmul(b)

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        a, b = inputs
        grad_a = grad_out.matmul(b.transpose())
        grad_b = a.transpose().matmul(grad_out)
        return [grad_a, grad_b]
