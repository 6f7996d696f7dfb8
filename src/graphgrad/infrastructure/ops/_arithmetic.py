"""
Elementwise arithmetic operators: Add, Sub, Mul, AddBroadcast.

Add/Sub/Mul require identical input shapes. AddBroadcast is the single
broadcasting case supported by the engine: a [N, K] matrix plus a [K]
vector (a bias row added to every sample).
"""

from typing import List, Sequence

from ...domain._operator import Operator
from ..array._array import Array
from ._registry import OperatorRegistry, OpId


@OperatorRegistry.register(OpId.ADD)
class Add(Operator):
    """
    out = a + b

    Backward: (g, g)
    """

    name = "Add"
    arity = 2

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        a, b = inputs
        return a.add(b)

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [grad_out, grad_out]


@OperatorRegistry.register(OpId.SUB)
class Sub(Operator):
    """
    out = a - b

    Backward: (g, -g)
    """

    name = "Sub"
    arity = 2

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        a, b = inputs
        return a.sub(b)

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [grad_out, grad_out.scale(-1.0)]


@OperatorRegistry.register(OpId.MUL)
class Mul(Operator):
    """
    out = a * b (elementwise)

    Backward (product rule): (g * b, g * a)
    """

    name = "Mul"
    arity = 2

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        a, b = inputs
        return a.mul(b)

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        a, b = inputs
        return [grad_out.mul(b), grad_out.mul(a)]


@OperatorRegistry.register(OpId.ADD_BROADCAST)
class AddBroadcast(Operator):
    """
    out = a + b, with a of shape [N, K] and b of shape [K].

    Backward
    --------
    - grad_a = g
    - grad_b = column sums of g, reshaped from [1, K] to [K]

    Every row of the output received `b`, so `b`'s gradient collects the
    contributions of all N rows.
    """

    name = "AddBroadcast"
    arity = 2

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        a, b = inputs
        return a.add_broadcast(b)

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        _, b = inputs
        grad_b = grad_out.sum_dim(0).reshape(b.shape)
        return [grad_out, grad_b]
