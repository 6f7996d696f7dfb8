"""
Numeric-kernel backend contract.

A backend performs the actual floating-point arithmetic behind every array
operation and every operator's forward/backward kernel. Arrays hold a shared
reference to their backend and delegate all math to it, so a backend can be
swapped without touching the array, operator, or graph layers.

Design notes
------------
- Backends are stateless after construction and may be shared by any number
  of arrays, graphs and threads.
- Every method takes and returns array values and raises
  `ShapeMismatchError` on incompatible operands. The only broadcasting rule
  is `add_broadcast` ([N, K] + [K]).
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ._array import IArray


@runtime_checkable
class IBackend(Protocol):
    """
    Backend interface.

    Allocation, elementwise arithmetic, reductions, activations and the fused
    backward helpers used by the operator catalogue.
    """

    # ---- allocation ----
    def from_numpy(self, values: Any, shape: Any = None) -> IArray: ...
    def zeros(self, shape: Any) -> IArray: ...
    def ones(self, shape: Any) -> IArray: ...
    def full(self, shape: Any, value: float) -> IArray: ...

    # ---- linear algebra / layout ----
    def matmul(self, a: IArray, b: IArray) -> IArray: ...
    def transpose(self, a: IArray) -> IArray: ...
    def reshape(self, a: IArray, shape: Any) -> IArray: ...
    def stack(self, arrays: Sequence[IArray], axis: int = 0) -> IArray: ...

    # ---- elementwise binary ----
    def add(self, a: IArray, b: IArray) -> IArray: ...
    def sub(self, a: IArray, b: IArray) -> IArray: ...
    def mul(self, a: IArray, b: IArray) -> IArray: ...
    def div(self, a: IArray, b: IArray) -> IArray: ...
    def add_broadcast(self, a: IArray, b: IArray) -> IArray: ...
    def scale(self, a: IArray, s: float) -> IArray: ...

    # ---- elementwise unary ----
    def relu(self, a: IArray) -> IArray: ...
    def sigmoid(self, a: IArray) -> IArray: ...
    def exp(self, a: IArray) -> IArray: ...
    def log(self, a: IArray) -> IArray: ...

    # ---- reductions ----
    def sum(self, a: IArray) -> IArray: ...
    def sum_dim(self, a: IArray, dim: int) -> IArray: ...

    # ---- softmax ----
    def softmax_last_dim(self, a: IArray) -> IArray: ...

    # ---- fused backward helpers ----
    def relu_backward(self, grad_out: IArray, x: IArray) -> IArray: ...
    def sigmoid_backward(self, grad_out: IArray, y: IArray) -> IArray: ...
    def softmax_backward(self, grad_out: IArray, y: IArray) -> IArray: ...
