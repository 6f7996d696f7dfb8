"""
Operator interface definitions.

This module defines the abstract base class for differentiable operators.
An operator pairs a forward computation (inputs -> output) with a backward
computation (output gradient + saved inputs/output -> one gradient per
input).

Unlike a per-call autograd function with a mutable context, an operator is a
stateless, shared descriptor: everything backward needs is handed to it by
the graph (the input arrays and the forward output), so one instance serves
every graph in the process.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Hashable, List, Optional, Sequence

from ._array import IArray
from ._errors import OperatorArityError


class Operator(ABC):
    """
    Abstract base class for differentiable operators.

    Subclasses set `name` and `arity`, and implement `forward` and
    `backward`. The registry assigns `op_id` when the class is registered.

    Notes
    -----
    - Operators must not hold per-call state.
    - `backward` returns gradients in the same order as `inputs`, each with
      the same shape as the corresponding input.
    """

    op_id: ClassVar[Optional[Hashable]] = None
    name: ClassVar[str] = "Operator"
    arity: ClassVar[int] = 1

    def check_arity(self, inputs: Sequence[IArray]) -> None:
        """
        Validate the number of inputs.

        Raises
        ------
        OperatorArityError
            If `len(inputs) != self.arity`.
        """
        if len(inputs) != self.arity:
            raise OperatorArityError(self.name, self.arity, len(inputs))

    @abstractmethod
    def forward(self, inputs: Sequence[IArray]) -> IArray:
        """
        Compute the operator output.

        Parameters
        ----------
        inputs : Sequence[IArray]
            Input arrays, in operator argument order.

        Returns
        -------
        IArray
            The forward output.

        Raises
        ------
        OperatorArityError
            If the number of inputs is wrong.
        ShapeMismatchError
            If the input shapes are incompatible.
        """
        ...

    @abstractmethod
    def backward(
        self,
        grad_out: IArray,
        inputs: Sequence[IArray],
        output: IArray,
    ) -> List[IArray]:
        """
        Compute gradients with respect to each input.

        Parameters
        ----------
        grad_out : IArray
            Gradient of the final output with respect to this operator's
            output.
        inputs : Sequence[IArray]
            The inputs the forward pass was computed from.
        output : IArray
            The forward output. Operators whose derivative is cheaper to
            express through the output (sigmoid, softmax) use it; others
            ignore it.

        Returns
        -------
        list[IArray]
            One gradient per input, same order as `inputs`.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(op_id={self.op_id!r})"
