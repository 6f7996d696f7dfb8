"""
Error types for GraphGrad.

This module defines the exception hierarchy raised by the array, backend,
operator, graph, and training layers. Every error derives from
`GraphGradError` so callers can catch framework failures in one place, while
the concrete subclasses also derive from the closest builtin exception
(`ValueError`, `KeyError`, `IndexError`) so generic handlers keep working.

Errors carry structured attributes (operation name, offending shapes, node
ids) in addition to a readable message, to make failures easy to inspect in
tests and debuggers.
"""

from typing import Any, Hashable, Sequence, Tuple


class GraphGradError(RuntimeError):
    """
    Base class for all GraphGrad errors.
    """


class ShapeError(GraphGradError, ValueError):
    """
    Raised when a shape or buffer is invalid on its own.

    Typical causes are a negative dimension or a value buffer whose length
    does not match the element count of the requested shape.
    """


class ShapeMismatchError(ShapeError):
    """
    Raised when operand shapes are incompatible for the requested operation.

    Attributes
    ----------
    op : str
        Name of the operation that rejected its operands (e.g. "matmul").
    shapes : tuple[tuple[int, ...], ...]
        The offending operand shapes, in argument order.
    """

    def __init__(self, op: str, *shapes: Sequence[int], detail: str = "") -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name.
        *shapes : Sequence[int]
            Operand shapes, in argument order.
        detail : str, optional
            Extra explanation appended to the message.
        """
        self.op = op
        self.shapes: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(int(d) for d in s) for s in shapes
        )
        rendered = ", ".join(str(list(s)) for s in self.shapes)
        msg = f"{op}: shape mismatch ({rendered})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class OperatorArityError(GraphGradError, ValueError):
    """
    Raised when an operator receives the wrong number of inputs.

    Attributes
    ----------
    op : str
        Operator name.
    expected : int
        Number of inputs the operator accepts.
    got : int
        Number of inputs actually supplied.
    """

    def __init__(self, op: str, expected: int, got: int) -> None:
        super().__init__(f"{op} requires {expected} input(s), got {got}")
        self.op = op
        self.expected = expected
        self.got = got


class UnknownOperatorError(GraphGradError, KeyError):
    """
    Raised when an operator id has no entry in the registry.

    Operator ids are only produced by the registry itself, so this signals a
    programming error (an id fabricated elsewhere) rather than bad data.

    Attributes
    ----------
    op_id : Hashable
        The id that failed to resolve.
    """

    def __init__(self, op_id: Hashable) -> None:
        super().__init__(f"unknown operator {op_id!r}")
        self.op_id = op_id

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class InvalidNodeIdError(GraphGradError, IndexError):
    """
    Raised when a graph is asked for a node that does not exist.

    Attributes
    ----------
    node_id : Any
        The requested id.
    num_nodes : int
        Number of nodes in the graph at the time of the request.
    """

    def __init__(self, node_id: Any, num_nodes: int) -> None:
        super().__init__(
            f"invalid node id {node_id!r} (graph has {num_nodes} node(s))"
        )
        self.node_id = node_id
        self.num_nodes = num_nodes


class MissingGradientError(GraphGradError):
    """
    Raised when backward reaches an operator node that has no gradient.

    With a correct reverse-topological schedule this cannot happen; seeing it
    means the traversal order invariant was broken.

    Attributes
    ----------
    node_id : int
        The node whose gradient was absent.
    """

    def __init__(self, node_id: int) -> None:
        super().__init__(f"missing gradient at node {node_id}")
        self.node_id = node_id


class GradientCheckError(GraphGradError, AssertionError):
    """
    Raised when an analytic gradient disagrees with its finite-difference
    estimate.

    Attributes
    ----------
    input_index : int
        Position of the checked input in the input list.
    element_index : int
        Flat index of the mismatching element (-1 for a length mismatch).
    analytic : float
        Gradient value computed by backward.
    numerical : float
        Central-difference estimate.
    """

    def __init__(
        self,
        input_index: int,
        element_index: int,
        analytic: float,
        numerical: float,
        detail: str = "",
    ) -> None:
        msg = detail or (
            f"input {input_index} elem {element_index}: "
            f"autograd {analytic} vs numerical {numerical}"
        )
        super().__init__(msg)
        self.input_index = input_index
        self.element_index = element_index
        self.analytic = analytic
        self.numerical = numerical


class OptimizerError(GraphGradError):
    """
    Raised when an optimizer cannot apply an update (e.g. a gradient whose
    shape differs from its parameter).
    """


class TrainingError(GraphGradError):
    """
    Raised when a training step fails. The underlying error is chained as
    `__cause__`.
    """
