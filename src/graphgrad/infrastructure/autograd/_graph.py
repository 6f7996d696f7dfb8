"""
Computation graph and reverse-mode backward engine.

This module provides `Graph`, an append-only arena of nodes addressed by
integer ids, and `Node`, the record stored for each of them.

A node is either a *leaf* (a value injected with `var`) or an *operator
node* created by `apply`, which runs the operator's forward kernel and
records the operator id, the input node ids and the output array. Because
nodes are only ever appended and may only reference existing ids, every
input id is strictly smaller than the id of the node using it and the graph
is acyclic by construction.

`backward(output_id)` walks the graph once:

1. post-order depth-first search from `output_id` along input edges,
   reversed, gives a reverse topological order (every consumer of a node is
   processed before the node itself);
2. the output is seeded with ones of its own shape;
3. each operator node hands its gradient to its operator's backward kernel
   and the returned gradients are *accumulated* into the inputs, so a node
   feeding several consumers receives the sum over all paths;
4. nodes not reachable from the output keep an absent gradient.

Design notes
------------
- A graph is built for one forward pass, consumed by one `backward` call,
  and then discarded. It is not thread-safe and is never shared.
- `apply` is all-or-nothing: no node is appended unless forward succeeds.
- A failed `backward` may leave gradients on nodes processed before the
  failure; the graph should be rebuilt rather than retried.
"""

from __future__ import annotations

import dataclasses
import logging
import operator
from dataclasses import dataclass
from typing import Any, Hashable, List, Optional, Sequence, Tuple

from ...domain._errors import (
    GraphGradError,
    InvalidNodeIdError,
    MissingGradientError,
    ShapeMismatchError,
)
from ..array._array import Array
from ..ops import OperatorRegistry, OpId, default_registry

logger = logging.getLogger(__name__)

NodeId = int


@dataclass
class Node:
    """
    A single graph node.

    Attributes
    ----------
    node_id : int
        Index of the node in its graph.
    op_id : Hashable | None
        Operator id, or None for a leaf.
    inputs : tuple[int, ...]
        Input node ids, in operator argument order. Empty for leaves.
    data : Array
        Leaf value or forward output.
    grad : Array | None
        Accumulated gradient; None until backward reaches the node.
    """

    node_id: NodeId
    op_id: Optional[Hashable]
    inputs: Tuple[NodeId, ...]
    data: Array
    grad: Optional[Array] = None

    @property
    def is_leaf(self) -> bool:
        return self.op_id is None


class Graph:
    """
    Append-only computation graph.

    Parameters
    ----------
    registry : OperatorRegistry, optional
        Operator lookup table. Defaults to the shared built-in registry.

    Examples
    --------
    >>> g = Graph()
    >>> a = g.var(Array([1.0, 2.0]))
    >>> b = g.var(Array([3.0, 4.0]))
    >>> loss = g.sum(g.add(a, b))
    >>> g.backward(loss)
    >>> g.grad(a).tolist()
    [1.0, 1.0]
    """

    def __init__(self, registry: Optional[OperatorRegistry] = None) -> None:
        self._nodes: List[Node] = []
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> OperatorRegistry:
        return self._registry

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Node access
    # ------------------------------------------------------------------
    def _node(self, node_id: Any) -> Node:
        try:
            idx = operator.index(node_id)
        except TypeError as e:
            raise InvalidNodeIdError(node_id, len(self._nodes)) from e
        if not 0 <= idx < len(self._nodes):
            raise InvalidNodeIdError(node_id, len(self._nodes))
        return self._nodes[idx]

    def node(self, node_id: NodeId) -> Node:
        """
        Return a snapshot of a node.

        The returned `Node` is a shallow copy; mutating it does not affect
        the graph.

        Raises
        ------
        InvalidNodeIdError
            If `node_id` is out of range.
        """
        return dataclasses.replace(self._node(node_id))

    def data(self, node_id: NodeId) -> Array:
        """
        Return the forward value of a node.

        Raises
        ------
        InvalidNodeIdError
            If `node_id` is out of range.
        """
        return self._node(node_id).data

    def grad(self, node_id: NodeId) -> Optional[Array]:
        """
        Return the accumulated gradient of a node, or None if backward has
        not reached it.

        Raises
        ------
        InvalidNodeIdError
            If `node_id` is out of range.
        """
        return self._node(node_id).grad

    def zero_grad(self) -> None:
        """
        Reset every node's gradient to absent.
        """
        for n in self._nodes:
            n.grad = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def var(self, data: Array) -> NodeId:
        """
        Append a leaf node holding `data` and return its id.

        Raises
        ------
        TypeError
            If `data` is not an `Array`.
        """
        if not isinstance(data, Array):
            raise TypeError(f"var expects an Array, got {type(data)!r}")
        node_id = len(self._nodes)
        self._nodes.append(Node(node_id=node_id, op_id=None, inputs=(), data=data))
        return node_id

    def apply(self, op_id: Hashable, input_ids: Sequence[NodeId]) -> NodeId:
        """
        Run an operator's forward on existing nodes and append the result.

        Parameters
        ----------
        op_id : Hashable
            Registered operator id (an `OpId` for built-ins).
        input_ids : Sequence[int]
            Input node ids, in operator argument order.

        Returns
        -------
        int
            Id of the new operator node.

        Raises
        ------
        UnknownOperatorError
            If `op_id` is not registered.
        InvalidNodeIdError
            If any input id is out of range.
        OperatorArityError
            If the number of inputs is wrong for the operator.
        ShapeMismatchError
            If forward rejects the input shapes.

        Notes
        -----
        On any failure the graph is left unchanged.
        """
        op = self._registry.get(op_id)
        inputs = tuple(self._node(i).node_id for i in input_ids)
        input_arrays = [self._nodes[i].data for i in inputs]
        out = op.forward(input_arrays)
        node_id = len(self._nodes)
        self._nodes.append(
            Node(node_id=node_id, op_id=op_id, inputs=inputs, data=out)
        )
        return node_id

    # ------------------------------------------------------------------
    # Backward
    # ------------------------------------------------------------------
    def _reverse_topo(self, output_id: NodeId) -> List[NodeId]:
        """
        Reverse post-order of a depth-first search from `output_id`.

        The search is iterative so long chains do not hit the interpreter's
        recursion limit.
        """
        post_order: List[NodeId] = []
        visited = set()
        stack: List[Tuple[NodeId, bool]] = [(output_id, False)]
        while stack:
            nid, expanded = stack.pop()
            if expanded:
                post_order.append(nid)
                continue
            if nid in visited:
                continue
            visited.add(nid)
            stack.append((nid, True))
            for in_id in reversed(self._nodes[nid].inputs):
                if in_id not in visited:
                    stack.append((in_id, False))
        post_order.reverse()
        return post_order

    def _accumulate(self, node_id: NodeId, g: Array) -> None:
        node = self._nodes[node_id]
        if node.grad is None:
            # operators may hand the same array to several inputs
            node.grad = g.copy()
        else:
            # a mismatch here means an operator returned a wrongly shaped grad
            node.grad = node.grad.add(g)

    def backward(self, output_id: NodeId) -> None:
        """
        Propagate gradients from `output_id` to every node it depends on.

        The output is seeded with ones of its own shape. For a one-element
        output that is the usual dL/dL = 1; for a larger output it computes
        the gradient of the sum of its elements.

        Raises
        ------
        InvalidNodeIdError
            If `output_id` is out of range.
        UnknownOperatorError
            If a node references an unregistered operator.
        MissingGradientError
            If an operator node is reached without a gradient.
        ShapeMismatchError
            If an operator's backward returns a gradient whose shape differs
            from its input.
        """
        out_node = self._node(output_id)
        order = self._reverse_topo(out_node.node_id)

        seed_shape = out_node.data.shape
        if not seed_shape.is_scalar():
            logger.debug(
                "backward from non-scalar node %d (shape %s): seeding with ones",
                out_node.node_id,
                seed_shape,
            )
        logger.debug(
            "backward from node %d: %d reachable node(s)",
            out_node.node_id,
            len(order),
        )

        self._accumulate(out_node.node_id, out_node.data.backend.ones(seed_shape))

        for node_id in order:
            node = self._nodes[node_id]
            if node.is_leaf:
                continue
            if node.grad is None:
                raise MissingGradientError(node_id)

            op = self._registry.get(node.op_id)
            input_arrays = [self._nodes[i].data for i in node.inputs]
            grads = op.backward(node.grad, input_arrays, node.data)

            if len(grads) != len(node.inputs):
                raise GraphGradError(
                    f"{op.name} backward must return one grad per input. "
                    f"Got {len(grads)} grads for {len(node.inputs)} inputs."
                )

            for in_id, x, g in zip(node.inputs, input_arrays, grads):
                if g.dims != x.dims:
                    raise ShapeMismatchError(
                        f"{op.name} backward",
                        x.dims,
                        g.dims,
                        detail=f"gradient for input node {in_id} has the wrong shape",
                    )
                self._accumulate(in_id, g)

    # ------------------------------------------------------------------
    # Operator helpers
    # ------------------------------------------------------------------
    def add(self, a: NodeId, b: NodeId) -> NodeId:
        """a + b (same shape)"""
        return self.apply(OpId.ADD, (a, b))

    def add_broadcast(self, a: NodeId, b: NodeId) -> NodeId:
        """a [N, K] + b [K]"""
        return self.apply(OpId.ADD_BROADCAST, (a, b))

    def sub(self, a: NodeId, b: NodeId) -> NodeId:
        return self.apply(OpId.SUB, (a, b))

    def mul(self, a: NodeId, b: NodeId) -> NodeId:
        return self.apply(OpId.MUL, (a, b))

    def matmul(self, a: NodeId, b: NodeId) -> NodeId:
        return self.apply(OpId.MATMUL, (a, b))

    def relu(self, a: NodeId) -> NodeId:
        return self.apply(OpId.RELU, (a,))

    def sigmoid(self, a: NodeId) -> NodeId:
        return self.apply(OpId.SIGMOID, (a,))

    def softmax(self, a: NodeId) -> NodeId:
        """Softmax along the last dimension."""
        return self.apply(OpId.SOFTMAX, (a,))

    def log(self, a: NodeId) -> NodeId:
        return self.apply(OpId.LOG, (a,))

    def sum(self, a: NodeId) -> NodeId:
        """Sum to a one-element array."""
        return self.apply(OpId.SUM, (a,))

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)})"
