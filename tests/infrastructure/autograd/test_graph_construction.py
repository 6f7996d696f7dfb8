import unittest

import numpy as np

from graphgrad.domain import (
    InvalidNodeIdError,
    OperatorArityError,
    ShapeMismatchError,
    UnknownOperatorError,
)
from graphgrad.infrastructure.array import Array
from graphgrad.infrastructure.autograd import Graph
from graphgrad.infrastructure.ops import OpId


def arr_from_np(a) -> Array:
    return Array(np.asarray(a, dtype=np.float32))


class TestGraphConstruction(unittest.TestCase):
    def test_var_returns_sequential_ids(self):
        g = Graph()
        self.assertEqual(g.var(arr_from_np([1.0])), 0)
        self.assertEqual(g.var(arr_from_np([2.0])), 1)
        self.assertEqual(len(g), 2)

    def test_var_rejects_non_array(self):
        with self.assertRaises(TypeError):
            Graph().var([1.0, 2.0])

    def test_apply_records_forward_result(self):
        g = Graph()
        a = g.var(arr_from_np([1.0, 2.0]))
        b = g.var(arr_from_np([3.0, 4.0]))
        c = g.add(a, b)
        self.assertEqual(c, 2)
        self.assertEqual(g.data(c).flat(), [4.0, 6.0])

        node = g.node(c)
        self.assertEqual(node.op_id, OpId.ADD)
        self.assertEqual(node.inputs, (a, b))
        self.assertFalse(node.is_leaf)
        self.assertTrue(g.node(a).is_leaf)

    def test_input_ids_precede_consumers(self):
        g = Graph()
        a = g.var(arr_from_np([[1.0, 2.0]]))
        w = g.var(arr_from_np([[1.0], [1.0]]))
        out = g.sum(g.relu(g.matmul(a, w)))
        for nid in range(len(g)):
            for in_id in g.node(nid).inputs:
                self.assertLess(in_id, nid)
        self.assertEqual(out, len(g) - 1)

    def test_node_snapshot_does_not_alias_graph(self):
        g = Graph()
        a = g.var(arr_from_np([1.0]))
        snap = g.node(a)
        snap.grad = arr_from_np([42.0])
        self.assertIsNone(g.grad(a))

    def test_unknown_operator(self):
        g = Graph()
        a = g.var(arr_from_np([1.0]))
        with self.assertRaises(UnknownOperatorError):
            g.apply("nope", [a])
        self.assertEqual(len(g), 1)

    def test_invalid_node_id(self):
        g = Graph()
        a = g.var(arr_from_np([1.0]))
        with self.assertRaises(InvalidNodeIdError):
            g.add(a, 5)
        with self.assertRaises(InvalidNodeIdError):
            g.relu(-1)
        with self.assertRaises(InvalidNodeIdError):
            g.data(3)
        with self.assertRaises(InvalidNodeIdError):
            g.grad("0")
        self.assertEqual(len(g), 1)

    def test_failed_apply_appends_nothing(self):
        g = Graph()
        a = g.var(arr_from_np(np.ones((2, 3))))
        b = g.var(arr_from_np(np.ones((2, 3))))
        with self.assertRaises(ShapeMismatchError):
            g.matmul(a, b)
        with self.assertRaises(OperatorArityError):
            g.apply(OpId.ADD, [a])
        self.assertEqual(len(g), 2)
        self.assertEqual(g.add(a, b), 2)

    def test_graphs_share_default_registry(self):
        self.assertIs(Graph().registry, Graph().registry)


if __name__ == "__main__":
    unittest.main()
