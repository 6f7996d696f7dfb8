import unittest
from typing import List, Sequence

import numpy as np

from graphgrad.domain import Operator, OperatorArityError, UnknownOperatorError
from graphgrad.infrastructure.array import Array
from graphgrad.infrastructure.autograd import Graph
from graphgrad.infrastructure.ops import (
    Add,
    MatMul,
    OperatorRegistry,
    OpId,
    default_registry,
)


class Square(Operator):
    op_id = "square"
    name = "Square"
    arity = 1

    def forward(self, inputs: Sequence[Array]) -> Array:
        self.check_arity(inputs)
        return inputs[0].mul(inputs[0])

    def backward(
        self, grad_out: Array, inputs: Sequence[Array], output: Array
    ) -> List[Array]:
        self.check_arity(inputs)
        return [grad_out.mul(inputs[0]).scale(2.0)]


class TestOperatorRegistry(unittest.TestCase):
    def test_every_builtin_is_registered(self):
        reg = default_registry()
        for op_id in OpId:
            self.assertIn(op_id, reg)
            self.assertEqual(reg.get(op_id).op_id, op_id)
        self.assertEqual(len(reg), len(OpId))

    def test_default_registry_is_shared(self):
        self.assertIs(default_registry(), default_registry())

    def test_lookup_returns_operator_instances(self):
        reg = default_registry()
        self.assertIsInstance(reg.get(OpId.ADD), Add)
        self.assertIsInstance(reg.get(OpId.MATMUL), MatMul)

    def test_unknown_id_raises(self):
        with self.assertRaises(UnknownOperatorError):
            default_registry().get("does-not-exist")
        with self.assertRaises(UnknownOperatorError):
            default_registry().get(["unhashable"])

    def test_extra_operator_is_dispatched_by_graph(self):
        reg = OperatorRegistry(extra=[Square()])
        self.assertIn("square", reg)
        self.assertNotIn("square", default_registry())

        g = Graph(reg)
        x = g.var(Array([1.0, -2.0, 3.0]))
        loss = g.sum(g.apply("square", [x]))
        self.assertEqual(g.data(loss).item(), 14.0)

        g.backward(loss)
        np.testing.assert_allclose(g.grad(x).to_numpy(), [2.0, -4.0, 6.0])

    def test_extra_operator_duplicate_id_rejected(self):
        with self.assertRaises(ValueError):
            OperatorRegistry(extra=[Square(), Square()])

    def test_extra_must_be_operator(self):
        with self.assertRaises(TypeError):
            OperatorRegistry(extra=[object()])

    def test_without_builtins(self):
        reg = OperatorRegistry(extra=[Square()], include_builtins=False)
        self.assertEqual(reg.available(), ("square",))
        with self.assertRaises(UnknownOperatorError):
            reg.get(OpId.ADD)

    def test_register_decorator_rejects_duplicates(self):
        with self.assertRaises(ValueError):

            @OperatorRegistry.register(OpId.ADD)
            class AnotherAdd(Add):
                pass

    def test_register_decorator_rejects_non_operator(self):
        with self.assertRaises(TypeError):
            OperatorRegistry.register("bogus")(int)

    def test_check_arity(self):
        with self.assertRaises(OperatorArityError):
            default_registry().get(OpId.ADD).forward([Array([1.0])])


if __name__ == "__main__":
    unittest.main()
