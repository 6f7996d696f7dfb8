import logging
import unittest

import numpy as np

from graphgrad.domain import InvalidNodeIdError, ShapeMismatchError
from graphgrad.infrastructure.array import Array
from graphgrad.infrastructure.autograd import Graph
from graphgrad.infrastructure.ops import Add, OperatorRegistry


def arr_from_np(a) -> Array:
    return Array(np.asarray(a, dtype=np.float32))


class TestBackwardExamples(unittest.TestCase):
    def test_sum_of_add(self):
        g = Graph()
        a = g.var(arr_from_np([1.0, 2.0]))
        b = g.var(arr_from_np([3.0, 4.0]))
        loss = g.sum(g.add(a, b))
        self.assertEqual(g.data(loss).item(), 10.0)

        g.backward(loss)
        self.assertEqual(g.grad(a).flat(), [1.0, 1.0])
        self.assertEqual(g.grad(b).flat(), [1.0, 1.0])
        self.assertEqual(g.grad(loss).flat(), [1.0])

    def test_sum_of_matmul(self):
        g = Graph()
        a = g.var(arr_from_np([[1.0, 2.0], [3.0, 4.0]]))
        c = g.var(arr_from_np(np.full((2, 2), 0.5)))
        g.backward(g.sum(g.matmul(a, c)))
        np.testing.assert_allclose(g.grad(a).to_numpy(), [[1.0, 1.0], [1.0, 1.0]])
        np.testing.assert_allclose(g.grad(c).to_numpy(), [[4.0, 4.0], [6.0, 6.0]])

    def test_matmul_grad_shapes_mirror_operands(self):
        g = Graph()
        a = g.var(arr_from_np(np.ones((2, 3))))
        b = g.var(arr_from_np(np.ones((3, 5))))
        g.backward(g.sum(g.matmul(a, b)))
        self.assertEqual(g.grad(a).shape, (2, 3))
        self.assertEqual(g.grad(b).shape, (3, 5))


class TestBackwardSemantics(unittest.TestCase):
    def test_fan_out_accumulates(self):
        x = [0.5, -1.5, 2.0]

        shared = Graph()
        a = shared.var(arr_from_np(x))
        shared.backward(shared.sum(shared.add(a, a)))

        control = Graph()
        a1 = control.var(arr_from_np(x))
        a2 = control.var(arr_from_np(x))
        control.backward(control.sum(control.add(a1, a2)))

        self.assertEqual(shared.grad(a).flat(), [2.0, 2.0, 2.0])
        self.assertEqual(control.grad(a1).flat(), [1.0, 1.0, 1.0])

    def test_mul_with_itself_gives_two_x(self):
        g = Graph()
        a = g.var(arr_from_np([1.0, -3.0]))
        g.backward(g.sum(g.mul(a, a)))
        self.assertEqual(g.grad(a).flat(), [2.0, -6.0])

    def test_unreachable_nodes_keep_no_gradient(self):
        g = Graph()
        a = g.var(arr_from_np([1.0, 2.0]))
        b = g.var(arr_from_np([3.0, 4.0]))
        side = g.relu(b)
        loss = g.sum(a)
        g.backward(loss)
        self.assertIsNone(g.grad(b))
        self.assertIsNone(g.grad(side))
        self.assertEqual(g.grad(a).flat(), [1.0, 1.0])

    def test_non_scalar_output_is_seeded_with_ones(self):
        g = Graph()
        a = g.var(arr_from_np([[1.0, 2.0], [3.0, 4.0]]))
        b = g.var(arr_from_np([[5.0, 6.0], [7.0, 8.0]]))
        out = g.mul(a, b)
        with self.assertLogs("graphgrad.infrastructure.autograd._graph", level=logging.DEBUG):
            g.backward(out)
        np.testing.assert_allclose(g.grad(a).to_numpy(), [[5.0, 6.0], [7.0, 8.0]])

    def test_backward_from_leaf(self):
        g = Graph()
        a = g.var(arr_from_np([1.0, 2.0]))
        g.backward(a)
        self.assertEqual(g.grad(a).flat(), [1.0, 1.0])

    def test_backward_invalid_id(self):
        with self.assertRaises(InvalidNodeIdError):
            Graph().backward(0)

    def test_zero_grad_resets(self):
        g = Graph()
        a = g.var(arr_from_np([1.0]))
        loss = g.sum(a)
        g.backward(loss)
        g.zero_grad()
        self.assertIsNone(g.grad(a))
        self.assertIsNone(g.grad(loss))

    def test_pass_through_gradients_are_not_shared(self):
        g = Graph()
        a = g.var(arr_from_np([1.0, 2.0]))
        b = g.var(arr_from_np([3.0, 4.0]))
        c = g.add(a, b)
        d = g.sub(c, b)
        g.backward(g.sum(d))

        grads = [g.grad(n) for n in (a, b, c, d)]
        self.assertEqual(len({id(x) for x in grads}), 4)

        g.grad(a).zero_fill()
        self.assertEqual(g.grad(a).flat(), [0.0, 0.0])
        self.assertEqual(g.grad(c).flat(), [1.0, 1.0])
        self.assertEqual(g.grad(d).flat(), [1.0, 1.0])
        self.assertEqual(g.grad(b).flat(), [0.0, 0.0])

    def test_broadcast_bias_gradient_is_not_shared(self):
        g = Graph()
        x = g.var(arr_from_np([[1.0, 2.0]]))
        bias = g.var(arr_from_np([0.5, 0.5]))
        out = g.add_broadcast(x, bias)
        g.backward(g.sum(out))
        self.assertIsNot(g.grad(x), g.grad(out))
        g.grad(out).zero_fill()
        self.assertEqual(g.grad(x).flat(), [1.0, 1.0])

    def test_long_chain_does_not_recurse(self):
        g = Graph()
        x = g.var(arr_from_np([1.0]))
        h = x
        for _ in range(5000):
            h = g.add(h, x)
        g.backward(h)
        self.assertEqual(g.grad(x).flat(), [5001.0])

    def test_mlp_style_chain(self):
        rng = np.random.default_rng(3)
        xv = rng.standard_normal((4, 3)).astype(np.float32)
        wv = rng.standard_normal((3, 2)).astype(np.float32)
        bv = rng.standard_normal((2,)).astype(np.float32)

        g = Graph()
        x = g.var(arr_from_np(xv))
        w = g.var(arr_from_np(wv))
        b = g.var(arr_from_np(bv))
        loss = g.sum(g.sigmoid(g.add_broadcast(g.matmul(x, w), b)))
        g.backward(loss)

        z = xv.astype(np.float64) @ wv + bv
        s = 1.0 / (1.0 + np.exp(-z))
        dz = s * (1.0 - s)
        np.testing.assert_allclose(g.grad(w).to_numpy(), xv.T @ dz, rtol=1e-4, atol=1e-5)
        np.testing.assert_allclose(g.grad(b).to_numpy(), dz.sum(axis=0), rtol=1e-4, atol=1e-5)
        np.testing.assert_allclose(g.grad(x).to_numpy(), dz @ wv.T, rtol=1e-4, atol=1e-5)


class BadAdd(Add):
    op_id = "bad_add"

    def backward(self, grad_out, inputs, output):
        return [grad_out.sum(), grad_out]


class ShortAdd(Add):
    op_id = "short_add"

    def backward(self, grad_out, inputs, output):
        return [grad_out]


class TestBackwardOperatorContract(unittest.TestCase):
    def test_wrong_gradient_shape_detected(self):
        g = Graph(OperatorRegistry(extra=[BadAdd()]))
        a = g.var(arr_from_np([1.0, 2.0]))
        b = g.var(arr_from_np([3.0, 4.0]))
        out = g.apply("bad_add", [a, b])
        with self.assertRaises(ShapeMismatchError):
            g.backward(g.sum(out))

    def test_wrong_gradient_count_detected(self):
        from graphgrad.domain import GraphGradError

        g = Graph(OperatorRegistry(extra=[ShortAdd()]))
        a = g.var(arr_from_np([1.0]))
        b = g.var(arr_from_np([2.0]))
        with self.assertRaises(GraphGradError):
            g.backward(g.apply("short_add", [a, b]))


if __name__ == "__main__":
    unittest.main()
