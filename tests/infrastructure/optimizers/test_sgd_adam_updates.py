import unittest

import numpy as np

from graphgrad.domain import IOptimizer, OptimizerError
from graphgrad.infrastructure._parameter import Parameter
from graphgrad.infrastructure.array import Array
from graphgrad.infrastructure.optimizers import SGD, Adam


def arr_from_np(arr) -> Array:
    return Array(np.asarray(arr, dtype=np.float32))


def param_from_np(arr, name: str = "p") -> Parameter:
    return Parameter(arr_from_np(arr), name=name)


class TestSGD(unittest.TestCase):
    def test_satisfies_protocol(self):
        self.assertIsInstance(SGD([param_from_np([1.0])]), IOptimizer)
        self.assertIsInstance(Adam([param_from_np([1.0])]), IOptimizer)

    def test_step_updates_parameter(self):
        p = param_from_np([1.0, 2.0, 3.0])
        p.set_grad(arr_from_np([0.1, -0.2, 0.3]))

        opt = SGD([p], lr=0.5)
        opt.step()

        expected = np.array([1.0, 2.0, 3.0], dtype=np.float32) - 0.5 * np.array(
            [0.1, -0.2, 0.3], dtype=np.float32
        )
        np.testing.assert_allclose(p.data.to_numpy(), expected, rtol=1e-6, atol=1e-7)

    def test_step_skips_none_grad(self):
        p = param_from_np([1.0, 2.0])
        before = p.data.to_numpy()
        SGD([p], lr=0.1).step()
        np.testing.assert_array_equal(p.data.to_numpy(), before)

    def test_step_skips_frozen(self):
        p = param_from_np([1.0, 2.0])
        p.set_grad(arr_from_np([1.0, 1.0]))
        p.requires_grad = False
        SGD([p], lr=0.1).step()
        np.testing.assert_array_equal(p.data.to_numpy(), [1.0, 2.0])

    def test_zero_grad_clears_grad(self):
        p = param_from_np([1.0])
        p.set_grad(arr_from_np([2.0]))
        SGD([p], lr=0.1).zero_grad()
        self.assertIsNone(p.grad)

    def test_weight_decay_applied(self):
        p0 = np.array([1.0, -2.0], dtype=np.float32)
        g0 = np.array([0.5, 0.25], dtype=np.float32)

        p = param_from_np(p0)
        p.set_grad(arr_from_np(g0))

        lr, wd = 0.1, 0.01
        SGD([p], lr=lr, weight_decay=wd).step()

        expected = p0 - lr * (g0 + wd * p0)
        np.testing.assert_allclose(p.data.to_numpy(), expected, rtol=1e-6, atol=1e-7)

    def test_grad_shape_mismatch(self):
        p = param_from_np([1.0, 2.0])
        p.set_grad(arr_from_np([1.0, 2.0, 3.0]))
        with self.assertRaises(OptimizerError):
            SGD([p], lr=0.1).step()

    def test_invalid_hyperparams_raise(self):
        p = param_from_np([1.0])
        with self.assertRaises(ValueError):
            SGD([p], lr=0.0)
        with self.assertRaises(ValueError):
            SGD([p], lr=0.1, weight_decay=-1.0)


class TestAdam(unittest.TestCase):
    def test_step_matches_reference_first_step(self):
        p0 = np.array([1.0, -2.0], dtype=np.float32)
        g0 = np.array([0.1, -0.2], dtype=np.float32)

        p = param_from_np(p0)
        p.set_grad(arr_from_np(g0))

        lr = 1e-2
        b1, b2 = 0.9, 0.999
        eps = 1e-8
        Adam([p], lr=lr, betas=(b1, b2), eps=eps).step()

        m = (1 - b1) * g0
        v = (1 - b2) * (g0 * g0)
        m_hat = m / (1 - b1)
        v_hat = v / (1 - b2)
        expected = p0 - lr * (m_hat / (np.sqrt(v_hat) + eps))

        np.testing.assert_allclose(p.data.to_numpy(), expected, rtol=1e-6, atol=1e-7)

    def test_second_step_uses_moments(self):
        p0 = np.array([0.5], dtype=np.float32)
        g0 = np.array([0.2], dtype=np.float32)
        g1 = np.array([-0.1], dtype=np.float32)
        lr, b1, b2, eps = 1e-2, 0.9, 0.999, 1e-8

        p = param_from_np(p0)
        opt = Adam([p], lr=lr, betas=(b1, b2), eps=eps)
        p.set_grad(arr_from_np(g0))
        opt.step()
        p.set_grad(arr_from_np(g1))
        opt.step()

        w = p0.astype(np.float64)
        m = np.zeros(1)
        v = np.zeros(1)
        for t, g in enumerate((g0, g1), start=1):
            m = b1 * m + (1 - b1) * g
            v = b2 * v + (1 - b2) * g * g
            w = w - lr * (m / (1 - b1**t)) / (np.sqrt(v / (1 - b2**t)) + eps)

        np.testing.assert_allclose(p.data.to_numpy(), w, rtol=1e-5, atol=1e-6)

    def test_step_skips_none_grad(self):
        p = param_from_np([1.0, 2.0])
        Adam([p], lr=1e-3).step()
        np.testing.assert_array_equal(p.data.to_numpy(), [1.0, 2.0])

    def test_frozen_parameter_keeps_value(self):
        p = param_from_np([1.0])
        p.set_grad(arr_from_np([1.0]))
        p.requires_grad = False
        Adam([p], lr=1e-1).step()
        np.testing.assert_array_equal(p.data.to_numpy(), [1.0])

    def test_grad_shape_mismatch(self):
        p = param_from_np([[1.0, 2.0]])
        p.set_grad(arr_from_np([1.0, 2.0]))
        with self.assertRaises(OptimizerError):
            Adam([p]).step()

    def test_invalid_hyperparams_raise(self):
        p = param_from_np([1.0])
        with self.assertRaises(ValueError):
            Adam([p], lr=-1.0)
        with self.assertRaises(ValueError):
            Adam([p], betas=(1.0, 0.999))
        with self.assertRaises(ValueError):
            Adam([p], eps=0.0)
        with self.assertRaises(ValueError):
            Adam([p], weight_decay=-0.1)


if __name__ == "__main__":
    unittest.main()
