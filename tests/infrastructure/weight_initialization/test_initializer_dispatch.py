import math
import unittest

import numpy as np

from graphgrad.infrastructure._runtime import make_rng
from graphgrad.infrastructure.utils.weight_initializer import WeightInitializer


class TestInitializerRegistry(unittest.TestCase):
    def test_builtin_names(self):
        names = WeightInitializer.available()
        for n in ("xavier_uniform", "he_uniform", "zeros", "ones"):
            self.assertIn(n, names)

    def test_unknown_name(self):
        with self.assertRaises(ValueError) as ctx:
            WeightInitializer("orthogonal")
        self.assertIn("xavier_uniform", str(ctx.exception))

    def test_duplicate_registration(self):
        with self.assertRaises(ValueError):
            WeightInitializer.register_initializer("zeros")(lambda s, r, b: None)

    def test_empty_name(self):
        with self.assertRaises(ValueError):
            WeightInitializer.register_initializer("")


class TestInitializers(unittest.TestCase):
    def test_xavier_bound(self):
        w = WeightInitializer("xavier_uniform")((20, 30), rng=make_rng(0))
        self.assertEqual(w.shape, (20, 30))
        bound = math.sqrt(6.0 / 50.0)
        arr = w.to_numpy()
        self.assertTrue(np.all(np.abs(arr) <= bound + 1e-6))
        self.assertGreater(arr.std(), 0.0)

    def test_he_bound(self):
        arr = WeightInitializer("he_uniform")((24, 4), rng=make_rng(1)).to_numpy()
        self.assertTrue(np.all(np.abs(arr) <= math.sqrt(6.0 / 24.0) + 1e-6))

    def test_same_seed_same_values(self):
        init = WeightInitializer("xavier_uniform")
        a = init((3, 3), rng=make_rng(42)).to_numpy()
        b = init((3, 3), rng=make_rng(42)).to_numpy()
        c = init((3, 3), rng=make_rng(43)).to_numpy()
        np.testing.assert_array_equal(a, b)
        self.assertFalse(np.array_equal(a, c))

    def test_default_rng_is_reproducible(self):
        init = WeightInitializer("he_uniform")
        np.testing.assert_array_equal(init((4, 2)).to_numpy(), init((4, 2)).to_numpy())

    def test_xavier_low_rank_is_zero(self):
        arr = WeightInitializer("xavier_uniform")((5,), rng=make_rng(0)).to_numpy()
        np.testing.assert_array_equal(arr, np.zeros(5, dtype=np.float32))

    def test_constants(self):
        np.testing.assert_array_equal(
            WeightInitializer("zeros")((2, 2)).to_numpy(), np.zeros((2, 2))
        )
        np.testing.assert_array_equal(
            WeightInitializer("ones")((3,)).to_numpy(), np.ones(3)
        )


if __name__ == "__main__":
    unittest.main()
