import unittest

from graphgrad.domain.utils._weight_initialization import (
    _calculate_fan_in,
    _calculate_fan_in_and_fan_out,
)


class TestFanComputation(unittest.TestCase):
    def test_fan_in_is_leading_dim(self):
        self.assertEqual(_calculate_fan_in((4, 3)), 4)
        self.assertEqual(_calculate_fan_in((7,)), 7)

    def test_fan_in_scalar_is_zero(self):
        self.assertEqual(_calculate_fan_in(()), 0)

    def test_fan_in_and_out_for_matrix(self):
        self.assertEqual(_calculate_fan_in_and_fan_out((4, 3)), (4, 3))

    def test_fan_in_and_out_requires_rank_two(self):
        with self.assertRaises(ValueError):
            _calculate_fan_in_and_fan_out((5,))


if __name__ == "__main__":
    unittest.main()
