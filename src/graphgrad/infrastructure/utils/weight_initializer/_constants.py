"""
Constant initializers, typically used for biases.
"""

import numpy as np

from ._base import WeightInitializer
from ..._shape import Shape
from ...array._array import Array


@WeightInitializer.register_initializer("zeros")
def zeros(shape: Shape, rng: np.random.Generator, backend) -> Array:
    """All elements zero. `rng` is unused."""
    return backend.zeros(shape)


@WeightInitializer.register_initializer("ones")
def ones(shape: Shape, rng: np.random.Generator, backend) -> Array:
    """All elements one. `rng` is unused."""
    return backend.ones(shape)
