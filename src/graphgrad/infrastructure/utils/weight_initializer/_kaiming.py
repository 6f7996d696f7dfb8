"""
Kaiming (He) uniform initialization, suited to ReLU layers.

    U(-bound, +bound), bound = sqrt(6 / fan_in)

Fan-in is the leading dimension. A rank-0 shape is filled with zeros.
"""

import math

import numpy as np

from ._base import WeightInitializer
from ..._shape import Shape
from ...array._array import Array
from ....domain.utils._weight_initialization import _calculate_fan_in


@WeightInitializer.register_initializer("he_uniform")
def he_uniform(shape: Shape, rng: np.random.Generator, backend) -> Array:
    """
    He uniform initializer.

    Returns
    -------
    Array
        A new array of the requested shape.
    """
    if shape.rank == 0:
        return backend.zeros(shape)
    fan_in = max(1, _calculate_fan_in(shape.dims))
    bound = math.sqrt(6.0 / float(fan_in))
    w = rng.uniform(-bound, bound, size=shape.dims)
    return backend.from_numpy(w)
