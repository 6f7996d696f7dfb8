"""
Xavier/Glorot uniform initialization.

Weights are laid out as ``[fan_in, fan_out]``. Values are drawn from

    U(-bound, +bound), bound = sqrt(6 / (fan_in + fan_out))

Shapes of rank < 2 have no fan-out and are filled with zeros.
"""

import math

import numpy as np

from ._base import WeightInitializer
from ..._shape import Shape
from ...array._array import Array
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out


@WeightInitializer.register_initializer("xavier_uniform")
def xavier_uniform(shape: Shape, rng: np.random.Generator, backend) -> Array:
    """
    Xavier (Glorot) uniform initializer.

    Parameters
    ----------
    shape:
        Target shape, ``[fan_in, fan_out, ...]``.
    rng:
        Source of randomness.
    backend:
        Backend of the returned array.

    Returns
    -------
    Array
        A new array of the requested shape.
    """
    if shape.rank < 2:
        return backend.zeros(shape)
    fan_in, fan_out = _calculate_fan_in_and_fan_out(shape.dims)
    bound = math.sqrt(6.0 / float(max(1, fan_in + fan_out)))
    w = rng.uniform(-bound, bound, size=shape.dims)
    return backend.from_numpy(w)
