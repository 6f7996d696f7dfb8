"""
Weight initialization public API.

Importing this package registers the built-in initializers (``xavier_uniform``,
``he_uniform``, ``zeros``, ``ones``) with `WeightInitializer` via import side
effects. The functions are also exported for direct use with an explicit
generator and backend.
"""

from ._xavier import xavier_uniform
from ._kaiming import he_uniform
from ._constants import ones, zeros
from ._base import WeightInitializer

__all__ = [
    WeightInitializer.__name__,
    xavier_uniform.__name__,
    he_uniform.__name__,
    zeros.__name__,
    ones.__name__,
]
