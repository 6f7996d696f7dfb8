"""
Domain layer: backend-agnostic contracts and error types.
"""

from ._errors import (
    GraphGradError,
    ShapeError,
    ShapeMismatchError,
    OperatorArityError,
    UnknownOperatorError,
    InvalidNodeIdError,
    MissingGradientError,
    GradientCheckError,
    OptimizerError,
    TrainingError,
)
from ._array import IArray
from ._backend import IBackend
from ._operator import Operator
from ._parameter import IParameter
from ._module import IModule
from ._optimizers import IOptimizer
