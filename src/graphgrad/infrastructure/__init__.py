"""
Infrastructure layer: concrete arrays, backend, operators, graph engine and
the training stack built on them.
"""

from ._shape import Shape
from ._runtime import DEFAULT_SEED, make_rng
from .array import Array, default_backend
from .backend import NumpyBackend
from .ops import OperatorRegistry, OpId, default_registry
from .autograd import (
    DEFAULT_ATOL,
    DEFAULT_EPS,
    DEFAULT_RTOL,
    Graph,
    Node,
    check_gradients,
    numerical_grad,
)
from ._parameter import Parameter, ParameterState
from ._module import Module
from ._linear import Linear
from ._activations import ReLU, Sigmoid
from ._models import MLP2, Sequential
from ._losses import cross_entropy, cross_entropy_graph, mse, mse_graph
from .module import load_state_dict, save_state_dict
from .optimizers import SGD, Adam
from .utils.weight_initializer import (
    WeightInitializer,
    he_uniform,
    xavier_uniform,
    zeros,
)
from .data import DataLoader, Dataset, InMemoryDataset
from .training import EpochResult, History, StepResult, Trainer
