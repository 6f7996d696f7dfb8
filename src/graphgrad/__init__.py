"""
GraphGrad: a small reverse-mode automatic differentiation engine.

Values are dense float32 `Array`s computed by a pluggable backend. A `Graph`
records operator applications on them and `Graph.backward` propagates
gradients through it. Layers, losses, optimizers and a training loop are
built on the same graph.

Quick example
-------------
>>> from graphgrad import Array, Graph
>>> g = Graph()
>>> a = g.var(Array([[1.0, 2.0], [3.0, 4.0]]))
>>> c = g.var(Array([[0.5, 0.5], [0.5, 0.5]]))
>>> g.backward(g.sum(g.matmul(a, c)))
>>> g.grad(c).tolist()
[[4.0, 4.0], [6.0, 6.0]]
"""

from .domain import (
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
    IArray,
    IBackend,
    IModule,
    IOptimizer,
    IParameter,
    Operator,
)
from .infrastructure import (
    Shape,
    DEFAULT_SEED,
    make_rng,
    Array,
    default_backend,
    NumpyBackend,
    OperatorRegistry,
    OpId,
    default_registry,
    DEFAULT_ATOL,
    DEFAULT_EPS,
    DEFAULT_RTOL,
    Graph,
    Node,
    check_gradients,
    numerical_grad,
    Parameter,
    ParameterState,
    Module,
    Linear,
    ReLU,
    Sigmoid,
    MLP2,
    Sequential,
    cross_entropy,
    cross_entropy_graph,
    mse,
    mse_graph,
    load_state_dict,
    save_state_dict,
    SGD,
    Adam,
    WeightInitializer,
    he_uniform,
    xavier_uniform,
    zeros,
    DataLoader,
    Dataset,
    InMemoryDataset,
    EpochResult,
    History,
    StepResult,
    Trainer,
)

__version__ = "0.1.0"
