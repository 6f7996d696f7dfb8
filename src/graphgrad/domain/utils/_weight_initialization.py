"""
Abstract interfaces and utilities for weight initialization.

This module defines the abstract base class for weight initializer
dispatchers, along with shared helpers for computing fan-in and fan-out from
weight shapes.

Weights in GraphGrad are laid out as ``[in_features, out_features]`` (a
layer computes ``x @ W``), so fan-in is the leading dimension and fan-out
the second one.
"""

from abc import ABC
from typing import Any, Callable, Dict, Tuple, TypeVar

from .._array import IArray


T = TypeVar("T", bound=Callable[..., IArray])


class _WeightInitializer(ABC):
    """
    Abstract base class for weight initializer dispatchers.

    Design notes
    ------------
    - Initializers are identified by string names.
    - Each initializer is a callable ``(shape, *, rng, backend) -> array``
      that builds a fresh array; arrays are values, so nothing is mutated.
    - Randomness always comes from an explicitly passed generator.
    """

    INITIALIZERS: Dict[str, Callable] = {}

    def __init__(self, initializer_name: str) -> None:
        """
        Construct a weight initializer dispatcher.

        Parameters
        ----------
        initializer_name:
            The string key identifying a registered initializer.
        """
        ...

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Register a weight initializer under a given name.

        Parameters
        ----------
        name:
            Name used to identify the initializer.
        overwrite:
            Whether to allow overwriting an existing registration.

        Returns
        -------
        Callable
            A decorator that registers the initializer function.
        """
        ...

    @classmethod
    def available(cls) -> Tuple[str, ...]:
        """
        Return the names of all registered initializers.
        """
        ...

    def __call__(self, shape: Any, *args: Any, **kwargs: Any) -> IArray:
        """
        Build an initialized array of the given shape.
        """
        ...


def _calculate_fan_in(shape: Tuple[int, ...]) -> int:
    """
    Compute the fan-in value for a weight shape.

    Parameters
    ----------
    shape:
        Shape of the weight array, ``[in_features, out_features]`` for
        dense layers.

    Returns
    -------
    int
        The fan-in (0 for a scalar shape).
    """
    if len(shape) == 0:
        return 0
    return int(shape[0])


def _calculate_fan_in_and_fan_out(shape: Tuple[int, ...]) -> Tuple[int, int]:
    """
    Compute both fan-in and fan-out for a weight shape.

    Parameters
    ----------
    shape:
        Shape of the weight array. Must have rank >= 2.

    Returns
    -------
    tuple[int, int]
        A tuple of (fan_in, fan_out).

    Raises
    ------
    ValueError
        If the shape has fewer than two dimensions.
    """
    if len(shape) < 2:
        raise ValueError(
            f"fan-in/fan-out need a weight of rank >= 2, got shape {list(shape)}"
        )
    return int(shape[0]), int(shape[1])
