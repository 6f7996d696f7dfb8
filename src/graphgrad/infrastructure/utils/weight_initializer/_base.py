"""
Weight initializer registry and dispatch utilities.

This module defines the concrete `WeightInitializer` used by layers to build
initial parameter values from registered strategies (Xavier, He, zeros).

Design
------
- Initializers are registered by string name via a decorator-based registry.
- Each initializer is a function ``(shape, rng, backend) -> Array`` that
  builds a fresh array. Randomness comes only from the generator passed in.
- The dispatcher resolves an initializer by name at construction time and
  invokes it via `__call__`.

Usage example
-------------
Registering an initializer:

    @WeightInitializer.register_initializer("he_uniform")
    def he_uniform(shape, rng, backend) -> Array:
        ...

Applying an initializer:

    init = WeightInitializer("xavier_uniform")
    w = init((in_features, out_features), rng=make_rng(0))
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, TypeVar

import numpy as np

from ....domain.utils._weight_initialization import _WeightInitializer
from ..._runtime import make_rng
from ..._shape import Shape, ShapeLike
from ...array._array import Array, default_backend

T = TypeVar("T", bound=Callable[..., Array])


class WeightInitializer(_WeightInitializer):
    """
    Registry-backed weight initializer dispatcher.

    Parameters
    ----------
    initializer_name : str
        Name of a registered initializer.

    Raises
    ------
    ValueError
        If no initializer is registered under `initializer_name`.
    """

    INITIALIZERS: ClassVar[Dict[str, Callable[..., Array]]] = {}

    def __init__(self, initializer_name: str) -> None:
        try:
            self._initializer: Callable[..., Array] = self.INITIALIZERS[
                initializer_name
            ]
        except KeyError as e:
            available = ", ".join(sorted(self.INITIALIZERS)) or "<none>"
            raise ValueError(
                f"Unsupported initializer name: {initializer_name!r}. "
                f"Available: {available}"
            ) from e
        self.name = initializer_name

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Decorator to register a weight initializer under `name`.

        Parameters
        ----------
        name:
            Registry key used to retrieve the initializer later.
        overwrite:
            If False (default), raises if `name` is already registered.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def decorator(func: T) -> T:
            if not overwrite and name in cls.INITIALIZERS:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = func
            return func

        return decorator

    @classmethod
    def available(cls) -> Tuple[str, ...]:
        """Return registered initializer names (sorted)."""
        return tuple(sorted(cls.INITIALIZERS))

    @classmethod
    def get(cls, name: str) -> Callable[..., Array]:
        """Get a registered initializer callable by name."""
        return cls.INITIALIZERS[name]

    def __call__(
        self,
        shape: ShapeLike,
        *,
        rng: Optional[np.random.Generator] = None,
        backend: Any = None,
    ) -> Array:
        """
        Build an initialized array.

        Parameters
        ----------
        shape : ShapeLike
            Target shape.
        rng : numpy.random.Generator, optional
            Source of randomness. Defaults to ``make_rng()``.
        backend : IBackend, optional
            Backend of the returned array. Defaults to the shared backend.
        """
        return self._initializer(
            Shape.of(shape),
            rng if rng is not None else make_rng(),
            backend if backend is not None else default_backend(),
        )
