from ._array import Array, default_backend

__all__ = [
    Array.__name__,
    default_backend.__name__,
]
