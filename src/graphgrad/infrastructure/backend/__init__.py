from ._numpy_backend import NumpyBackend

__all__ = [
    NumpyBackend.__name__,
]
