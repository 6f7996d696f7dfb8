"""
Helpers shared by the optimizers.
"""

from typing import Iterable, Iterator, Tuple

from ...domain._errors import OptimizerError
from .._parameter import Parameter
from ..array._array import Array


def updatable(params: Iterable[Parameter]) -> Iterator[Tuple[Parameter, Array]]:
    """
    Yield ``(param, grad)`` for every parameter an optimizer should update.

    Parameters without a gradient and frozen parameters are skipped.

    Raises
    ------
    OptimizerError
        If a gradient's shape differs from its parameter's.
    """
    for p in params:
        g = p.grad
        if g is None or p.frozen:
            continue
        if g.shape != p.data.shape:
            raise OptimizerError(
                f"gradient of shape {g.shape} cannot update parameter "
                f"{p.name or '<unnamed>'!r} of shape {p.data.shape}"
            )
        yield p, g
