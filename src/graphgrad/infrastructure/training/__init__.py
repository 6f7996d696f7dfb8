"""
Training loop and history.
"""

from ._history import History
from ._trainer import LOSSES, EpochResult, StepResult, Trainer

__all__ = [
    EpochResult.__name__,
    History.__name__,
    StepResult.__name__,
    Trainer.__name__,
    "LOSSES",
]
