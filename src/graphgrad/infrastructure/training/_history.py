"""
Training history.

`History` records per-epoch metrics produced by `Trainer.fit`, in the manner
of Keras' `History` object. It has no dependency on arrays or graphs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union


Number = Union[int, float]


@dataclass
class History:
    """
    Container for per-epoch training metrics.

    Attributes
    ----------
    history : Dict[str, List[float]]
        Mapping from metric name to a list of per-epoch values.
    epoch : List[int]
        Zero-based epoch indices matching the entries of `history`.
    """

    history: Dict[str, List[float]] = field(default_factory=dict)
    epoch: List[int] = field(default_factory=list)

    def append_epoch(self, epoch_idx: int, logs: Mapping[str, Number]) -> None:
        """
        Append already-aggregated metrics for a completed epoch.

        Values are coerced to `float`.
        """
        self.epoch.append(int(epoch_idx))
        for k, v in logs.items():
            self.history.setdefault(k, []).append(float(v))

    def last(self) -> Dict[str, float]:
        """
        Return metrics from the most recent epoch.
        """
        return {k: float(vs[-1]) for k, vs in self.history.items() if vs}
