"""
Datasets: indexed collections of ``(input, target)`` array pairs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Tuple

from ..array._array import Array

Sample = Tuple[Array, Array]


class Dataset(ABC):
    """
    Abstract indexed dataset.

    Subclasses implement `__len__` and `__getitem__`, which returns the
    ``(input, target)`` pair at an index and raises `IndexError` when the
    index is out of range.
    """

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def __getitem__(self, index: int) -> Sample:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return len(self) == 0


class InMemoryDataset(Dataset):
    """
    Dataset backed by a list of ``(input, target)`` pairs.

    Parameters
    ----------
    samples : Iterable[tuple[Array, Array]]
        The samples; copied into an internal list.

    Raises
    ------
    TypeError
        If a sample is not a pair of arrays.
    """

    def __init__(self, samples: Iterable[Sample]) -> None:
        self._samples: List[Sample] = []
        for i, s in enumerate(samples):
            if (
                not isinstance(s, tuple)
                or len(s) != 2
                or not all(isinstance(a, Array) for a in s)
            ):
                raise TypeError(f"sample {i} must be an (Array, Array) tuple")
            self._samples.append(s)

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, index: int) -> Sample:
        return self._samples[index]
