"""
Mini-batch iteration over a `Dataset`.

`DataLoader` walks a dataset in order (or in a per-epoch permutation when
shuffling) and stacks each group of samples into batch arrays with a new
leading axis: inputs of shape ``[k]`` become ``[B, k]``.

It supports two styles:

- explicit: `next_batch()` until it returns None, then `reset()`;
- iterable: ``for x, y in loader`` runs one full pass from the start.
"""

from __future__ import annotations

import warnings
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

from ..array._array import Array, default_backend
from .._runtime import make_rng
from ._dataset import Dataset

Batch = Tuple[Array, Array]


class DataLoader:
    """
    Batching iterator over a dataset.

    Parameters
    ----------
    dataset : Dataset
        Source of ``(input, target)`` pairs.
    batch_size : int
        Number of samples per batch. Must be positive.
    shuffle : bool, optional
        Draw a fresh permutation from `rng` on every reset. Defaults to False.
    drop_last : bool, optional
        Discard a final batch smaller than `batch_size`. Defaults to False.
    rng : numpy.random.Generator, optional
        Source of shuffling randomness. Defaults to ``make_rng()``.
    backend : IBackend, optional
        Backend used to stack batches.

    Raises
    ------
    ValueError
        If `batch_size` is not positive.
    """

    def __init__(
        self,
        dataset: Dataset,
        *,
        batch_size: int,
        shuffle: bool = False,
        drop_last: bool = False,
        rng: Optional[np.random.Generator] = None,
        backend: Any = None,
    ) -> None:
        if int(batch_size) < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self.dataset = dataset
        self.batch_size = int(batch_size)
        self.shuffle = bool(shuffle)
        self.drop_last = bool(drop_last)
        self._rng = rng if rng is not None else make_rng()
        self._backend = backend if backend is not None else default_backend()

        remainder = len(dataset) % self.batch_size
        if self.drop_last and remainder:
            warnings.warn(
                f"drop_last discards {remainder} of {len(dataset)} samples per epoch",
                UserWarning,
                stacklevel=2,
            )

        self._order: List[int] = []
        self._pos = 0
        self.reset()

    def __len__(self) -> int:
        """Number of batches in one pass."""
        n = len(self.dataset)
        if self.drop_last:
            return n // self.batch_size
        return (n + self.batch_size - 1) // self.batch_size

    def reset(self) -> None:
        """
        Rewind to the start of the dataset, reshuffling if enabled.
        """
        n = len(self.dataset)
        if self.shuffle:
            self._order = [int(i) for i in self._rng.permutation(n)]
        else:
            self._order = list(range(n))
        self._pos = 0

    def next_batch(self) -> Optional[Batch]:
        """
        Return the next ``(inputs, targets)`` batch, or None when the pass
        is exhausted.

        Raises
        ------
        ShapeMismatchError
            If the samples in a batch do not share one shape.
        """
        start = self._pos
        end = min(start + self.batch_size, len(self._order))
        if start >= end:
            return None
        if self.drop_last and end - start < self.batch_size:
            self._pos = len(self._order)
            return None

        xs, ys = [], []
        for i in self._order[start:end]:
            x, y = self.dataset[i]
            xs.append(x)
            ys.append(y)
        self._pos = end
        return self._backend.stack(xs, axis=0), self._backend.stack(ys, axis=0)

    def __iter__(self) -> Iterator[Batch]:
        self.reset()
        while True:
            batch = self.next_batch()
            if batch is None:
                return
            yield batch
