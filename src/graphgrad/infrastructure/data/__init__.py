"""
Data pipeline: datasets and batching.
"""

from ._dataset import Dataset, InMemoryDataset
from ._data_loader import DataLoader

__all__ = [
    Dataset.__name__,
    InMemoryDataset.__name__,
    DataLoader.__name__,
]
