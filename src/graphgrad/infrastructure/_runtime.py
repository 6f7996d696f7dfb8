"""
Random number generation.

Every source of randomness in GraphGrad (weight initialization, data
shuffling) takes an explicit `numpy.random.Generator`. `make_rng` builds one;
with no seed it uses `DEFAULT_SEED`, so runs are reproducible unless a caller
asks otherwise.
"""

from typing import Optional

import numpy as np

DEFAULT_SEED = 0


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Return a new generator seeded with `seed` (or `DEFAULT_SEED`).

    Two generators built from the same seed produce the same stream.
    """
    return np.random.default_rng(DEFAULT_SEED if seed is None else seed)
