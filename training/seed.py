"""Random seed configuration utilities.

Setting seeds for all random number generators helps ensure that
results are reproducible across runs.
"""

from __future__ import annotations

import os
import random

import numpy as np


def set_seed(seed: int) -> None:
    """Set random seed for Python and NumPy.

    Parameters
    ----------
    seed : int
        The seed value to use.
    """
    random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)
    np.random.seed(seed)
