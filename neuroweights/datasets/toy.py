"""
Tiny training sets for the trainer and the demo.

The truth tables are deterministic, which makes them convenient whenever a
fitness value has to be reproducible: a full-batch trainer on a fixed table
reports the same error for the same weights every time.
"""

import numpy as np
from typing import Tuple, Dict, Optional


TRUTH_TABLES: Dict[str, Tuple[int, int, int, int]] = {
    # Outputs for inputs (0,0), (0,1), (1,0), (1,1)
    'xor': (0, 1, 1, 0),
    'and': (0, 0, 0, 1),
    'or': (0, 1, 1, 1),
    'nand': (1, 1, 1, 0),
}


def logic_gate(name: str) -> Tuple[np.ndarray, np.ndarray]:
    """
    Truth table of a two-input logic gate.

    Returns:
        X: Inputs of shape (4, 2)
        y: Targets of shape (4, 1)
    """
    if name not in TRUTH_TABLES:
        available = ', '.join(TRUTH_TABLES.keys())
        raise ValueError(f"Unknown gate '{name}'. Available: {available}")
    X = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=float)
    y = np.array(TRUTH_TABLES[name], dtype=float).reshape(-1, 1)
    return X, y


def noisy_xor(
    n_samples: int = 200,
    noise: float = 0.1,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    XOR clouds around the four corners of the unit square.

    Args:
        n_samples: Number of samples (rounded down to a multiple of 4)
        noise: Standard deviation of Gaussian noise around each corner
        seed: Random seed

    Returns:
        X: Features of shape (n_samples, 2)
        y: Targets of shape (n_samples, 1)
    """
    rng = np.random.default_rng(seed)
    corners, labels = logic_gate('xor')
    n_per_corner = n_samples // 4

    X = np.repeat(corners, n_per_corner, axis=0)
    X = X + rng.standard_normal(X.shape) * noise
    y = np.repeat(labels, n_per_corner, axis=0)

    indices = rng.permutation(len(y))
    return X[indices], y[indices]


def get_dataset(name: str, **kwargs) -> Tuple[np.ndarray, np.ndarray]:
    """
    Get a dataset by name: a gate from TRUTH_TABLES or 'noisy_xor'.

    Keyword arguments are passed to ``noisy_xor``.
    """
    if name == 'noisy_xor':
        return noisy_xor(**kwargs)
    return logic_gate(name)


def list_datasets():
    return list(TRUTH_TABLES.keys()) + ['noisy_xor']
