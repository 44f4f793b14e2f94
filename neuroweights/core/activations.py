"""
Activation functions for the feed-forward networks whose weights we evolve.

Only a small registry is needed: the chromosome never looks at activations,
but the concrete network uses one for every hidden layer and the trainer
needs its derivative for backpropagation.
"""

import numpy as np
from typing import Callable, Dict


def linear(x: np.ndarray) -> np.ndarray:
    """Identity activation."""
    return x


def linear_derivative(x: np.ndarray) -> np.ndarray:
    return np.ones_like(x)


def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0, x)


def relu_derivative(x: np.ndarray) -> np.ndarray:
    return (x > 0).astype(float)


def sigmoid(x: np.ndarray) -> np.ndarray:
    """Logistic sigmoid, bounded to (0, 1)."""
    # Clip so exp() cannot overflow for wild weights
    x = np.clip(x, -500, 500)
    return 1 / (1 + np.exp(-x))


def sigmoid_derivative(x: np.ndarray) -> np.ndarray:
    s = sigmoid(x)
    return s * (1 - s)


def tanh(x: np.ndarray) -> np.ndarray:
    return np.tanh(x)


def tanh_derivative(x: np.ndarray) -> np.ndarray:
    return 1 - np.tanh(x) ** 2


class Activation:
    """An activation function paired with its derivative."""

    def __init__(self, name: str, func: Callable, derivative: Callable):
        self.name = name
        self.func = func
        self.derivative = derivative

    def __call__(self, x: np.ndarray) -> np.ndarray:
        return self.func(x)

    def grad(self, x: np.ndarray) -> np.ndarray:
        return self.derivative(x)

    def __repr__(self):
        return f"Activation({self.name})"


ACTIVATIONS: Dict[str, Activation] = {
    'linear': Activation('linear', linear, linear_derivative),
    'relu': Activation('relu', relu, relu_derivative),
    'sigmoid': Activation('sigmoid', sigmoid, sigmoid_derivative),
    'tanh': Activation('tanh', tanh, tanh_derivative),
}


def get_activation(name: str) -> Activation:
    """Look up an activation by name."""
    if name not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ValueError(f"Unknown activation '{name}'. Available: {available}")
    return ACTIVATIONS[name]
