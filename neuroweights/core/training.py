"""
Iterative training for feed-forward networks.

The trainer is stateful: every call to ``run_iteration`` performs one epoch
of gradient descent on the network it was built with and reports the error
of the weights the network held when the epoch started. That is the
contract the weight chromosome relies on to score a freshly loaded set of
weights.
"""

import logging
import numpy as np
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict
from .network import FeedForwardNetwork, LOSSES

logger = logging.getLogger(__name__)


@dataclass
class TrainingConfig:
    """Configuration for training."""
    learning_rate: float = 0.1
    momentum: float = 0.0
    batch_size: Optional[int] = None  # None means full batch
    loss: str = 'mse'  # 'mse' or 'bce'
    shuffle: bool = False  # Shuffle samples every iteration (mini-batch only)
    seed: Optional[int] = None  # Seed for shuffling

    def __post_init__(self):
        if self.loss not in LOSSES:
            raise ValueError(f"Unknown loss '{self.loss}'. Available: {', '.join(LOSSES)}")
        if self.learning_rate <= 0:
            raise ValueError(f"Learning rate must be positive, got {self.learning_rate}")
        if not 0.0 <= self.momentum < 1.0:
            raise ValueError(f"Momentum {self.momentum} out of range [0, 1)")
        if self.batch_size is not None and self.batch_size < 1:
            raise ValueError(f"Batch size must be positive, got {self.batch_size}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrainingConfig':
        return cls(**data)


class Trainer:
    """
    Backpropagation trainer bound to one network and one training set.

    Each ``run_iteration`` call:
    - measures the error of the current weights on the whole training set
    - runs one epoch of (mini-)batch gradient descent, updating the network
    - returns the error measured before the update
    """

    def __init__(
        self,
        network: FeedForwardNetwork,
        X: np.ndarray,
        y: np.ndarray,
        config: Optional[TrainingConfig] = None,
    ):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float).reshape(X.shape[0], -1)
        if X.shape[1] != network.layer_neuron_count(0):
            raise ValueError(
                f"Input width ({X.shape[1]}) must match the input layer "
                f"({network.layer_neuron_count(0)})"
            )
        output_layer = network.layer_count - 1
        if y.shape[1] != network.layer_neuron_count(output_layer):
            raise ValueError(
                f"Target width ({y.shape[1]}) must match the output layer "
                f"({network.layer_neuron_count(output_layer)})"
            )

        self.network = network
        self.X = X
        self.y = y
        self.config = config or TrainingConfig()
        self.iterations = 0
        self.history: Dict[str, List[float]] = {'error': []}
        self._error: Optional[float] = None
        self._rng = np.random.default_rng(self.config.seed)
        self._velocities: Optional[List[np.ndarray]] = None
        self._bias_velocities: Optional[List[Optional[np.ndarray]]] = None

    @property
    def error(self) -> Optional[float]:
        """Error reported by the last iteration (None before the first)."""
        return self._error

    def run_iteration(self) -> float:
        """Run one training epoch and return the error of the starting weights."""
        n_samples = self.X.shape[0]
        batch_size = self.config.batch_size or n_samples

        # Scored on the full set so mini-batching does not change the number
        error = self.network.evaluate(self.X, self.y, self.config.loss)

        if self.config.shuffle and batch_size < n_samples:
            indices = self._rng.permutation(n_samples)
        else:
            indices = np.arange(n_samples)

        for start in range(0, n_samples, batch_size):
            batch = indices[start:start + batch_size]
            weight_grads, bias_grads, _ = self.network.backward(
                self.X[batch], self.y[batch], self.config.loss
            )
            if self.config.momentum > 0:
                self._update_with_momentum(weight_grads, bias_grads)
            else:
                self._update_sgd(weight_grads, bias_grads)

        self.iterations += 1
        self._error = error
        self.history['error'].append(error)

        if not np.isfinite(error):
            logger.warning("Iteration %d produced a non-finite error: %r", self.iterations, error)
        else:
            logger.debug("Iteration %d error=%.6f", self.iterations, error)
        return error

    def _update_sgd(self, weight_grads: List[np.ndarray], bias_grads: List[Optional[np.ndarray]]):
        lr = self.config.learning_rate
        for i in range(len(self.network.weights)):
            self.network.weights[i] -= lr * weight_grads[i]
            if self.network.biases[i] is not None:
                self.network.biases[i] -= lr * bias_grads[i]

    def _update_with_momentum(
        self,
        weight_grads: List[np.ndarray],
        bias_grads: List[Optional[np.ndarray]],
    ):
        lr = self.config.learning_rate
        mu = self.config.momentum

        if self._velocities is None:
            self._velocities = [np.zeros_like(W) for W in self.network.weights]
            self._bias_velocities = [
                np.zeros_like(b) if b is not None else None
                for b in self.network.biases
            ]

        for i in range(len(self.network.weights)):
            self._velocities[i] = mu * self._velocities[i] - lr * weight_grads[i]
            self.network.weights[i] += self._velocities[i]

            if self.network.biases[i] is not None:
                self._bias_velocities[i] = mu * self._bias_velocities[i] - lr * bias_grads[i]
                self.network.biases[i] += self._bias_velocities[i]

    def reset(self) -> None:
        """Forget momentum and history; the network weights are untouched."""
        self.iterations = 0
        self.history = {'error': []}
        self._error = None
        self._velocities = None
        self._bias_velocities = None
