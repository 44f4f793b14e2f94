"""
Feed-forward networks whose weights are addressed one connection at a time.

A network is a stack of fully connected layers. Layer ``l`` feeds layer
``l + 1`` through a weight matrix of shape ``(neurons[l], neurons[l + 1])``
and, when layer ``l`` is biased, through an extra bias unit whose outgoing
weights live in a separate vector. The bias unit is addressed as source
neuron ``neurons[l]``, i.e. right after the regular neurons of the layer.

This addressing scheme is what the weight chromosome walks when it loads
genes into a network, so ``set_weight`` / ``get_weight`` are the important
part of this module; the forward and backward passes exist so the concrete
``Trainer`` has something to train.
"""

import numpy as np
from typing import List, Dict, Optional, Tuple, Any, Union
from dataclasses import dataclass
from .activations import get_activation, sigmoid


LOSSES = ('mse', 'bce')


@dataclass
class NetworkConfig:
    """Configuration for a feed-forward network."""
    layer_sizes: List[int]  # Neurons per layer, input layer first
    bias: Union[bool, List[bool]] = True  # One flag per connection layer, or one for all
    activation: str = 'sigmoid'  # Hidden layer activation; output is always sigmoid

    def __post_init__(self):
        if len(self.layer_sizes) < 2:
            raise ValueError(
                f"A network needs at least 2 layers, got {len(self.layer_sizes)}"
            )
        for size in self.layer_sizes:
            if size < 1:
                raise ValueError(f"Layer sizes must be positive, got {self.layer_sizes}")
        if not isinstance(self.bias, bool):
            if len(self.bias) != len(self.layer_sizes) - 1:
                raise ValueError(
                    f"Bias flags length ({len(self.bias)}) must be one less than "
                    f"the number of layers ({len(self.layer_sizes)})"
                )
        # Fail early on unknown activations
        get_activation(self.activation)

    @property
    def bias_flags(self) -> List[bool]:
        """Bias presence for each connection layer (source side)."""
        if isinstance(self.bias, bool):
            return [self.bias] * (len(self.layer_sizes) - 1)
        return [bool(b) for b in self.bias]

    @property
    def total_params(self) -> int:
        """Number of weights including bias connections."""
        params = 0
        for i, biased in enumerate(self.bias_flags):
            params += (self.layer_sizes[i] + int(biased)) * self.layer_sizes[i + 1]
        return params

    def to_dict(self) -> Dict[str, Any]:
        return {
            'layer_sizes': list(self.layer_sizes),
            'bias': self.bias if isinstance(self.bias, bool) else list(self.bias),
            'activation': self.activation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetworkConfig':
        return cls(
            layer_sizes=list(data['layer_sizes']),
            bias=data.get('bias', True),
            activation=data.get('activation', 'sigmoid'),
        )


def mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    return float(np.mean((y_true - y_pred) ** 2))


def binary_cross_entropy(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    eps = 1e-15
    y_pred = np.clip(y_pred, eps, 1 - eps)
    return float(-np.mean(y_true * np.log(y_pred) + (1 - y_true) * np.log(1 - y_pred)))


def compute_loss(y_true: np.ndarray, y_pred: np.ndarray, loss: str = 'mse') -> float:
    """Scalar training error for the given loss name."""
    if loss == 'mse':
        return mean_squared_error(y_true, y_pred)
    if loss == 'bce':
        return binary_cross_entropy(y_true, y_pred)
    raise ValueError(f"Unknown loss '{loss}'. Available: {', '.join(LOSSES)}")


class FeedForwardNetwork:
    """
    A fully connected network with per-connection weight access.

    Layers are numbered from 0 (input) to ``layer_count - 1`` (output).
    ``weights[l]`` and ``biases[l]`` hold the connections from layer ``l``
    to layer ``l + 1``; ``biases[l]`` is None when layer ``l`` is unbiased.
    """

    def __init__(
        self,
        layer_sizes: List[int],
        bias: Union[bool, List[bool]] = True,
        activation: str = 'sigmoid',
        seed: Optional[int] = None,
    ):
        self.config = NetworkConfig(
            layer_sizes=list(layer_sizes),
            bias=bias,
            activation=activation,
        )
        self.activation_fn = get_activation(activation)
        self.seed = seed
        self._init_weights()

    def _init_weights(self):
        """Xavier initialization; bias weights start at zero."""
        rng = np.random.default_rng(self.seed)

        self.weights: List[np.ndarray] = []
        self.biases: List[Optional[np.ndarray]] = []

        sizes = self.config.layer_sizes
        for i, biased in enumerate(self.config.bias_flags):
            fan_in, fan_out = sizes[i], sizes[i + 1]
            std = np.sqrt(2.0 / (fan_in + fan_out))
            self.weights.append(rng.standard_normal((fan_in, fan_out)) * std)
            self.biases.append(np.zeros(fan_out) if biased else None)

    # -------------------------------------------------------------------------
    # Topology queries and per-connection access
    # -------------------------------------------------------------------------

    @property
    def layer_count(self) -> int:
        return len(self.config.layer_sizes)

    def layer_neuron_count(self, layer: int) -> int:
        """Regular neurons in a layer, not counting its bias unit."""
        self._check_layer(layer, self.layer_count)
        return self.config.layer_sizes[layer]

    def is_layer_biased(self, layer: int) -> bool:
        """Whether ``layer`` feeds the next layer through a bias unit."""
        self._check_layer(layer, self.layer_count)
        if layer == self.layer_count - 1:
            # The output layer feeds nothing
            return False
        return self.config.bias_flags[layer]

    def set_weight(self, layer: int, from_neuron: int, to_neuron: int, value: float) -> None:
        """Set the weight of one connection from ``layer`` to ``layer + 1``."""
        self._check_address(layer, from_neuron, to_neuron)
        if from_neuron < self.config.layer_sizes[layer]:
            self.weights[layer][from_neuron, to_neuron] = value
        else:
            self.biases[layer][to_neuron] = value

    def get_weight(self, layer: int, from_neuron: int, to_neuron: int) -> float:
        """Read the weight of one connection from ``layer`` to ``layer + 1``."""
        self._check_address(layer, from_neuron, to_neuron)
        if from_neuron < self.config.layer_sizes[layer]:
            return float(self.weights[layer][from_neuron, to_neuron])
        return float(self.biases[layer][to_neuron])

    def _check_layer(self, layer: int, limit: int) -> None:
        if layer < 0 or layer >= limit:
            raise IndexError(f"Layer index {layer} out of range [0, {limit - 1}]")

    def _check_address(self, layer: int, from_neuron: int, to_neuron: int) -> None:
        self._check_layer(layer, self.layer_count - 1)
        sources = self.config.layer_sizes[layer] + int(self.config.bias_flags[layer])
        if from_neuron < 0 or from_neuron >= sources:
            raise IndexError(
                f"Source neuron {from_neuron} out of range [0, {sources - 1}] "
                f"for layer {layer}"
            )
        targets = self.config.layer_sizes[layer + 1]
        if to_neuron < 0 or to_neuron >= targets:
            raise IndexError(
                f"Target neuron {to_neuron} out of range [0, {targets - 1}] "
                f"for layer {layer}"
            )

    @property
    def total_params(self) -> int:
        return self.config.total_params

    # -------------------------------------------------------------------------
    # Forward / backward passes
    # -------------------------------------------------------------------------

    def forward(self, X: np.ndarray, return_intermediates: bool = False) -> Any:
        """
        Forward pass through the network.

        Args:
            X: Input array of shape (n_samples, layer_sizes[0])
            return_intermediates: If True, also return pre-activations and
                activations of every layer

        Returns:
            Output array of shape (n_samples, layer_sizes[-1]), optionally
            with the intermediate values
        """
        intermediates = {'pre_activations': [], 'activations': [X]}

        current = X
        for i, (W, b) in enumerate(zip(self.weights, self.biases)):
            z = current @ W
            if b is not None:
                z = z + b
            intermediates['pre_activations'].append(z)

            if i < len(self.weights) - 1:
                current = self.activation_fn(z)
            else:
                current = sigmoid(z)
            intermediates['activations'].append(current)

        if return_intermediates:
            return current, intermediates
        return current

    def backward(
        self,
        X: np.ndarray,
        y: np.ndarray,
        loss: str = 'mse',
    ) -> Tuple[List[np.ndarray], List[Optional[np.ndarray]], float]:
        """
        Compute gradients of the loss with respect to every weight.

        Returns:
            Tuple of (weight_gradients, bias_gradients, error) where error is
            the loss of the current weights on (X, y)
        """
        n_samples = X.shape[0]
        y = y.reshape(n_samples, -1)

        output, intermediates = self.forward(X, return_intermediates=True)
        error = compute_loss(y, output, loss)

        if loss == 'bce':
            # Sigmoid output with cross-entropy collapses to this
            delta = output - y
        else:
            delta = 2.0 * (output - y) * output * (1 - output) / y.shape[1]

        weight_grads = [np.zeros_like(W) for W in self.weights]
        bias_grads = [None for _ in self.biases]

        for i in range(len(self.weights) - 1, -1, -1):
            prev_activation = intermediates['activations'][i]
            weight_grads[i] = (prev_activation.T @ delta) / n_samples
            if self.biases[i] is not None:
                bias_grads[i] = np.mean(delta, axis=0)

            if i > 0:
                delta = (delta @ self.weights[i].T) * self.activation_fn.grad(
                    intermediates['pre_activations'][i - 1]
                )

        return weight_grads, bias_grads, error

    def evaluate(self, X: np.ndarray, y: np.ndarray, loss: str = 'mse') -> float:
        """Loss of the current weights on (X, y) without touching them."""
        output = self.forward(X)
        return compute_loss(y.reshape(X.shape[0], -1), output, loss)

    def to_dict(self, include_weights: bool = False) -> Dict:
        data = {
            'config': self.config.to_dict(),
            'total_params': self.total_params,
        }
        if include_weights:
            data['weights'] = [w.tolist() for w in self.weights]
            data['biases'] = [b.tolist() if b is not None else None for b in self.biases]
        return data

    def __repr__(self):
        arch = "→".join(map(str, self.config.layer_sizes))
        return (
            f"FeedForwardNetwork(arch={arch}, activation={self.config.activation}, "
            f"params={self.total_params})"
        )
