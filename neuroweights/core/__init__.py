"""Feed-forward networks and the trainer that scores their weights."""

from .network import FeedForwardNetwork, NetworkConfig, compute_loss
from .activations import ACTIVATIONS, get_activation
from .training import Trainer, TrainingConfig

__all__ = [
    'FeedForwardNetwork',
    'NetworkConfig',
    'compute_loss',
    'ACTIVATIONS',
    'get_activation',
    'Trainer',
    'TrainingConfig',
]
