"""
Tests for the feed-forward network, its trainer and the toy datasets.

Run with: python -m pytest tests/test_network.py -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neuroweights.core import (
    ACTIVATIONS,
    FeedForwardNetwork,
    NetworkConfig,
    Trainer,
    TrainingConfig,
    compute_loss,
    get_activation,
)
from neuroweights.datasets import get_dataset, list_datasets, logic_gate, noisy_xor
from neuroweights.evolution.encoding import ReadableTopology, Topology, expected_length


class TestNetworkConfig:
    """Tests for NetworkConfig."""

    def test_total_params(self):
        config = NetworkConfig(layer_sizes=[3, 2], bias=[True])
        assert config.total_params == 8

        config = NetworkConfig(layer_sizes=[2, 4, 1], bias=True)
        # (2+1)*4 + (4+1)*1
        assert config.total_params == 17

    def test_bias_flags_broadcast(self):
        assert NetworkConfig(layer_sizes=[2, 3, 1], bias=False).bias_flags == [False, False]
        assert NetworkConfig(layer_sizes=[2, 3, 1], bias=[True, False]).bias_flags == [True, False]

    def test_validation(self):
        with pytest.raises(ValueError):
            NetworkConfig(layer_sizes=[4])
        with pytest.raises(ValueError):
            NetworkConfig(layer_sizes=[2, 0, 1])
        with pytest.raises(ValueError):
            NetworkConfig(layer_sizes=[2, 3, 1], bias=[True])
        with pytest.raises(ValueError):
            NetworkConfig(layer_sizes=[2, 1], activation='softmaxish')

    def test_serialization(self):
        config = NetworkConfig(layer_sizes=[2, 3, 1], bias=[True, False], activation='tanh')
        restored = NetworkConfig.from_dict(config.to_dict())
        assert restored == config


class TestFeedForwardNetwork:
    """Tests for FeedForwardNetwork."""

    def test_satisfies_topology_protocol(self):
        assert isinstance(FeedForwardNetwork([2, 1]), Topology)
        assert isinstance(FeedForwardNetwork([2, 1]), ReadableTopology)

    def test_topology_queries(self):
        network = FeedForwardNetwork([3, 4, 2], bias=[True, False])
        assert network.layer_count == 3
        assert [network.layer_neuron_count(l) for l in range(3)] == [3, 4, 2]
        assert network.is_layer_biased(0) is True
        assert network.is_layer_biased(1) is False
        assert network.is_layer_biased(2) is False

    def test_output_layer_is_never_biased(self):
        network = FeedForwardNetwork([2, 2], bias=True)
        assert network.is_layer_biased(1) is False

    def test_total_params_matches_expected_length(self):
        for sizes, bias in [([3, 2], True), ([2, 5, 3, 1], [True, False, True]), ([4, 4], False)]:
            network = FeedForwardNetwork(sizes, bias=bias)
            assert network.total_params == expected_length(network)

    def test_set_and_get_weight(self):
        network = FeedForwardNetwork([3, 2], bias=True, seed=0)
        network.set_weight(0, 1, 0, 0.75)
        assert network.get_weight(0, 1, 0) == 0.75
        assert network.weights[0][1, 0] == 0.75

    def test_bias_unit_is_last_source_neuron(self):
        network = FeedForwardNetwork([3, 2], bias=True, seed=0)
        network.set_weight(0, 3, 1, -2.0)
        assert network.biases[0][1] == -2.0
        assert network.get_weight(0, 3, 1) == -2.0

    def test_out_of_range_addresses(self):
        network = FeedForwardNetwork([3, 2], bias=False)
        with pytest.raises(IndexError):
            network.set_weight(1, 0, 0, 1.0)
        with pytest.raises(IndexError):
            network.set_weight(0, 3, 0, 1.0)  # no bias unit
        with pytest.raises(IndexError):
            network.set_weight(0, 0, 2, 1.0)
        with pytest.raises(IndexError):
            network.get_weight(-1, 0, 0)
        with pytest.raises(IndexError):
            network.layer_neuron_count(3)

    def test_seeded_initialization(self):
        a = FeedForwardNetwork([2, 3, 1], seed=7)
        b = FeedForwardNetwork([2, 3, 1], seed=7)
        for wa, wb in zip(a.weights, b.weights):
            np.testing.assert_array_equal(wa, wb)
        assert all(np.all(bias == 0) for bias in a.biases)

    def test_forward_shape_and_range(self):
        network = FeedForwardNetwork([2, 4, 3], seed=0)
        X = np.random.default_rng(0).standard_normal((5, 2))
        out = network.forward(X)
        assert out.shape == (5, 3)
        assert np.all((out > 0) & (out < 1))

    def test_backward_matches_numerical_gradient(self):
        network = FeedForwardNetwork([2, 3, 1], bias=True, activation='tanh', seed=2)
        X, y = logic_gate('xor')
        weight_grads, bias_grads, error = network.backward(X, y, loss='mse')
        assert error == pytest.approx(network.evaluate(X, y, loss='mse'))

        h = 1e-6
        original = network.get_weight(0, 1, 2)
        network.set_weight(0, 1, 2, original + h)
        plus = network.evaluate(X, y)
        network.set_weight(0, 1, 2, original - h)
        minus = network.evaluate(X, y)
        network.set_weight(0, 1, 2, original)

        assert weight_grads[0][1, 2] == pytest.approx((plus - minus) / (2 * h), rel=1e-4, abs=1e-8)

        original = network.get_weight(1, 3, 0)  # output bias
        network.set_weight(1, 3, 0, original + h)
        plus = network.evaluate(X, y)
        network.set_weight(1, 3, 0, original - h)
        minus = network.evaluate(X, y)
        network.set_weight(1, 3, 0, original)

        assert bias_grads[1][0] == pytest.approx((plus - minus) / (2 * h), rel=1e-4, abs=1e-8)

    def test_to_dict(self):
        network = FeedForwardNetwork([2, 1], bias=False, seed=0)
        data = network.to_dict(include_weights=True)
        assert data['config']['layer_sizes'] == [2, 1]
        assert data['total_params'] == 2
        assert data['biases'] == [None]

    def test_compute_loss(self):
        y = np.array([[0.0], [1.0]])
        p = np.array([[0.0], [0.5]])
        assert compute_loss(y, p, 'mse') == pytest.approx(0.125)
        assert compute_loss(y, p, 'bce') > 0
        with pytest.raises(ValueError):
            compute_loss(y, p, 'hinge')

    def test_get_activation(self):
        assert get_activation('relu')(np.array([-1.0, 2.0])).tolist() == [0.0, 2.0]
        with pytest.raises(ValueError):
            get_activation('nope')

    def test_activation_derivatives(self):
        x = np.array([-0.7, 0.3, 1.2])
        h = 1e-6
        for name, activation in ACTIVATIONS.items():
            numerical = (activation(x + h) - activation(x - h)) / (2 * h)
            np.testing.assert_allclose(activation.grad(x), numerical, rtol=1e-5, atol=1e-8, err_msg=name)


class TestTrainer:
    """Tests for the iterative trainer."""

    def test_reports_error_of_starting_weights(self):
        X, y = logic_gate('xor')
        network = FeedForwardNetwork([2, 3, 1], seed=0)
        trainer = Trainer(network, X, y, TrainingConfig(learning_rate=0.5))

        before = network.evaluate(X, y)
        reported = trainer.run_iteration()

        assert reported == before
        assert trainer.error == reported
        assert network.evaluate(X, y) != before

    def test_error_decreases(self):
        X, y = logic_gate('or')
        network = FeedForwardNetwork([2, 4, 1], seed=0)
        trainer = Trainer(network, X, y, TrainingConfig(learning_rate=0.5))

        for _ in range(200):
            trainer.run_iteration()

        assert trainer.iterations == 200
        assert trainer.history['error'][-1] < trainer.history['error'][0]

    def test_mini_batch_with_momentum(self):
        X, y = noisy_xor(n_samples=40, seed=1)
        network = FeedForwardNetwork([2, 4, 1], seed=1)
        config = TrainingConfig(learning_rate=0.2, momentum=0.9, batch_size=8, shuffle=True, seed=3)
        trainer = Trainer(network, X, y, config)

        errors = [trainer.run_iteration() for _ in range(5)]

        assert len(errors) == 5
        assert all(np.isfinite(errors))

    def test_bce_loss(self):
        X, y = logic_gate('and')
        network = FeedForwardNetwork([2, 1], seed=0)
        trainer = Trainer(network, X, y, TrainingConfig(loss='bce'))
        before = network.evaluate(X, y, loss='bce')
        assert trainer.run_iteration() == before
        assert network.evaluate(X, y, loss='bce') < before

    def test_shape_validation(self):
        X, y = logic_gate('xor')
        with pytest.raises(ValueError):
            Trainer(FeedForwardNetwork([3, 1]), X, y)
        with pytest.raises(ValueError):
            Trainer(FeedForwardNetwork([2, 2]), X, y)

    def test_config_validation(self):
        with pytest.raises(ValueError):
            TrainingConfig(loss='hinge')
        with pytest.raises(ValueError):
            TrainingConfig(learning_rate=0)
        with pytest.raises(ValueError):
            TrainingConfig(momentum=1.0)
        with pytest.raises(ValueError):
            TrainingConfig(batch_size=0)

    def test_config_serialization(self):
        config = TrainingConfig(learning_rate=0.3, momentum=0.5, batch_size=2)
        assert TrainingConfig.from_dict(config.to_dict()) == config

    def test_reset(self):
        X, y = logic_gate('xor')
        trainer = Trainer(FeedForwardNetwork([2, 1]), X, y)
        trainer.run_iteration()
        trainer.reset()
        assert trainer.iterations == 0
        assert trainer.error is None
        assert trainer.history == {'error': []}


class TestDatasets:
    """Tests for the toy datasets."""

    def test_logic_gates(self):
        X, y = logic_gate('xor')
        assert X.shape == (4, 2)
        assert y.ravel().tolist() == [0.0, 1.0, 1.0, 0.0]
        with pytest.raises(ValueError):
            logic_gate('xnor3')

    def test_noisy_xor(self):
        X, y = noisy_xor(n_samples=100, noise=0.05, seed=0)
        assert X.shape == (100, 2)
        assert y.shape == (100, 1)
        X2, _ = noisy_xor(n_samples=100, noise=0.05, seed=0)
        np.testing.assert_array_equal(X, X2)

    def test_get_dataset(self):
        assert 'xor' in list_datasets()
        X, y = get_dataset('noisy_xor', n_samples=8, seed=0)
        assert X.shape == (8, 2)
        X, y = get_dataset('nand')
        assert y.ravel().tolist() == [1.0, 1.0, 1.0, 0.0]
