"""
Genetic-algorithm pieces for evolving the weights of a feed-forward network.

Key components:
- WeightsChromosome: one gene per network weight, scored on construction
- FitnessEvaluator: loads genes into a network and runs one trainer iteration
- UniformBinaryMutation: moves every gene by the smallest positive double
- encoding helpers: canonical gene order, expected length, validation

Example usage:
    from neuroweights.core import FeedForwardNetwork, Trainer
    from neuroweights.datasets import logic_gate
    from neuroweights.evolution import (
        WeightsChromosome, UniformBinaryMutation, SeededRandom,
    )

    X, y = logic_gate('xor')
    network = FeedForwardNetwork([2, 3, 1], seed=0)
    trainer = Trainer(network, X, y)

    parent = WeightsChromosome.from_network(network, trainer)
    child = UniformBinaryMutation(SeededRandom(42)).mutate(parent)
    print(child.fitness())
"""

from .errors import (
    ChromosomeError,
    MissingDependencyError,
    InvalidRepresentationError,
    TypeMismatchError,
)
from .encoding import (
    ReadableTopology,
    Topology,
    iter_weight_positions,
    expected_length,
    is_valid,
    check_length,
    load_weights,
    read_weights,
)
from .random_source import RandomSource, SeededRandom
from .fitness import (
    IterativeTrainer,
    FitnessEvaluator,
    is_finite_fitness,
    ranking_key,
    compare_fitness,
)
from .chromosome import Chromosome, ListChromosome, WeightsChromosome
from .operators import EPSILON, MutationPolicy, UniformBinaryMutation
from .checkpoint import ChromosomeCheckpoint, generate_run_id

__all__ = [
    # Errors
    'ChromosomeError',
    'MissingDependencyError',
    'InvalidRepresentationError',
    'TypeMismatchError',
    # Encoding
    'ReadableTopology',
    'Topology',
    'iter_weight_positions',
    'expected_length',
    'is_valid',
    'check_length',
    'load_weights',
    'read_weights',
    # Randomness
    'RandomSource',
    'SeededRandom',
    # Fitness
    'IterativeTrainer',
    'FitnessEvaluator',
    'is_finite_fitness',
    'ranking_key',
    'compare_fitness',
    # Chromosomes
    'Chromosome',
    'ListChromosome',
    'WeightsChromosome',
    # Mutation
    'EPSILON',
    'MutationPolicy',
    'UniformBinaryMutation',
    # Persistence
    'ChromosomeCheckpoint',
    'generate_run_id',
]
