"""
Entry point for running neuroweights as a module.

Builds a small network on a logic-gate dataset, turns its initial weights
into a chromosome and applies the uniform mutation repeatedly, printing the
fitness of every offspring.

Usage:
    python -m neuroweights --dataset xor --hidden 3 --steps 20 --seed 0
    python -m neuroweights --checkpoint data/run.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from .core import FeedForwardNetwork, Trainer, TrainingConfig
from .datasets import get_dataset, list_datasets
from .evolution import (
    ChromosomeCheckpoint,
    SeededRandom,
    UniformBinaryMutation,
    WeightsChromosome,
)

logger = logging.getLogger('neuroweights')


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Mutate the weights of a small network and report fitness'
    )
    parser.add_argument(
        '--dataset', choices=list_datasets(), default='xor',
        help='Training set (default: xor)'
    )
    parser.add_argument(
        '--hidden', type=int, nargs='*', default=[3],
        help='Hidden layer sizes (default: 3)'
    )
    parser.add_argument(
        '--no-bias', action='store_true',
        help='Build the network without bias units'
    )
    parser.add_argument(
        '--steps', type=int, default=10,
        help='Number of successive mutations (default: 10)'
    )
    parser.add_argument(
        '--learning-rate', type=float, default=0.5,
        help='Trainer learning rate (default: 0.5)'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Seed for weight initialization and mutation directions'
    )
    parser.add_argument(
        '--checkpoint', type=str, default=None,
        help='Write the final lineage to this JSON file'
    )
    parser.add_argument(
        '--log-level', default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity (default: WARNING)'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
    )

    X, y = get_dataset(args.dataset)
    layer_sizes = [X.shape[1]] + list(args.hidden) + [y.shape[1]]
    network = FeedForwardNetwork(layer_sizes, bias=not args.no_bias, seed=args.seed)
    trainer = Trainer(network, X, y, TrainingConfig(learning_rate=args.learning_rate))
    logger.info("Built %r on dataset %s", network, args.dataset)

    mutation = UniformBinaryMutation(SeededRandom(args.seed))
    chromosome = WeightsChromosome.from_network(network, trainer)
    lineage = [chromosome]

    print(f"step   0  genes={chromosome.length}  fitness={chromosome.fitness():.6f}")
    for step in range(1, args.steps + 1):
        chromosome = mutation.mutate(chromosome)
        lineage.append(chromosome)
        print(f"step {step:3d}  genes={chromosome.length}  fitness={chromosome.fitness():.6f}")

    if args.checkpoint:
        checkpoint = ChromosomeCheckpoint.from_chromosomes(
            lineage,
            network.config.to_dict(),
            metadata={'dataset': args.dataset, 'steps': args.steps, 'seed': args.seed},
        )
        path = checkpoint.save(args.checkpoint)
        print(f"Saved {len(lineage)} chromosomes to {path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
