"""
Mutation operators for weight chromosomes.

Selection and crossover belong to whatever GA driver holds the population;
this module only provides the mutation policy the driver calls.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .chromosome import Chromosome, WeightsChromosome
from .errors import TypeMismatchError
from .random_source import RandomSource, SeededRandom


# Smallest positive (subnormal) double. The mutation step is this fixed
# absolute amount, not a step relative to the gene's magnitude.
EPSILON: float = float(np.nextafter(0.0, 1.0))


class MutationPolicy(ABC):
    """A way of deriving a new chromosome from an existing one."""

    # Chromosome variant the policy accepts; anything else is a TypeMismatchError
    accepts: type = Chromosome

    def mutate(self, original: Chromosome) -> Chromosome:
        if not isinstance(original, self.accepts):
            raise TypeMismatchError(self.accepts, type(original))
        return self._mutate(original)

    @abstractmethod
    def _mutate(self, original: Chromosome) -> Chromosome:
        """Mutate a chromosome already known to be of the accepted variant."""


class UniformBinaryMutation(MutationPolicy):
    """
    Nudge every gene by the smallest positive double, up or down at random.

    Every gene moves by exactly ``EPSILON``: down when the random source
    returns True, up otherwise. One boolean is drawn per gene, in gene
    order. For genes of ordinary magnitude the step is absorbed by rounding
    and the value does not change; only genes at or near zero move
    observably. Overflow and rounding follow IEEE semantics and never raise.

    Args:
        random_source: Source of the per-gene coin flips. Defaults to an
            unseeded ``SeededRandom`` owned by this policy.
    """

    accepts = WeightsChromosome

    def __init__(self, random_source: Optional[RandomSource] = None):
        self.random_source = random_source if random_source is not None else SeededRandom()

    def _mutate(self, original: WeightsChromosome) -> WeightsChromosome:
        # Copy of the parent's genes; the parent is never touched
        representation = original.genes

        for i, value in enumerate(representation):
            if self.random_source.next_boolean():
                value -= EPSILON
            else:
                value += EPSILON
            representation[i] = value

        return original.new_fixed_length_chromosome(representation)

    def __repr__(self) -> str:
        return f"UniformBinaryMutation(random_source={self.random_source!r})"
