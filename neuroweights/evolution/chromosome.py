"""
Chromosome representation for evolving network weights.

A ``WeightsChromosome`` holds one gene per network weight (bias connections
included) in the canonical order defined by ``encoding``. Its fitness is
computed once, while it is being constructed, by loading the genes into the
bound network and running one trainer iteration. Chromosomes never change
after construction: mutation always builds a new one through
``new_fixed_length_chromosome``, which re-evaluates it.

Key features:
- Fixed length, checked against the network layout on construction
- Fitness is never stale relative to the genes
- Network and trainer are shared references, not copies
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Sequence, Tuple, Any

from .encoding import ReadableTopology, Topology, check_length, read_weights
from .fitness import FitnessEvaluator, IterativeTrainer, compare_fitness


class Chromosome(ABC):
    """A candidate solution with a scalar fitness (higher is better)."""

    @abstractmethod
    def fitness(self) -> float:
        """Fitness of this chromosome."""

    def compare_to(self, other: 'Chromosome') -> int:
        """1 if self is fitter, -1 if other is fitter, 0 if they rank equally."""
        return compare_fitness(self.fitness(), other.fitness())

    def is_same(self, other: 'Chromosome') -> bool:
        """Whether ``other`` encodes the same solution."""
        return False


class ListChromosome(Chromosome):
    """
    A chromosome whose genes are a fixed-length sequence.

    Subclasses decide which sequences are valid and how to build a sibling
    chromosome from a new sequence of the same length.
    """

    def __init__(self, representation: Optional[Sequence[Any]]):
        values = None if representation is None else tuple(representation)
        self.check_validity(values)
        self._representation: Tuple[Any, ...] = values

    @property
    def representation(self) -> List[Any]:
        """Copy of the genes."""
        return list(self._representation)

    @property
    def length(self) -> int:
        return len(self._representation)

    def __len__(self) -> int:
        return len(self._representation)

    @abstractmethod
    def check_validity(self, values: Optional[Tuple[Any, ...]]) -> None:
        """Raise InvalidRepresentationError if ``values`` is not acceptable."""

    @abstractmethod
    def new_fixed_length_chromosome(self, values: Sequence[Any]) -> 'ListChromosome':
        """Build a chromosome of the same kind from ``values``."""

    def is_same(self, other: Chromosome) -> bool:
        return (
            isinstance(other, type(self))
            and self._representation == other._representation
        )


class WeightsChromosome(ListChromosome):
    """
    Network weights as a chromosome.

    Attributes:
        genes: One float per network weight, in canonical order
        evaluator: FitnessEvaluator bound to the shared network/trainer pair

    Pass either ``topology`` and ``trainer`` or an ``evaluator``. When the
    pair is given, the evaluator is looked up with
    ``FitnessEvaluator.for_pair`` so every chromosome on the same pair
    shares one lock.
    """

    def __init__(
        self,
        representation: Optional[Sequence[float]],
        topology: Optional[Topology] = None,
        trainer: Optional[IterativeTrainer] = None,
        evaluator: Optional[FitnessEvaluator] = None,
    ):
        if evaluator is None:
            evaluator = FitnessEvaluator.for_pair(topology, trainer)
        elif topology is not None and topology is not evaluator.topology:
            raise ValueError("topology does not match the evaluator's topology")
        elif trainer is not None and trainer is not evaluator.trainer:
            raise ValueError("trainer does not match the evaluator's trainer")

        self._evaluator = evaluator
        if representation is not None:
            representation = [float(v) for v in representation]
        super().__init__(representation)

        self._fitness = evaluator.evaluate(self._representation)

    @classmethod
    def from_network(
        cls,
        topology: ReadableTopology,
        trainer: IterativeTrainer,
    ) -> 'WeightsChromosome':
        """
        Build a chromosome from the weights the network currently holds.

        The network must also provide ``get_weight``.
        """
        evaluator = FitnessEvaluator.for_pair(topology, trainer)
        with evaluator.lock:
            genes = read_weights(topology)
        return cls(genes, evaluator=evaluator)

    def check_validity(self, values: Optional[Tuple[float, ...]]) -> None:
        check_length(values, self._evaluator.topology)

    def new_fixed_length_chromosome(self, values: Sequence[float]) -> 'WeightsChromosome':
        """New chromosome from ``values`` on the same network and trainer, freshly evaluated."""
        return WeightsChromosome(values, evaluator=self._evaluator)

    def fitness(self) -> float:
        return self._fitness

    @property
    def genes(self) -> List[float]:
        return self.representation

    @property
    def evaluator(self) -> FitnessEvaluator:
        return self._evaluator

    @property
    def topology(self) -> Topology:
        return self._evaluator.topology

    @property
    def trainer(self) -> IterativeTrainer:
        return self._evaluator.trainer

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to JSON-serializable dictionary.

        The network and trainer are not included; fitness is informational
        only, it is recomputed whenever the genes are turned back into a
        chromosome.
        """
        return {
            'genes': list(self._representation),
            'fitness': self._fitness,
        }

    def __repr__(self) -> str:
        return f"WeightsChromosome(length={self.length}, fitness={self._fitness:.6g})"
