"""
Fitness evaluation for weight chromosomes.

Fitness is the negated training error of one trainer iteration run right
after the chromosome's genes were loaded into the network. Higher is
better. The evaluation writes into the network's weight storage and the
trainer updates those weights again, so two evaluations on the same
network must never interleave. Every evaluator serializes its
load-iterate-read sequence behind a lock that belongs to the network, so
all evaluators on one network share it however they were built, and
``FitnessEvaluator.for_pair`` hands out one evaluator per network/trainer pair.
"""

import logging
import threading
import weakref
from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from .encoding import Topology, load_weights
from .errors import MissingDependencyError

logger = logging.getLogger(__name__)


@runtime_checkable
class IterativeTrainer(Protocol):
    """What a chromosome needs from a trainer."""

    def run_iteration(self) -> float: ...


class _TopologyLock:
    """The lock guarding one network's weights."""

    def __init__(self, topology: Topology):
        # Holding the topology keeps its id from being reused while the
        # entry is registered.
        self.topology = topology
        self.rlock = threading.RLock()


_topology_locks: 'weakref.WeakValueDictionary' = weakref.WeakValueDictionary()
_topology_locks_guard = threading.Lock()


def _lock_entry(topology: Topology) -> _TopologyLock:
    """Return the lock entry shared by every evaluator that writes into ``topology``."""
    with _topology_locks_guard:
        entry = _topology_locks.get(id(topology))
        if entry is None:
            entry = _TopologyLock(topology)
            _topology_locks[id(topology)] = entry
        return entry


class FitnessEvaluator:
    """
    Scores gene sequences against one shared network/trainer pair.

    The evaluator does not own the network or the trainer. It guarantees
    that evaluations on the same network run one at a time, whether they
    go through this evaluator, another evaluator built directly, or one
    bound to a different trainer on the same network. Non-finite errors
    from the trainer are passed through as non-finite fitness, never raised.
    """

    _shared: 'weakref.WeakValueDictionary' = weakref.WeakValueDictionary()
    _shared_lock = threading.Lock()

    def __init__(self, topology: Topology, trainer: IterativeTrainer):
        if topology is None:
            raise MissingDependencyError('topology')
        if trainer is None:
            raise MissingDependencyError('trainer')

        self.topology = topology
        self.trainer = trainer
        self.evaluations = 0
        self._topology_lock = _lock_entry(topology)
        self._lock = self._topology_lock.rlock

    @classmethod
    def for_pair(cls, topology: Topology, trainer: IterativeTrainer) -> 'FitnessEvaluator':
        """Return the evaluator shared by every chromosome bound to this pair."""
        if topology is None:
            raise MissingDependencyError('topology')
        if trainer is None:
            raise MissingDependencyError('trainer')

        # The evaluator keeps both objects alive, so their ids stay unique
        # for as long as the entry exists.
        key = (id(topology), id(trainer))
        with cls._shared_lock:
            evaluator = cls._shared.get(key)
            if evaluator is None:
                evaluator = cls(topology, trainer)
                cls._shared[key] = evaluator
            return evaluator

    @property
    def lock(self) -> threading.RLock:
        """Lock held while the network is loaded and trained; one per network."""
        return self._lock

    def evaluate(self, genes: Sequence[float]) -> float:
        """
        Load ``genes`` into the network, run one iteration and score it.

        Raises:
            InvalidRepresentationError: gene count does not match the network.
                Nothing is written to the network in that case.
        """
        with self._lock:
            load_weights(genes, self.topology)
            error = float(self.trainer.run_iteration())
            self.evaluations += 1

        fitness = -error
        if not np.isfinite(fitness):
            logger.warning("Non-finite fitness %r for %d genes", fitness, len(genes))
        else:
            logger.debug("Evaluated %d genes: error=%.6g fitness=%.6g", len(genes), error, fitness)
        return fitness

    def __repr__(self) -> str:
        return (
            f"FitnessEvaluator(topology={self.topology!r}, trainer={type(self.trainer).__name__}, "
            f"evaluations={self.evaluations})"
        )


# =============================================================================
# Ranking helpers
# =============================================================================

def is_finite_fitness(value: float) -> bool:
    return bool(np.isfinite(value))


def ranking_key(fitness: float) -> float:
    """
    Sort key that ranks any non-finite fitness as the worst possible value.

    NaN would otherwise compare false against everything and scramble a
    sort, and +inf can only come from a diverged (negative infinite) error.
    """
    if not np.isfinite(fitness):
        return float('-inf')
    return float(fitness)


def compare_fitness(fitness1: float, fitness2: float) -> int:
    """
    Compare two fitness values.

    Returns:
        1 if fitness1 is better
        -1 if fitness2 is better
        0 if they rank equally
    """
    key1 = ranking_key(fitness1)
    key2 = ranking_key(fitness2)
    if key1 == key2:
        return 0
    return 1 if key1 > key2 else -1
