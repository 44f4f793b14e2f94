"""
Random sources for mutation.

Mutation policies take their coin flips from an explicitly passed source
instead of a process-wide generator, so a seeded source reproduces the
exact same sequence of mutation directions.
"""

import random
import threading
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    def next_boolean(self) -> bool: ...


class SeededRandom:
    """
    Thread-safe random source backed by ``random.Random``.

    One instance may be shared by mutation calls running on several
    threads; draws are serialized, so each call still sees independent
    fair booleans.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def next_boolean(self) -> bool:
        with self._lock:
            return self._rng.getrandbits(1) == 1

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed})"
