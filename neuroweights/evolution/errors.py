"""
Errors raised while building, evaluating or mutating weight chromosomes.

All of them abort only the chromosome (or the mutation call) being
processed. None of them are retried.
"""

from typing import Optional


class ChromosomeError(Exception):
    """Base class for chromosome construction and mutation failures."""


class MissingDependencyError(ChromosomeError, ValueError):
    """A topology or trainer reference was not provided."""

    def __init__(self, dependency: str):
        self.dependency = dependency
        super().__init__(f"A {dependency} should be provided for the fitness evaluation")


class InvalidRepresentationError(ChromosomeError, ValueError):
    """The gene count does not match the number of weights in the topology."""

    def __init__(self, expected: int, actual: Optional[int]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Representation length mismatch: expected {expected} genes, got {actual}"
        )


class TypeMismatchError(ChromosomeError, TypeError):
    """A mutation policy was applied to a chromosome variant it does not accept."""

    def __init__(self, expected: type, actual: type):
        self.expected_type = expected
        self.actual_type = actual
        super().__init__(
            f"{expected.__name__} expected, got {actual.__name__}"
        )
