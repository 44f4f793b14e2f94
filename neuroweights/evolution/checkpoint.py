"""
Snapshots of weight chromosomes on disk.

A checkpoint stores gene sequences together with the network layout they
were built for. Stored fitness values are informational: restoring a
checkpoint always rebuilds the chromosomes through a live evaluator, which
recomputes fitness from the genes. The file is strict JSON: a non-finite
fitness is stored as null.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from filelock import FileLock

from .chromosome import WeightsChromosome
from .encoding import expected_length
from .errors import InvalidRepresentationError
from .fitness import FitnessEvaluator, is_finite_fitness

logger = logging.getLogger(__name__)


def generate_run_id() -> str:
    """Generate unique run identifier."""
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"weights_{timestamp}_{uuid.uuid4().hex[:6]}"


def _chromosome_entry(chromosome: WeightsChromosome) -> Dict[str, Any]:
    entry = chromosome.to_dict()
    if not is_finite_fitness(entry['fitness']):
        entry['fitness'] = None
    return entry


@dataclass
class ChromosomeCheckpoint:
    """Gene sequences of a set of chromosomes plus the layout they target."""
    run_id: str
    network_config: Dict[str, Any]         # NetworkConfig.to_dict()
    chromosomes: List[Dict[str, Any]]      # WeightsChromosome.to_dict()
    timestamp: str
    gene_count: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_chromosomes(
        cls,
        chromosomes: List[WeightsChromosome],
        network_config: Dict[str, Any],
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> 'ChromosomeCheckpoint':
        if not chromosomes:
            raise ValueError("Cannot checkpoint an empty set of chromosomes")
        gene_count = chromosomes[0].length
        for chromosome in chromosomes:
            if chromosome.length != gene_count:
                raise InvalidRepresentationError(gene_count, chromosome.length)
        return cls(
            run_id=run_id or generate_run_id(),
            network_config=dict(network_config),
            chromosomes=[_chromosome_entry(c) for c in chromosomes],
            timestamp=datetime.now().isoformat(),
            gene_count=gene_count,
            metadata=dict(metadata or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChromosomeCheckpoint':
        return cls(**data)

    def save(self, path: Union[str, Path]) -> Path:
        """
        Write the checkpoint as JSON while holding ``<path>.lock``.

        Raises:
            ValueError: a gene is NaN or infinite and cannot be stored as
                strict JSON.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(path) + '.lock'):
            tmp_path = path.with_name(path.name + '.tmp')
            with open(tmp_path, 'w') as f:
                json.dump(self.to_dict(), f, indent=2, allow_nan=False)
            tmp_path.replace(path)
        logger.info("Saved %d chromosomes to %s", len(self.chromosomes), path)
        return path

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ChromosomeCheckpoint':
        path = Path(path)
        with FileLock(str(path) + '.lock'):
            with open(path, 'r') as f:
                data = json.load(f)
        return cls.from_dict(data)

    def restore(self, evaluator: FitnessEvaluator) -> List[WeightsChromosome]:
        """
        Rebuild the chromosomes against ``evaluator``'s network and trainer.

        Raises:
            InvalidRepresentationError: the stored genes do not fit the
                evaluator's network.
        """
        expected = expected_length(evaluator.topology)
        if expected != self.gene_count:
            raise InvalidRepresentationError(expected, self.gene_count)
        return [
            WeightsChromosome(entry['genes'], evaluator=evaluator)
            for entry in self.chromosomes
        ]
