"""
Fitness evaluation for GA match.

Scores an individual by counting gene positions equal to the target.
"""

import threading

import numpy as np

from .data_models import Individual


class FitnessEvaluator:
    """
    Positional match scorer with a per-individual cache.

    The score is stored on the individual itself; an individual whose cache is
    valid is returned as-is without recomputation.

    Attributes:
        target: Target genes as a uint8 array
        computations: Number of scores actually computed (cache misses)
    """

    def __init__(self, target: bytes):
        """
        Args:
            target: Target byte string
        """
        self.target = np.frombuffer(bytes(target), dtype=np.uint8)
        self.computations = 0
        self._lock = threading.Lock()

    @property
    def target_length(self) -> int:
        return int(self.target.shape[0])

    def score(self, genes: np.ndarray) -> int:
        """
        Count positions where genes match the target (no caching).

        Raises:
            ValueError: If genes length differs from target length
        """
        if genes.shape[0] != self.target.shape[0]:
            raise ValueError(
                f"Gene length {genes.shape[0]} does not match target length {self.target.shape[0]}"
            )
        return int(np.count_nonzero(genes == self.target))

    def evaluate(self, individual: Individual) -> int:
        """
        Return the individual's fitness, computing and caching it if stale.

        Args:
            individual: Individual to score

        Returns:
            Match count in [0, target_length]
        """
        if individual.calculated:
            return individual.fitness

        individual.fitness = self.score(individual.genes)
        individual.calculated = True
        with self._lock:
            self.computations += 1
        return individual.fitness

    def is_solution(self, individual: Individual) -> bool:
        return self.evaluate(individual) == self.target_length
