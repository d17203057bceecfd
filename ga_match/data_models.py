"""
Data models for GA match.

Core data structures representing individuals, populations and search results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np


@dataclass
class Individual:
    """
    Represents a single candidate byte sequence (individual in GA population).

    Attributes:
        genes: One-dimensional uint8 array, same length as the target
        fitness: Cached match count, meaningful only when calculated is True
        calculated: Whether fitness is valid for the current genes
    """
    genes: np.ndarray
    fitness: int = 0
    calculated: bool = False

    def __post_init__(self):
        """Ensure genes is a flat uint8 array."""
        genes = np.asarray(self.genes)
        if genes.ndim != 1:
            raise ValueError(f"Genes must be one-dimensional, got shape {genes.shape}")
        if genes.dtype != np.uint8:
            if genes.size and (genes.min() < 0 or genes.max() > 255):
                raise ValueError("Gene values must be in [0, 255]")
            genes = genes.astype(np.uint8)
        self.genes = genes

    @classmethod
    def from_bytes(cls, data: bytes) -> "Individual":
        """Build an unscored individual from a byte string."""
        return cls(genes=np.frombuffer(bytes(data), dtype=np.uint8).copy())

    @classmethod
    def random(cls, length: int, rng: np.random.Generator) -> "Individual":
        """
        Create an individual with uniformly random genes.

        Args:
            length: Number of genes (target length)
            rng: Random number generator

        Returns:
            New unscored Individual
        """
        return cls(genes=rng.integers(0, 256, size=length, dtype=np.uint8))

    def __len__(self) -> int:
        return int(self.genes.shape[0])

    def copy(self) -> "Individual":
        """Create a copy with its own gene buffer and the same cache state."""
        return Individual(
            genes=self.genes.copy(),
            fitness=self.fitness,
            calculated=self.calculated
        )

    def invalidate(self) -> None:
        """Mark the cached fitness as stale."""
        self.calculated = False

    def as_bytes(self) -> bytes:
        return self.genes.tobytes()

    def decode(self) -> str:
        """Genes as text; bytes that are not valid UTF-8 become U+FFFD."""
        return decode_genes(self.genes)


def decode_genes(genes: np.ndarray) -> str:
    return np.asarray(genes, dtype=np.uint8).tobytes().decode("utf-8", errors="replace")


def random_population(size: int, length: int, rng: np.random.Generator) -> List[Individual]:
    """
    Create the initial population.

    Args:
        size: Number of individuals
        length: Gene count per individual
        rng: Random number generator

    Returns:
        List of unscored individuals with independent random genes
    """
    return [Individual.random(length, rng) for _ in range(size)]


class SearchStatus(Enum):
    """Terminal state of a search run."""
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass
class SearchResult:
    """
    Outcome of a search run.

    Attributes:
        status: How the run ended
        generation: Generation index of the solution, or generations completed
        best: Best individual seen in the last evaluated generation
        best_fitness: Highest fitness observed in the last evaluated generation
        history: Highest fitness observed per evaluated generation
    """
    status: SearchStatus
    generation: int
    best: Optional[Individual] = None
    best_fitness: int = 0
    history: List[int] = field(default_factory=list)

    @property
    def solved(self) -> bool:
        return self.status is SearchStatus.SOLVED

    @property
    def solution(self) -> Optional[str]:
        """Decoded solution text when solved, None otherwise."""
        if self.solved and self.best is not None:
            return self.best.decode()
        return None
