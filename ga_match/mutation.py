"""
Mutation operator for GA match.

Per-gene random byte replacement.
"""

from typing import Optional

import numpy as np

from .data_models import Individual


def mutate(
    individual: Individual,
    mutation_rate: float,
    rng: np.random.Generator,
    length: Optional[int] = None
) -> int:
    """
    Mutate an individual in place.

    Each gene is independently replaced, with probability mutation_rate, by a
    uniformly random byte. The fitness cache is invalidated only when at least
    one gene was rewritten. A replacement may draw the byte already present;
    it still counts as a rewrite.

    Args:
        individual: Individual to mutate
        mutation_rate: Per-gene probability in [0, 1]
        rng: Random number generator
        length: Expected gene count (target length); unchecked when None

    Returns:
        Number of genes rewritten

    Raises:
        ValueError: If the individual does not have the expected length
    """
    if length is not None and len(individual) != length:
        raise ValueError(f"Gene length {len(individual)} does not match target length {length}")

    if mutation_rate <= 0.0:
        return 0

    mask = rng.random(len(individual)) < mutation_rate
    count = int(np.count_nonzero(mask))
    if count:
        individual.genes[mask] = rng.integers(0, 256, size=count, dtype=np.uint8)
        individual.invalidate()
    return count
