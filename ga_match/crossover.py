"""
Crossover operator for GA match.

Single-point crossover over fixed-length gene arrays.
"""

from typing import Optional

import numpy as np

from .data_models import Individual


def single_point_crossover(
    parent_a: Individual,
    parent_b: Individual,
    rng: np.random.Generator,
    point: Optional[int] = None
) -> Individual:
    """
    Combine two parents at a single crossover point.

    The child takes genes [0, point) from parent_a and [point, length) from
    parent_b. The point is drawn uniformly from [0, length) unless given.

    Args:
        parent_a: First parent
        parent_b: Second parent
        rng: Random number generator
        point: Fixed crossover point (drawn from rng when None)

    Returns:
        New unscored child

    Raises:
        ValueError: If parent lengths differ or point is out of range
    """
    length = len(parent_a)
    if len(parent_b) != length:
        raise ValueError(f"Parent lengths differ: {length} vs {len(parent_b)}")

    if point is None:
        point = int(rng.integers(0, length))
    elif not 0 <= point < length:
        raise ValueError(f"Crossover point {point} outside [0, {length})")

    child_genes = np.concatenate((parent_a.genes[:point], parent_b.genes[point:]))
    return Individual(genes=child_genes)
