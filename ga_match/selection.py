"""
Parent selection for GA match.

Parents are drawn from the elite slice: the highest-fitness prefix of a
population already sorted by fitness, descending.
"""

import math
from typing import Sequence

from .data_models import Individual


class EmptyPopulationError(ValueError):
    """Raised when selection is asked to pick from an empty population."""
    pass


def elite_size(population_size: int, elite_percent: float) -> int:
    """
    Number of individuals in the elite slice.

    Args:
        population_size: Population cardinality
        elite_percent: Percentage in (0, 100]

    Returns:
        max(1, ceil(population_size * elite_percent / 100))
    """
    return max(1, math.ceil(population_size * elite_percent / 100))


def select(sorted_population: Sequence[Individual], elite_percent: float) -> Individual:
    """
    Select the fittest individual of the elite slice.

    Ties resolve to the first occurrence. Since the slice is a prefix of a
    descending sort, this is always sorted_population[0]; both parents of a
    child are therefore the same individual.

    Args:
        sorted_population: Population sorted by fitness, descending (scored)
        elite_percent: Percentage of the population forming the elite slice

    Returns:
        Selected parent (not copied)

    Raises:
        EmptyPopulationError: If the population is empty
    """
    if len(sorted_population) == 0:
        raise EmptyPopulationError("Cannot select a parent from an empty population")

    k = min(elite_size(len(sorted_population), elite_percent), len(sorted_population))

    best = sorted_population[0]
    for candidate in sorted_population[1:k]:
        if candidate.fitness > best.fitness:
            best = candidate
    return best
