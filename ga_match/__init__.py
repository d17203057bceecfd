"""
GA Match - parallel evolutionary search for an exact byte-string match.

This package evolves a fixed-size population of random byte sequences toward
a target string through fitness evaluation, elite selection, single-point
crossover and per-gene mutation, one generation at a time.

Key Features:
- Cached positional fitness (recomputed only after mutation)
- Fork-join worker pool per phase (evaluate, rank, reproduce)
- Cooperative cancellation on solution or request
- Seedable, thread-order independent randomness

Modules:
- data_models: Individual, SearchResult, SearchStatus
- config: Immutable RunConfig and YAML loading
- fitness: Positional match evaluator
- selection: Elite-slice parent selection
- crossover: Single-point crossover
- mutation: Per-gene byte mutation
- scheduler: Generational loop and parallel orchestration
- cli: Command-line interface
"""

__version__ = "0.1.0"

from .config import ConfigValidationError, RunConfig, load_run_config
from .data_models import Individual, SearchResult, SearchStatus
from .fitness import FitnessEvaluator
from .scheduler import GenerationalScheduler
from .selection import EmptyPopulationError

__all__ = [
    "ConfigValidationError",
    "EmptyPopulationError",
    "FitnessEvaluator",
    "GenerationalScheduler",
    "Individual",
    "RunConfig",
    "SearchResult",
    "SearchStatus",
    "load_run_config",
]
