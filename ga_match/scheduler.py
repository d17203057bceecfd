"""
Generational scheduler for GA match.

Drives the evaluate -> rank -> reproduce -> advance loop. Each phase is a
fork-join over a bounded thread pool: work is submitted in index chunks and
every future is joined before the next phase starts.
"""

import logging
import os
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from operator import attrgetter
from typing import Callable, List, Optional, Sequence

import numpy as np

from .config import RunConfig
from .crossover import single_point_crossover
from .data_models import Individual, SearchResult, SearchStatus, random_population
from .fitness import FitnessEvaluator
from .mutation import mutate
from .selection import select

logger = logging.getLogger(__name__)

GenerationCallback = Callable[[int, Individual, int], None]


class SolutionFlag:
    """
    Records the solving individual of a generation.

    When several tasks find a solution concurrently the lowest population
    index is kept.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.index: Optional[int] = None
        self.individual: Optional[Individual] = None

    def record(self, index: int, individual: Individual) -> None:
        with self._lock:
            if self.index is None or index < self.index:
                self.index = index
                self.individual = individual

    def is_set(self) -> bool:
        return self.individual is not None

    def clear(self) -> None:
        with self._lock:
            self.index = None
            self.individual = None


class MaxFitnessTracker:
    """Monotonic maximum of the scores reported during one generation."""

    def __init__(self):
        self._lock = threading.Lock()
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def update(self, score: int) -> None:
        if score <= self._value:
            return
        with self._lock:
            if score > self._value:
                self._value = score

    def reset(self) -> None:
        with self._lock:
            self._value = 0


class GenerationalScheduler:
    """
    Owns the population and runs generations until solved, exhausted or cancelled.

    Cancellation is cooperative: a single stop event is checked by every task
    before each unit of work and by the scheduler between phases. Finding an
    exact match sets the same event, so the remaining evaluation tasks yield
    and no reproduction phase is started. A pending stop is honoured by the
    next run and cleared when that run returns.
    """

    def __init__(
        self,
        config: RunConfig,
        rng: Optional[np.random.Generator] = None,
        evaluator: Optional[FitnessEvaluator] = None,
        on_generation: Optional[GenerationCallback] = None
    ):
        """
        Args:
            config: Search configuration
            rng: Random number generator (seeded from config.random_seed when None)
            evaluator: Fitness evaluator (built from config.target when None)
            on_generation: Called after ranking with (generation, best, best_fitness)
        """
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.random_seed)
        self.evaluator = evaluator if evaluator is not None else FitnessEvaluator(config.target)
        self.on_generation = on_generation

        if self.evaluator.target_length != config.target_length:
            raise ValueError("Evaluator target does not match configured target")

        max_workers = config.max_workers
        if max_workers is None:
            cpu_count = os.cpu_count() or 4
            max_workers = max(1, cpu_count - 1)
        self.max_workers = max_workers

        self.generation = 0
        self.history: List[int] = []
        self.tracker = MaxFitnessTracker()
        self._solution = SolutionFlag()
        self._stop = threading.Event()

    def cancel(self) -> None:
        """Ask the running search, or the next one if none is running, to stop."""
        logger.info("Cancellation requested at generation %d", self.generation)
        self._stop.set()

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def initial_population(self) -> List[Individual]:
        return random_population(self.config.population_size, self.config.target_length, self.rng)

    def run(self, population: Optional[Sequence[Individual]] = None) -> SearchResult:
        """
        Run the search.

        Args:
            population: Generation-0 population (random when None)

        Returns:
            SearchResult describing how the run ended

        Raises:
            EmptyPopulationError: If asked to reproduce from an empty population
            ValueError: If an individual's length differs from the target
        """
        if population is None:
            population = self.initial_population()
        else:
            population = list(population)
            for individual in population:
                if len(individual) != self.config.target_length:
                    raise ValueError(
                        f"Individual length {len(individual)} does not match "
                        f"target length {self.config.target_length}"
                    )
            if len(population) != self.config.population_size:
                logger.warning(
                    "Initial population has %d individuals, configured size is %d",
                    len(population), self.config.population_size
                )

        self.generation = 0
        self.history = []
        self._solution.clear()

        logger.debug(
            "Starting search: %d workers, elite slice %d of %d",
            self.max_workers, self.config.elite_count, self.config.population_size
        )
        if self.config.elite_count == 1 and self.config.population_size > 1:
            logger.warning(
                "Elite slice holds a single individual (%s%% of %d); "
                "every child is a mutated copy of the best individual",
                self.config.elite_percent, self.config.population_size
            )

        try:
            return self._search(population)
        finally:
            self._stop.clear()

    def _search(self, population: List[Individual]) -> SearchResult:
        best: Optional[Individual] = None
        best_fitness = 0

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="ga-match") as executor:
            while True:
                if self._stop.is_set():
                    return self._result(SearchStatus.CANCELLED, best, best_fitness)

                # Evaluate
                self.tracker.reset()
                self._evaluate_phase(executor, population)
                best_fitness = self.tracker.value
                self.history.append(best_fitness)
                logger.debug(
                    "Generation %d: max fitness %d/%d",
                    self.generation, best_fitness, self.config.target_length
                )

                if self._solution.is_set():
                    solution = self._solution.individual
                    logger.info("Solution found in generation %d", self.generation)
                    return self._result(SearchStatus.SOLVED, solution, best_fitness)

                if self._stop.is_set():
                    return self._result(SearchStatus.CANCELLED, best, best_fitness)

                # Rank
                ranked = self._rank(population)
                if ranked:
                    best = ranked[0]
                    if self.on_generation is not None:
                        self.on_generation(self.generation, best, best_fitness)

                if self._stop.is_set():
                    return self._result(SearchStatus.CANCELLED, best, best_fitness)

                # Reproduce
                offspring = self._reproduce_phase(executor, ranked)
                if offspring is None:
                    return self._result(SearchStatus.CANCELLED, best, best_fitness)

                # Advance
                population = offspring
                self.generation += 1
                if not self.config.unbounded and self.generation >= self.config.generation_cap:
                    logger.info("Generation cap %d reached", self.config.generation_cap)
                    return self._result(SearchStatus.EXHAUSTED, best, best_fitness)

    def _result(self, status: SearchStatus, best: Optional[Individual], best_fitness: int) -> SearchResult:
        return SearchResult(
            status=status,
            generation=self.generation,
            best=best,
            best_fitness=best_fitness,
            history=list(self.history)
        )

    def _chunks(self, size: int) -> List[range]:
        step = self.config.chunk_size
        return [range(start, min(start + step, size)) for start in range(0, size, step)]

    @staticmethod
    def _join(futures) -> None:
        """Wait for every task; re-raise the first task error."""
        errors = []
        for future in futures:
            exc = future.exception()
            if exc is not None:
                errors.append(exc)
        if errors:
            raise errors[0]

    def _evaluate_phase(self, executor: Executor, population: List[Individual]) -> None:
        futures = [
            executor.submit(self._evaluate_chunk, population, indices)
            for indices in self._chunks(len(population))
        ]
        self._join(futures)

    def _evaluate_chunk(self, population: List[Individual], indices: range) -> None:
        target_length = self.evaluator.target_length
        for index in indices:
            if self._stop.is_set():
                return
            individual = population[index]
            score = self.evaluator.evaluate(individual)
            self.tracker.update(score)
            if score == target_length:
                self._solution.record(index, individual)
                self._stop.set()
                return

    @staticmethod
    def _rank(population: List[Individual]) -> List[Individual]:
        return sorted(population, key=attrgetter("fitness"), reverse=True)

    def _reproduce_phase(self, executor: Executor, ranked: List[Individual]) -> Optional[List[Individual]]:
        """
        Produce the next population, one child per output slot.

        Each slot gets its own generator seeded from the scheduler's generator
        before fan-out, so results do not depend on thread interleaving.

        Returns:
            New population, or None if the run was cancelled mid-phase
        """
        size = self.config.population_size
        seeds = self.rng.integers(0, np.iinfo(np.int64).max, size=size, dtype=np.int64)
        offspring: List[Optional[Individual]] = [None] * size

        futures = [
            executor.submit(self._reproduce_chunk, ranked, offspring, seeds, slots)
            for slots in self._chunks(size)
        ]
        self._join(futures)

        if self._stop.is_set():
            return None
        return offspring

    def _reproduce_chunk(
        self,
        ranked: List[Individual],
        offspring: List[Optional[Individual]],
        seeds: np.ndarray,
        slots: range
    ) -> None:
        elite_percent = self.config.elite_percent
        mutation_rate = self.config.mutation_rate
        target_length = self.config.target_length
        for slot in slots:
            if self._stop.is_set():
                return
            rng = np.random.default_rng(int(seeds[slot]))
            parent_a = select(ranked, elite_percent)
            parent_b = select(ranked, elite_percent)
            child = single_point_crossover(parent_a, parent_b, rng)
            mutate(child, mutation_rate, rng, length=target_length)
            offspring[slot] = child
