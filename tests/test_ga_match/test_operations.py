"""
Tests for GA operations: fitness, selection, crossover, and mutation.
"""

import unittest
import numpy as np

from ga_match.data_models import Individual
from ga_match.fitness import FitnessEvaluator
from ga_match.selection import EmptyPopulationError, elite_size, select
from ga_match.crossover import single_point_crossover
from ga_match.mutation import mutate


def scored(evaluator, text):
    individual = Individual.from_bytes(text)
    evaluator.evaluate(individual)
    return individual


class TestFitness(unittest.TestCase):
    """Test the fitness evaluator."""

    def setUp(self):
        """Set up evaluator for a short target."""
        self.evaluator = FitnessEvaluator(b"HELLO")
        self.rng = np.random.default_rng(42)

    def test_counts_matching_positions(self):
        """Test fitness equals the number of positions equal to the target."""
        self.assertEqual(self.evaluator.evaluate(Individual.from_bytes(b"HELXO")), 4)
        self.assertEqual(self.evaluator.evaluate(Individual.from_bytes(b"OLLEH")), 1)
        self.assertEqual(self.evaluator.evaluate(Individual.from_bytes(b"xxxxx")), 0)

    def test_exact_match_scores_target_length(self):
        """Test an exact copy of the target is a solution."""
        individual = Individual.from_bytes(b"HELLO")
        self.assertEqual(self.evaluator.evaluate(individual), 5)
        self.assertTrue(self.evaluator.is_solution(individual))

    def test_random_individuals_in_range(self):
        """Test fitness matches a direct count and stays within [0, length]."""
        target = self.evaluator.target.tobytes()
        for _ in range(50):
            individual = Individual.random(5, self.rng)
            expected = sum(1 for g, t in zip(individual.as_bytes(), target) if g == t)
            score = self.evaluator.evaluate(individual)
            self.assertEqual(score, expected)
            self.assertGreaterEqual(score, 0)
            self.assertLessEqual(score, 5)

    def test_second_evaluation_is_cached(self):
        """Test evaluating twice without mutation does not recompute."""
        individual = Individual.from_bytes(b"HELPO")

        first = self.evaluator.evaluate(individual)
        second = self.evaluator.evaluate(individual)

        self.assertEqual(first, second)
        self.assertTrue(individual.calculated)
        self.assertEqual(self.evaluator.computations, 1)

    def test_cached_value_is_trusted(self):
        """Test a valid cache is returned as-is."""
        individual = Individual.from_bytes(b"xxxxx")
        individual.fitness = 3
        individual.calculated = True

        self.assertEqual(self.evaluator.evaluate(individual), 3)
        self.assertEqual(self.evaluator.computations, 0)

    def test_length_mismatch_rejected(self):
        """Test individuals of the wrong length are rejected."""
        with self.assertRaises(ValueError):
            self.evaluator.evaluate(Individual.from_bytes(b"HELLO!"))


class TestSelection(unittest.TestCase):
    """Test elite-slice parent selection."""

    def setUp(self):
        """Set up a sorted, scored population."""
        self.evaluator = FitnessEvaluator(b"ABCD")
        population = [
            scored(self.evaluator, b"ABxx"),
            scored(self.evaluator, b"ABCx"),
            scored(self.evaluator, b"xxxx"),
            scored(self.evaluator, b"ABCy"),
            scored(self.evaluator, b"Axxx"),
        ]
        self.population = sorted(population, key=lambda ind: ind.fitness, reverse=True)

    def test_elite_size(self):
        """Test elite slice sizing rounds up and never drops below one."""
        self.assertEqual(elite_size(1000, 0.1), 1)
        self.assertEqual(elite_size(10, 50), 5)
        self.assertEqual(elite_size(7, 10), 1)
        self.assertEqual(elite_size(11, 10), 2)
        self.assertEqual(elite_size(3, 100), 3)

    def test_selects_top_fitness(self):
        """Test the selected parent has the population's best fitness."""
        for percent in (0.1, 20, 50, 100):
            parent = select(self.population, percent)
            self.assertEqual(parent.fitness, self.population[0].fitness)

    def test_ties_resolve_to_first(self):
        """Test equal-fitness candidates resolve to the first in order."""
        self.assertEqual(self.population[0].fitness, self.population[1].fitness)
        self.assertIs(select(self.population, 100), self.population[0])

    def test_both_draws_identical(self):
        """Test two draws from the same population return the same parent."""
        self.assertIs(select(self.population, 40), select(self.population, 40))

    def test_single_individual(self):
        """Test selection from a population of one."""
        only = [scored(self.evaluator, b"xBxx")]
        self.assertIs(select(only, 0.1), only[0])

    def test_empty_population_fatal(self):
        """Test selection on an empty population raises."""
        with self.assertRaises(EmptyPopulationError):
            select([], 10)


class TestCrossover(unittest.TestCase):
    """Test single-point crossover."""

    def setUp(self):
        """Set up two distinct parents."""
        self.parent_a = Individual.from_bytes(b"AAAAAAAA")
        self.parent_b = Individual.from_bytes(b"BBBBBBBB")
        self.rng = np.random.default_rng(42)

    def test_every_point(self):
        """Test child prefix comes from parent A and suffix from parent B."""
        for point in range(len(self.parent_a)):
            child = single_point_crossover(self.parent_a, self.parent_b, self.rng, point=point)

            self.assertEqual(len(child), 8)
            np.testing.assert_array_equal(child.genes[:point], self.parent_a.genes[:point])
            np.testing.assert_array_equal(child.genes[point:], self.parent_b.genes[point:])

    def test_identical_parents(self):
        """Test crossover of identical parents reproduces the parent."""
        parent = Individual.from_bytes(b"Hello, World!")
        for point in range(len(parent)):
            child = single_point_crossover(parent, parent, self.rng, point=point)
            np.testing.assert_array_equal(child.genes, parent.genes)

    def test_random_point_in_range(self):
        """Test drawn points keep at least one gene from parent B."""
        for _ in range(100):
            child = single_point_crossover(self.parent_a, self.parent_b, self.rng)
            data = child.as_bytes()
            self.assertIn(b"B", data)
            self.assertEqual(data, b"A" * data.count(b"A") + b"B" * data.count(b"B"))

    def test_child_starts_unscored(self):
        """Test child fitness cache starts invalid."""
        evaluator = FitnessEvaluator(b"AAAAAAAA")
        evaluator.evaluate(self.parent_a)
        evaluator.evaluate(self.parent_b)

        child = single_point_crossover(self.parent_a, self.parent_b, self.rng)
        self.assertFalse(child.calculated)

    def test_child_owns_genes(self):
        """Test child genes do not alias parent genes."""
        child = single_point_crossover(self.parent_a, self.parent_b, self.rng, point=4)
        child.genes[0] = ord("Z")
        self.assertEqual(self.parent_a.as_bytes(), b"AAAAAAAA")

    def test_invalid_inputs(self):
        """Test mismatched parents and out-of-range points are rejected."""
        with self.assertRaises(ValueError):
            single_point_crossover(self.parent_a, Individual.from_bytes(b"BB"), self.rng)
        with self.assertRaises(ValueError):
            single_point_crossover(self.parent_a, self.parent_b, self.rng, point=8)
        with self.assertRaises(ValueError):
            single_point_crossover(self.parent_a, self.parent_b, self.rng, point=-1)


class TestMutation(unittest.TestCase):
    """Test per-gene mutation."""

    def setUp(self):
        """Set up a scored individual."""
        self.evaluator = FitnessEvaluator(b"HELLO")
        self.individual = scored(self.evaluator, b"HELLO")
        self.rng = np.random.default_rng(42)

    def test_zero_rate_keeps_cache(self):
        """Test no mutation leaves genes and cache untouched."""
        changed = mutate(self.individual, 0.0, self.rng)

        self.assertEqual(changed, 0)
        self.assertTrue(self.individual.calculated)
        self.assertEqual(self.individual.as_bytes(), b"HELLO")

    def test_full_rate_invalidates_cache(self):
        """Test mutating genes invalidates the cache and forces recomputation."""
        changed = mutate(self.individual, 1.0, self.rng)

        self.assertEqual(changed, 5)
        self.assertFalse(self.individual.calculated)

        before = self.evaluator.computations
        self.evaluator.evaluate(self.individual)
        self.assertEqual(self.evaluator.computations, before + 1)

    def test_length_preserved(self):
        """Test mutation never changes gene count or dtype."""
        for rate in (0.0, 0.1, 0.5, 1.0):
            mutate(self.individual, rate, self.rng)
            self.assertEqual(len(self.individual), 5)
            self.assertEqual(self.individual.genes.dtype, np.uint8)

    def test_length_mismatch_rejected(self):
        """Test an individual of the wrong length is rejected when a length is given."""
        with self.assertRaises(ValueError):
            mutate(self.individual, 0.5, self.rng, length=6)

        changed = mutate(self.individual, 0.0, self.rng, length=5)
        self.assertEqual(changed, 0)

    def test_rate_is_per_gene(self):
        """Test the number of rewritten genes tracks the mutation rate."""
        individual = Individual(genes=np.zeros(10000, dtype=np.uint8))
        changed = mutate(individual, 0.1, self.rng)
        self.assertGreater(changed, 800)
        self.assertLess(changed, 1200)


if __name__ == '__main__':
    unittest.main()
