"""
Unit tests for population management (Subtask 2.4).

Tests cover:
- Seeding and container behaviour
- Roulette-wheel selection and its uniform fallbacks
- Read-only statistics and the best-fitness tracker
- Generation replacement
"""

import logging
import math
from unittest.mock import MagicMock

import numpy as np
import pytest

from src.evolution.core.chromosome import CoverChromosome
from src.evolution.core.config import create_test_config
from src.evolution.core.population import Population, Individual
from src.evolution.fitness import CoverFitness


def make_population(fitness_function, values):
    """Population whose individuals carry the given fitness values."""
    population = Population(create_test_config(), fitness_function)
    size = fitness_function.graph.node_count
    population.individuals = [
        Individual(CoverChromosome.empty(size), fitness_function, _fitness=value)
        for value in values
    ]
    return population


class TestPopulationSeeding:
    """Test suite for population initialization."""

    def test_initialize(self, cover_fitness):
        config = create_test_config()
        population = Population(config, cover_fitness)

        population.initialize()

        assert len(population) == config.evolution.population_size
        assert population.size() == config.evolution.population_size
        assert all(cover_fitness.is_feasible(ind.chromosome.genes) for ind in population)
        assert all(ind.evaluated for ind in population)

    def test_container_access(self, path_graph):
        population = make_population(CoverFitness(path_graph), [1.0, 2.0])

        assert population[1].fitness == 2.0
        assert [ind.fitness for ind in population] == [1.0, 2.0]
        assert repr(population) == "Population(generation=0, size=2)"


class TestSelection:
    """Test suite for roulette-wheel selection."""

    def test_selects_members(self, path_graph):
        population = make_population(CoverFitness(path_graph), [1.0, 5.0, 3.0, 8.0])

        selected = population.select_individuals(6)

        assert len(selected) == 6
        assert all(any(s is ind for ind in population) for s in selected)

    def test_zero_fitness_is_never_picked(self, path_graph):
        population = make_population(CoverFitness(path_graph), [0.0, 0.0, 10.0])

        selected = population.select_individuals(20)

        assert all(s is population[2] for s in selected)

    def test_non_positive_total_falls_back_to_uniform(self, path_graph, caplog):
        population = make_population(CoverFitness(path_graph), [-5.0, -3.0, -1.0])

        with caplog.at_level(logging.WARNING, logger="cover.population"):
            selected = population.select_individuals(5)

        assert len(selected) == 5
        assert "selecting uniformly" in caplog.text

    def test_attempt_cap_falls_back_to_uniform(self, path_graph, caplog):
        """A pick that is never accepted ends with a uniform choice."""
        population = make_population(CoverFitness(path_graph), [1.0, 1.0])
        population.config.selection.max_attempts = 3

        population.rng = MagicMock()
        population.rng.integers.return_value = 1
        population.rng.random.return_value = 0.99

        with caplog.at_level(logging.WARNING, logger="cover.population"):
            selected = population.select_individuals(4)

        assert selected == [population[1]] * 4
        assert "fell back to uniform picks 4 time(s)" in caplog.text

    def test_seeded_generator_repeats_selection(self, path_graph):
        fitness = CoverFitness(path_graph)
        picks = []
        for _ in range(2):
            population = make_population(fitness, [1.0, 5.0, 3.0, 8.0])
            population.rng = np.random.default_rng(3)
            selected = population.select_individuals(8)
            picks.append([population.individuals.index(s) for s in selected])

        assert picks[0] == picks[1]

    def test_empty_population(self, path_graph):
        population = Population(create_test_config(), CoverFitness(path_graph))

        with pytest.raises(ValueError):
            population.select_individuals(1)


class TestStatistics:
    """Test suite for population queries."""

    def test_best_individual_ignores_nan(self, path_graph):
        population = make_population(CoverFitness(path_graph), [math.nan, 1.0, 2.0])

        assert population.best_individual().fitness == 2.0

    def test_average_fitness(self, path_graph):
        population = make_population(CoverFitness(path_graph), [1.0, 2.0, 6.0])

        assert population.average_fitness() == pytest.approx(3.0)

    def test_queries_do_not_move_tracker(self, path_graph):
        """average_fitness and best_individual leave the tracker alone."""
        population = make_population(CoverFitness(path_graph), [1.0, 2.0, 6.0])

        population.average_fitness()
        population.best_individual()

        assert population.best_fitness == float("-inf")
        assert population.refresh_best_fitness() == 6.0
        assert population.best_fitness == 6.0

    def test_tracker_never_decreases(self, path_graph):
        fitness = CoverFitness(path_graph)
        population = make_population(fitness, [1.0, 6.0])
        population.refresh_best_fitness()

        population.replace_all(make_population(fitness, [2.0, 3.0]).individuals)

        assert population.refresh_best_fitness() == 6.0

    def test_vertex_cover_stats(self, path_graph):
        fitness = CoverFitness(path_graph)
        population = make_population(fitness, [0.0])

        stats = population.vertex_cover_stats(population[0])

        assert stats.selected_nodes == 0
        assert stats.uncovered_edges == 3

    def test_calculate_statistics(self, cover_fitness):
        population = Population(create_test_config(), cover_fitness)
        population.initialize()

        stats = population.calculate_statistics()

        assert stats["population_size"] == 10
        assert stats["best_fitness"] >= stats["avg_fitness"] >= stats["worst_fitness"]
        assert stats["min_cover_size"] <= stats["max_cover_size"]

    def test_calculate_diversity(self, path_graph):
        fitness = CoverFitness(path_graph)
        population = make_population(fitness, [1.0, 1.0])
        population[1].chromosome.flip(0)

        diversity = population.calculate_diversity()

        assert diversity["unique_chromosomes"] == 2
        assert diversity["uniqueness_ratio"] == 1.0
        assert diversity["avg_hamming_distance"] == 1


class TestReplacement:
    """Test suite for installing the next generation."""

    def test_replace_all(self, path_graph):
        fitness = CoverFitness(path_graph)
        population = make_population(fitness, [1.0, 2.0])
        next_generation = make_population(fitness, [3.0, 4.0]).individuals

        population.replace_all(next_generation)

        assert population.generation == 1
        assert [ind.fitness for ind in population] == [3.0, 4.0]
        assert all(ind.age == 1 for ind in population)

    def test_replace_all_requires_same_size(self, path_graph):
        fitness = CoverFitness(path_graph)
        population = make_population(fitness, [1.0, 2.0])

        with pytest.raises(ValueError, match="expected 2"):
            population.replace_all(make_population(fitness, [1.0]).individuals)

    def test_sort_by_fitness(self, path_graph):
        population = make_population(CoverFitness(path_graph), [5.0, math.nan, 1.0])

        population.sort_by_fitness()

        assert population[-1].fitness == 5.0
        assert math.isnan(population[0].fitness)
