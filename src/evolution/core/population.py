"""
Population Management for the Vertex Cover Genetic Algorithm.

This module defines individuals (a chromosome plus its cached fitness and
the genetic operators) and the population that holds one generation of
them, including seeding, roulette-wheel selection and statistics.
"""

from typing import List, Optional, Dict, Any, Tuple, Iterator
from dataclasses import dataclass, field
import logging
import math
import statistics

import numpy as np

from src.core.exceptions import FitnessNotEvaluatedError
from src.evolution.core.annealing import SimulatedAnnealing
from src.evolution.core.chromosome import CoverChromosome, resolve_rng
from src.evolution.core.config import CoverConfig, AnnealingConfig, CrossoverConfig
from src.evolution.fitness.base import FitnessFunction, CoverStats


logger = logging.getLogger("cover.population")


@dataclass(eq=False)
class Individual:
    """
    Represents an individual in the population.

    An individual wraps a chromosome and caches its fitness. The cache is
    cleared whenever the chromosome changes, and reading an unset fitness
    raises instead of returning a stale value.
    """

    chromosome: CoverChromosome
    fitness_function: FitnessFunction = field(repr=False)
    _fitness: Optional[float] = field(default=None, repr=False)
    age: int = 0

    @classmethod
    def random(
        cls,
        fitness_function: FitnessFunction,
        rng: Optional[np.random.Generator] = None
    ) -> "Individual":
        """Create a repaired individual from fair coin flips."""
        chromosome = CoverChromosome.random(fitness_function.graph.node_count, rng)
        individual = cls(chromosome=chromosome, fitness_function=fitness_function)
        individual.repair()
        return individual

    @classmethod
    def annealed(
        cls,
        fitness_function: FitnessFunction,
        config: Optional[AnnealingConfig] = None,
        rng: Optional[np.random.Generator] = None
    ) -> "Individual":
        """Create an individual seeded by simulated annealing."""
        annealer = SimulatedAnnealing(fitness_function, config or AnnealingConfig(), rng)
        chromosome, fitness = annealer.run()
        return cls(chromosome=chromosome, fitness_function=fitness_function, _fitness=fitness)

    @property
    def id(self) -> str:
        return self.chromosome.chromosome_id

    @property
    def evaluated(self) -> bool:
        return self._fitness is not None

    @property
    def fitness(self) -> float:
        if self._fitness is None:
            raise FitnessNotEvaluatedError("Fitness read before evaluation")
        return self._fitness

    @property
    def sort_key(self) -> float:
        """Fitness for comparisons; unset or NaN ranks below everything."""
        if self._fitness is None or math.isnan(self._fitness):
            return float("-inf")
        return self._fitness

    def invalidate(self) -> None:
        self._fitness = None

    def evaluate(self) -> float:
        """Compute and cache the fitness of the current chromosome."""
        self._fitness = self.fitness_function.evaluate(self.chromosome.genes)
        return self._fitness

    def repair(self) -> float:
        """Restore cover feasibility and recompute fitness."""
        self.fitness_function.repair(self.chromosome.genes)
        return self.evaluate()

    def is_node_selected(self, node: int) -> bool:
        return bool(self.chromosome.genes[node])

    def mutate(self, mutation_rate: float, rng: Optional[np.random.Generator] = None) -> None:
        """Randomly reset genes at ``mutation_rate``, then repair."""
        self.chromosome.reset_genes(mutation_rate, rng)
        self.invalidate()
        self.repair()

    def crossover(
        self,
        other: "Individual",
        config: Optional[CrossoverConfig] = None,
        rng: Optional[np.random.Generator] = None
    ) -> Tuple["Individual", "Individual"]:
        """
        Multi-point crossover producing two repaired children.

        The genome is cut into ``k`` equal segments (``k`` drawn from the
        configured range); even segments come from ``self``/``other`` in
        order, odd segments are swapped. Positions past ``k * (n // k)`` are
        never copied and keep the children's random initial genes.
        """
        config = config or CrossoverConfig()
        rng = resolve_rng(rng)
        points = int(rng.integers(config.min_points, config.max_points + 1))
        size = len(self.chromosome)
        split = size // points

        child_one = Individual.random(self.fitness_function, rng)
        child_two = Individual.random(self.fitness_function, rng)
        genes_one = child_one.chromosome.genes
        genes_two = child_two.chromosome.genes
        mine = self.chromosome.genes
        theirs = other.chromosome.genes

        for i in range(points):
            first, second = (mine, theirs) if i % 2 == 0 else (theirs, mine)
            if config.full_segments:
                segment = slice(split * i, split * (i + 1))
            elif split > 0:
                # only position i of segment i is taken from a parent
                segment = slice(i, i + 1)
            else:
                continue
            genes_one[segment] = first[segment]
            genes_two[segment] = second[segment]

        child_one.repair()
        child_two.repair()
        return child_one, child_two

    def deep_copy(self) -> "Individual":
        """Independent copy of the genome and cached fitness."""
        return Individual(
            chromosome=self.chromosome.clone(),
            fitness_function=self.fitness_function,
            _fitness=self._fitness,
            age=self.age
        )

    def hamming_distance(self, other: "Individual") -> int:
        return self.chromosome.hamming_distance(other.chromosome)

    def increment_age(self) -> None:
        """Increment the individual's age by one generation."""
        self.age += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert individual to dictionary representation."""
        return {
            "chromosome": self.chromosome.to_dict(),
            "fitness": self._fitness,
            "age": self.age,
            "evaluated": self.evaluated
        }

    def __lt__(self, other: "Individual") -> bool:
        """Compare individuals by fitness (for sorting)."""
        return self.sort_key < other.sort_key


class Population:
    """
    Manages one generation of individuals.

    Statistics queries are read-only; the best-fitness tracker only moves
    when ``refresh_best_fitness`` is called.
    """

    def __init__(
        self,
        config: CoverConfig,
        fitness_function: FitnessFunction,
        generation: int = 0,
        rng: Optional[np.random.Generator] = None
    ):
        """Initialize an empty population with configuration."""
        self.config = config
        self.fitness_function = fitness_function
        self.individuals: List[Individual] = []
        self.generation = generation
        self.rng = resolve_rng(rng)
        self._best_fitness = float("-inf")
        self.diversity_metrics: Dict[str, float] = {}
        self.statistics: Dict[str, Any] = {}

    def initialize(self) -> None:
        """Fill the population with annealing-seeded individuals."""
        size = self.config.evolution.population_size
        self.individuals = [
            Individual.annealed(self.fitness_function, self.config.annealing, self.rng)
            for _ in range(size)
        ]
        logger.debug("Seeded %d individuals by simulated annealing", size)

    def size(self) -> int:
        return len(self.individuals)

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, index: int) -> Individual:
        return self.individuals[index]

    def select_individuals(self, count: int) -> List[Individual]:
        """
        Fitness-proportionate selection by rejection sampling.

        A uniformly drawn index is accepted with probability
        ``fitness / total_fitness``; picks are made with replacement. A pick
        that is not accepted within ``selection.max_attempts`` draws falls
        back to a uniform choice, as does the whole selection when the total
        fitness is not positive.
        """
        if not self.individuals:
            raise ValueError("Cannot select from an empty population")

        fitnesses = [ind.fitness for ind in self.individuals]
        total_fitness = sum(fitnesses)

        if not total_fitness > 0 or math.isinf(total_fitness):
            logger.warning(
                "Total fitness %s is not usable for roulette selection; selecting uniformly",
                total_fitness
            )
            return [self.individuals[i] for i in self.rng.integers(len(self.individuals), size=count)]

        max_attempts = self.config.selection.max_attempts
        size = len(self.individuals)
        selected = []
        fallbacks = 0

        while len(selected) < count:
            for _ in range(max_attempts):
                index = int(self.rng.integers(size))
                if self.rng.random() < fitnesses[index] / total_fitness:
                    break
            else:
                index = int(self.rng.integers(size))
                fallbacks += 1
            selected.append(self.individuals[index])

        if fallbacks:
            logger.warning("Roulette selection fell back to uniform picks %d time(s)", fallbacks)

        return selected

    def best_individual(self) -> Individual:
        """Individual with the highest fitness; NaN and unset never win."""
        best = self.individuals[0]
        for individual in self.individuals:
            if individual.sort_key > best.sort_key:
                best = individual
        return best

    def average_fitness(self) -> float:
        """Arithmetic mean of all individuals' fitness."""
        return sum(ind.fitness for ind in self.individuals) / len(self.individuals)

    @property
    def best_fitness(self) -> float:
        """Highest fitness recorded by ``refresh_best_fitness``."""
        return self._best_fitness

    def refresh_best_fitness(self) -> float:
        """Fold the current generation into the best-fitness tracker."""
        self._best_fitness = max(self._best_fitness, self.best_individual().sort_key)
        return self._best_fitness

    def vertex_cover_stats(self, individual: Individual) -> CoverStats:
        """Selected node count and uncovered edge count (report only)."""
        return self.fitness_function.cover_stats(individual.chromosome.genes)

    def replace_all(self, new_individuals: List[Individual]) -> None:
        """Install the next generation."""
        if len(new_individuals) != len(self.individuals):
            raise ValueError(
                f"Next generation has {len(new_individuals)} individuals, "
                f"expected {len(self.individuals)}"
            )

        self.individuals = list(new_individuals)
        self.generation += 1
        for ind in self.individuals:
            ind.increment_age()

    def sort_by_fitness(self) -> None:
        """Sort individuals in ascending order of fitness."""
        self.individuals.sort()

    def calculate_diversity(self) -> Dict[str, float]:
        """Calculate population diversity metrics."""
        if not self.individuals:
            return {}

        unique_ids = len(set(ind.id for ind in self.individuals))
        uniqueness_ratio = unique_ids / len(self.individuals)

        if len(self.individuals) > 1:
            sample_size = min(50, len(self.individuals))
            sample = [self.individuals[i] for i in self.rng.choice(len(self.individuals), sample_size, replace=False)]
            distances = [
                sample[i].hamming_distance(sample[j])
                for i in range(len(sample))
                for j in range(i + 1, len(sample))
            ]
            avg_distance = statistics.mean(distances)
        else:
            avg_distance = 0

        self.diversity_metrics = {
            "uniqueness_ratio": uniqueness_ratio,
            "avg_hamming_distance": avg_distance,
            "unique_chromosomes": unique_ids
        }

        return self.diversity_metrics

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate population statistics."""
        fitnesses = [ind.fitness for ind in self.individuals if ind.evaluated]

        if not fitnesses:
            return {}

        stats: Dict[str, Any] = {
            "generation": self.generation,
            "population_size": len(self.individuals),
            "best_fitness": max(fitnesses),
            "worst_fitness": min(fitnesses),
            "avg_fitness": statistics.mean(fitnesses),
            "median_fitness": statistics.median(fitnesses),
            "fitness_std": statistics.stdev(fitnesses) if len(fitnesses) > 1 else 0
        }

        cover_sizes = [self.vertex_cover_stats(ind).selected_nodes for ind in self.individuals]
        stats["avg_cover_size"] = statistics.mean(cover_sizes)
        stats["min_cover_size"] = min(cover_sizes)
        stats["max_cover_size"] = max(cover_sizes)

        ages = [ind.age for ind in self.individuals]
        stats["avg_age"] = statistics.mean(ages)
        stats["max_age"] = max(ages)

        self.statistics = stats
        return stats

    def __repr__(self) -> str:
        return f"Population(generation={self.generation}, size={len(self.individuals)})"
