"""
Simulated annealing seeding for the initial population.

Each initial individual starts from the repaired all-false genome and walks
through neighbours produced by flipping both endpoints of a random edge.
Annealing is used only for seeding; the evolution proper never calls it.
"""

from typing import Optional, Tuple
import math

import numpy as np

from src.evolution.core.chromosome import CoverChromosome, resolve_rng
from src.evolution.core.config import AnnealingConfig
from src.evolution.fitness.base import FitnessFunction


def acceptance_probability(
    old_fitness: float,
    new_fitness: float,
    temperature: float,
    scale: float = 10.0
) -> float:
    """
    Probability of moving from a solution to a neighbour.

    Improvements (and ties) are always accepted. A worse neighbour is
    accepted with ``exp((new - old) * scale / temperature)``, which shrinks
    as the loss grows or the temperature drops.
    """
    if new_fitness >= old_fitness:
        return 1.0
    return math.exp((new_fitness - old_fitness) * scale / temperature)


class SimulatedAnnealing:
    """Anneals a single genome against a fitness function."""

    def __init__(
        self,
        fitness_function: FitnessFunction,
        config: AnnealingConfig,
        rng: Optional[np.random.Generator] = None
    ):
        self.fitness_function = fitness_function
        self.config = config
        self.rng = resolve_rng(rng)

    def run(self) -> Tuple[CoverChromosome, float]:
        """
        Run one annealing schedule.

        Returns:
            The best chromosome seen and its fitness
        """
        graph = self.fitness_function.graph

        current = CoverChromosome.empty(graph.node_count)
        self.fitness_function.repair(current.genes)
        current_fitness = self.fitness_function.evaluate(current.genes)

        best = current.clone()
        best_fitness = current_fitness

        if graph.edge_count == 0:
            return best, best_fitness

        temperature = self.config.initial_temperature
        cooling = 1.0 - self.config.cooling_rate

        while temperature > 1:
            edge = graph.edge_at(int(self.rng.integers(graph.edge_count)))

            neighbour = current.clone()
            neighbour.flip(edge.from_id)
            neighbour.flip(edge.to_id)
            self.fitness_function.repair(neighbour.genes)
            neighbour_fitness = self.fitness_function.evaluate(neighbour.genes)

            probability = acceptance_probability(
                current_fitness,
                neighbour_fitness,
                temperature,
                self.config.acceptance_scale
            )
            if probability > self.rng.random():
                current, current_fitness = neighbour, neighbour_fitness

            if current_fitness > best_fitness:
                best = current.clone()
                best_fitness = current_fitness

            temperature *= cooling

        return best, best_fitness
