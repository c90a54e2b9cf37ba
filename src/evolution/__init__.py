"""
Evolutionary Vertex Cover Search.

This package implements a genetic algorithm that searches for small vertex
covers of an undirected graph: annealing-seeded populations, roulette-wheel
selection, multi-point crossover, random-reset mutation, elitism with
deterministic crowding and catastrophe-driven diversity injection.
"""

from src.evolution.core.config import (
    CoverConfig,
    EvolutionParameters,
    AnnealingConfig,
    CatastropheConfig,
    CrossoverConfig,
    SelectionConfig,
    LoggingConfig,
    create_default_config,
    create_test_config
)
from src.evolution.core.chromosome import CoverChromosome
from src.evolution.core.population import Population, Individual
from src.evolution.core.engine import (
    CoverEvolutionEngine,
    RunHandle,
    RunResult,
    RunState,
    start
)
from src.evolution.fitness import CoverFitness, FitnessFunction, CoverStats
from src.evolution.observer import ProgressObserver, LoggingObserver

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "CoverConfig",
    "EvolutionParameters",
    "AnnealingConfig",
    "CatastropheConfig",
    "CrossoverConfig",
    "SelectionConfig",
    "LoggingConfig",
    "create_default_config",
    "create_test_config",
    # Genome and population
    "CoverChromosome",
    "Population",
    "Individual",
    # Fitness
    "FitnessFunction",
    "CoverFitness",
    "CoverStats",
    # Engine
    "CoverEvolutionEngine",
    "RunHandle",
    "RunResult",
    "RunState",
    "start",
    # Observers
    "ProgressObserver",
    "LoggingObserver",
]
