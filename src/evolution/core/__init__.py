"""
Evolution Core Module - Genetic Algorithm Components.

This module contains the core components of the cover evolution framework,
including configuration, chromosome representation, annealing seeding,
population management and the main evolution engine.
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

from src.evolution.core.annealing import (
    SimulatedAnnealing,
    acceptance_probability
)

from src.evolution.core.population import (
    Population,
    Individual
)

from src.evolution.core.engine import (
    CoverEvolutionEngine,
    RunHandle,
    RunResult,
    RunState,
    start
)

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

    # Chromosome representation
    "CoverChromosome",

    # Seeding
    "SimulatedAnnealing",
    "acceptance_probability",

    # Population management
    "Population",
    "Individual",

    # Engine
    "CoverEvolutionEngine",
    "RunHandle",
    "RunResult",
    "RunState",
    "start"
]
