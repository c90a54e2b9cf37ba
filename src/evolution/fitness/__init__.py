"""
Fitness evaluation for the cover evolution framework.
"""

from src.evolution.fitness.base import FitnessFunction, FitnessMetrics, CoverStats
from src.evolution.fitness.cover import (
    CoverFitness,
    EXCLUDED_NODE_REWARD,
    DOUBLE_COVER_PENALTY,
    LOW_DEGREE_PENALTY
)

__all__ = [
    "FitnessFunction",
    "FitnessMetrics",
    "CoverStats",
    "CoverFitness",
    "EXCLUDED_NODE_REWARD",
    "DOUBLE_COVER_PENALTY",
    "LOW_DEGREE_PENALTY",
]
