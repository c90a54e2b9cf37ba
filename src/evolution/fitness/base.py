"""
Base classes for fitness evaluation in the cover evolution framework.

This module provides the abstract interface every fitness function exposes
to the engine: scoring a genome, repairing constraint violations and
reporting a detailed breakdown.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, NamedTuple
from dataclasses import dataclass

import numpy as np

from src.graph.state_space import StateSpace


@dataclass
class FitnessMetrics:
    """Fitness score with its breakdown."""
    score: float
    details: Dict[str, Any]


class CoverStats(NamedTuple):
    """Diagnostic summary of a genome as a vertex cover."""
    selected_nodes: int
    uncovered_edges: int


class FitnessFunction(ABC):
    """
    Abstract base class for fitness functions.

    A fitness function is bound to one graph. Genomes are numpy boolean
    arrays with one entry per node.
    """

    def __init__(self, graph: StateSpace):
        """
        Initialize fitness function for a graph.

        Args:
            graph: The state space genomes are evaluated against
        """
        self.graph = graph

    @abstractmethod
    def evaluate(self, genome: np.ndarray) -> float:
        """
        Evaluate a genome and return its fitness.

        Args:
            genome: Boolean node-membership vector

        Returns:
            Fitness score, higher is better
        """
        pass

    @abstractmethod
    def repair(self, genome: np.ndarray) -> np.ndarray:
        """
        Restore feasibility of a genome in place.

        Args:
            genome: Boolean node-membership vector

        Returns:
            The same array, repaired
        """
        pass

    @abstractmethod
    def calculate_metrics(self, genome: np.ndarray) -> FitnessMetrics:
        """
        Calculate detailed metrics for a genome.

        Args:
            genome: Boolean node-membership vector

        Returns:
            Detailed fitness metrics including score and breakdown
        """
        pass

    def uncovered_mask(self, genome: np.ndarray) -> np.ndarray:
        """Boolean mask over edges that have no selected endpoint."""
        return ~(genome[self.graph.from_ids] | genome[self.graph.to_ids])

    def cover_stats(self, genome: np.ndarray) -> CoverStats:
        """Count selected nodes and uncovered edges."""
        return CoverStats(
            selected_nodes=int(np.count_nonzero(genome)),
            uncovered_edges=int(np.count_nonzero(self.uncovered_mask(genome)))
        )

    def is_feasible(self, genome: np.ndarray) -> bool:
        """Check whether every edge has at least one selected endpoint."""
        return not self.uncovered_mask(genome).any()
