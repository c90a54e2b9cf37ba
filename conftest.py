"""
PyTest configuration and fixtures for the evolutionary vertex cover search.

This module provides shared graph fixtures, fast run configurations, map
directories on disk and deterministic random seeding.
"""

import os
import sys
import random
from pathlib import Path
from typing import Callable, List, Tuple

import numpy as np
import pytest
import logfire

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.evolution.core.config import (
    CoverConfig,
    EvolutionParameters,
    AnnealingConfig,
    CatastropheConfig,
    LoggingConfig,
)
from src.evolution.fitness import CoverFitness
from src.graph import StateSpace


# Keep test runs local
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def seeded_random():
    """Seed both random sources so every test is reproducible."""
    random.seed(1234)
    np.random.seed(1234)
    yield


@pytest.fixture
def path_graph() -> StateSpace:
    """Path 0-1-2-3."""
    return StateSpace.from_edge_list(4, [(0, 1), (1, 2), (2, 3)])


@pytest.fixture
def star_graph() -> StateSpace:
    """Star with hub 0 and leaves 1..4, edges recorded from the hub."""
    return StateSpace.from_edge_list(5, [(0, i) for i in range(1, 5)])


@pytest.fixture
def edgeless_graph() -> StateSpace:
    """Eight isolated nodes."""
    return StateSpace.from_edge_list(8, [])


@pytest.fixture
def random_graph() -> StateSpace:
    """Connected 12-node graph: a spanning path plus random chords."""
    rng = random.Random(99)
    node_count = 12
    edges = {(i, i + 1) for i in range(node_count - 1)}
    while len(edges) < 24:
        u, v = rng.sample(range(node_count), 2)
        if (v, u) not in edges:
            edges.add((u, v))
    return StateSpace.from_edge_list(node_count, sorted(edges))


@pytest.fixture
def cover_fitness(random_graph) -> CoverFitness:
    return CoverFitness(random_graph)


@pytest.fixture
def fast_config() -> CoverConfig:
    """Small, quickly-annealed configuration."""
    return CoverConfig(
        evolution=EvolutionParameters(
            generations=15,
            population_size=10,
            mutation_probability=0.05,
            crossover_probability=0.5
        ),
        annealing=AnnealingConfig(initial_temperature=50.0, cooling_rate=0.1),
        catastrophe=CatastropheConfig(stagnation_generations=5),
        logging=LoggingConfig(log_interval=5, metrics_export=False),
        random_seed=7
    )


@pytest.fixture
def write_map(tmp_path) -> Callable[..., Path]:
    """Factory writing a map directory (``nodes`` and ``edges`` files)."""

    def _write(
        name: str,
        nodes: List[Tuple[int, float, float]],
        edges: List[Tuple[int, int]]
    ) -> Path:
        directory = tmp_path / name
        directory.mkdir()
        (directory / "nodes").write_text(
            "".join(f"{i} {x} {y}\n" for i, x, y in nodes)
        )
        (directory / "edges").write_text(
            "".join(f"{u} {v}\n" for u, v in edges)
        )
        return directory

    return _write
