"""
Graph layer: the immutable state space and map file loading.
"""

from src.graph.state_space import Node, Edge, StateSpace
from src.graph.loader import load_map, discover_maps

__all__ = [
    "Node",
    "Edge",
    "StateSpace",
    "load_map",
    "discover_maps",
]
