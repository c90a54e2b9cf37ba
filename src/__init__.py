"""
Evolutionary Vertex Cover - Source Package

This package contains the graph state space and map loading, and the
genetic algorithm that searches for small vertex covers.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__",
]
