"""
Core functionality for the evolutionary vertex cover search.

This package contains configuration and the error taxonomy shared by the
graph layer and the evolution engine.
"""

from src.core.config import settings

__all__ = [
    "settings",
]
