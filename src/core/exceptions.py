"""
Error taxonomy shared by the graph layer and the evolution engine.

Cancellation has no exception type: a cancelled run ends with an
INTERRUPTED result.
"""


class CoverError(Exception):
    """Base class for all errors raised by the cover engine."""


class ConfigurationError(CoverError, ValueError):
    """Run parameters are invalid; the run is never started."""


class GraphUnavailableError(CoverError):
    """The graph is empty or malformed; the run refuses to start."""


class MapLoadError(CoverError):
    """A map directory could not be read or parsed."""


class FitnessNotEvaluatedError(CoverError):
    """Fitness was read before it was computed for the current genome."""
