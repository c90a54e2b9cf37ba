"""
Evolution Configuration Module.

This module defines configuration classes for the evolutionary vertex cover
search, including evolution parameters, annealing seeding, catastrophe
handling and reporting settings.
"""

from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict, ValidationError, model_validator
import json
import os

from src.core.exceptions import ConfigurationError


class EvolutionParameters(BaseModel):
    """Parameters controlling the genetic algorithm evolution process."""

    model_config = ConfigDict(validate_assignment=True)

    generations: int = Field(
        default=1000,
        ge=1,
        description="Number of generations to evolve"
    )
    population_size: int = Field(
        default=100,
        ge=2,
        description="Number of individuals in the population"
    )
    mutation_probability: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Per-bit probability of resetting a gene to a random value"
    )
    crossover_probability: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Probability that a parent pair is recombined instead of cloned"
    )


class AnnealingConfig(BaseModel):
    """Simulated annealing used to seed the initial population."""

    initial_temperature: float = Field(
        default=10000.0,
        gt=1.0,
        description="Starting temperature"
    )
    cooling_rate: float = Field(
        default=0.008,
        gt=0.0,
        lt=1.0,
        description="Fraction the temperature drops by each step"
    )
    acceptance_scale: float = Field(
        default=10.0,
        gt=0.0,
        description="Multiplier applied to the fitness loss in the acceptance exponent"
    )


class CatastropheConfig(BaseModel):
    """Diversity injection after prolonged stagnation."""

    stagnation_generations: int = Field(
        default=200,
        ge=1,
        description="Generations without best-fitness change before a catastrophe"
    )
    survivors: int = Field(
        default=8,
        ge=0,
        description="Roulette-selected individuals carried over by a catastrophe"
    )


class CrossoverConfig(BaseModel):
    """Multi-point crossover settings."""

    min_points: int = Field(default=3, ge=1, description="Fewest crossover segments")
    max_points: int = Field(default=8, ge=1, description="Most crossover segments")
    full_segments: bool = Field(
        default=True,
        description="Copy every position of a segment; False copies only position i of segment i"
    )

    @model_validator(mode="after")
    def validate_point_range(self) -> "CrossoverConfig":
        if self.min_points > self.max_points:
            raise ValueError("min_points must not exceed max_points")
        return self


class SelectionConfig(BaseModel):
    """Roulette-wheel selection bounds."""

    max_attempts: int = Field(
        default=10000,
        ge=1,
        description="Rejection-sampling draws per pick before falling back to a uniform pick"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging and progress reporting."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=10,
        ge=1,
        description="Generations between progress log lines"
    )
    redraw_interval: int = Field(
        default=10,
        ge=1,
        description="Generations between best-individual notifications"
    )
    metrics_export: bool = Field(
        default=True,
        description="Export per-generation metrics to logfire"
    )


class CoverConfig(BaseModel):
    """
    Main configuration class for an evolutionary cover run.

    Direct construction raises pydantic's ``ValidationError`` on invalid
    values. ``from_params``, ``from_env``, ``load`` and
    ``validate_consistency`` report them as ``ConfigurationError``, and the
    engine always calls ``validate_consistency`` before a run.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )

    evolution: EvolutionParameters = Field(default_factory=EvolutionParameters)
    annealing: AnnealingConfig = Field(default_factory=AnnealingConfig)
    catastrophe: CatastropheConfig = Field(default_factory=CatastropheConfig)
    crossover: CrossoverConfig = Field(default_factory=CrossoverConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    random_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )

    @classmethod
    def from_params(cls, **data: Any) -> "CoverConfig":
        """Build a configuration, reporting invalid values as ConfigurationError."""
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def from_env(cls) -> "CoverConfig":
        """Create configuration from environment variables."""
        config_dict: Dict[str, Any] = {}

        if generations := os.getenv("COVER_GENERATIONS"):
            config_dict.setdefault("evolution", {})["generations"] = int(generations)
        if pop_size := os.getenv("COVER_POPULATION_SIZE"):
            config_dict.setdefault("evolution", {})["population_size"] = int(pop_size)
        if mutation := os.getenv("COVER_MUTATION_PROBABILITY"):
            config_dict.setdefault("evolution", {})["mutation_probability"] = float(mutation)
        if crossover := os.getenv("COVER_CROSSOVER_PROBABILITY"):
            config_dict.setdefault("evolution", {})["crossover_probability"] = float(crossover)
        if random_seed := os.getenv("COVER_RANDOM_SEED"):
            config_dict["random_seed"] = int(random_seed)

        return cls.from_params(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> "CoverConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_params(**data)

    def validate_consistency(self) -> None:
        """
        Re-validate the whole configuration before a run.

        Sub-models can be mutated after construction, so the engine checks
        the final state once more before seeding.
        """
        try:
            type(self).model_validate(self.model_dump())
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e


def create_default_config() -> CoverConfig:
    """Create the default configuration."""
    return CoverConfig()


def create_test_config() -> CoverConfig:
    """Create a configuration suitable for testing (smaller, faster)."""
    return CoverConfig(
        evolution=EvolutionParameters(
            generations=20,
            population_size=10,
            mutation_probability=0.05,
            crossover_probability=0.5
        ),
        annealing=AnnealingConfig(
            initial_temperature=100.0,
            cooling_rate=0.05
        ),
        catastrophe=CatastropheConfig(stagnation_generations=5),
        logging=LoggingConfig(log_interval=1, metrics_export=False),
        random_seed=42
    )
