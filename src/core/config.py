"""
Core configuration module for the evolutionary vertex cover search.

This module manages process-level settings using Pydantic Settings,
providing type-safe configuration with environment variable and ``.env``
file support.
"""

from typing import Optional, Dict, Any, TYPE_CHECKING
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from src.evolution.core.config import CoverConfig


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables of the same
    name (case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = "Evolutionary Vertex Cover"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Logfire settings
    logfire_token: str = ""
    logfire_service_name: str = "cover-engine"
    logfire_environment: str = "development"

    # Maps
    maps_dir: str = Field(default="./maps", description="Directory holding map subdirectories")

    # Default run parameters
    cover_generations: int = 1000
    cover_population_size: int = 100
    cover_mutation_probability: float = 0.01
    cover_crossover_probability: float = 0.25
    cover_random_seed: Optional[int] = None

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return v.upper()

    def get_logfire_settings(self) -> Dict[str, Any]:
        """Get Logfire configuration."""
        return {
            "token": self.logfire_token or None,
            "send_to_logfire": "if-token-present",
            "service_name": self.logfire_service_name,
            "environment": self.logfire_environment,
        }

    def build_cover_config(self, **overrides: Any) -> "CoverConfig":
        """
        Build a run configuration from the default run parameters.

        Keyword overrides replace the evolution parameters of the same name
        (``generations``, ``population_size``, ``mutation_probability``,
        ``crossover_probability``) or ``random_seed``; ``None`` values are
        ignored.
        """
        from src.evolution.core.config import CoverConfig

        evolution = {
            "generations": self.cover_generations,
            "population_size": self.cover_population_size,
            "mutation_probability": self.cover_mutation_probability,
            "crossover_probability": self.cover_crossover_probability,
        }
        random_seed = self.cover_random_seed

        for key, value in overrides.items():
            if value is None:
                continue
            if key == "random_seed":
                random_seed = value
            else:
                evolution[key] = value

        return CoverConfig.from_params(
            evolution=evolution,
            logging={"log_level": self.log_level},
            random_seed=random_seed
        )


# Create global settings instance
settings = Settings()
