"""
bootstrap/config.py - Application configuration

Provides configuration loading from files, environment variables, and defaults.
Algorithm constants live here so deployments can tune them without code
changes; the defaults reproduce the reference behaviour of each optimizer.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass
class GradientDescentSettings:
    """Gradient descent step and finite-difference settings."""

    learning_rate: float = 0.01
    epsilon: float = 1e-6  # central-difference step

    @classmethod
    def from_env(cls) -> "GradientDescentSettings":
        return cls(
            learning_rate=_env_float("FCDESIGN_GD_LEARNING_RATE", 0.01),
            epsilon=_env_float("FCDESIGN_GD_EPSILON", 1e-6),
        )


@dataclass
class GeneticSettings:
    """Genetic algorithm operator settings."""

    default_population_size: int = 50
    mutation_rate: float = 0.1
    crossover_rate: float = 0.8
    elite_fraction: float = 0.1
    tournament_size: int = 3
    convergence_window: int = 10
    min_generations: int = 10  # convergence checked only after this many

    # Mutation half-widths
    cell_count_step: float = 5.0
    active_area_step: float = 10.0
    temperature_step: float = 5.0

    @classmethod
    def from_env(cls) -> "GeneticSettings":
        return cls(
            default_population_size=_env_int("FCDESIGN_GA_POPULATION", 50),
            mutation_rate=_env_float("FCDESIGN_GA_MUTATION_RATE", 0.1),
            crossover_rate=_env_float("FCDESIGN_GA_CROSSOVER_RATE", 0.8),
            elite_fraction=_env_float("FCDESIGN_GA_ELITE_FRACTION", 0.1),
            tournament_size=_env_int("FCDESIGN_GA_TOURNAMENT_SIZE", 3),
        )


@dataclass
class BayesianSettings:
    """Simplified Bayesian search settings."""

    initial_samples: int = 10
    candidate_samples: int = 100
    exploration_weight: float = 10.0
    convergence_window: int = 10
    min_evaluations: int = 20

    @classmethod
    def from_env(cls) -> "BayesianSettings":
        return cls(
            initial_samples=_env_int("FCDESIGN_BO_INITIAL_SAMPLES", 10),
            candidate_samples=_env_int("FCDESIGN_BO_CANDIDATES", 100),
            exploration_weight=_env_float("FCDESIGN_BO_EXPLORATION_WEIGHT", 10.0),
        )


@dataclass
class SensitivitySettings:
    """Post-optimization sensitivity analysis settings."""

    relative_step: float = 1e-4
    sweep_points: int = 20
    near_optimal_fraction: float = 0.95
    fallback_margin: float = 0.1  # range is value*(1 +/- margin) when no sample qualifies

    @classmethod
    def from_env(cls) -> "SensitivitySettings":
        return cls(
            relative_step=_env_float("FCDESIGN_SENS_RELATIVE_STEP", 1e-4),
            sweep_points=_env_int("FCDESIGN_SENS_SWEEP_POINTS", 20),
            near_optimal_fraction=_env_float("FCDESIGN_SENS_NEAR_OPTIMAL", 0.95),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("FCDESIGN_LOG_LEVEL", "INFO"),
            format=os.getenv("FCDESIGN_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("FCDESIGN_LOG_FILE"),
            json_logs=os.getenv("FCDESIGN_JSON_LOGS", "false").lower() == "true",
        )


@dataclass
class FCDesignConfig:
    """Root configuration for the optimization engine."""

    environment: str = "development"
    debug: bool = False
    version: str = "1.0.0"

    gradient: GradientDescentSettings = field(default_factory=GradientDescentSettings)
    genetic: GeneticSettings = field(default_factory=GeneticSettings)
    bayesian: BayesianSettings = field(default_factory=BayesianSettings)
    sensitivity: SensitivitySettings = field(default_factory=SensitivitySettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Used when OptimizationParameters.seed is None
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "FCDesignConfig":
        """Create configuration from environment variables."""
        seed = os.getenv("FCDESIGN_SEED")
        return cls(
            environment=os.getenv("FCDESIGN_ENVIRONMENT", "development"),
            debug=os.getenv("FCDESIGN_DEBUG", "false").lower() == "true",
            gradient=GradientDescentSettings.from_env(),
            genetic=GeneticSettings.from_env(),
            bayesian=BayesianSettings.from_env(),
            sensitivity=SensitivitySettings.from_env(),
            logging=LoggingConfig.from_env(),
            seed=int(seed) if seed else None,
        )

    @classmethod
    def from_file(cls, filepath: str) -> "FCDesignConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "FCDesignConfig":
        """Create config from dictionary."""
        config = cls.from_env()

        # Override with file values
        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]
        if "seed" in data:
            config.seed = data["seed"]

        for section in ("gradient", "genetic", "bayesian", "sensitivity", "logging"):
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary; _from_dict() accepts the output."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "seed": self.seed,
            "gradient": asdict(self.gradient),
            "genetic": asdict(self.genetic),
            "bayesian": asdict(self.bayesian),
            "sensitivity": asdict(self.sensitivity),
            "logging": asdict(self.logging),
        }


# Global config instance
_config: Optional[FCDesignConfig] = None


def load_config(filepath: str = None) -> FCDesignConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        FCDesignConfig instance
    """
    global _config

    if filepath:
        _config = FCDesignConfig.from_file(filepath)
    else:
        # Try default locations
        default_paths = [
            "./fcdesign.json",
            "./config/fcdesign.json",
            os.path.expanduser("~/.fcdesign/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = FCDesignConfig.from_file(path)
                return _config

        # Fall back to environment
        _config = FCDesignConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> FCDesignConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
