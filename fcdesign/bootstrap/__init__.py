"""
bootstrap/ - Bootstrap Layer

Configuration loading, logging setup and the command-line entry point.
"""

from .config import (
    FCDesignConfig,
    GradientDescentSettings,
    GeneticSettings,
    BayesianSettings,
    SensitivitySettings,
    LoggingConfig,
    load_config,
    get_config,
)

from .entrypoints import (
    setup_logging,
    load_oracle,
    cli_main,
)

__all__ = [
    # Config
    "FCDesignConfig",
    "GradientDescentSettings",
    "GeneticSettings",
    "BayesianSettings",
    "SensitivitySettings",
    "LoggingConfig",
    "load_config",
    "get_config",
    # Entrypoints
    "setup_logging",
    "load_oracle",
    "cli_main",
]
