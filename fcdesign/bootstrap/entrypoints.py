"""
bootstrap/entrypoints.py - Command-line entry point.

Provides logging setup and the fcdesign-optimize CLI.
"""

from __future__ import annotations
from typing import Any, Optional
import argparse
import asyncio
import importlib
import json
import logging
import sys

from pydantic import ValidationError

logger = logging.getLogger("bootstrap.entrypoints")

EXIT_OK = 0
EXIT_INFEASIBLE = 1
EXIT_INVALID = 2
EXIT_ORACLE_FAILURE = 3


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(level: str = "INFO", log_file: str = None, json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Console output goes to stderr; stdout carries the JSON result
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)


def load_oracle(reference: str) -> Any:
    """
    Import an oracle from a "module:attribute" reference.

    Classes are instantiated with no arguments; functions and instances
    are returned as-is.

    Raises:
        ValueError: if reference is malformed or the attribute does not exist
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Oracle must be given as module:attribute, got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import oracle module {module_name!r}: {e}") from e

    target = module
    for part in attr.split("."):
        if not hasattr(target, part):
            raise ValueError(f"Module {module_name!r} has no attribute {attr!r}")
        target = getattr(target, part)

    return target() if isinstance(target, type) else target


def _write_output(payload: Any, output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        with open(output, "w") as f:
            f.write(text)
        logger.info(f"Result written to {output}")
    else:
        print(text)


def cli_main(args: list = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code: 0 success, 1 infeasible result, 2 invalid request or
        oracle reference, 3 oracle failure
    """
    from ..optimization.engine import OptimizationEngine
    from ..optimization.errors import OptimizationError, OracleError
    from ..optimization.presets import get_capabilities
    from ..optimization.request import parse_request
    from .config import load_config

    parser = argparse.ArgumentParser(
        description="Fuel-cell stack design optimizer",
        prog="fcdesign-optimize",
    )

    parser.add_argument(
        "-r", "--request",
        help="Path to JSON optimization request",
        default=None,
    )
    parser.add_argument(
        "--oracle",
        help="Prediction oracle as module:attribute",
        default=None,
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON",
    )
    parser.add_argument(
        "-o", "--output",
        help="Write result JSON to this file instead of stdout",
        default=None,
    )
    parser.add_argument(
        "--capabilities",
        action="store_true",
        help="Print supported objectives, algorithms and default constraints",
    )
    parser.add_argument(
        "--type",
        help="Fuel-cell type for --capabilities",
        default=None,
    )

    parsed = parser.parse_args(args)

    config = load_config(parsed.config)
    setup_logging(
        level=parsed.log_level or config.logging.level,
        log_file=parsed.log_file or config.logging.log_file,
        json_format=parsed.json_logs or config.logging.json_logs,
    )

    if parsed.capabilities:
        _write_output(get_capabilities(parsed.type), parsed.output)
        return EXIT_OK

    if not parsed.request or not parsed.oracle:
        parser.print_usage(sys.stderr)
        logger.error("--request and --oracle are required unless --capabilities is given")
        return EXIT_INVALID

    try:
        with open(parsed.request) as f:
            request = parse_request(json.load(f))
        oracle = load_oracle(parsed.oracle)
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INVALID

    fuel_cell_type, objective, constraints, parameters, overrides = request.to_domain()

    try:
        engine = OptimizationEngine(oracle, config=config)
        result = asyncio.run(engine.optimize(
            fuel_cell_type, objective, constraints, parameters, overrides,
        ))
    except OracleError as e:
        logger.error(f"Oracle failure: {e}")
        return EXIT_ORACLE_FAILURE
    except (OptimizationError, TypeError) as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INVALID
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    _write_output(result.to_dict(), parsed.output)

    if not result.success:
        logger.warning(f"Optimum violates constraints: {result.constraint_violations}")
        return EXIT_INFEASIBLE

    return EXIT_OK


def main():
    """Main entry point for the package."""
    sys.exit(cli_main(sys.argv[1:]))


if __name__ == "__main__":
    main()
