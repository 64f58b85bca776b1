"""
Common CLI argument definitions and utilities for tpchudtf CLI tools.
"""

import argparse
import os
from logging import getLogger
from pathlib import Path

import dotenv

from tpchudtf.logging_utils import LOGGER_NAME, configure_enhanced_logging

logger = getLogger(LOGGER_NAME)


def add_database_args(parser: argparse.ArgumentParser) -> None:
    """
    Add the host database argument to an ArgumentParser.

    Args:
        parser: The ArgumentParser to add arguments to
    """
    db_group = parser.add_argument_group("database")

    db_group.add_argument(
        "--database",
        type=str,
        help="DuckDB database path (if not specified, uses TPCH_UDTF_DATABASE or an in-memory database)",
    )


def add_environment_args(parser: argparse.ArgumentParser) -> None:
    """
    Add environment file loading arguments to an ArgumentParser.

    Args:
        parser: The ArgumentParser to add arguments to
    """
    env_group = parser.add_argument_group("environment")

    env_group.add_argument(
        "--env-file",
        "--env",
        dest="env_file",
        type=str,
        default=".env",
        help="Path to environment file with configuration (default: .env)",
    )


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """
    Add verbosity control arguments to an ArgumentParser.

    Args:
        parser: The ArgumentParser to add arguments to
    """
    verbosity_group = parser.add_argument_group("verbosity options")

    verbosity_group.add_argument("--quiet", "-q", action="store_true", help="Suppress status messages (only output data/results)")

    verbosity_group.add_argument("--verbose", "-v", action="store_true", help="Show detailed status and progress messages")


def add_output_args(parser: argparse.ArgumentParser) -> None:
    """
    Add output formatting arguments to an ArgumentParser.

    Args:
        parser: The ArgumentParser to add arguments to
    """
    output_group = parser.add_argument_group("output options")

    output_group.add_argument(
        "--output-format",
        choices=["table", "csv", "json"],
        default="table",
        help="Output format: table (aligned columns), csv, json (one object per row)",
    )

    output_group.add_argument("--output-file", type=str, help="Write output to file instead of console")


def configure_logging(args: argparse.Namespace) -> None:
    """
    Configure logging based on verbosity arguments.

    Args:
        args: Parsed command line arguments with quiet/verbose flags
    """
    configure_enhanced_logging(verbose=getattr(args, "verbose", False), quiet=getattr(args, "quiet", False))


def load_environment_with_validation(env_file: str | None, required_vars: list[str] | None = None) -> dict[str, str]:
    """
    Load environment variables from file with validation.

    Args:
        env_file: Path to environment file
        required_vars: List of required environment variable names

    Returns:
        Dictionary of loaded environment variables

    Raises:
        ValueError: If required variables are missing
    """
    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            dotenv.load_dotenv(env_file)
            logger.debug(f"Loaded environment from {env_file}")
        elif env_file != ".env":  # Only warn if user explicitly specified a file
            logger.warning(f"Environment file {env_file} not found")

    if required_vars:
        missing_vars = [var for var in required_vars if not os.getenv(var)]
        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

    return dict(os.environ)
