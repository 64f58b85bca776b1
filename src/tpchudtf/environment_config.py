"""
Environment configuration manager for tpchudtf.

This module provides centralized environment variable validation and extraction
for the generator, the host session and the parquet writer.
"""

import os
from typing import Any

TRUE_VALUES = ("true", "1", "yes")
FALSE_VALUES = ("false", "0", "no")


def _get_bool(var: str, default: bool) -> bool:
    value = os.getenv(var)
    if value is None or value == "":
        return default
    if value.lower() in TRUE_VALUES:
        return True
    if value.lower() in FALSE_VALUES:
        return False
    raise ValueError(f"{var} must be one of {', '.join(TRUE_VALUES + FALSE_VALUES)}, got '{value}'")


def _get_positive_int(var: str) -> int | None:
    value = os.getenv(var)
    if not value:
        return None
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"{var} must be an integer, got '{value}'") from None
    if parsed <= 0:
        raise ValueError(f"{var} must be greater than 0, got {parsed}")
    return parsed


class EnvironmentConfigManager:
    """Centralized environment variable management for tpchudtf."""

    @staticmethod
    def get_generator_config() -> dict[str, Any]:
        """
        Get the configuration of the scratch DuckDB connection used by dbgen.

        Returns:
            Dictionary with generator parameters

        Environment Variables:
            TPCH_UDTF_AUTO_INSTALL: Run ``INSTALL tpch`` before ``LOAD tpch`` (default: "true")
            TPCH_UDTF_GENERATOR_THREADS: DuckDB ``threads`` setting (default: DuckDB's own)
            TPCH_UDTF_GENERATOR_MEMORY_LIMIT: DuckDB ``memory_limit`` setting, e.g. "4GB"

        Raises:
            ValueError: If a variable holds a malformed value
        """
        return {
            "auto_install": _get_bool("TPCH_UDTF_AUTO_INSTALL", True),
            "threads": _get_positive_int("TPCH_UDTF_GENERATOR_THREADS"),
            "memory_limit": os.getenv("TPCH_UDTF_GENERATOR_MEMORY_LIMIT") or None,
        }

    @staticmethod
    def get_session_config() -> dict[str, Any]:
        """
        Get the host session configuration.

        Environment Variables:
            TPCH_UDTF_DATABASE: Path to the host DuckDB database (default: ":memory:")
        """
        return {"database": os.getenv("TPCH_UDTF_DATABASE") or ":memory:"}

    @staticmethod
    def get_writer_config() -> dict[str, Any]:
        """
        Get the parquet writer configuration.

        Environment Variables:
            TPCH_UDTF_PARQUET_COMPRESSION: Parquet codec (default: "zstd")
        """
        compression = os.getenv("TPCH_UDTF_PARQUET_COMPRESSION") or "zstd"
        if compression.lower() not in ("none", "snappy", "gzip", "brotli", "lz4", "zstd"):
            raise ValueError(f"Unsupported TPCH_UDTF_PARQUET_COMPRESSION: {compression}")
        return {"compression": compression.lower()}
