"""
Configuration for manifest parsing.

Settings are read from environment variables:

    PACKCFG_ENCODING     Encoding used to read manifest files (default: utf-8)
    PACKCFG_SOURCE_NAME  Source name reported for text input (default: [stream])
    PACKCFG_LOG_LEVEL    Logging level for the CLI (default: WARNING)

Usage:
    from packcfg.core.config import ParserConfig, configure_logging

    config = ParserConfig.from_env()
    configure_logging(config.log_level)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

ENCODING_ENV_VAR = "PACKCFG_ENCODING"
SOURCE_NAME_ENV_VAR = "PACKCFG_SOURCE_NAME"
LOG_LEVEL_ENV_VAR = "PACKCFG_LOG_LEVEL"

DEFAULT_ENCODING = "utf-8"
DEFAULT_SOURCE_NAME = "[stream]"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ParserConfig:
    """Manifest parser settings."""

    encoding: str = DEFAULT_ENCODING
    source_name: str = DEFAULT_SOURCE_NAME
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> ParserConfig:
        """Build settings from PACKCFG_* environment variables.

        Unset or empty variables keep their defaults. An unknown log level
        falls back to the default with a warning.
        """
        log_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper() or DEFAULT_LOG_LEVEL
        if log_level not in _LOG_LEVELS:
            logging.getLogger(__name__).warning(
                "Invalid %s value '%s', using '%s'",
                LOG_LEVEL_ENV_VAR,
                log_level,
                DEFAULT_LOG_LEVEL,
            )
            log_level = DEFAULT_LOG_LEVEL

        return cls(
            encoding=os.environ.get(ENCODING_ENV_VAR, "").strip() or DEFAULT_ENCODING,
            source_name=os.environ.get(SOURCE_NAME_ENV_VAR, "") or DEFAULT_SOURCE_NAME,
            log_level=log_level,
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )
