"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, optional_int_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .run import (
    DEFAULT_OUTPUT_FORMAT,
    SUPPORTED_OUTPUT_FORMATS,
    RunConfig,
    get_run_config,
    validate_output_format,
)

__all__ = [
    "DEFAULT_OUTPUT_FORMAT",
    "SUPPORTED_OUTPUT_FORMATS",
    "ConfigurationError",
    "RunConfig",
    "configure_logging",
    "get_run_config",
    "optional_env_var",
    "optional_int_env_var",
    "validate_output_format",
]
