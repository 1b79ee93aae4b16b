"""Run-time defaults for merge/diff runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var, optional_int_env_var
from .errors import ConfigurationError

MAX_DEFAULT_WORKERS: Final[int] = 8
DEFAULT_OUTPUT_FORMAT: Final[str] = "logiqx"
SUPPORTED_OUTPUT_FORMATS: Final[tuple[str, ...]] = ("logiqx", "sabredat", "json", "clrmamepro")


@dataclass(frozen=True, slots=True)
class RunConfig:
    workers: int
    output_dir: Path
    output_format: str = DEFAULT_OUTPUT_FORMAT

    def resolve_output_dir(self) -> Path:
        return self.output_dir.expanduser().resolve()

    def ensure_output_dir(self) -> Path:
        output_dir = self.resolve_output_dir()
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir


def _default_workers() -> int:
    return max(1, min(os.cpu_count() or 1, MAX_DEFAULT_WORKERS))


def validate_output_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in SUPPORTED_OUTPUT_FORMATS:
        supported = ", ".join(SUPPORTED_OUTPUT_FORMATS)
        raise ConfigurationError(
            f"Unsupported output format {value!r} (expected one of {supported})"
        )
    return normalized


def get_run_config() -> RunConfig:
    workers = optional_int_env_var("DATMERGE_WORKERS") or _default_workers()
    env_dir = optional_env_var("DATMERGE_OUTPUT_DIR")
    output_dir = Path(env_dir) if env_dir else Path.cwd()
    env_format = optional_env_var("DATMERGE_OUTPUT_FORMAT")
    output_format = validate_output_format(env_format) if env_format else DEFAULT_OUTPUT_FORMAT
    return RunConfig(workers=workers, output_dir=output_dir, output_format=output_format)
