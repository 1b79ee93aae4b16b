from __future__ import annotations

from pathlib import Path

import pytest

import datmerge.config as config_package
from datmerge.config import (
    DEFAULT_OUTPUT_FORMAT,
    ConfigurationError,
    RunConfig,
    get_run_config,
    optional_env_var,
    optional_int_env_var,
    validate_output_format,
)


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")
    assert optional_env_var("EXAMPLE_VAR") is None

    monkeypatch.setenv("EXAMPLE_VAR", " value ")
    assert optional_env_var("EXAMPLE_VAR") == "value"


def test_optional_int_env_var_validates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "4")
    assert optional_int_env_var("EXAMPLE_INT") == 4

    monkeypatch.setenv("EXAMPLE_INT", "four")
    with pytest.raises(ConfigurationError):
        optional_int_env_var("EXAMPLE_INT")

    monkeypatch.setenv("EXAMPLE_INT", "0")
    with pytest.raises(ConfigurationError):
        optional_int_env_var("EXAMPLE_INT")


def test_get_run_config_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("DATMERGE_WORKERS", "DATMERGE_OUTPUT_DIR", "DATMERGE_OUTPUT_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    config = get_run_config()

    assert config.workers >= 1
    assert config.output_dir.resolve() == tmp_path.resolve()
    assert config.output_format == DEFAULT_OUTPUT_FORMAT


def test_get_run_config_treats_blank_values_as_unset(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    for name in ("DATMERGE_WORKERS", "DATMERGE_OUTPUT_DIR", "DATMERGE_OUTPUT_FORMAT"):
        monkeypatch.setenv(name, "   ")
    monkeypatch.chdir(tmp_path)

    config = get_run_config()

    assert config.workers >= 1
    assert config.output_dir.resolve() == tmp_path.resolve()
    assert config.output_format == DEFAULT_OUTPUT_FORMAT


def test_config_exports_only_optional_loaders() -> None:
    assert "require_env_vars" not in config_package.__all__
    assert not hasattr(config_package, "MissingConfigurationError")


def test_get_run_config_reads_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("DATMERGE_WORKERS", "5")
    monkeypatch.setenv("DATMERGE_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("DATMERGE_OUTPUT_FORMAT", " SabreDAT ")

    config = get_run_config()

    assert config == RunConfig(workers=5, output_dir=tmp_path / "out", output_format="sabredat")


def test_validate_output_format_rejects_unknown() -> None:
    assert validate_output_format("JSON") == "json"
    with pytest.raises(ConfigurationError):
        validate_output_format("csv")


def test_ensure_output_dir_creates_directory(tmp_path: Path) -> None:
    config = RunConfig(workers=1, output_dir=tmp_path / "a" / "b")

    created = config.ensure_output_dir()

    assert created.is_dir()
    assert created == (tmp_path / "a" / "b").resolve()
