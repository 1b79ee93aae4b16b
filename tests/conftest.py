from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def logiqx_path() -> Path:
    return DATA_DIR / "logiqx.xml"


@pytest.fixture
def sabredat_path() -> Path:
    return DATA_DIR / "sabredat.xml"


@pytest.fixture
def sabrejson_path() -> Path:
    return DATA_DIR / "sabre.json"


@pytest.fixture
def clrmamepro_path() -> Path:
    return DATA_DIR / "clrmamepro.dat"
