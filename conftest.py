from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parent
SRC_PATH = ROOT / "src"
if SRC_PATH.is_dir():
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture
def data_dir() -> Path:
    return ROOT / "data"


@pytest.fixture
def default_map(data_dir: Path):
    from pixelarcade.core.model.map import load_map_json

    return load_map_json(data_dir / "maps" / "default.json")
