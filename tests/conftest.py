from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

SRC = ROOT / "src"
SRC_STR = str(SRC)
if SRC_STR not in sys.path:
    sys.path.insert(0, SRC_STR)

EXAMPLES = ROOT / "examples"


@pytest.fixture
def sample_config_path() -> Path:
    return EXAMPLES / "sample1.conf"


@pytest.fixture
def sample_schema_path() -> Path:
    return EXAMPLES / "sample1.schema"
