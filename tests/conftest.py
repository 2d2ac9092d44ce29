from __future__ import annotations

from pathlib import Path

import pytest

from rsoutline.parser import RustParser

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def rust_parser() -> RustParser:
    return RustParser()


@pytest.fixture
def sample_rs() -> Path:
    return FIXTURE_DIR / "sample.rs"


@pytest.fixture
def broken_rs() -> Path:
    return FIXTURE_DIR / "broken.rs"
