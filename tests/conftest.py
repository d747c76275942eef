from __future__ import annotations

from pathlib import Path

import pytest

from borewell.domain.models import SlabRate

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def split_rates():
    return [
        SlabRate(0, 300, 90),
        SlabRate(300, 400, 100),
        SlabRate(400, 99999, 120),
    ]


@pytest.fixture
def buffer_rates():
    return [
        SlabRate(0, 300, 90),
        SlabRate(300, 99999, 120),
    ]


@pytest.fixture
def profiles_file(tmp_path) -> Path:
    return tmp_path / "profiles" / "rate_profiles.json"
