"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Global pytest fixtures.

`sample_fleet` is a small five-aircraft fleet (two of them AOG) and
`file_store` a ``JsonFileStore`` holding it inside a per-test temporary
directory, so nothing is left behind under `backend/local_data/`.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from fleetboard.fleet_store import JsonFileStore


pytest_plugins = ["pytest_asyncio"]

_SAMPLE = [
    {"tailNumber": "N101", "model": "Boeing 737-800", "status": "available",
     "location": {"latitude": 40.6413, "longitude": -73.7781}},
    {"tailNumber": "N202", "model": "Airbus A320", "status": "aog",
     "location": {"latitude": 41.9742, "longitude": -87.9073}},
    {"tailNumber": "N303", "model": "Boeing 737-800", "status": "maintenance",
     "location": {"latitude": 33.6407, "longitude": -84.4277}},
    {"tailNumber": "N1010", "model": "Embraer E175", "status": "aog",
     "location": {"latitude": 39.8561, "longitude": -104.6737}},
    {"tailNumber": "C-GABC", "model": "Airbus A320", "status": "available",
     "location": {"latitude": 43.6777, "longitude": -79.6248}},
]


@pytest.fixture
def sample_fleet() -> list[dict]:
    """Fresh copy of the five-aircraft test fleet."""
    return copy.deepcopy(_SAMPLE)


@pytest.fixture
def fleet_file(tmp_path: Path, sample_fleet: list[dict]) -> Path:
    """`aircraft.json` pre-populated with `sample_fleet`."""
    path = tmp_path / "aircraft.json"
    path.write_text(json.dumps(sample_fleet, indent=2))
    return path


@pytest.fixture
def file_store(fleet_file: Path) -> JsonFileStore:
    return JsonFileStore(fleet_file)
