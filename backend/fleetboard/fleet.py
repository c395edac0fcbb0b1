"""
fleet.py
~~~~~~~~
Record shape and seed data for every aircraft the status board manages.

Key points
----------
* • ``tailNumber`` is the registration painted on the airframe and the
    record's key.  It never changes.
* • ``status`` is the only field that moves at runtime and is one of
    ``available``, ``aog`` (Aircraft on Ground) or ``maintenance``.
* • ``SEED_FLEET`` is written to an empty store once at start-up; nothing
    creates or deletes aircraft afterwards.
"""

from __future__ import annotations

import copy
from typing import Final, Literal, TypedDict

Status = Literal["available", "aog", "maintenance"]

STATUSES: Final[tuple[str, ...]] = ("available", "aog", "maintenance")


class Location(TypedDict):
    latitude: float
    longitude: float


class AircraftRecord(TypedDict):
    tailNumber: str
    model: str
    status: Status
    location: Location


def is_valid_status(value: object) -> bool:
    """True when *value* is one of the three status strings."""
    return isinstance(value, str) and value in STATUSES


def format_location(location: Location) -> str:
    """``"40.6413, -73.7781"`` – four decimals, as shown in the table."""
    return f"{location['latitude']:.4f}, {location['longitude']:.4f}"


SEED_FLEET: Final[list[AircraftRecord]] = [
    # ───────────── narrow-bodies
    {"tailNumber": "N101AA", "model": "Boeing 737-800", "status": "available",
     "location": {"latitude": 40.6413, "longitude": -73.7781}},  # JFK
    {"tailNumber": "N202UA", "model": "Airbus A320", "status": "aog",
     "location": {"latitude": 41.9742, "longitude": -87.9073}},  # ORD
    {"tailNumber": "N303DL", "model": "Boeing 737-800", "status": "maintenance",
     "location": {"latitude": 33.6407, "longitude": -84.4277}},  # ATL
    {"tailNumber": "N404WN", "model": "Boeing 737 MAX 8", "status": "available",
     "location": {"latitude": 32.8998, "longitude": -97.0403}},  # DFW
    {"tailNumber": "N505AS", "model": "Airbus A321neo", "status": "available",
     "location": {"latitude": 47.4502, "longitude": -122.3088}},  # SEA
    # ───────────── wide-bodies
    {"tailNumber": "N606UA", "model": "Boeing 787-9", "status": "aog",
     "location": {"latitude": 37.6213, "longitude": -122.3790}},  # SFO
    {"tailNumber": "N707DL", "model": "Airbus A350-900", "status": "available",
     "location": {"latitude": 33.9416, "longitude": -118.4085}},  # LAX
    {"tailNumber": "N808AA", "model": "Boeing 777-300ER", "status": "maintenance",
     "location": {"latitude": 25.7959, "longitude": -80.2870}},  # MIA
    # ───────────── regional
    {"tailNumber": "N909SK", "model": "Embraer E175", "status": "available",
     "location": {"latitude": 39.8561, "longitude": -104.6737}},  # DEN
    {"tailNumber": "N110QX", "model": "Embraer E175", "status": "maintenance",
     "location": {"latitude": 45.5898, "longitude": -122.5951}},  # PDX
]


def seed_fleet() -> list[AircraftRecord]:
    """Fresh deep copy of ``SEED_FLEET`` so callers may mutate it."""
    return copy.deepcopy(SEED_FLEET)


__all__ = [
    "AircraftRecord",
    "Location",
    "SEED_FLEET",
    "STATUSES",
    "Status",
    "format_location",
    "is_valid_status",
    "seed_fleet",
]
