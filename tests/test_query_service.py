"""
tests/test_query_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~
`FleetQueryService.get_all()` / `update_status()` – the update contract:
one record changes, nothing else moves, and rejected updates never touch
the store.
"""

from __future__ import annotations

import json

import pytest

from fleetboard.errors import InvalidArgument, NotFound, StoreUnavailable
from fleetboard.fleet_store import JsonFileStore, SlotStore
from fleetboard.query_service import FleetQueryService


class _CountingStore:
    """In-memory store that records every save."""

    def __init__(self, records: list[dict]) -> None:
        self.records = records
        self.saves = 0

    def load(self) -> list[dict]:
        return json.loads(json.dumps(self.records))

    def save(self, records: list[dict]) -> None:
        self.saves += 1
        self.records = json.loads(json.dumps(records))


class _BrokenStore:
    def load(self):
        raise StoreUnavailable("Aircraft data is unavailable")

    def save(self, records):
        raise StoreUnavailable("Aircraft data could not be saved")


# ------------------------------------------------------------------ #
# get_all                                                            #
# ------------------------------------------------------------------ #
def test_get_all_returns_store_verbatim(file_store, sample_fleet):
    assert FleetQueryService(file_store).get_all() == (sample_fleet, None)


def test_get_all_empty_store(fleet_file):
    """Reachable medium holding [] → empty sequence, no error."""
    fleet_file.write_text("[]")
    assert FleetQueryService(JsonFileStore(fleet_file)).get_all() == ([], None)


def test_get_all_unavailable_reports_failure():
    records, error = FleetQueryService(_BrokenStore()).get_all()
    assert records == []
    assert error == "Aircraft data is unavailable"


def test_get_all_undecodable_file_reports_failure(fleet_file):
    fleet_file.write_bytes(b"[\xff\xfe]")
    assert FleetQueryService(JsonFileStore(fleet_file)).get_all() == (
        [],
        "Aircraft data is corrupt",
    )


# ------------------------------------------------------------------ #
# update_status                                                      #
# ------------------------------------------------------------------ #
def test_update_scenario_two_aircraft():
    store = SlotStore(slots={})
    store.save(
        [
            {"tailNumber": "N101", "model": "B737", "status": "available",
             "location": {"latitude": 1.0, "longitude": 2.0}},
            {"tailNumber": "N202", "model": "A320", "status": "aog",
             "location": {"latitude": 3.0, "longitude": 4.0}},
        ]
    )
    svc = FleetQueryService(store)

    updated = svc.update_status("N202", "maintenance")

    assert updated["tailNumber"] == "N202"
    assert updated["status"] == "maintenance"
    records, error = svc.get_all()
    assert error is None
    assert records[0]["status"] == "available"
    assert records[1]["status"] == "maintenance"


def test_update_changes_only_target_status(file_store, sample_fleet):
    before = [json.dumps(r, sort_keys=True) for r in sample_fleet]

    FleetQueryService(file_store).update_status("N303", "available")

    after = file_store.load()
    assert [r["tailNumber"] for r in after] == [r["tailNumber"] for r in sample_fleet]
    for i, record in enumerate(after):
        if record["tailNumber"] == "N303":
            expected = dict(sample_fleet[i], status="available")
            assert record == expected
        else:
            assert json.dumps(record, sort_keys=True) == before[i]


@pytest.mark.parametrize("status", ["grounded", "AOG", "Available", " aog", 3])
def test_update_invalid_status_never_saves(sample_fleet, status):
    store = _CountingStore(sample_fleet)
    with pytest.raises(InvalidArgument):
        FleetQueryService(store).update_status("N101", status)
    assert store.saves == 0


@pytest.mark.parametrize(
    "tail, status",
    [("", "aog"), (None, "aog"), ("N101", ""), ("N101", None)],
)
def test_update_missing_fields(sample_fleet, tail, status):
    store = _CountingStore(sample_fleet)
    with pytest.raises(InvalidArgument, match="required"):
        FleetQueryService(store).update_status(tail, status)
    assert store.saves == 0


def test_update_unknown_tail_never_saves(sample_fleet):
    store = _CountingStore(sample_fleet)
    with pytest.raises(NotFound):
        FleetQueryService(store).update_status("N999", "aog")
    assert store.saves == 0


def test_update_lookup_is_case_sensitive(sample_fleet):
    store = _CountingStore(sample_fleet)
    with pytest.raises(NotFound):
        FleetQueryService(store).update_status("n202", "available")


def test_update_unavailable_store_propagates():
    with pytest.raises(StoreUnavailable):
        FleetQueryService(_BrokenStore()).update_status("N101", "aog")


def test_update_first_match_only(sample_fleet):
    """Duplicate keys should not exist, but only the first one is touched."""
    dup = dict(sample_fleet[0])
    store = _CountingStore(sample_fleet + [dup])

    FleetQueryService(store).update_status("N101", "aog")

    assert store.records[0]["status"] == "aog"
    assert store.records[-1]["status"] == "available"
    assert store.saves == 1
