"""
tests/test_listing_view.py
~~~~~~~~~~~~~~~~~~~~~~~~~~
Editing state machine of the aircraft table: Idle ⇄ Editing(tail),
confirm-then-commit updates and the in-flight guard.
"""

from __future__ import annotations

import asyncio

import pytest

from fleetboard.errors import FleetError, NotFound
from fleetboard.listing_view import ListingView
from fleetboard.query_service import FleetQueryService


class _FakeGateway:
    """Async gateway that records calls and returns / raises on demand."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, str]] = []
        self.error = error

    async def update_status(self, tail: str, status: str) -> dict:
        self.calls.append((tail, status))
        if self.error is not None:
            raise self.error
        return {"tailNumber": tail, "status": status}


def test_starts_idle(sample_fleet):
    view = ListingView(_FakeGateway(), sample_fleet)
    assert view.is_idle
    assert view.updating is False


def test_select_switches_without_service_call(sample_fleet):
    gateway = _FakeGateway()
    view = ListingView(gateway, sample_fleet)

    view.select("N101")
    assert view.editing == "N101"
    view.select("N202")
    assert view.editing == "N202"
    assert gateway.calls == []


def test_cancel_returns_to_idle_without_call(sample_fleet):
    gateway = _FakeGateway()
    view = ListingView(gateway, sample_fleet)
    view.select("N101")

    view.cancel()

    assert view.is_idle
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_confirm_commits_after_success(sample_fleet):
    gateway = _FakeGateway()
    view = ListingView(gateway, sample_fleet)
    view.select("N202")

    updated = await view.confirm("maintenance")

    assert updated == {"tailNumber": "N202", "status": "maintenance"}
    assert gateway.calls == [("N202", "maintenance")]
    assert view.is_idle
    assert view.error is None
    by_tail = {r["tailNumber"]: r for r in view.records}
    assert by_tail["N202"]["status"] == "maintenance"
    assert by_tail["N202"]["model"] == "Airbus A320"
    assert by_tail["N101"]["status"] == "available"


@pytest.mark.asyncio
async def test_confirm_failure_keeps_records_and_reports(sample_fleet):
    gateway = _FakeGateway(error=NotFound("Aircraft not found"))
    view = ListingView(gateway, sample_fleet)
    view.select("N202")

    assert await view.confirm("available") is None

    assert view.is_idle
    assert view.updating is False
    assert view.error == "Aircraft not found"
    assert view.records == sample_fleet


@pytest.mark.asyncio
async def test_confirm_generic_failure_has_message(sample_fleet):
    view = ListingView(_FakeGateway(error=FleetError()), sample_fleet)
    view.select("N101")
    await view.confirm("aog")
    assert view.error == "Failed to update aircraft status"


@pytest.mark.asyncio
async def test_confirm_while_idle_does_nothing(sample_fleet):
    gateway = _FakeGateway()
    view = ListingView(gateway, sample_fleet)
    assert await view.confirm("aog") is None
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_second_confirm_ignored_while_in_flight(sample_fleet):
    release = asyncio.Event()
    calls: list[tuple[str, str]] = []

    class _SlowGateway:
        async def update_status(self, tail: str, status: str) -> dict:
            calls.append((tail, status))
            await release.wait()
            return {"tailNumber": tail, "status": status}

    view = ListingView(_SlowGateway(), sample_fleet)
    view.select("N101")
    first = asyncio.create_task(view.confirm("aog"))
    await asyncio.sleep(0)
    assert view.updating is True

    assert await view.confirm("maintenance") is None

    release.set()
    await first
    assert calls == [("N101", "aog")]
    assert view.updating is False
    assert view.is_idle


@pytest.mark.asyncio
async def test_selection_made_during_update_survives(sample_fleet):
    release = asyncio.Event()

    class _SlowGateway:
        async def update_status(self, tail: str, status: str) -> dict:
            await release.wait()
            return {"tailNumber": tail, "status": status}

    view = ListingView(_SlowGateway(), sample_fleet)
    view.select("N101")
    pending = asyncio.create_task(view.confirm("aog"))
    await asyncio.sleep(0)

    view.select("N202")
    release.set()
    await pending

    assert view.editing == "N202"
    assert view.records[0]["status"] == "aog"


@pytest.mark.asyncio
async def test_works_with_sync_query_service(file_store):
    view = ListingView(FleetQueryService(file_store), file_store.load())
    view.select("N303")

    await view.confirm("available")

    assert file_store.load()[2]["status"] == "available"
    assert view.records[2]["status"] == "available"


@pytest.mark.asyncio
async def test_invalid_status_from_sync_service(file_store, sample_fleet):
    view = ListingView(FleetQueryService(file_store), sample_fleet)
    view.select("N303")

    await view.confirm("grounded")

    assert view.error.startswith("Invalid status")
    assert file_store.load() == sample_fleet


def test_rows_apply_filters(sample_fleet):
    view = ListingView(_FakeGateway(), sample_fleet)
    rows = view.rows({"exactStatus": "aog"})
    assert [r["tailNumber"] for r in rows] == ["N202", "N1010"]
