"""
query_service.py
~~~~~~~~~~~~~~~~
Read and update operations over the aircraft store.  This is the only
module that talks to a store; the HTTP routes and the dashboard go through
it.
"""

from __future__ import annotations

import logging

from .errors import InvalidArgument, NotFound, StoreUnavailable
from .fleet import STATUSES, AircraftRecord, is_valid_status
from .fleet_store import AircraftStore

LOG = logging.getLogger("fleet_query")


class FleetQueryService:
    """Enforces the update contract on top of an ``AircraftStore``."""

    def __init__(self, store: AircraftStore) -> None:
        self.store = store

    def get_all(self) -> tuple[list[AircraftRecord], str | None]:
        """
        Return the whole fleet in stored order.

        Returns:
            ``(records, None)`` on success, ``([], message)`` when the store
            is unavailable.  A reachable but empty store is ``([], None)``.
        """
        try:
            return self.store.load(), None
        except StoreUnavailable as exc:
            LOG.warning("[get_all] store unavailable: %s", exc)
            return [], str(exc)

    def update_status(self, tail_number: object, status: object) -> AircraftRecord:
        """
        Set the status of one aircraft and persist the full fleet.

        Args:
            tail_number: Exact, case-sensitive tail number.
            status:      One of ``available``, ``aog``, ``maintenance``.

        Returns:
            The updated record.

        Raises:
            InvalidArgument:  missing tail number / status, or unknown status.
            NotFound:         no aircraft carries ``tail_number``.
            StoreUnavailable: the fleet could not be read or written.
        """
        if not tail_number or not status or not isinstance(tail_number, str):
            raise InvalidArgument("tailNumber and status are required")
        if not is_valid_status(status):
            raise InvalidArgument(
                "Invalid status. Must be " + ", ".join(STATUSES[:-1]) + f", or {STATUSES[-1]}"
            )

        records = self.store.load()
        for record in records:
            if record.get("tailNumber") == tail_number:
                break
        else:
            LOG.info("[update] unknown tail number %r", tail_number)
            raise NotFound("Aircraft not found")

        previous = record.get("status")
        record["status"] = status  # type: ignore[typeddict-item]
        self.store.save(records)
        LOG.info("[update] %s %s -> %s", tail_number, previous, status)
        return record


__all__ = ["FleetQueryService"]
