"""
listing_view.py
~~~~~~~~~~~~~~~
UI state of the aircraft table: which row (if any) is being edited, whether
an update is in flight, and the last user-visible error.

States
------
* ``Idle``                 – ``editing is None``
* ``Editing(tailNumber)``  – exactly one row shows its status control

Transitions
-----------
* ``select(tail)``   Idle/Editing → Editing(tail); switching rows never
                     calls the service for the previous one.
* ``confirm(s)``     Editing → service ``update_status`` → Idle, whatever
                     the outcome.
* ``cancel()``       Editing → Idle, no service call.

Updates are confirm-then-commit: the local copy of the fleet changes only
after the service hands back the updated record.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from typing import Any

from .errors import FleetError
from .filter_engine import FilterCriteria, filter_fleet
from .fleet import AircraftRecord

LOG = logging.getLogger("dashboard")


async def _resolve(value: Any) -> Any:
    """Await *value* when the gateway handed back a coroutine."""
    if inspect.isawaitable(value):
        return await value
    return value


class ListingView:
    """
    Table state over a local copy of the fleet.

    ``gateway`` is anything with ``update_status(tail, status)`` – the
    in-process ``FleetQueryService`` or the HTTP ``FleetClient``.
    """

    def __init__(self, gateway: Any, records: Sequence[AircraftRecord] = ()) -> None:
        self._gateway = gateway
        self.records: list[AircraftRecord] = list(records)
        self.editing: str | None = None
        self.updating = False
        self.error: str | None = None

    # ------------------------------------------------------------------ #
    # State                                                              #
    # ------------------------------------------------------------------ #
    @property
    def is_idle(self) -> bool:
        return self.editing is None

    def rows(self, criteria: FilterCriteria) -> list[AircraftRecord]:
        return filter_fleet(self.records, criteria)

    def replace_records(self, records: Sequence[AircraftRecord]) -> None:
        self.records = list(records)

    # ------------------------------------------------------------------ #
    # Transitions                                                        #
    # ------------------------------------------------------------------ #
    def select(self, tail_number: str) -> None:
        if self.editing and self.editing != tail_number:
            LOG.debug("[listing] switch edit %s -> %s", self.editing, tail_number)
        self.editing = tail_number

    def cancel(self) -> None:
        self.editing = None

    async def confirm(self, status: str) -> AircraftRecord | None:
        """
        Send the edited row's new status to the service.

        Returns:
            The updated record, or ``None`` when nothing was sent or the
            service rejected the update (``self.error`` then holds why).
        """
        if self.editing is None:
            return None
        if self.updating:
            LOG.info("[listing] update for %s already in flight – ignored", self.editing)
            return None

        tail = self.editing
        self.updating = True
        try:
            updated = await _resolve(self._gateway.update_status(tail, status))
        except FleetError as exc:
            LOG.warning("[listing] update %s -> %s failed: %s", tail, status, exc)
            self.error = str(exc) or "Failed to update aircraft status"
            return None
        finally:
            self.updating = False
            if self.editing == tail:
                self.editing = None

        self.error = None
        self.records = [
            dict(r, status=updated["status"]) if r["tailNumber"] == tail else r  # type: ignore[misc]
            for r in self.records
        ]
        return updated


__all__ = ["ListingView"]
