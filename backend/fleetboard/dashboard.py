"""
dashboard.py
~~~~~~~~~~~~
The hosting page: holds the active filters, wires the listing and the map
together, and renders the single HTML page of the status board.

Map → table round trip
----------------------
``MapView`` is built with ``on_select=self.focus``.  Selecting a marker
clears every filter and flags that row for emphasis for ``HIGHLIGHT_SECONDS``;
the flag drops by itself once the deadline passes.
"""

from __future__ import annotations

import html
import logging
import os
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from .filter_engine import (
    FilterCriteria,
    is_active,
    status_counts,
    unique_models,
    unique_statuses,
)
from .fleet import STATUSES, AircraftRecord, format_location
from .listing_view import ListingView, _resolve
from .map_view import MapView

LOG = logging.getLogger("dashboard")

HIGHLIGHT_SECONDS = float(os.getenv("HIGHLIGHT_SECONDS", "3"))

_BADGE_CLASS = {"available": "ok", "maintenance": "warn", "aog": "bad"}


class Dashboard:
    """Page-level state shared by the HTML routes."""

    def __init__(
        self,
        gateway: Any,
        highlight_seconds: float = HIGHLIGHT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.gateway = gateway
        self.listing = ListingView(gateway)
        self.map_view = MapView(on_select=self.focus)
        self.criteria: FilterCriteria = {}
        self.load_error: str | None = None
        self.highlight_seconds = highlight_seconds
        self._clock = clock
        self._highlight: str | None = None
        self._highlight_until = 0.0

    # ------------------------------------------------------------------ #
    # Data                                                               #
    # ------------------------------------------------------------------ #
    async def refresh(self) -> None:
        """Reload the fleet through the gateway."""
        records, error = await _resolve(self.gateway.get_all())
        self.listing.replace_records(records)
        self.load_error = error
        if error:
            LOG.warning("[dashboard] fleet unavailable: %s", error)

    def visible_rows(self) -> list[AircraftRecord]:
        return self.listing.rows(self.criteria)

    def summary(self) -> dict[str, Any]:
        rows = self.visible_rows()
        return {
            "shown": len(rows),
            "total": len(self.listing.records),
            "counts": status_counts(rows),
        }

    # ------------------------------------------------------------------ #
    # Filters & selection                                                #
    # ------------------------------------------------------------------ #
    def set_filters(self, tail: str = "", model: str = "", status: str = "") -> None:
        criteria: FilterCriteria = {}
        if tail:
            criteria["tailNumberSubstring"] = tail
        if model:
            criteria["exactModel"] = model
        if status:
            criteria["exactStatus"] = status
        self.criteria = criteria

    def clear_filters(self) -> None:
        self.criteria = {}

    def focus(self, tail_number: str) -> None:
        """Selection callback handed to the map view."""
        self.clear_filters()
        self._highlight = tail_number
        self._highlight_until = self._clock() + self.highlight_seconds

    @property
    def highlighted(self) -> str | None:
        if self._highlight is not None and self._clock() >= self._highlight_until:
            self._highlight = None
        return self._highlight

    # ------------------------------------------------------------------ #
    # HTML                                                               #
    # ------------------------------------------------------------------ #
    def _filter_form(self) -> str:
        tail = html.escape(self.criteria.get("tailNumberSubstring", ""))
        model = self.criteria.get("exactModel", "")
        status = self.criteria.get("exactStatus", "")

        model_opts = "".join(
            f"<option value='{html.escape(m)}'{' selected' if m == model else ''}>"
            f"{html.escape(m)}</option>"
            for m in unique_models(self.listing.records)
        )
        status_opts = "".join(
            f"<option value='{html.escape(s)}'{' selected' if s == status else ''}>"
            f"{html.escape(s.capitalize())}</option>"
            for s in unique_statuses(self.listing.records)
        )
        clear = (
            "<a class='button' href='/filters/clear'>Clear All Filters</a>"
            if is_active(self.criteria)
            else ""
        )
        return f"""
    <form class="filters" method="get" action="/filters">
        <label>Tail Number
            <input type="text" name="tail" value="{tail}" placeholder="Search by tail number...">
        </label>
        <label>Aircraft Model
            <select name="model"><option value="">All Models</option>{model_opts}</select>
        </label>
        <label>Status
            <select name="status"><option value="">All Statuses</option>{status_opts}</select>
        </label>
        <button type="submit">Apply</button>
        {clear}
    </form>"""

    def _status_cell(self, record: AircraftRecord) -> str:
        tail = record["tailNumber"]
        if self.listing.editing != tail:
            cls = _BADGE_CLASS.get(record["status"], "")
            return f"<span class='badge {cls}'>{html.escape(record['status'].upper())}</span>"

        disabled = " disabled" if self.listing.updating else ""
        opts = "".join(
            f"<option value='{s}'{' selected' if s == record['status'] else ''}>"
            f"{'AOG' if s == 'aog' else s.capitalize()}</option>"
            for s in STATUSES
        )
        return (
            f"<form method='post' action='/rows/status'>"
            f"<select name='status'{disabled}>{opts}</select> "
            f"<button type='submit'{disabled}>Update</button> "
            f"<a href='/rows/cancel'>Cancel</a></form>"
        )

    def _table_rows(self, rows: list[AircraftRecord]) -> str:
        if not rows:
            return "<tr><td colspan='4'>No aircraft match the current filters.</td></tr>"
        flagged = self.highlighted
        out = []
        for r in rows:
            tail = r["tailNumber"]
            cls = " class='flash'" if tail == flagged else ""
            out.append(
                f"<tr{cls}>"
                f"<td><a href='/rows/{quote(tail, safe='')}/edit'>{html.escape(tail)}</a></td>"
                f"<td>{html.escape(r['model'])}</td>"
                f"<td>{self._status_cell(r)}</td>"
                f"<td>{format_location(r['location'])}</td>"
                f"</tr>"
            )
        return "".join(out)

    def render(self) -> str:
        """Full page.  The listing error is shown once, then cleared."""
        rows = self.visible_rows()
        info = self.summary()
        counts = info["counts"]

        notices = [m for m in (self.load_error, self.listing.error) if m]
        self.listing.error = None
        notice_html = "".join(
            f"<div class='notice'>{html.escape(m)}</div>" for m in notices
        )

        return f"""<!doctype html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Fleet Status Board</title>
    <style>
        body {{ font-family: system-ui, sans-serif; padding: 1rem; background: #f9fafb; }}
        .cards {{ display: flex; gap: 1rem; margin-bottom: 1rem; }}
        .card {{ background: #fff; padding: 1rem; border-radius: 6px; min-width: 8rem; }}
        .filters {{ display: flex; gap: 1rem; align-items: end; margin-bottom: 1rem; }}
        table {{ border-collapse: collapse; width: 100%; background: #fff; }}
        th, td {{ border: 1px solid #e5e7eb; padding: 0.5rem; text-align: left; }}
        th {{ background: #f4f4f4; }}
        .badge {{ padding: 0.1rem 0.5rem; border-radius: 999px; font-size: 0.8rem; }}
        .ok {{ background: #d1fae5; color: #065f46; }}
        .warn {{ background: #fef3c7; color: #92400e; }}
        .bad {{ background: #fee2e2; color: #991b1b; }}
        .flash {{ animation: flash-fade {self.highlight_seconds:g}s ease-out forwards; }}
        @keyframes flash-fade {{ from {{ background: #dbeafe; }} to {{ background: transparent; }} }}
        .notice {{ background: #fee2e2; color: #991b1b; padding: 0.75rem; margin-bottom: 1rem; }}
        iframe {{ border: 0; width: 100%; height: 24rem; margin-top: 1rem; }}
    </style>
</head>
<body>
    <h1>Fleet Status Board</h1>
    {notice_html}
    <div class="cards">
        <div class="card"><strong>Available</strong><br>{counts['available']}</div>
        <div class="card"><strong>AOG</strong><br>{counts['aog']}</div>
        <div class="card"><strong>Maintenance</strong><br>{counts['maintenance']}</div>
    </div>
    {self._filter_form()}
    <h2>Aircraft Fleet ({info['shown']} of {info['total']} aircraft)</h2>
    <p>Click a tail number to update its status.</p>
    <table>
        <thead>
            <tr><th>Tail Number</th><th>Aircraft Model</th><th>Status</th><th>Location</th></tr>
        </thead>
        <tbody>
            {self._table_rows(rows)}
        </tbody>
    </table>
    <iframe src="/map" title="Aircraft Map"></iframe>
</body>
</html>"""


__all__ = ["Dashboard", "HIGHLIGHT_SECONDS"]
