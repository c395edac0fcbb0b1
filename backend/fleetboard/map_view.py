"""
map_view.py
~~~~~~~~~~~
Plot the (filtered) fleet on a folium / Leaflet map, one status-coloured
marker per aircraft.

Selection is wired through an explicit callback: the hosting page passes
``on_select`` to ``MapView`` and the marker popup's *Select* link hits
``/map/select/{tail}``, which calls ``MapView.click(tail)``.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Callable, Sequence
from typing import Final, TypedDict
from urllib.parse import quote

import folium

from .fleet import AircraftRecord, format_location

LOG = logging.getLogger("dashboard")

DEFAULT_CENTER: Final[tuple[float, float]] = (39.8283, -98.5795)  # centre of the US
DEFAULT_ZOOM: Final = 4

STATUS_COLORS: Final[dict[str, dict[str, str]]] = {
    "available": {"bg": "#10b981", "border": "#065f46"},
    "maintenance": {"bg": "#f59e0b", "border": "#92400e"},
    "aog": {"bg": "#ef4444", "border": "#991b1b"},
}
UNKNOWN_COLOR: Final = {"bg": "#6b7280", "border": "#374151"}

STATUS_LABELS: Final[dict[str, str]] = {
    "available": "Available",
    "maintenance": "In Maintenance",
    "aog": "Aircraft on Ground",
}


class Marker(TypedDict):
    tailNumber: str
    lat: float
    lon: float
    color: str
    border: str
    label: str


class MapView:
    """Marker model plus folium rendering for a sequence of aircraft."""

    def __init__(
        self,
        on_select: Callable[[str], None] | None = None,
        select_url: str = "/map/select/{tail}",
    ) -> None:
        self._on_select = on_select
        self.select_url = select_url

    def click(self, tail_number: str) -> None:
        """A marker was clicked – hand its tail number to the hosting page."""
        LOG.info("[map] marker selected: %s", tail_number)
        if self._on_select is not None:
            self._on_select(tail_number)

    @staticmethod
    def markers(records: Sequence[AircraftRecord]) -> list[Marker]:
        out: list[Marker] = []
        for r in records:
            scheme = STATUS_COLORS.get(r["status"], UNKNOWN_COLOR)
            out.append(
                {
                    "tailNumber": r["tailNumber"],
                    "lat": float(r["location"]["latitude"]),
                    "lon": float(r["location"]["longitude"]),
                    "color": scheme["bg"],
                    "border": scheme["border"],
                    "label": STATUS_LABELS.get(r["status"], r["status"]),
                }
            )
        return out

    @staticmethod
    def bounds(records: Sequence[AircraftRecord]) -> list[list[float]] | None:
        """``[[south, west], [north, east]]`` around every marker, or None."""
        if not records:
            return None
        lats = [float(r["location"]["latitude"]) for r in records]
        lons = [float(r["location"]["longitude"]) for r in records]
        return [[min(lats), min(lons)], [max(lats), max(lons)]]

    def _popup_html(self, record: AircraftRecord, marker: Marker) -> str:
        tail = html.escape(record["tailNumber"])
        href = html.escape(self.select_url.format(tail=quote(record["tailNumber"], safe="")))
        return (
            f"<div style='font-family:system-ui,sans-serif;min-width:200px'>"
            f"<h3 style='margin:0 0 8px'>{tail}</h3>"
            f"<div><strong>Model:</strong> {html.escape(record['model'])}</div>"
            f"<div><strong>Status:</strong> "
            f"<span style='color:{marker['color']};font-weight:600'>{html.escape(marker['label'])}</span></div>"
            f"<div><strong>Location:</strong> {format_location(record['location'])}</div>"
            f"<p style='margin:10px 0 0'><a href='{href}' target='_top'>Select in table</a></p>"
            f"</div>"
        )

    def build(self, records: Sequence[AircraftRecord]) -> folium.Map:
        m = folium.Map(
            location=list(DEFAULT_CENTER),
            zoom_start=DEFAULT_ZOOM,
            tiles="OpenStreetMap",
            control_scale=True,
        )
        box = self.bounds(records)
        if box is not None:
            m.fit_bounds(box, padding=(20, 20))

        for record, marker in zip(records, self.markers(records)):
            folium.CircleMarker(
                [marker["lat"], marker["lon"]],
                radius=9,
                color=marker["border"],
                weight=2,
                fill=True,
                fill_color=marker["color"],
                fill_opacity=0.9,
                tooltip=record["tailNumber"],
                popup=folium.Popup(self._popup_html(record, marker), max_width=300),
            ).add_to(m)
        return m

    def render(self, records: Sequence[AircraftRecord]) -> str:
        """Standalone HTML document for the map (served at ``/map``)."""
        return self.build(records).get_root().render()


__all__ = ["MapView", "Marker", "STATUS_COLORS", "STATUS_LABELS"]
