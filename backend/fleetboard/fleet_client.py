"""
fleet_client.py
~~~~~~~~~~~~~~~
Async HTTP client for the fleet endpoints, with the same ``get_all`` /
``update_status`` surface as ``FleetQueryService`` so the dashboard can run
against a remote board (``FLEET_API_URL``).

Every request emits **one concise log line**: verb, URL, status, latency.

Usage example
-------------
>>> async with httpx.AsyncClient() as http:
...     client = FleetClient("http://localhost:8000", http)
...     records, error = await client.get_all()
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .errors import FleetError, InvalidArgument, NotFound, StoreUnavailable
from .fleet import AircraftRecord

LOG = logging.getLogger("fleet_client")

_ERRORS_BY_STATUS: dict[int, type[FleetError]] = {
    400: InvalidArgument,
    404: NotFound,
    500: StoreUnavailable,
}


class FleetClient:
    """Thin wrapper over ``httpx.AsyncClient`` for ``/api/aircraft``."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = base_url.rstrip("/") + "/api/aircraft"
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        verb = method.upper()
        t0 = time.perf_counter()
        try:
            response = await self._client.request(verb, self.url, **kwargs)
        except httpx.HTTPError as exc:
            latency_ms = (time.perf_counter() - t0) * 1000.0
            LOG.warning("FAIL %s %s %.0f ms %s", verb, self.url, latency_ms, exc)
            raise

        latency_ms = (time.perf_counter() - t0) * 1000.0
        code = response.status_code
        if code >= 500:
            LOG.warning("%s %s → %s (%.0f ms)", verb, self.url, code, latency_ms)
        else:
            LOG.info("%s %s → %s (%.0f ms)", verb, self.url, code, latency_ms)
        return response

    async def get_all(self) -> tuple[list[AircraftRecord], str | None]:
        """
        Fetch the fleet.

        Returns:
            ``(records, None)`` or ``([], message)`` on any failure.
        """
        try:
            response = await self._request("get")
        except httpx.HTTPError:
            return [], "Failed to load aircraft data"

        if response.status_code != 200:
            return [], "Failed to load aircraft data"
        try:
            data = response.json()
        except ValueError:
            return [], "Failed to load aircraft data"
        if not isinstance(data, list):
            return [], "Failed to load aircraft data"
        return data, None

    async def update_status(self, tail_number: str, status: str) -> AircraftRecord:
        """
        Ask the server to change one aircraft's status.

        Raises:
            InvalidArgument / NotFound / StoreUnavailable: mapped from
                400 / 404 / 500 with the server's message.
            FleetError: network failure or any other unexpected reply.
        """
        try:
            response = await self._request(
                "put", json={"tailNumber": tail_number, "status": status}
            )
        except httpx.HTTPError as exc:
            raise FleetError("Failed to update aircraft status") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 200 and isinstance(body, dict) and "aircraft" in body:
            return body["aircraft"]

        error_cls = _ERRORS_BY_STATUS.get(response.status_code, FleetError)
        message = body.get("error") if isinstance(body, dict) else None
        raise error_cls(message or "Failed to update aircraft status")


__all__ = ["FleetClient"]
