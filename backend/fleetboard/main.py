"""
main.py – FastAPI entry point
=============================

Key points
----------
* **JSON API** – ``GET /api/aircraft`` returns the fleet, ``PUT /api/aircraft``
  changes one aircraft's status (rate limited).
* **Status board** – ``/`` renders the table + filters, ``/map`` the folium
  map; the small ``/filters``, ``/rows`` and ``/map/select`` routes drive the
  dashboard state and redirect back to ``/``.
* Store, query service and dashboard are built in the lifespan and kept on
  ``app.state``.
"""

from __future__ import annotations

# ─── Std-lib / third-party ────────────────────────────────────────────
import os
from contextlib import asynccontextmanager
from urllib.parse import parse_qs

from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import (
    HTMLResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
)
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

# ─── Project modules ──────────────────────────────────────────────────
from .dashboard import Dashboard
from .errors import FleetError
from .fleet_client import FleetClient
from .fleet_store import open_store, seed_if_missing
from .query_service import FleetQueryService

# ─── Logging ──────────────────────────────────────────────────────────
import logging
import sys

LOG = logging.getLogger("fleet_api")

# Configure project loggers to output to stdout
_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(levelname)s:     %(name)s - %(message)s"))
for _name in ("fleet_api", "fleet_store", "fleet_query", "fleet_client", "dashboard"):
    logging.getLogger(_name).addHandler(_handler)
    logging.getLogger(_name).setLevel(logging.INFO)

# ---------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------
load_dotenv()
FLEET_API_URL = os.getenv("FLEET_API_URL", "")
UPDATE_RATE_LIMIT = os.getenv("UPDATE_RATE_LIMIT", "60/minute")

limiter = Limiter(key_func=get_remote_address)


# ---------------------------------------------------------------------
# Lifespan – wire store → service → dashboard
# ---------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: N802 – FastAPI naming style
    """Open the configured store, seed it once and build the dashboard."""
    store = open_store()
    try:
        seed_if_missing(store)
    except FleetError as exc:
        LOG.warning("[init] could not seed the fleet: %s", exc)

    app.state.service = FleetQueryService(store)

    remote: FleetClient | None = None
    if FLEET_API_URL:
        remote = FleetClient(FLEET_API_URL)
        LOG.info("[init] dashboard reads from %s", FLEET_API_URL)
    app.state.dashboard = Dashboard(remote or app.state.service)

    yield  # ⇢ application runs here

    if remote is not None:
        await remote.aclose()


# ---------------------------------------------------------------------
# FastAPI instance & middleware
# ---------------------------------------------------------------------
app = FastAPI(title="Fleet Status Board", lifespan=lifespan)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Try again later."},
    )


ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "PUT", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _back_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


# Health probe --------------------------------------------------------
@app.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> PlainTextResponse:
    """Return HTTP 200 with body “ok” if the app is up."""
    return PlainTextResponse("ok", status_code=200)


# ---------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------
@app.get("/api/aircraft")
async def list_aircraft(request: Request) -> JSONResponse:
    """The whole fleet; ``[]`` with HTTP 500 when the store is unavailable."""
    records, error = request.app.state.service.get_all()
    if error:
        return JSONResponse([], status_code=500)
    return JSONResponse(records)


@app.put("/api/aircraft")
@limiter.limit(UPDATE_RATE_LIMIT)
async def update_aircraft(request: Request) -> JSONResponse:
    """
    Change one aircraft's status.

    Body:
        ``{"tailNumber": "N101AA", "status": "aog"}``

    Returns:
        200 ``{"message": ..., "aircraft": {...}}``.

    Raises:
        400: Missing field, invalid status or non-object body.
        404: Unknown tail number.
        500: Store unreadable or unwritable.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return JSONResponse({"error": "tailNumber and status are required"}, status_code=400)

    try:
        record = request.app.state.service.update_status(
            body.get("tailNumber"), body.get("status")
        )
    except FleetError as exc:
        if exc.http_status >= 500:
            LOG.error("[update] %s", exc)
            return JSONResponse({"error": "Internal server error"}, status_code=500)
        return JSONResponse({"error": str(exc)}, status_code=exc.http_status)

    return JSONResponse(
        {"message": "Aircraft status updated successfully", "aircraft": record}
    )


# ---------------------------------------------------------------------
# Status board pages
# ---------------------------------------------------------------------
@app.get("/", response_class=HTMLResponse)
async def board(request: Request) -> HTMLResponse:
    """Table, filters and embedded map."""
    dashboard: Dashboard = request.app.state.dashboard
    await dashboard.refresh()
    return HTMLResponse(dashboard.render())


@app.get("/filters")
async def apply_filters(
    request: Request,
    tail: str = Query(""),
    model: str = Query(""),
    status: str = Query(""),
) -> RedirectResponse:
    request.app.state.dashboard.set_filters(tail=tail.strip(), model=model, status=status)
    return _back_home()


@app.get("/filters/clear")
async def clear_filters(request: Request) -> RedirectResponse:
    request.app.state.dashboard.clear_filters()
    return _back_home()


@app.get("/rows/cancel")
async def cancel_edit(request: Request) -> RedirectResponse:
    request.app.state.dashboard.listing.cancel()
    return _back_home()


@app.get("/rows/{tail_number}/edit")
async def edit_row(tail_number: str, request: Request) -> RedirectResponse:
    request.app.state.dashboard.listing.select(tail_number)
    return _back_home()


@app.post("/rows/status")
async def confirm_status(request: Request) -> RedirectResponse:
    """Form post from the row being edited (``status=<value>``)."""
    form = parse_qs((await request.body()).decode("utf-8", errors="replace"))
    status = (form.get("status") or [""])[0]
    await request.app.state.dashboard.listing.confirm(status)
    return _back_home()


@app.get("/map", response_class=HTMLResponse)
async def fleet_map(request: Request) -> HTMLResponse:
    """Folium map of the currently filtered fleet."""
    dashboard: Dashboard = request.app.state.dashboard
    return HTMLResponse(dashboard.map_view.render(dashboard.visible_rows()))


@app.get("/map/select/{tail_number}")
async def map_select(tail_number: str, request: Request) -> RedirectResponse:
    request.app.state.dashboard.map_view.click(tail_number)
    return _back_home()
