# backend/fleetboard/errors.py

"""
Error taxonomy shared by the store, the query service, the HTTP layer and
the views.  Every error carries a message that is safe to show a user.
"""

from __future__ import annotations


class FleetError(Exception):
    """Base class; ``str(exc)`` is the user-visible message."""

    http_status = 500


class InvalidArgument(FleetError):
    """Malformed update request (missing field, unknown status)."""

    http_status = 400


class NotFound(FleetError):
    """No aircraft with the requested tail number."""

    http_status = 404


class StoreUnavailable(FleetError):
    """Backing medium missing, corrupt or unwritable."""

    http_status = 500


__all__ = ["FleetError", "InvalidArgument", "NotFound", "StoreUnavailable"]
