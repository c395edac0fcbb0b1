"""
fleet_store.py
~~~~~~~~~~~~~~
The aircraft store: one ordered JSON array of aircraft records, rewritten
wholesale on every save.

Two interchangeable backends implement the same ``load`` / ``save`` pair:

* ``JsonFileStore`` – a pretty-printed ``aircraft.json`` on the server.
* ``SlotStore``     – the whole array as one JSON string under a single key
  of a key/value slot (a ``dbm`` file by default, any mutable mapping in
  tests).  This is the server-side twin of the browser-persisted variant.

Configuration:
    FLEET_STORE:     "file" (default) or "slot"
    FLEET_DATA_DIR:  directory for aircraft.json / aircraft.slot
    FLEET_SLOT_KEY:  key used by the slot store (default "aircraftData")

There is no concurrent-writer protocol: two saves race and the last one wins.
"""

from __future__ import annotations

import dbm
import json
import logging
import os
import tempfile
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Protocol

from .errors import StoreUnavailable
from .fleet import AircraftRecord, seed_fleet

LOG = logging.getLogger("fleet_store")

FLEET_STORE = os.getenv("FLEET_STORE", "file")
FLEET_SLOT_KEY = os.getenv("FLEET_SLOT_KEY", "aircraftData")


# ── persistence dir ─────────────────────────────────────────────────────────
def _determine_data_dir() -> Path:
    base = Path(os.getenv("FLEET_DATA_DIR", "local_data")).expanduser()
    if not base.is_absolute():
        base = (Path(__file__).resolve().parent.parent / base).resolve()
    try:
        base.mkdir(parents=True, exist_ok=True)
        return base
    except (PermissionError, OSError):
        fallback = (Path(__file__).resolve().parent.parent / "local_data").resolve()
        fallback.mkdir(parents=True, exist_ok=True)
        LOG.warning("Using %s instead of %s", fallback, base)
        return fallback


class AircraftStore(Protocol):
    def load(self) -> list[AircraftRecord]: ...

    def save(self, records: list[AircraftRecord]) -> None: ...


def _decode(raw: str | bytes, source: str) -> list[AircraftRecord]:
    """Parse *raw* JSON into the record list or raise ``StoreUnavailable``."""
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
    except ValueError as exc:
        LOG.warning("[load] corrupt content in %s: %s", source, exc)
        raise StoreUnavailable("Aircraft data is corrupt") from exc

    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        LOG.warning("[load] %s does not hold a JSON array of records", source)
        raise StoreUnavailable("Aircraft data is corrupt")
    return data


def _encode(records: list[AircraftRecord]) -> str:
    return json.dumps(records, indent=2)


class JsonFileStore:
    """Fleet kept in a single human-readable JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.exists()

    def _file_mode(self) -> int:
        """Permissions of the current file, or 0644 for a new one."""
        try:
            return self.path.stat().st_mode & 0o777
        except OSError:
            return 0o644

    def load(self) -> list[AircraftRecord]:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            LOG.warning("[load] cannot read %s: %s", self.path, exc)
            raise StoreUnavailable("Aircraft data is unavailable") from exc
        return _decode(raw, str(self.path))

    def save(self, records: list[AircraftRecord]) -> None:
        """
        Replace the file atomically: write a sibling temp file, then
        ``os.replace`` it over the target.  A failed write leaves the prior
        content in place.
        """
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(_encode(records))
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            LOG.error("[save] cannot write %s: %s", self.path, exc)
            raise StoreUnavailable("Aircraft data could not be saved") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    LOG.debug("[save] leftover temp file %s", tmp_name)
        LOG.debug("[save] wrote %d records to %s", len(records), self.path)


class SlotStore:
    """
    Fleet kept as one JSON string under ``key`` of a key/value slot.

    Pass ``slots`` to use any mutable mapping (tests use a plain dict);
    otherwise a ``dbm`` database at ``path`` is opened for each operation.
    """

    def __init__(
        self,
        path: Path | None = None,
        key: str = FLEET_SLOT_KEY,
        slots: MutableMapping[Any, Any] | None = None,
    ) -> None:
        if path is None and slots is None:
            raise ValueError("SlotStore needs a dbm path or a slots mapping")
        self.path = Path(path) if path is not None else None
        self.key = key
        self._slots = slots

    def __repr__(self) -> str:
        where = str(self.path) if self.path is not None else "<mapping>"
        return f"SlotStore({where!r}, key={self.key!r})"

    def _read(self) -> str | bytes | None:
        if self._slots is not None:
            return self._slots.get(self.key)
        if dbm.whichdb(str(self.path)) is None:
            return None  # no database yet
        try:
            with dbm.open(str(self.path), "r") as db:
                return db.get(self.key)
        except dbm.error as exc:
            raise StoreUnavailable("Aircraft data is unavailable") from exc

    def exists(self) -> bool:
        return self._read() is not None

    def load(self) -> list[AircraftRecord]:
        raw = self._read()
        if raw is None:
            LOG.warning("[load] slot %r is empty", self.key)
            raise StoreUnavailable("Aircraft data is unavailable")
        return _decode(raw, f"slot {self.key!r}")

    def save(self, records: list[AircraftRecord]) -> None:
        payload = _encode(records)
        if self._slots is not None:
            self._slots[self.key] = payload
            return
        try:
            with dbm.open(str(self.path), "c") as db:
                db[self.key] = payload
        except dbm.error as exc:
            LOG.error("[save] cannot write slot %r in %s: %s", self.key, self.path, exc)
            raise StoreUnavailable("Aircraft data could not be saved") from exc


def open_store(kind: str | None = None, data_dir: Path | None = None) -> AircraftStore:
    """
    Build the store selected by ``FLEET_STORE`` (or *kind*).

    Raises:
        ValueError: unknown store kind.
    """
    kind = (kind or FLEET_STORE).strip().lower()
    base = Path(data_dir) if data_dir is not None else _determine_data_dir()
    if kind == "file":
        store: AircraftStore = JsonFileStore(base / "aircraft.json")
    elif kind == "slot":
        store = SlotStore(base / "aircraft.slot")
    else:
        raise ValueError(f"Unknown FLEET_STORE {kind!r} (expected 'file' or 'slot')")
    LOG.info("[store] using %r", store)
    return store


def seed_if_missing(store: JsonFileStore | SlotStore) -> bool:
    """
    Write the built-in seed fleet when the medium holds nothing yet.

    Returns:
        True if the seed was written.
    """
    if store.exists():
        return False
    store.save(seed_fleet())
    LOG.info("[seed] initial fleet written to %r", store)
    return True


__all__ = [
    "AircraftStore",
    "JsonFileStore",
    "SlotStore",
    "open_store",
    "seed_if_missing",
]
