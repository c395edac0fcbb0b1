"""
filter_engine.py
~~~~~~~~~~~~~~~~
Stateless narrowing of a fleet by up to three criteria, plus the small
aggregates the dashboard shows next to the filters.

Criteria (all optional, combined with AND):
    tailNumberSubstring  case-insensitive substring of ``tailNumber``
    exactModel           case-sensitive equality on ``model``
    exactStatus          case-sensitive equality on ``status``

Empty strings count as "absent", the same as a blank filter box.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypedDict

from .fleet import STATUSES, AircraftRecord


class FilterCriteria(TypedDict, total=False):
    tailNumberSubstring: str
    exactModel: str
    exactStatus: str


def is_active(criteria: FilterCriteria) -> bool:
    """True when at least one criterion would narrow the fleet."""
    return any(criteria.get(k) for k in ("tailNumberSubstring", "exactModel", "exactStatus"))


def filter_fleet(
    records: Sequence[AircraftRecord], criteria: FilterCriteria
) -> list[AircraftRecord]:
    """
    Return the records matching every present criterion, in input order.

    With no active criteria the result equals ``records``.
    """
    needle = criteria.get("tailNumberSubstring") or ""
    model = criteria.get("exactModel") or ""
    status = criteria.get("exactStatus") or ""

    filtered = list(records)
    if needle:
        needle = needle.lower()
        filtered = [r for r in filtered if needle in r["tailNumber"].lower()]
    if model:
        filtered = [r for r in filtered if r["model"] == model]
    if status:
        filtered = [r for r in filtered if r["status"] == status]
    return filtered


def unique_models(records: Iterable[AircraftRecord]) -> list[str]:
    """Sorted distinct models, for the model dropdown."""
    return sorted({r["model"] for r in records})


def unique_statuses(records: Iterable[AircraftRecord]) -> list[str]:
    """Sorted distinct statuses actually present in the fleet."""
    return sorted({r["status"] for r in records})


def status_counts(records: Iterable[AircraftRecord]) -> dict[str, int]:
    """Count per status; every status appears, zero when absent."""
    counts = dict.fromkeys(STATUSES, 0)
    for record in records:
        if record["status"] in counts:
            counts[record["status"]] += 1
    return counts


__all__ = [
    "FilterCriteria",
    "filter_fleet",
    "is_active",
    "status_counts",
    "unique_models",
    "unique_statuses",
]
