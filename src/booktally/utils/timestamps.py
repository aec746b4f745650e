"""Timestamp helpers shared by the audit trail."""

from datetime import UTC, datetime

__all__ = ["get_iso_timestamp", "elapsed_seconds"]


def get_iso_timestamp() -> str:
    """Return the current UTC time as ISO8601 with microseconds and a ``Z`` suffix.

    Returns
    -------
    str
        e.g. ``"2026-02-03T12:34:56.123456Z"``.
    """
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def elapsed_seconds(start: datetime) -> float:
    """Seconds elapsed since a timezone-aware UTC ``start``."""
    return (datetime.now(UTC) - start).total_seconds()
