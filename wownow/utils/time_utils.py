"""
Time helpers.

Every timestamp this project produces is timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone

ISO_UTC_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def to_iso_utc(dt: datetime) -> str:
    """Render an aware datetime as ISO-8601 UTC with a ``Z`` suffix.

    Raises:
        ValueError: If ``dt`` is naive.
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("Cannot render a naive datetime as UTC.")
    return dt.astimezone(timezone.utc).strftime(ISO_UTC_FORMAT)
