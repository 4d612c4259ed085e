"""
Date and time utilities for fastsqlite.

Datetimes are stored as ISO8601 text; aware values are normalised to UTC with
a 'Z' suffix so they sort and compare correctly inside SQLite.
"""

from datetime import date, datetime, timezone


def format_utc_iso(dt: datetime) -> str:
    """
    Format a datetime for storage.

    Aware datetimes are converted to UTC and get a 'Z' suffix; naive ones are
    stored exactly as given.
    """
    if dt.tzinfo is None:
        return dt.isoformat()
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def to_db_text(value: date) -> str:
    """Render a date or datetime as the text SQLite stores."""
    if isinstance(value, datetime):
        return format_utc_iso(value)
    return value.isoformat()
