"""Escaping of values embedded in TeamCity service messages."""

from collections.abc import Sequence
from datetime import datetime, timezone

# Order matters: "|" must be doubled before any escape introduces a new one.
REPLACEMENTS: Sequence[tuple[str, str]] = (
    ("|", "||"),
    ("'", "|'"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("\u0085", "|x"),
    ("\u2028", "|l"),
    ("\u2029", "|p"),
    ("[", "|["),
    ("]", "|]"),
)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as TeamCity expects it (UTC, millisecond precision).

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}"


def escape(value: str | datetime | None) -> str:
    """Make a value safe to place inside a quoted service message attribute."""
    if isinstance(value, datetime):
        return format_timestamp(value)
    if not value:
        return ""

    for raw, escaped in REPLACEMENTS:
        value = value.replace(raw, escaped)
    return value
