from __future__ import annotations

from datetime import date, datetime, timezone


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def to_utc_date(value: date | datetime) -> date:
    """Reduce a date or datetime to a calendar date in UTC (naive datetimes are taken as UTC)."""

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()
    return value


def parse_date(value: str) -> date:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if len(text) == 10:
        return date.fromisoformat(text)
    return to_utc_date(datetime.fromisoformat(text))
