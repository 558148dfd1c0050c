from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def iso_timestamp() -> str:
    """
    ISO-8601 UTC timestamp with millisecond precision and a trailing Z.
    """
    now = utc_now()
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def format_long_date(dt: datetime) -> str:
    # "October 19, 2026"
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def as_utc(dt: datetime) -> datetime:
    # stored timestamps are naive UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
