"""Parsing of the Finnish day.month[.year] dates shown in search results."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional
from zoneinfo import ZoneInfo

SITE_TIMEZONE = ZoneInfo("Europe/Helsinki")
DATE_FORMAT = "%d.%m.%Y"

# Ranks records with unparsable dates below every real timestamp.
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class DateNormalizeError(ValueError):
    """Raised when a date snippet matches none of the supported formats."""


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(SITE_TIMEZONE)
    if now.tzinfo is None:
        return now.replace(tzinfo=SITE_TIMEZONE)
    return now.astimezone(SITE_TIMEZONE)


def _parse_full(text: str) -> Optional[datetime]:
    try:
        parsed = datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=SITE_TIMEZONE)


def normalize_date(text: str, now: Optional[datetime] = None) -> datetime:
    """Convert ``23.9.2025`` or ``5.10.`` into an aware datetime.

    Dates without a year are assumed to belong to the current year in the
    site timezone. ``now`` overrides the clock used for that assumption.
    """
    text = (text or "").strip()
    parsed = _parse_full(text)
    if parsed is not None:
        return parsed

    year = str(_now(now).year)
    if "." in text and year not in text:
        parsed = _parse_full(f"{text}{year}")
        if parsed is not None:
            return parsed

    raise DateNormalizeError(f"unsupported date format: {text!r}")


def format_pub_date(value: datetime) -> str:
    """Format a datetime as RFC 1123 with a numeric zone for ``<pubDate>``."""
    return format_datetime(value)


def current_pub_date(now: Optional[datetime] = None) -> str:
    return format_pub_date(_now(now).replace(microsecond=0))
