"""Calendar-date parsing shared by the decoder and the aggregator."""

from __future__ import annotations

from datetime import date, datetime

# Numeric layouts are month-first: "03/04/2024" is March 4th.
_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def parse_calendar_date(value: str | None) -> date | None:
    """Return the calendar date in ``value`` or ``None`` when it does not parse.

    ISO timestamps (``2024-05-01T09:30:00``, ``2024-05-01 09:30``) keep only
    their date part.
    """

    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    for fmt in _FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


__all__ = ["parse_calendar_date"]
