"""Calendar-week helpers for meal plans. Weeks start on Sunday."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

DAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
DEFAULT_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def week_start_for(day: Optional[date] = None) -> date:
    """Sunday on or before ``day`` (today by default)."""
    day = day or date.today()
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_dates(week_start: Optional[date] = None) -> list[tuple[str, date]]:
    """(label, date) for the seven days of the week starting ``week_start``."""
    start = week_start_for(week_start)
    return [(label, start + timedelta(days=offset)) for offset, label in enumerate(DAY_LABELS)]


def date_for_label(week_start: date, label: str) -> date:
    """
    Date of a day label ("Mon", "monday", ...) within the given week.

    Raises:
        ValueError: If the label is not a day of the week
    """
    key = label.strip()[:3].capitalize()
    if key not in DAY_LABELS:
        raise ValueError(f"Unknown day label: {label!r}")
    return week_start_for(week_start) + timedelta(days=DAY_LABELS.index(key))
