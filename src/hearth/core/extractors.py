"""
Independent extractors for the rule-based intent parser.

Each extractor looks for one kind of fact (time of day, date, location,
recurrence) in an utterance and knows how to remove its own tokens so the
parser can build a clean title. Extractors never raise; a miss is ``None``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol, TypeVar

from hearth.core.models import Frequency

T = TypeVar("T", covariant=True)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

# Bare hours below this with no am/pm are read as afternoon ("at 3" -> 15:00).
ASSUME_PM_BELOW = 8


class Extractor(Protocol[T]):
    name: str

    def extract(self, text: str, now: datetime) -> Optional[T]:
        ...

    def strip(self, text: str) -> str:
        ...


class TimeExtractor:
    """12-hour clock times: "at 3pm", "at 3:30 pm", "at 7", or a bare "5pm"."""

    name = "time"

    AT_TIME = re.compile(r"\bat (\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", re.IGNORECASE)
    BARE_TIME = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE)

    def extract(self, text: str, now: datetime) -> Optional[time]:
        for pattern in (self.AT_TIME, self.BARE_TIME):
            for match in pattern.finditer(text):
                parsed = self._to_time(match.group(1), match.group(2), match.group(3))
                if parsed is not None:
                    return parsed
        return None

    def strip(self, text: str) -> str:
        text = self.AT_TIME.sub("", text)
        return self.BARE_TIME.sub("", text)

    def _to_time(
        self, hours_raw: str, minutes_raw: Optional[str], meridiem_raw: Optional[str]
    ) -> Optional[time]:
        hours = int(hours_raw)
        minutes = int(minutes_raw) if minutes_raw else 0
        meridiem = meridiem_raw.lower() if meridiem_raw else None

        if minutes > 59:
            return None
        if meridiem and not 1 <= hours <= 12:
            return None

        if meridiem == "pm" and hours < 12:
            hours += 12
        if meridiem == "am" and hours == 12:
            hours = 0
        if not meridiem and hours < ASSUME_PM_BELOW:
            hours += 12

        if hours > 23:
            return None
        return time(hours, minutes)


class DateExtractor:
    """
    Relative and named dates: today/tonight, tomorrow, (on|next) weekday, "January 15".

    A named weekday always means a future day: if it is today or already
    past this week, or is prefixed with "next", it rolls to the following week.
    """

    name = "date"

    TODAY = re.compile(r"\b(today|tonight)\b", re.IGNORECASE)
    TOMORROW = re.compile(r"\btomorrow\b", re.IGNORECASE)
    WEEKDAY = re.compile(
        r"\b(?:(on|next)\s+)?(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
        re.IGNORECASE,
    )
    MONTH_DAY = re.compile(
        r"\b(?:on\s+)?(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
        r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
        r"\s+(\d{1,2})(?:st|nd|rd|th)?\b",
        re.IGNORECASE,
    )

    def extract(self, text: str, now: datetime) -> Optional[date]:
        today = now.date()

        if self.TODAY.search(text):
            return today
        if self.TOMORROW.search(text):
            return today + timedelta(days=1)

        weekday = self.WEEKDAY.search(text)
        if weekday:
            prefix = (weekday.group(1) or "").lower()
            target = WEEKDAYS.index(weekday.group(2).lower())
            days_until = target - today.weekday()
            if days_until <= 0 or prefix == "next":
                days_until += 7
            return today + timedelta(days=days_until)

        month_day = self.MONTH_DAY.search(text)
        if month_day:
            month = MONTHS[month_day.group(1)[:3].lower()]
            day = int(month_day.group(2))
            try:
                candidate = date(today.year, month, day)
                if candidate < today:
                    candidate = date(today.year + 1, month, day)
            except ValueError:
                return None
            return candidate

        return None

    def strip(self, text: str) -> str:
        for pattern in (self.TODAY, self.TOMORROW, self.WEEKDAY, self.MONTH_DAY):
            text = pattern.sub("", text)
        return text


class LocationExtractor:
    """A capitalized place after "at" or "@": "at Kids Doctor", "@ the Gym"."""

    name = "location"

    PATTERN = re.compile(r"(?:\bat|@)\s+(?:the\s+)?([A-Z][a-zA-Z']+(?:\s+[A-Z][a-zA-Z']+)*)")

    def extract(self, text: str, now: datetime) -> Optional[str]:
        match = self.PATTERN.search(text)
        return match.group(1) if match else None

    def strip(self, text: str) -> str:
        return self.PATTERN.sub("", text)


class RecurrenceExtractor:
    name = "recurrence"

    PATTERNS = (
        (Frequency.DAILY, re.compile(r"\b(every day|daily)\b", re.IGNORECASE)),
        (Frequency.WEEKLY, re.compile(r"\b(every week|weekly)\b", re.IGNORECASE)),
        (Frequency.MONTHLY, re.compile(r"\b(every month|monthly)\b", re.IGNORECASE)),
    )

    def extract(self, text: str, now: datetime) -> Optional[Frequency]:
        for frequency, pattern in self.PATTERNS:
            if pattern.search(text):
                return frequency
        return None

    def strip(self, text: str) -> str:
        for _, pattern in self.PATTERNS:
            text = pattern.sub("", text)
        return text


def default_extractors() -> list[Extractor]:
    """Extractors in the order their tokens are stripped from the title."""
    return [DateExtractor(), TimeExtractor(), LocationExtractor(), RecurrenceExtractor()]
