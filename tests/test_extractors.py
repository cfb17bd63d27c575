"""Tests for the independent rule-parser extractors."""

from datetime import date, datetime, time

from hearth.core.extractors import (
    DateExtractor,
    LocationExtractor,
    RecurrenceExtractor,
    TimeExtractor,
)
from hearth.core.models import Frequency

# Wednesday
NOW = datetime(2026, 10, 14, 9, 0)


def test_time_with_meridiem() -> None:
    extractor = TimeExtractor()
    assert extractor.extract("Dentist at 3pm", NOW) == time(15, 0)
    assert extractor.extract("call at 3:30 pm", NOW) == time(15, 30)
    assert extractor.extract("alarm at 12am", NOW) == time(0, 0)
    assert extractor.extract("lunch at 12pm", NOW) == time(12, 0)


def test_bare_time_requires_meridiem() -> None:
    extractor = TimeExtractor()
    assert extractor.extract("pickup 5pm", NOW) == time(17, 0)
    assert extractor.extract("buy 5 apples", NOW) is None


def test_bare_hour_below_eight_means_afternoon() -> None:
    extractor = TimeExtractor()
    assert extractor.extract("Dinner at 7", NOW) == time(19, 0)
    assert extractor.extract("Standup at 9", NOW) == time(9, 0)


def test_invalid_time_rejected() -> None:
    extractor = TimeExtractor()
    assert extractor.extract("meet at 13pm", NOW) is None
    assert extractor.extract("meet at 3:75", NOW) is None


def test_time_strip() -> None:
    assert TimeExtractor().strip("Dentist at 3pm").strip() == "Dentist"


def test_relative_dates() -> None:
    extractor = DateExtractor()
    assert extractor.extract("laundry today", NOW) == date(2026, 10, 14)
    assert extractor.extract("movie tonight", NOW) == date(2026, 10, 14)
    assert extractor.extract("Dentist tomorrow", NOW) == date(2026, 10, 15)


def test_weekday_is_always_in_the_future() -> None:
    extractor = DateExtractor()
    assert extractor.extract("recital on Friday", NOW) == date(2026, 10, 16)
    assert extractor.extract("recital next Friday", NOW) == date(2026, 10, 23)
    # Today is Wednesday: the bare name means next week.
    assert extractor.extract("book club Wednesday", NOW) == date(2026, 10, 21)
    assert extractor.extract("trash Monday", NOW) == date(2026, 10, 19)


def test_month_day_rolls_to_next_year() -> None:
    extractor = DateExtractor()
    assert extractor.extract("party October 20", NOW) == date(2026, 10, 20)
    assert extractor.extract("taxes january 15th", NOW) == date(2027, 1, 15)
    assert extractor.extract("feb 30", NOW) is None


def test_no_date() -> None:
    assert DateExtractor().extract("buy milk", NOW) is None


def test_location_phrase() -> None:
    extractor = LocationExtractor()
    assert extractor.extract("Checkup at Kids Doctor", NOW) == "Kids Doctor"
    assert extractor.extract("Spin class @ the Gym", NOW) == "Gym"
    assert extractor.extract("Dentist at 3pm", NOW) is None


def test_location_after_time() -> None:
    text = "Soccer at 5pm at Riverside Park"
    assert LocationExtractor().extract(text, NOW) == "Riverside Park"


def test_recurrence() -> None:
    extractor = RecurrenceExtractor()
    assert extractor.extract("take vitamins daily", NOW) == Frequency.DAILY
    assert extractor.extract("water plants every week", NOW) == Frequency.WEEKLY
    assert extractor.extract("pay rent monthly", NOW) == Frequency.MONTHLY
    assert extractor.extract("pay rent", NOW) is None
