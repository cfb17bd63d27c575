"""Calendar collaborator that keeps created events in memory."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from hearth.core.errors import CalendarError
from hearth.core.models import CalendarEvent, NewEvent

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)


class RecordingCalendar:
    """
    Stand-in for a remote calendar.

    Events are only accepted once a calendar has been selected. All-day
    events span the whole start day; timed events default to one hour.
    """

    def __init__(self, calendar_id: Optional[str] = None) -> None:
        self.calendar_id = calendar_id
        self.events: list[CalendarEvent] = []

    def select(self, calendar_id: str) -> None:
        self.calendar_id = calendar_id

    def create_event(self, event: NewEvent) -> CalendarEvent:
        if not self.calendar_id:
            raise CalendarError("No calendar selected")

        if event.all_day:
            start = datetime.combine(event.start.date(), datetime.min.time())
            end = start + timedelta(days=1)
        else:
            start = event.start
            end = event.end or start + DEFAULT_DURATION

        created = CalendarEvent(
            id=uuid.uuid4().hex,
            calendar_id=self.calendar_id,
            title=event.title,
            start=start,
            end=end,
            location=event.location,
            all_day=event.all_day,
            smart_reminder=event.smart_reminder,
            saved_location_id=event.saved_location_id,
        )
        self.events.append(created)
        logger.info(f"Created event '{created.title}' at {start.isoformat()} on {self.calendar_id}")
        return created

    def events_between(self, start: datetime, end: datetime) -> list[CalendarEvent]:
        found = [e for e in self.events if e.start < end and e.end > start]
        return sorted(found, key=lambda e: e.start)
