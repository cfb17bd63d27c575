"""Command executor: one intent in, one store mutation and one result out."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from hearth.core.interfaces import CalendarCollaborator, LocationStore, ShoppingStore, TaskStore
from hearth.core.models import (
    Ambiguous,
    BatchError,
    BatchResult,
    Completed,
    CompleteIntent,
    EventCreated,
    EventIntent,
    ExecutionResult,
    Intent,
    ListIntent,
    NewEvent,
    NotFound,
    ShoppingAdded,
    ShoppingIntent,
    Skipped,
    Task,
    TaskCreated,
    TaskIntent,
    TaskList,
    Unknown,
    UnknownIntent,
)

logger = logging.getLogger(__name__)

NO_TITLE = "no title"
NO_QUERY = "no query"


def title_matches(query: str, title: str) -> bool:
    """Case-insensitive containment in either direction."""
    q = query.strip().lower()
    t = (title or "").strip().lower()
    if not q or not t:
        return False
    return q in t or t in q


class CommandExecutor:
    """
    Executes parsed intents against the household stores.

    Each call touches at most one collaborator: the task store, the shopping
    store or the calendar. Saved locations are only read. Collaborator
    failures propagate; ``execute_batch`` is the place that isolates them.
    """

    def __init__(
        self,
        tasks: TaskStore,
        shopping: ShoppingStore,
        calendar: CalendarCollaborator,
        locations: Optional[LocationStore] = None,
    ) -> None:
        self.tasks = tasks
        self.shopping = shopping
        self.calendar = calendar
        self.locations = locations

    def execute(self, intent: Intent) -> ExecutionResult:
        """
        Run one intent.

        Args:
            intent: A parsed intent

        Returns:
            Exactly one result variant.

        Raises:
            CalendarError: If the calendar collaborator rejects an event
        """
        if isinstance(intent, ListIntent):
            return TaskList(tasks=self.tasks.get_pending())
        if isinstance(intent, CompleteIntent):
            return self._complete(intent)
        if isinstance(intent, ShoppingIntent):
            return self._add_shopping(intent)
        if isinstance(intent, EventIntent) and intent.date is not None:
            return self._create_event(intent, intent.date)
        if isinstance(intent, (TaskIntent, EventIntent)):
            return self._create_task(intent)
        if isinstance(intent, UnknownIntent):
            logger.info(f"Nothing to do for unrecognized input: {intent.raw_text!r}")
            return Unknown()
        raise TypeError(f"Unsupported intent: {type(intent).__name__}")

    def execute_batch(self, intents: Iterable[Intent]) -> BatchResult:
        """Run intents strictly in order; a failing item never stops the rest."""
        batch = BatchResult()
        for index, intent in enumerate(intents):
            try:
                batch.results.append(self.execute(intent))
            except Exception as exc:
                logger.error(f"Batch item {index} ({intent.type.value}) failed: {exc}")
                batch.errors.append(BatchError(index=index, intent=intent, error=exc))
        return batch

    def _complete(self, intent: CompleteIntent) -> ExecutionResult:
        query = (intent.query or "").strip()
        if not query:
            logger.warning("Completion skipped - no query")
            return Skipped(reason=NO_QUERY)

        matches = [t for t in self.tasks.get_pending() if title_matches(query, t.title)]
        if not matches:
            return NotFound(query=query)
        if len(matches) > 1:
            logger.info(f"'{query}' matches {len(matches)} tasks; nothing completed")
            return Ambiguous(matches=matches)

        done = self.tasks.toggle_complete(matches[0].id)
        logger.info(f"Completed task {done.id} ('{done.title}')")
        return Completed(task=done)

    def _add_shopping(self, intent: ShoppingIntent) -> ExecutionResult:
        if not intent.title:
            logger.warning(f"Shopping item skipped - no title: {intent.raw_text!r}")
            return Skipped(reason=NO_TITLE)
        item = self.shopping.add(
            intent.title,
            quantity=intent.quantity or None,
            unit=intent.unit or None,
            category=intent.category or None,
        )
        return ShoppingAdded(item=item)

    def _create_event(self, intent: EventIntent, start: datetime) -> ExecutionResult:
        if not intent.title:
            logger.warning(f"Event creation skipped - no title: {intent.raw_text!r}")
            return Skipped(reason=NO_TITLE)

        location = intent.location
        saved_location_id = None
        if location and self.locations is not None:
            saved = self.locations.find_by_keyword(location)
            if saved is not None:
                logger.debug(f"Location '{location}' resolved to saved location {saved.id}")
                location = saved.address
                saved_location_id = saved.id

        event = self.calendar.create_event(
            NewEvent(
                title=intent.title,
                start=start,
                location=location,
                all_day=intent.all_day,
                smart_reminder=bool(location),
                saved_location_id=saved_location_id,
            )
        )
        return EventCreated(event=event)

    def _create_task(self, intent: TaskIntent | EventIntent) -> ExecutionResult:
        if not intent.title:
            logger.warning(f"Task creation skipped - no title: {intent.raw_text!r}")
            return Skipped(reason=NO_TITLE)

        due_date = None
        due_time = None
        needs_notification = False
        if isinstance(intent, TaskIntent):
            needs_notification = intent.needs_notification
            if intent.due_date is not None:
                due_date = intent.due_date.isoformat()
                if intent.due_time is not None:
                    due_time = intent.due_time.strftime("%H:%M")

        task: Task = self.tasks.create(
            intent.title,
            recurring=intent.recurring,
            frequency=intent.frequency,
            due_date=due_date,
            due_time=due_time,
            needs_notification=needs_notification,
        )
        return TaskCreated(task=task)
