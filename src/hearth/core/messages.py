"""Human-readable outcome messages for execution results and generated weeks."""

from __future__ import annotations

from hearth.core.models import (
    Ambiguous,
    BatchResult,
    Completed,
    EventCreated,
    ExecutionResult,
    NotFound,
    ShoppingAdded,
    Skipped,
    TaskCreated,
    TaskList,
    Unknown,
    WeekSuggestions,
)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def describe(result: ExecutionResult) -> str:
    """One distinct message per result variant."""
    if isinstance(result, EventCreated):
        return f'Event "{result.event.title}" created'
    if isinstance(result, TaskCreated):
        return f'Task "{result.task.title}" created'
    if isinstance(result, ShoppingAdded):
        return f'Added to shopping list: "{result.item.name}"'
    if isinstance(result, Completed):
        return f'"{result.task.title}" marked complete'
    if isinstance(result, TaskList):
        return f"You have {_plural(len(result.tasks), 'pending task')}"
    if isinstance(result, Ambiguous):
        return f"Found {len(result.matches)} matching tasks. Please be more specific."
    if isinstance(result, NotFound):
        return f'Could not find task "{result.query}"'
    if isinstance(result, Skipped):
        if result.reason == "no query":
            return "Nothing to complete: say which task is done"
        return f"Nothing created: the request had {result.reason}"
    if isinstance(result, Unknown):
        return "Could not understand input"
    raise TypeError(f"Unsupported result: {type(result).__name__}")


def summarize_batch(batch: BatchResult) -> str:
    """E.g. "2 events, 1 task, 3 shopping items created (1 failed)"."""
    events = sum(1 for r in batch.results if isinstance(r, EventCreated))
    tasks = sum(1 for r in batch.results if isinstance(r, TaskCreated))
    shopping = sum(1 for r in batch.results if isinstance(r, ShoppingAdded))

    parts = []
    if events:
        parts.append(_plural(events, "event"))
    if tasks:
        parts.append(_plural(tasks, "task"))
    if shopping:
        parts.append(_plural(shopping, "shopping item"))

    message = f"{', '.join(parts)} created" if parts else "Nothing created"
    if batch.failed:
        message += f" ({batch.failed} failed)"
    return message


def describe_week(week: WeekSuggestions) -> str:
    planned = sum(1 for s in week.suggestions if s.recipe is not None)
    message = f"{planned} of {_plural(len(week.suggestions), 'day')} planned"
    if week.fulfilled:
        return message
    unmet = ", ".join(f"{category} (needs {missing} more)" for category, missing in week.unmet_categories.items())
    return f"{message}; unmet requirements: {unmet}"
