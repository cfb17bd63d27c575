"""Protocol definitions for hearth collaborators and pluggable stages."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from hearth.core.models import (
    AgendaItem,
    AgendaPriority,
    CalendarEvent,
    Frequency,
    InventoryItem,
    MealPlan,
    NewEvent,
    Recipe,
    SavedLocation,
    ShoppingItem,
    Task,
)

Unsubscribe = Callable[[], None]


@runtime_checkable
class IngredientMatcher(Protocol):
    """Decides whether two ingredient / item names refer to the same thing."""

    def matches(self, query_name: str, candidate_name: str) -> bool:
        """
        Compare a wanted ingredient name against a candidate (usually an inventory item).

        Args:
            query_name: The name being looked for (e.g. a recipe ingredient)
            candidate_name: The name of something on hand

        Returns:
            True if the candidate satisfies the query.
        """
        ...


@runtime_checkable
class IntentBackend(Protocol):
    """Remote AI service that turns free text into structured items."""

    def parse_input(
        self,
        transcript: str,
        is_document: bool = False,
        filename: Optional[str] = None,
    ) -> Any:
        """
        Send text to the backend and return its decoded JSON payload.

        The payload may be a bare list, an ``{"items": [...]}`` envelope or a
        single flat object; the parser normalizes all three.

        Raises:
            AIBackendError: If the backend is unreachable or rejects the request
        """
        ...


@runtime_checkable
class RecipeBackend(Protocol):
    """Remote AI service that extracts a recipe from free text."""

    def parse_recipe(self, text: str) -> dict[str, Any]:
        ...


@runtime_checkable
class TaskStore(Protocol):
    def create(
        self,
        title: str,
        *,
        assignee: Optional[str] = None,
        recurring: bool = False,
        frequency: Optional[Frequency] = None,
        due_date: Optional[str] = None,
        due_time: Optional[str] = None,
        needs_notification: bool = False,
    ) -> Task:
        ...

    def toggle_complete(self, task_id: str) -> Task:
        """Flip a task's completed flag and return the updated task."""
        ...

    def update(self, task_id: str, **changes: Any) -> Task:
        ...

    def delete(self, task_id: str) -> None:
        ...

    def get_pending(self) -> list[Task]:
        ...

    def find_by_keywords(self, keywords: str) -> list[Task]:
        ...

    def subscribe(self, callback: Callable[[list[Task]], None]) -> Unsubscribe:
        ...


@runtime_checkable
class ShoppingStore(Protocol):
    def add(
        self,
        name: str,
        *,
        quantity: Optional[float] = None,
        unit: Optional[str] = None,
        category: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ShoppingItem:
        ...

    def toggle_checked(self, item_id: str) -> ShoppingItem:
        ...

    def delete(self, item_id: str) -> None:
        ...

    def get_unchecked(self) -> list[ShoppingItem]:
        ...

    def subscribe(self, callback: Callable[[list[ShoppingItem]], None]) -> Unsubscribe:
        ...


@runtime_checkable
class InventoryStore(Protocol):
    def add(
        self,
        name: str,
        *,
        quantity: float = 1.0,
        unit: Optional[str] = None,
        category: Optional[str] = None,
        location: Optional[str] = None,
        expiration_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> InventoryItem:
        ...

    def use_item(self, item_id: str, amount: float = 1.0) -> Optional[InventoryItem]:
        """Consume ``amount``; the item is deleted when nothing remains."""
        ...

    def items(self) -> list[InventoryItem]:
        ...

    def get(self, item_id: str) -> Optional[InventoryItem]:
        ...

    def get_expiring_soon(self, days: int = 7, today: Optional[date] = None) -> list[InventoryItem]:
        ...

    def subscribe(self, callback: Callable[[list[InventoryItem]], None]) -> Unsubscribe:
        ...


@runtime_checkable
class RecipeStore(Protocol):
    def create(self, **fields: Any) -> Recipe:
        ...

    def get(self, recipe_id: str) -> Optional[Recipe]:
        ...

    def recipes(self) -> list[Recipe]:
        ...

    def subscribe(self, callback: Callable[[list[Recipe]], None]) -> Unsubscribe:
        ...


@runtime_checkable
class LocationStore(Protocol):
    def add(self, name: str, address: str) -> SavedLocation:
        ...

    def find_by_keyword(self, text: str) -> Optional[SavedLocation]:
        """Exact name, then keyword membership, then substring."""
        ...


@runtime_checkable
class MealPlanStore(Protocol):
    def create_plan(self, week_start: Optional[date] = None, **options: Any) -> MealPlan:
        ...

    def get(self, plan_id: str) -> Optional[MealPlan]:
        ...

    def get_plan_for_week(self, week_start: Optional[date] = None) -> Optional[MealPlan]:
        ...

    def set_meal(
        self, plan_id: str, date_str: str, recipe_id: str, meal_type: str = "dinner"
    ) -> MealPlan:
        ...

    def remove_meal(self, plan_id: str, date_str: str) -> MealPlan:
        ...


@runtime_checkable
class AgendaStore(Protocol):
    def create(
        self,
        topic: str,
        *,
        description: str = "",
        priority: AgendaPriority = AgendaPriority.NORMAL,
        added_by: Optional[str] = None,
    ) -> AgendaItem:
        ...

    def update(self, item_id: str, **changes: Any) -> AgendaItem:
        ...

    def delete(self, item_id: str) -> None:
        ...

    def toggle_resolved(self, item_id: str) -> AgendaItem:
        ...

    def get_pending(self) -> list[AgendaItem]:
        """Unresolved items, high priority first, newest first within a priority."""
        ...

    def get_resolved(self) -> list[AgendaItem]:
        ...

    def clear_resolved(self) -> int:
        ...

    def subscribe(self, callback: Callable[[list[AgendaItem]], None]) -> Unsubscribe:
        ...


@runtime_checkable
class CalendarCollaborator(Protocol):
    def create_event(self, event: NewEvent) -> CalendarEvent:
        """
        Create an event on the selected calendar.

        Raises:
            CalendarError: If no calendar is selected or authorization expired
        """
        ...

    def events_between(self, start: datetime, end: datetime) -> list[CalendarEvent]:
        ...
