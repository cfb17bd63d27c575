"""
In-memory domain stores.

Each store owns one entity collection, replaces entities (they are frozen
dataclasses) on every write, and pushes a fresh snapshot to subscribers
after each change. Reads always return copies of the collection.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import fields, replace
from datetime import date, datetime, timedelta
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from hearth.core.categories import CategoryGuesser
from hearth.core.errors import NotFoundError
from hearth.core.interfaces import Unsubscribe
from hearth.core.models import (
    AgendaItem,
    AgendaPriority,
    Frequency,
    Ingredient,
    InventoryItem,
    MealPlan,
    PlannedMeal,
    Recipe,
    SavedLocation,
    ShoppingItem,
    StorageLocation,
    Task,
)
from hearth.core.weeks import DEFAULT_DAYS, week_start_for

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_id() -> str:
    return uuid.uuid4().hex


class _Collection(Generic[T]):
    """Id-keyed collection with subscriber fan-out."""

    kind = "item"

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self.clock = clock
        self._items: dict[str, T] = {}
        self._subscribers: list[Callable[[list[T]], None]] = []

    def subscribe(self, callback: Callable[[list[T]], None]) -> Unsubscribe:
        """Call ``callback`` now and after every change until unsubscribed."""
        self._subscribers.append(callback)
        callback(self.snapshot())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def snapshot(self) -> list[T]:
        return list(self._items.values())

    def get(self, item_id: str) -> Optional[T]:
        return self._items.get(item_id)

    def delete(self, item_id: str) -> None:
        self._require(item_id)
        del self._items[item_id]
        logger.info(f"Deleted {self.kind} {item_id}")
        self._notify()

    def load(self, entities: Iterable[T]) -> None:
        """Replace the whole collection, e.g. from a saved snapshot."""
        self._items = {getattr(e, "id"): e for e in entities}
        self._notify()

    def _require(self, item_id: str) -> T:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError(f"{self.kind.capitalize()} not found: {item_id}") from None

    def _put(self, entity: T) -> T:
        self._items[getattr(entity, "id")] = entity
        self._notify()
        return entity

    def _notify(self) -> None:
        current = self.snapshot()
        for callback in list(self._subscribers):
            callback(current)


def _apply_changes(entity: T, changes: dict[str, Any]) -> T:
    allowed = {f.name for f in fields(entity)} - {"id"}  # type: ignore[arg-type]
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(sorted(unknown))}")
    return replace(entity, **changes)  # type: ignore[type-var]


class InMemoryTaskStore(_Collection[Task]):
    kind = "task"

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
        previous_task_id: Optional[str] = None,
    ) -> Task:
        task = Task(
            id=new_id(),
            title=title,
            assignee=assignee,
            recurring=recurring,
            frequency=frequency if recurring else None,
            due_date=due_date,
            due_time=due_time,
            needs_notification=needs_notification,
            previous_task_id=previous_task_id,
            created_at=self.clock(),
        )
        logger.info(f"Created task {task.id} ('{title}')")
        return self._put(task)

    def toggle_complete(self, task_id: str) -> Task:
        """
        Flip completion. Completing a recurring task queues its next occurrence.
        """
        task = self._require(task_id)
        completing = not task.completed
        updated = self._put(
            replace(task, completed=completing, completed_at=self.clock() if completing else None)
        )
        if completing and task.recurring:
            self.create(
                task.title,
                assignee=task.assignee,
                recurring=True,
                frequency=task.frequency,
                previous_task_id=task.id,
            )
        return updated

    def update(self, task_id: str, **changes: Any) -> Task:
        return self._put(_apply_changes(self._require(task_id), changes))

    def tasks(self) -> list[Task]:
        return self.snapshot()

    def get_pending(self) -> list[Task]:
        return [t for t in self._items.values() if not t.completed]

    def get_completed(self) -> list[Task]:
        return [t for t in self._items.values() if t.completed]

    def find_by_keywords(self, keywords: str) -> list[Task]:
        needle = keywords.lower()
        return [t for t in self._items.values() if needle in t.title.lower()]


class InMemoryShoppingStore(_Collection[ShoppingItem]):
    kind = "shopping item"

    def __init__(
        self,
        categories: Optional[CategoryGuesser] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(clock)
        self.categories = categories or CategoryGuesser()

    def add(
        self,
        name: str,
        *,
        quantity: Optional[float] = None,
        unit: Optional[str] = None,
        category: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ShoppingItem:
        item = ShoppingItem(
            id=new_id(),
            name=name,
            quantity=quantity or None,
            unit=unit or None,
            category=category or self.categories.grocery_category(name),
            notes=notes or None,
            created_at=self.clock(),
        )
        logger.info(f"Added '{name}' to the shopping list ({item.category})")
        return self._put(item)

    def toggle_checked(self, item_id: str) -> ShoppingItem:
        item = self._require(item_id)
        return self._put(replace(item, checked=not item.checked))

    def items(self) -> list[ShoppingItem]:
        return self.snapshot()

    def get_unchecked(self) -> list[ShoppingItem]:
        return [i for i in self._items.values() if not i.checked]

    def get_grouped(self) -> dict[str, list[ShoppingItem]]:
        """Unchecked items grouped by aisle, aisles in store walking order."""
        groups: dict[str, list[ShoppingItem]] = {}
        for item in sorted(self.get_unchecked(), key=lambda i: self.categories.order_key(i.category)):
            groups.setdefault(item.category, []).append(item)
        return groups

    def clear_checked(self) -> int:
        checked = [i.id for i in self._items.values() if i.checked]
        for item_id in checked:
            del self._items[item_id]
        if checked:
            self._notify()
        return len(checked)


class InMemoryInventoryStore(_Collection[InventoryItem]):
    kind = "inventory item"

    def __init__(
        self,
        categories: Optional[CategoryGuesser] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(clock)
        self.categories = categories or CategoryGuesser()

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
        item = InventoryItem(
            id=new_id(),
            name=name,
            quantity=quantity or 1.0,
            unit=unit or None,
            category=category or self.categories.grocery_category(name),
            location=StorageLocation(location) if location else self.categories.storage_location(name),
            expiration_date=expiration_date,
            notes=notes or None,
        )
        logger.info(f"Stocked {item.quantity:g} x '{name}' in {item.location.value}")
        return self._put(item)

    def update(self, item_id: str, **changes: Any) -> InventoryItem:
        return self._put(_apply_changes(self._require(item_id), changes))

    def use_item(self, item_id: str, amount: float = 1.0) -> Optional[InventoryItem]:
        """
        Consume ``amount`` of an item.

        Returns:
            The updated item, or None when nothing remains and the item was removed.
        """
        item = self._require(item_id)
        remaining = item.quantity - amount
        if remaining <= 0:
            self.delete(item_id)
            return None
        return self._put(replace(item, quantity=remaining))

    def items(self) -> list[InventoryItem]:
        return self.snapshot()

    def by_location(self, location: StorageLocation) -> list[InventoryItem]:
        return [i for i in self._items.values() if i.location == location]

    def get_expiring_soon(self, days: int = 7, today: Optional[date] = None) -> list[InventoryItem]:
        """Items expiring between today and ``days`` from now, soonest first."""
        today = today or self.clock().date()
        horizon = today + timedelta(days=days)
        expiring = [
            i
            for i in self._items.values()
            if i.expiration_date is not None and today <= i.expiration_date <= horizon
        ]
        return sorted(expiring, key=lambda i: i.expiration_date or today)

    def get_expired(self, today: Optional[date] = None) -> list[InventoryItem]:
        today = today or self.clock().date()
        return [
            i for i in self._items.values() if i.expiration_date is not None and i.expiration_date < today
        ]


class InMemoryRecipeStore(_Collection[Recipe]):
    kind = "recipe"

    def create(self, **fields_: Any) -> Recipe:
        ingredients = [
            ing if isinstance(ing, Ingredient) else Ingredient(**ing)
            for ing in fields_.pop("ingredients", None) or []
        ]
        recipe = Recipe(id=new_id(), ingredients=ingredients, **fields_)
        logger.info(f"Saved recipe {recipe.id} ('{recipe.name}')")
        return self._put(recipe)

    def update(self, recipe_id: str, **changes: Any) -> Recipe:
        return self._put(_apply_changes(self._require(recipe_id), changes))

    def toggle_favorite(self, recipe_id: str) -> Recipe:
        recipe = self._require(recipe_id)
        return self._put(replace(recipe, favorite=not recipe.favorite))

    def recipes(self) -> list[Recipe]:
        return self.snapshot()

    def categories(self) -> list[str]:
        return sorted({r.category for r in self._items.values()})


def location_keywords(name: str) -> list[str]:
    """Words of the name, the full name, and possessive-stripped words."""
    words = name.lower().split()
    keywords = [*words, name.lower()]
    keywords.extend(word[:-2] for word in words if word.endswith("'s"))
    return list(dict.fromkeys(keywords))


class InMemoryLocationStore(_Collection[SavedLocation]):
    kind = "location"

    def add(self, name: str, address: str) -> SavedLocation:
        location = SavedLocation(id=new_id(), name=name, address=address, keywords=location_keywords(name))
        logger.info(f"Saved location '{name}'")
        return self._put(location)

    def update(self, location_id: str, **changes: Any) -> SavedLocation:
        if "name" in changes:
            changes["keywords"] = location_keywords(changes["name"])
        return self._put(_apply_changes(self._require(location_id), changes))

    def locations(self) -> list[SavedLocation]:
        return sorted(self._items.values(), key=lambda loc: loc.name)

    def find_by_keyword(self, text: str) -> Optional[SavedLocation]:
        needle = text.lower().strip()
        if not needle:
            return None
        candidates = self.locations()
        for loc in candidates:
            if loc.name.lower() == needle:
                return loc
        for loc in candidates:
            if needle in loc.keywords:
                return loc
        for loc in candidates:
            if needle in loc.name.lower() or any(needle in kw for kw in loc.keywords):
                return loc
        return None


class InMemoryMealPlanStore(_Collection[MealPlan]):
    """Meal plans, at most one per week. Week starts are always Sundays."""

    kind = "meal plan"

    def create_plan(
        self,
        week_start: Optional[date] = None,
        *,
        days_needed: Optional[list[str]] = None,
        must_include_recipes: Optional[list[str]] = None,
        category_requirements: Optional[dict[str, int]] = None,
        use_up_items: Optional[list[str]] = None,
        meals: Optional[dict[str, PlannedMeal]] = None,
    ) -> MealPlan:
        """
        Raises:
            ValueError: If the week already has a plan
        """
        start = week_start_for(week_start or self.clock().date())
        if self.get_plan_for_week(start) is not None:
            raise ValueError(f"A meal plan already exists for the week of {start.isoformat()}")
        plan = MealPlan(
            id=new_id(),
            week_start=start,
            meals=dict(meals or {}),
            days_needed=list(days_needed or DEFAULT_DAYS),
            must_include_recipes=list(must_include_recipes or []),
            category_requirements=dict(category_requirements or {}),
            use_up_items=list(use_up_items or []),
        )
        logger.info(f"Created meal plan {plan.id} for week of {start.isoformat()}")
        return self._put(plan)

    def plans(self) -> list[MealPlan]:
        return self.snapshot()

    def get_plan_for_week(self, week_start: Optional[date] = None) -> Optional[MealPlan]:
        start = week_start_for(week_start or self.clock().date())
        return next((p for p in self._items.values() if p.week_start == start), None)

    def set_meal(self, plan_id: str, date_str: str, recipe_id: str, meal_type: str = "dinner") -> MealPlan:
        plan = self._require(plan_id)
        meals = dict(plan.meals)
        meals[date_str] = PlannedMeal(recipe_id=recipe_id, meal_type=meal_type, set_at=self.clock())
        return self._put(replace(plan, meals=meals))

    def remove_meal(self, plan_id: str, date_str: str) -> MealPlan:
        plan = self._require(plan_id)
        meals = {day: meal for day, meal in plan.meals.items() if day != date_str}
        return self._put(replace(plan, meals=meals))


_PRIORITY_ORDER = {AgendaPriority.HIGH: 0, AgendaPriority.NORMAL: 1, AgendaPriority.LOW: 2}


class InMemoryAgendaStore(_Collection[AgendaItem]):
    """Topics for the next household meeting."""

    kind = "agenda item"

    def create(
        self,
        topic: str,
        *,
        description: str = "",
        priority: AgendaPriority | str = AgendaPriority.NORMAL,
        added_by: Optional[str] = None,
    ) -> AgendaItem:
        """
        Raises:
            ValueError: If the topic is blank or the priority is unknown
        """
        if not topic.strip():
            raise ValueError("Agenda topic must not be empty")
        item = AgendaItem(
            id=new_id(),
            topic=topic.strip(),
            description=description,
            priority=AgendaPriority(priority),
            added_by=added_by,
            created_at=self.clock(),
        )
        logger.info(f"Added agenda item {item.id} ('{item.topic}', {item.priority.value})")
        return self._put(item)

    def update(self, item_id: str, **changes: Any) -> AgendaItem:
        if "priority" in changes:
            changes["priority"] = AgendaPriority(changes["priority"])
        return self._put(_apply_changes(self._require(item_id), changes))

    def toggle_resolved(self, item_id: str) -> AgendaItem:
        item = self._require(item_id)
        resolving = not item.resolved
        return self._put(
            replace(item, resolved=resolving, resolved_at=self.clock() if resolving else None)
        )

    def items(self) -> list[AgendaItem]:
        return self.snapshot()

    def get_pending(self) -> list[AgendaItem]:
        pending = [i for i in self._items.values() if not i.resolved]
        pending.sort(key=lambda i: i.created_at or datetime.min, reverse=True)
        pending.sort(key=lambda i: _PRIORITY_ORDER[i.priority])
        return pending

    def get_resolved(self) -> list[AgendaItem]:
        resolved = [i for i in self._items.values() if i.resolved]
        return sorted(resolved, key=lambda i: i.resolved_at or datetime.min, reverse=True)

    def clear_resolved(self) -> int:
        resolved = [i.id for i in self._items.values() if i.resolved]
        for item_id in resolved:
            del self._items[item_id]
        if resolved:
            logger.info(f"Cleared {len(resolved)} resolved agenda item(s)")
            self._notify()
        return len(resolved)

    def pending_count(self) -> int:
        return sum(1 for i in self._items.values() if not i.resolved)

    def high_priority_count(self) -> int:
        return sum(
            1 for i in self._items.values() if not i.resolved and i.priority == AgendaPriority.HIGH
        )
