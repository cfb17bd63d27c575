"""JSON household snapshots: decoding entities from plain dicts and back."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from dateutil import parser as date_parser

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


@dataclass
class HouseholdSnapshot:
    tasks: list[Task] = field(default_factory=list)
    shopping: list[ShoppingItem] = field(default_factory=list)
    inventory: list[InventoryItem] = field(default_factory=list)
    recipes: list[Recipe] = field(default_factory=list)
    locations: list[SavedLocation] = field(default_factory=list)
    meal_plans: list[MealPlan] = field(default_factory=list)
    agenda: list[AgendaItem] = field(default_factory=list)
    calendar_id: Optional[str] = None


def dataclass_to_dict(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, BaseException):
        return str(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        data = asdict(obj)
        return {key: dataclass_to_dict(value) for key, value in data.items()}
    if isinstance(obj, (list, tuple)):
        return [dataclass_to_dict(value) for value in obj]
    if isinstance(obj, dict):
        return {key: dataclass_to_dict(value) for key, value in obj.items()}
    return obj


def read_snapshot(path: str | Path) -> HouseholdSnapshot:
    """
    Load a household from a JSON file.

    Raises:
        ValueError: If the file is not a JSON object or an entity is malformed
    """
    with Path(path).open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Household snapshot must be a JSON object: {path}")
    return parse_snapshot(data)


def write_snapshot(snapshot: HouseholdSnapshot, path: str | Path) -> None:
    with Path(path).open("w", encoding="utf-8") as handle:
        json.dump(dataclass_to_dict(snapshot), handle, ensure_ascii=False, indent=2)
        handle.write("\n")


def parse_snapshot(data: dict[str, Any]) -> HouseholdSnapshot:
    return HouseholdSnapshot(
        tasks=[parse_task(t) for t in data.get("tasks") or []],
        shopping=[parse_shopping_item(s) for s in data.get("shopping") or []],
        inventory=[parse_inventory_item(i) for i in data.get("inventory") or []],
        recipes=[parse_recipe(r) for r in data.get("recipes") or []],
        locations=[parse_location(loc) for loc in data.get("locations") or []],
        meal_plans=[parse_meal_plan(p) for p in data.get("meal_plans") or []],
        agenda=[parse_agenda_item(a) for a in data.get("agenda") or []],
        calendar_id=data.get("calendar_id"),
    )


def _require_id(data: dict[str, Any], kind: str) -> str:
    value = data.get("id")
    if not value:
        raise ValueError(f"{kind} entry is missing an id: {data!r}")
    return str(value)


def _frequency(value: Any) -> Optional[Frequency]:
    return Frequency(value) if value else None


def parse_task(data: dict[str, Any]) -> Task:
    return Task(
        id=_require_id(data, "Task"),
        title=str(data.get("title") or ""),
        assignee=data.get("assignee"),
        recurring=bool(data.get("recurring", False)),
        frequency=_frequency(data.get("frequency")),
        completed=bool(data.get("completed", False)),
        completed_at=_parse_datetime(data.get("completed_at")),
        due_date=data.get("due_date"),
        due_time=data.get("due_time"),
        needs_notification=bool(data.get("needs_notification", False)),
        previous_task_id=data.get("previous_task_id"),
        created_at=_parse_datetime(data.get("created_at")),
    )


def parse_shopping_item(data: dict[str, Any]) -> ShoppingItem:
    return ShoppingItem(
        id=_require_id(data, "Shopping item"),
        name=str(data.get("name") or ""),
        quantity=_optional_float(data.get("quantity")),
        unit=data.get("unit"),
        category=data.get("category") or "Other",
        notes=data.get("notes"),
        checked=bool(data.get("checked", False)),
        created_at=_parse_datetime(data.get("created_at")),
    )


def parse_inventory_item(data: dict[str, Any]) -> InventoryItem:
    return InventoryItem(
        id=_require_id(data, "Inventory item"),
        name=str(data.get("name") or ""),
        quantity=float(data.get("quantity") or 1.0),
        unit=data.get("unit"),
        category=data.get("category") or "Other",
        location=StorageLocation(data.get("location") or StorageLocation.PANTRY.value),
        expiration_date=_parse_date(data.get("expiration_date")),
        notes=data.get("notes"),
    )


def parse_ingredient(data: dict[str, Any]) -> Ingredient:
    return Ingredient(
        name=str(data.get("name") or ""),
        quantity=_optional_float(data.get("quantity")),
        unit=data.get("unit"),
        category=data.get("category"),
    )


def parse_recipe(data: dict[str, Any]) -> Recipe:
    return Recipe(
        id=_require_id(data, "Recipe"),
        name=str(data.get("name") or ""),
        ingredients=[parse_ingredient(i) for i in data.get("ingredients") or []],
        instructions=data.get("instructions") or "",
        servings=int(data.get("servings") or 4),
        prep_time=data.get("prep_time"),
        cook_time=data.get("cook_time"),
        category=data.get("category") or "Uncategorized",
        favorite=bool(data.get("favorite", False)),
        tags=list(data.get("tags") or []),
        source_url=data.get("source_url"),
    )


def parse_location(data: dict[str, Any]) -> SavedLocation:
    return SavedLocation(
        id=_require_id(data, "Location"),
        name=str(data.get("name") or ""),
        address=str(data.get("address") or ""),
        keywords=[str(k).lower() for k in data.get("keywords") or []],
    )


def parse_meal_plan(data: dict[str, Any]) -> MealPlan:
    week_start = _parse_date(data.get("week_start"))
    if week_start is None:
        raise ValueError(f"Meal plan is missing week_start: {data!r}")
    meals = {
        str(day): PlannedMeal(
            recipe_id=meal.get("recipe_id"),
            meal_type=meal.get("meal_type") or "dinner",
            set_at=_parse_datetime(meal.get("set_at")),
        )
        for day, meal in (data.get("meals") or {}).items()
    }
    return MealPlan(
        id=_require_id(data, "Meal plan"),
        week_start=week_start,
        meals=meals,
        days_needed=list(data.get("days_needed") or []),
        must_include_recipes=list(data.get("must_include_recipes") or []),
        category_requirements={k: int(v) for k, v in (data.get("category_requirements") or {}).items()},
        use_up_items=list(data.get("use_up_items") or []),
    )


def parse_agenda_item(data: dict[str, Any]) -> AgendaItem:
    return AgendaItem(
        id=_require_id(data, "Agenda item"),
        topic=str(data.get("topic") or ""),
        description=data.get("description") or "",
        priority=AgendaPriority(data.get("priority") or AgendaPriority.NORMAL.value),
        resolved=bool(data.get("resolved", False)),
        added_by=data.get("added_by"),
        created_at=_parse_datetime(data.get("created_at")),
        resolved_at=_parse_datetime(data.get("resolved_at")),
    )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, TypeError):
        return None


def _parse_date(value: Any) -> date | None:
    parsed = _parse_datetime(value)
    return parsed.date() if parsed else None
