"""Tests for the in-memory household stores and the recording calendar."""

from datetime import date, datetime, timedelta

import pytest

from hearth.core.errors import CalendarError, NotFoundError
from hearth.core.models import AgendaPriority, Frequency, NewEvent, ShoppingItem, StorageLocation, Task
from hearth.stores.calendar import RecordingCalendar
from hearth.stores.memory import (
    InMemoryAgendaStore,
    InMemoryInventoryStore,
    InMemoryLocationStore,
    InMemoryMealPlanStore,
    InMemoryRecipeStore,
    InMemoryShoppingStore,
    InMemoryTaskStore,
    location_keywords,
)

NOW = datetime(2026, 10, 14, 9, 0)
TODAY = NOW.date()


def test_subscribe_receives_current_then_updates() -> None:
    store = InMemoryTaskStore(clock=lambda: NOW)
    seen: list[list[Task]] = []

    unsubscribe = store.subscribe(seen.append)
    store.create("Water plants")
    unsubscribe()
    store.create("Feed cat")

    assert len(seen) == 2
    assert seen[0] == []
    assert [t.title for t in seen[1]] == ["Water plants"]


def test_recurring_task_queues_next_occurrence() -> None:
    store = InMemoryTaskStore(clock=lambda: NOW)
    trash = store.create("Take out trash", recurring=True, frequency=Frequency.WEEKLY)

    done = store.toggle_complete(trash.id)

    assert done.completed is True
    assert done.completed_at == NOW
    pending = store.get_pending()
    assert len(pending) == 1
    assert pending[0].previous_task_id == trash.id
    assert pending[0].frequency == Frequency.WEEKLY
    assert store.get_completed() == [done]


def test_uncompleting_does_not_queue() -> None:
    store = InMemoryTaskStore(clock=lambda: NOW)
    task = store.create("Stretch", recurring=True, frequency=Frequency.DAILY)
    store.toggle_complete(task.id)
    reopened = store.toggle_complete(task.id)
    assert reopened.completed is False
    assert reopened.completed_at is None
    assert len(store.tasks()) == 2


def test_frequency_dropped_when_not_recurring() -> None:
    task = InMemoryTaskStore(clock=lambda: NOW).create("Once", frequency=Frequency.DAILY)
    assert task.frequency is None


def test_find_by_keywords() -> None:
    store = InMemoryTaskStore(clock=lambda: NOW)
    store.create("Call the plumber")
    store.create("Pay rent")
    assert [t.title for t in store.find_by_keywords("PLUMBER")] == ["Call the plumber"]


def test_update_rejects_unknown_fields() -> None:
    store = InMemoryTaskStore(clock=lambda: NOW)
    task = store.create("Read")
    assert store.update(task.id, assignee="Sam").assignee == "Sam"
    with pytest.raises(ValueError, match="colour"):
        store.update(task.id, colour="red")


def test_missing_ids_raise_not_found() -> None:
    with pytest.raises(NotFoundError):
        InMemoryTaskStore(clock=lambda: NOW).toggle_complete("nope")
    with pytest.raises(NotFoundError):
        InMemoryShoppingStore(clock=lambda: NOW).delete("nope")


def test_shopping_grouped_in_aisle_order() -> None:
    store = InMemoryShoppingStore(clock=lambda: NOW)
    store.add("Paper towels")
    store.add("Milk")
    bananas = store.add("Bananas")
    store.add("Apples")
    store.toggle_checked(bananas.id)

    grouped = store.get_grouped()

    assert list(grouped) == ["Produce", "Dairy", "Household"]
    assert [i.name for i in grouped["Produce"]] == ["Apples"]


def test_clear_checked() -> None:
    store = InMemoryShoppingStore(clock=lambda: NOW)
    seen: list[list[ShoppingItem]] = []
    store.subscribe(seen.append)
    milk = store.add("Milk")
    store.add("Eggs")
    store.toggle_checked(milk.id)

    assert store.clear_checked() == 1
    assert [i.name for i in store.items()] == ["Eggs"]
    assert store.clear_checked() == 0
    assert len(seen) == 5


def test_inventory_add_guesses_category_and_location() -> None:
    item = InMemoryInventoryStore(clock=lambda: NOW).add("Greek yogurt", quantity=2)
    assert item.category == "Dairy"
    assert item.location == StorageLocation.REFRIGERATOR


def test_use_item_removes_when_depleted() -> None:
    store = InMemoryInventoryStore(clock=lambda: NOW)
    eggs = store.add("Eggs", quantity=3)

    partial = store.use_item(eggs.id, 2)
    assert partial is not None
    assert partial.quantity == 1

    assert store.use_item(eggs.id, 5) is None
    assert store.get(eggs.id) is None
    assert store.items() == []


def test_inventory_quantity_must_be_positive() -> None:
    store = InMemoryInventoryStore(clock=lambda: NOW)
    item = store.add("Rice")
    with pytest.raises(ValueError):
        store.update(item.id, quantity=0)


def test_expiring_soon_and_expired() -> None:
    store = InMemoryInventoryStore(clock=lambda: NOW)
    store.add("Milk", expiration_date=TODAY + timedelta(days=5))
    store.add("Yogurt", expiration_date=TODAY + timedelta(days=1))
    store.add("Cheese", expiration_date=TODAY + timedelta(days=30))
    store.add("Cream", expiration_date=TODAY - timedelta(days=1))
    store.add("Salt")

    assert [i.name for i in store.get_expiring_soon()] == ["Yogurt", "Milk"]
    assert [i.name for i in store.get_expiring_soon(days=2)] == ["Yogurt"]
    assert [i.name for i in store.get_expired()] == ["Cream"]


def test_recipe_store_converts_ingredient_dicts() -> None:
    store = InMemoryRecipeStore(clock=lambda: NOW)
    recipe = store.create(name="Chili", category="Mexican", ingredients=[{"name": "beans", "quantity": 2}])

    assert recipe.ingredients[0].name == "beans"
    assert store.toggle_favorite(recipe.id).favorite is True
    assert store.categories() == ["Mexican"]


def test_location_keywords() -> None:
    assert location_keywords("Grandma's House") == ["grandma's", "house", "grandma's house", "grandma"]


def test_location_lookup_tiers() -> None:
    store = InMemoryLocationStore(clock=lambda: NOW)
    school = store.add("Lincoln Elementary", "1 School Rd")
    grandma = store.add("Grandma's House", "9 Oak Ave")

    assert store.find_by_keyword("lincoln elementary") == school
    assert store.find_by_keyword("grandma") == grandma
    assert store.find_by_keyword("elem") == school
    assert store.find_by_keyword("the mall") is None
    assert store.find_by_keyword("  ") is None


def test_location_rename_refreshes_keywords() -> None:
    store = InMemoryLocationStore(clock=lambda: NOW)
    loc = store.add("Gym", "5 Main St")
    renamed = store.update(loc.id, name="Swim Club")
    assert "swim" in renamed.keywords
    assert store.find_by_keyword("gym") is None


def test_one_meal_plan_per_week() -> None:
    store = InMemoryMealPlanStore(clock=lambda: NOW)
    plan = store.create_plan()

    assert plan.week_start == date(2026, 10, 11)
    assert store.get_plan_for_week(date(2026, 10, 17)) == plan
    with pytest.raises(ValueError, match="already exists"):
        store.create_plan(date(2026, 10, 12))


def test_set_and_remove_meal() -> None:
    store = InMemoryMealPlanStore(clock=lambda: NOW)
    plan = store.create_plan()

    plan = store.set_meal(plan.id, "2026-10-12", "r-1")
    assert plan.meals["2026-10-12"].recipe_id == "r-1"
    assert plan.meals["2026-10-12"].set_at == NOW

    plan = store.remove_meal(plan.id, "2026-10-12")
    assert plan.meals == {}


def test_calendar_requires_selection() -> None:
    calendar = RecordingCalendar()
    with pytest.raises(CalendarError):
        calendar.create_event(NewEvent(title="Dentist", start=NOW))
    calendar.select("family")
    event = calendar.create_event(NewEvent(title="Dentist", start=NOW))
    assert event.calendar_id == "family"
    assert event.end == NOW + timedelta(hours=1)


def test_calendar_all_day_span() -> None:
    calendar = RecordingCalendar("family")
    start = datetime(2026, 10, 20)
    event = calendar.create_event(NewEvent(title="Field trip", start=start, all_day=True))
    assert event.end == start + timedelta(days=1)
    assert calendar.events_between(datetime(2026, 10, 19), datetime(2026, 10, 21)) == [event]
    assert calendar.events_between(datetime(2026, 10, 22), datetime(2026, 10, 23)) == []


def test_inventory_by_location() -> None:
    store = InMemoryInventoryStore(clock=lambda: NOW)
    store.add("Frozen peas")
    store.add("Flour")
    assert [i.name for i in store.by_location(StorageLocation.FREEZER)] == ["Frozen peas"]
    assert [i.name for i in store.by_location(StorageLocation.PANTRY)] == ["Flour"]


def test_agenda_pending_ordered_by_priority_then_newest() -> None:
    times = iter([datetime(2026, 10, 10), datetime(2026, 10, 11), datetime(2026, 10, 12)])
    store = InMemoryAgendaStore(clock=lambda: next(times))
    store.create("Chore chart", priority="low")
    store.create("Allowance")
    store.create("Car repair", priority=AgendaPriority.HIGH)

    assert [i.topic for i in store.get_pending()] == ["Car repair", "Allowance", "Chore chart"]
    assert store.pending_count() == 3
    assert store.high_priority_count() == 1


def test_agenda_newest_first_within_priority() -> None:
    times = iter([datetime(2026, 10, 10), datetime(2026, 10, 11)])
    store = InMemoryAgendaStore(clock=lambda: next(times))
    store.create("Older")
    store.create("Newer")
    assert [i.topic for i in store.get_pending()] == ["Newer", "Older"]


def test_agenda_toggle_and_clear_resolved() -> None:
    store = InMemoryAgendaStore(clock=lambda: NOW)
    seen: list[int] = []
    store.subscribe(lambda items: seen.append(len(items)))
    trip = store.create("Summer trip", description="Beach or mountains", added_by="Sam")
    store.create("Screen time", priority="high")

    resolved = store.toggle_resolved(trip.id)

    assert resolved.resolved is True
    assert resolved.resolved_at == NOW
    assert store.get_resolved() == [resolved]
    assert [i.topic for i in store.get_pending()] == ["Screen time"]
    assert store.high_priority_count() == 1

    reopened = store.toggle_resolved(trip.id)
    assert reopened.resolved is False
    assert reopened.resolved_at is None

    store.toggle_resolved(trip.id)
    assert store.clear_resolved() == 1
    assert store.clear_resolved() == 0
    assert [i.topic for i in store.items()] == ["Screen time"]
    assert seen == [0, 1, 2, 2, 2, 2, 1]


def test_agenda_update_and_validation() -> None:
    store = InMemoryAgendaStore(clock=lambda: NOW)
    item = store.create("  Bedtimes  ")
    assert item.topic == "Bedtimes"
    assert item.priority == AgendaPriority.NORMAL

    assert store.update(item.id, priority="high").priority == AgendaPriority.HIGH
    with pytest.raises(ValueError):
        store.create("   ")
    with pytest.raises(ValueError):
        store.create("Pets", priority="urgent")
    with pytest.raises(NotFoundError):
        store.toggle_resolved("nope")
    store.delete(item.id)
    assert store.items() == []
