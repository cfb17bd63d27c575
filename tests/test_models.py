"""Tests for core data models."""

from dataclasses import FrozenInstanceError

import pytest

from hearth.core.models import (
    CompleteIntent,
    EventIntent,
    Frequency,
    IngredientMatch,
    IntentType,
    InventoryItem,
    ParseResult,
    Recipe,
    ResultAction,
    Skipped,
    Task,
    TaskIntent,
)


def test_intents_are_frozen() -> None:
    intent = TaskIntent(title="Call school")
    with pytest.raises(FrozenInstanceError):
        intent.title = "Changed"  # type: ignore[misc]


def test_intent_type_tags() -> None:
    assert EventIntent().type == IntentType.EVENT
    assert CompleteIntent(query="trash").type == IntentType.COMPLETE
    assert TaskIntent(type=IntentType.TODO).type == IntentType.TODO


def test_task_intent_rejects_other_types() -> None:
    with pytest.raises(ValueError):
        TaskIntent(type=IntentType.SHOPPING)


def test_recurrence_needs_frequency() -> None:
    with pytest.raises(ValueError):
        TaskIntent(title="Trash", recurring=True)
    with pytest.raises(ValueError):
        EventIntent(title="Yoga", frequency=Frequency.WEEKLY)

    weekly = EventIntent(title="Yoga", recurring=True, frequency=Frequency.WEEKLY)
    assert weekly.frequency == Frequency.WEEKLY


def test_parse_result_primary() -> None:
    one = ParseResult(items=[TaskIntent(title="A")])
    two = ParseResult(items=[TaskIntent(title="A"), TaskIntent(title="B")])
    assert one.primary is not None
    assert two.primary is None
    assert ParseResult().primary is None


def test_inventory_quantity_positive() -> None:
    with pytest.raises(ValueError):
        InventoryItem(id="i1", name="Eggs", quantity=0)
    with pytest.raises(ValueError):
        InventoryItem(id="i1", name="Eggs", quantity=-2)


def test_recipe_servings_at_least_one() -> None:
    with pytest.raises(ValueError):
        Recipe(id="r1", name="Air", servings=0)
    assert Recipe(id="r1", name="Toast").servings == 4


def test_result_action_tags_fixed() -> None:
    result = Skipped("no title")
    assert result.action == ResultAction.SKIPPED
    assert result.action.value == "skipped"


def test_ingredient_match_missing() -> None:
    assert IngredientMatch(have=2, total=5, percentage=40).missing == 3


def test_task_defaults() -> None:
    task = Task(id="t1", title="Read")
    assert task.completed is False
    assert task.due_date is None
    assert task.frequency is None
