"""Tests for the household composition root."""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from hearth.config import HearthSettings
from hearth.core.models import Completed, EventCreated, ResultAction, TaskCreated
from hearth.household import Household
from hearth.stores.snapshot import read_snapshot, write_snapshot

NOW = datetime(2026, 10, 14, 9, 0)
FIXTURE = Path(__file__).parent / "fixtures" / "household.json"


class StubAIClient:
    def __init__(self, items: Any) -> None:
        self.items = items

    def parse_input(self, transcript: str, is_document: bool = False, filename: Optional[str] = None) -> Any:
        return self.items

    def parse_recipe(self, text: str) -> dict[str, Any]:
        return {"name": "Stub Soup", "ingredients": ["2 cups broth"]}


def _make_household(ai_client: Any = None) -> Household:
    settings = HearthSettings(_env_file=None)
    return Household.from_snapshot(read_snapshot(FIXTURE), settings=settings, ai_client=ai_client, clock=lambda: NOW)


def test_snapshot_loads_into_stores() -> None:
    household = _make_household()
    assert len(household.tasks.tasks()) == 2
    assert household.calendar.calendar_id == "family"  # type: ignore[union-attr]
    assert household.ai_client is None
    assert household.meal_plans.get_plan_for_week(NOW.date()) is not None
    assert [i.topic for i in household.agenda.get_pending()] == ["Raise allowance"]
    assert household.agenda.high_priority_count() == 1


def test_handle_text_uses_rules_without_ai() -> None:
    household = _make_household()

    event = household.handle_text("Checkup at Kids Doctor tomorrow at 10am")
    assert isinstance(event, EventCreated)
    assert event.event.location == "12 Elm St"
    assert event.event.start == datetime(2026, 10, 15, 10, 0)

    done = household.handle_text("done with the trash")
    assert isinstance(done, Completed)
    assert done.task.id == "t-trash"
    # the weekly task queued its next occurrence
    assert [t.title for t in household.tasks.get_pending()] == ["Vacuum", "Take out trash"]


def test_handle_text_prefers_ai_client() -> None:
    household = _make_household(StubAIClient([{"type": "task", "title": "Book flights"}]))
    result = household.handle_text("we should book flights")
    assert isinstance(result, TaskCreated)
    assert result.task.title == "Book flights"


def test_handle_document_runs_batch() -> None:
    items = [
        {"type": "event", "title": "Picture day", "date": "2026-10-22"},
        {"type": "shopping", "title": "Glue sticks"},
        {"type": "todo", "title": ""},
    ]
    household = _make_household(StubAIClient(items))

    batch = household.handle_document("School newsletter", "newsletter.pdf")

    assert batch.failed == 0
    assert [r.action for r in batch.results] == [
        ResultAction.EVENT_CREATED,
        ResultAction.SHOPPING_ADDED,
        ResultAction.SKIPPED,
    ]


def test_expiring_items_feed_week_plan() -> None:
    household = _make_household()
    assert household.expiring_item_ids() == ["inv-eggs"]

    plan = household.plan_week()

    assert plan.id == "plan-1"
    assert plan.meals["2026-10-12"].recipe_id == "r-pancakes"
    assert plan.meals["2026-10-13"].recipe_id == "r-omelette"
    assert plan.meals["2026-10-14"].recipe_id == "r-tacos"
    assert "2026-10-15" not in plan.meals


def test_recipe_parser_uses_ai_client() -> None:
    draft = _make_household(StubAIClient([])).recipe_parser.parse("soup")
    assert draft.name == "Stub Soup"


def test_snapshot_round_trip(tmp_path: Path) -> None:
    household = _make_household()
    household.shopping.add("Milk")
    household.inventory.use_item("inv-rice", 0.5)

    out = tmp_path / "household.json"
    write_snapshot(household.snapshot(), out)
    reloaded = read_snapshot(out)

    assert sorted(i.name for i in reloaded.shopping) == ["Bread", "Milk"]
    rice = next(i for i in reloaded.inventory if i.id == "inv-rice")
    assert rice.quantity == 1.5
    assert reloaded.meal_plans[0].week_start == date(2026, 10, 11)
    assert reloaded.recipes == household.recipes.recipes()
    assert reloaded.calendar_id == "family"
    assert reloaded.agenda == household.agenda.items()
    assert reloaded.agenda[1].resolved_at == datetime(2026, 10, 5, 20, 0)
