"""Tests for the command line front end."""

import json
from pathlib import Path
from typing import Any

import pytest

from hearth.cli import main
from hearth.config import HearthSettings
from hearth.stores.snapshot import read_snapshot

FIXTURE = Path(__file__).parent / "fixtures" / "household.json"


def _settings() -> HearthSettings:
    return HearthSettings(_env_file=None)


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> Any:
    assert main(list(argv), settings=_settings()) == 0
    return json.loads(capsys.readouterr().out)


def test_parse_rules_only(capsys: pytest.CaptureFixture[str]) -> None:
    output = _run(capsys, "parse", "Dentist tomorrow at 3pm", "--now", "2026-10-14T09:00:00", "--rules-only")

    assert output["source"] == "rules"
    assert output["items"][0]["type"] == "event"
    assert output["items"][0]["title"] == "Dentist"
    assert output["items"][0]["date"] == "2026-10-15T15:00:00"


def test_run_executes_and_saves(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    out = tmp_path / "after.json"

    records = _run(capsys, "run", str(FIXTURE), "buy milk", "done with the vacuum", "--out", str(out))

    assert [r["result"]["action"] for r in records] == ["taskCreated", "completed"]
    assert records[1]["message"] == '"Vacuum" marked complete'

    saved = read_snapshot(out)
    vacuum = next(t for t in saved.tasks if t.id == "t-vacuum")
    assert vacuum.completed is True
    assert len(saved.tasks) == 3


def test_run_without_out_leaves_file(capsys: pytest.CaptureFixture[str]) -> None:
    before = FIXTURE.read_text(encoding="utf-8")
    _run(capsys, "run", str(FIXTURE), "buy milk")
    assert FIXTURE.read_text(encoding="utf-8") == before


def test_document_without_ai_fails(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    document = tmp_path / "newsletter.txt"
    document.write_text("Picture day is Thursday", encoding="utf-8")

    assert main(["run", str(FIXTURE), "--document", str(document)], settings=_settings()) == 1
    assert "error:" in capsys.readouterr().err


def test_suggest_with_quota(capsys: pytest.CaptureFixture[str]) -> None:
    output = _run(capsys, "suggest", str(FIXTURE), "--days", "Mon", "Tue", "--require", "Mexican=1", "--use-up")

    week = output["week"]
    assert [s["recipe"]["id"] for s in week["suggestions"]] == ["r-tacos", "r-pancakes"]
    assert week["fulfilled"] is True
    assert output["message"] == "2 of 2 days planned"


def test_suggest_rejects_bad_requirement(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["suggest", str(FIXTURE), "--require", "Mexican"], settings=_settings()) == 1
    assert "CATEGORY=COUNT" in capsys.readouterr().err


def test_suggest_accept_saves_plan(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    out = tmp_path / "after.json"

    plan = _run(capsys, "suggest", str(FIXTURE), "--days", "Mon", "--use-up", "--accept", "--out", str(out))

    assert plan["meals"]
    saved = read_snapshot(out)
    assert plan["id"] in {p.id for p in saved.meal_plans}


def test_grocery_for_week(capsys: pytest.CaptureFixture[str]) -> None:
    entries = _run(capsys, "grocery", str(FIXTURE), "--week", "2026-10-14")

    assert [e["name"] for e in entries] == ["flour", "onion", "eggs"]
    eggs = entries[2]
    assert eggs["quantity"] == 5
    assert eggs["have"] is True
    assert eggs["inventory_quantity"] == 4
    assert eggs["contributing_recipes"] == ["Pancakes", "Omelette"]


def test_grocery_add_to_shopping_list(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    out = tmp_path / "after.json"

    _run(capsys, "grocery", str(FIXTURE), "--week", "2026-10-14", "--add", "--out", str(out))

    saved = read_snapshot(out)
    assert sorted(i.name for i in saved.shopping) == ["Bread", "flour", "onion"]


def test_grocery_without_plan(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["grocery", str(FIXTURE), "--week", "2026-11-04"], settings=_settings()) == 1
    assert "No meal plan" in capsys.readouterr().err


def test_recipe_basic_parse(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    recipe_file = tmp_path / "chili.txt"
    recipe_file.write_text("Chili\nIngredients\n- 1 lb ground beef\n- 2 cans beans\n", encoding="utf-8")

    draft = _run(capsys, "recipe", str(recipe_file))

    assert draft["name"] == "Chili"
    assert [i["name"] for i in draft["ingredients"]] == ["ground beef", "beans"]


def test_recipe_saved_into_household(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    recipe_file = tmp_path / "chili.txt"
    recipe_file.write_text("Chili\nIngredients\n- 2 cans beans\n", encoding="utf-8")
    out = tmp_path / "after.json"

    recipe = _run(capsys, "recipe", str(recipe_file), "--household", str(FIXTURE), "--out", str(out))

    saved = read_snapshot(out)
    assert recipe["id"] in {r.id for r in saved.recipes}
    assert len(saved.recipes) == 4
