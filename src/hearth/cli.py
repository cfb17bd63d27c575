"""Command line front end over a JSON household snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from dateutil import parser as date_parser

from hearth.config import HearthSettings, get_settings
from hearth.core.errors import HearthError
from hearth.core.messages import describe, describe_week, summarize_batch
from hearth.core.suggest import WeekConstraints
from hearth.core.weeks import DEFAULT_DAYS
from hearth.household import Household
from hearth.stores.snapshot import HouseholdSnapshot, dataclass_to_dict, read_snapshot, write_snapshot


def main(argv: list[str] | None = None, settings: Optional[HearthSettings] = None) -> int:
    parser = argparse.ArgumentParser(prog="hearth")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse text into intents")
    parse_cmd.add_argument("text")
    parse_cmd.add_argument("--now", help="Reference time (ISO 8601) for relative dates")
    parse_cmd.add_argument("--rules-only", action="store_true", help="Skip the AI backend")

    run_cmd = subparsers.add_parser("run", help="Parse and execute commands against a household")
    run_cmd.add_argument("household")
    run_cmd.add_argument("text", nargs="*")
    run_cmd.add_argument("--document", help="Text file to extract items from (needs the AI backend)")
    run_cmd.add_argument("--out", help="Write the updated household here")

    suggest_cmd = subparsers.add_parser("suggest", help="Suggest a week of meals")
    suggest_cmd.add_argument("household")
    suggest_cmd.add_argument("--days", nargs="+", default=list(DEFAULT_DAYS))
    suggest_cmd.add_argument("--must-include", nargs="*", default=[], metavar="RECIPE_ID")
    suggest_cmd.add_argument("--require", nargs="*", default=[], metavar="CATEGORY=COUNT")
    suggest_cmd.add_argument("--use-up", nargs="*", default=None, metavar="ITEM_ID")
    suggest_cmd.add_argument("--accept", action="store_true", help="Save the suggestions as this week's plan")
    suggest_cmd.add_argument("--out", help="Write the updated household here")

    grocery_cmd = subparsers.add_parser("grocery", help="Grocery list for a week's meal plan")
    grocery_cmd.add_argument("household")
    grocery_cmd.add_argument("--week", help="Any date in the week (default: this week)")
    grocery_cmd.add_argument("--add", action="store_true", help="Add the list to the shopping list")
    grocery_cmd.add_argument("--all", action="store_true", help="With --add, include items on hand")
    grocery_cmd.add_argument("--out", help="Write the updated household here")

    recipe_cmd = subparsers.add_parser("recipe", help="Parse recipe text")
    recipe_cmd.add_argument("file")
    recipe_cmd.add_argument("--household", help="Save the recipe into this household")
    recipe_cmd.add_argument("--out", help="Write the updated household here")

    args = parser.parse_args(argv)
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return _dispatch(args, settings)
    except (HearthError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _dispatch(args: argparse.Namespace, settings: HearthSettings) -> int:
    if args.command == "parse":
        if args.rules_only:
            settings = settings.model_copy(update={"ai_endpoint": None})
        household = Household(settings)
        now = _parse_datetime(args.now)
        result = household.parser.parse_all(args.text, now)
        _print_json(dataclass_to_dict(result))
        return 0

    if args.command == "run":
        household = _load(args.household, settings)
        records = []
        for text in args.text:
            result = household.handle_text(text)
            records.append({"input": text, "result": dataclass_to_dict(result), "message": describe(result)})
        if args.document:
            document = Path(args.document).read_text(encoding="utf-8")
            batch = household.handle_document(document, Path(args.document).name)
            records.append(
                {
                    "input": args.document,
                    "batch": dataclass_to_dict(batch),
                    "message": summarize_batch(batch),
                }
            )
        _save(household, args.out)
        _print_json(records)
        return 0

    if args.command == "suggest":
        household = _load(args.household, settings)
        use_up = args.use_up if args.use_up is not None else household.expiring_item_ids()
        constraints = WeekConstraints(
            days_needed=args.days,
            must_include=args.must_include,
            category_requirements=_parse_requirements(args.require),
            use_up_items=use_up,
        )
        if args.accept:
            plan = household.plan_week(constraints)
            _save(household, args.out)
            _print_json(dataclass_to_dict(plan))
            return 0
        week = household.suggestions.generate_week(constraints)
        _print_json({"week": dataclass_to_dict(week), "message": describe_week(week)})
        return 0

    if args.command == "grocery":
        household = _load(args.household, settings)
        week = _parse_datetime(args.week)
        day = week.date() if week else household.clock().date()
        plan = household.meal_plans.get_plan_for_week(day)
        if plan is None:
            raise ValueError(f"No meal plan for the week of {day.isoformat()}")
        entries = household.grocery.generate(plan.meals, household.recipes.recipes(), household.inventory.items())
        if args.add:
            added = household.grocery.add_to_shopping_list(entries, household.shopping, only_missing=not args.all)
            logging.getLogger(__name__).info(f"{added} item(s) added")
            _save(household, args.out)
        _print_json(dataclass_to_dict(entries))
        return 0

    if args.command == "recipe":
        text = Path(args.file).read_text(encoding="utf-8")
        household = _load(args.household, settings) if args.household else Household(settings)
        draft = household.recipe_parser.parse(text)
        if args.household:
            recipe = household.recipes.create(**draft.as_fields())
            _save(household, args.out)
            _print_json(dataclass_to_dict(recipe))
        else:
            _print_json(dataclass_to_dict(draft))
        return 0

    return 1


def _load(path: str, settings: HearthSettings) -> Household:
    return Household.from_snapshot(read_snapshot(path), settings=settings)


def _save(household: Household, out: Optional[str]) -> None:
    if out:
        snapshot: HouseholdSnapshot = household.snapshot()
        write_snapshot(snapshot, out)


def _parse_requirements(values: list[str]) -> dict[str, int]:
    requirements: dict[str, int] = {}
    for value in values:
        category, sep, count = value.rpartition("=")
        if not sep or not category:
            raise ValueError(f"Expected CATEGORY=COUNT, got {value!r}")
        requirements[category] = int(count)
    return requirements


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, TypeError):
        return None


if __name__ == "__main__":
    raise SystemExit(main())
