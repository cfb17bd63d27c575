"""
Recipe text parsing.

Recipes come either from the AI backend (a loosely shaped JSON object) or
from pasted plain text with "Ingredients" / "Instructions" sections. Both
paths end in the same ``RecipeDraft``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from hearth.core.categories import CategoryGuesser
from hearth.core.errors import AIBackendError
from hearth.core.interfaces import RecipeBackend
from hearth.core.models import Ingredient
from hearth.core.templates import load_yaml

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Recipe"
IMPORTED = "Imported Recipe"
DEFAULT_SERVINGS = 4

DECIMAL = re.compile(r"^\d+(?:\.\d+)?$")
FRACTION = re.compile(r"^(\d+)\s*/\s*(\d+)$")
MIXED = re.compile(r"^(\d+)\s*[-\s]\s*(\d+)\s*/\s*(\d+)$")
LEADING_QUANTITY = re.compile(
    r"^\s*(\d+\s*[-\s]\s*\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+(?:\.\d+)?)\s*(.*)$"
)
LIST_MARKER = re.compile(r"^\s*(?:[-*•]+|\d+[.)](?!\d))\s*")
RECIPE_LABEL = re.compile(r"recipe:?", re.IGNORECASE)
INSTRUCTION_HEADERS = ("instruction", "direction", "method", "step")


def parse_fraction(value: Any) -> Optional[float]:
    """
    Parse "2", "2.5", "1/2", "1 1/2" or "1-1/2" without eval.

    Returns:
        The number, or None for empty input, a zero denominator, or text
        that does not start with a number.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = str(value).strip()
    if not cleaned:
        return None

    if DECIMAL.match(cleaned):
        return float(cleaned)

    fraction = FRACTION.match(cleaned)
    if fraction:
        numerator, denominator = int(fraction.group(1)), int(fraction.group(2))
        return numerator / denominator if denominator else None

    mixed = MIXED.match(cleaned)
    if mixed:
        whole, numerator, denominator = (int(g) for g in mixed.groups())
        return whole + numerator / denominator if denominator else None

    leading = re.match(r"^\d+(?:\.\d+)?", cleaned)
    return float(leading.group(0)) if leading else None


@dataclass
class RecipeDraft:
    """A parsed recipe that has not been saved yet."""

    name: str = UNTITLED
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: str = ""
    servings: int = DEFAULT_SERVINGS
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    category: str = "Uncategorized"
    tags: list[str] = field(default_factory=list)
    source_url: Optional[str] = None

    def as_fields(self) -> dict[str, Any]:
        """Keyword arguments for ``RecipeStore.create``."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _minutes(value: Any) -> Optional[int]:
    number = parse_fraction(value)
    return int(number) if number else None


class RecipeTextParser:
    """
    Turns recipe text into a ``RecipeDraft``.

    ``parse`` asks the AI backend first and falls back to ``basic_parse``
    when the backend is missing or fails.
    """

    def __init__(
        self,
        backend: Optional[RecipeBackend] = None,
        categories: Optional[CategoryGuesser] = None,
        templates_path: str | Path | None = None,
    ) -> None:
        self.backend = backend
        self.categories = categories or CategoryGuesser(templates_path)
        units = load_yaml("units.yaml", templates_path).get("recipe_units") or []
        self.units = {str(u).lower() for u in units}

    def parse(self, text: str) -> RecipeDraft:
        if self.backend is not None:
            try:
                return self.normalize(self.backend.parse_recipe(text))
            except (AIBackendError, ValueError) as exc:
                logger.warning(f"AI recipe parsing failed, using basic parser: {exc}")
        return self.basic_parse(text)

    def parse_ingredient(self, text: str) -> Ingredient:
        """Split "1 1/2 cups flour" into quantity, unit and name."""
        raw = text.strip()
        quantity = None
        rest = raw
        leading = LEADING_QUANTITY.match(raw)
        if leading:
            quantity = parse_fraction(leading.group(1))
            rest = leading.group(2).strip()

        unit = None
        first, _, remainder = rest.partition(" ")
        if first.lower().rstrip(".") in self.units and remainder.strip():
            unit = first.lower().rstrip(".")
            rest = remainder.strip()

        name = rest or raw
        return Ingredient(
            name=name,
            quantity=quantity,
            unit=unit,
            category=self.categories.ingredient_category(name),
        )

    def normalize(self, data: dict[str, Any]) -> RecipeDraft:
        """
        Map an AI response onto a draft, tolerating its alternate key names.

        Raises:
            ValueError: If ``data`` is not a mapping
        """
        if not isinstance(data, dict):
            raise ValueError(f"Recipe data must be an object, got {type(data).__name__}")

        ingredients = []
        for raw in data.get("ingredients") or []:
            if isinstance(raw, str):
                if raw.strip():
                    ingredients.append(self.parse_ingredient(raw))
                continue
            if not isinstance(raw, dict):
                continue
            name = str(raw.get("name") or raw.get("item") or raw.get("ingredient") or "").strip()
            ingredients.append(
                Ingredient(
                    name=name,
                    quantity=parse_fraction(raw.get("quantity") or raw.get("amount")),
                    unit=raw.get("unit") or None,
                    category=raw.get("category") or self.categories.ingredient_category(name),
                )
            )

        servings = parse_fraction(data.get("servings") or data.get("serves"))
        return RecipeDraft(
            name=str(data.get("name") or data.get("title") or UNTITLED),
            ingredients=ingredients,
            instructions=str(data.get("instructions") or data.get("directions") or ""),
            servings=max(1, int(servings)) if servings else DEFAULT_SERVINGS,
            prep_time=_minutes(data.get("prepTime") or data.get("prep_time")),
            cook_time=_minutes(data.get("cookTime") or data.get("cook_time")),
            category=str(data.get("category") or "Uncategorized"),
            tags=[str(t) for t in data.get("tags") or []],
            source_url=data.get("sourceUrl") or data.get("source_url") or data.get("source") or None,
        )

    def basic_parse(self, text: str) -> RecipeDraft:
        """
        Section-based parse of plain text.

        The first line (or a line mentioning "recipe") names the recipe. Lines
        after an "ingredients" header are ingredients; lines after an
        "instructions" / "directions" / "method" / "steps" header are steps.
        """
        draft = RecipeDraft(name=IMPORTED)
        lines = [line for line in text.splitlines() if line.strip()]
        section = None
        steps: list[str] = []

        for index, line in enumerate(lines):
            lowered = line.strip().lower()

            if draft.name == IMPORTED and (index == 0 or "recipe" in lowered):
                draft.name = RECIPE_LABEL.sub("", line).strip() or IMPORTED
                continue

            if "ingredient" in lowered:
                section = "ingredients"
                continue
            if any(header in lowered for header in INSTRUCTION_HEADERS):
                section = "instructions"
                continue

            cleaned = LIST_MARKER.sub("", line).strip()
            if not cleaned:
                continue
            if section == "ingredients":
                draft.ingredients.append(self.parse_ingredient(cleaned))
            elif section == "instructions":
                steps.append(cleaned)

        draft.instructions = "\n".join(steps)
        return draft
