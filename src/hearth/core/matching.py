"""Fuzzy ingredient matching against what the household has on hand."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterable, Optional

from rapidfuzz import fuzz

from hearth.core.interfaces import IngredientMatcher
from hearth.core.models import Ingredient, IngredientMatch, InventoryItem
from hearth.core.templates import keyword_table, load_yaml, normalize_text

logger = logging.getLogger(__name__)


class VariationIngredientMatcher:
    """
    Default matcher: exact name, substring either way, plural/synonym variations.

    Variations come from ingredient_variations.yaml. An opt-in last tier
    accepts near-identical spellings ("tomatos") when the rapidfuzz ratio
    clears ``typo_threshold``; it is off while the threshold is None.
    """

    def __init__(
        self,
        templates_path: str | Path | None = None,
        typo_threshold: Optional[float] = None,
    ) -> None:
        data = load_yaml("ingredient_variations.yaml", templates_path)
        self.variations = keyword_table(data, "variations")
        self.typo_threshold = typo_threshold

    def variations_for(self, name: str) -> list[str]:
        lowered = normalize_text(name)
        found = [lowered]
        if lowered.endswith("s"):
            found.append(lowered[:-1])
        else:
            found.append(lowered + "s")

        for base, alternatives in self.variations.items():
            if base in lowered or any(alt in lowered for alt in alternatives):
                found.append(base)
                found.extend(alternatives)

        return [v for v in dict.fromkeys(found) if v]

    def matches(self, query_name: str, candidate_name: str) -> bool:
        query = normalize_text(query_name or "")
        candidate = normalize_text(candidate_name or "")
        if not query or not candidate:
            return False

        if query == candidate:
            return True
        if candidate in query or query in candidate:
            return True
        if any(v in candidate or candidate in v for v in self.variations_for(query)):
            return True
        if self.typo_threshold is not None:
            return fuzz.ratio(query, candidate) >= self.typo_threshold
        return False


def find_in_inventory(
    name: str, items: Iterable[InventoryItem], matcher: IngredientMatcher
) -> Optional[InventoryItem]:
    """Return the first inventory item that satisfies ``name``, if any."""
    for item in items:
        if matcher.matches(name, item.name):
            logger.debug(f"Inventory match: '{name}' -> '{item.name}'")
            return item
    return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def ingredient_match(
    ingredients: list[Ingredient], items: list[InventoryItem], matcher: IngredientMatcher
) -> IngredientMatch:
    """Count how many of ``ingredients`` are on hand, as a whole percentage."""
    total = len(ingredients)
    if total == 0:
        return IngredientMatch(have=0, total=0, percentage=0)
    have = sum(1 for ing in ingredients if find_in_inventory(ing.name, items, matcher))
    return IngredientMatch(have=have, total=total, percentage=round_half_up(have / total * 100))
