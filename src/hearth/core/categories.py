"""Keyword-based guessing of grocery aisles and storage locations."""

from __future__ import annotations

from pathlib import Path

from hearth.core.models import StorageLocation
from hearth.core.templates import keyword_table, load_yaml, normalize_text

DEFAULT_CATEGORY = "Other"


class CategoryGuesser:
    """
    Deterministic keyword lookup over the tables in categories.yaml.

    Tables are checked in file order and the first keyword contained in the
    name wins, so more specific aisles must be listed before generic ones.
    """

    def __init__(self, templates_path: str | Path | None = None) -> None:
        data = load_yaml("categories.yaml", templates_path)
        self.grocery_categories = keyword_table(data, "grocery_categories")
        self.ingredient_categories = keyword_table(data, "ingredient_categories")
        self.storage_locations = keyword_table(data, "storage_locations")
        self.category_order = [str(c) for c in data.get("shopping_category_order") or []]

    def grocery_category(self, name: str) -> str:
        return self._first_hit(name, self.grocery_categories) or DEFAULT_CATEGORY

    def ingredient_category(self, name: str) -> str:
        return self._first_hit(name, self.ingredient_categories) or DEFAULT_CATEGORY

    def storage_location(self, name: str) -> StorageLocation:
        hit = self._first_hit(name, self.storage_locations)
        if hit is None:
            return StorageLocation.PANTRY
        try:
            return StorageLocation(hit)
        except ValueError:
            return StorageLocation.PANTRY

    def order_key(self, category: str) -> tuple[int, str]:
        """Sort key that puts known aisles in walking order and the rest after."""
        if category in self.category_order:
            return (self.category_order.index(category), category)
        return (len(self.category_order), category)

    def _first_hit(self, name: str, table: dict[str, list[str]]) -> str | None:
        lowered = normalize_text(name or "")
        if not lowered:
            return None
        for category, keywords in table.items():
            if any(keyword in lowered for keyword in keywords):
                return category
        return None
