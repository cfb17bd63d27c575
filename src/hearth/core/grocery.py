"""Grocery list generation from planned meals or unsaved suggestions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from hearth.core.categories import CategoryGuesser
from hearth.core.interfaces import IngredientMatcher, ShoppingStore
from hearth.core.matching import find_in_inventory
from hearth.core.models import (
    GroceryListEntry,
    InventoryItem,
    MealPlan,
    PlannedMeal,
    Recipe,
    Suggestion,
)

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    name: str
    quantity: float
    unit: Optional[str]
    category: str
    recipes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PlanStats:
    total_meals: int
    planned_days: int
    category_counts: dict[str, int]
    total_ingredients: int
    ingredients_on_hand: int
    ingredients_to_buy: int


class GroceryListGenerator:
    """
    Builds a deduplicated shopping list for a set of recipes.

    Ingredients are merged by lower-cased name. The first occurrence fixes
    the display name, unit and category; quantities add up, counting a
    missing quantity as 1. Output is sorted items-to-buy first, then by
    category, and is identical for identical inputs.
    """

    def __init__(self, matcher: IngredientMatcher, categories: Optional[CategoryGuesser] = None) -> None:
        self.matcher = matcher
        self.categories = categories or CategoryGuesser()

    def generate(
        self,
        meals: dict[str, PlannedMeal],
        recipes: Iterable[Recipe],
        inventory: Iterable[InventoryItem],
    ) -> list[GroceryListEntry]:
        """
        Grocery list for a plan's meals.

        Args:
            meals: ISO date -> planned meal; walked in date order
            recipes: Recipe catalog snapshot
            inventory: Inventory snapshot

        Returns:
            One entry per distinct ingredient.
        """
        catalog = {recipe.id: recipe for recipe in recipes}
        planned: list[Recipe] = []
        for day in sorted(meals):
            recipe_id = meals[day].recipe_id
            if not recipe_id:
                continue
            recipe = catalog.get(recipe_id)
            if recipe is None:
                logger.warning(f"Meal on {day} references unknown recipe {recipe_id}")
                continue
            planned.append(recipe)
        return self._build(planned, list(inventory))

    def generate_for_plan(
        self, plan: MealPlan, recipes: Iterable[Recipe], inventory: Iterable[InventoryItem]
    ) -> list[GroceryListEntry]:
        return self.generate(plan.meals, recipes, inventory)

    def generate_from_suggestions(
        self, suggestions: Iterable[Suggestion], inventory: Iterable[InventoryItem]
    ) -> list[GroceryListEntry]:
        """Grocery list for suggestions that have not been saved to a plan yet."""
        planned = [s.recipe for s in suggestions if s.recipe is not None]
        return self._build(planned, list(inventory))

    def add_to_shopping_list(
        self,
        entries: Iterable[GroceryListEntry],
        store: ShoppingStore,
        only_missing: bool = True,
    ) -> int:
        """Commit entries to the shopping list; returns how many were added."""
        to_add = [e for e in entries if e.need_to_buy or not only_missing]
        for entry in to_add:
            store.add(
                entry.name,
                quantity=entry.quantity,
                unit=entry.unit,
                category=entry.category,
                notes=f"For: {', '.join(entry.contributing_recipes)}",
            )
        logger.info(f"Added {len(to_add)} grocery item(s) to the shopping list")
        return len(to_add)

    def plan_stats(
        self, plan: MealPlan, recipes: Iterable[Recipe], inventory: Iterable[InventoryItem]
    ) -> PlanStats:
        catalog = {recipe.id: recipe for recipe in recipes}
        category_counts: dict[str, int] = {}
        for meal in plan.meals.values():
            recipe = catalog.get(meal.recipe_id or "")
            if recipe is not None and recipe.category:
                category_counts[recipe.category] = category_counts.get(recipe.category, 0) + 1

        entries = self.generate(plan.meals, catalog.values(), inventory)
        return PlanStats(
            total_meals=len(plan.meals),
            planned_days=len(plan.meals),
            category_counts=category_counts,
            total_ingredients=len(entries),
            ingredients_on_hand=sum(1 for e in entries if e.have),
            ingredients_to_buy=sum(1 for e in entries if e.need_to_buy),
        )

    def _build(self, planned: list[Recipe], inventory: list[InventoryItem]) -> list[GroceryListEntry]:
        merged: dict[str, _Accumulator] = {}
        for recipe in planned:
            for ingredient in recipe.ingredients:
                key = ingredient.name.lower()
                amount = ingredient.quantity or 1
                if key in merged:
                    merged[key].quantity += amount
                    merged[key].recipes.append(recipe.name)
                else:
                    merged[key] = _Accumulator(
                        name=ingredient.name,
                        quantity=amount,
                        unit=ingredient.unit,
                        category=ingredient.category
                        or self.categories.grocery_category(ingredient.name),
                        recipes=[recipe.name],
                    )

        entries = []
        for acc in merged.values():
            stocked = find_in_inventory(acc.name, inventory, self.matcher)
            entries.append(
                GroceryListEntry(
                    name=acc.name,
                    quantity=acc.quantity,
                    unit=acc.unit,
                    category=acc.category,
                    contributing_recipes=acc.recipes,
                    have=stocked is not None,
                    need_to_buy=stocked is None,
                    inventory_quantity=stocked.quantity if stocked else 0.0,
                )
            )

        entries.sort(key=lambda e: (not e.need_to_buy, e.category))
        return entries


def update_ingredient_checks(
    entries: Iterable[GroceryListEntry], checked_names: Iterable[str]
) -> list[GroceryListEntry]:
    """Override have/need_to_buy from the names the user ticked as on hand."""
    checked = {name.lower() for name in checked_names}
    return [
        replace(entry, have=entry.name.lower() in checked, need_to_buy=entry.name.lower() not in checked)
        for entry in entries
    ]
