"""
Meal suggestion engine.

Scores recipes against the current inventory and the week's planning
constraints, then fills a week of dinner slots greedily, one day at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from hearth.core.interfaces import IngredientMatcher, InventoryStore, MealPlanStore, RecipeStore
from hearth.core.matching import ingredient_match
from hearth.core.models import (
    IngredientMatch,
    InventoryItem,
    MealPlan,
    Recipe,
    ScoredRecipe,
    Suggestion,
    WeekSuggestions,
)
from hearth.core.weeks import DEFAULT_DAYS, date_for_label

logger = logging.getLogger(__name__)

MUST_INCLUDE_BONUS = 1000
INVENTORY_MATCH_WEIGHT = 3
USE_UP_BONUS = 200
CATEGORY_BONUS = 150
FAVORITE_BONUS = 50
QUICK_BONUS = 20
QUICK_COOK_MINUTES = 30

ON_HAND_PERCENT = 80
AVAILABLE_PERCENT = 50

MAX_ALTERNATIVES = 3
NO_SUGGESTIONS = "No suggestions available"
MANUALLY_SELECTED = "Manually selected"


@dataclass(frozen=True)
class ScoringContext:
    """Everything a score depends on besides the recipe itself."""

    inventory: list[InventoryItem] = field(default_factory=list)
    must_include: frozenset[str] = frozenset()
    category_requirements: dict[str, int] = field(default_factory=dict)
    use_up_names: list[str] = field(default_factory=list)


@dataclass
class WeekConstraints:
    days_needed: list[str] = field(default_factory=lambda: list(DEFAULT_DAYS))
    must_include: list[str] = field(default_factory=list)
    """Recipe ids, placed first in this order."""

    category_requirements: dict[str, int] = field(default_factory=dict)
    use_up_items: list[str] = field(default_factory=list)
    """Inventory item ids the week should consume."""


class SuggestionEngine:
    """
    Ranks recipes and generates weekly suggestions.

    The engine reads snapshots from the recipe and inventory stores and never
    writes to them.
    """

    def __init__(
        self,
        recipes: RecipeStore,
        inventory: InventoryStore,
        matcher: IngredientMatcher,
        pool_size: int = 5,
    ) -> None:
        self.recipes = recipes
        self.inventory = inventory
        self.matcher = matcher
        self.pool_size = pool_size

    def context(
        self,
        must_include: Iterable[str] = (),
        category_requirements: Optional[dict[str, int]] = None,
        use_up_items: Iterable[str] = (),
    ) -> ScoringContext:
        """Snapshot inventory and resolve use-up item ids to names."""
        items = list(self.inventory.items())
        by_id = {item.id: item for item in items}
        use_up_names = [by_id[i].name for i in use_up_items if i in by_id]
        return ScoringContext(
            inventory=items,
            must_include=frozenset(must_include),
            category_requirements=dict(category_requirements or {}),
            use_up_names=use_up_names,
        )

    def score(self, recipe: Recipe, context: ScoringContext) -> ScoredRecipe:
        """
        Additive score for one recipe.

        Args:
            recipe: Recipe to score
            context: Inventory snapshot and planning constraints

        Returns:
            The score, human-readable reasons, and the inventory match.
        """
        score = 0.0
        reasons: list[str] = []

        if recipe.id in context.must_include:
            score += MUST_INCLUDE_BONUS
            reasons.append("Must include")

        match = IngredientMatch()
        if context.inventory:
            match = ingredient_match(recipe.ingredients, context.inventory, self.matcher)
            score += match.percentage * INVENTORY_MATCH_WEIGHT

            if context.use_up_names and self._uses_any(recipe, context.use_up_names):
                score += USE_UP_BONUS
                reasons.append("Uses expiring items")

            if match.percentage >= ON_HAND_PERCENT:
                reasons.append(f"{match.percentage}% ingredients on hand")
            elif match.percentage >= AVAILABLE_PERCENT:
                reasons.append(f"{match.percentage}% ingredients available")

        if context.category_requirements.get(recipe.category):
            score += CATEGORY_BONUS
            reasons.append(f"Matches {recipe.category} requirement")

        if recipe.favorite:
            score += FAVORITE_BONUS
            reasons.append("Family favorite")

        if recipe.cook_time and recipe.cook_time <= QUICK_COOK_MINUTES:
            score += QUICK_BONUS

        return ScoredRecipe(recipe=recipe, score=score, reasons=reasons, inventory_match=match)

    def get_suggestions(
        self,
        use_up_items: Iterable[str] = (),
        category_requirements: Optional[dict[str, int]] = None,
        must_include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        max_results: int = 10,
    ) -> list[ScoredRecipe]:
        """Top-scoring recipes, best first; ties keep catalog order."""
        context = self.context(must_include, category_requirements, use_up_items)
        return self._rank(context, set(exclude), max_results)

    def generate_week(self, constraints: Optional[WeekConstraints] = None) -> WeekSuggestions:
        """
        Fill each requested day with one recipe.

        Must-include recipes are placed first, one per day in the order given
        with repeated ids collapsed; any beyond the number of days are dropped.
        Every other day gets the best remaining candidate, favoring categories
        whose quota is still open. Recipes are never repeated within a week.
        """
        constraints = constraints or WeekConstraints()
        days = list(constraints.days_needed)
        requirements = dict(constraints.category_requirements)
        usage = {category: 0 for category in requirements}
        used: set[str] = set()
        suggestions: list[Suggestion] = []

        catalog = {recipe.id: recipe for recipe in self.recipes.recipes()}
        must_include = [catalog[i] for i in dict.fromkeys(constraints.must_include) if i in catalog]
        if len(must_include) > len(days):
            logger.info(f"Dropping {len(must_include) - len(days)} must-include recipe(s): no free days")

        for day, recipe in zip(days, must_include):
            suggestions.append(Suggestion(day=day, recipe=recipe, locked=True, reason="Must include"))
            used.add(recipe.id)
            if recipe.category in usage:
                usage[recipe.category] += 1

        for day in days[len(suggestions):]:
            open_quota = {c: 1 for c, n in requirements.items() if usage[c] < n}
            context = self.context((), open_quota, constraints.use_up_items)
            ranked = self._rank(context, used, self.pool_size)

            if not ranked:
                suggestions.append(Suggestion(day=day, recipe=None, reason=NO_SUGGESTIONS))
                continue

            best = ranked[0]
            suggestions.append(
                Suggestion(
                    day=day,
                    recipe=best.recipe,
                    reason=", ".join(best.reasons) or "Suggested",
                    alternatives=[s.recipe for s in ranked[1 : 1 + MAX_ALTERNATIVES]],
                )
            )
            used.add(best.recipe.id)
            if best.recipe.category in usage:
                usage[best.recipe.category] += 1

        fulfilled = all(usage[c] >= n for c, n in requirements.items())
        logger.info(f"Generated {len(suggestions)} suggestion(s), quotas fulfilled: {fulfilled}")
        return WeekSuggestions(
            suggestions=suggestions,
            category_usage=usage,
            category_requirements=requirements,
            fulfilled=fulfilled,
        )

    def _rank(self, context: ScoringContext, exclude: set[str], limit: int) -> list[ScoredRecipe]:
        scored = [
            self.score(recipe, context)
            for recipe in self.recipes.recipes()
            if recipe.id not in exclude
        ]
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:limit]

    def _uses_any(self, recipe: Recipe, names: list[str]) -> bool:
        return any(
            self.matcher.matches(ingredient.name, name)
            for ingredient in recipe.ingredients
            for name in names
        )


def swap_suggestion(
    suggestions: list[Suggestion], index: int, recipe: Optional[Recipe]
) -> list[Suggestion]:
    """Return a copy with slot ``index`` replaced by ``recipe`` and unlocked."""
    updated = list(suggestions)
    if 0 <= index < len(updated):
        old = updated[index]
        updated[index] = replace(
            old,
            recipe=recipe,
            locked=False,
            reason=MANUALLY_SELECTED,
            swapped_from=old.recipe.name if old.recipe else None,
        )
    return updated


def toggle_lock(suggestions: list[Suggestion], index: int) -> list[Suggestion]:
    """Return a copy with slot ``index``'s lock flipped."""
    updated = list(suggestions)
    if 0 <= index < len(updated):
        updated[index] = replace(updated[index], locked=not updated[index].locked)
    return updated


def accept_suggestions(
    plans: MealPlanStore,
    plan: MealPlan,
    suggestions: list[Suggestion],
    meal_type: str = "dinner",
) -> MealPlan:
    """
    Write suggestions into ``plan``, keyed by each day label's date in the plan's week.

    Empty slots are skipped.

    Raises:
        ValueError: If a suggestion's day label is not a day of the week
    """
    for suggestion in suggestions:
        if suggestion.recipe is None:
            continue
        day = date_for_label(plan.week_start, suggestion.day)
        plan = plans.set_meal(plan.id, day.isoformat(), suggestion.recipe.id, meal_type)
    logger.info(f"Accepted suggestions into plan {plan.id}")
    return plan
