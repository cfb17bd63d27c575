"""Composition root: one household's stores and the components built on them."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from hearth.config import HearthSettings
from hearth.core.ai_backend import AIParsingClient
from hearth.core.categories import CategoryGuesser
from hearth.core.executor import CommandExecutor
from hearth.core.grocery import GroceryListGenerator
from hearth.core.interfaces import CalendarCollaborator, IngredientMatcher
from hearth.core.matching import VariationIngredientMatcher
from hearth.core.models import BatchResult, ExecutionResult, MealPlan, Suggestion
from hearth.core.parse_rules import RuleBasedIntentParser
from hearth.core.parser import IntentParser
from hearth.core.recipe_text import RecipeTextParser
from hearth.core.suggest import SuggestionEngine, WeekConstraints, accept_suggestions
from hearth.stores.calendar import RecordingCalendar
from hearth.stores.memory import (
    InMemoryAgendaStore,
    InMemoryInventoryStore,
    InMemoryLocationStore,
    InMemoryMealPlanStore,
    InMemoryRecipeStore,
    InMemoryShoppingStore,
    InMemoryTaskStore,
)
from hearth.stores.snapshot import HouseholdSnapshot

logger = logging.getLogger(__name__)


class Household:
    """
    Owns every store for one household and wires the parser, executor,
    suggestion engine and grocery generator to them.
    """

    def __init__(
        self,
        settings: Optional[HearthSettings] = None,
        ai_client: Optional[AIParsingClient] = None,
        calendar: Optional[CalendarCollaborator] = None,
        matcher: Optional[IngredientMatcher] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings or HearthSettings()
        self.clock = clock
        categories = CategoryGuesser(self.settings.templates_path)

        self.tasks = InMemoryTaskStore(clock=clock)
        self.shopping = InMemoryShoppingStore(categories, clock=clock)
        self.inventory = InMemoryInventoryStore(categories, clock=clock)
        self.recipes = InMemoryRecipeStore(clock=clock)
        self.locations = InMemoryLocationStore(clock=clock)
        self.meal_plans = InMemoryMealPlanStore(clock=clock)
        self.agenda = InMemoryAgendaStore(clock=clock)
        self.calendar = calendar or RecordingCalendar(self.settings.calendar_id)

        if ai_client is None and self.settings.ai_enabled:
            ai_client = AIParsingClient(
                self.settings.ai_endpoint or "",
                user_id=self.settings.ai_user_id,
                timeout=self.settings.ai_timeout_seconds,
            )
        self.ai_client = ai_client

        self.matcher = matcher or VariationIngredientMatcher(
            self.settings.templates_path, typo_threshold=self.settings.match_typo_threshold
        )
        self.parser = IntentParser(backend=ai_client, rules=RuleBasedIntentParser(clock=clock))
        self.executor = CommandExecutor(self.tasks, self.shopping, self.calendar, self.locations)
        self.suggestions = SuggestionEngine(
            self.recipes, self.inventory, self.matcher, pool_size=self.settings.suggestion_pool_size
        )
        self.grocery = GroceryListGenerator(self.matcher, categories)
        self.recipe_parser = RecipeTextParser(ai_client, categories)

    @classmethod
    def from_snapshot(cls, snapshot: HouseholdSnapshot, **kwargs: Any) -> Household:
        household = cls(**kwargs)
        household.load(snapshot)
        return household

    def load(self, snapshot: HouseholdSnapshot) -> None:
        self.tasks.load(snapshot.tasks)
        self.shopping.load(snapshot.shopping)
        self.inventory.load(snapshot.inventory)
        self.recipes.load(snapshot.recipes)
        self.locations.load(snapshot.locations)
        self.meal_plans.load(snapshot.meal_plans)
        self.agenda.load(snapshot.agenda)
        if snapshot.calendar_id and isinstance(self.calendar, RecordingCalendar):
            self.calendar.select(snapshot.calendar_id)

    def snapshot(self) -> HouseholdSnapshot:
        calendar_id = self.calendar.calendar_id if isinstance(self.calendar, RecordingCalendar) else None
        return HouseholdSnapshot(
            tasks=self.tasks.tasks(),
            shopping=self.shopping.items(),
            inventory=self.inventory.items(),
            recipes=self.recipes.recipes(),
            locations=self.locations.locations(),
            meal_plans=self.meal_plans.plans(),
            agenda=self.agenda.items(),
            calendar_id=calendar_id,
        )

    def handle_text(self, utterance: str) -> ExecutionResult:
        """Parse one utterance and execute it."""
        return self.executor.execute(self.parser.parse(utterance))

    def handle_document(self, text: str, filename: Optional[str] = None) -> BatchResult:
        """Extract every item from a document and execute them in order."""
        result = self.parser.parse_document(text, filename)
        return self.executor.execute_batch(result.items)

    def expiring_item_ids(self) -> list[str]:
        today = self.clock().date()
        return [i.id for i in self.inventory.get_expiring_soon(self.settings.expiring_soon_days, today)]

    def plan_week(self, constraints: Optional[WeekConstraints] = None) -> MealPlan:
        """
        Generate suggestions for the current week and save them as its plan.

        Without explicit constraints, items expiring soon are the use-up set.
        """
        if constraints is None:
            constraints = WeekConstraints(use_up_items=self.expiring_item_ids())
        week = self.suggestions.generate_week(constraints)
        plan = self.meal_plans.get_plan_for_week(self.clock().date())
        if plan is None:
            plan = self.meal_plans.create_plan(
                self.clock().date(),
                days_needed=constraints.days_needed,
                must_include_recipes=constraints.must_include,
                category_requirements=constraints.category_requirements,
                use_up_items=constraints.use_up_items,
            )
        return self.accept(plan, week.suggestions)

    def accept(self, plan: MealPlan, suggestions: list[Suggestion]) -> MealPlan:
        return accept_suggestions(self.meal_plans, plan, suggestions)
