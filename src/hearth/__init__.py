"""Hearth: household command interpreter and meal planning engine."""

__version__ = "0.1.0"

# Core exports
from hearth.core.models import (
    Intent,
    IntentType,
    ParseResult,
    ExecutionResult,
    BatchResult,
    Recipe,
    InventoryItem,
    MealPlan,
    Suggestion,
    GroceryListEntry,
)
from hearth.core.interfaces import (
    IngredientMatcher,
    IntentBackend,
    CalendarCollaborator,
)
from hearth.core.errors import HearthError, AIBackendError, CalendarError
from hearth.core.parser import IntentParser
from hearth.core.parse_rules import RuleBasedIntentParser
from hearth.core.executor import CommandExecutor
from hearth.core.suggest import SuggestionEngine, WeekConstraints
from hearth.core.grocery import GroceryListGenerator
from hearth.core.matching import VariationIngredientMatcher
from hearth.household import Household

__all__ = [
    "Intent",
    "IntentType",
    "ParseResult",
    "ExecutionResult",
    "BatchResult",
    "Recipe",
    "InventoryItem",
    "MealPlan",
    "Suggestion",
    "GroceryListEntry",
    "IngredientMatcher",
    "IntentBackend",
    "CalendarCollaborator",
    "HearthError",
    "AIBackendError",
    "CalendarError",
    "IntentParser",
    "RuleBasedIntentParser",
    "CommandExecutor",
    "SuggestionEngine",
    "WeekConstraints",
    "GroceryListGenerator",
    "VariationIngredientMatcher",
    "Household",
]
