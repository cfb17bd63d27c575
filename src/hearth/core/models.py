"""Core data models: intents, execution results, household entities and derived views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Union


class IntentType(str, Enum):
    """Kinds of request the interpreter understands."""

    EVENT = "event"
    TASK = "task"
    TODO = "todo"
    SHOPPING = "shopping"
    COMPLETE = "complete"
    LIST = "list"
    UNKNOWN = "unknown"


class Frequency(str, Enum):
    """Recurrence frequency for repeating tasks and events."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class StorageLocation(str, Enum):
    """Where an inventory item is kept."""

    FREEZER = "Freezer"
    REFRIGERATOR = "Refrigerator"
    PANTRY = "Pantry"


class AgendaPriority(str, Enum):
    """Urgency of a household meeting topic."""

    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class ResultAction(str, Enum):
    """Tag carried by every execution result."""

    EVENT_CREATED = "eventCreated"
    TASK_CREATED = "taskCreated"
    SHOPPING_ADDED = "shoppingAdded"
    COMPLETED = "completed"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "notFound"
    LIST = "list"
    SKIPPED = "skipped"
    UNKNOWN = "unknown"


def _check_recurrence(recurring: bool, frequency: Optional[Frequency]) -> None:
    if recurring and frequency is None:
        raise ValueError("recurring intents need a frequency")
    if frequency is not None and not recurring:
        raise ValueError("frequency is only valid on recurring intents")


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EventIntent:
    """A calendar event request."""

    title: Optional[str] = None
    raw_text: str = ""
    date: Optional[datetime] = None
    """Start of the event. Midnight of the day when all_day is set."""

    location: Optional[str] = None
    all_day: bool = True
    """True when no time-of-day was resolved while parsing."""

    recurring: bool = False
    frequency: Optional[Frequency] = None
    type: IntentType = field(default=IntentType.EVENT, init=False)

    def __post_init__(self) -> None:
        _check_recurrence(self.recurring, self.frequency)


@dataclass(frozen=True)
class TaskIntent:
    """A task or todo request. ``type`` is either TASK or TODO."""

    title: Optional[str] = None
    raw_text: str = ""
    type: IntentType = IntentType.TASK
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    recurring: bool = False
    frequency: Optional[Frequency] = None
    needs_notification: bool = False

    def __post_init__(self) -> None:
        if self.type not in (IntentType.TASK, IntentType.TODO):
            raise ValueError(f"TaskIntent type must be task or todo, got {self.type}")
        _check_recurrence(self.recurring, self.frequency)


@dataclass(frozen=True)
class ShoppingIntent:
    """An item to add to the shopping list."""

    title: Optional[str] = None
    raw_text: str = ""
    quantity: Optional[float] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    type: IntentType = field(default=IntentType.SHOPPING, init=False)


@dataclass(frozen=True)
class CompleteIntent:
    """Mark an existing task done; ``query`` is matched against task titles."""

    query: Optional[str] = None
    title: Optional[str] = None
    raw_text: str = ""
    type: IntentType = field(default=IntentType.COMPLETE, init=False)


@dataclass(frozen=True)
class ListIntent:
    """Show pending tasks."""

    title: Optional[str] = None
    raw_text: str = ""
    type: IntentType = field(default=IntentType.LIST, init=False)


@dataclass(frozen=True)
class UnknownIntent:
    """Anything the parser could not place."""

    title: Optional[str] = None
    raw_text: str = ""
    type: IntentType = field(default=IntentType.UNKNOWN, init=False)


Intent = Union[EventIntent, TaskIntent, ShoppingIntent, CompleteIntent, ListIntent, UnknownIntent]


@dataclass
class ParseResult:
    """
    Envelope returned by the parser for one utterance or document.

    ``primary`` is the sole intent when exactly one was produced.
    """

    items: list[Intent] = field(default_factory=list)
    raw_text: str = ""
    source: str = "rules"
    """Which tier produced the items: 'ai' or 'rules'."""

    @property
    def primary(self) -> Optional[Intent]:
        if len(self.items) == 1:
            return self.items[0]
        return None


# ---------------------------------------------------------------------------
# Household entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    assignee: Optional[str] = None
    recurring: bool = False
    frequency: Optional[Frequency] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    due_date: Optional[str] = None
    """ISO calendar date, YYYY-MM-DD."""

    due_time: Optional[str] = None
    """Time of day, HH:MM."""

    needs_notification: bool = False
    previous_task_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ShoppingItem:
    id: str
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    category: str = "Other"
    notes: Optional[str] = None
    checked: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AgendaItem:
    """A topic queued for the next household meeting."""

    id: str
    topic: str
    description: str = ""
    priority: AgendaPriority = AgendaPriority.NORMAL
    resolved: bool = False
    added_by: Optional[str] = None
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


@dataclass(frozen=True)
class InventoryItem:
    """A stocked item. Quantity is always positive while the item exists."""

    id: str
    name: str
    quantity: float = 1.0
    unit: Optional[str] = None
    category: str = "Other"
    location: StorageLocation = StorageLocation.PANTRY
    expiration_date: Optional[date] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError(f"Inventory quantity must be positive, got {self.quantity}")


@dataclass(frozen=True)
class Ingredient:
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class Recipe:
    id: str
    name: str
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: str = ""
    servings: int = 4
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    category: str = "Uncategorized"
    favorite: bool = False
    tags: list[str] = field(default_factory=list)
    source_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.servings < 1:
            raise ValueError(f"Recipe servings must be at least 1, got {self.servings}")


@dataclass(frozen=True)
class SavedLocation:
    id: str
    name: str
    address: str
    keywords: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NewEvent:
    """Request payload for the calendar collaborator."""

    title: str
    start: datetime
    end: Optional[datetime] = None
    location: Optional[str] = None
    all_day: bool = False
    smart_reminder: bool = False
    saved_location_id: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    location: Optional[str] = None
    all_day: bool = False
    smart_reminder: bool = False
    saved_location_id: Optional[str] = None


@dataclass(frozen=True)
class PlannedMeal:
    recipe_id: Optional[str]
    meal_type: str = "dinner"
    set_at: Optional[datetime] = None


@dataclass(frozen=True)
class MealPlan:
    """One household's plan for the week starting ``week_start`` (a Sunday)."""

    id: str
    week_start: date
    meals: dict[str, PlannedMeal] = field(default_factory=dict)
    """ISO date -> planned meal. Sparse."""

    days_needed: list[str] = field(default_factory=list)
    must_include_recipes: list[str] = field(default_factory=list)
    category_requirements: dict[str, int] = field(default_factory=dict)
    use_up_items: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Execution results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EventCreated:
    event: CalendarEvent
    action: ResultAction = field(default=ResultAction.EVENT_CREATED, init=False)


@dataclass(frozen=True)
class TaskCreated:
    task: Task
    action: ResultAction = field(default=ResultAction.TASK_CREATED, init=False)


@dataclass(frozen=True)
class ShoppingAdded:
    item: ShoppingItem
    action: ResultAction = field(default=ResultAction.SHOPPING_ADDED, init=False)


@dataclass(frozen=True)
class Completed:
    task: Task
    action: ResultAction = field(default=ResultAction.COMPLETED, init=False)


@dataclass(frozen=True)
class Ambiguous:
    matches: list[Task]
    action: ResultAction = field(default=ResultAction.AMBIGUOUS, init=False)


@dataclass(frozen=True)
class NotFound:
    query: str
    action: ResultAction = field(default=ResultAction.NOT_FOUND, init=False)


@dataclass(frozen=True)
class TaskList:
    tasks: list[Task]
    action: ResultAction = field(default=ResultAction.LIST, init=False)


@dataclass(frozen=True)
class Skipped:
    reason: str
    action: ResultAction = field(default=ResultAction.SKIPPED, init=False)


@dataclass(frozen=True)
class Unknown:
    action: ResultAction = field(default=ResultAction.UNKNOWN, init=False)


ExecutionResult = Union[
    EventCreated,
    TaskCreated,
    ShoppingAdded,
    Completed,
    Ambiguous,
    NotFound,
    TaskList,
    Skipped,
    Unknown,
]


@dataclass
class BatchError:
    index: int
    intent: Intent
    error: Exception


@dataclass
class BatchResult:
    """Outcome of a sequential batch: successful results plus isolated failures."""

    results: list[ExecutionResult] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)


# ---------------------------------------------------------------------------
# Meal planning views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IngredientMatch:
    """How many of a recipe's ingredients are on hand."""

    have: int = 0
    total: int = 0
    percentage: int = 0

    @property
    def missing(self) -> int:
        return self.total - self.have


@dataclass(frozen=True)
class ScoredRecipe:
    recipe: Recipe
    score: float
    reasons: list[str] = field(default_factory=list)
    inventory_match: IngredientMatch = field(default_factory=IngredientMatch)


@dataclass(frozen=True)
class Suggestion:
    """One day's slot in a generated week. Never persisted directly."""

    day: str
    recipe: Optional[Recipe]
    locked: bool = False
    reason: str = ""
    alternatives: list[Recipe] = field(default_factory=list)
    swapped_from: Optional[str] = None


@dataclass
class WeekSuggestions:
    suggestions: list[Suggestion]
    category_usage: dict[str, int]
    category_requirements: dict[str, int]
    fulfilled: bool

    @property
    def unmet_categories(self) -> dict[str, int]:
        """Category -> how many more meals the quota still needs."""
        return {
            category: required - self.category_usage.get(category, 0)
            for category, required in self.category_requirements.items()
            if self.category_usage.get(category, 0) < required
        }


@dataclass(frozen=True)
class GroceryListEntry:
    name: str
    quantity: float
    unit: Optional[str]
    category: str
    contributing_recipes: list[str] = field(default_factory=list)
    have: bool = False
    need_to_buy: bool = True
    inventory_quantity: float = 0.0
