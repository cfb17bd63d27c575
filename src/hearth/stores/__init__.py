"""In-memory store implementations and JSON snapshots."""

from hearth.stores.calendar import RecordingCalendar
from hearth.stores.memory import (
    InMemoryInventoryStore,
    InMemoryLocationStore,
    InMemoryMealPlanStore,
    InMemoryRecipeStore,
    InMemoryShoppingStore,
    InMemoryTaskStore,
)
from hearth.stores.snapshot import HouseholdSnapshot, read_snapshot, write_snapshot

__all__ = [
    "RecordingCalendar",
    "InMemoryInventoryStore",
    "InMemoryLocationStore",
    "InMemoryMealPlanStore",
    "InMemoryRecipeStore",
    "InMemoryShoppingStore",
    "InMemoryTaskStore",
    "HouseholdSnapshot",
    "read_snapshot",
    "write_snapshot",
]
