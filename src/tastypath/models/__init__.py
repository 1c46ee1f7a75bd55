"""Pydantic models defining shared data contracts."""

from tastypath.models.plan import PlanConfig, PlanMetadata, PlanMetadataUpdate, WeeklyPlan
from tastypath.models.shopping import (
    Category,
    IngredientLine,
    NormalizedQuantity,
    ShoppingListItem,
    ShoppingListPlan,
    ShoppingListSummary,
    ShoppingListView,
)

__all__ = [
    "PlanConfig",
    "PlanMetadata",
    "PlanMetadataUpdate",
    "WeeklyPlan",
    "Category",
    "IngredientLine",
    "NormalizedQuantity",
    "ShoppingListItem",
    "ShoppingListPlan",
    "ShoppingListSummary",
    "ShoppingListView",
]
