"""Shopping list models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Closed grocery taxonomy, declared in supermarket aisle order."""

    MEAT = "Carnes y Aves"
    SEAFOOD = "Pescados y Mariscos"
    DAIRY_EGGS = "Lácteos y Huevos"
    FRUIT = "Frutas"
    VEGETABLES = "Verduras"
    GRAINS = "Granos y Cereales"
    LEGUMES = "Legumbres"
    NUTS_SEEDS = "Frutos Secos y Semillas"
    OILS_FATS = "Aceites y Grasas"
    SEASONINGS = "Condimentos y Especias"
    OTHER = "Otros"


class IngredientLine(BaseModel):
    """Result of parsing one free-text ingredient line."""

    name: str
    quantity: float = Field(default=1.0)
    unit: str = Field(default="")

    model_config = ConfigDict(frozen=True)


class NormalizedQuantity(BaseModel):
    """Purchasable quantity chosen for an accumulated raw amount."""

    quantity: str
    unit: str = Field(default="")

    model_config = ConfigDict(frozen=True)

    @property
    def amount(self) -> float:
        try:
            return float(self.quantity)
        except ValueError:
            return 1.0


class ShoppingListItem(BaseModel):
    """Single entry on the shopping list."""

    id: str
    name: str
    amount: float = Field(default=1.0, ge=0)
    unit: str = Field(default="")
    category: Category = Field(default=Category.OTHER)
    price: float = Field(default=0.0, ge=0)
    is_checked: bool = Field(default=False)
    notes: Optional[str] = Field(default=None, max_length=1000)
    source_plan: Optional[str] = Field(default=None)
    plan_name: Optional[str] = Field(default=None)
    week_range: Optional[str] = Field(default=None)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
        frozen=True,
    )


class ShoppingListPlan(BaseModel):
    """Shopping list produced for a single weekly plan."""

    id: str
    plan_id: str
    plan_name: str = Field(default="")
    plan_description: str = Field(default="")
    week_start: Optional[str] = Field(default=None)
    week_end: Optional[str] = Field(default=None)
    items: list[ShoppingListItem] = Field(default_factory=list)
    total_items: int = Field(default=0, ge=0)
    total_cost: float = Field(default=0.0, ge=0)
    completed_items: int = Field(default=0, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ShoppingListSummary(BaseModel):
    """Display totals for a (possibly filtered) shopping list."""

    total_items: int = Field(default=0, ge=0)
    checked: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)
    total_cost: float = Field(default=0.0, ge=0)
    total_cost_all: float = Field(default=0.0, ge=0)
    budget_limit: Optional[float] = Field(default=None)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ShoppingListView(BaseModel):
    """Filtered, budget-reconciled items with their summary, as shown to the user."""

    plan_id: Optional[str] = Field(default=None)
    items: list[ShoppingListItem] = Field(default_factory=list)
    summary: ShoppingListSummary = Field(default_factory=ShoppingListSummary)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


__all__ = [
    "Category",
    "IngredientLine",
    "NormalizedQuantity",
    "ShoppingListItem",
    "ShoppingListPlan",
    "ShoppingListSummary",
    "ShoppingListView",
]
