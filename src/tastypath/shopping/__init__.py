"""Shopping list aggregation engine."""

from .aggregator import aggregate_plan, build_shopping_list_plan
from .budget import build_view, reconcile_budget, summarize
from .categorizer import categorize
from .merger import ItemNotFoundError, merge_plan
from .parser import parse_ingredient
from .pricing import estimate_price, item_price
from .quantities import normalize_quantity
from .store import ShoppingListStore
from .units import infer_unit

__all__ = [
    "aggregate_plan",
    "build_shopping_list_plan",
    "build_view",
    "reconcile_budget",
    "summarize",
    "categorize",
    "ItemNotFoundError",
    "merge_plan",
    "parse_ingredient",
    "estimate_price",
    "item_price",
    "normalize_quantity",
    "ShoppingListStore",
    "infer_unit",
]
