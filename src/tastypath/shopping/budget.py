"""Display-time views of the shopping list: budget scaling, totals and grouping.

Nothing here mutates stored items. Budget reconciliation is recomputed on
every read and returns scaled copies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from tastypath import metrics
from tastypath.models.shopping import Category, ShoppingListItem, ShoppingListSummary, ShoppingListView
from tastypath.shopping.categorizer import category_sort_key

logger = logging.getLogger(__name__)

UNASSIGNED_PLAN = "sin-plan"


def raw_total(items: Iterable[ShoppingListItem]) -> float:
    return sum(item.price or 0.0 for item in items)


def reconcile_budget(
    items: Sequence[ShoppingListItem],
    weekly_budget: Optional[float],
) -> list[ShoppingListItem]:
    """Scale prices by ``budget / total`` when the total exceeds a positive budget.

    Amount, unit and category are untouched and prices are not rounded, so
    the scaled prices sum back to the budget.
    """

    items = list(items)
    if not items or not weekly_budget or weekly_budget <= 0:
        return items
    total = raw_total(items)
    if total <= weekly_budget:
        return items

    factor = weekly_budget / total
    metrics.BUDGET_ADJUSTMENTS.inc()
    logger.debug("Scaling %s item price(s) by %.4f to fit budget %.2f", len(items), factor, weekly_budget)
    return [item.model_copy(update={"price": (item.price or 0.0) * factor}) for item in items]


def filter_by_plan(items: Iterable[ShoppingListItem], plan_id: Optional[str] = None) -> list[ShoppingListItem]:
    """Items sourced from ``plan_id``, or every item when no plan is selected."""

    if plan_id is None:
        return list(items)
    return [item for item in items if item.source_plan == plan_id]


def resolve_budget(
    items: Sequence[ShoppingListItem],
    budgets: Mapping[str, Optional[float]],
    plan_id: Optional[str] = None,
) -> Optional[float]:
    """Weekly budget that applies to a view.

    A selected plan uses its own budget. The all-plans view uses the budget of
    the plan owning the first item.
    """

    if plan_id is not None:
        budget = budgets.get(plan_id)
    elif items and items[0].source_plan:
        budget = budgets.get(items[0].source_plan)
    else:
        budget = None
    if budget is None or budget <= 0:
        return None
    return budget


def _cap(value: float, budget: Optional[float]) -> float:
    if budget and value > budget:
        return budget
    return value


def summarize(items: Sequence[ShoppingListItem], budget: Optional[float] = None) -> ShoppingListSummary:
    checked = [item for item in items if item.is_checked]
    pending = [item for item in items if not item.is_checked]
    return ShoppingListSummary(
        total_items=len(items),
        checked=len(checked),
        pending=len(pending),
        total_cost=round(_cap(raw_total(pending), budget), 2),
        total_cost_all=round(_cap(raw_total(items), budget), 2),
        budget_limit=budget,
    )


def build_view(
    items: Sequence[ShoppingListItem],
    budgets: Mapping[str, Optional[float]],
    *,
    plan_id: Optional[str] = None,
    budget: Optional[float] = None,
) -> ShoppingListView:
    """Filter, reconcile and summarize in one step; an explicit ``budget`` wins."""

    selected = filter_by_plan(items, plan_id)
    limit = budget if budget is not None and budget > 0 else resolve_budget(selected, budgets, plan_id)
    return ShoppingListView(
        plan_id=plan_id,
        items=reconcile_budget(selected, limit),
        summary=summarize(selected, limit),
    )


def group_by_category(items: Iterable[ShoppingListItem]) -> list[tuple[Category, list[ShoppingListItem]]]:
    """Group items by category in supermarket aisle order."""

    grouped: dict[Category, list[ShoppingListItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return sorted(grouped.items(), key=lambda pair: category_sort_key(pair[0]))


@dataclass
class PlanGroup:
    plan_id: str
    plan_name: Optional[str]
    week_range: Optional[str]
    categories: list[tuple[Category, list[ShoppingListItem]]] = field(default_factory=list)


def group_by_plan(items: Iterable[ShoppingListItem]) -> list[PlanGroup]:
    """Group items by source plan (first-seen order), then by category."""

    by_plan: dict[str, list[ShoppingListItem]] = {}
    for item in items:
        by_plan.setdefault(item.source_plan or UNASSIGNED_PLAN, []).append(item)
    return [
        PlanGroup(
            plan_id=plan_id,
            plan_name=plan_items[0].plan_name,
            week_range=plan_items[0].week_range,
            categories=group_by_category(plan_items),
        )
        for plan_id, plan_items in by_plan.items()
    ]


__all__ = [
    "UNASSIGNED_PLAN",
    "PlanGroup",
    "raw_total",
    "reconcile_budget",
    "filter_by_plan",
    "resolve_budget",
    "summarize",
    "build_view",
    "group_by_category",
    "group_by_plan",
]
