"""Fold every ingredient line of a weekly plan into one item per ingredient."""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Mapping
from typing import Any, Iterator, Optional, Union

from pydantic import ValidationError

from tastypath import metrics
from tastypath.models.plan import WeeklyPlan
from tastypath.models.shopping import Category, ShoppingListItem, ShoppingListPlan
from tastypath.shopping.categorizer import categorize
from tastypath.shopping.heuristics import Heuristics
from tastypath.shopping.parser import (
    ingredient_key,
    match_ingredient,
    parse_ingredient,
    parse_quantity,
    slugify,
    standardize_unit,
)
from tastypath.shopping.pricing import item_price
from tastypath.shopping.quantities import normalize_quantity
from tastypath.shopping.units import infer_unit

logger = logging.getLogger(__name__)

_NAME_KEYS = ("name", "ingredient", "item")
_AMOUNT_KEYS = ("amount", "quantity", "qty")
_UNIT_KEYS = ("unit", "measurement")
_PRICE_KEYS = ("price", "estimatedPrice", "cost")


@dataclasses.dataclass
class _Accumulator:
    name: str
    raw_quantity: float
    raw_unit: str
    category: Optional[Category] = None
    base_price: Optional[float] = None


def _first_value(entry: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def _resolve_quantity(raw_amount: Any, parsed_quantity: Optional[float]) -> float:
    if isinstance(raw_amount, bool):
        raw_amount = None
    if isinstance(raw_amount, (int, float)) and math.isfinite(raw_amount) and raw_amount >= 0:
        return float(raw_amount)
    if isinstance(raw_amount, str):
        numeric = parse_quantity(raw_amount)
        if numeric is not None and numeric >= 0:
            return numeric
    if parsed_quantity is not None:
        return parsed_quantity
    return 1.0


def _resolve_category(raw_category: Any) -> Optional[Category]:
    if isinstance(raw_category, Category):
        return raw_category
    if isinstance(raw_category, str):
        for category in Category:
            if category.value.lower() == raw_category.strip().lower():
                return category
    return None


def _resolve_price(raw_price: Any) -> Optional[float]:
    if isinstance(raw_price, bool) or not isinstance(raw_price, (int, float)):
        return None
    if raw_price != raw_price or raw_price < 0:
        return None
    return float(raw_price)


def iter_ingredient_entries(meals: Any) -> Iterator[Any]:
    """Yield every raw ingredient entry of a plan's ``meals`` structure."""

    if isinstance(meals, Mapping):
        days = list(meals.values())
    elif isinstance(meals, (list, tuple)):
        days = list(meals)
    else:
        return

    for day in days:
        slots = day.get("meals") if isinstance(day, Mapping) else None
        if not isinstance(slots, Mapping):
            logger.warning("Skipping day without meals: %r", day)
            continue
        for slot in slots.values():
            dishes = slot if isinstance(slot, (list, tuple)) else [slot]
            for dish in dishes:
                if not isinstance(dish, Mapping):
                    continue
                ingredients = dish.get("ingredients")
                if not isinstance(ingredients, (list, tuple)):
                    continue
                yield from ingredients


def _parse_entry(entry: Any) -> Optional[_Accumulator]:
    """Parse a string or structured ingredient entry; ``None`` for blanks and junk."""

    if isinstance(entry, str):
        raw_name, structured = entry, None
    elif isinstance(entry, Mapping):
        value = _first_value(entry, _NAME_KEYS)
        raw_name, structured = (value if isinstance(value, str) else ""), entry
    else:
        return None

    raw_name = raw_name.strip()
    if not raw_name:
        return None

    matched = match_ingredient(raw_name)
    metrics.INGREDIENT_LINES.labels(result="fallback" if matched is None else "parsed").inc()
    parsed = matched or parse_ingredient(raw_name)
    if structured is None:
        return _Accumulator(name=parsed.name, raw_quantity=parsed.quantity, raw_unit=parsed.unit)

    raw_unit = _first_value(structured, _UNIT_KEYS)
    if isinstance(raw_unit, str) and raw_unit.strip():
        unit = standardize_unit(raw_unit.strip())
    else:
        unit = parsed.unit or infer_unit(parsed.name)
    return _Accumulator(
        name=parsed.name,
        raw_quantity=_resolve_quantity(_first_value(structured, _AMOUNT_KEYS), parsed.quantity),
        raw_unit=unit,
        category=_resolve_category(structured.get("category")),
        base_price=_resolve_price(_first_value(structured, _PRICE_KEYS)),
    )


def aggregate_plan(
    plan: Union[WeeklyPlan, Mapping[str, Any]],
    *,
    heuristics: Optional[Heuristics] = None,
) -> list[ShoppingListItem]:
    """Return one shopping item per distinct ingredient of ``plan``.

    Quantities of repeated ingredients are summed raw and normalized once
    from the running total. A plan without a usable ``meals`` structure, or
    a payload that is not a plan at all (no ``id``), yields an empty list.
    """

    if not isinstance(plan, WeeklyPlan):
        try:
            plan = WeeklyPlan.model_validate(plan)
        except ValidationError as exc:
            logger.warning("Ignoring invalid weekly plan payload: %s", exc)
            metrics.PLAN_AGGREGATIONS.labels(result="invalid").inc()
            return []

    meals = plan.meals
    if not isinstance(meals, (Mapping, list, tuple)):
        logger.warning(
            "Plan %s has no valid meals (%r); shopping list is empty",
            plan.id,
            type(meals).__name__,
            extra={"plan_id": plan.id},
        )
        metrics.PLAN_AGGREGATIONS.labels(result="empty").inc()
        return []

    accumulated: dict[str, _Accumulator] = {}
    for entry in iter_ingredient_entries(meals):
        parsed = _parse_entry(entry)
        if parsed is None:
            continue
        key = ingredient_key(parsed.name)
        existing = accumulated.get(key)
        if existing is None:
            accumulated[key] = parsed
            continue
        existing.raw_quantity += parsed.raw_quantity
        if not existing.raw_unit:
            existing.raw_unit = parsed.raw_unit
        existing.category = existing.category or parsed.category
        if existing.base_price is None:
            existing.base_price = parsed.base_price

    items: list[ShoppingListItem] = []
    used_ids: set[str] = set()
    for index, entry in enumerate(accumulated.values()):
        normalized = normalize_quantity(
            entry.name, entry.raw_quantity, entry.raw_unit, heuristics=heuristics
        )
        amount = round(normalized.amount, 2)
        item_id = f"{plan.id}-{slugify(entry.name) or f'item-{index}'}"
        if item_id in used_ids:
            item_id = f"{item_id}-{index}"
        used_ids.add(item_id)
        items.append(
            ShoppingListItem(
                id=item_id,
                name=entry.name,
                amount=amount,
                unit=normalized.unit,
                category=entry.category or categorize(entry.name),
                price=item_price(
                    entry.name,
                    amount,
                    normalized.unit,
                    base_price=entry.base_price,
                    heuristics=heuristics,
                ),
                is_checked=False,
            )
        )

    metrics.PLAN_AGGREGATIONS.labels(result="items" if items else "empty").inc()
    logger.debug("Aggregated plan %s into %s item(s)", plan.id, len(items), extra={"plan_id": plan.id})
    return items


def build_shopping_list_plan(
    plan: Union[WeeklyPlan, Mapping[str, Any]],
    *,
    heuristics: Optional[Heuristics] = None,
) -> ShoppingListPlan:
    """Aggregate ``plan`` and wrap the items with plan identity and totals."""

    if not isinstance(plan, WeeklyPlan):
        plan = WeeklyPlan.model_validate(plan)

    items = aggregate_plan(plan, heuristics=heuristics)
    return ShoppingListPlan(
        id=f"shopping_{plan.id}",
        plan_id=plan.id,
        plan_name=plan.name,
        plan_description=plan.description,
        week_start=plan.week_start,
        week_end=plan.week_end,
        items=items,
        total_items=len(items),
        total_cost=round(sum(item.price for item in items), 2),
        completed_items=sum(1 for item in items if item.is_checked),
    )


__all__ = ["aggregate_plan", "build_shopping_list_plan", "iter_ingredient_entries"]
