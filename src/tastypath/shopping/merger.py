"""Pure transitions over the global shopping list.

Every function takes the current list of items and returns a new list; the
input is never mutated, so callers can hold snapshots and serialize updates
however they like (see :mod:`tastypath.shopping.store`).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from tastypath.models.plan import PlanMetadata
from tastypath.models.shopping import ShoppingListItem

logger = logging.getLogger(__name__)

SPANISH_MONTHS = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic")

# Fields callers may change through ``update_item``; ``id`` is the lookup key.
EDITABLE_FIELDS = frozenset(
    {"name", "amount", "unit", "category", "price", "is_checked", "notes", "source_plan", "plan_name", "week_range"}
)


class ItemNotFoundError(KeyError):
    """Raised when an item id is not on the shopping list."""

    def __init__(self, item_id: str) -> None:
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Shopping list item not found: {self.item_id}"


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.debug("Ignoring unparsable plan date %r", value)
        return None


def _short_date(value: date) -> str:
    return f"{value.day:02d} {SPANISH_MONTHS[value.month - 1]}"


def format_week_range(week_start: Optional[str], week_end: Optional[str]) -> Optional[str]:
    """``"04 mar – 10 mar"`` for two ISO dates, ``None`` when either is missing or invalid."""

    start, end = _parse_date(week_start), _parse_date(week_end)
    if start is None or end is None:
        return None
    return f"{_short_date(start)} – {_short_date(end)}"


def compose_plan_note(plan_name: Optional[str], week_range: Optional[str] = None) -> Optional[str]:
    if not plan_name:
        return None
    if week_range:
        return f"Plan: {plan_name} · {week_range}"
    return f"Plan: {plan_name}"


def stamp_provenance(items: Iterable[ShoppingListItem], metadata: PlanMetadata) -> list[ShoppingListItem]:
    """Attach source plan, plan name, week range and the derived note to ``items``."""

    week_range = format_week_range(metadata.week_start, metadata.week_end)
    update = {
        "source_plan": metadata.id,
        "plan_name": metadata.name,
        "week_range": week_range,
        "notes": compose_plan_note(metadata.name, week_range),
    }
    return [item.model_copy(update=update) for item in items]


def _merge_key(item: ShoppingListItem) -> tuple[str, str]:
    return (item.name.lower(), item.category.value)


def _combine(existing: ShoppingListItem, incoming: ShoppingListItem) -> ShoppingListItem:
    plan_name = incoming.plan_name if incoming.plan_name is not None else existing.plan_name
    week_range = incoming.week_range if incoming.week_range is not None else existing.week_range
    return existing.model_copy(
        update={
            "amount": round(existing.amount + incoming.amount, 2),
            "price": round(existing.price + incoming.price, 2),
            "notes": compose_plan_note(plan_name, week_range),
            "source_plan": incoming.source_plan,
            "plan_name": plan_name,
            "week_range": week_range,
        }
    )


def add_item(items: Sequence[ShoppingListItem], item: ShoppingListItem) -> list[ShoppingListItem]:
    """Append ``item`` or fold it into an existing item with the same name and category."""

    return add_items(items, [item])


def add_items(items: Sequence[ShoppingListItem], new_items: Iterable[ShoppingListItem]) -> list[ShoppingListItem]:
    merged = list(items)
    positions = {_merge_key(item): index for index, item in enumerate(merged)}
    for item in new_items:
        key = _merge_key(item)
        index = positions.get(key)
        if index is None:
            positions[key] = len(merged)
            merged.append(item)
        else:
            merged[index] = _combine(merged[index], item)
    return merged


def merge_plan(
    items: Sequence[ShoppingListItem],
    new_items: Iterable[ShoppingListItem],
    metadata: PlanMetadata,
    *,
    preserve_checked: bool = False,
) -> list[ShoppingListItem]:
    """Replace every contribution of ``metadata.id`` with ``new_items``.

    Items already sourced from the plan are purged first, so resubmitting a
    plan never duplicates its ingredients. Remaining items that share a name
    (case-insensitively) and category with an incoming item absorb its amount
    and price and take its provenance. With ``preserve_checked`` the checked
    flag of a purged item carries over to the incoming item with the same id.
    """

    kept: list[ShoppingListItem] = []
    previously_checked: set[str] = set()
    for item in items:
        if item.source_plan == metadata.id:
            if item.is_checked:
                previously_checked.add(item.id)
        else:
            kept.append(item)

    stamped = stamp_provenance(new_items, metadata)
    if preserve_checked and previously_checked:
        stamped = [
            item.model_copy(update={"is_checked": True}) if item.id in previously_checked else item
            for item in stamped
        ]

    merged = add_items(kept, stamped)
    logger.debug(
        "Merged plan %s: %s purged, %s incoming, %s total",
        metadata.id,
        len(items) - len(kept),
        len(stamped),
        len(merged),
    )
    return merged


def update_plan_metadata(
    items: Sequence[ShoppingListItem],
    plan_id: str,
    *,
    plan_name: Optional[str] = None,
    week_start: Optional[str] = None,
    week_end: Optional[str] = None,
) -> list[ShoppingListItem]:
    """Rename a plan and/or move its week on every item it sourced.

    The week range is only recomputed when both dates are given.
    """

    new_range = format_week_range(week_start, week_end) if week_start and week_end else None
    updated: list[ShoppingListItem] = []
    for item in items:
        if item.source_plan != plan_id:
            updated.append(item)
            continue
        name = plan_name if plan_name is not None else item.plan_name
        week_range = new_range if new_range is not None else item.week_range
        updated.append(
            item.model_copy(
                update={"plan_name": name, "week_range": week_range, "notes": compose_plan_note(name, week_range)}
            )
        )
    return updated


def remove_plan(items: Sequence[ShoppingListItem], plan_id: str) -> list[ShoppingListItem]:
    return [item for item in items if item.source_plan != plan_id]


def _index_of(items: Sequence[ShoppingListItem], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise ItemNotFoundError(item_id)


def toggle_item(items: Sequence[ShoppingListItem], item_id: str) -> list[ShoppingListItem]:
    index = _index_of(items, item_id)
    updated = list(items)
    updated[index] = updated[index].model_copy(update={"is_checked": not updated[index].is_checked})
    return updated


def update_item(items: Sequence[ShoppingListItem], item_id: str, **changes: Any) -> list[ShoppingListItem]:
    """Apply field ``changes`` to one item, re-validating the result."""

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update shopping list item fields: {', '.join(sorted(unknown))}")
    index = _index_of(items, item_id)
    updated = list(items)
    payload = updated[index].model_dump()
    payload.update(changes)
    updated[index] = ShoppingListItem.model_validate(payload)
    return updated


def remove_item(items: Sequence[ShoppingListItem], item_id: str) -> list[ShoppingListItem]:
    index = _index_of(items, item_id)
    return [item for position, item in enumerate(items) if position != index]


def clear_checked(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    return [item for item in items if not item.is_checked]


def clear_all(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    return []


def total_cost(items: Iterable[ShoppingListItem]) -> float:
    return round(sum(item.price for item in items), 2)


def checked_count(items: Iterable[ShoppingListItem]) -> int:
    return sum(1 for item in items if item.is_checked)


def unchecked_count(items: Iterable[ShoppingListItem]) -> int:
    return sum(1 for item in items if not item.is_checked)


__all__ = [
    "ItemNotFoundError",
    "SPANISH_MONTHS",
    "format_week_range",
    "compose_plan_note",
    "stamp_provenance",
    "add_item",
    "add_items",
    "merge_plan",
    "update_plan_metadata",
    "remove_plan",
    "toggle_item",
    "update_item",
    "remove_item",
    "clear_checked",
    "clear_all",
    "total_cost",
    "checked_count",
    "unchecked_count",
]
