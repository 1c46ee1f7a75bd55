"""Owned, serialized shopping list state persisted in SQLite."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import DatabaseError
from sqlalchemy.orm import Session

from tastypath.db.models import PlanORM, ShoppingListItemORM
from tastypath.db.repository import Database
from tastypath.models.plan import PlanMetadata, PlanMetadataUpdate, WeeklyPlan
from tastypath.models.shopping import ShoppingListItem, ShoppingListPlan, ShoppingListView
from tastypath.shopping import merger
from tastypath.shopping.aggregator import build_shopping_list_plan
from tastypath.shopping.budget import build_view
from tastypath.shopping.heuristics import Heuristics

logger = logging.getLogger(__name__)

Transition = Callable[[Sequence[ShoppingListItem]], list[ShoppingListItem]]


def _to_model(row: ShoppingListItemORM) -> ShoppingListItem:
    return ShoppingListItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "amount": row.amount,
            "unit": row.unit,
            "category": row.category,
            "price": row.price,
            "is_checked": row.is_checked,
            "notes": row.notes,
            "source_plan": row.source_plan,
            "plan_name": row.plan_name,
            "week_range": row.week_range,
        }
    )


def _plan_to_model(row: PlanORM) -> PlanMetadata:
    return PlanMetadata.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "week_start": row.week_start,
            "week_end": row.week_end,
            "weekly_budget": row.weekly_budget,
        }
    )


def _plan_row(plan: PlanMetadata) -> PlanORM:
    return PlanORM(
        id=plan.id,
        name=plan.name,
        description=plan.description,
        week_start=plan.week_start,
        week_end=plan.week_end,
        weekly_budget=plan.weekly_budget,
    )


def _read_items(session: Session) -> list[ShoppingListItem]:
    rows = (
        session.execute(
            select(ShoppingListItemORM).order_by(
                ShoppingListItemORM.position.asc(),
                ShoppingListItemORM.id.asc(),
            )
        )
        .scalars()
        .all()
    )
    items: list[ShoppingListItem] = []
    for row in rows:
        try:
            items.append(_to_model(row))
        except ValidationError as exc:
            logger.warning("Skipping invalid stored shopping item %s: %s", row.id, exc, extra={"item_id": row.id})
    return items


def _read_plans(session: Session) -> dict[str, PlanMetadata]:
    plans: dict[str, PlanMetadata] = {}
    for row in session.execute(select(PlanORM).order_by(PlanORM.created_at.asc())).scalars():
        try:
            plans[row.id] = _plan_to_model(row)
        except ValidationError as exc:
            logger.warning("Skipping invalid stored plan %s: %s", row.id, exc, extra={"plan_id": row.id})
    return plans


def _write_items(session: Session, items: Sequence[ShoppingListItem]) -> None:
    """Make the item rows match ``items`` exactly, in order."""

    existing = {row.id: row for row in session.execute(select(ShoppingListItemORM)).scalars()}
    for position, item in enumerate(items):
        row = existing.pop(item.id, None)
        if row is None:
            row = ShoppingListItemORM(id=item.id)
            session.add(row)
        row.position = position
        row.name = item.name
        row.amount = item.amount
        row.unit = item.unit
        row.category = item.category.value
        row.price = item.price
        row.is_checked = item.is_checked
        row.notes = item.notes
        row.source_plan = item.source_plan
        row.plan_name = item.plan_name
        row.week_range = item.week_range
    for stale in existing.values():
        session.delete(stale)


class ShoppingListStore:
    """Global shopping list owned by one object.

    Every change runs a pure transition from :mod:`tastypath.shopping.merger`
    inside one database transaction. The lock serializes the read-modify-write
    so concurrent callers never lose updates. Without a ``path`` the database
    lives in memory.
    """

    def __init__(
        self,
        items: Optional[Sequence[ShoppingListItem]] = None,
        *,
        plans: Optional[Mapping[str, PlanMetadata]] = None,
        path: Optional[Union[str, Path]] = None,
        heuristics: Optional[Heuristics] = None,
    ) -> None:
        self._path = Path(path) if path is not None else None
        self._heuristics = heuristics
        self._lock = threading.Lock()
        self._database = Database(self._path)
        if items or plans:
            with self._database.session_scope() as session:
                _write_items(session, list(items or []))
                for plan in (plans or {}).values():
                    session.merge(_plan_row(plan))

    @classmethod
    def load(cls, path: Union[str, Path], *, heuristics: Optional[Heuristics] = None) -> "ShoppingListStore":
        """Open the database at ``path``; a file that is not a database is moved aside."""

        path = Path(path)
        try:
            store = cls(path=path, heuristics=heuristics)
        except DatabaseError as exc:
            backup = path.with_name(path.name + ".corrupt")
            logger.warning("Ignoring unreadable shopping list %s (moved to %s): %s", path, backup, exc)
            path.replace(backup)
            store = cls(path=path, heuristics=heuristics)
        logger.debug("Opened shopping list database %s", path)
        return store

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def items(self) -> list[ShoppingListItem]:
        with self._lock, self._database.session_scope() as session:
            return _read_items(session)

    @property
    def plans(self) -> dict[str, PlanMetadata]:
        with self._lock, self._database.session_scope() as session:
            return _read_plans(session)

    def close(self) -> None:
        self._database.dispose()

    def get_item(self, item_id: str) -> ShoppingListItem:
        with self._lock, self._database.session_scope() as session:
            row = session.get(ShoppingListItemORM, item_id)
            if row is None:
                raise merger.ItemNotFoundError(item_id)
            return _to_model(row)

    def _apply(self, transition: Transition) -> list[ShoppingListItem]:
        with self._lock, self._database.session_scope() as session:
            items = transition(_read_items(session))
            _write_items(session, items)
            return items

    def add_plan(
        self,
        plan: Union[WeeklyPlan, Mapping[str, Any]],
        *,
        preserve_checked: bool = False,
    ) -> ShoppingListPlan:
        """Aggregate ``plan`` and merge it into the list, replacing its previous contribution."""

        if not isinstance(plan, WeeklyPlan):
            plan = WeeklyPlan.model_validate(plan)
        shopping_plan = build_shopping_list_plan(plan, heuristics=self._heuristics)
        metadata = plan.metadata()
        with self._lock, self._database.session_scope() as session:
            items = merger.merge_plan(
                _read_items(session), shopping_plan.items, metadata, preserve_checked=preserve_checked
            )
            _write_items(session, items)
            session.merge(_plan_row(metadata))
        logger.info(
            "Merged plan %s into shopping list (%s item(s))",
            plan.id,
            shopping_plan.total_items,
            extra={"plan_id": plan.id},
        )
        return shopping_plan

    def add_item(self, item: ShoppingListItem) -> list[ShoppingListItem]:
        return self._apply(lambda items: merger.add_item(items, item))

    def update_plan_metadata(self, plan_id: str, update: PlanMetadataUpdate) -> list[ShoppingListItem]:
        with self._lock, self._database.session_scope() as session:
            items = merger.update_plan_metadata(
                _read_items(session),
                plan_id,
                plan_name=update.plan_name,
                week_start=update.week_start,
                week_end=update.week_end,
            )
            _write_items(session, items)
            known = session.get(PlanORM, plan_id)
            if known is not None:
                if update.plan_name is not None:
                    known.name = update.plan_name
                if update.week_start and update.week_end:
                    known.week_start = update.week_start
                    known.week_end = update.week_end
            return [item for item in items if item.source_plan == plan_id]

    def remove_plan(self, plan_id: str) -> int:
        """Drop every item sourced from ``plan_id``; returns how many were removed."""

        with self._lock, self._database.session_scope() as session:
            current = _read_items(session)
            items = merger.remove_plan(current, plan_id)
            _write_items(session, items)
            session.execute(delete(PlanORM).where(PlanORM.id == plan_id))
            removed = len(current) - len(items)
        logger.info("Removed plan %s from shopping list (%s item(s))", plan_id, removed, extra={"plan_id": plan_id})
        return removed

    def toggle_item(self, item_id: str) -> ShoppingListItem:
        items = self._apply(lambda current: merger.toggle_item(current, item_id))
        return next(item for item in items if item.id == item_id)

    def update_item(self, item_id: str, **changes: Any) -> ShoppingListItem:
        items = self._apply(lambda current: merger.update_item(current, item_id, **changes))
        return next(item for item in items if item.id == item_id)

    def remove_item(self, item_id: str) -> None:
        self._apply(lambda current: merger.remove_item(current, item_id))

    def clear_checked(self) -> int:
        with self._lock, self._database.session_scope() as session:
            current = _read_items(session)
            items = merger.clear_checked(current)
            _write_items(session, items)
            return len(current) - len(items)

    def clear_all(self) -> None:
        with self._lock, self._database.session_scope() as session:
            _write_items(session, merger.clear_all(_read_items(session)))
            session.execute(delete(PlanORM))

    def budgets(self) -> dict[str, Optional[float]]:
        return {plan_id: plan.weekly_budget for plan_id, plan in self.plans.items()}

    def view(self, *, plan_id: Optional[str] = None, budget: Optional[float] = None) -> ShoppingListView:
        return build_view(self.items, self.budgets(), plan_id=plan_id, budget=budget)

    def total_cost(self) -> float:
        return merger.total_cost(self.items)

    def checked_count(self) -> int:
        return merger.checked_count(self.items)

    def unchecked_count(self) -> int:
        return merger.unchecked_count(self.items)


__all__ = ["ShoppingListStore"]
