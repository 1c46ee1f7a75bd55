"""SQLAlchemy models backing the stored shopping list."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base class for TastyPath ORM models."""


class ShoppingListItemORM(Base):
    """Shopping list entry; ``position`` keeps insertion order across merges."""

    __tablename__ = "shopping_list_items"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    unit: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_checked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_plan: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    plan_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    week_range: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class PlanORM(Base):
    """Identity, week and budget of a plan merged into the list."""

    __tablename__ = "shopping_plans"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    week_start: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    week_end: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    weekly_budget: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )


__all__ = ["Base", "ShoppingListItemORM", "PlanORM"]
