"""Weekly plan input models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PlanConfig(BaseModel):
    """Generation settings stored alongside a plan (only the budget matters here)."""

    weekly_budget: Optional[float] = Field(default=None)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class WeeklyPlan(BaseModel):
    """Weekly plan as produced by the menu generator.

    ``meals`` is kept opaque: it is either a list or a keyed mapping of day
    objects, and the aggregator walks it defensively.
    """

    id: str
    name: str = Field(default="")
    description: str = Field(default="")
    week_start: Optional[str] = Field(default=None)
    week_end: Optional[str] = Field(default=None)
    config: Optional[PlanConfig] = Field(default=None)
    meals: Any = Field(default=None)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("name", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        """Plan generators send ``null`` for unnamed plans."""
        return "" if value is None else value

    @property
    def weekly_budget(self) -> Optional[float]:
        if self.config is None:
            return None
        return self.config.weekly_budget

    def metadata(self) -> "PlanMetadata":
        return PlanMetadata(
            id=self.id,
            name=self.name or None,
            description=self.description or None,
            week_start=self.week_start,
            week_end=self.week_end,
            weekly_budget=self.weekly_budget,
        )


class PlanMetadata(BaseModel):
    """Plan identity, week and budget remembered alongside the shopping items it sourced."""

    id: str
    name: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    week_start: Optional[str] = Field(default=None)
    week_end: Optional[str] = Field(default=None)
    weekly_budget: Optional[float] = Field(default=None)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PlanMetadataUpdate(BaseModel):
    """Partial plan metadata update (rename / move week)."""

    plan_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    week_start: Optional[str] = Field(default=None)
    week_end: Optional[str] = Field(default=None)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


__all__ = ["PlanConfig", "WeeklyPlan", "PlanMetadata", "PlanMetadataUpdate"]
