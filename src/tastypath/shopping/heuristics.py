"""Tunable numeric constants used by the shopping heuristics."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class Heuristics(BaseModel):
    """Thresholds and fallbacks for purchase-unit collapsing and pricing."""

    default_price: float = Field(default=2.00, ge=0, description="Price when no rule matches.")
    meat_package_threshold: float = Field(
        default=200,
        ge=0,
        description="Raw amount from which a cut of meat or fish is bought as one package.",
    )
    egg_dozen: float = Field(default=12, ge=0, description="Eggs from which a dozen is bought.")
    egg_half_dozen: float = Field(default=6, ge=0, description="Eggs from which half a dozen is bought.")
    yogurt_pack: float = Field(default=4, ge=0, description="Yogurts from which a pack is bought.")
    produce_pack: float = Field(default=4, ge=0, description="Fruit pieces from which a pack is bought.")
    root_vegetable_mesh: float = Field(
        default=3,
        ge=0,
        description="Root vegetables from which a mesh bag is bought.",
    )
    tuna_can_grams: float = Field(default=80, gt=0, description="Drained grams per can of tuna.")
    milk_brick_ml: float = Field(default=1000, gt=0, description="Millilitres per milk brick.")

    model_config = ConfigDict(frozen=True)


DEFAULT_HEURISTICS = Heuristics()


def load_heuristics(path: Optional[Path]) -> Heuristics:
    """Load overrides from a JSON file, falling back to the defaults."""

    if path is None:
        return DEFAULT_HEURISTICS
    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError:
        logger.warning("Heuristics file %s not found; using defaults", path)
        return DEFAULT_HEURISTICS
    except json.JSONDecodeError as exc:
        logger.warning("Heuristics file %s is not valid JSON (%s); using defaults", path, exc)
        return DEFAULT_HEURISTICS

    try:
        return Heuristics.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Invalid heuristics in %s: %s; using defaults", path, exc.errors())
        return DEFAULT_HEURISTICS


@lru_cache
def get_heuristics() -> Heuristics:
    """Return the heuristics configured through settings (cached)."""

    from tastypath.config import get_settings

    return load_heuristics(get_settings().heuristics_path)


__all__ = ["Heuristics", "DEFAULT_HEURISTICS", "load_heuristics", "get_heuristics"]
