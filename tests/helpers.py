"""Payload builders and request helpers shared by the test suite."""

from __future__ import annotations

from typing import Any, Dict

from tastypath.config import get_settings


def make_plan(
    plan_id: str = "plan-1",
    *,
    name: str = "Semana ligera",
    days: Any = None,
    week_start: str | None = "2024-03-04",
    week_end: str | None = "2024-03-10",
    weekly_budget: float | None = None,
) -> Dict[str, Any]:
    """Build a weekly plan payload in the shape the menu generator emits."""

    payload: Dict[str, Any] = {
        "id": plan_id,
        "name": name,
        "description": "",
        "weekStart": week_start,
        "weekEnd": week_end,
        "meals": days,
    }
    if weekly_budget is not None:
        payload["config"] = {"weeklyBudget": weekly_budget}
    return payload


def day(
    breakfast: list | None = None,
    lunch: list | None = None,
    dinner: list | None = None,
    snacks: list[list] | None = None,
) -> Dict[str, Any]:
    """One day of meals; each argument is that meal's ingredient list."""

    def meal(ingredients):
        return None if ingredients is None else {"name": "Plato", "ingredients": ingredients}

    return {
        "meals": {
            "breakfast": meal(breakfast),
            "lunch": meal(lunch),
            "dinner": meal(dinner),
            "snacks": [{"name": "Snack", "ingredients": entry} for entry in (snacks or [])],
        }
    }


def auth_headers() -> Dict[str, str]:
    """Bearer header for the configured API token, if any."""

    token = get_settings().api_token
    return {"Authorization": f"Bearer {token}"} if token else {}
