"""Command-line interface for TastyPath."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from tastypath.config import get_settings
from tastypath.export.pdf import render_shopping_list_pdf
from tastypath.logging_utils import configure_logging
from tastypath.models.plan import WeeklyPlan
from tastypath.shopping.aggregator import build_shopping_list_plan
from tastypath.shopping.budget import group_by_plan
from tastypath.shopping.heuristics import get_heuristics
from tastypath.shopping.parser import format_quantity
from tastypath.shopping.store import ShoppingListStore

app = typer.Typer(help="TastyPath shopping list commands.")

STORE_HELP = "Shopping list SQLite database (defaults to TASTYPATH_DATABASE_PATH)."


def _load_plan(plan_path: Path) -> WeeklyPlan:
    try:
        with plan_path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        typer.secho(f"Unable to read plan {plan_path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    try:
        return WeeklyPlan.model_validate(payload)
    except ValidationError as exc:
        typer.secho(f"Invalid plan {plan_path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _open_store(store_path: Optional[Path]) -> ShoppingListStore:
    return ShoppingListStore.load(store_path or get_settings().database_path, heuristics=get_heuristics())


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, [settings.api_token])


@app.command()
def aggregate(
    plan_path: Path = typer.Argument(..., help="Weekly plan JSON file."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Print the shopping list for one weekly plan without touching the store.
    """
    shopping_plan = build_shopping_list_plan(_load_plan(plan_path), heuristics=get_heuristics())
    as_dict = shopping_plan.model_dump(mode="json", by_alias=True)
    if pretty:
        typer.echo(json.dumps(as_dict, indent=2, ensure_ascii=False))
    else:
        typer.echo(json.dumps(as_dict, ensure_ascii=False))


@app.command()
def add(
    plan_path: Path = typer.Argument(..., help="Weekly plan JSON file."),
    store_path: Optional[Path] = typer.Option(None, "--store", help=STORE_HELP),
    preserve_checked: bool = typer.Option(
        False, "--preserve-checked", help="Keep checked items checked when re-adding a plan."
    ),
) -> None:
    """Merge a weekly plan into the stored shopping list (replacing its earlier items)."""

    store = _open_store(store_path)
    shopping_plan = store.add_plan(_load_plan(plan_path), preserve_checked=preserve_checked)
    typer.echo(
        f"Added {shopping_plan.total_items} item(s) from plan {shopping_plan.plan_id}; "
        f"list now has {len(store.items)} item(s)."
    )


@app.command()
def show(
    plan_id: Optional[str] = typer.Option(None, "--plan-id", help="Only items from this plan."),
    budget: Optional[float] = typer.Option(None, "--budget", min=0, help="Override the weekly budget."),
    store_path: Optional[Path] = typer.Option(None, "--store", help=STORE_HELP),
) -> None:
    """Print the shopping list grouped by plan and aisle, with budget-adjusted totals."""

    view = _open_store(store_path).view(plan_id=plan_id, budget=budget or None)
    if not view.items:
        typer.echo("Shopping list is empty.")
        return

    for group in group_by_plan(view.items):
        if plan_id is None:
            heading = group.plan_name or group.plan_id
            typer.secho(f"== {heading}" + (f" · {group.week_range}" if group.week_range else ""), bold=True)
        for category, items in group.categories:
            typer.secho(category.value.upper(), bold=True)
            for item in items:
                mark = "x" if item.is_checked else " "
                quantity = f"{format_quantity(item.amount)} {item.unit}".rstrip()
                typer.echo(f"  [{mark}] {item.name} — {quantity}  {item.price:.2f}")

    summary = view.summary
    typer.echo(
        f"\n{summary.total_items} item(s), {summary.checked} checked, {summary.pending} pending. "
        f"Pending cost {summary.total_cost:.2f}, total {summary.total_cost_all:.2f}"
        + (f" (budget {summary.budget_limit:.2f})" if summary.budget_limit else "")
    )


@app.command("export-pdf")
def export_pdf(
    output: Path = typer.Argument(..., help="Destination PDF file."),
    plan_id: Optional[str] = typer.Option(None, "--plan-id", help="Only items from this plan."),
    budget: Optional[float] = typer.Option(None, "--budget", min=0, help="Override the weekly budget."),
    store_path: Optional[Path] = typer.Option(None, "--store", help=STORE_HELP),
) -> None:
    """Write the shopping list to a PDF file."""

    view = _open_store(store_path).view(plan_id=plan_id, budget=budget or None)
    if not view.items:
        typer.secho("Shopping list is empty; nothing to export.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    output.write_bytes(render_shopping_list_pdf(view.items, summary=view.summary))
    typer.echo(f"Wrote {len(view.items)} item(s) to {output}")


@app.command("remove-plan")
def remove_plan(
    plan_id: str = typer.Argument(..., help="Plan whose items should be removed."),
    store_path: Optional[Path] = typer.Option(None, "--store", help=STORE_HELP),
) -> None:
    """Remove every item a plan contributed."""

    removed = _open_store(store_path).remove_plan(plan_id)
    typer.echo(f"Removed {removed} item(s) from plan {plan_id}.")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Override TASTYPATH_SERVER_HOST."),
    port: Optional[int] = typer.Option(None, "--port", help="Override TASTYPATH_SERVER_PORT."),
) -> None:
    """Run the HTTP API with uvicorn."""

    from tastypath.server.run import run_server

    run_server(host=host, port=port)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for `python -m tastypath`."""
    app(prog_name="tastypath", args=argv)


if __name__ == "__main__":
    main()
