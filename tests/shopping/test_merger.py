"""Tests for the pure shopping list transitions."""

from __future__ import annotations

import pytest

from tastypath.models.plan import PlanMetadata
from tastypath.models.shopping import Category, ShoppingListItem
from tastypath.shopping import merger
from tastypath.shopping.merger import ItemNotFoundError


def _item(item_id, name, amount=1.0, *, category=Category.OTHER, price=1.0, **extra):
    return ShoppingListItem(id=item_id, name=name, amount=amount, category=category, price=price, **extra)


PLAN_A = PlanMetadata(id="A", name="Semana A", week_start="2024-03-04", week_end="2024-03-10")
PLAN_B = PlanMetadata(id="B", name="Semana B", week_start="2024-09-02", week_end="2024-09-08")


@pytest.mark.parametrize(
    ("start", "end", "expected"),
    [
        ("2024-03-04", "2024-03-10", "04 mar – 10 mar"),
        ("2024-09-30T00:00:00Z", "2024-10-06", "30 sept – 06 oct"),
        ("2024-03-04", None, None),
        ("ayer", "2024-03-10", None),
    ],
)
def test_format_week_range(start, end, expected):
    assert merger.format_week_range(start, end) == expected


def test_compose_plan_note():
    assert merger.compose_plan_note("Semana A", "04 mar – 10 mar") == "Plan: Semana A · 04 mar – 10 mar"
    assert merger.compose_plan_note("Semana A") == "Plan: Semana A"
    assert merger.compose_plan_note(None, "04 mar – 10 mar") is None


def test_merge_plan_stamps_provenance():
    merged = merger.merge_plan([], [_item("A-leche", "Leche")], PLAN_A)

    (leche,) = merged
    assert leche.source_plan == "A"
    assert leche.plan_name == "Semana A"
    assert leche.week_range == "04 mar – 10 mar"
    assert leche.notes == "Plan: Semana A · 04 mar – 10 mar"


def test_resubmitting_a_plan_replaces_its_items():
    first = merger.merge_plan([], [_item("A-pan", "Pan"), _item("A-sal", "Sal")], PLAN_A)

    second = merger.merge_plan(first, [_item("A-pan", "Pan", 2.0)], PLAN_A)

    assert [(item.name, item.amount) for item in second] == [("Pan", 2.0)]


def test_other_plans_merge_by_name_and_category():
    existing = merger.merge_plan([], [_item("A-leche", "Leche", 2.0, category=Category.DAIRY_EGGS, price=2.1)], PLAN_A)
    incoming = [
        _item("B-leche", "leche", 1.0, category=Category.DAIRY_EGGS, price=1.05),
        _item("B-leche-otros", "Leche", 1.0, category=Category.OTHER, price=1.0),
    ]

    merged = merger.merge_plan(existing, incoming, PLAN_B)

    assert len(merged) == 2
    combined = merged[0]
    assert combined.id == "A-leche"
    assert combined.amount == 3.0
    assert combined.price == pytest.approx(3.15)
    assert combined.source_plan == "B"
    assert combined.notes == "Plan: Semana B · 02 sept – 08 sept"
    assert merged[1].category is Category.OTHER


def test_preserve_checked_keeps_checked_ids():
    first = merger.merge_plan([], [_item("A-pan", "Pan"), _item("A-sal", "Sal")], PLAN_A)
    first = merger.toggle_item(first, "A-pan")
    fresh = [_item("A-pan", "Pan"), _item("A-sal", "Sal")]

    kept = merger.merge_plan(first, fresh, PLAN_A, preserve_checked=True)
    reset = merger.merge_plan(first, fresh, PLAN_A)

    assert {item.id: item.is_checked for item in kept} == {"A-pan": True, "A-sal": False}
    assert not any(item.is_checked for item in reset)


def test_update_plan_metadata_only_moves_week_when_both_dates_given():
    items = merger.merge_plan([_item("x", "Extra")], [_item("A-pan", "Pan")], PLAN_A)

    renamed = merger.update_plan_metadata(items, "A", plan_name="Semana nueva", week_start="2024-04-01")
    moved = merger.update_plan_metadata(renamed, "A", week_start="2024-04-01", week_end="2024-04-07")

    assert renamed[0] == items[0]
    assert renamed[1].plan_name == "Semana nueva"
    assert renamed[1].week_range == "04 mar – 10 mar"
    assert moved[1].week_range == "01 abr – 07 abr"
    assert moved[1].notes == "Plan: Semana nueva · 01 abr – 07 abr"


def test_remove_plan_keeps_other_items():
    items = merger.merge_plan([_item("x", "Extra")], [_item("A-pan", "Pan")], PLAN_A)

    assert [item.id for item in merger.remove_plan(items, "A")] == ["x"]
    assert merger.remove_plan(items, "missing") == items


def test_toggle_update_and_remove():
    items = [_item("a", "Pan"), _item("b", "Sal", price=0.5)]

    toggled = merger.toggle_item(items, "a")
    assert toggled[0].is_checked is True
    assert items[0].is_checked is False

    updated = merger.update_item(toggled, "b", amount=3, notes="grande")
    assert (updated[1].amount, updated[1].notes) == (3, "grande")

    assert [item.id for item in merger.remove_item(updated, "a")] == ["b"]


@pytest.mark.parametrize("operation", [merger.toggle_item, merger.remove_item, merger.update_item])
def test_unknown_item_raises(operation):
    with pytest.raises(ItemNotFoundError) as excinfo:
        operation([_item("a", "Pan")], "zzz")
    assert excinfo.value.item_id == "zzz"
    assert "zzz" in str(excinfo.value)


def test_update_item_rejects_unknown_fields_and_invalid_values():
    items = [_item("a", "Pan")]

    with pytest.raises(ValueError, match="id"):
        merger.update_item(items, "a", id="b")
    with pytest.raises(ValueError):
        merger.update_item(items, "a", amount=-1)


def test_clear_checked_and_counters():
    items = merger.toggle_item([_item("a", "Pan", price=0.9), _item("b", "Sal", price=0.5)], "a")

    assert merger.checked_count(items) == 1
    assert merger.unchecked_count(items) == 1
    assert merger.total_cost(items) == pytest.approx(1.4)
    assert [item.id for item in merger.clear_checked(items)] == ["b"]
    assert merger.clear_all(items) == []


def test_add_item_merges_manual_entries():
    items = merger.add_item([_item("a", "Pan", 1.0, price=0.9)], _item("manual", "pan", 2.0, price=1.8))

    assert len(items) == 1
    assert items[0].amount == 3.0
    assert items[0].price == pytest.approx(2.7)
