"""Tests for the static price table and item price combination."""

from __future__ import annotations

import pytest

from tastypath.shopping.heuristics import Heuristics
from tastypath.shopping.pricing import estimate_price, item_price, purchase_factor


@pytest.mark.parametrize(
    ("name", "price"),
    [
        ("Atún en lata", 1.20),
        ("Solomillo de ternera", 9.50),
        ("Pechuga de pollo", 6.50),
        ("Huevos", 0.25),
        ("Tomate frito", 1.10),
        ("Tomate", 0.35),
        ("Aceite de oliva", 7.50),
        ("Aceite de girasol", 3.00),
        ("Pan de molde", 1.60),
        ("Pan", 0.90),
        ("Sal", 0.50),
    ],
)
def test_estimate_price(name, price):
    assert estimate_price(name) == pytest.approx(price)


@pytest.mark.parametrize("name", ["Repollo", "Ensalada", "Papel de horno"])
def test_lookalikes_and_unknowns_use_default_price(name):
    assert estimate_price(name) == pytest.approx(2.00)


def test_default_price_is_configurable():
    assert estimate_price("Papel de horno", heuristics=Heuristics(default_price=3.5)) == pytest.approx(3.5)


@pytest.mark.parametrize(
    ("name", "amount", "unit", "expected"),
    [
        ("Huevos", 1, "docena", 3.00),
        ("Huevos", 1, "media docena", 1.50),
        ("Huevos", 3, "unidad", 0.75),
        ("Pollo", 250, "g", 6.50),
        ("Manzana", 1, "pack", 1.60),
        ("Zanahoria", 1, "malla", 1.00),
        ("Aceite de oliva", 2, "cucharada", 7.50),
        ("Yogur", 3, "unidad", 1.35),
    ],
)
def test_item_price_combines_unit_price_with_quantity(name, amount, unit, expected):
    assert item_price(name, amount, unit) == pytest.approx(expected)


def test_explicit_price_overrides_estimate():
    assert item_price("Pollo", 2, "unidad", base_price=1.25) == pytest.approx(2.5)
    assert item_price("Pollo", 1, "paquete", base_price=-1) == pytest.approx(6.5)


def test_purchase_factor_guards_degenerate_amounts():
    assert purchase_factor(0, "unidad") == 1.0
    assert purchase_factor(float("nan"), "pack") == 1.0
    assert purchase_factor(500, "G") == 1.0
    assert purchase_factor(2, "pack") == 8
