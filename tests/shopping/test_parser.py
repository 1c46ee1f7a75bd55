"""Tests for the free-text ingredient parser."""

from __future__ import annotations

import pytest

from tastypath.shopping.parser import (
    format_quantity,
    ingredient_key,
    match_ingredient,
    parse_ingredient,
    parse_quantity,
    slugify,
    standardize_unit,
)


@pytest.mark.parametrize(
    ("line", "name", "quantity", "unit"),
    [
        ("200 g pollo", "Pollo", 200.0, "g"),
        ("2 cucharadas de aceite de oliva", "Aceite de oliva", 2.0, "cucharada"),
        ("1/2 taza de arroz", "Arroz", 0.5, "taza"),
        ("1 1/2 tazas de harina", "Harina", 1.5, "taza"),
        ("1,5 kilos de patatas", "Patatas", 1.5, "kg"),
        ("0.75 litros de caldo de verduras", "Caldo de verduras", 0.75, "l"),
        ("3 uds pepino", "Pepino", 3.0, "unidades"),
        ("250 gr. de queso fresco", "Queso fresco", 250.0, "g"),
    ],
)
def test_parse_ingredient_with_quantity_and_unit(line, name, quantity, unit):
    parsed = parse_ingredient(line)

    assert parsed.name == name
    assert parsed.quantity == pytest.approx(quantity)
    assert parsed.unit == unit


def test_parse_ingredient_infers_unit_when_missing():
    parsed = parse_ingredient("2 huevos")

    assert parsed.name == "Huevos"
    assert parsed.quantity == 2.0
    assert parsed.unit == "unidad"


def test_unit_tokens_need_a_word_boundary():
    parsed = parse_ingredient("1 lata de atún")

    assert parsed.name == "Lata de atún"
    assert parsed.unit == "lata"


def test_fallback_keeps_text_with_quantity_one():
    parsed = parse_ingredient("Sal al gusto")

    assert parsed.name == "Sal al gusto"
    assert parsed.quantity == 1.0
    assert parsed.unit == "paquete"


def test_fallback_for_unknown_text_has_empty_unit():
    parsed = parse_ingredient("  hojas de curry frescas ")

    assert parsed.name == "Hojas de curry frescas"
    assert parsed.quantity == 1.0
    assert parsed.unit == ""


def test_quantity_without_name_becomes_single_unit():
    parsed = parse_ingredient("2 g")

    assert parsed.name == "2 g"
    assert parsed.quantity == 1.0
    assert parsed.unit == "unidad"


def test_zero_denominator_falls_back():
    parsed = parse_ingredient("1/0 huevo")

    assert parsed.quantity == 1.0
    assert parsed.name == "1/0 huevo"


def test_overflowing_quantity_falls_back():
    line = "9" * 400 + " g miel"

    parsed = parse_ingredient(line)

    assert match_ingredient(line) is None
    assert parsed.quantity == 1.0
    assert parsed.unit == "unidad"
    assert parsed.name == line


@pytest.mark.parametrize("line", ["", "   ", "Sal al gusto", "2 huevos", "½ limón", "1/0 x"])
def test_parse_is_deterministic_and_never_raises(line):
    assert parse_ingredient(line) == parse_ingredient(line)


def test_match_ingredient_is_strict():
    assert match_ingredient("Sal al gusto") is None
    assert match_ingredient("2 g") is None
    assert match_ingredient("2 huevos") is not None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2", 2.0),
        ("1,5", 1.5),
        ("0.25", 0.25),
        ("1/2", 0.5),
        ("1 1/2", 1.5),
        ("3/0", None),
        ("abc", None),
        ("inf", None),
        ("nan", None),
        ("9" * 400, None),
        ("1" + "0" * 400 + "/3", None),
    ],
)
def test_parse_quantity(raw, expected):
    assert parse_quantity(raw) == expected


@pytest.mark.parametrize(
    ("token", "expected"),
    [("gr", "g"), ("gramos", "g"), ("kilos", "kg"), ("ud", "unidades"), ("un", "unidades"), ("litros", "l"), (None, "")],
)
def test_standardize_unit(token, expected):
    assert standardize_unit(token) == expected


def test_ingredient_key_folds_case_whitespace_and_articles():
    assert ingredient_key("Los  Tomates") == "tomates"
    assert ingredient_key("TOMATES") == "tomates"
    assert ingredient_key("la") == "la"


def test_slugify_strips_accents_and_truncates():
    assert slugify("Salmón ahumado") == "salmon-ahumado"
    assert slugify("Piña & coco!") == "pina-coco"
    assert slugify("x" * 60) == "x" * 40
    assert slugify("¡!") == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3.0, "3"), (0.5, "0.5"), (1.25, "1.25"), (2.333, "2.33"), (float("inf"), "1"), (float("nan"), "1")],
)
def test_format_quantity(value, expected):
    assert format_quantity(value) == expected
