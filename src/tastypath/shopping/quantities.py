"""Collapse accumulated recipe quantities into realistic purchase quantities.

Recipes ask for "150 g pollo" three times a week; the shopper buys one
package. Every rule below picks the unit a product is actually sold in and
deliberately discards the raw magnitude once a threshold is met.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence

from tastypath.models.shopping import NormalizedQuantity
from tastypath.shopping.heuristics import DEFAULT_HEURISTICS, Heuristics
from tastypath.shopping.parser import format_quantity
from tastypath.shopping.pricing import MEASURE_UNITS
from tastypath.shopping.rules import KeywordRule, first_match
from tastypath.shopping.units import infer_unit

Collapser = Callable[[float, str, Heuristics], NormalizedQuantity]

MASS_VOLUME_UNITS = frozenset({"g", "kg", "ml", "l"})


def _to_grams(quantity: float, unit: str) -> float:
    if unit in ("kg", "l"):
        return quantity * 1000
    return quantity


def _count(quantity: float, unit: str) -> int:
    """Number of pieces to buy; measured amounts (spoons, grams) mean one piece.

    Fractions round up, a raw count of zero stays zero.
    """

    if unit in MEASURE_UNITS or not math.isfinite(quantity):
        return 1
    if quantity <= 0:
        return 0
    return max(1, math.ceil(round(quantity, 2)))


def _single(unit: str) -> Collapser:
    def collapse(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
        return NormalizedQuantity(quantity="1", unit=unit)

    return collapse


def _pieces(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
    return NormalizedQuantity(quantity=str(_count(quantity, raw_unit)), unit="unidad")


def _eggs(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
    count = _count(quantity, raw_unit)
    if count >= heuristics.egg_dozen:
        return NormalizedQuantity(quantity="1", unit="docena")
    if count >= heuristics.egg_half_dozen:
        return NormalizedQuantity(quantity="1", unit="media docena")
    return NormalizedQuantity(quantity=str(count), unit="unidad")


def _yogurt(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
    count = _count(quantity, raw_unit)
    if count >= heuristics.yogurt_pack:
        return NormalizedQuantity(quantity="1", unit="pack")
    return NormalizedQuantity(quantity=str(count), unit="unidad")


def _bulk(threshold: Callable[[Heuristics], float], unit: str) -> Collapser:
    """Produce sold by the piece, or as a pack/mesh once enough pieces are needed."""

    def collapse(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
        if raw_unit in MASS_VOLUME_UNITS:
            return NormalizedQuantity(quantity="1", unit=unit)
        count = _count(quantity, raw_unit)
        if count >= threshold(heuristics):
            return NormalizedQuantity(quantity="1", unit=unit)
        return NormalizedQuantity(quantity=str(count), unit="unidad")

    return collapse


def _large_cut(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
    if raw_unit in MASS_VOLUME_UNITS or quantity >= heuristics.meat_package_threshold:
        return NormalizedQuantity(quantity="1", unit="paquete")
    return _pieces(quantity, raw_unit, heuristics)


def _tuna(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
    if raw_unit in MASS_VOLUME_UNITS:
        cans = math.ceil(round(_to_grams(quantity, raw_unit) / heuristics.tuna_can_grams, 2))
        return NormalizedQuantity(quantity=str(max(1, cans) if quantity > 0 else 0), unit="lata")
    return NormalizedQuantity(quantity=str(_count(quantity, raw_unit)), unit="lata")


def _milk(quantity: float, raw_unit: str, heuristics: Heuristics) -> NormalizedQuantity:
    if raw_unit in MASS_VOLUME_UNITS:
        bricks = math.ceil(round(_to_grams(quantity, raw_unit) / heuristics.milk_brick_ml, 2))
        return NormalizedQuantity(quantity=str(max(1, bricks) if quantity > 0 else 0), unit="brick")
    return NormalizedQuantity(quantity=str(_count(quantity, raw_unit)), unit="brick")


QUANTITY_RULES: tuple[KeywordRule[Collapser], ...] = (
    KeywordRule(("aceite",), _single("botella")),
    KeywordRule(
        ("vinagre", "vino", "salsa de soja", "refresco", "cerveza", "agua mineral"),
        _single("botella"),
    ),
    KeywordRule(("atún",), _tuna),
    KeywordRule(("leche",), _milk, exclude=("leche de coco",)),
    KeywordRule(("huevo",), _eggs),
    KeywordRule(("yogur",), _yogurt),
    KeywordRule(
        (
            "pollo", "pechuga", "muslo", "ternera", "cerdo", "cordero", "pavo", "conejo", "pato",
            "solomillo", "lomo", "costillas", "carne picada", "entrecot",
            "salmón", "merluza", "bacalao", "dorada", "lubina", "trucha", "pescado",
        ),
        _large_cut,
        exclude=("repollo", "caldo"),
    ),
    KeywordRule(
        (
            "jamón", "chorizo", "bacon", "beicon", "panceta", "salchichas", "fiambre",
            "queso", "mantequilla", "tofu",
        ),
        _single("paquete"),
    ),
    KeywordRule(
        (
            "arroz", "pasta", "espaguetis", "macarrones", "fideos", "harina", "azúcar", "sal",
            "lentejas", "garbanzos", "alubias", "avena", "quinoa", "cuscús", "galletas",
            "patatas fritas", "pan de molde", "cereales",
        ),
        _single("paquete"),
        exclude=("ensalada", "salsa"),
    ),
    KeywordRule(
        ("espinacas", "lechuga", "rúcula", "canónigos", "kale", "brotes", "mejillones", "almejas"),
        _single("bolsa"),
    ),
    KeywordRule(
        ("fresas", "arándanos", "frambuesas", "moras", "cerezas", "champiñones", "setas"),
        _single("bandeja"),
    ),
    KeywordRule(
        ("manzana", "naranja", "tomate", "pera", "mandarina", "kiwi", "melocotón"),
        _bulk(lambda h: h.produce_pack, "pack"),
        exclude=("salsa", "frito", "triturado", "concentrado"),
    ),
    KeywordRule(
        ("zanahoria", "cebolla", "patata"),
        _bulk(lambda h: h.root_vegetable_mesh, "malla"),
    ),
    KeywordRule(
        (
            "limón", "lima", "aguacate", "pan", "plátano", "pepino", "calabacín", "berenjena",
            "pimiento", "brócoli", "coliflor",
        ),
        _pieces,
    ),
)


def normalize_quantity(
    name: str,
    raw_quantity: float,
    raw_unit: str = "",
    *,
    heuristics: Optional[Heuristics] = None,
    rules: Sequence[KeywordRule[Collapser]] = QUANTITY_RULES,
) -> NormalizedQuantity:
    """Turn a summed raw quantity into what would actually be bought.

    When no rule matches, the quantity passes through (stringified) with the
    raw unit, or the inferred unit when the raw one is empty. A non-finite
    total (an overflowing sum) counts as one.
    """

    heuristics = heuristics or DEFAULT_HEURISTICS
    if raw_quantity is not None and not math.isfinite(raw_quantity):
        raw_quantity = 1.0
    quantity = raw_quantity if raw_quantity and raw_quantity > 0 else 0.0
    unit = (raw_unit or "").strip().lower()

    collapse = first_match(name, rules)
    if collapse is not None:
        return collapse(quantity, unit, heuristics)
    return NormalizedQuantity(quantity=format_quantity(quantity), unit=unit or infer_unit(name))


__all__ = ["QUANTITY_RULES", "MASS_VOLUME_UNITS", "normalize_quantity"]
