"""Static retail price heuristics.

Prices are per purchase unit as sold in a supermarket (one package, bottle,
bag, tray or can), or per piece for produce and eggs sold individually.
They are hand-tuned guesses, not catalogue data.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from tastypath.shopping.heuristics import DEFAULT_HEURISTICS, Heuristics
from tastypath.shopping.rules import KeywordRule, first_match

PRICE_RULES: tuple[KeywordRule[float], ...] = (
    KeywordRule(("atún",), 1.20),
    KeywordRule(("solomillo", "ternera", "cordero", "buey", "entrecot", "vacuno"), 9.50),
    KeywordRule(
        (
            "pollo", "pechuga", "muslo", "pavo", "cerdo", "conejo", "pato", "carne picada",
            "lomo", "costillas", "hamburguesa",
        ),
        6.50,
        exclude=("repollo", "caldo"),
    ),
    KeywordRule(
        ("jamón", "chorizo", "bacon", "beicon", "panceta", "salchichas", "fiambre", "fuet"),
        2.80,
    ),
    KeywordRule(("salmón", "dorada", "lubina", "bacalao", "rape"), 7.50),
    KeywordRule(("merluza", "trucha", "pescado", "sardinas", "boquerones", "caballa"), 5.50),
    KeywordRule(("langostinos", "gambas", "calamar", "pulpo", "sepia"), 6.00),
    KeywordRule(("mejillones", "almejas", "berberechos"), 4.00),
    KeywordRule(("huevo",), 0.25),
    KeywordRule(("queso",), 3.20),
    KeywordRule(("mantequilla",), 2.40, exclude=("cacahuete",)),
    KeywordRule(("yogur",), 0.45),
    KeywordRule(("nata",), 1.30),
    KeywordRule(("leche",), 1.05, exclude=("leche de coco",)),
    KeywordRule(("fresas", "arándanos", "frambuesas", "moras", "cerezas"), 2.80),
    KeywordRule(("champiñones", "setas"), 1.90),
    KeywordRule(("espinacas", "lechuga", "rúcula", "canónigos", "kale", "brotes"), 1.50),
    KeywordRule(("tomate frito", "tomate triturado", "salsa de tomate", "tomate concentrado"), 1.10),
    KeywordRule(("manzana", "naranja", "pera", "mandarina", "kiwi", "melocotón"), 0.40),
    KeywordRule(("tomate",), 0.35),
    KeywordRule(("plátano", "banana"), 0.30),
    KeywordRule(("limón", "lima"), 0.35),
    KeywordRule(("aguacate",), 1.10),
    KeywordRule(("pepino", "pimiento"), 0.70),
    KeywordRule(("calabacín", "berenjena"), 0.85),
    KeywordRule(("brócoli", "coliflor"), 1.70),
    KeywordRule(("patatas fritas", "galletas"), 1.60),
    KeywordRule(("zanahoria",), 0.10),
    KeywordRule(("cebolla",), 0.15),
    KeywordRule(("patata", "batata", "boniato"), 0.30),
    KeywordRule(("pan de molde",), 1.60),
    KeywordRule(("pan",), 0.90, exclude=("panceta", "panga")),
    KeywordRule(("quinoa",), 3.20),
    KeywordRule(("arroz",), 1.30),
    KeywordRule(("pasta", "espaguetis", "macarrones", "fideos"), 1.00),
    KeywordRule(("avena", "cuscús", "cereales"), 1.50),
    KeywordRule(("harina",), 0.90),
    KeywordRule(("azúcar",), 1.10),
    KeywordRule(("lentejas", "garbanzos", "alubias"), 1.50),
    KeywordRule(("hummus",), 2.20),
    KeywordRule(("tofu",), 2.30),
    KeywordRule(
        ("nueces", "almendras", "pistachos", "anacardos", "avellanas", "macadamia", "piñones"),
        3.50,
    ),
    KeywordRule(("semillas", "chía", "lino", "sésamo"), 2.50),
    KeywordRule(("aceite de oliva",), 7.50),
    KeywordRule(("aceite",), 3.00),
    KeywordRule(("aceitunas",), 1.50),
    KeywordRule(("vinagre",), 1.20),
    KeywordRule(("salsa de soja",), 2.00),
    KeywordRule(("sal",), 0.50, exclude=("ensalada", "salsa")),
    KeywordRule(("pimienta",), 1.80),
    KeywordRule(
        (
            "canela", "comino", "orégano", "albahaca", "jengibre", "pimentón", "romero",
            "tomillo", "laurel", "perejil", "cilantro", "menta", "cúrcuma", "curry", "nuez moscada",
        ),
        1.40,
    ),
)

# Units that describe how much a recipe uses, not how many things are bought.
MEASURE_UNITS = frozenset({"g", "kg", "ml", "l", "cucharada", "cucharadita", "taza"})

# Pieces contained in one purchase unit, for items priced per piece.
PIECES_PER_UNIT: dict[str, float] = {
    "docena": 12,
    "media docena": 6,
    "pack": 4,
    "malla": 10,
}


def estimate_price(
    name: str,
    rules: Sequence[KeywordRule[float]] = PRICE_RULES,
    heuristics: Optional[Heuristics] = None,
) -> float:
    """Return the estimated price of one purchase unit of ``name``."""

    fallback = (heuristics or DEFAULT_HEURISTICS).default_price
    price = first_match(name, rules, default=fallback)
    return float(fallback if price is None else price)


def purchase_factor(amount: float, unit: str) -> float:
    """How many priced units an ``amount`` of ``unit`` represents."""

    normalized = (unit or "").strip().lower()
    if normalized in MEASURE_UNITS:
        return 1.0
    if not amount or math.isnan(amount) or amount <= 0:
        return 1.0
    return amount * PIECES_PER_UNIT.get(normalized, 1)


def item_price(
    name: str,
    amount: float,
    unit: str,
    *,
    base_price: Optional[float] = None,
    rules: Sequence[KeywordRule[float]] = PRICE_RULES,
    heuristics: Optional[Heuristics] = None,
) -> float:
    """Price of a shopping item, combining the unit estimate with its quantity."""

    if base_price is None or math.isnan(base_price) or base_price < 0:
        base_price = estimate_price(name, rules, heuristics)
    return round(max(0.0, base_price * purchase_factor(amount, unit)), 2)


__all__ = [
    "PRICE_RULES",
    "MEASURE_UNITS",
    "PIECES_PER_UNIT",
    "estimate_price",
    "purchase_factor",
    "item_price",
]
