"""Purchase unit inference from an ingredient name."""

from __future__ import annotations

from typing import Sequence

from tastypath.shopping.rules import KeywordRule, first_match

UNIT_RULES: tuple[KeywordRule[str], ...] = (
    KeywordRule(
        ("aceite", "vinagre", "vino", "agua mineral", "refresco", "cerveza", "salsa de soja"),
        "botella",
    ),
    KeywordRule(("leche",), "brick", exclude=("leche de coco",)),
    KeywordRule(("zumo", "caldo", "agua", "bebida vegetal", "leche de coco"), "l", exclude=("aguacate",)),
    KeywordRule(
        (
            # meat and poultry
            "pollo", "pechuga", "muslo", "ternera", "cerdo", "cordero", "conejo", "pato", "pavo",
            "solomillo", "lomo", "costillas", "carne picada", "hamburguesa",
            # fish
            "salmón", "merluza", "bacalao", "dorada", "lubina", "trucha", "pescado", "sardinas",
            # cured meats
            "jamón", "chorizo", "bacon", "beicon", "salchichas", "fiambre",
            # dairy blocks
            "queso", "mantequilla", "tofu",
            # dry grains and legumes
            "pasta", "espaguetis", "macarrones", "arroz", "quinoa", "avena", "cuscús", "harina",
            "azúcar", "sal", "lentejas", "garbanzos", "alubias",
            # snack staples
            "patatas fritas", "pan de molde", "galletas", "cereales", "tortillas", "frutos secos",
        ),
        "paquete",
        exclude=("repollo", "salsa", "ensalada"),
    ),
    KeywordRule(
        (
            "espinacas", "lechuga", "rúcula", "canónigos", "brotes", "kale", "mezclum",
            "mejillones", "almejas", "berberechos",
        ),
        "bolsa",
    ),
    KeywordRule(
        ("fresas", "arándanos", "frambuesas", "moras", "cerezas", "champiñones", "setas"),
        "bandeja",
    ),
    KeywordRule(("atún",), "lata"),
    KeywordRule(
        ("manzana", "naranja", "tomate", "pera", "mandarina", "kiwi", "melocotón"),
        "pack",
        exclude=("salsa", "frito", "triturado", "concentrado"),
    ),
    KeywordRule(("zanahoria", "cebolla", "patata"), "malla"),
    KeywordRule(
        ("huevo", "limón", "aguacate", "pan", "yogur", "plátano", "pepino", "calabacín", "lima"),
        "unidad",
    ),
)


def infer_unit(name: str, rules: Sequence[KeywordRule[str]] = UNIT_RULES) -> str:
    """Guess the natural purchase unit for ``name``; empty when nothing matches."""

    return first_match(name, rules, default="") or ""


__all__ = ["UNIT_RULES", "infer_unit"]
