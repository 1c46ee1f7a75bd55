"""Keyword categorizer for the fixed grocery taxonomy."""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from tastypath.models.shopping import Category
from tastypath.shopping.rules import KeywordRule, first_match

CATEGORY_RULES: tuple[KeywordRule[Category], ...] = (
    KeywordRule(
        (
            "pollo", "pechuga", "muslo", "contramuslo", "alitas", "ternera", "vacuno", "buey",
            "cerdo", "cordero", "cabrito", "conejo", "pato", "pavo", "codorniz", "perdiz",
            "bacon", "beicon", "panceta", "jamón", "lacón", "chorizo", "chistorra", "salchichón",
            "salchicha", "fuet", "sobrasada", "morcilla", "butifarra", "mortadela", "fiambre",
            "cecina", "lomo", "costillas", "solomillo", "entrecot", "chuleta", "secreto ibérico",
            "magro", "carne", "hamburguesa", "albóndigas", "hígado", "jabalí", "venado",
        ),
        Category.MEAT,
        exclude=("repollo", "caldo"),
    ),
    KeywordRule(
        (
            "salmón", "atún", "bonito", "pescado", "merluza", "bacalao", "dorada", "lubina",
            "trucha", "sardina", "boquerón", "boquerones", "anchoa", "caballa", "rape",
            "lenguado", "rodaballo", "pez espada", "emperador", "corvina", "panga", "abadejo",
            "langostinos", "gambas", "camarones", "mejillones", "almejas", "berberechos",
            "calamar", "sepia", "pulpo", "chipirones", "navajas", "vieiras", "cangrejo",
            "bogavante", "langosta", "surimi", "ostras", "huevas", "marisco",
        ),
        Category.SEAFOOD,
    ),
    KeywordRule(
        (
            "huevo", "clara de huevo", "yema", "queso", "mozzarella", "parmesano", "ricotta",
            "feta", "burrata", "mascarpone", "leche", "yogur", "kéfir", "nata", "crema de leche",
            "mantequilla", "requesón", "cuajada", "natillas",
        ),
        Category.DAIRY_EGGS,
        exclude=("leche de coco", "leche de almendra", "mantequilla de cacahuete"),
    ),
    KeywordRule(
        (
            "manzana", "plátano", "banana", "fresa", "arándano", "naranja", "pera", "kiwi",
            "mango", "piña", "granada", "uva", "melocotón", "nectarina", "albaricoque",
            "ciruela", "higo", "cereza", "frambuesa", "mora", "limón", "lima", "pomelo",
            "mandarina", "papaya", "maracuyá", "coco", "dátil", "pasas", "sandía", "melón",
            "caqui", "chirimoya", "lichi", "guayaba", "frutos rojos", "fruta",
        ),
        Category.FRUIT,
        exclude=("morad", "vinagre"),
    ),
    KeywordRule(
        (
            "brócoli", "zanahoria", "espinacas", "pimiento", "calabacín", "berenjena", "tomate",
            "cebolla", "cebolleta", "chalota", "ajo", "puerro", "lechuga", "pepino", "patata",
            "batata", "boniato", "coliflor", "repollo", "col rizada", "coles de bruselas",
            "lombarda", "apio", "nabo", "rábano", "remolacha", "alcachofa", "espárragos",
            "judías", "guisantes", "maíz", "champiñones", "setas", "calabaza", "kale", "edamame",
            "rúcula", "canónigos", "acelgas", "endibias", "escarola", "brotes", "germinados",
            "okra", "pak choi", "verduras", "hortalizas",
        ),
        Category.VEGETABLES,
        exclude=("ajonjolí", "patatas fritas", "judías blancas", "judías pintas"),
    ),
    KeywordRule(
        (
            "arroz", "pasta", "espaguetis", "macarrones", "tallarines", "fideos", "lasaña",
            "quinoa", "avena", "copos", "pan", "baguette", "tostadas", "biscotes", "bulgur",
            "cuscús", "mijo", "amaranto", "trigo", "cebada", "centeno", "espelta", "kamut",
            "teff", "harina", "sémola", "polenta", "tortillas", "wraps", "granola", "muesli",
            "cereales", "maicena", "crackers",
        ),
        Category.GRAINS,
        exclude=("pasta de curry",),
    ),
    KeywordRule(
        (
            "lentejas", "garbanzos", "alubias", "judías blancas", "judías pintas", "frijoles",
            "habas", "soja", "tofu", "tempeh", "hummus", "azukis", "altramuces", "legumbres",
        ),
        Category.LEGUMES,
        exclude=("salsa de soja",),
    ),
    KeywordRule(
        (
            "nueces", "nuez", "almendra", "pistachos", "anacardos", "avellanas", "macadamia",
            "cacahuete", "maní", "piñones", "castañas", "pecanas", "semillas", "chía", "lino",
            "sésamo", "ajonjolí", "pipas", "frutos secos",
        ),
        Category.NUTS_SEEDS,
        exclude=("nuez moscada", "aceite"),
    ),
    KeywordRule(
        ("aceite", "aceitunas", "olivas", "aguacate", "tahini", "margarina", "manteca", "ghee"),
        Category.OILS_FATS,
    ),
    KeywordRule(
        (
            "sal", "pimienta", "canela", "nuez moscada", "clavo", "cardamomo", "anís", "hinojo",
            "mostaza", "wasabi", "curry", "garam masala", "za'atar", "zumaque", "sumac",
            "cúrcuma", "comino", "orégano", "albahaca", "jengibre", "pimentón", "romero",
            "tomillo", "laurel", "estragón", "eneldo", "cilantro", "perejil", "menta",
            "hierbabuena", "cebollino", "salvia", "guindilla", "cayena", "chile", "azafrán",
            "vainilla", "vinagre", "ketchup", "mayonesa", "tabasco", "miso", "especias",
            "hierbas",
        ),
        Category.SEASONINGS,
        exclude=("ensalada",),
    ),
)

# Supermarket aisle order used for display; matches the declaration order of Category.
CATEGORY_ORDER: tuple[Category, ...] = tuple(Category)


def categorize(name: str, rules: Sequence[KeywordRule[Category]] = CATEGORY_RULES) -> Category:
    """Return the first matching category, ``Category.OTHER`` when none does."""

    return first_match(name, rules, default=Category.OTHER) or Category.OTHER


def category_sort_key(category: Category | str) -> tuple[int, str]:
    """Sort known categories by aisle order, unknown ones after them alphabetically."""

    value = category.value if isinstance(category, Category) else str(category)
    for index, known in enumerate(CATEGORY_ORDER):
        if known.value == value:
            return (index, "")
    return (len(CATEGORY_ORDER), value.lower())


T = TypeVar("T")


def sort_categories(categories: Iterable[T]) -> list[T]:
    return sorted(categories, key=category_sort_key)  # type: ignore[arg-type]


__all__ = ["CATEGORY_RULES", "CATEGORY_ORDER", "categorize", "category_sort_key", "sort_categories"]
