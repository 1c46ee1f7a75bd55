"""Best-effort parser for free-text ingredient lines.

Lines look like ``"2 cucharadas de aceite de oliva"``, ``"200 g pollo"``,
``"1/2 taza de arroz"`` or ``"Sal al gusto"``. The grammar is deliberately
lossy: anything that does not start with a quantity is kept verbatim as the
ingredient name with a quantity of one.
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Optional

from tastypath.models.shopping import IngredientLine
from tastypath.shopping.units import infer_unit

# Canonical short form for every recognised unit token.
UNIT_SYNONYMS: dict[str, str] = {
    "g": "g",
    "gr": "g",
    "grs": "g",
    "gramo": "g",
    "gramos": "g",
    "kg": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "ml": "ml",
    "l": "l",
    "litro": "l",
    "litros": "l",
    "cucharada": "cucharada",
    "cucharadas": "cucharada",
    "cucharadita": "cucharadita",
    "cucharaditas": "cucharadita",
    "taza": "taza",
    "tazas": "taza",
    "unidad": "unidades",
    "unidades": "unidades",
    "ud": "unidades",
    "uds": "unidades",
    "un": "unidades",
}

_UNIT_PATTERN = "|".join(
    re.escape(token) for token in sorted(UNIT_SYNONYMS, key=len, reverse=True)
)

_LINE_RE = re.compile(
    r"""
    ^\s*
    (?P<quantity>
        \d+\s+\d+\s*/\s*\d+       # mixed number: 1 1/2
      | \d+\s*/\s*\d+             # fraction: 1/2
      | \d+(?:[.,]\d+)?           # integer or decimal with comma or dot
    )
    \s*
    (?:(?P<unit>"""
    + _UNIT_PATTERN
    + r""")\.?(?=\s|$))?
    \s*
    (?:de\s+)?
    (?P<name>.*)$
    """,
    re.VERBOSE,
)

_LEADING_ARTICLE_RE = re.compile(r"^(?:el|la|los|las|un|una|unos|unas)\s+")


def capitalize_first(value: str) -> str:
    """Uppercase the first character only (``str.capitalize`` lowercases the rest)."""

    return value[:1].upper() + value[1:]


def parse_quantity(raw: str) -> Optional[float]:
    """Evaluate ``"2"``, ``"1,5"``, ``"1/2"`` or ``"1 1/2"``; ``None`` when unusable.

    Values that overflow to infinity (or spell ``inf``/``nan``) are unusable too.
    """

    text = raw.strip()
    if "/" in text:
        head, _, tail = text.partition("/")
        head_parts = head.split()
        try:
            whole = float(head_parts[0]) if len(head_parts) == 2 else 0.0
            numerator = float(head_parts[-1])
            denominator = float(tail.strip())
        except (ValueError, IndexError):
            return None
        if denominator == 0:
            return None
        value = whole + numerator / denominator
    else:
        try:
            value = float(text.replace(",", "."))
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def standardize_unit(token: Optional[str]) -> str:
    if not token:
        return ""
    return UNIT_SYNONYMS.get(token.lower().rstrip("."), token.lower())


def match_ingredient(line: str) -> Optional[IngredientLine]:
    """Strict half of :func:`parse_ingredient`: ``None`` unless a leading quantity and a name parse."""

    match = _LINE_RE.match((line or "").strip().lower())
    if not match:
        return None
    quantity = parse_quantity(match.group("quantity"))
    name = match.group("name").strip()
    if quantity is None or not name:
        return None
    unit = standardize_unit(match.group("unit")) or infer_unit(name)
    return IngredientLine(name=capitalize_first(name), quantity=quantity, unit=unit)


def parse_ingredient(line: str) -> IngredientLine:
    """Split an ingredient line into name, quantity and unit.

    Never raises: lines without a leading quantity come back with
    ``quantity=1`` and the trimmed text as name. When no unit token is
    present the unit is inferred from the name. A quantity with nothing
    after it (``"2 g"``) is kept as a name of one ``unidad``.
    """

    parsed = match_ingredient(line)
    if parsed is not None:
        return parsed

    text = (line or "").strip()
    if _LINE_RE.match(text.lower()):
        return IngredientLine(name=capitalize_first(text), quantity=1.0, unit="unidad")
    return IngredientLine(name=capitalize_first(text), quantity=1.0, unit=infer_unit(text))


def ingredient_key(name: str) -> str:
    """Deduplication key: lowercased, whitespace-collapsed, leading article dropped."""

    collapsed = " ".join((name or "").lower().split())
    stripped = _LEADING_ARTICLE_RE.sub("", collapsed)
    return stripped or collapsed


def slugify(value: str, max_length: int = 40) -> str:
    decomposed = unicodedata.normalize("NFD", str(value))
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = re.sub(r"[^a-z0-9\s-]", "", ascii_only.lower()).strip()
    return re.sub(r"\s+", "-", cleaned)[:max_length]


def format_quantity(value: float) -> str:
    """Render a quantity without trailing zeros (``3.0`` -> ``"3"``, ``0.5`` -> ``"0.5"``).

    Non-finite values render as the default quantity, ``"1"``.
    """

    if not math.isfinite(value):
        return "1"
    rounded = round(float(value), 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


__all__ = [
    "UNIT_SYNONYMS",
    "capitalize_first",
    "parse_quantity",
    "standardize_unit",
    "match_ingredient",
    "parse_ingredient",
    "ingredient_key",
    "slugify",
    "format_quantity",
]
