"""Ordered keyword rule tables shared by the shopping heuristics."""

from __future__ import annotations

import dataclasses
from typing import Generic, Iterable, Optional, TypeVar

ResultT = TypeVar("ResultT")

# Acute accents and diaeresis only; "ñ" stays distinct so "piña" never matches "espinacas".
_ACCENT_TABLE = str.maketrans("áéíóúüàèìòù", "aeiouuaeiou")


def fold(value: str) -> str:
    """Lowercase ``value`` and strip vowel accents for keyword comparison."""

    return value.lower().translate(_ACCENT_TABLE)


@dataclasses.dataclass(frozen=True)
class KeywordRule(Generic[ResultT]):
    """Substring rule: matches when any keyword occurs and no exclusion does."""

    keywords: tuple[str, ...]
    result: ResultT
    exclude: tuple[str, ...] = ()

    def matches(self, folded_name: str) -> bool:
        if any(fold(term) in folded_name for term in self.exclude):
            return False
        return any(fold(term) in folded_name for term in self.keywords)


def first_match(
    name: str,
    rules: Iterable[KeywordRule[ResultT]],
    default: Optional[ResultT] = None,
) -> Optional[ResultT]:
    """Return the result of the first rule matching ``name`` (top to bottom)."""

    folded = fold(name or "")
    for rule in rules:
        if rule.matches(folded):
            return rule.result
    return default


__all__ = ["KeywordRule", "first_match", "fold"]
