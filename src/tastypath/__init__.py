"""
TastyPath shopping list engine.

The package turns weekly meal plans into a deduplicated, unit-normalized,
categorized and priced shopping list, and exposes the list through a small
HTTP API and command-line interface.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
