"""Read-only document exports of the shopping list."""

from tastypath.export.pdf import render_shopping_list_pdf

__all__ = ["render_shopping_list_pdf"]
