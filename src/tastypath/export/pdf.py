"""PDF export of the shopping list, grouped by supermarket aisle."""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import Iterable, Optional
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from tastypath.models.shopping import ShoppingListItem, ShoppingListSummary
from tastypath.shopping.budget import group_by_category
from tastypath.shopping.parser import format_quantity

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Lista de Compras"
PROVENANCE_MARKER = "Plan:"


def item_line(item: ShoppingListItem) -> str:
    """``"• Pollo — 1 paquete"`` plus user notes in parentheses (plan notes are dropped)."""

    line = f"• {item.name} — {format_quantity(item.amount)} {item.unit}".rstrip()
    if item.notes and PROVENANCE_MARKER not in item.notes:
        line = f"{line} ({item.notes})"
    return line


def generated_on_line(day: date) -> str:
    return f"Generado el {day.day}/{day.month}/{day.year}"


def render_shopping_list_pdf(
    items: Iterable[ShoppingListItem],
    *,
    title: str = DEFAULT_TITLE,
    summary: Optional[ShoppingListSummary] = None,
    generated_on: Optional[date] = None,
) -> bytes:
    """Render ``items`` to PDF bytes; checked items are struck through in grey."""

    items = list(items)
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, rightMargin=45, leftMargin=45, topMargin=55, bottomMargin=45)

    styles = getSampleStyleSheet()
    heading = ParagraphStyle("CategoryHeading", parent=styles["Heading3"], spaceBefore=10, spaceAfter=4)
    bullet = ParagraphStyle("ShoppingItem", parent=styles["Normal"], leftIndent=12, spaceAfter=2)

    elements = [
        Paragraph(escape(title), styles["Title"]),
        Paragraph(generated_on_line(generated_on or date.today()), styles["Normal"]),
        Spacer(1, 12),
    ]
    if summary is not None:
        totals = f"Total: {summary.total_cost_all:.2f} · Pendiente: {summary.total_cost:.2f}"
        if summary.budget_limit:
            totals += f" · Presupuesto: {summary.budget_limit:.2f}"
        elements.append(Paragraph(escape(totals), styles["Normal"]))
        elements.append(Spacer(1, 6))

    for category, category_items in group_by_category(items):
        elements.append(Paragraph(escape(category.value.upper()), heading))
        for item in category_items:
            text = escape(item_line(item))
            if item.is_checked:
                text = f'<font color="grey"><strike>{text}</strike></font>'
            elements.append(Paragraph(text, bullet))

    doc.build(elements)
    logger.debug("Rendered shopping list PDF with %s item(s)", len(items))
    return buf.getvalue()


__all__ = ["DEFAULT_TITLE", "item_line", "generated_on_line", "render_shopping_list_pdf"]
