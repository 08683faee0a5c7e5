from __future__ import annotations

import io
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from reportlab.lib.pagesizes import A4

from invoicer.core.currency import currency_symbol
from invoicer.core.totals import compute_totals
from invoicer.data.models import InvoiceDocument
from invoicer.pdf import blocks
from invoicer.pdf.cursor import Cursor
from invoicer.pdf.page import Page

logger = logging.getLogger(__name__)


# ===== Layout constants (tweak here) =====
PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE

MARGIN_LEFT = 40
MARGIN_RIGHT = 40
MARGIN_TOP = 40
MARGIN_BOTTOM = 40

# Vertical gaps between the stages
GAP_AFTER_HEADER = 24
GAP_AFTER_PARTIES = 18
GAP_AFTER_TABLE = 32

DUE_DATE_FORMAT = "%b %d, %Y"


def resolve_due_date(document: InvoiceDocument) -> Optional[str]:
    """Explicit due date wins; otherwise count ``due_days`` from the generation date."""
    if document.due:
        return document.due
    if document.due_days > 0:
        return (document.generated_on + timedelta(days=document.due_days)).strftime(DUE_DATE_FORMAT)
    return None


def display_symbol(page: Page, code: str) -> str:
    """Currency symbol for the page, or the ISO code when the fonts have no glyph for it."""
    symbol = currency_symbol(code)
    if page.can_draw(symbol):
        return symbol
    logger.warning("Font %s cannot draw %r; showing %s instead", page.regular_font, symbol, code)
    return f"{code} "


def render(document: InvoiceDocument, fonts_dir: Optional[Path] = None) -> bytes:
    """Draw the invoice on a single A4 page and return the finished PDF bytes.

    Stages run once each, top to bottom: title, logo, parties, items, notes,
    total hours, totals, due date, footer. Any error aborts the pass before the
    page is finalized, so no partial PDF is produced.
    """
    totals = compute_totals(
        document.items,
        document.quantities,
        document.rates,
        tax_rate=document.tax,
        tax_inclusive=document.rates_tax_inclusive,
        discount_rate=document.discount,
    )

    buffer = io.BytesIO()
    page = Page(buffer, PAGE_SIZE, fonts_dir=fonts_dir, protect=document.protect, title=f"Invoice {document.id}")
    symbol = display_symbol(page, document.currency)
    cursor = Cursor(PAGE_WIDTH, PAGE_HEIGHT, MARGIN_LEFT, MARGIN_TOP, MARGIN_RIGHT, MARGIN_BOTTOM)

    blocks.write_title(page, cursor, document.title, document.id, document.date)
    blocks.write_logo(page, cursor, document.logo, document.logo_size)
    cursor.advance_line(GAP_AFTER_HEADER)

    blocks.write_parties(page, cursor, document.recipient, document.issuer)
    cursor.advance_line(GAP_AFTER_PARTIES)

    blocks.write_items(page, cursor, document, totals, symbol)
    cursor.advance_line(GAP_AFTER_TABLE)

    # Notes sit on the left; the totals column starts at the same height on the right
    position = cursor.snapshot()
    if document.note:
        blocks.write_notes(page, cursor, document.note)
    cursor.restore(position)

    blocks.write_total_hours(page, cursor, totals.total_hours)
    blocks.write_totals(page, cursor, totals, document.tax_name, symbol)

    due = resolve_due_date(document)
    if due:
        blocks.write_due_date(page, cursor, due)

    blocks.write_footer(page, cursor, document.id)

    page.finalize()
    logger.debug("Rendered invoice %s (%s items, total %.2f)", document.id, len(document.items), totals.total)
    return buffer.getvalue()


def build_invoice_pdf(out_path: Path | str, document: InvoiceDocument, fonts_dir: Optional[Path] = None) -> Path:
    """Render ``document`` and write it to ``out_path``; nothing is written if rendering fails."""
    out = Path(out_path)
    pdf = render(document, fonts_dir=fonts_dir)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(pdf)
    logger.info("PDF built: %s", out)
    return out
