from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from reportlab.lib.utils import ImageReader

from invoicer.core.currency import fmt_money
from invoicer.core.errors import AssetError
from invoicer.core.totals import effective_quantity, effective_rate
from invoicer.data.models import InvoiceDocument, Party, TotalsResult
from invoicer.pdf.cursor import Cursor
from invoicer.pdf.page import Page, Style
from invoicer.pdf.table_layout import build_items_table


# ===== Layout constants (points, measured from the top-left) =====
RATE_COLUMN_X = 405
AMOUNT_COLUMN_X = 480
VALUE_X = AMOUNT_COLUMN_X - 15

PARTY_BOX_WIDTH = 100
FOOTER_Y = 800
FOOTER_RULE_END_X = 550

SUBTOTAL_LABEL = "Subtotal"
DISCOUNT_LABEL = "Discount"
TOTAL_LABEL = "Total Due"
TOTAL_HOURS_LABEL = "Total Hours"
DUE_DATE_LABEL = "Due Date"
NOTES_LABEL = "NOTES"

GREY_DARK = (55, 55, 55)
GREY = (75, 75, 75)
GREY_LIGHT = (100, 100, 100)
GREY_FAINT = (150, 150, 150)
RULE_COLOR = (225, 225, 225)

TITLE_STYLE = Style(24, bold=True)
META_STYLE = Style(12, color=GREY_LIGHT)
META_SEPARATOR_STYLE = Style(12, color=GREY_FAINT)
NAME_STYLE = Style(12, bold=True, color=GREY)
PARTY_STYLE = Style(10, color=GREY)
LABEL_STYLE = Style(9, color=GREY)
VALUE_STYLE = Style(11)
AMOUNT_STYLE = Style(12)
TOTAL_DUE_STYLE = Style(11.5, bold=True)
NOTES_LABEL_STYLE = Style(9, color=GREY_DARK)
NOTE_FIRST_STYLE = Style(9, bold=True)
NOTE_STYLE = Style(9)
FOOTER_STYLE = Style(10, color=GREY_DARK)


def split_lines(text: str) -> List[str]:
    """Split on real newlines and on the literal two-character ``\\n`` marker."""
    return text.replace("\\n", "\n").split("\n")


def logo_dimensions(path: str) -> Tuple[int, int]:
    """Return the natural pixel (width, height) of an image file."""
    p = Path(path)
    if not p.is_file():
        raise AssetError(f"logo {path} does not exist")
    try:
        width, height = ImageReader(str(p)).getSize()
    except Exception as exc:
        raise AssetError(f"could not read logo {path}: {exc}") from exc
    if not width or not height:
        raise AssetError(f"logo {path} has no usable size ({width}x{height})")
    return int(width), int(height)


def write_title(page: Page, cursor: Cursor, title: str, invoice_id: str, date: str) -> None:
    page.cell(cursor, title, TITLE_STYLE)
    cursor.advance_line(36)
    page.cell(cursor, "#", META_STYLE)
    page.cell(cursor, invoice_id, META_STYLE)
    page.cell(cursor, "  ·  ", META_SEPARATOR_STYLE)
    page.cell(cursor, date, META_STYLE)
    cursor.advance_line(12)


def write_logo(page: Page, cursor: Cursor, logo: Optional[str], logo_size: float) -> Optional[Tuple[float, float]]:
    """
    Draw the logo scaled to ``logo_size`` points wide, keeping its aspect ratio,
    in the top-right corner inside the margins. The cursor is left where it was.

    Returns the drawn (width, height), or None when there is no logo.
    """
    if not logo:
        return None
    width, height = logo_dimensions(logo)
    scaled_width = float(logo_size)
    scaled_height = height * scaled_width / width

    position = cursor.snapshot()
    try:
        cursor.move_to(page.width - scaled_width - cursor.margin_right, cursor.margin_top)
        page.image(logo, cursor.x, cursor.y, scaled_width, scaled_height)
    finally:
        cursor.restore(position)
    return scaled_width, scaled_height


def write_details(page: Page, cursor: Cursor, x: float, details: Dict[str, str], align: str) -> None:
    # Sorted so the output does not depend on mapping order
    for key in sorted(details):
        cursor.set_x(x)
        page.cell(cursor, f"{key}: {details[key]}", PARTY_STYLE, width=PARTY_BOX_WIDTH, align=align)
        cursor.advance_line(18, x=x)


def write_address(page: Page, cursor: Cursor, x: float, address: Sequence[str], align: str) -> None:
    for line in address:
        cursor.set_x(x)
        page.cell(cursor, line, PARTY_STYLE, width=PARTY_BOX_WIDTH, align=align)
        cursor.advance_line(18, x=x)


def write_party(page: Page, cursor: Cursor, x: float, y: float, party: Party, align: str = "left") -> float:
    """Draw name, details and address starting at (x, y); return the y below the block."""
    cursor.move_to(x, y)
    for i, line in enumerate(split_lines(party.name)):
        if i == 0:
            page.cell(cursor, line, NAME_STYLE, width=PARTY_BOX_WIDTH, align=align)
            cursor.advance_line(18, x=x)
        else:
            page.cell(cursor, line, PARTY_STYLE, width=PARTY_BOX_WIDTH, align=align)
            cursor.advance_line(14, x=x)

    write_details(page, cursor, x, party.details, align)
    write_address(page, cursor, x, party.address, align)
    return cursor.y


def write_parties(page: Page, cursor: Cursor, recipient: Party, issuer: Party) -> None:
    """Recipient on the left, issuer right-aligned against the right margin, same top."""
    x, y = cursor.snapshot()
    left_bottom = write_party(page, cursor, x, y, recipient, "left")

    cursor.restore((x, y))
    issuer_x = cursor.margin_left + cursor.content_width - PARTY_BOX_WIDTH
    right_bottom = write_party(page, cursor, issuer_x, y, issuer, "right")

    cursor.move_to(cursor.margin_left, max(left_bottom, right_bottom))


def write_items(page: Page, cursor: Cursor, document: InvoiceDocument, totals: TotalsResult, symbol: str) -> float:
    lines = []
    for i, description in enumerate(document.items):
        lines.append({
            "date": document.dates[i] if i < len(document.dates) else None,
            "description": description,
            "qty": effective_quantity(document.quantities, i),
            "rate": effective_rate(document.rates, i),
            "amount": totals.amounts[i],
        })

    table = build_items_table(
        lines,
        cursor.content_width,
        symbol=symbol,
        font=page.regular_font,
        bold_font=page.bold_font,
    )
    height = page.flowable(cursor, table)
    cursor.advance_line(height)
    return height


def write_notes(page: Page, cursor: Cursor, note: str) -> None:
    page.cell(cursor, NOTES_LABEL, NOTES_LABEL_STYLE)
    cursor.advance_line(18)
    for i, line in enumerate(split_lines(note)):
        page.cell(cursor, line, NOTE_FIRST_STYLE if i == 0 else NOTE_STYLE)
        cursor.advance_line(15)
    cursor.advance_line(48)


def write_row(page: Page, cursor: Cursor, label: str, value: str, value_style: Style) -> None:
    """One label/value row in the right-hand totals column."""
    cursor.set_x(RATE_COLUMN_X)
    page.cell(cursor, label, LABEL_STYLE)
    cursor.set_x(VALUE_X)
    page.cell(cursor, value, value_style)
    cursor.advance_line(24)


def write_total_hours(page: Page, cursor: Cursor, total_hours: float) -> None:
    write_row(page, cursor, TOTAL_HOURS_LABEL, f"{total_hours:.2f}", VALUE_STYLE)


def tax_label(tax_name: str, tax_rate: float) -> str:
    return f"{tax_name} {tax_rate * 100:.0f}%"


def write_totals(page: Page, cursor: Cursor, totals: TotalsResult, tax_name: str, symbol: str) -> None:
    write_row(page, cursor, SUBTOTAL_LABEL, fmt_money(totals.display_subtotal, symbol), AMOUNT_STYLE)
    if totals.show_tax:
        write_row(page, cursor, tax_label(tax_name, totals.tax_rate), fmt_money(totals.tax, symbol), AMOUNT_STYLE)
    if totals.show_discount:
        write_row(page, cursor, DISCOUNT_LABEL, fmt_money(totals.discount, symbol), AMOUNT_STYLE)
    write_row(page, cursor, TOTAL_LABEL, fmt_money(totals.total, symbol), TOTAL_DUE_STYLE)


def write_due_date(page: Page, cursor: Cursor, due: str) -> None:
    write_row(page, cursor, DUE_DATE_LABEL, due, VALUE_STYLE)


def write_footer(page: Page, cursor: Cursor, invoice_id: str) -> None:
    # Fixed position near the bottom of the page, independent of the content above
    cursor.move_to(cursor.margin_left, FOOTER_Y)
    page.cell(cursor, invoice_id, FOOTER_STYLE)
    page.line(cursor.x + 10, cursor.y + 6, FOOTER_RULE_END_X, cursor.y + 6, RULE_COLOR)
    cursor.advance_line(48)
