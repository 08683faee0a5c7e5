# invoicer/pdf/table_layout.py
from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.platypus import Table, TableStyle

from invoicer.core.currency import fmt_money

HEADERS = ["DATE", "DESCRIPTION", "HOURS", "RATE", "AMOUNT"]

# Fractions of the content width; Description takes half
COLUMN_FRACTIONS = (1 / 8, 1 / 2, 1 / 8, 1 / 8, 1 / 8)

ROW_HEIGHT = 24
HEADER_FONT_SIZE = 11
BODY_FONT_SIZE = 8

BORDER_COLOR = colors.Color(75 / 255, 75 / 255, 75 / 255)
HEADER_COLOR = colors.Color(75 / 255, 75 / 255, 75 / 255)
BODY_COLOR = colors.Color(55 / 255, 55 / 255, 55 / 255)
W_RULE = 0.5


def column_widths(content_width: float) -> list[float]:
    return [content_width * f for f in COLUMN_FRACTIONS]


def format_date(val: Optional[date]) -> str:
    return val.strftime("%d-%m-%Y") if val is not None else ""


def build_items_table(
    lines: Sequence[dict],
    content_width: float,
    symbol: str = "",
    font: str = "Helvetica",
    bold_font: str = "Helvetica-Bold",
) -> Table:
    """
    Build the line-item table.
    lines: list of dicts with keys date, description, qty, rate, amount
    symbol: currency symbol prefixed to Rate and Amount
    content_width: usable width inside margins
    """
    data = [list(HEADERS)]
    for row in lines:
        data.append([
            format_date(row.get("date")),
            row["description"],
            f"{float(row['qty']):.2f}",
            fmt_money(row["rate"], symbol),
            fmt_money(row["amount"], symbol),
        ])

    # Fixed height per row; long descriptions are not wrapped
    row_heights = [ROW_HEIGHT] * len(data)
    t = Table(data, colWidths=column_widths(content_width), rowHeights=row_heights)

    ts = TableStyle()
    # Rules above the header and below the last row only
    ts.add("LINEABOVE", (0, 0), (-1, 0), W_RULE, BORDER_COLOR)
    ts.add("LINEBELOW", (0, -1), (-1, -1), W_RULE, BORDER_COLOR)

    # Header
    ts.add("FONTNAME", (0, 0), (-1, 0), bold_font)
    ts.add("FONTSIZE", (0, 0), (-1, 0), HEADER_FONT_SIZE)
    ts.add("TEXTCOLOR", (0, 0), (-1, 0), HEADER_COLOR)

    if len(data) > 1:
        ts.add("FONTNAME", (0, 1), (-1, -1), font)
        ts.add("FONTSIZE", (0, 1), (-1, -1), BODY_FONT_SIZE)
        ts.add("TEXTCOLOR", (0, 1), (-1, -1), BODY_COLOR)

    ts.add("ALIGN", (0, 0), (-1, -1), "CENTER")
    ts.add("VALIGN", (0, 0), (-1, -1), "MIDDLE")

    t.setStyle(ts)
    return t
