from __future__ import annotations

from reportlab.lib.pagesizes import A4

from invoicer.pdf.cursor import Cursor


def _cursor() -> Cursor:
    w, h = A4
    return Cursor(w, h, 40, 40, 40, 40)


def test_starts_at_top_left_margin() -> None:
    c = _cursor()
    assert (c.x, c.y) == (40, 40)
    assert c.content_width == A4[0] - 80


def test_advance_line_resets_to_left_margin() -> None:
    c = _cursor()
    c.set_x(300)
    c.advance_line(18)
    assert (c.x, c.y) == (40, 58)


def test_advance_line_with_explicit_x() -> None:
    c = _cursor()
    c.advance_line(14, x=455)
    assert (c.x, c.y) == (455, 54)


def test_snapshot_and_restore() -> None:
    c = _cursor()
    c.move_to(120, 200)
    saved = c.snapshot()
    c.advance_line(50)
    c.advance_x(10)
    c.restore(saved)
    assert (c.x, c.y) == (120, 200)
