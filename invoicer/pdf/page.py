from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.pdfencrypt import StandardEncryption
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Flowable

from invoicer.core.errors import RenderError
from invoicer.core.paths import resource_path
from invoicer.pdf.cursor import Cursor

logger = logging.getLogger(__name__)

# DejaVu Sans ships as package data so currency symbols outside Latin-1 have glyphs
FONTS_DIR = resource_path("assets/fonts")

# Approximate ascent fraction of font size above baseline (Helvetica/DejaVuSans);
# cells are positioned by their top edge, ReportLab draws on the baseline
TEXT_ASCENT_RATIO = 0.8

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Style:
    """Font and colour for a single drawing call."""

    size: float = 10
    bold: bool = False
    color: RGB = (0, 0, 0)


def register_fonts(fonts_dir: Optional[Path] = None) -> Tuple[str, str]:
    """Return (regular_font_name, bold_font_name)."""
    regular = "Helvetica"
    bold = "Helvetica-Bold"
    d = fonts_dir or FONTS_DIR
    reg = d / "DejaVuSans.ttf"
    bld = d / "DejaVuSans-Bold.ttf"
    try:
        if reg.exists():
            pdfmetrics.registerFont(TTFont("DejaVuSans", str(reg)))
            regular = "DejaVuSans"
        if bld.exists():
            pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(bld)))
            bold = "DejaVuSans-Bold"
    except Exception:
        logger.warning("Could not register fonts from %s; using Helvetica", d, exc_info=True)
        return "Helvetica", "Helvetica-Bold"
    return regular, bold


def font_has_glyphs(font_name: str, text: str) -> bool:
    """True when ``font_name`` can draw every character of ``text``.

    Embedded TrueType fonts are checked against their character map; the
    standard Type 1 fonts only cover WinAnsi (cp1252).
    """
    face = getattr(pdfmetrics.getFont(font_name), "face", None)
    char_map = getattr(face, "charToGlyph", None)
    if char_map is not None:
        return all(char_map.get(ord(ch), 0) != 0 for ch in text)
    try:
        text.encode("cp1252")
    except UnicodeEncodeError:
        return False
    return True


@contextmanager
def _backend(action: str) -> Iterator[None]:
    try:
        yield
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"{action} failed: {exc}") from exc


class Page:
    """A single PDF page drawn through a ReportLab canvas.

    Every text call receives its own :class:`Style`, so no font or colour state
    leaks from one block to the next.
    """

    def __init__(
        self,
        out: BinaryIO,
        page_size: Tuple[float, float] = A4,
        fonts_dir: Optional[Path] = None,
        protect: bool = False,
        title: str = "",
    ) -> None:
        self.width, self.height = page_size
        self.regular_font, self.bold_font = register_fonts(fonts_dir)
        encrypt = None
        if protect:
            encrypt = StandardEncryption("", canPrint=1, canModify=0, canCopy=0, canAnnotate=0)
        with _backend("opening canvas"):
            # invariant output: identical input gives identical bytes
            self.canvas = Canvas(out, pagesize=page_size, encrypt=encrypt, invariant=1)
            if title:
                self.canvas.setTitle(title)
            self.canvas.setLineWidth(0.5)
        self._finalized = False

    def font_for(self, style: Style) -> str:
        return self.bold_font if style.bold else self.regular_font

    def can_draw(self, text: str) -> bool:
        return font_has_glyphs(self.regular_font, text) and font_has_glyphs(self.bold_font, text)

    def text_width(self, text: str, style: Style) -> float:
        return pdfmetrics.stringWidth(text, self.font_for(style), style.size)

    def _pdf_y(self, y: float) -> float:
        return self.height - y

    def cell(self, cursor: Cursor, text: str, style: Style,
             width: Optional[float] = None, align: str = "left") -> None:
        """Draw ``text`` with its top edge at the cursor and move the cursor right.

        Without ``width`` the cursor moves by the text width; with it, the text
        is aligned inside a box of that width and the cursor moves past the box.
        """
        baseline = self._pdf_y(cursor.y) - style.size * TEXT_ASCENT_RATIO
        c = self.canvas
        with _backend(f"drawing text {text!r}"):
            c.setFont(self.font_for(style), style.size)
            c.setFillColorRGB(*(v / 255.0 for v in style.color))
            if width is None:
                c.drawString(cursor.x, baseline, text)
                cursor.advance_x(self.text_width(text, style))
                return
            if align == "right":
                c.drawRightString(cursor.x + width, baseline, text)
            elif align == "center":
                c.drawCentredString(cursor.x + width / 2, baseline, text)
            else:
                c.drawString(cursor.x, baseline, text)
        cursor.advance_x(width)

    def image(self, path: str, x: float, y: float, width: float, height: float) -> None:
        with _backend(f"drawing image {path}"):
            self.canvas.drawImage(path, x, self._pdf_y(y) - height, width=width, height=height, mask="auto")

    def line(self, x1: float, y1: float, x2: float, y2: float, color: RGB, line_width: float = 0.5) -> None:
        c = self.canvas
        with _backend("drawing line"):
            c.setStrokeColorRGB(*(v / 255.0 for v in color))
            c.setLineWidth(line_width)
            c.line(x1, self._pdf_y(y1), x2, self._pdf_y(y2))

    def flowable(self, cursor: Cursor, flowable: Flowable) -> float:
        """Draw a platypus flowable with its top-left at the cursor; return its height."""
        with _backend("drawing table"):
            _w, h = flowable.wrapOn(self.canvas, cursor.content_width, self.height)
            flowable.drawOn(self.canvas, cursor.x, self._pdf_y(cursor.y) - h)
        return h

    def finalize(self) -> None:
        if self._finalized:
            raise RenderError("page already finalized")
        with _backend("writing PDF"):
            self.canvas.save()
        self._finalized = True
