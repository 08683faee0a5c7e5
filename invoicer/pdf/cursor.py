from __future__ import annotations

from typing import Optional, Tuple


class Cursor:
    """Current drawing position on a page.

    Coordinates are measured in points from the top-left corner, with y growing
    downwards; the page wrapper flips them into PDF space when drawing.
    """

    def __init__(self, page_width: float, page_height: float,
                 left: float, top: float, right: float, bottom: float) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.margin_left = left
        self.margin_top = top
        self.margin_right = right
        self.margin_bottom = bottom
        self._x = left
        self._y = top

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    def move_to(self, x: float, y: float) -> None:
        self._x = x
        self._y = y

    def set_x(self, x: float) -> None:
        self._x = x

    def set_y(self, y: float) -> None:
        self._y = y

    def advance_x(self, dx: float) -> None:
        self._x += dx

    def advance_line(self, height: float, x: Optional[float] = None) -> None:
        """Move down by ``height`` and return to the left margin (or ``x``)."""
        self._y += height
        self._x = self.margin_left if x is None else x

    def snapshot(self) -> Tuple[float, float]:
        return self._x, self._y

    def restore(self, position: Tuple[float, float]) -> None:
        self._x, self._y = position
