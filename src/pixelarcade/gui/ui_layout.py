from __future__ import annotations

import pyglet

# x, y (bottom-left), width, height in window pixels
Rect = tuple[float, float, float, float]


class PanelColumn:
    """Top-down stacking of HUD rows inside a fixed-width panel."""

    def __init__(self, *, x: float, top: float, width: float, padding: float = 12, gap: float = 10) -> None:
        self.left = x + padding
        self.width = max(0.0, width - 2 * padding)
        self.gap = gap
        self.cursor = top - padding

    def _take(self, height: float) -> Rect:
        height = max(0.0, height)
        rect = (self.left, self.cursor - height, self.width, height)
        self.cursor -= height + self.gap
        return rect

    def label(
        self,
        text: str,
        *,
        font_size: int,
        color: tuple[int, int, int, int],
        batch: pyglet.graphics.Batch,
    ) -> pyglet.text.Label:
        label = pyglet.text.Label(
            text, x=self.left, y=self.cursor, anchor_y="top",
            font_size=font_size, color=color, batch=batch,
        )
        self._take(max(float(label.content_height), float(font_size)))
        return label

    def skip(self, height: float) -> None:
        self.cursor -= max(0.0, height)

    def row(self, height: float) -> Rect:
        return self._take(height)

    def buttons(self, count: int, *, columns: int, height: float, gap: float = 8) -> list[Rect]:
        """``count`` equal cells laid out left to right, wrapping every ``columns``."""
        columns = max(1, columns)
        rows = (count + columns - 1) // columns
        cell_w = (self.width - (columns - 1) * gap) / columns
        top = self.cursor
        cells = []
        for index in range(count):
            r, c = divmod(index, columns)
            cells.append((self.left + c * (cell_w + gap), top - height - r * (height + gap), cell_w, height))
        self._take(rows * height + max(0, rows - 1) * gap)
        return cells

    def rest(self, *, bottom: float = 12) -> Rect:
        """Everything left between the cursor and ``bottom``."""
        return self._take(self.cursor - bottom)


def split_ends(rect: Rect) -> tuple[Rect, Rect, Rect]:
    """Square left button, middle strip, square right button."""
    x, y, w, h = rect
    return (x, y, h, h), (x + h, y, max(0.0, w - 2 * h), h), (x + w - h, y, h, h)


def point_in_rect(x: float, y: float, rect: Rect) -> bool:
    rx, ry, rw, rh = rect
    return rx <= x <= rx + rw and ry <= y <= ry + rh
