"""
Vertical layout state for paginated documents.

The renderer never asks the PDF object where it is; it threads a
PageCursor through every section and asks these pure functions where the
next block goes. Pagination can therefore be tested from heights alone.
"""

from dataclasses import dataclass, replace

A4_HEIGHT = 297.0


@dataclass(frozen=True)
class PageGeometry:
    """Usable vertical band of a page, in millimetres."""

    height: float = A4_HEIGHT
    top_margin: float = 15.0
    # Space kept clear above the page bottom for the page stamp
    bottom_margin: float = 25.0

    @property
    def max_y(self) -> float:
        return self.height - self.bottom_margin


@dataclass(frozen=True)
class PageCursor:
    """Current page (1-based) and vertical offset on it."""

    page: int = 1
    y: float = 15.0


def fits(cursor: PageCursor, height: float, geometry: PageGeometry) -> bool:
    return cursor.y + height <= geometry.max_y


def reserve(cursor: PageCursor, height: float, geometry: PageGeometry) -> PageCursor:
    """Position for a block of ``height``; moves to the next page top if it doesn't fit."""
    if fits(cursor, height, geometry):
        return cursor
    return PageCursor(page=cursor.page + 1, y=geometry.top_margin)


def advance(cursor: PageCursor, height: float) -> PageCursor:
    return replace(cursor, y=cursor.y + height)


def layout_rows(
    start: PageCursor, count: int, row_height: float, geometry: PageGeometry
) -> list[PageCursor]:
    """Positions for ``count`` equal-height rows starting at ``start``."""
    positions: list[PageCursor] = []
    cursor = start
    for _ in range(count):
        cursor = reserve(cursor, row_height, geometry)
        positions.append(cursor)
        cursor = advance(cursor, row_height)
    return positions
