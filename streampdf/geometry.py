"""Geometry primitives, unit conversions and standard page sizes.

All coordinates are PDF points (1/72 inch) with the origin in the
bottom-left corner of the page.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union

POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4


class PageSize(str, Enum):
    A0 = "a0"
    A1 = "a1"
    A2 = "a2"
    A3 = "a3"
    A4 = "a4"
    A5 = "a5"
    A6 = "a6"
    LETTER = "letter"
    LEGAL = "legal"
    TABLOID = "tabloid"


# Portrait dimensions in points.
_PAGE_DIMENSIONS = {
    PageSize.A0: (2384.0, 3370.0),
    PageSize.A1: (1684.0, 2384.0),
    PageSize.A2: (1191.0, 1684.0),
    PageSize.A3: (842.0, 1191.0),
    PageSize.A4: (595.0, 842.0),
    PageSize.A5: (420.0, 595.0),
    PageSize.A6: (297.0, 420.0),
    PageSize.LETTER: (612.0, 792.0),
    PageSize.LEGAL: (612.0, 1008.0),
    PageSize.TABLOID: (792.0, 1224.0),
}


@dataclass(slots=True, frozen=True)
class Size:
    width: float
    height: float

    @classmethod
    def from_tuple(cls, value: Iterable[float]) -> "Size":
        width, height = value
        return cls(float(width), float(height))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.width, self.height)


@dataclass(slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        """Ensure non-negative dimensions."""
        if self.width < 0:
            self.width = abs(self.width)
        if self.height < 0:
            self.height = abs(self.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y

    @property
    def top(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.bottom <= y <= self.top


def standard_page_size(name: Union[PageSize, str], landscape: bool = False) -> Tuple[float, float]:
    """Return ``(width, height)`` of a named page size.

    Args:
        name: ``PageSize`` member or its name ("A4", "letter", ...)
        landscape: Swap width and height

    Raises:
        ValueError: If the name is not a known preset
    """
    preset = name if isinstance(name, PageSize) else PageSize(str(name).strip().lower())
    width, height = _PAGE_DIMENSIONS[preset]
    if landscape:
        return height, width
    return width, height


def mm_to_points(value: float) -> float:
    return float(value) * POINTS_PER_INCH / MM_PER_INCH


def points_to_mm(value: float) -> float:
    return float(value) * MM_PER_INCH / POINTS_PER_INCH


def inches_to_points(value: float) -> float:
    return float(value) * POINTS_PER_INCH
