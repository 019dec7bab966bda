"""

Text layout helpers: horizontal alignment, greedy word wrap and vertical
placement of wrapped lines inside a box.

"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Union

Measure = Callable[[str], float]


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAlignment(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


def aligned_x(x: float, box_width: float, text_width: float, alignment: Union[Alignment, str] = Alignment.LEFT) -> float:
    """
    X position of a line of text inside ``[x, x + box_width]``.

    Text wider than the box overflows to the right for left alignment and
    on both sides for the others.
    """
    alignment = Alignment(alignment)
    if alignment is Alignment.CENTER:
        return x + (box_width - text_width) / 2.0
    if alignment is Alignment.RIGHT:
        return x + box_width - text_width
    return x


def wrap_text(text: str, box_width: float, measure: Measure) -> List[str]:
    """
    Break *text* into lines no wider than *box_width* where possible.

    Greedy: a word joins the current line if the joined line still fits,
    otherwise it starts a new line. A word wider than the box is placed
    alone on its own line and never split. Newlines force a break; an empty
    paragraph yields an empty line.
    """
    if not text or not text.strip():
        return []

    lines: List[str] = []
    for paragraph in text.rstrip("\n").split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            if not current:
                current = word
                continue
            candidate = f"{current} {word}"
            if measure(candidate) <= box_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)

    return lines


def fit_lines(lines: List[str], line_spacing: float, box_height: float) -> List[str]:
    """Keep the leading lines whose cumulative height fits in *box_height*."""
    if line_spacing <= 0:
        return list(lines)
    kept: List[str] = []
    for line in lines:
        if (len(kept) + 1) * line_spacing > box_height + 1e-9:
            break
        kept.append(line)
    return kept


def first_baseline(
    y: float,
    box_height: float,
    line_count: int,
    line_spacing: float,
    ascent: float,
    descent: float,
    v_align: Union[VerticalAlignment, str] = VerticalAlignment.TOP,
) -> float:
    """
    Baseline of the first line of a text block anchored in a box whose
    bottom edge is at *y*.

    *descent* is negative. The block top sits at the box top, box middle or
    block-height above the box bottom; the first baseline is one ascent plus
    half of the leading below the block top.
    """
    v_align = VerticalAlignment(v_align)
    block_height = line_spacing * line_count
    if v_align is VerticalAlignment.BOTTOM:
        top = y + block_height
    elif v_align is VerticalAlignment.CENTER:
        top = y + box_height - (box_height - block_height) / 2.0
    else:
        top = y + box_height

    leading = line_spacing - ascent + descent
    return top - (ascent + leading / 2.0)
