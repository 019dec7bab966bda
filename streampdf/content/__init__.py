"""Content stream building and text layout."""

from .stream import ContentStream
from .text_layout import Alignment, VerticalAlignment, aligned_x, first_baseline, fit_lines, wrap_text

__all__ = [
    "Alignment",
    "ContentStream",
    "VerticalAlignment",
    "aligned_x",
    "first_baseline",
    "fit_lines",
    "wrap_text",
]
