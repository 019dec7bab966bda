"""
Painter - records drawing operations into the content stream of one page.

The painter never owns a page. It keeps the document and the index of the
bound page and looks the page up on every call, so a painter whose page is
finished or whose document is closed fails with ``StateError`` instead of
writing into a stale stream.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple, Union

from .content.stream import (
    ColorOp,
    ContentStream,
    ImageOp,
    LineOp,
    LineWidthOp,
    PaintOp,
    RectangleOp,
    TextOp,
)
from .content.text_layout import (
    Alignment,
    VerticalAlignment,
    aligned_x,
    first_baseline,
    fit_lines,
    wrap_text,
)
from .document import Document, Page
from .exceptions import StateError
from .fonts.metrics import Font
from .media.images import ImageResource

logger = logging.getLogger(__name__)


def _check_color(r: float, g: float, b: float) -> Tuple[float, float, float]:
    color = (float(r), float(g), float(b))
    for component in color:
        if not 0.0 <= component <= 1.0:
            raise ValueError(f"Color components must be between 0 and 1, got {color}")
    return color


class Painter:
    """Draws text, paths and images on the page it is bound to."""

    def __init__(self, page: Optional[Page] = None):
        self._document: Optional[Document] = None
        self._page_index: Optional[int] = None
        self._font: Optional[Font] = None
        self._font_size: Optional[float] = None
        if page is not None:
            self.set_page(page)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------
    @property
    def page(self) -> Optional[Page]:
        if self._document is None:
            return None
        return self._document.page_at(self._page_index)

    def set_page(self, page: Page) -> None:
        """
        Bind the painter to *page*.

        Raises:
            StateError: If another page is bound and not finished yet
        """
        current = self.page
        if current is not None and current is not page and not current.finished:
            raise StateError(
                "Cannot bind a new page while the current page is unfinished",
                details=f"page {current.index}",
            )
        self._document = page.document
        self._page_index = page.index

    def _require_page(self) -> Page:
        page = self.page
        if page is None:
            raise StateError("Painter is not bound to a page")
        return page

    def _stream(self) -> ContentStream:
        page = self._require_page()
        if page.finished:
            raise StateError(f"Page {page.index} is already finished")
        return page.content

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------
    @property
    def font(self) -> Optional[Font]:
        return self._font

    @property
    def font_size(self) -> Optional[float]:
        return self._font_size

    def set_font(self, font: Font, size: Optional[float] = None) -> None:
        """Select *font* at *size*, or at the font's current size."""
        if size is not None and size <= 0:
            raise ValueError("Font size must be positive")
        self._font = font
        self._font_size = float(size) if size is not None else font.size

    def _require_font(self) -> Font:
        if self._font is None:
            raise StateError("No font selected")
        page = self._require_page()
        if not page.document.owns_font(self._font):
            raise StateError("Font was not created by this document", details=self._font.family)
        return self._font

    def text_width(self, text: str) -> float:
        """Width of *text* in the current font and size."""
        return self._require_font().string_width(text, self._font_size)

    def draw_text(self, x: float, y: float, text: str) -> None:
        """Draw *text* with its baseline starting at (x, y)."""
        stream = self._stream()
        font = self._require_font()
        stream.use_font(font)
        stream.append(TextOp(font.alias, self._font_size, x, y, font.encode(text)))

    def draw_text_aligned(
        self,
        x: float,
        y: float,
        box_width: float,
        text: str,
        alignment: Union[Alignment, str] = Alignment.LEFT,
    ) -> None:
        self.draw_text(aligned_x(x, box_width, self.text_width(text), alignment), y, text)

    def draw_multiline_text(
        self,
        x: float,
        y: float,
        box_width: float,
        box_height: float,
        text: str,
        h_align: Union[Alignment, str] = Alignment.LEFT,
        v_align: Union[VerticalAlignment, str] = VerticalAlignment.TOP,
    ) -> List[str]:
        """
        Wrap *text* into the box with bottom-left corner (x, y) and draw it.

        Lines that do not fit vertically are dropped. Returns the lines
        actually laid out.
        """
        self._stream()
        font = self._require_font()
        size = self._font_size
        lines = wrap_text(text, box_width, lambda line: font.string_width(line, size))
        spacing = font.line_spacing(size)
        kept = fit_lines(lines, spacing, box_height)
        if len(kept) < len(lines):
            logger.debug("Dropped %d of %d lines that overflow a %s pt box", len(lines) - len(kept), len(lines), box_height)

        baseline = first_baseline(y, box_height, len(kept), spacing, font.ascent(size), font.descent(size), v_align)
        for line in kept:
            if line:
                self.draw_text_aligned(x, baseline, box_width, line, h_align)
            baseline -= spacing
        return kept

    # ------------------------------------------------------------------
    # Graphics state and paths
    # ------------------------------------------------------------------
    def set_color(self, r: float, g: float, b: float) -> None:
        """Non-stroking (fill and text) colour, components in 0..1."""
        self._stream().append(ColorOp(_check_color(r, g, b)))

    def set_stroking_color(self, r: float, g: float, b: float) -> None:
        self._stream().append(ColorOp(_check_color(r, g, b), stroking=True))

    def set_stroke_width(self, width: float) -> None:
        if width < 0:
            raise ValueError("Stroke width cannot be negative")
        self._stream().append(LineWidthOp(width))

    def save(self) -> None:
        self._stream().append(PaintOp("q"))

    def restore(self) -> None:
        self._stream().append(PaintOp("Q"))

    def rectangle(self, x: float, y: float, width: float, height: float) -> None:
        """Append a rectangle to the current path; nothing is painted until ``stroke``/``fill``."""
        self._stream().append(RectangleOp(x, y, width, height))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        stream = self._stream()
        stream.append(LineOp(x1, y1, x2, y2))
        stream.append(PaintOp("S"))

    def stroke(self) -> None:
        self._stream().append(PaintOp("S"))

    def fill(self) -> None:
        self._stream().append(PaintOp("f"))

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    def draw_image(
        self,
        x: float,
        y: float,
        image: ImageResource,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
    ) -> None:
        """Place *image* with its lower-left corner at (x, y), one pixel per point before scaling."""
        stream = self._stream()
        alias = self._require_page().document.register_image(image)
        stream.use_image(alias, image)
        width, height = image.scaled_size(scale_x, scale_y)
        stream.append(ImageOp(alias, x, y, width, height))

    # ------------------------------------------------------------------
    # Finishing
    # ------------------------------------------------------------------
    def finish_page(self) -> None:
        """Serialize the bound page. A page can be finished only once."""
        page = self._require_page()
        page.document.finish_page(page)


@contextmanager
def page_guard(painter: Painter) -> Iterator[Painter]:
    """
    Finish the painter's page when the block exits, however it exits.

    A page already finished inside the block is left alone. When the block
    raises, a failure while finishing is logged and the original exception
    propagates.
    """
    try:
        yield painter
    except BaseException:
        page = painter.page
        if page is not None and not page.finished:
            try:
                painter.finish_page()
            except Exception as cleanup_exc:
                logger.error("Failed to finish page %d after an error: %s", page.index, cleanup_exc)
        raise
    else:
        page = painter.page
        if page is not None and not page.finished:
            painter.finish_page()
