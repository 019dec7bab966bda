"""
Streamed PDF document.

A ``Document`` is bound to an output sink for its whole lifetime. Fonts and
images are written the first time a finished page uses them, each page's
content stream and page dictionary are written when the page is finished,
and ``close`` writes the page tree, catalog, info dictionary,
cross-reference table and trailer.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Tuple, Union

from .config import DocumentOptions
from .content.stream import ContentStream
from .exceptions import ResourceError, StateError
from .fonts.font_resolver import SystemFontResolver
from .fonts.font_utils import FIRST_CHAR, LAST_CHAR
from .fonts.metrics import Font
from .fonts.provider import FontMetricsProvider
from .geometry import PageSize, Size, standard_page_size
from .media.images import ImageDecoder, ImageResource, load_image
from .metadata import DocumentInfo
from .writer.objects import (
    catalog_dictionary,
    font_descriptor_dictionary,
    image_dictionary,
    page_dictionary,
    pages_tree_dictionary,
    standard_font_dictionary,
    truetype_font_dictionary,
)
from .writer.pdf_writer import PdfWriter

logger = logging.getLogger(__name__)

PageSizeLike = Union[PageSize, str, Size, Tuple[float, float]]


class Page:
    """A page owned by one document; addressed by its index in that document."""

    def __init__(self, document: "Document", index: int, width: float, height: float):
        self.document = document
        self.index = index
        self.width = width
        self.height = height
        self.content = ContentStream()
        self.object_id: Optional[int] = None

    def __repr__(self) -> str:
        return f"Page(index={self.index}, width={self.width}, height={self.height}, finished={self.finished})"

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def finished(self) -> bool:
        return self.content.finished


class Document:
    """
    PDF document written in a single streaming pass.

    Args:
        sink: Output path or writable binary file object. Paths are opened
            here and closed by ``close``; file objects are only flushed.
        options: ``DocumentOptions`` or a dict of option values
        font_provider: Font metrics provider; one is created (and closed
            with the document) when omitted
        image_decoder: Image decoding collaborator for ``create_image``
    """

    def __init__(
        self,
        sink: Union[str, os.PathLike, BinaryIO],
        options: Optional[Union[DocumentOptions, Mapping[str, Any]]] = None,
        font_provider: Optional[FontMetricsProvider] = None,
        image_decoder: Optional[ImageDecoder] = None,
    ):
        self.options = DocumentOptions.coerce(options)
        self._stream, self._owns_stream = self._open_sink(sink)
        try:
            self._writer = PdfWriter(
                self._stream,
                version=self.options.pdf_version,
                compress=self.options.compress_streams,
            )
        except ResourceError:
            self._close_sink()
            raise

        if font_provider is None:
            resolver = SystemFontResolver(self.options.font_search_dirs, use_fc_match=self.options.use_fc_match)
            font_provider = FontMetricsProvider(resolver, fallback_font=self.options.fallback_font)
            self._owns_provider = True
        else:
            self._owns_provider = False
        self._font_provider = font_provider
        self._image_decoder = image_decoder

        self.info = DocumentInfo(producer=self.options.producer)
        self._pages: List[Page] = []
        self._fonts: Dict[str, Font] = {}
        self._image_aliases: Dict[int, str] = {}
        self._images: Dict[str, ImageResource] = {}
        self._image_ids: Dict[str, int] = {}
        self._font_ids: Dict[str, int] = {}
        self._pages_id = self._writer.reserve()
        self._closed = False
        self._output_failed = False
        logger.debug("Created document writing to %r", getattr(self._stream, "name", self._stream))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def __enter__(self) -> "Document":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._closed:
            return
        if exc_type is None:
            self.close()
        else:
            self.abort()

    @staticmethod
    def _open_sink(sink) -> Tuple[BinaryIO, bool]:
        if isinstance(sink, (str, os.PathLike)):
            try:
                return open(sink, "wb"), True
            except OSError as exc:
                raise ResourceError("Cannot open output file", details=f"{sink}: {exc}") from exc
        if hasattr(sink, "write"):
            return sink, False
        raise TypeError(f"Unsupported output sink: {type(sink).__name__}")

    def _close_sink(self) -> None:
        try:
            if self._owns_stream:
                self._stream.close()
            elif hasattr(self._stream, "flush"):
                self._stream.flush()
        except OSError as exc:
            raise ResourceError("Cannot close PDF output", details=str(exc)) from exc

    def _release(self) -> None:
        self._fonts.clear()
        self._images.clear()
        self._image_aliases.clear()
        if self._owns_provider:
            self._font_provider.close()
        self._close_sink()

    def _check_open(self) -> None:
        if self._closed:
            raise StateError("Document is closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Write the page tree, catalog, info dictionary, xref and trailer.

        Raises:
            StateError: If the document is already closed, a page is not finished
                or an earlier write failed (the document is aborted)
        """
        self._check_open()
        if self._output_failed:
            self.abort()
            raise StateError("Cannot close document after an output error", details="output is incomplete")
        unfinished = [page.index for page in self._pages if not page.finished]
        if unfinished:
            raise StateError(
                "Cannot close document with unfinished pages",
                details="page(s) " + ", ".join(str(index) for index in unfinished),
            )
        if not self._pages:
            logger.warning("Closing document without pages")

        try:
            info_id = self._writer.write_object(self.info.to_pdf_dict())
            self._writer.write_object(
                pages_tree_dictionary([page.object_id for page in self._pages]),
                obj_id=self._pages_id,
            )
            catalog_id = self._writer.write_object(catalog_dictionary(self._pages_id))
            self._writer.close(catalog_id, info_id)
        finally:
            self._closed = True
            self._release()
        logger.info("Closed document: %d page(s), %d bytes", len(self._pages), self._writer.offset)

    def abort(self) -> None:
        """Stop writing without a trailer; the output is left truncated."""
        if self._closed:
            return
        self._closed = True
        logger.warning("Document aborted after %d bytes; output is incomplete", self._writer.offset)
        self._release()

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    @property
    def pages(self) -> Tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def page_at(self, index: int) -> Page:
        try:
            return self._pages[index]
        except IndexError:
            raise StateError(f"No page with index {index}") from None

    def create_page(self, size: PageSizeLike = PageSize.A4, landscape: bool = False) -> Page:
        """
        Append a new page.

        Args:
            size: ``PageSize`` preset, preset name, ``Size`` or ``(width, height)`` in points
            landscape: Swap width and height

        Raises:
            ResourceError: If the size is not usable or the page cannot be allocated
        """
        self._check_open()
        try:
            width, height = self._page_dimensions(size, landscape)
        except (TypeError, ValueError) as exc:
            raise ResourceError("Cannot create page", details=f"invalid size {size!r}: {exc}") from exc

        try:
            page = Page(self, len(self._pages), width, height)
        except MemoryError as exc:
            raise ResourceError("Cannot create page", details="out of memory") from exc
        self._pages.append(page)
        logger.debug("Created page %d (%sx%s)", page.index, width, height)
        return page

    @staticmethod
    def _page_dimensions(size: PageSizeLike, landscape: bool) -> Tuple[float, float]:
        if isinstance(size, (PageSize, str)):
            return standard_page_size(size, landscape)
        if isinstance(size, Size):
            width, height = size.as_tuple()
        else:
            width, height = (float(v) for v in size)
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            raise ValueError("page dimensions must be positive")
        if landscape:
            width, height = height, width
        return width, height

    def finish_page(self, page: Page) -> None:
        """
        Serialize a page: first-use fonts and images, its content stream and page dictionary.

        Raises:
            StateError: If the page is already finished, foreign or the document is closed
        """
        self._check_open()
        if page.document is not self:
            raise StateError("Page belongs to another document")
        if page.finished:
            raise StateError(f"Page {page.index} is already finished")

        data = page.content.finish()
        try:
            font_ids = {alias: self._embed_font(font) for alias, font in page.content.fonts.items()}
            image_ids = {alias: self._embed_image(alias, image) for alias, image in page.content.images.items()}
            content_id = self._writer.write_stream(None, data)
            page.object_id = self._writer.write_object(
                page_dictionary(page.width, page.height, self._pages_id, content_id, font_ids, image_ids)
            )
        except ResourceError:
            self._output_failed = True
            raise
        logger.debug("Finished page %d as object %d", page.index, page.object_id)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    @property
    def fonts(self) -> Tuple[Font, ...]:
        return tuple(self._fonts.values())

    def create_font(self, family: str, size: Optional[float] = None) -> Font:
        """
        Return the document's font for *family*, creating it on first request.

        A missing family falls back to a standard font; only a total failure
        to obtain metrics raises ``ResourceError``.
        """
        self._check_open()
        existing = self._fonts.get(family)
        if existing is not None:
            return existing

        alias = f"F{len(self._fonts) + 1}"
        try:
            font = self._font_provider.create_font(
                family,
                size=size if size is not None else self.options.default_font_size,
                alias=alias,
            )
        except MemoryError as exc:
            raise ResourceError("Cannot create font", details=f"{family}: out of memory") from exc
        self._fonts[family] = font
        logger.debug("Created font %s as /%s (%s)", family, alias, font.name)
        return font

    def owns_font(self, font: Font) -> bool:
        return self._fonts.get(font.family) is font

    def _embed_font(self, font: Font) -> int:
        if font.object_id is not None:
            return font.object_id

        metrics = font.metrics
        # Families resolving to the same face share one font object.
        key = metrics.source_path or metrics.name
        shared = self._font_ids.get(key)
        if shared is not None:
            font.object_id = shared
            return shared

        if metrics.is_embeddable:
            file_id = self._writer.write_stream({"Length1": len(metrics.outline)}, metrics.outline)
            descriptor_id = self._writer.write_object(font_descriptor_dictionary(metrics, file_id))
            font.object_id = self._writer.write_object(
                truetype_font_dictionary(metrics, descriptor_id, FIRST_CHAR, LAST_CHAR)
            )
            logger.info("Embedded TrueType font %s (%d bytes)", metrics.name, len(metrics.outline))
        else:
            font.object_id = self._writer.write_object(standard_font_dictionary(metrics))
        self._font_ids[key] = font.object_id
        return font.object_id

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    def create_image(self, path: Union[str, os.PathLike]) -> ImageResource:
        """Load an image file and register it with this document."""
        self._check_open()
        image = load_image(path, self._image_decoder)
        self.register_image(image)
        return image

    def register_image(self, image: ImageResource) -> str:
        """Return the resource alias of *image*, assigning one on first use."""
        self._check_open()
        alias = self._image_aliases.get(id(image))
        if alias is None:
            alias = f"Im{len(self._image_aliases) + 1}"
            self._image_aliases[id(image)] = alias
            self._images[alias] = image
        return alias

    def _embed_image(self, alias: str, image: ImageResource) -> int:
        obj_id = self._image_ids.get(alias)
        if obj_id is None:
            obj_id = self._writer.write_stream(image_dictionary(image), image.data, compress=False)
            self._image_ids[alias] = obj_id
            logger.debug("Embedded image %s as /%s (%d bytes)", image.path, alias, len(image.data))
        return obj_id

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    def set_metadata(self, **values: Optional[str]) -> None:
        """Set title, author, subject, keywords and/or creator."""
        self._check_open()
        self.info.update(**values)
