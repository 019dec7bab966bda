"""
streampdf - minimal streaming PDF generation.

Writes single- or multi-page PDF documents containing text (with TrueType
embedding and metrics-based layout), rectangles, lines and raster images,
in a single pass to a file or binary stream.

Main Components:
- Document: owns pages, fonts, images and the output writer
- Painter: records drawing operations on one page
- FontMetricsProvider: resolves families to metrics, caches them
- PdfWriter: low-level object and xref serialization
"""

from .config import DocumentOptions
from .content.text_layout import Alignment, VerticalAlignment, wrap_text
from .document import Document, Page
from .exceptions import DecodeError, ResourceError, StateError, StreamPdfError
from .fonts import Font, FontMetrics, FontMetricsProvider, StaticFontResolver, SystemFontResolver
from .geometry import PageSize, Rect, Size, inches_to_points, mm_to_points, points_to_mm, standard_page_size
from .media import ImageResource, PillowImageDecoder, load_image
from .painter import Painter, page_guard
from .version import __version__

__all__ = [
    "Alignment",
    "DecodeError",
    "Document",
    "DocumentOptions",
    "Font",
    "FontMetrics",
    "FontMetricsProvider",
    "ImageResource",
    "Page",
    "PageSize",
    "Painter",
    "PillowImageDecoder",
    "Rect",
    "ResourceError",
    "Size",
    "StateError",
    "StaticFontResolver",
    "StreamPdfError",
    "SystemFontResolver",
    "VerticalAlignment",
    "__version__",
    "inches_to_points",
    "load_image",
    "mm_to_points",
    "page_guard",
    "points_to_mm",
    "standard_page_size",
    "wrap_text",
]
