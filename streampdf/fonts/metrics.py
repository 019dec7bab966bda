"""

Font metrics and the Font handle used by painters.

Metrics are read with ReportLab: the AFM tables bundled with it for the
standard Type 1 fonts, and its TrueType parser for embeddable fonts.
All widths are stored per WinAnsi character code in 1/1000 em units.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from ..exceptions import ResourceError
from .font_utils import decode_code, encode_text, postscript_name

logger = logging.getLogger(__name__)

FLAG_FIXED_PITCH = 1
FLAG_SERIF = 2
FLAG_NONSYMBOLIC = 32
FLAG_ITALIC = 64


@dataclass(frozen=True)
class FontMetrics:
    """Immutable glyph metrics of one font face."""

    name: str
    widths: Tuple[int, ...]
    ascent: float
    descent: float
    cap_height: float = 700.0
    bbox: Tuple[float, float, float, float] = (0.0, 0.0, 1000.0, 1000.0)
    italic_angle: float = 0.0
    stem_v: float = 80.0
    flags: int = FLAG_NONSYMBOLIC
    default_width: int = 0
    outline: Optional[bytes] = field(default=None, repr=False)
    source_path: Optional[str] = None

    @property
    def is_embeddable(self) -> bool:
        return self.outline is not None

    @property
    def line_height_units(self) -> float:
        return self.ascent - self.descent

    def char_width(self, code: int) -> int:
        if 0 <= code < len(self.widths):
            return self.widths[code]
        return self.default_width


def standard_metrics(name: str) -> FontMetrics:
    """Metrics of a standard (non-embedded) Type 1 font."""
    try:
        rl_font = pdfmetrics.getFont(name)
    except KeyError as exc:
        raise ResourceError("Unknown standard font", details=name) from exc

    face = rl_font.face
    widths = tuple(int(round(w)) for w in rl_font.widths)
    flags = FLAG_NONSYMBOLIC
    if name.startswith("Courier"):
        flags |= FLAG_FIXED_PITCH
    if name.startswith("Times"):
        flags |= FLAG_SERIF
    if "Oblique" in name or "Italic" in name:
        flags |= FLAG_ITALIC
    return FontMetrics(
        name=name,
        widths=widths,
        ascent=float(face.ascent),
        descent=float(face.descent),
        flags=flags,
        default_width=0,
    )


def truetype_metrics(path: str | Path) -> FontMetrics:
    """Parse a TrueType file into metrics plus its outline program.

    Raises:
        ResourceError: If the file cannot be read or is not a usable TrueType font
    """
    font_path = Path(path)
    try:
        outline = font_path.read_bytes()
    except OSError as exc:
        raise ResourceError("Cannot read font file", details=f"{font_path}: {exc}") from exc

    try:
        face = TTFont(font_path.stem, str(font_path)).face
    except (TTFError, ValueError, KeyError) as exc:
        raise ResourceError("Unsupported TrueType font", details=f"{font_path}: {exc}") from exc

    default_width = int(round(face.defaultWidth))
    widths: List[int] = []
    for code in range(256):
        char = decode_code(code)
        if char is None:
            widths.append(default_width)
        else:
            widths.append(int(round(face.charWidths.get(ord(char), default_width))))

    name = face.name
    if isinstance(name, bytes):
        name = name.decode("latin-1")

    flags = FLAG_NONSYMBOLIC
    if face.italicAngle:
        flags |= FLAG_ITALIC
    logger.debug("Parsed TrueType font %s (%s)", name, font_path)

    return FontMetrics(
        name=postscript_name(name),
        widths=tuple(widths),
        ascent=float(face.ascent),
        descent=float(face.descent),
        cap_height=float(face.capHeight),
        bbox=tuple(float(v) for v in face.bbox),
        italic_angle=float(face.italicAngle),
        stem_v=float(face.stemV),
        flags=flags,
        default_width=default_width,
        outline=outline,
        source_path=str(font_path),
    )


class Font:
    """
    Font handle shared by the pages of one document.

    The metrics are fixed at creation; ``size`` is the current size used
    when a painter selects the font without an explicit size.
    """

    def __init__(self, family: str, metrics: FontMetrics, alias: str = "F1", size: float = 12.0):
        self.family = family
        self.metrics = metrics
        self.alias = alias
        self._size = 0.0
        self.size = size
        self.object_id: Optional[int] = None

    def __repr__(self) -> str:
        return f"Font(family={self.family!r}, name={self.metrics.name!r}, alias={self.alias!r}, size={self._size})"

    @property
    def size(self) -> float:
        return self._size

    @size.setter
    def size(self, value: float) -> None:
        value = float(value)
        if value <= 0:
            raise ValueError("Font size must be positive")
        self._size = value

    @property
    def name(self) -> str:
        return self.metrics.name

    @property
    def is_embedded(self) -> bool:
        return self.object_id is not None

    def _resolve_size(self, size: Optional[float]) -> float:
        return self._size if size is None else float(size)

    def encode(self, text: str) -> bytes:
        return encode_text(text)

    def string_width(self, text: str, size: Optional[float] = None) -> float:
        """Width of *text* in points: sum of glyph advances scaled by size / 1000."""
        units = sum(self.metrics.char_width(code) for code in self.encode(text))
        return units * self._resolve_size(size) / 1000.0

    def ascent(self, size: Optional[float] = None) -> float:
        return self.metrics.ascent * self._resolve_size(size) / 1000.0

    def descent(self, size: Optional[float] = None) -> float:
        """Descent in points (negative, below the baseline)."""
        return self.metrics.descent * self._resolve_size(size) / 1000.0

    def line_spacing(self, size: Optional[float] = None) -> float:
        return self.metrics.line_height_units * self._resolve_size(size) / 1000.0
