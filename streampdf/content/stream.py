"""Page content streams: an append-only list of drawing operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..exceptions import StateError
from ..writer.utils import escape_pdf_bytes, format_pdf_matrix, format_pdf_number, format_rgb

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextOp:
    font_alias: str
    font_size: float
    x: float
    y: float
    encoded: bytes

    def render(self) -> bytes:
        head = f"BT\n/{self.font_alias} {format_pdf_number(self.font_size)} Tf\n{format_pdf_number(self.x)} {format_pdf_number(self.y)} Td\n"
        return head.encode("latin-1") + b"(" + escape_pdf_bytes(self.encoded) + b") Tj\nET"


@dataclass(frozen=True)
class RectangleOp:
    x: float
    y: float
    width: float
    height: float

    def render(self) -> bytes:
        values = (self.x, self.y, self.width, self.height)
        return (" ".join(format_pdf_number(v) for v in values) + " re").encode("latin-1")


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float

    def render(self) -> bytes:
        return (
            f"{format_pdf_number(self.x1)} {format_pdf_number(self.y1)} m\n"
            f"{format_pdf_number(self.x2)} {format_pdf_number(self.y2)} l"
        ).encode("latin-1")


@dataclass(frozen=True)
class PaintOp:
    """Path painting or graphics state operator without operands (S, f, q, Q)."""

    operator: str

    def render(self) -> bytes:
        return self.operator.encode("latin-1")


@dataclass(frozen=True)
class ColorOp:
    color: Tuple[float, float, float]
    stroking: bool = False

    def render(self) -> bytes:
        return f"{format_rgb(self.color)} {'RG' if self.stroking else 'rg'}".encode("latin-1")


@dataclass(frozen=True)
class LineWidthOp:
    width: float

    def render(self) -> bytes:
        return f"{format_pdf_number(self.width)} w".encode("latin-1")


@dataclass(frozen=True)
class ImageOp:
    image_alias: str
    x: float
    y: float
    width: float
    height: float

    def render(self) -> bytes:
        matrix = format_pdf_matrix(self.width, 0, 0, self.height, self.x, self.y)
        return f"q\n{matrix} cm\n/{self.image_alias} Do\nQ".encode("latin-1")


class ContentStream:
    """
    Drawing operations of one page.

    Operations are only recorded until ``finish`` serializes them; after that
    the stream is immutable and any append raises ``StateError``. Fonts and
    images referenced by the operations are tracked by resource alias.
    """

    def __init__(self) -> None:
        self._ops: List = []
        self._finished = False
        self.fonts: Dict[str, object] = {}
        self.images: Dict[str, object] = {}

    def __len__(self) -> int:
        return len(self._ops)

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def operations(self) -> Tuple:
        return tuple(self._ops)

    def _check_open(self) -> None:
        if self._finished:
            raise StateError("Content stream is already finished")

    def append(self, op) -> None:
        self._check_open()
        self._ops.append(op)

    def use_font(self, font) -> None:
        self._check_open()
        self.fonts.setdefault(font.alias, font)

    def use_image(self, alias: str, image) -> None:
        self._check_open()
        self.images.setdefault(alias, image)

    def finish(self) -> bytes:
        """Serialize the operations once and mark the stream immutable."""
        self._check_open()
        data = b"\n".join(op.render() for op in self._ops)
        if data:
            data += b"\n"
        logger.debug("Finished content stream: %d operations, %d bytes", len(self._ops), len(data))
        self._ops = []
        self._finished = True
        return data
