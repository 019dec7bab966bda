"""Image resources for embedding as PDF image XObjects.

JPEG files are embedded as-is with ``/DCTDecode``; any other format Pillow
can open is flattened to 8-bit RGB or grayscale samples and compressed with
``/FlateDecode``.
"""

from __future__ import annotations

import io
import logging
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from PIL import Image, UnidentifiedImageError

from ..exceptions import DecodeError, ResourceError

logger = logging.getLogger(__name__)

JPEG_COLOR_SPACES = {
    "L": "DeviceGray",
    "RGB": "DeviceRGB",
    "YCbCr": "DeviceRGB",
    "CMYK": "DeviceCMYK",
}


@dataclass
class DecodedImage:
    """Output of an image decoder: dimensions plus the stream bytes to embed."""

    width: int
    height: int
    color_space: str
    data: bytes = field(repr=False)
    bits_per_component: int = 8
    filter: str = "DCTDecode"
    decode: Optional[List[float]] = None


@dataclass
class ImageResource:
    """An image loaded once and drawable on any page of one document."""

    path: str
    width: int
    height: int
    color_space: str
    data: bytes = field(repr=False)
    bits_per_component: int = 8
    filter: str = "DCTDecode"
    decode: Optional[List[float]] = None

    @property
    def is_passthrough(self) -> bool:
        return self.filter == "DCTDecode"

    def scaled_size(self, scale_x: float = 1.0, scale_y: float = 1.0) -> Tuple[float, float]:
        return (self.width * scale_x, self.height * scale_y)


class ImageDecoder(Protocol):
    """Image-decoding collaborator."""

    def decode(self, path: str | Path) -> DecodedImage:
        ...


class PillowImageDecoder:
    """Decoder backed by Pillow."""

    def decode(self, path: str | Path) -> DecodedImage:
        image_path = Path(path)
        try:
            raw = image_path.read_bytes()
        except OSError as exc:
            raise ResourceError("Cannot read image file", details=f"{image_path}: {exc}") from exc

        try:
            with Image.open(io.BytesIO(raw)) as img:
                if img.format == "JPEG":
                    return self._jpeg(img, raw)
                img.load()
                return self._flate(img)
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            raise DecodeError("Cannot decode image", details=f"{image_path}: {exc}") from exc

    def _jpeg(self, img: Image.Image, raw: bytes) -> DecodedImage:
        color_space = JPEG_COLOR_SPACES.get(img.mode)
        if color_space is None:
            raise DecodeError("Unsupported JPEG colour mode", details=img.mode)
        decode = None
        if img.mode == "CMYK" and "adobe" in img.info:
            # Adobe CMYK JPEGs store inverted samples.
            decode = [1.0, 0.0] * 4
        width, height = img.size
        return DecodedImage(
            width=width,
            height=height,
            color_space=color_space,
            data=raw,
            bits_per_component=8,
            filter="DCTDecode",
            decode=decode,
        )

    def _flate(self, img: Image.Image) -> DecodedImage:
        if img.mode in ("P", "PA"):
            img = img.convert("RGBA")
        if img.mode == "1":
            img = img.convert("L")
        elif img.mode == "LA":
            background = Image.new("L", img.size, 255)
            background.paste(img.convert("L"), mask=img.split()[1])
            img = background
        elif img.mode == "RGBA":
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[3])
            img = background
        elif img.mode not in ("L", "RGB"):
            img = img.convert("RGB")

        color_space = "DeviceGray" if img.mode == "L" else "DeviceRGB"
        width, height = img.size
        return DecodedImage(
            width=width,
            height=height,
            color_space=color_space,
            data=zlib.compress(img.tobytes()),
            bits_per_component=8,
            filter="FlateDecode",
        )


def load_image(path: str | Path, decoder: Optional[ImageDecoder] = None) -> ImageResource:
    """Load an image file for embedding.

    Raises:
        ResourceError: If the file cannot be read
        DecodeError: If the bytes are not a decodable image
    """
    decoded = (decoder or PillowImageDecoder()).decode(path)
    if decoded.width <= 0 or decoded.height <= 0:
        raise DecodeError("Image has no pixels", details=str(path))
    logger.debug(
        "Loaded image %s: %dx%d %s /%s", path, decoded.width, decoded.height, decoded.color_space, decoded.filter
    )
    return ImageResource(
        path=str(path),
        width=decoded.width,
        height=decoded.height,
        color_space=decoded.color_space,
        data=decoded.data,
        bits_per_component=decoded.bits_per_component,
        filter=decoded.filter,
        decode=decoded.decode,
    )
