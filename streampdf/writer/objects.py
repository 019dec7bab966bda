"""PDF objects and data structures."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

from .utils import escape_pdf_string, format_pdf_number

PROC_SET = ["PDF", "Text", "ImageB", "ImageC", "ImageI"]

_NAME_ESCAPE = re.compile(r"[^!-~]|[#()<>\[\]{}/%]")


class Name(str):
    """A PDF name object, serialized as ``/Value``."""

    def to_pdf(self) -> str:
        return "/" + _NAME_ESCAPE.sub(lambda m: "".join(f"#{b:02X}" for b in m.group(0).encode("utf-8")), self)


class Reference(NamedTuple):
    """An indirect object reference, serialized as ``n g R``."""

    obj_id: int
    generation: int = 0

    def to_pdf(self) -> str:
        return f"{self.obj_id} {self.generation} R"


def _text_string(value: str) -> str:
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        # Outside PDFDocEncoding: UTF-16BE with BOM.
        return "<FEFF" + value.encode("utf-16-be").hex().upper() + ">"
    return f"({escape_pdf_string(value)})"


def to_pdf(value: Any) -> str:
    """Serialize a Python value to PDF object syntax.

    ``dict`` becomes a dictionary, ``list``/``tuple`` an array, ``Name`` a
    name, ``Reference`` an indirect reference, ``str`` a text string,
    ``bytes`` a hex string and ``None`` the null object.
    """
    if value is None:
        return "null"
    if isinstance(value, (Name, Reference)):
        return value.to_pdf()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_pdf_number(value)
    if isinstance(value, str):
        return _text_string(value)
    if isinstance(value, (bytes, bytearray)):
        return "<" + bytes(value).hex().upper() + ">"
    if isinstance(value, Mapping):
        parts = ["<<"]
        for key, item in value.items():
            parts.append(f"{Name(str(key).lstrip('/')).to_pdf()} {to_pdf(item)}")
        parts.append(">>")
        return " ".join(parts)
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(to_pdf(item) for item in value) + "]"
    raise TypeError(f"Cannot serialize {type(value).__name__} as a PDF object")


def page_dictionary(
    width: float,
    height: float,
    parent_id: int,
    content_id: int,
    fonts: Optional[Mapping[str, int]] = None,
    images: Optional[Mapping[str, int]] = None,
) -> Dict[str, Any]:
    """Generate a page dictionary.

    Args:
        width: Page width in points
        height: Page height in points
        parent_id: Object id of the page tree root
        content_id: Object id of the content stream
        fonts: Font resource alias -> font object id
        images: Image resource alias -> image object id
    """
    resources: Dict[str, Any] = {"ProcSet": [Name(entry) for entry in PROC_SET]}
    if fonts:
        resources["Font"] = {alias: Reference(obj_id) for alias, obj_id in fonts.items()}
    if images:
        resources["XObject"] = {alias: Reference(obj_id) for alias, obj_id in images.items()}
    return {
        "Type": Name("Page"),
        "Parent": Reference(parent_id),
        "MediaBox": [0, 0, width, height],
        "Resources": resources,
        "Contents": Reference(content_id),
    }


def pages_tree_dictionary(page_ids: Sequence[int]) -> Dict[str, Any]:
    kids = [Reference(obj_id) for obj_id in page_ids]
    return {"Type": Name("Pages"), "Kids": kids, "Count": len(kids)}


def catalog_dictionary(pages_id: int) -> Dict[str, Any]:
    return {"Type": Name("Catalog"), "Pages": Reference(pages_id)}


def image_dictionary(image) -> Dict[str, Any]:
    """Image XObject dictionary for an ``ImageResource`` (/Length is added by the writer)."""
    image_dict: Dict[str, Any] = {
        "Type": Name("XObject"),
        "Subtype": Name("Image"),
        "Width": image.width,
        "Height": image.height,
        "ColorSpace": Name(image.color_space),
        "BitsPerComponent": image.bits_per_component,
        "Filter": Name(image.filter),
    }
    if image.decode:
        image_dict["Decode"] = list(image.decode)
    return image_dict


def standard_font_dictionary(metrics) -> Dict[str, Any]:
    return {
        "Type": Name("Font"),
        "Subtype": Name("Type1"),
        "BaseFont": Name(metrics.name),
        "Encoding": Name("WinAnsiEncoding"),
    }


def font_descriptor_dictionary(metrics, font_file_id: int) -> Dict[str, Any]:
    return {
        "Type": Name("FontDescriptor"),
        "FontName": Name(metrics.name),
        "Flags": metrics.flags,
        "FontBBox": list(metrics.bbox),
        "ItalicAngle": metrics.italic_angle,
        "Ascent": metrics.ascent,
        "Descent": metrics.descent,
        "CapHeight": metrics.cap_height,
        "StemV": metrics.stem_v,
        "MissingWidth": metrics.default_width,
        "FontFile2": Reference(font_file_id),
    }


def truetype_font_dictionary(metrics, descriptor_id: int, first_char: int, last_char: int) -> Dict[str, Any]:
    widths: List[int] = [metrics.char_width(code) for code in range(first_char, last_char + 1)]
    return {
        "Type": Name("Font"),
        "Subtype": Name("TrueType"),
        "BaseFont": Name(metrics.name),
        "FirstChar": first_char,
        "LastChar": last_char,
        "Widths": widths,
        "Encoding": Name("WinAnsiEncoding"),
        "FontDescriptor": Reference(descriptor_id),
    }
