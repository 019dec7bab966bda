from __future__ import annotations

import re
from typing import Optional

TEXT_ENCODING = "cp1252"
FIRST_CHAR = 32
LAST_CHAR = 255

STANDARD_FONT_VARIANTS = {
    "Helvetica",
    "Helvetica-Bold",
    "Helvetica-Oblique",
    "Helvetica-BoldOblique",
    "Times-Roman",
    "Times-Bold",
    "Times-Italic",
    "Times-BoldItalic",
    "Courier",
    "Courier-Bold",
    "Courier-Oblique",
    "Courier-BoldOblique",
}

# Closest standard font for families that are not installed.
FONT_FALLBACKS = {
    "arial": "Helvetica",
    "arial mt": "Helvetica",
    "arialmt": "Helvetica",
    "calibri": "Helvetica",
    "dejavu sans": "Helvetica",
    "helvetica": "Helvetica",
    "liberation sans": "Helvetica",
    "sans-serif": "Helvetica",
    "segoe ui": "Helvetica",
    "tahoma": "Helvetica",
    "verdana": "Helvetica",
    "cambria": "Times-Roman",
    "georgia": "Times-Roman",
    "liberation serif": "Times-Roman",
    "serif": "Times-Roman",
    "times": "Times-Roman",
    "times new roman": "Times-Roman",
    "courier": "Courier",
    "courier new": "Courier",
    "consolas": "Courier",
    "lucida console": "Courier",
    "monospace": "Courier",
}


def standard_font_name(family: Optional[str]) -> Optional[str]:
    """Return the standard font name for *family* if it names one exactly."""
    if not family:
        return None
    cleaned = family.strip()
    if cleaned in STANDARD_FONT_VARIANTS:
        return cleaned
    lowered = cleaned.lower()
    for name in STANDARD_FONT_VARIANTS:
        if name.lower() == lowered:
            return name
    return None


def fallback_font_name(family: Optional[str], default: str = "Helvetica") -> str:
    """Map a family to the closest standard font, or *default*."""
    exact = standard_font_name(family)
    if exact:
        return exact
    if family:
        mapped = FONT_FALLBACKS.get(family.strip().lower())
        if mapped:
            return mapped
    return standard_font_name(default) or "Helvetica"


def encode_text(text: str) -> bytes:
    """Encode text for a simple font with WinAnsiEncoding; unmappable characters become '?'."""
    if text is None:
        return b""
    return str(text).encode(TEXT_ENCODING, errors="replace")


def decode_code(code: int) -> Optional[str]:
    """Character for a single WinAnsi code, or None for unassigned codes."""
    try:
        return bytes([code]).decode(TEXT_ENCODING)
    except UnicodeDecodeError:
        return None


def postscript_name(name: str) -> str:
    """Strip characters that are not allowed in a PDF font name."""
    cleaned = re.sub(r"[^A-Za-z0-9+\-_.]", "", name or "")
    return cleaned or "UnnamedFont"
