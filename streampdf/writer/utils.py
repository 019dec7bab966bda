"""Utility functions for PDF serialization."""

from datetime import datetime
from typing import Optional, Tuple


def escape_pdf_string(text: str) -> str:
    """Escape special characters for a PDF literal string.

    Args:
        text: Input string (converted to str if not already)

    Returns:
        Escaped string without the surrounding parentheses
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)

    replacements = {
        "\\": "\\\\",
        "(": "\\(",
        ")": "\\)",
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }

    result = text
    for char, escaped in replacements.items():
        result = result.replace(char, escaped)

    return result


def escape_pdf_bytes(data: bytes) -> bytes:
    """Escape raw string bytes (already encoded) for a PDF literal string."""
    return (
        data.replace(b"\\", b"\\\\")
        .replace(b"(", b"\\(")
        .replace(b")", b"\\)")
        .replace(b"\r", b"\\r")
        .replace(b"\n", b"\\n")
    )


def format_pdf_number(value: float) -> str:
    """Format number for PDF (at most 3 decimal places, no trailing zeros).

    Args:
        value: Numeric value

    Returns:
        Formatted string
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not PDF numbers")
    if isinstance(value, int):
        return str(value)
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def format_pdf_matrix(a: float, b: float, c: float, d: float, e: float, f: float) -> str:
    """Format transformation matrix operands for PDF."""
    return " ".join(format_pdf_number(v) for v in (a, b, c, d, e, f))


def format_rgb(color: Tuple[float, float, float]) -> str:
    return " ".join(format_pdf_number(float(component)) for component in color)


def pdf_date(moment: Optional[datetime] = None) -> str:
    """PDF date string, e.g. ``D:20240131120000``."""
    moment = moment or datetime.now()
    return moment.strftime("D:%Y%m%d%H%M%S")
