"""Low-level PDF object serialization and streaming output."""

from .objects import Name, Reference, to_pdf
from .pdf_writer import PdfWriter

__all__ = ["Name", "PdfWriter", "Reference", "to_pdf"]
