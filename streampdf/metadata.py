"""Document information dictionary."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .writer.utils import pdf_date

EDITABLE_FIELDS = ("title", "author", "subject", "keywords", "creator")


@dataclass
class DocumentInfo:
    """Metadata written to the /Info dictionary when the document closes."""

    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    keywords: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: datetime = field(default_factory=datetime.now)

    def update(self, **values: Optional[str]) -> None:
        unknown = sorted(set(values) - set(EDITABLE_FIELDS))
        if unknown:
            raise TypeError(f"Unknown metadata fields: {', '.join(unknown)}")
        for key, value in values.items():
            setattr(self, key, None if value is None else str(value))

    def to_pdf_dict(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {}
        for key in EDITABLE_FIELDS + ("producer",):
            value = getattr(self, key)
            if value:
                info[key.capitalize()] = value
        info["CreationDate"] = pdf_date(self.creation_date)
        return info
