"""Document options.

Options can be given as keyword arguments, as a plain dictionary
(``DocumentOptions.from_dict``) or read from ``STREAMPDF_*`` environment
variables (``DocumentOptions.from_env``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional

from .version import __version__

logger = logging.getLogger(__name__)

SUPPORTED_PDF_VERSIONS = ("1.4", "1.5", "1.6", "1.7")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass
class DocumentOptions:
    """Settings shared by a document, its writer and its font provider."""

    pdf_version: str = "1.7"
    compress_streams: bool = True
    fallback_font: str = "Helvetica"
    default_font_size: float = 12.0
    producer: str = f"streampdf {__version__}"
    font_search_dirs: List[str] = field(default_factory=list)
    use_fc_match: bool = True

    def __post_init__(self) -> None:
        if self.pdf_version not in SUPPORTED_PDF_VERSIONS:
            raise ValueError(
                f"Unsupported PDF version {self.pdf_version!r}; expected one of {SUPPORTED_PDF_VERSIONS}"
            )
        if self.default_font_size <= 0:
            raise ValueError("default_font_size must be positive")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DocumentOptions":
        """Build options from a dictionary, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown document options: %s", ", ".join(unknown))
        values = {key: value for key, value in data.items() if key in known}
        if "font_search_dirs" in values:
            values["font_search_dirs"] = [str(path) for path in values["font_search_dirs"]]
        return cls(**values)

    @classmethod
    def from_env(cls, base: Optional["DocumentOptions"] = None, environ: Optional[Mapping[str, str]] = None) -> "DocumentOptions":
        """Apply ``STREAMPDF_*`` environment overrides on top of *base*."""
        env = os.environ if environ is None else environ
        options = base or cls()
        overrides: Dict[str, Any] = {}

        if "STREAMPDF_COMPRESS" in env:
            overrides["compress_streams"] = _parse_bool(env["STREAMPDF_COMPRESS"])
        if "STREAMPDF_FALLBACK_FONT" in env:
            overrides["fallback_font"] = env["STREAMPDF_FALLBACK_FONT"]
        if "STREAMPDF_PDF_VERSION" in env:
            overrides["pdf_version"] = env["STREAMPDF_PDF_VERSION"]
        if "STREAMPDF_FONT_DIRS" in env:
            overrides["font_search_dirs"] = [
                part for part in env["STREAMPDF_FONT_DIRS"].split(os.pathsep) if part
            ]

        if overrides:
            logger.debug("Document options overridden from environment: %s", sorted(overrides))
        return replace(options, **overrides)

    @classmethod
    def coerce(cls, options: "DocumentOptions | Mapping[str, Any] | None") -> "DocumentOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.from_dict(options)
