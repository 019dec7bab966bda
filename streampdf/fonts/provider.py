"""Font metrics provider: one instance per run owns the metrics cache."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..exceptions import ResourceError, StateError
from .font_resolver import FontResolver, SystemFontResolver
from .font_utils import fallback_font_name, standard_font_name
from .metrics import Font, FontMetrics, standard_metrics

logger = logging.getLogger(__name__)


class FontMetricsProvider:
    """
    Resolves family names to metrics, caching each family once.

    Standard font names (Helvetica, Times-Roman, Courier and their variants)
    are served from the built-in metrics without consulting the resolver.
    Any other family goes through the resolver; when it finds nothing the
    closest standard font is used instead, so creating a font never fails
    because a family is missing.
    """

    def __init__(self, resolver: Optional[FontResolver] = None, fallback_font: str = "Helvetica"):
        self._resolver = resolver if resolver is not None else SystemFontResolver()
        self.fallback_font = fallback_font
        self._cache: Dict[str, FontMetrics] = {}
        self._closed = False

    def __enter__(self) -> "FontMetricsProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def cached_families(self):
        return sorted(self._cache)

    def resolve(self, family: str) -> FontMetrics:
        """Return metrics for *family*, resolving on first use."""
        if self._closed:
            raise StateError("Font metrics provider is closed")

        key = (family or "").strip()
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        metrics = self._resolve_uncached(key)
        self._cache[key] = metrics
        return metrics

    def _resolve_uncached(self, family: str) -> FontMetrics:
        standard = standard_font_name(family)
        if standard:
            return standard_metrics(standard)

        resolved = None
        if family:
            try:
                resolved = self._resolver.resolve(family)
            except ResourceError as exc:
                logger.warning("Font resolver failed for %r: %s", family, exc)
        if resolved is not None:
            logger.debug("Resolved font %r to %s", family, resolved.source_path or resolved.name)
            return resolved

        fallback = fallback_font_name(family, self.fallback_font)
        logger.warning("Font %r not found, using %s", family, fallback)
        return standard_metrics(fallback)

    def create_font(self, family: str, size: float = 12.0, alias: str = "F1") -> Font:
        """Create a font handle for *family* with the given current size."""
        return Font(family, self.resolve(family), alias=alias, size=size)

    def close(self) -> None:
        """Release the metrics cache. Further lookups raise ``StateError``."""
        if self._closed:
            return
        logger.debug("Releasing %d cached font metrics", len(self._cache))
        self._cache.clear()
        self._closed = True
