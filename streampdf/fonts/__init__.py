"""Font resolution, metrics and text encoding."""

from .font_resolver import FontResolver, StaticFontResolver, SystemFontResolver
from .metrics import Font, FontMetrics, standard_metrics, truetype_metrics
from .provider import FontMetricsProvider

__all__ = [
    "Font",
    "FontMetrics",
    "FontMetricsProvider",
    "FontResolver",
    "StaticFontResolver",
    "SystemFontResolver",
    "standard_metrics",
    "truetype_metrics",
]
