"""Helpers for resolving font families to TrueType files across platforms."""

from __future__ import annotations

import logging
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Protocol, Tuple

from ..exceptions import ResourceError
from .metrics import FontMetrics, truetype_metrics

logger = logging.getLogger(__name__)

FONT_SEARCH_DIRS = [
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path.home() / ".local/share/fonts",
    Path("C:/Windows/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/Library/Fonts"),
]

FONT_EXTENSIONS = (".ttf",)


class FontResolver(Protocol):
    """Font-matching collaborator: family name to embeddable metrics, or None if not found."""

    def resolve(self, family: str) -> Optional[FontMetrics]:
        ...


def _fc_match(pattern: str) -> Optional[Path]:
    try:
        result = subprocess.run(
            ["fc-match", "-f", "%{file}\n", pattern],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=10,
        )
    except (FileNotFoundError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
        return None

    output = (result.stdout or "").strip().splitlines()
    if not output:
        return None

    path = Path(output[0]).expanduser()
    return path if path.exists() else None


def _candidate_filenames(family: str) -> Tuple[str, ...]:
    base = family.replace(" ", "")
    suffixes = ["", "-Regular", "_Regular", "-regular", "_regular"]

    candidates = set()
    for prefix in (family, base):
        for suffix in suffixes:
            candidates.add(f"{prefix}{suffix}".lower())

    return tuple(candidate + ext for candidate in sorted(candidates) for ext in FONT_EXTENSIONS)


@lru_cache(maxsize=32)
def _build_font_index(search_dirs: Tuple[Path, ...]) -> dict:
    index = {}
    for root in search_dirs:
        if not root.exists():
            continue
        try:
            for ext in FONT_EXTENSIONS:
                for candidate in root.rglob(f"*{ext}"):
                    index.setdefault(candidate.name.lower(), candidate)
        except OSError as exc:  # pragma: no cover - unreadable directory
            logger.debug("Could not scan font directory %s: %s", root, exc)
    return index


class SystemFontResolver:
    """
    Resolves families with ``fc-match`` first, then by file name in the
    search directories.

    Only ``.ttf`` files are accepted; anything else is reported as not found
    so that the provider falls back to a standard font.
    """

    def __init__(self, search_dirs: Optional[Iterable[str | Path]] = None, use_fc_match: bool = True):
        extra = [Path(p) for p in (search_dirs or [])]
        self.search_dirs: Tuple[Path, ...] = tuple(extra + FONT_SEARCH_DIRS)
        self.use_fc_match = use_fc_match

    def find_font_file(self, family: str) -> Optional[Path]:
        if not family:
            return None

        if self.use_fc_match:
            path = _fc_match(family)
            if path and path.suffix.lower() in FONT_EXTENSIONS:
                return path

        index = _build_font_index(self.search_dirs)
        for candidate in _candidate_filenames(family):
            path = index.get(candidate)
            if path:
                return path

        lowered = family.replace(" ", "").lower()
        for name, path in sorted(index.items()):
            if lowered in name:
                return path

        return None

    def resolve(self, family: str) -> Optional[FontMetrics]:
        path = self.find_font_file(family)
        if path is None:
            logger.debug("No TrueType file found for family %r", family)
            return None
        try:
            return truetype_metrics(path)
        except ResourceError as exc:
            logger.warning("Font file %s for %r is not usable: %s", path, family, exc)
            return None


class StaticFontResolver:
    """Resolver backed by an explicit family -> TrueType file mapping."""

    def __init__(self, fonts: Optional[dict] = None):
        self._fonts = {name.lower(): Path(path) for name, path in (fonts or {}).items()}

    def resolve(self, family: str) -> Optional[FontMetrics]:
        path = self._fonts.get((family or "").lower())
        if path is None:
            return None
        return truetype_metrics(path)

