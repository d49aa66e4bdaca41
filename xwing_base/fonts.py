"""Font lookup for nameplate text.

Explicit paths from :class:`~xwing_base.config.EngineConfig` win, then the
first installed system font from the candidate list for the platform, then
Pillow's bundled default font. A path that exists but cannot be read as a
font also falls back to the default, with one warning per path.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


def _candidates(bold: bool) -> List[str]:
    if sys.platform == "win32":
        return ["C:/Windows/Fonts/arialbd.ttf" if bold else "C:/Windows/Fonts/arial.ttf"]
    if sys.platform == "darwin":
        return [
            "/System/Library/Fonts/Supplemental/Arial Bold.ttf"
            if bold
            else "/System/Library/Fonts/Supplemental/Arial.ttf",
            "/System/Library/Fonts/Helvetica.ttc",
        ]
    return [
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf"
        if bold
        else "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
        if bold
        else "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    ]


def find_system_font(bold: bool = False) -> Optional[str]:
    for path in _candidates(bold):
        if os.path.exists(path):
            return path
    return None


@dataclass
class FontSet:
    """Caching font provider for the overlay renderer.

    Attributes:
        regular_path: TrueType file for regular weight, ``None`` to search.
        bold_path: TrueType file for bold weight, ``None`` to search.
    """

    regular_path: Optional[str] = None
    bold_path: Optional[str] = None

    def __post_init__(self) -> None:
        self._cache: Dict[Tuple[Optional[str], int], FontType] = {}
        self._broken: Set[str] = set()
        if self.regular_path is None:
            self.regular_path = find_system_font(bold=False)
        if self.bold_path is None:
            self.bold_path = find_system_font(bold=True) or self.regular_path

    def get(self, size: float, bold: bool = False) -> FontType:
        """Font at ``size`` pixels (rounded, at least 1)."""
        px = max(1, int(round(size)))
        path = self.bold_path if bold else self.regular_path
        key = (path, px)
        if key not in self._cache:
            self._cache[key] = self._load(path, px)
        return self._cache[key]

    def _load(self, path: Optional[str], px: int) -> FontType:
        if path is not None and path not in self._broken and os.path.exists(path):
            try:
                return ImageFont.truetype(path, px)
            except OSError as e:
                self._broken.add(path)
                logger.warning("Unusable font %s (%s); using default font", path, e)
        return ImageFont.load_default(px)
