"""Per-size placement of nameplate text and the ship icon.

Every value is a fraction of the surface so that the same profile works for
any base tile resolution. Horizontal anchors and all sizes are fractions of
the surface width, vertical anchors fractions of the surface height. The
initiative sits over the hexagon at the left end of the nameplate, the icon
in the slot at the right end.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from xwing_base.types import BaseSize, OverlayElement


@dataclass(frozen=True)
class Anchor:
    x: float
    y: float

    def to_pixels(self, width: int, height: int) -> Tuple[float, float]:
        return width * self.x, height * self.y


@dataclass(frozen=True)
class LayoutProfile:
    """Layout fractions for one base size.

    Attributes:
        name_anchor: Center of the pilot name.
        name_font_size: Pilot name font size, fraction of width.
        initiative_anchor: Center of the initiative numeral.
        initiative_font_size: Initiative font size, fraction of width.
        icon_anchor: Center of the ship icon.
        icon_max_size: Longest icon side, fraction of width.
    """

    name_anchor: Anchor
    name_font_size: float
    initiative_anchor: Anchor
    initiative_font_size: float
    icon_anchor: Anchor
    icon_max_size: float


LAYOUT_PROFILES: Dict[BaseSize, LayoutProfile] = {
    BaseSize.SMALL: LayoutProfile(
        name_anchor=Anchor(0.55, 0.78),
        name_font_size=0.038,
        initiative_anchor=Anchor(0.12, 0.78),
        initiative_font_size=0.08,
        icon_anchor=Anchor(0.88, 0.78),
        icon_max_size=0.09,
    ),
    BaseSize.MEDIUM: LayoutProfile(
        name_anchor=Anchor(0.55, 0.80),
        name_font_size=0.032,
        initiative_anchor=Anchor(0.11, 0.80),
        initiative_font_size=0.065,
        icon_anchor=Anchor(0.89, 0.80),
        icon_max_size=0.075,
    ),
    BaseSize.LARGE: LayoutProfile(
        name_anchor=Anchor(0.55, 0.84),
        name_font_size=0.027,
        initiative_anchor=Anchor(0.095, 0.84),
        initiative_font_size=0.055,
        icon_anchor=Anchor(0.905, 0.84),
        icon_max_size=0.06,
    ),
}


def layout_for(base_size: Optional[BaseSize]) -> LayoutProfile:
    """Profile for ``base_size``; anything unrecognized gets the small one."""
    if base_size is None:
        return LAYOUT_PROFILES[BaseSize.SMALL]
    return LAYOUT_PROFILES.get(base_size, LAYOUT_PROFILES[BaseSize.SMALL])


@dataclass(frozen=True)
class Placement:
    """Where the overlay renderer put one element, in surface pixels.

    Attributes:
        element: Which element was drawn.
        center: Pixel anchor the element is centered on.
        font_size: Pixel font size for text elements.
        dimensions: Drawn ``(width, height)`` for the icon.
        text: Drawn string for text elements.
    """

    element: OverlayElement
    center: Tuple[float, float]
    font_size: Optional[float] = None
    dimensions: Optional[Tuple[float, float]] = None
    text: Optional[str] = None
