"""Nameplate text and ship icon rendering.

Placement comes from :mod:`xwing_base.layout`; every pixel value here is
derived from the surface size, so the same selection lays out identically on
a 500px and a 2000px base tile. Text gets a soft drop shadow so it stays
legible over arbitrary art.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from xwing_base.compositor import Surface
from xwing_base.fonts import FontSet, FontType
from xwing_base.layout import Placement, layout_for
from xwing_base.state import Selection
from xwing_base.types import NameplateMode, OverlayElement
from xwing_base.utils.image import fill_from_mask, shadow_from_mask

SHADOW_COLOR = (0, 0, 0)
SHADOW_OPACITY = 0.8
SHADOW_OFFSET = (2, 2)
SHADOW_BLUR = 4.0


@dataclass(frozen=True)
class TextStyle:
    """Fill color, weight and extra stroke (fraction of font size)."""

    color: Tuple[int, int, int, int]
    bold: bool = True
    stroke: float = 0.0


NAME_STYLE = TextStyle(color=(255, 255, 255, 255))
INITIATIVE_STYLE = TextStyle(color=(255, 140, 0, 255), stroke=0.06)

_default_fonts: Optional[FontSet] = None


def default_fonts() -> FontSet:
    global _default_fonts
    if _default_fonts is None:
        _default_fonts = FontSet()
    return _default_fonts


def text_mask(
    size: Tuple[int, int],
    text: str,
    font: FontType,
    center: Tuple[float, float],
    stroke_width: int = 0,
) -> Image.Image:
    """Coverage mask of ``text`` centered horizontally and vertically on ``center``."""
    mask = Image.new("L", size, 0)
    draw = ImageDraw.Draw(mask)
    left, top, right, bottom = draw.textbbox(
        (0, 0), text, font=font, stroke_width=stroke_width
    )
    origin = (center[0] - (left + right) / 2.0, center[1] - (top + bottom) / 2.0)
    draw.text(
        origin,
        text,
        font=font,
        fill=255,
        stroke_width=stroke_width,
        stroke_fill=255,
    )
    return mask


def draw_text(
    img: Image.Image,
    text: str,
    center: Tuple[float, float],
    font_size: float,
    style: TextStyle,
    fonts: FontSet,
) -> None:
    """Composite shadowed ``text`` onto ``img`` in place."""
    font = fonts.get(font_size, bold=style.bold)
    stroke_width = int(round(font_size * style.stroke))
    mask = text_mask(img.size, text, font, center, stroke_width)
    img.alpha_composite(
        shadow_from_mask(
            mask,
            color=SHADOW_COLOR,
            opacity=SHADOW_OPACITY,
            offset=SHADOW_OFFSET,
            blur=SHADOW_BLUR,
        )
    )
    img.alpha_composite(fill_from_mask(mask, style.color))


def icon_dimensions(
    icon_size: Tuple[int, int], max_size: float
) -> Tuple[float, float]:
    """Clamp the longer side to ``max_size`` and scale the other to match."""
    width, height = icon_size
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    scale = max_size / max(width, height)
    return width * scale, height * scale


def draw_icon(
    img: Image.Image,
    icon: Image.Image,
    center: Tuple[float, float],
    dimensions: Tuple[float, float],
) -> None:
    """Resize ``icon`` to ``dimensions`` and composite it centered on ``center``."""
    width = max(1, int(round(dimensions[0])))
    height = max(1, int(round(dimensions[1])))
    resized = icon.convert("RGBA").resize((width, height), Image.Resampling.LANCZOS)
    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    layer.paste(
        resized,
        (int(round(center[0] - width / 2.0)), int(round(center[1] - height / 2.0))),
    )
    img.alpha_composite(layer)


def render_overlays(
    surface: Surface,
    selection: Selection,
    fonts: Optional[FontSet] = None,
) -> Surface:
    """Draw pilot name, initiative and ship icon for ``selection``.

    Returns a new :class:`Surface`; ``surface`` itself is left untouched.
    """
    fonts = fonts or default_fonts()
    img = surface.image.copy()
    width, height = img.size
    profile = layout_for(selection.base_size)
    placements: List[Placement] = []

    pilot_name = selection.pilot_name.strip()
    if pilot_name:
        center = profile.name_anchor.to_pixels(width, height)
        font_size = width * profile.name_font_size
        draw_text(img, pilot_name, center, font_size, NAME_STYLE, fonts)
        placements.append(
            Placement(
                OverlayElement.PILOT_NAME,
                center,
                font_size=font_size,
                text=pilot_name,
            )
        )

    initiative = selection.initiative.strip()
    if initiative:
        center = profile.initiative_anchor.to_pixels(width, height)
        font_size = width * profile.initiative_font_size
        draw_text(img, initiative, center, font_size, INITIATIVE_STYLE, fonts)
        placements.append(
            Placement(
                OverlayElement.INITIATIVE,
                center,
                font_size=font_size,
                text=initiative,
            )
        )

    icon = selection.ship_icon
    if icon is not None and selection.nameplate_mode is not NameplateMode.NONE:
        center = profile.icon_anchor.to_pixels(width, height)
        dimensions = icon_dimensions(icon.size, width * profile.icon_max_size)
        if dimensions[0] > 0:
            draw_icon(img, icon, center, dimensions)
            placements.append(
                Placement(OverlayElement.SHIP_ICON, center, dimensions=dimensions)
            )

    return replace(
        surface, image=img, placements=surface.placements + tuple(placements)
    )
