"""Fixed z-order raster compositing.

The base tile decides the surface: its pixel size becomes the output size and
every overlay is drawn at the origin on top of it. Overlay art is authored at
the base tile's resolution, so overlays are never scaled; a mismatched
overlay is cropped or padded to the surface bounds instead.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from PIL import Image

from xwing_base.layout import Placement
from xwing_base.types import LayerName


@dataclass(frozen=True)
class Surface:
    """Rendered raster plus the bookkeeping needed by later stages.

    Attributes:
        image: RGBA output raster.
        drawn: Layers actually painted, in draw order.
        placements: Text and icon elements drawn by the overlay renderer.
        rendered: True once the full pipeline has finished for this surface.
    """

    image: Image.Image = field(repr=False)
    drawn: Tuple[LayerName, ...] = ()
    placements: Tuple[Placement, ...] = ()
    rendered: bool = False

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def area(self) -> int:
        width, height = self.image.size
        return width * height


def _fit_to(layer: Image.Image, size: Tuple[int, int]) -> Image.Image:
    if layer.mode != "RGBA":
        layer = layer.convert("RGBA")
    if layer.size != size:
        layer = layer.crop((0, 0) + size)
    return layer


def composite(
    base: Optional[Image.Image],
    overlays: Sequence[Tuple[LayerName, Optional[Image.Image]]] = (),
) -> Optional[Surface]:
    """Draw ``base`` then each present overlay, bottom to top.

    Args:
        base: Base tile raster. ``None`` yields ``None``; nothing is drawn
            without a base.
        overlays: ``(layer, image)`` pairs already in z-order. Pairs whose
            image is ``None`` are skipped.

    Returns:
        Optional[Surface]: Surface sized exactly to ``base``.
    """
    if base is None:
        return None

    size = base.size
    img = Image.new("RGBA", size, (0, 0, 0, 0))
    img.alpha_composite(_fit_to(base, size))
    drawn = [LayerName.BASE]

    for layer, overlay in overlays:
        if overlay is None:
            continue
        img.alpha_composite(_fit_to(overlay, size))
        drawn.append(layer)

    return Surface(image=img, drawn=tuple(drawn))
