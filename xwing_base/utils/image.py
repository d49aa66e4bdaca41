import numpy as np
import numpy.typing as npt
from PIL import Image, ImageFilter
from typing import Tuple

UInt8Array = npt.NDArray[np.uint8]
FloatArray = npt.NDArray[np.float32]


def offset_mask(mask: Image.Image, offset: Tuple[int, int]) -> Image.Image:
    """Shift an ``L`` mask by ``offset``; uncovered pixels become 0."""
    shifted = Image.new("L", mask.size, 0)
    shifted.paste(mask, offset)
    return shifted


def shadow_from_mask(
    mask: Image.Image,
    color: Tuple[int, int, int] = (0, 0, 0),
    opacity: float = 0.8,
    offset: Tuple[int, int] = (2, 2),
    blur: float = 4.0,
) -> Image.Image:
    """
    Build an RGBA drop shadow layer from a glyph coverage mask.

    The mask is shifted by ``offset`` and softened with a Gaussian of
    ``blur / 2`` radius, then its coverage is scaled by ``opacity`` to become
    the shadow alpha.
    """
    shifted = offset_mask(mask.convert("L"), offset)
    if blur > 0:
        shifted = shifted.filter(ImageFilter.GaussianBlur(blur / 2.0))

    coverage: FloatArray = np.asarray(shifted, dtype=np.float32) / 255.0
    alpha: UInt8Array = np.clip(
        np.rint(coverage * np.float32(np.clip(opacity, 0.0, 1.0)) * 255.0), 0, 255
    ).astype(np.uint8)

    out: UInt8Array = np.zeros(alpha.shape + (4,), dtype=np.uint8)
    out[..., 0] = color[0]
    out[..., 1] = color[1]
    out[..., 2] = color[2]
    out[..., 3] = alpha
    return Image.fromarray(out)


def fill_from_mask(
    mask: Image.Image, color: Tuple[int, int, int, int]
) -> Image.Image:
    """RGBA layer of solid ``color`` whose alpha follows ``mask`` coverage."""
    coverage: FloatArray = np.asarray(mask.convert("L"), dtype=np.float32) / 255.0
    out: UInt8Array = np.zeros(coverage.shape + (4,), dtype=np.uint8)
    out[..., 0] = color[0]
    out[..., 1] = color[1]
    out[..., 2] = color[2]
    out[..., 3] = np.rint(coverage * color[3]).astype(np.uint8)
    return Image.fromarray(out)


def pixels_equal(a: Image.Image, b: Image.Image) -> bool:
    """True when both images share size, mode and every pixel value."""
    if a.size != b.size or a.mode != b.mode:
        return False
    return bool(np.array_equal(np.asarray(a), np.asarray(b)))
