"""Asset identifier resolution.

Identifiers are slash separated keys into a read-only asset namespace::

    {size}/ship-tile-{size}                                       base tile
    {size}/{faction}/{faction}-{size}-{arc}                       arc overlay
    {size}/{faction}/nameplate/{faction}-{size}-nameplate-{mode}  nameplate

The loader appends the raster extension. Everything here is pure: the same
selection always yields the same identifiers.
"""

from typing import Optional, Tuple, Union

from pyrsistent import pvector
from pyrsistent.typing import PVector

from xwing_base.state import Selection
from xwing_base.types import (
    NAMEPLATE,
    ArcVariant,
    AssetId,
    Faction,
    LayerName,
    NameplateMode,
)

LayerPlan = PVector[Tuple[LayerName, Optional[AssetId]]]


def resolve(
    selection: Selection,
    overlay_kind: Optional[Union[ArcVariant, str]] = None,
    subtype: Optional[Union[NameplateMode, str]] = None,
) -> Optional[AssetId]:
    """Return the asset id for the base tile or one overlay, or ``None``.

    Args:
        selection: Snapshot to resolve against.
        overlay_kind: ``None`` for the base tile, an arc variant, or
            ``"nameplate"``.
        subtype: Nameplate mode (``"full"`` or ``"initiative"``); required
            for nameplates, ignored otherwise.

    Raises:
        ValueError: If ``overlay_kind`` or ``subtype`` is not recognized.
    """
    size = selection.base_size
    if size is None:
        return None

    if overlay_kind is None:
        return f"{size}/ship-tile-{size}"

    if overlay_kind == NAMEPLATE:
        mode = NameplateMode(subtype) if subtype is not None else NameplateMode.NONE
        if selection.faction is Faction.NONE or mode is NameplateMode.NONE:
            return None
        faction = selection.faction
        return f"{size}/{faction}/nameplate/{faction}-{size}-nameplate-{mode}"

    arc = ArcVariant(overlay_kind)
    if selection.faction is Faction.NONE or arc is ArcVariant.NONE:
        return None
    faction = selection.faction
    return f"{size}/{faction}/{faction}-{size}-{arc}"


def layer_plan(selection: Selection) -> LayerPlan:
    """Z-ordered ``(layer, asset id)`` pairs for every slot, bottom first.

    Deselected or unresolvable slots keep their position with a ``None`` id so
    the plan always has the same shape.
    """
    return pvector(
        [
            (LayerName.BASE, resolve(selection)),
            (LayerName.BACK_ARC, resolve(selection, selection.back_arc)),
            (LayerName.FRONT_ARC, resolve(selection, selection.front_arc)),
            (
                LayerName.NAMEPLATE,
                resolve(selection, NAMEPLATE, selection.nameplate_mode),
            ),
        ]
    )
