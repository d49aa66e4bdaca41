"""Selection snapshot and its owning store.

:class:`Selection` is the frozen record of every user choice that feeds one
render. The UI collaborator never mutates it; instead it asks the
:class:`SelectionStore` for an update, which swaps in a brand new snapshot and
notifies subscribers. Each render therefore works on a value that cannot
change underneath it while asset loads are pending.

Design notes:

* ``nameplate_mode`` is a property computed from ``pilot_name`` and
    ``initiative`` on every access. It is never stored, so it cannot drift out
    of sync with the text fields.
* ``ship_icon`` is replaced wholesale on upload; the image object held by a
    snapshot is never edited in place.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from PIL import Image
from pyrsistent import PMap, pmap

from xwing_base.types import (
    BACK_ARC_VARIANTS,
    FRONT_ARC_VARIANTS,
    ArcVariant,
    BaseSize,
    Faction,
    NameplateMode,
)


def derive_nameplate_mode(pilot_name: str, initiative: str) -> NameplateMode:
    """Classify the nameplate; a pilot name always wins over initiative."""
    if pilot_name and pilot_name.strip():
        return NameplateMode.FULL
    if initiative and initiative.strip():
        return NameplateMode.INITIATIVE
    return NameplateMode.NONE


@dataclass(frozen=True)
class Selection:
    """Immutable snapshot of the user's choices.

    Attributes:
        base_size (BaseSize | None): Selected base; ``None`` only before the
            store has initialized it.
        faction (Faction): Faction namespace for overlays.
        front_arc (ArcVariant): Front overlay slot, ``NONE`` when deselected.
        back_arc (ArcVariant): Back overlay slot, ``NONE`` when deselected.
        pilot_name (str): Free text drawn on the nameplate.
        initiative (str): Free text (numeral) drawn on the nameplate.
        ship_icon (Image | None): User supplied icon raster.
    """

    base_size: Optional[BaseSize] = BaseSize.SMALL
    faction: Faction = Faction.NONE
    front_arc: ArcVariant = ArcVariant.NONE
    back_arc: ArcVariant = ArcVariant.NONE
    pilot_name: str = ""
    initiative: str = ""
    ship_icon: Optional[Image.Image] = field(default=None, repr=False)

    @property
    def nameplate_mode(self) -> NameplateMode:
        return derive_nameplate_mode(self.pilot_name, self.initiative)

    @property
    def description(self) -> PMap[str, Any]:
        """Sparse view of populated fields, for logging and diagnostics."""
        description: PMap[str, Any] = pmap()
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if isinstance(value, Image.Image):
                value = value.size
            elif value is None or value == "" or value == "none":
                continue
            description = description.set(name, value)
        return description.set("nameplate_mode", self.nameplate_mode)


SelectionListener = Callable[[Selection], None]


def _validate_arc(value: Any, allowed: Tuple[ArcVariant, ...], slot: str) -> ArcVariant:
    arc = ArcVariant(value)
    if arc is not ArcVariant.NONE and arc not in allowed:
        raise ValueError(f"{arc} is not a valid {slot} arc variant")
    return arc


def normalize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce raw widget values into typed ``Selection`` fields.

    Raises:
        ValueError: For unknown fields or values outside the enumerations.
    """
    normalized: Dict[str, Any] = {}
    for name, value in changes.items():
        if name == "base_size":
            if value is None:
                raise ValueError("base_size cannot be cleared once initialized")
            normalized[name] = BaseSize(value)
        elif name == "faction":
            normalized[name] = Faction(value)
        elif name == "front_arc":
            normalized[name] = _validate_arc(value, FRONT_ARC_VARIANTS, "front")
        elif name == "back_arc":
            normalized[name] = _validate_arc(value, BACK_ARC_VARIANTS, "back")
        elif name in ("pilot_name", "initiative"):
            normalized[name] = "" if value is None else str(value)
        elif name == "ship_icon":
            if value is not None and not isinstance(value, Image.Image):
                raise ValueError("ship_icon must be a PIL image or None")
            normalized[name] = value
        else:
            raise ValueError(f"Unknown selection field: {name}")
    return normalized


class SelectionStore:
    """Single owner of the current :class:`Selection` snapshot."""

    def __init__(self, initial: Optional[Selection] = None):
        self._current = initial if initial is not None else Selection()
        self._listeners: List[SelectionListener] = []

    @property
    def current(self) -> Selection:
        return self._current

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> Selection:
        """Swap in a new snapshot with ``changes`` applied and notify listeners."""
        self._current = replace(self._current, **normalize_changes(changes))
        for listener in list(self._listeners):
            listener(self._current)
        return self._current
