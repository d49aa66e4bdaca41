"""Common type aliases and enumerations.

The string values of :class:`BaseSize`, :class:`Faction` and
:class:`ArcVariant` are the exact tokens used inside asset identifiers, so
they double as path segments (see :mod:`xwing_base.paths`).
"""

from enum import StrEnum, auto
from typing import Tuple


AssetId = str


class BaseSize(StrEnum):
    """Miniature base sizes; controls layout scale and asset folder."""

    SMALL = auto()
    MEDIUM = auto()
    LARGE = auto()


class Faction(StrEnum):
    """Known factions. ``NONE`` disables every faction-specific overlay."""

    NONE = "none"
    REBEL_ALLIANCE = "rebel-alliance"
    GALACTIC_EMPIRE = "galactic-empire"
    SCUM_AND_VILLAINY = "scum-and-villainy"
    RESISTANCE = "resistance"
    FIRST_ORDER = "first-order"
    GALACTIC_REPUBLIC = "galactic-republic"
    SEPARATIST_ALLIANCE = "separatist-alliance"


class ArcVariant(StrEnum):
    """Firing arc graphics selectable for the front and back overlay slots."""

    NONE = "none"
    FRONTARC = "frontarc"
    FULLFRONTARC = "fullfrontarc"
    BULLSEYE = "bullseye"
    REARARC = "reararc"
    FULLREARARC = "fullreararc"


FRONT_ARC_VARIANTS: Tuple[ArcVariant, ...] = (
    ArcVariant.FRONTARC,
    ArcVariant.FULLFRONTARC,
    ArcVariant.BULLSEYE,
)
BACK_ARC_VARIANTS: Tuple[ArcVariant, ...] = (
    ArcVariant.REARARC,
    ArcVariant.FULLREARARC,
)

NAMEPLATE = "nameplate"
"""Overlay kind selecting the nameplate namespace in the path resolver."""


class NameplateMode(StrEnum):
    """Derived nameplate classification (see ``derive_nameplate_mode``)."""

    FULL = auto()
    INITIATIVE = auto()
    NONE = auto()


class LayerName(StrEnum):
    """Z-ordered raster layers, listed bottom to top."""

    BASE = auto()
    BACK_ARC = auto()
    FRONT_ARC = auto()
    NAMEPLATE = auto()


class ExecutionContext(StrEnum):
    """Where assets come from; selects loader marking and export strategy."""

    LOCAL_FILE = auto()
    NETWORK = auto()


class ExportStrategy(StrEnum):
    """Serialization path used by the exporter."""

    BLOB = auto()
    DATA_URL = auto()


class Visibility(StrEnum):
    """What the UI collaborator should show after a render."""

    PLACEHOLDER = auto()
    SURFACE = auto()


class OverlayElement(StrEnum):
    """Dynamic elements placed by the overlay renderer."""

    PILOT_NAME = auto()
    INITIATIVE = auto()
    SHIP_ICON = auto()
