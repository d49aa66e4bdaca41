"""Render pipeline and the inbound/outbound interface for the UI.

One render runs resolver -> loader -> compositor -> overlay renderer for a
single :class:`~xwing_base.state.Selection` snapshot. Every mutation
operation updates the :class:`~xwing_base.state.SelectionStore` and awaits a
full render.

Renders may overlap while asset loads are pending. Each render takes a
generation number when it starts; if a newer render has started by the time
its loads finish, the older result is dropped instead of overwriting the
surface. The most recently *started* render always wins.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

from PIL import Image

from xwing_base.compositor import Surface, composite
from xwing_base.config import EngineConfig
from xwing_base.errors import ExportError, IconDecodeError
from xwing_base.exporter import (
    Download,
    DownloadSink,
    export_surface,
    export_surface_async,
    strategy_for,
)
from xwing_base.fonts import FontSet
from xwing_base.loader import AssetLoader, decode_image
from xwing_base.overlay import render_overlays
from xwing_base.paths import layer_plan
from xwing_base.state import Selection, SelectionStore
from xwing_base.types import (
    ArcVariant,
    BaseSize,
    ExportStrategy,
    Faction,
    LayerName,
    NameplateMode,
    Visibility,
)

logger = logging.getLogger(__name__)

ARC_LABELS: Dict[ArcVariant, str] = {
    ArcVariant.FRONTARC: "Front Arc",
    ArcVariant.FULLFRONTARC: "Full Front Arc",
    ArcVariant.BULLSEYE: "Bullseye Arc",
    ArcVariant.REARARC: "Rear Arc",
    ArcVariant.FULLREARARC: "Full Rear Arc",
}

NO_BASE_SUMMARY = "No base selected"


@dataclass(frozen=True)
class RenderStatus:
    """What the UI should display after a render."""

    summary: str
    visibility: Visibility


@dataclass(frozen=True)
class RenderResult:
    """Outcome of one completed (not superseded) render."""

    generation: int
    selection: Selection
    surface: Optional[Surface]
    status: RenderStatus


StatusListener = Callable[[RenderStatus], None]
MessageListener = Callable[[str], None]


def faction_label(faction: Faction) -> str:
    if faction is Faction.NONE:
        return "No Faction"
    return " ".join(word.capitalize() for word in faction.split("-"))


def summarize(selection: Selection) -> str:
    """One-line description, e.g. ``Small Base | Rebel Alliance | Overlays: Front Arc``."""
    if selection.base_size is None:
        return NO_BASE_SUMMARY
    overlays: List[str] = []
    if selection.nameplate_mode is not NameplateMode.NONE:
        overlays.append("Nameplate")
    if selection.front_arc is not ArcVariant.NONE:
        overlays.append(ARC_LABELS[selection.front_arc])
    if selection.back_arc is not ArcVariant.NONE:
        overlays.append(ARC_LABELS[selection.back_arc])
    summary = (
        f"{selection.base_size.capitalize()} Base | {faction_label(selection.faction)}"
    )
    if overlays:
        summary += f" | Overlays: {', '.join(overlays)}"
    return summary


def decode_icon(data: bytes) -> Image.Image:
    """Decode uploaded icon bytes.

    Raises:
        IconDecodeError: If the bytes are not a readable raster image.
    """
    try:
        return decode_image(data)
    except Exception as e:
        raise IconDecodeError(f"Could not read ship icon: {e}") from e


class RenderEngine:
    """Owns the selection store, the latest surface and the render sequence.

    Args:
        config: Engine settings; defaults apply when omitted.
        store: Selection store; a fresh one with defaults when omitted.
        loader: Asset loader; built from ``config`` when omitted.
        fonts: Font provider; built from ``config`` when omitted.
        on_status: Called with the status of every completed render.
        on_message: Called with user-facing error messages.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        store: Optional[SelectionStore] = None,
        loader: Optional[AssetLoader] = None,
        fonts: Optional[FontSet] = None,
        on_status: Optional[StatusListener] = None,
        on_message: Optional[MessageListener] = None,
    ):
        self.config = config or EngineConfig()
        self.store = store or SelectionStore()
        self.loader = loader or AssetLoader(
            self.config.asset_root,
            context=self.config.context,
            timeout=self.config.request_timeout,
        )
        self.fonts = fonts or FontSet(self.config.font_path, self.config.bold_font_path)
        self.on_status = on_status
        self.on_message = on_message
        self._generation = 0
        self._latest: Optional[RenderResult] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def latest(self) -> Optional[RenderResult]:
        return self._latest

    @property
    def surface(self) -> Optional[Surface]:
        return self._latest.surface if self._latest is not None else None

    def _report(self, message: str) -> None:
        logger.warning(message)
        if self.on_message is not None:
            self.on_message(message)

    def _publish(self, result: RenderResult) -> RenderResult:
        self._latest = result
        if self.on_status is not None:
            self.on_status(result.status)
        return result

    async def render(self, selection: Optional[Selection] = None) -> Optional[RenderResult]:
        """Run the full pipeline for ``selection`` (default: the store's current).

        Returns:
            Optional[RenderResult]: ``None`` if a newer render started while
            this one was loading assets.
        """
        selection = selection if selection is not None else self.store.current
        self._generation += 1
        generation = self._generation
        logger.debug("Render %d: %s", generation, dict(selection.description))

        if selection.base_size is None:
            return self._publish(
                RenderResult(
                    generation,
                    selection,
                    None,
                    RenderStatus(NO_BASE_SUMMARY, Visibility.PLACEHOLDER),
                )
            )

        layers: List[Tuple[LayerName, Optional[Image.Image]]] = []
        for layer, asset_id in layer_plan(selection):
            layers.append((layer, await self.loader.load(asset_id)))

        if generation != self._generation:
            logger.debug(
                "Dropping render %d; render %d started since", generation, self._generation
            )
            return None

        surface = composite(layers[0][1], layers[1:])
        if surface is not None:
            surface = replace(
                render_overlays(surface, selection, self.fonts), rendered=True
            )
            visibility = Visibility.SURFACE
        else:
            logger.debug("Base tile missing for %s", selection.base_size)
            visibility = Visibility.PLACEHOLDER

        return self._publish(
            RenderResult(
                generation,
                selection,
                surface,
                RenderStatus(summarize(selection), visibility),
            )
        )

    async def select_size(self, base_size: BaseSize | str) -> Optional[RenderResult]:
        return await self.render(self.store.update(base_size=base_size))

    async def select_faction(self, faction: Faction | str) -> Optional[RenderResult]:
        return await self.render(self.store.update(faction=faction))

    async def select_arcs(
        self,
        front_arc: Optional[ArcVariant | str] = None,
        back_arc: Optional[ArcVariant | str] = None,
    ) -> Optional[RenderResult]:
        """Set either or both arc slots; ``None`` leaves a slot unchanged."""
        changes = {}
        if front_arc is not None:
            changes["front_arc"] = front_arc
        if back_arc is not None:
            changes["back_arc"] = back_arc
        return await self.render(self.store.update(**changes))

    async def set_pilot_info(
        self, pilot_name: str, initiative: str
    ) -> Optional[RenderResult]:
        return await self.render(
            self.store.update(pilot_name=pilot_name, initiative=initiative)
        )

    async def upload_icon(self, data: bytes) -> Optional[RenderResult]:
        """Replace the ship icon; an unreadable upload clears it and is reported."""
        icon: Optional[Image.Image]
        try:
            icon = await asyncio.to_thread(decode_icon, data)
        except IconDecodeError as e:
            self._report(str(e))
            icon = None
        return await self.render(self.store.update(ship_icon=icon))

    async def clear_icon(self) -> Optional[RenderResult]:
        return await self.render(self.store.update(ship_icon=None))

    async def export(
        self,
        deliver: DownloadSink,
        strategy: Optional[ExportStrategy] = None,
    ) -> Optional[Download]:
        """Export the latest surface; failures are reported and return ``None``."""
        strategy = strategy or strategy_for(self.loader.context)
        selection = (
            self._latest.selection if self._latest is not None else self.store.current
        )
        prefix = self.config.filename_prefix
        try:
            if strategy is ExportStrategy.BLOB:
                return await export_surface_async(
                    self.surface, selection, deliver, prefix=prefix
                )
            return export_surface(self.surface, selection, deliver, prefix=prefix)
        except ExportError as e:
            self._report(str(e))
            return None
