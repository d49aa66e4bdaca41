from __future__ import annotations

import asyncio
from typing import Any, Coroutine, List, Optional

import streamlit as st

from xwing_base.config import load_config
from xwing_base.engine import ARC_LABELS, RenderEngine, RenderResult, faction_label
from xwing_base.exporter import Download
from xwing_base.types import (
    BACK_ARC_VARIANTS,
    FRONT_ARC_VARIANTS,
    ArcVariant,
    BaseSize,
    ExportStrategy,
    Faction,
)


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    return asyncio.run(coro)


def get_engine() -> RenderEngine:
    """Session-scoped engine; the first call renders the default selection."""
    if "engine" not in st.session_state:
        messages: List[str] = []
        engine = RenderEngine(load_config(), on_message=messages.append)
        st.session_state["messages"] = messages
        st.session_state["download"] = None
        st.session_state["engine"] = engine
        _run(engine.render())
    return st.session_state["engine"]


def _arc_label(arc: ArcVariant) -> str:
    return "None" if arc is ArcVariant.NONE else ARC_LABELS[arc]


# --------- Callbacks (one per field group) ---------


def _on_size(size: BaseSize) -> None:
    _run(get_engine().select_size(size))


def _on_faction() -> None:
    _run(get_engine().select_faction(st.session_state["faction_select"]))


def _on_arcs() -> None:
    _run(
        get_engine().select_arcs(
            front_arc=st.session_state["front_arc_select"],
            back_arc=st.session_state["back_arc_select"],
        )
    )


def _on_pilot_info() -> None:
    _run(
        get_engine().set_pilot_info(
            st.session_state["pilot_name"], st.session_state["initiative"]
        )
    )


def _on_icon() -> None:
    uploaded = st.session_state["ship_icon"]
    engine = get_engine()
    if uploaded is None:
        _run(engine.clear_icon())
    else:
        _run(engine.upload_icon(uploaded.getvalue()))


def _store_download(download: Download) -> None:
    st.session_state["download"] = download


def _on_export() -> None:
    st.session_state["download"] = None
    _run(get_engine().export(_store_download, ExportStrategy.DATA_URL))


# --------- Sections ---------


def size_section(engine: RenderEngine) -> None:
    st.subheader("Base Size")
    current = engine.store.current.base_size
    for col, size in zip(st.columns(len(BaseSize)), BaseSize):
        with col:
            st.button(
                size.capitalize(),
                key=f"btn-{size}",
                type="primary" if size is current else "secondary",
                on_click=_on_size,
                args=(size,),
                use_container_width=True,
            )


def faction_section(engine: RenderEngine) -> None:
    st.subheader("Faction")
    factions = list(Faction)
    st.selectbox(
        "Faction",
        factions,
        index=factions.index(engine.store.current.faction),
        format_func=faction_label,
        key="faction_select",
        on_change=_on_faction,
    )


def arc_section(engine: RenderEngine) -> None:
    st.subheader("Firing Arcs")
    current = engine.store.current
    front = [ArcVariant.NONE, *FRONT_ARC_VARIANTS]
    back = [ArcVariant.NONE, *BACK_ARC_VARIANTS]
    st.selectbox(
        "Front",
        front,
        index=front.index(current.front_arc),
        format_func=_arc_label,
        key="front_arc_select",
        on_change=_on_arcs,
    )
    st.selectbox(
        "Rear",
        back,
        index=back.index(current.back_arc),
        format_func=_arc_label,
        key="back_arc_select",
        on_change=_on_arcs,
    )


def pilot_section() -> None:
    st.subheader("Pilot")
    st.text_input("Pilot name", key="pilot_name", on_change=_on_pilot_info)
    st.text_input("Initiative", key="initiative", max_chars=2, on_change=_on_pilot_info)
    st.file_uploader(
        "Ship icon",
        type=["png", "jpg", "jpeg", "webp"],
        key="ship_icon",
        on_change=_on_icon,
    )


def show_messages() -> None:
    messages: List[str] = st.session_state["messages"]
    for message in messages:
        st.error(message)
    messages.clear()


def preview_section(result: Optional[RenderResult]) -> None:
    if result is None or result.surface is None:
        st.info("Select a base to see the preview", icon="🖼️")
    else:
        st.image(result.surface.image, use_container_width=True)
    if result is not None:
        st.caption(result.status.summary)


def export_section() -> None:
    st.button("Export PNG", key="export_btn", on_click=_on_export, use_container_width=True)
    download: Optional[Download] = st.session_state["download"]
    if download is not None:
        st.download_button(
            f"⬇️ {download.filename}",
            data=download.data,
            file_name=download.filename,
            mime="image/png",
            use_container_width=True,
        )
