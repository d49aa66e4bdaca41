import logging

import streamlit as st

from widgets import (
    arc_section,
    export_section,
    faction_section,
    get_engine,
    pilot_section,
    preview_section,
    show_messages,
    size_section,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s")

st.set_page_config(layout="wide", page_title="X-Wing Base Creator")

# --------- Main App ---------

engine = get_engine()
controls_col, preview_col = st.columns([0.4, 0.6])

with controls_col:
    size_section(engine)
    faction_section(engine)
    arc_section(engine)
    pilot_section()

with preview_col:
    show_messages()
    preview_section(engine.latest)
    st.divider()
    export_section()
