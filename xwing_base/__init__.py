"""Layered base/token image compositing for tabletop miniatures.

A :class:`~xwing_base.state.Selection` snapshot describes the user's choices
(base size, faction, firing arcs, pilot name, initiative and ship icon). The
:class:`~xwing_base.engine.RenderEngine` turns it into a raster by:

* resolving asset identifiers for each z-ordered layer (:mod:`xwing_base.paths`),
* loading them asynchronously, tolerating missing art (:mod:`xwing_base.loader`),
* compositing base and overlays in fixed order (:mod:`xwing_base.compositor`),
* placing text and icon proportionally to the tile (:mod:`xwing_base.overlay`),

and exports the result as a PNG (:mod:`xwing_base.exporter`).
"""
