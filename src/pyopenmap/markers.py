"""Point markers and their popups."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from pyopenmap._constants import POINT_LAYER_NAME, POPUP_ID, POPUP_SIZE
from pyopenmap.controller import MapInstanceController, log_task_failure
from pyopenmap.engine import Surface
from pyopenmap.exceptions import GeocodeError, OpenMapError
from pyopenmap.geocoder import Geocoder
from pyopenmap.models.coordinate import LonLat
from pyopenmap.models.map_config import MarkerSpec
from pyopenmap.models.surface import PopupSpec
from pyopenmap.state.instance import MarkerLayer, PlottedMarker, ResolutionStatus

_logger = logging.getLogger(__name__)


class MarkerLayerManager:
    """Builds the marker layer of one instance and wires popup selection.

    Geocoded markers are plotted independently whenever their own lookup
    resolves, so their order on the layer is not the configured order.
    """

    def __init__(self, controller: MapInstanceController, geocoder: Geocoder) -> None:
        self._controller = controller
        self._geocoder = geocoder
        self._base_style: dict[str, Any] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def layer(self) -> MarkerLayer | None:
        return self._controller.state.marker_layer

    @property
    def pending_lookups(self) -> int:
        return len(self._tasks)

    def attach_markers(self, specs: Sequence[MarkerSpec]) -> MarkerLayer:
        """Create the layer and plot *specs*; repeat calls return the existing layer."""
        state = self._controller.state
        if state.marker_layer is not None:
            return state.marker_layer
        surface = state.surface
        if surface is None:
            raise OpenMapError(f"Cannot attach markers to {state.instance_id} before its surface exists")

        self._base_style = dict(self._controller.engine.default_point_style())
        handle = surface.add_point_layer(POINT_LAYER_NAME, self._base_style)
        layer = MarkerLayer(handle=handle, statuses=[ResolutionStatus.PENDING] * len(specs))
        state.marker_layer = layer

        loop = asyncio.get_running_loop()
        for index, spec in enumerate(specs):
            if spec.text:
                self._ensure_selection(surface, layer)
            literal = spec.literal_center
            if literal is not None:
                self._plot(surface, layer, index, spec, literal)
                continue
            if spec.location is None:
                continue
            task = loop.create_task(
                self._geocode_then_plot(surface, layer, index, spec, spec.location),
                name=f"{state.instance_id}-marker{index}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            task.add_done_callback(log_task_failure)

        _logger.debug("Attached %d markers to %s", len(specs), state.instance_id)
        return layer

    def _plot(self, surface: Surface, layer: MarkerLayer, index: int, spec: MarkerSpec, coord: LonLat) -> None:
        style = dict(self._base_style)
        style["point_radius"] = spec.radius
        style["graphic_opacity"] = 1
        style["external_graphic"] = spec.icon
        marker = PlottedMarker(
            icon=spec.icon,
            radius=spec.radius,
            coordinate=self._controller.to_working(coord),
            style=style,
            text=spec.text,
        )
        layer.markers.append(marker)
        layer.statuses[index] = ResolutionStatus.RESOLVED
        surface.add_features(layer.handle, [marker])

    async def _geocode_then_plot(
        self, surface: Surface, layer: MarkerLayer, index: int, spec: MarkerSpec, location: str
    ) -> None:
        try:
            coord = await self._geocoder.resolve(location)
        except GeocodeError as exc:
            layer.statuses[index] = ResolutionStatus.FAILED
            _logger.warning("Marker %r not plotted: %s", location, exc)
            return
        self._plot(surface, layer, index, spec, coord)

    # ------------------------------------------------------------------
    # Selection and popups
    # ------------------------------------------------------------------

    def _ensure_selection(self, surface: Surface, layer: MarkerLayer) -> None:
        if layer.selection is not None:
            return
        layer.selection = surface.add_selection_control(
            layer.handle,
            on_select=self._on_select,
            on_unselect=self._on_unselect,
        )
        layer.selection.activate()

    def _on_select(self, marker: PlottedMarker) -> None:
        layer = self.layer
        surface = self._controller.state.surface
        if layer is None or surface is None or not marker.text:
            return
        previous = layer.open_popup
        if previous is not None and previous is not marker:
            self._close_popup(previous)
        if marker.popup is not None:
            return
        popup = PopupSpec(
            popup_id=POPUP_ID,
            anchor=marker.coordinate,
            size=POPUP_SIZE,
            content=marker.text,
            close_box=True,
            on_close=lambda: self._on_popup_closed(marker),
        )
        marker.popup = surface.add_popup(popup)
        layer.open_popup = marker

    def _on_unselect(self, marker: PlottedMarker) -> None:
        self._close_popup(marker)

    def _on_popup_closed(self, marker: PlottedMarker) -> None:
        layer = self.layer
        if layer is not None and layer.selection is not None:
            layer.selection.unselect(marker)
        # No-op when the engine already fired the unselect callback.
        self._close_popup(marker)

    def _close_popup(self, marker: PlottedMarker) -> None:
        popup = marker.popup
        if popup is None:
            return
        marker.popup = None
        layer = self.layer
        if layer is not None and layer.open_popup is marker:
            layer.open_popup = None
        surface = self._controller.state.surface
        if surface is not None:
            surface.remove_popup(popup)
        popup.destroy()

    async def aclose(self) -> None:
        for task in list(self._tasks):
            task.cancel()
