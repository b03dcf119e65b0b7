"""Structural interface of the external mapping engine.

pyopenmap never renders, tiles or projects anything itself; it only
decides when and with which arguments these operations run. Any engine
binding (a browser bridge, a headless renderer, a test double) works as
long as it satisfies these protocols.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from pyopenmap.models.coordinate import LonLat
from pyopenmap.models.surface import Container, LayerSpec, PopupSpec, SurfaceOptions

if TYPE_CHECKING:
    from pyopenmap.state.instance import PlottedMarker


class PopupHandle(Protocol):
    def destroy(self) -> None:
        """Release the popup's visual resources."""


class SelectionControl(Protocol):
    def activate(self) -> None:
        ...

    def unselect(self, marker: PlottedMarker) -> None:
        """Unselect *marker*; the engine then fires the unselect callback."""


class Surface(Protocol):
    """One rendered map bound to a container."""

    def add_layer(self, layer: LayerSpec) -> None:
        ...

    def add_point_layer(self, name: str, style: Mapping[str, Any]) -> Any:
        """Create and attach a vector layer; returns an opaque layer handle."""

    def add_features(self, layer: Any, markers: Sequence[PlottedMarker]) -> None:
        ...

    def add_selection_control(
        self,
        layer: Any,
        *,
        on_select: Callable[[PlottedMarker], None],
        on_unselect: Callable[[PlottedMarker], None],
    ) -> SelectionControl:
        ...

    def set_center(self, center: LonLat, zoom: float | None = None) -> None:
        """Move the view; ``zoom=None`` keeps the current zoom."""

    def set_visible(self, visible: bool) -> None:
        ...

    def add_popup(self, popup: PopupSpec) -> PopupHandle:
        ...

    def remove_popup(self, popup: PopupHandle) -> None:
        ...


class MappingEngine(Protocol):
    async def load(self) -> None:
        """Fetch and initialize the engine runtime."""

    def create_surface(self, container: Container, options: SurfaceOptions) -> Surface:
        ...

    def project(self, coord: LonLat, source: str, dest: str) -> LonLat:
        """Transform *coord* from projection *source* to *dest*."""

    def default_point_style(self) -> Mapping[str, Any]:
        ...
