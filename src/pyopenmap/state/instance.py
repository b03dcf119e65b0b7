"""Per-instance runtime state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pyopenmap.engine import PopupHandle, SelectionControl, Surface
from pyopenmap.models.coordinate import PLACEHOLDER, LonLat
from pyopenmap.models.surface import Container


class InstancePhase(StrEnum):
    UNINITIALIZED = "uninitialized"
    AWAITING_ENGINE = "awaiting_engine"
    HIDDEN = "hidden"
    VISIBLE = "visible"
    FAILED = "failed"


class ResolutionStatus(StrEnum):
    """Outcome of turning a configured position into a coordinate."""

    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(eq=False, slots=True)
class PlottedMarker:
    """A point feature on a marker layer.

    ``popup`` is the back-reference to the popup currently open for this
    feature, if any.
    """

    icon: str
    radius: float
    coordinate: LonLat
    style: dict[str, Any]
    text: str | None = None
    popup: PopupHandle | None = None


@dataclass(slots=True)
class MarkerLayer:
    handle: Any
    markers: list[PlottedMarker] = field(default_factory=list)
    statuses: list[ResolutionStatus] = field(default_factory=list)
    selection: SelectionControl | None = None
    open_popup: PlottedMarker | None = None


@dataclass(slots=True)
class MapInstanceState:
    instance_id: str
    container: Container
    phase: InstancePhase = InstancePhase.UNINITIALIZED
    surface: Surface | None = None
    center: LonLat = PLACEHOLDER
    center_status: ResolutionStatus = ResolutionStatus.PENDING
    zoom: float | None = None
    visible: bool = False
    marker_layer: MarkerLayer | None = None
    # Bumped on every timeline enter; a reveal only applies if it still
    # belongs to the latest window and that window is still open.
    window_generation: int = 0
    window_open: bool = False
