"""Value objects handed to the mapping engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pyopenmap.models.coordinate import LonLat


class LayerKind(StrEnum):
    OSM = "osm"
    WORLDWIND = "worldwind"
    ARCGIS93REST = "arcgis93rest"


@dataclass(frozen=True, slots=True)
class Container:
    """The element a surface renders into, created inside ``target_id``."""

    target_id: str
    element_id: str
    width: str = "100%"
    height: str = "100%"


@dataclass(frozen=True, slots=True)
class SurfaceOptions:
    """Projection and resolution options for a new surface.

    ``projection`` is the working projection the engine renders in;
    ``display_projection`` is the one input coordinates are given in.
    """

    projection: str
    display_projection: str
    max_resolution: float | None = None
    tile_size: tuple[int, int] | None = None


@dataclass(frozen=True, slots=True)
class LayerSpec:
    """A base (tile) layer."""

    kind: LayerKind
    name: str
    url: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PopupSpec:
    """An info box anchored to a selected feature.

    ``on_close`` is invoked by the engine when the user clicks the
    popup's close box.
    """

    popup_id: str
    anchor: LonLat
    size: tuple[int, int]
    content: str
    close_box: bool = True
    on_close: Callable[[], None] | None = None
