"""Typed models for map options and engine value objects."""

from pyopenmap.models.coordinate import PLACEHOLDER, LonLat
from pyopenmap.models.map_config import MapConfig, MapType, MarkerSpec
from pyopenmap.models.surface import Container, LayerKind, LayerSpec, PopupSpec, SurfaceOptions

__all__ = [
    "PLACEHOLDER",
    "Container",
    "LayerKind",
    "LayerSpec",
    "LonLat",
    "MapConfig",
    "MapType",
    "MarkerSpec",
    "PopupSpec",
    "SurfaceOptions",
]
