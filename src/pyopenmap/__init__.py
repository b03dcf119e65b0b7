"""pyopenmap - Async map overlays synchronized with a media timeline."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyopenmap")
except PackageNotFoundError:
    __version__ = "0+local"
from pyopenmap.client import OpenMap
from pyopenmap.config import OpenMapSettings
from pyopenmap.engine_loader import EngineLoader, EngineLoadState, shared_engine_loader
from pyopenmap.exceptions import (
    EngineLoadError,
    GeocodeError,
    GeocodeTransportError,
    OpenMapConfigError,
    OpenMapError,
)
from pyopenmap.geocoder import Geocoder
from pyopenmap.models import LonLat, MapConfig, MapType, MarkerSpec
from pyopenmap.state.instance import InstancePhase, ResolutionStatus

__all__ = [
    "__version__",
    "EngineLoadError",
    "EngineLoadState",
    "EngineLoader",
    "GeocodeError",
    "GeocodeTransportError",
    "Geocoder",
    "InstancePhase",
    "LonLat",
    "MapConfig",
    "MapType",
    "MarkerSpec",
    "OpenMap",
    "OpenMapConfigError",
    "OpenMapError",
    "OpenMapSettings",
    "ResolutionStatus",
    "shared_engine_loader",
]
