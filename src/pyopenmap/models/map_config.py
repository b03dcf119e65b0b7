"""Per-instance map and marker configuration models."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator

from pyopenmap._constants import DEFAULT_MARKER_RADIUS
from pyopenmap._normalize import number_or_default, safe_float, safe_str
from pyopenmap.exceptions import OpenMapConfigError
from pyopenmap.models._base import OpenMapBaseModel
from pyopenmap.models.coordinate import LonLat


class MapType(StrEnum):
    ROADMAP = "ROADMAP"
    SATELLITE = "SATELLITE"
    TERRAIN = "TERRAIN"


def _check_center(lat: float | None, lng: float | None, location: str | None, owner: str) -> None:
    has_coords = lat is not None and lng is not None
    if location is not None and (lat is not None or lng is not None):
        raise ValueError(f"{owner}: give either lat/lng or location, not both")
    if location is None and not has_coords:
        raise ValueError(f"{owner}: needs both lat and lng, or a location name")


class MarkerSpec(OpenMapBaseModel):
    """A point marker definition.

    Parameters
    ----------
    icon : str
        URL of the marker image.
    size : float or None
        Radius in pixels of the scaled image. Non-numeric values are
        treated as absent; see :attr:`radius`.
    text : str or None
        Popup content shown when the marker is selected.
    lat, lng : float or None
        Literal position.
    location : str or None
        Place name to geocode instead of a literal position.
    """

    icon: str
    size: float | None = None
    text: str | None = None
    lat: float | None = None
    lng: float | None = None
    location: str | None = None

    @field_validator("size", "lat", "lng", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("text", "location", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @model_validator(mode="after")
    def _require_center(self) -> MarkerSpec:
        _check_center(self.lat, self.lng, self.location, f"marker {self.icon!r}")
        return self

    @property
    def radius(self) -> float:
        return number_or_default(self.size, DEFAULT_MARKER_RADIUS)

    @property
    def literal_center(self) -> LonLat | None:
        if self.lat is None or self.lng is None:
            return None
        return LonLat.from_lat_lng(self.lat, self.lng)


class MapConfig(OpenMapBaseModel):
    """Immutable input configuration of one map instance.

    Mutable runtime state lives in
    :class:`pyopenmap.state.instance.MapInstanceState`, joined by
    instance id.
    """

    start: float
    end: float
    target: str
    type: MapType = MapType.ROADMAP
    zoom: float | None = None
    lat: float | None = None
    lng: float | None = None
    location: str | None = None
    markers: tuple[MarkerSpec, ...] = Field(default_factory=tuple)

    @field_validator("zoom", "lat", "lng", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("location", mode="before")
    @classmethod
    def _coerce_location(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("markers", mode="before")
    @classmethod
    def _parse_markers(cls, value: Any) -> Any:
        # Form hosts pass the marker list as a JSON text input.
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"markers is not valid JSON: {exc.msg}") from exc
        return value

    @model_validator(mode="after")
    def _check_window_and_center(self) -> MapConfig:
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) is before start ({self.start})")
        _check_center(self.lat, self.lng, self.location, "map")
        return self

    @property
    def literal_center(self) -> LonLat | None:
        if self.lat is None or self.lng is None:
            return None
        return LonLat.from_lat_lng(self.lat, self.lng)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> MapConfig:
        """Validate host options, raising :class:`OpenMapConfigError` on any problem."""
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            raise OpenMapConfigError(f"Invalid map options: {exc}") from exc
