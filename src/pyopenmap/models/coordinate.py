"""Coordinate value type."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LonLat:
    """A point as (longitude, latitude), i.e. x before y.

    Geocoders and host options speak latitude first; always build
    instances through :meth:`from_lat_lng` at those boundaries.
    """

    lon: float
    lat: float

    @classmethod
    def from_lat_lng(cls, lat: float, lng: float) -> LonLat:
        return cls(lon=float(lng), lat=float(lat))


#: Center used until a geocoded location resolves.
PLACEHOLDER = LonLat(0.0, 0.0)
