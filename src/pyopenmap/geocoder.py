"""Place name to coordinate resolution."""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pyopenmap._transport import GeocodeTransport
from pyopenmap.exceptions import GeocodeError
from pyopenmap.models.coordinate import LonLat

_logger = logging.getLogger(__name__)

# The service answers latitude first.
_LAT_LNG = TypeAdapter(tuple[float, float])


def parse_lat_lng(payload: Any, location: str = "") -> LonLat:
    """Turn a ``[lat, lng]`` service payload into a :class:`LonLat`."""
    try:
        lat, lng = _LAT_LNG.validate_python(payload)
    except ValidationError as exc:
        raise GeocodeError(
            f"Expected [lat, lng] for {location!r}, got {payload!r}",
            location=location,
        ) from exc
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise GeocodeError(f"Non-finite coordinates for {location!r}: {payload!r}", location=location)
    return LonLat.from_lat_lng(lat, lng)


class Geocoder:
    """One lookup per call: no caching, no retry."""

    def __init__(self, transport: GeocodeTransport) -> None:
        self._transport = transport

    async def resolve(self, location: str) -> LonLat:
        """Resolve *location* to a geographic coordinate.

        Raises :class:`GeocodeError` on transport failure or a malformed
        answer.
        """
        payload = await self._transport.lookup(location)
        coord = parse_lat_lng(payload, location)
        _logger.debug("Geocoded %r to lon=%s lat=%s", location, coord.lon, coord.lat)
        return coord
