from __future__ import annotations

import pytest

from pyopenmap.exceptions import GeocodeError, GeocodeTransportError
from pyopenmap.geocoder import Geocoder, parse_lat_lng
from pyopenmap.models.coordinate import LonLat
from tests.fakes import FakeGeocodeTransport


@pytest.mark.asyncio
async def test_resolve_swaps_service_axis_order(geocoder: Geocoder, transport: FakeGeocodeTransport) -> None:
    coord = await geocoder.resolve("Toronto")

    # Service answers [lat, lng]; LonLat is x first.
    assert coord == LonLat(lon=-79.383184, lat=43.653226)
    assert transport.calls == ["Toronto"]


@pytest.mark.asyncio
async def test_every_resolve_hits_the_service(geocoder: Geocoder, transport: FakeGeocodeTransport) -> None:
    await geocoder.resolve("Paris")
    await geocoder.resolve("Paris")

    assert transport.calls == ["Paris", "Paris"]


@pytest.mark.asyncio
async def test_transport_failure_propagates(geocoder: Geocoder, transport: FakeGeocodeTransport) -> None:
    transport.failures.add("Atlantis")

    with pytest.raises(GeocodeTransportError) as exc_info:
        await geocoder.resolve("Atlantis")
    assert exc_info.value.location == "Atlantis"


def test_parse_accepts_numeric_strings() -> None:
    assert parse_lat_lng(["48.85", "2.35"]) == LonLat(lon=2.35, lat=48.85)


@pytest.mark.parametrize(
    "payload",
    [None, [], [1.0], [1.0, 2.0, 3.0], ["north", "east"], {"lat": 1, "lng": 2}, [float("nan"), 1.0]],
)
def test_parse_rejects_malformed_payloads(payload: object) -> None:
    with pytest.raises(GeocodeError):
        parse_lat_lng(payload, "Nowhere")
