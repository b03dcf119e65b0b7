from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from pyopenmap.controller import MapInstanceController
from pyopenmap.engine_loader import EngineLoader
from pyopenmap.geocoder import Geocoder
from pyopenmap.markers import MarkerLayerManager
from pyopenmap.models.map_config import MapConfig
from pyopenmap.models.surface import Container
from pyopenmap.state.instance import MapInstanceState
from tests.fakes import FakeEngine, FakeGeocodeTransport


@pytest.fixture()
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def transport() -> FakeGeocodeTransport:
    return FakeGeocodeTransport(
        answers={
            "Toronto": [43.653226, -79.383184],
            "Paris": [48.856614, 2.352222],
            "Tokyo": [35.689487, 139.691706],
        }
    )


@pytest.fixture()
def geocoder(transport: FakeGeocodeTransport) -> Geocoder:
    return Geocoder(transport)


@pytest.fixture()
def loader(engine: FakeEngine) -> EngineLoader:
    return EngineLoader(engine)


@pytest.fixture()
def make_controller(
    engine: FakeEngine,
    loader: EngineLoader,
    geocoder: Geocoder,
) -> Callable[..., tuple[MapInstanceController, MarkerLayerManager]]:
    counter = iter(range(1, 1000))

    def _make(**options: Any) -> tuple[MapInstanceController, MarkerLayerManager]:
        options.setdefault("start", 5)
        options.setdefault("end", 15)
        options.setdefault("target", "map")
        config = MapConfig.from_options(options)
        instance_id = f"actualmap{next(counter)}"
        state = MapInstanceState(
            instance_id=instance_id,
            container=Container(target_id=config.target, element_id=instance_id),
        )
        controller = MapInstanceController(config, state, engine=engine, loader=loader, geocoder=geocoder)
        return controller, MarkerLayerManager(controller, geocoder)

    return _make
