"""High-level async facade that hosts embed."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from pyopenmap._transport import JsonpTransport
from pyopenmap.config import OpenMapSettings
from pyopenmap.controller import ContainerIdAllocator, MapInstanceController
from pyopenmap.engine import MappingEngine
from pyopenmap.engine_loader import EngineLoader, shared_engine_loader
from pyopenmap.exceptions import OpenMapError
from pyopenmap.geocoder import Geocoder
from pyopenmap.lifecycle import TimelineLifecycleAdapter
from pyopenmap.markers import MarkerLayerManager
from pyopenmap.models.map_config import MapConfig
from pyopenmap.models.surface import Container
from pyopenmap.state.instance import MapInstanceState

_logger = logging.getLogger(__name__)


class OpenMap:
    """Timeline-synchronized map overlays on top of a mapping engine.

    Usage::

        async with OpenMap(engine) as maps:
            map_id = maps.setup({"start": 5, "end": 15, "target": "map",
                                 "lat": 43.665429, "lng": -79.403323})
            maps.start(map_id)   # from the host's window-start callback
            maps.end(map_id)     # from the host's window-end callback
    """

    def __init__(
        self,
        engine: MappingEngine,
        settings: OpenMapSettings | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        geocoder: Geocoder | None = None,
        loader: EngineLoader | None = None,
    ) -> None:
        self._engine = engine
        self._settings = settings or OpenMapSettings()
        self._external_session = session is not None
        self._http_session = session
        self._geocoder = geocoder
        self._loader = loader or shared_engine_loader(engine, timeout=self._settings.engine_load_timeout)
        self._ids = ContainerIdAllocator(self._settings.container_prefix)
        self._lifecycle = TimelineLifecycleAdapter()
        self._controllers: dict[str, MapInstanceController] = {}

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> OpenMap:
        if self._geocoder is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._geocoder = Geocoder(JsonpTransport(self._settings, self._http_session))
        self._loader.ensure_loading()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._lifecycle.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    @property
    def loader(self) -> EngineLoader:
        return self._loader

    @property
    def lifecycle(self) -> TimelineLifecycleAdapter:
        return self._lifecycle

    def setup(
        self,
        options: Mapping[str, Any] | MapConfig,
        *,
        container_id: str | None = None,
    ) -> str:
        """Validate *options* and start building the instance's surface.

        Returns the instance id used with :meth:`start` and :meth:`end`.
        Raises :class:`~pyopenmap.exceptions.OpenMapConfigError` for
        invalid options.
        """
        geocoder = self._require_geocoder()
        config = options if isinstance(options, MapConfig) else MapConfig.from_options(options)
        element_id = container_id or self._ids.allocate()
        if element_id in self._controllers:
            raise OpenMapError(f"Map instance {element_id!r} already exists")

        state = MapInstanceState(
            instance_id=element_id,
            container=Container(target_id=config.target, element_id=element_id),
        )
        controller = MapInstanceController(
            config,
            state,
            engine=self._engine,
            loader=self._loader,
            geocoder=geocoder,
        )
        self._controllers[element_id] = controller
        self._lifecycle.register(controller, MarkerLayerManager(controller, geocoder))
        controller.create_if_needed()
        _logger.debug("Set up map %s (%s) in #%s", element_id, config.type, config.target)
        return element_id

    def start(self, instance_id: str) -> None:
        self._lifecycle.on_enter(instance_id)

    def end(self, instance_id: str) -> None:
        self._lifecycle.on_exit(instance_id)

    def state(self, instance_id: str) -> MapInstanceState:
        return self._controllers[instance_id].state

    async def wait_idle(self) -> None:
        """Wait until pending start callbacks have shown their maps."""
        await self._lifecycle.wait_idle()

    def _require_geocoder(self) -> Geocoder:
        if self._geocoder is None:
            raise OpenMapError("OpenMap not initialized. Use 'async with OpenMap(...) as maps:'")
        return self._geocoder
