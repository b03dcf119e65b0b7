"""Map surface ownership for a single plugin instance."""

from __future__ import annotations

import asyncio
import itertools
import logging

from pyopenmap._constants import (
    ARCGIS_RELIEF_URL,
    CONTAINER_PREFIX,
    DEFAULT_ZOOM,
    GEOGRAPHIC,
    SPHERICAL_MERCATOR,
    WORLDWIND_LEVEL_ZERO_DEGREES,
    WORLDWIND_MAX_RESOLUTION,
    WORLDWIND_TILE_SIZE,
    WORLDWIND_URL,
    WORLDWIND_ZOOM_LEVELS,
)
from pyopenmap._normalize import number_or_default
from pyopenmap.engine import MappingEngine, Surface
from pyopenmap.engine_loader import EngineLoader
from pyopenmap.exceptions import EngineLoadError, GeocodeError
from pyopenmap.geocoder import Geocoder
from pyopenmap.models.coordinate import LonLat
from pyopenmap.models.map_config import MapConfig, MapType
from pyopenmap.models.surface import LayerKind, LayerSpec, SurfaceOptions
from pyopenmap.state.instance import InstancePhase, MapInstanceState, ResolutionStatus

_logger = logging.getLogger(__name__)


class ContainerIdAllocator:
    """Hands out unique container element ids (``actualmap1``, ``actualmap2``, ...)."""

    def __init__(self, prefix: str = CONTAINER_PREFIX) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def allocate(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


def layer_for(map_type: MapType) -> tuple[SurfaceOptions, LayerSpec]:
    """Surface options and base layer for a map type."""
    if map_type is MapType.ROADMAP:
        return (
            SurfaceOptions(projection=SPHERICAL_MERCATOR, display_projection=GEOGRAPHIC),
            LayerSpec(kind=LayerKind.OSM, name="OpenStreetMap"),
        )
    if map_type is MapType.SATELLITE:
        return (
            SurfaceOptions(
                projection=GEOGRAPHIC,
                display_projection=GEOGRAPHIC,
                max_resolution=WORLDWIND_MAX_RESOLUTION,
                tile_size=WORLDWIND_TILE_SIZE,
            ),
            LayerSpec(
                kind=LayerKind.WORLDWIND,
                name="LANDSAT",
                url=WORLDWIND_URL,
                params={"T": "105"},
                options={
                    "level_zero_tile_size_degrees": WORLDWIND_LEVEL_ZERO_DEGREES,
                    "zoom_levels": WORLDWIND_ZOOM_LEVELS,
                },
            ),
        )
    return (
        SurfaceOptions(projection=GEOGRAPHIC, display_projection=GEOGRAPHIC),
        LayerSpec(kind=LayerKind.ARCGIS93REST, name="National Geographic Society", url=ARCGIS_RELIEF_URL),
    )


def _retrieve_exception(task: asyncio.Task[Surface]) -> None:
    # Load failures are already logged by the loader; waiters re-raise them.
    if not task.cancelled():
        task.exception()


def log_task_failure(task: asyncio.Task[None]) -> None:
    """Done-callback for fire-and-forget lookups: report what their own handlers missed."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _logger.error("Background task %s failed", task.get_name(), exc_info=exc)


class MapInstanceController:
    """Owns the one map surface of an instance.

    The surface is created lazily and at most once; after that it is only
    ever re-centered, shown and hidden.
    """

    def __init__(
        self,
        config: MapConfig,
        state: MapInstanceState,
        *,
        engine: MappingEngine,
        loader: EngineLoader,
        geocoder: Geocoder,
    ) -> None:
        self._config = config
        self._state = state
        self._engine = engine
        self._loader = loader
        self._geocoder = geocoder
        self._options, self._base_layer = layer_for(config.type)
        self._create_task: asyncio.Task[Surface] | None = None
        self._center_task: asyncio.Task[None] | None = None

    @property
    def config(self) -> MapConfig:
        return self._config

    @property
    def state(self) -> MapInstanceState:
        return self._state

    @property
    def engine(self) -> MappingEngine:
        return self._engine

    def to_working(self, coord: LonLat) -> LonLat:
        """Project a display (geographic) coordinate into the working projection."""
        return self._engine.project(coord, self._options.display_projection, self._options.projection)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_if_needed(self) -> asyncio.Task[Surface]:
        """Start surface creation once; later calls return the same task."""
        if self._create_task is None:
            self._state.phase = InstancePhase.AWAITING_ENGINE
            self._loader.ensure_loading()
            loop = asyncio.get_running_loop()
            self._create_task = loop.create_task(self._create())
            self._create_task.add_done_callback(_retrieve_exception)
            if self._config.location is not None:
                self._center_task = loop.create_task(
                    self._resolve_center(self._config.location),
                    name=f"{self._state.instance_id}-center",
                )
                self._center_task.add_done_callback(log_task_failure)
        return self._create_task

    async def wait_created(self) -> Surface:
        """Suspend until the surface exists.

        Raises :class:`EngineLoadError` if it never will.
        """
        return await asyncio.shield(self.create_if_needed())

    async def _create(self) -> Surface:
        try:
            await self._loader.wait_ready()
        except EngineLoadError:
            self._state.phase = InstancePhase.FAILED
            raise

        state = self._state
        literal = self._config.literal_center
        if literal is not None:
            state.center = self.to_working(literal)
            state.center_status = ResolutionStatus.RESOLVED

        surface = self._engine.create_surface(state.container, self._options)
        surface.add_layer(self._base_layer)
        surface.set_visible(False)
        state.surface = surface
        state.visible = False
        state.phase = InstancePhase.HIDDEN
        _logger.debug(
            "Created %s surface for %s in #%s",
            self._config.type,
            state.instance_id,
            state.container.element_id,
        )
        return surface

    async def _resolve_center(self, location: str) -> None:
        try:
            coord = await self._geocoder.resolve(location)
        except GeocodeError as exc:
            self._state.center_status = ResolutionStatus.FAILED
            _logger.warning("Could not geocode map center for %s: %s", self._state.instance_id, exc)
            return
        try:
            surface = await self.wait_created()
        except EngineLoadError:
            return
        # Applies even while hidden so the next reveal uses it.
        self._state.center = self.to_working(coord)
        self._state.center_status = ResolutionStatus.RESOLVED
        surface.set_center(self._state.center)
        _logger.debug("Re-centered %s on %r", self._state.instance_id, location)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    async def reveal(self) -> None:
        surface = await self.wait_created()
        state = self._state
        # Re-apply in case the user panned or zoomed since the last reveal.
        state.zoom = number_or_default(self._config.zoom, DEFAULT_ZOOM)
        surface.set_center(state.center, state.zoom)
        surface.set_visible(True)
        state.visible = True
        state.phase = InstancePhase.VISIBLE

    def hide(self) -> None:
        state = self._state
        if state.surface is None:
            return
        state.surface.set_visible(False)
        state.visible = False
        state.phase = InstancePhase.HIDDEN

    # ------------------------------------------------------------------
    # Timeline windows
    # ------------------------------------------------------------------

    def open_window(self) -> int:
        self._state.window_generation += 1
        self._state.window_open = True
        return self._state.window_generation

    def close_window(self) -> None:
        self._state.window_open = False

    def is_current_window(self, generation: int) -> bool:
        return self._state.window_open and self._state.window_generation == generation

    async def aclose(self) -> None:
        for task in (self._center_task, self._create_task):
            if task is not None and not task.done():
                task.cancel()
