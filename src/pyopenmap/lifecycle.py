"""Bridge between host timeline callbacks and map instances.

Hosts call :meth:`TimelineLifecycleAdapter.on_enter` when playback
enters an instance's time window and :meth:`~TimelineLifecycleAdapter.on_exit`
when it leaves, in any order and any number of times (seeks). Neither
call ever raises into the host.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from pyopenmap.controller import MapInstanceController
from pyopenmap.exceptions import OpenMapError
from pyopenmap.markers import MarkerLayerManager

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Binding:
    controller: MapInstanceController
    markers: MarkerLayerManager


class TimelineLifecycleAdapter:
    def __init__(self) -> None:
        self._bindings: dict[str, _Binding] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    def register(self, controller: MapInstanceController, markers: MarkerLayerManager) -> None:
        self._bindings[controller.state.instance_id] = _Binding(controller, markers)

    def on_enter(self, instance_id: str) -> asyncio.Task[None] | None:
        """Show the map once its surface exists; returns the background task."""
        binding = self._bindings.get(instance_id)
        if binding is None:
            _logger.error("Timeline entered unknown map instance %r", instance_id)
            return None
        controller = binding.controller
        generation = controller.open_window()
        controller.create_if_needed()
        task = asyncio.get_running_loop().create_task(self._enter(binding, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _enter(self, binding: _Binding, generation: int) -> None:
        controller = binding.controller
        instance_id = controller.state.instance_id
        try:
            await controller.wait_created()
            if not controller.is_current_window(generation):
                # The window closed (or reopened) while we waited.
                _logger.debug("Skipping stale reveal of %s", instance_id)
                return
            await controller.reveal()
            specs = controller.config.markers
            if specs and binding.markers.layer is None:
                binding.markers.attach_markers(specs)
        except OpenMapError as exc:
            _logger.debug("Map %s not shown: %s", instance_id, exc)
        except Exception:
            _logger.exception("Unexpected error showing map %s", instance_id)

    def on_exit(self, instance_id: str) -> None:
        binding = self._bindings.get(instance_id)
        if binding is None:
            _logger.error("Timeline left unknown map instance %r", instance_id)
            return
        binding.controller.close_window()
        try:
            binding.controller.hide()
        except Exception:
            _logger.exception("Unexpected error hiding map %s", instance_id)

    async def wait_idle(self) -> None:
        """Wait for every pending enter task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        for binding in self._bindings.values():
            await binding.markers.aclose()
            await binding.controller.aclose()
