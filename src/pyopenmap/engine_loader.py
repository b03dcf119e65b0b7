"""Process-wide, one-time loading of the mapping engine."""

from __future__ import annotations

import asyncio
import logging
import weakref
from enum import StrEnum

from pyopenmap.engine import MappingEngine
from pyopenmap.exceptions import EngineLoadError

_logger = logging.getLogger(__name__)


class EngineLoadState(StrEnum):
    NOT_REQUESTED = "not_requested"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class EngineLoader:
    """Loads an engine exactly once and releases everyone waiting on it.

    Waiters are plain futures resolved on the single transition out of
    ``LOADING``; nothing polls.
    """

    def __init__(self, engine: MappingEngine, *, timeout: float | None = None) -> None:
        self._engine = engine
        self._timeout = timeout
        self._state = EngineLoadState.NOT_REQUESTED
        self._error: EngineLoadError | None = None
        self._task: asyncio.Task[None] | None = None
        self._waiters: list[asyncio.Future[None]] = []

    @property
    def state(self) -> EngineLoadState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is EngineLoadState.READY

    def ensure_loading(self) -> None:
        """Start the load unless it was already requested. Needs a running loop."""
        if self._state is not EngineLoadState.NOT_REQUESTED:
            return
        self._state = EngineLoadState.LOADING
        _logger.debug("Loading mapping engine")
        self._task = asyncio.get_running_loop().create_task(self._load())

    async def _load(self) -> None:
        try:
            if self._timeout is None:
                await self._engine.load()
            else:
                await asyncio.wait_for(self._engine.load(), self._timeout)
        except TimeoutError:
            self._fail(EngineLoadError(f"Mapping engine did not load within {self._timeout}s"))
            return
        except asyncio.CancelledError:
            # A shared loader must not stay LOADING once its task is gone.
            self._fail(EngineLoadError("Mapping engine load was cancelled"))
            raise
        except Exception as exc:
            self._fail(EngineLoadError(f"Mapping engine failed to load: {exc}"))
            return
        self._state = EngineLoadState.READY
        _logger.debug("Mapping engine ready")
        self._notify()

    def _fail(self, error: EngineLoadError) -> None:
        self._state = EngineLoadState.FAILED
        self._error = error
        _logger.error("%s; maps will not render", error)
        self._notify()

    def _notify(self) -> None:
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if waiter.done():
                continue
            if self._error is not None:
                waiter.set_exception(self._error)
            else:
                waiter.set_result(None)

    async def wait_ready(self) -> None:
        """Suspend until the engine is ready.

        Raises :class:`EngineLoadError` if the load failed, now or later.
        """
        self.ensure_loading()
        if self._state is EngineLoadState.READY:
            return
        if self._error is not None:
            raise self._error
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)


_shared_loaders: weakref.WeakKeyDictionary[MappingEngine, EngineLoader] = weakref.WeakKeyDictionary()


def shared_engine_loader(engine: MappingEngine, *, timeout: float | None = None) -> EngineLoader:
    """Return the process-wide loader for *engine*, creating it on first use.

    *timeout* only applies when the loader is created.
    """
    loader = _shared_loaders.get(engine)
    if loader is None:
        loader = EngineLoader(engine, timeout=timeout)
        _shared_loaders[engine] = loader
    return loader
