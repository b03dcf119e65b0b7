"""Custom exception hierarchy for pyopenmap."""

from __future__ import annotations


class OpenMapError(Exception):
    """Base exception for all pyopenmap errors."""


class OpenMapConfigError(OpenMapError):
    """Invalid or missing map configuration.

    Raised synchronously at setup time, e.g. when neither literal
    coordinates nor a location name is given for the map center or a
    marker.
    """


class EngineLoadError(OpenMapError):
    """The mapping engine failed to load (or timed out).

    The load is never retried; every instance waiting on the engine
    stays un-rendered.
    """


class GeocodeError(OpenMapError):
    """A place name could not be resolved to coordinates."""

    def __init__(self, message: str, *, location: str = "") -> None:
        self.location = location
        super().__init__(message)


class GeocodeTransportError(GeocodeError):
    """HTTP-level failure talking to the geocoding service (network, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        location: str = "",
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, location=location)
