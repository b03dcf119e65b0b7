"""Runtime settings for pyopenmap."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyopenmap._constants import CONTAINER_PREFIX, GEOCODER_URL, JSONP_CALLBACK


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_timeout(value: str | None) -> float | None:
    """Parse a timeout variable; empty, ``none`` or non-positive means unbounded."""
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in {"", "none", "off"}:
        return None
    seconds = float(normalized)
    return seconds if seconds > 0 else None


@dataclasses.dataclass(frozen=True)
class OpenMapSettings:
    """Process-level settings shared by every map instance.

    Parameters
    ----------
    geocoder_url : str
        Base URL of the geocoding service. Queried as
        ``GET <geocoder_url>?q=<name>&callback=<jsonp_callback>``.
    jsonp_callback : str
        Callback name sent with every lookup; the service wraps its
        ``[lat, lng]`` answer in it.
    geocode_timeout : float or None
        Upper bound in seconds for a single lookup. ``None`` waits
        indefinitely, in which case a hung lookup leaves the dependent
        coordinate at its placeholder.
    engine_load_timeout : float or None
        Upper bound in seconds for loading the mapping engine. ``None``
        waits indefinitely.
    container_prefix : str
        Prefix of generated container element ids (``actualmap1``, ...).
    http_trace_enabled : bool
        Log full geocoder request URLs and response bodies at debug level.
    """

    geocoder_url: str = GEOCODER_URL
    jsonp_callback: str = JSONP_CALLBACK
    geocode_timeout: float | None = None
    engine_load_timeout: float | None = None
    container_prefix: str = CONTAINER_PREFIX
    http_trace_enabled: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> OpenMapSettings:
        """Create settings from ``OPENMAP_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "OPENMAP_GEOCODER_URL": "geocoder_url",
            "OPENMAP_JSONP_CALLBACK": "jsonp_callback",
            "OPENMAP_CONTAINER_PREFIX": "container_prefix",
        }
        kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                kwargs[field_name] = val

        _ENV_TIMEOUT_MAP = {
            "OPENMAP_GEOCODE_TIMEOUT": "geocode_timeout",
            "OPENMAP_ENGINE_LOAD_TIMEOUT": "engine_load_timeout",
        }
        for env_key, field_name in _ENV_TIMEOUT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                kwargs[field_name] = _env_timeout(val)

        if "http_trace_enabled" not in overrides:
            kwargs["http_trace_enabled"] = _env_bool(env.get("OPENMAP_HTTP_TRACE_ENABLED"), False)

        kwargs.update(overrides)
        return cls(**kwargs)
