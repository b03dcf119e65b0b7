"""HTTP transport for the JSONP geocoding service."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Protocol

import aiohttp

from pyopenmap.config import OpenMapSettings
from pyopenmap.exceptions import GeocodeError, GeocodeTransportError

_logger = logging.getLogger(__name__)

_JSONP_RE = re.compile(r"^\s*[\w$.]+\s*\((?P<body>.*)\)\s*;?\s*$", re.DOTALL)


class GeocodeTransport(Protocol):
    """Structural transport interface used by :class:`pyopenmap.geocoder.Geocoder`.

    Makes it easy to pass test doubles while keeping the production
    implementation (:class:`JsonpTransport`) concrete.
    """

    async def lookup(self, location: str) -> Any:
        ...


def unwrap_jsonp(text: str) -> str:
    """Strip a ``callback( ... );`` wrapper; plain JSON passes through."""
    match = _JSONP_RE.match(text)
    if match is None:
        return text.strip()
    return match.group("body").strip()


class JsonpTransport:
    """Issues ``GET <url>?q=<location>&callback=<name>`` and decodes the reply."""

    def __init__(self, settings: OpenMapSettings, http_session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._http = http_session

    async def lookup(self, location: str) -> Any:
        url = self._settings.geocoder_url
        params = {"q": location, "callback": self._settings.jsonp_callback}
        timeout = aiohttp.ClientTimeout(total=self._settings.geocode_timeout)

        if self._settings.http_trace_enabled:
            _logger.debug("GET %s params=%s", url, params)
        else:
            _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, params=params, timeout=timeout) as resp:
                body = await resp.read()
                if resp.status != 200:
                    raise GeocodeTransportError(
                        f"HTTP {resp.status} geocoding {location!r}: {body[:200].decode(errors='replace')}",
                        location=location,
                        status_code=resp.status,
                    )
                charset = resp.charset or "utf-8"
        except GeocodeTransportError:
            raise
        except TimeoutError as exc:
            raise GeocodeTransportError(
                f"Geocoding {location!r} timed out after {self._settings.geocode_timeout}s",
                location=location,
            ) from exc
        except aiohttp.ClientError as exc:
            raise GeocodeTransportError(
                f"Geocoding request for {location!r} failed: {exc}",
                location=location,
            ) from exc

        try:
            text = body.decode(charset)
        except (UnicodeDecodeError, LookupError) as exc:
            raise GeocodeError(
                f"Undecodable geocoder response for {location!r} ({charset}): {body[:200]!r}",
                location=location,
            ) from exc

        if self._settings.http_trace_enabled:
            _logger.debug("Geocoder response for %r: %s", location, text[:500])

        try:
            return json.loads(unwrap_jsonp(text))
        except json.JSONDecodeError as exc:
            raise GeocodeError(
                f"Invalid geocoder response for {location!r}: {text[:200]}",
                location=location,
            ) from exc
