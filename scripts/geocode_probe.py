#!/usr/bin/env python3
"""Live geocoder check.

Resolves one or more place names through the configured geocoding
service and prints the coordinates the map layer would use.

Settings come from ``OPENMAP_*`` environment variables (see
``OpenMapSettings.from_env``); ``--url`` and ``--timeout`` override them.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

import aiohttp  # noqa: E402

from pyopenmap import GeocodeError, Geocoder, OpenMapSettings  # noqa: E402
from pyopenmap._transport import JsonpTransport  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("locations", nargs="+", help="Place names to resolve")
    parser.add_argument("--url", help="Geocoder base URL")
    parser.add_argument("--timeout", type=float, default=10.0, help="Per-lookup timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Trace HTTP requests")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {"geocode_timeout": args.timeout, "http_trace_enabled": args.verbose}
    if args.url:
        overrides["geocoder_url"] = args.url
    settings = OpenMapSettings.from_env(**overrides)

    failures = 0
    async with aiohttp.ClientSession() as session:
        geocoder = Geocoder(JsonpTransport(settings, session))
        results = await asyncio.gather(
            *(geocoder.resolve(location) for location in args.locations),
            return_exceptions=True,
        )
    for location, result in zip(args.locations, results, strict=True):
        if isinstance(result, GeocodeError):
            failures += 1
            print(f"{location}: FAILED ({result})")
        elif isinstance(result, BaseException):
            raise result
        else:
            print(f"{location}: lat={result.lat} lng={result.lon}")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
