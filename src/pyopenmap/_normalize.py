"""Normalization helpers.

Centralizes defensive parsing of host-supplied option values, which
frequently arrive as form strings.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def number_or_default(value: Any, default: float) -> float:
    """Coerce *value* to a number, falling back to *default*.

    Missing, non-numeric and zero values all yield the default.
    """
    parsed = safe_float(value)
    if not parsed:
        return default
    return parsed
