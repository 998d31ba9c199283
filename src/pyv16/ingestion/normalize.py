"""Normalization helpers.

Centralizes lenient parsing of loosely typed feed values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
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


def text_or(value: str | None, fallback: str) -> str:
    """Return *value* unless it is ``None`` or blank, else *fallback*."""
    if value is None or not value.strip():
        return fallback
    return value
