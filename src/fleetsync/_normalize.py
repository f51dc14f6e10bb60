"""Normalization helpers.

Centralizes defensive parsing of loosely-typed backend and substitute payloads.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

_logger = logging.getLogger(__name__)


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, (dict, list)):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return None
    try:
        text = str(value)
    except ValueError:
        # int too large to render as a string
        return None
    return text if text else None


def safe_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return bool(value)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed) to an aware UTC datetime.

    Returns ``None`` for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        return None


def object_or_empty(value: Any, *, name: str) -> dict[str, Any]:
    """Return *value* as a dict, defaulting absent or misshapen data to ``{}``."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    _logger.warning("Expected an object for %s, got %s; using {}", name, type(value).__name__)
    return {}


def objects_only(value: Any, *, name: str) -> list[dict[str, Any]]:
    """Return the mapping elements of a list, defaulting absent data to ``[]``.

    Non-object elements cannot be rendered as table rows and are dropped.
    """
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        _logger.warning("Expected an array for %s, got %s; using []", name, type(value).__name__)
        return []
    items: list[dict[str, Any]] = []
    for index, item in enumerate(value):
        if isinstance(item, Mapping):
            items.append(dict(item))
        else:
            _logger.debug("Ignoring non-object %s[%d]: %r", name, index, item)
    return items
