"""Shared helpers for fleet endpoint modules.

This module centralizes the most repeated patterns:
- joining the API base with an endpoint path
- issuing a group of GETs concurrently and settling all of them
- mapping any failure in the group to a single `FleetFetchError`

It is internal to fleetsync and may change at any time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from fleetsync._transport import Transport
from fleetsync.exceptions import FleetFetchError, FleetTransportError

_logger = logging.getLogger(__name__)


def api_url(api_base: str, endpoint: str) -> str:
    return f"{api_base}{endpoint}"


async def get_all_or_nothing(
    transport: Transport,
    api_base: str,
    endpoints: Sequence[str],
    *,
    what: str,
) -> list[Any]:
    """GET every endpoint concurrently; return payloads in order or raise.

    All requests settle before anything is returned, so callers never see
    a mix of fresh and missing payloads.

    Raises
    ------
    FleetFetchError
        At least one endpoint failed. ``failures`` lists each one.
    """
    results = await asyncio.gather(
        *(transport.get_json(api_url(api_base, endpoint), endpoint=endpoint) for endpoint in endpoints),
        return_exceptions=True,
    )

    failures: list[FleetTransportError] = []
    for endpoint, result in zip(endpoints, results, strict=True):
        if isinstance(result, FleetTransportError):
            failures.append(result)
        elif isinstance(result, BaseException):
            # Anything other than a transport error is a bug; let it surface.
            raise result
    if failures:
        for failure in failures:
            _logger.debug("%s: %s failed: %s", what, failure.endpoint, failure)
        raise FleetFetchError(
            f"Failed to load {what}: " + ", ".join(f.endpoint for f in failures),
            failures=failures,
        )
    return list(results)
