"""HTTP transport for the fleet backend's JSON API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from fleetsync._constants import USER_AGENT
from fleetsync.exceptions import FleetTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, url: str, *, endpoint: str | None = None) -> Any:
        ...

    async def post_json(self, url: str, payload: Any = None, *, endpoint: str | None = None) -> Any:
        ...


class JsonTransport:
    """aiohttp transport that decodes JSON bodies and maps failures to `FleetTransportError`."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float | None = None,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout is not None else None

    async def get_json(self, url: str, *, endpoint: str | None = None) -> Any:
        return await self._request("GET", url, None, endpoint or url)

    async def post_json(self, url: str, payload: Any = None, *, endpoint: str | None = None) -> Any:
        return await self._request("POST", url, payload, endpoint or url)

    async def _request(self, method: str, url: str, payload: Any, endpoint: str) -> Any:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        kwargs: dict[str, Any] = {"headers": headers}
        if payload is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            kwargs["data"] = json.dumps(payload)
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        _logger.debug("%s %s", method, url)

        status: int | None = None
        try:
            async with self._http.request(method, url, **kwargs) as resp:
                status = resp.status
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise FleetTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FleetTransportError:
            raise
        except (UnicodeDecodeError, LookupError) as exc:
            raise FleetTransportError(
                f"Invalid body from {endpoint}: {exc}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
        except asyncio.TimeoutError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        # Some endpoints (refresh trigger, admin save) answer with an empty body.
        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=resp.status,
                endpoint=endpoint,
            ) from exc
