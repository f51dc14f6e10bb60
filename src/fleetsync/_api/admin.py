"""Admin settings and refresh-trigger endpoints."""

from __future__ import annotations

from fleetsync._api._common import api_url
from fleetsync._constants import ADMIN_CONFIG_ENDPOINT, REFRESH_NOW_ENDPOINT
from fleetsync._transport import Transport
from fleetsync.exceptions import FleetBestEffortError, FleetTransportError
from fleetsync.models.admin import AdminConfig


async def fetch_admin_config(transport: Transport, api_base: str) -> AdminConfig | None:
    """GET the admin settings. ``None`` when the server has none."""
    try:
        payload = await transport.get_json(
            api_url(api_base, ADMIN_CONFIG_ENDPOINT),
            endpoint=ADMIN_CONFIG_ENDPOINT,
        )
    except FleetTransportError as exc:
        raise FleetBestEffortError(f"Could not load admin config: {exc}") from exc
    if not isinstance(payload, dict) or not payload:
        return None
    try:
        return AdminConfig.model_validate(payload)
    except (ValueError, ArithmeticError) as exc:
        raise FleetBestEffortError(f"Malformed admin config: {exc}") from exc


async def save_admin_config(transport: Transport, api_base: str, config: AdminConfig) -> None:
    await transport.post_json(
        api_url(api_base, ADMIN_CONFIG_ENDPOINT),
        config.to_payload(),
        endpoint=ADMIN_CONFIG_ENDPOINT,
    )


async def trigger_refresh(transport: Transport, api_base: str) -> None:
    """Ask the backend to re-pull telematics data now."""
    try:
        await transport.post_json(api_url(api_base, REFRESH_NOW_ENDPOINT), endpoint=REFRESH_NOW_ENDPOINT)
    except FleetTransportError as exc:
        raise FleetBestEffortError(f"Refresh trigger failed: {exc}") from exc
