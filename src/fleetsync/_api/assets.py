"""Per-asset detail endpoints."""

from __future__ import annotations

from urllib.parse import quote

from fleetsync._api._common import get_all_or_nothing
from fleetsync._constants import ASSET_FAULTS_ENDPOINT, ASSET_MAINTENANCE_ENDPOINT, ASSET_MILES_ENDPOINT
from fleetsync._transport import Transport
from fleetsync.models.records import AssetDetail


async def fetch_asset_detail(transport: Transport, api_base: str, asset_id: str) -> AssetDetail:
    """Fetch 12-month miles, fault history and services for one asset."""
    quoted = quote(asset_id, safe="")
    miles, faults, services = await get_all_or_nothing(
        transport,
        api_base,
        (
            ASSET_MILES_ENDPOINT.format(asset_id=quoted),
            ASSET_FAULTS_ENDPOINT.format(asset_id=quoted),
            ASSET_MAINTENANCE_ENDPOINT.format(asset_id=quoted),
        ),
        what=f"details for asset {asset_id}",
    )
    return AssetDetail.model_validate({"miles": miles, "faults": faults, "services": services})
