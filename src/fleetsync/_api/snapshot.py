"""Required snapshot endpoints."""

from __future__ import annotations

from fleetsync._api._common import get_all_or_nothing
from fleetsync._constants import (
    ASSETS_ENDPOINT,
    FAULTS_ACTIVE_ENDPOINT,
    INFO_ENDPOINT,
    KPIS_ENDPOINT,
    MAINTENANCE_DUE_ENDPOINT,
    MILES_MONTHLY_ENDPOINT,
)
from fleetsync._transport import Transport
from fleetsync.models.snapshot import Snapshot, build_snapshot

REQUIRED_ENDPOINTS: tuple[str, ...] = (
    INFO_ENDPOINT,
    KPIS_ENDPOINT,
    ASSETS_ENDPOINT,
    MAINTENANCE_DUE_ENDPOINT,
    FAULTS_ACTIVE_ENDPOINT,
    MILES_MONTHLY_ENDPOINT,
)


async def fetch_snapshot(transport: Transport, api_base: str) -> Snapshot:
    """Fetch the six required endpoints and assemble one snapshot."""
    info, kpis, assets, maintenance, faults, miles = await get_all_or_nothing(
        transport,
        api_base,
        REQUIRED_ENDPOINTS,
        what="fleet data",
    )
    return build_snapshot(
        info=info,
        kpis=kpis,
        assets=assets,
        maintenance=maintenance,
        faults=faults,
        miles=miles,
    )
