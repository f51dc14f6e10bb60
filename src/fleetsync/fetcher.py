"""Snapshot fetcher: the live side of synchronization.

Stateless apart from the transport and API base it was built with.
"""

from __future__ import annotations

import logging

from fleetsync._api import admin as _admin_api
from fleetsync._api import assets as _assets_api
from fleetsync._api import snapshot as _snapshot_api
from fleetsync._transport import Transport
from fleetsync.models.admin import AdminConfig
from fleetsync.models.records import AssetDetail
from fleetsync.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)

REQUIRED_ENDPOINTS = _snapshot_api.REQUIRED_ENDPOINTS


class SnapshotFetcher:
    """Reads the fleet backend.

    Usage::

        fetcher = SnapshotFetcher(transport, api_base="https://fleet.example")
        snapshot = await fetcher.fetch()
    """

    def __init__(self, transport: Transport, *, api_base: str = "") -> None:
        self._transport = transport
        self._api_base = api_base

    @property
    def api_base(self) -> str:
        return self._api_base

    async def fetch(self) -> Snapshot:
        """Fetch all required endpoints concurrently.

        All-or-nothing: if any endpoint fails, no snapshot is produced.

        Raises
        ------
        FleetFetchError
            One or more required endpoints failed.
        """
        snapshot = await _snapshot_api.fetch_snapshot(self._transport, self._api_base)
        _logger.debug(
            "Fetched snapshot: %d assets, %d maintenance, %d faults, %d miles rows",
            len(snapshot.assets),
            len(snapshot.maintenance),
            len(snapshot.faults),
            len(snapshot.miles),
        )
        return snapshot

    async def fetch_admin_config(self) -> AdminConfig | None:
        """Best-effort admin settings; raises `FleetBestEffortError` on failure."""
        return await _admin_api.fetch_admin_config(self._transport, self._api_base)

    async def trigger_refresh(self) -> None:
        """Best-effort server re-pull; raises `FleetBestEffortError` on failure."""
        await _admin_api.trigger_refresh(self._transport, self._api_base)

    async def save_admin_config(self, config: AdminConfig) -> None:
        """Persist admin settings; raises `FleetTransportError` on failure."""
        await _admin_api.save_admin_config(self._transport, self._api_base, config)

    async def fetch_asset_detail(self, asset_id: str) -> AssetDetail:
        """Per-asset drill-down; raises `FleetFetchError` on failure."""
        return await _assets_api.fetch_asset_detail(self._transport, self._api_base, asset_id)
