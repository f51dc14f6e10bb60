"""Endpoint paths, storage keys and other fixed values."""

from __future__ import annotations

from enum import StrEnum

USER_AGENT = "fleetsync/0.1 (+aiohttp)"

# Required for a snapshot; fetched concurrently in this order.
INFO_ENDPOINT = "/api/info"
KPIS_ENDPOINT = "/api/kpis"
ASSETS_ENDPOINT = "/api/assets"
MAINTENANCE_DUE_ENDPOINT = "/api/maintenance/due"
FAULTS_ACTIVE_ENDPOINT = "/api/faults/activeSummary"
MILES_MONTHLY_ENDPOINT = "/api/miles/monthly?months=12"

# Best-effort.
ADMIN_CONFIG_ENDPOINT = "/api/admin/config"
REFRESH_NOW_ENDPOINT = "/api/refresh-now"

# Per-asset detail, formatted with the asset id.
ASSET_MILES_ENDPOINT = "/api/miles/asset/{asset_id}?months=12"
ASSET_FAULTS_ENDPOINT = "/api/faults/history/{asset_id}"
ASSET_MAINTENANCE_ENDPOINT = "/api/maintenance/asset/{asset_id}"

DEFAULT_CONFIG_URL = "config.json"
DEFAULT_SAMPLE_CONFIG_URL = "config.json.sample"

VIEW_SETTINGS_KEY = "fleetDashboard_viewSettings"


class TabId(StrEnum):
    OVERVIEW = "overview"
    MILES = "miles"
    MAINTENANCE = "maintenance"
    FAULTS = "faults"
    ASSETS = "assets"
    ADMIN = "admin"


DEFAULT_TAB = TabId.OVERVIEW

ASSET_REQUIRED_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "vin",
    "last_known_odo",
    "miles_7d",
    "active_faults",
    "maint_status",
)

RECORD_ARRAY_KEYS: tuple[str, ...] = ("maintenance", "faults", "miles")
