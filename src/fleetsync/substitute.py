"""Substitute document loading and the sample document."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from fleetsync.validation import ensure_valid


def read_document(path: str | Path) -> Any:
    """Read and JSON-decode an uploaded substitute file.

    Raises ``OSError`` or ``json.JSONDecodeError``; validation is separate.
    """
    return json.loads(Path(path).read_text(encoding="utf-8"))


def admin_section(document: Mapping[str, Any]) -> dict[str, Any] | None:
    """Return the optional ``admin`` object of a substitute document."""
    admin = document.get("admin")
    return dict(admin) if isinstance(admin, Mapping) else None


def freeze_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and deep-copy a document so later caller mutations cannot leak in."""
    return copy.deepcopy(dict(ensure_valid(document)))


def build_sample_document(now: datetime | None = None) -> dict[str, Any]:
    """Sample substitute document matching the production fields the dashboard uses."""
    now_iso = (now or datetime.now(UTC)).isoformat().replace("+00:00", "Z")
    return {
        "info": {"last_snapshot_utc": now_iso},
        "kpis": {
            "fleet_size": 2,
            "mtd_miles": 1200,
            "ytd_miles": 15400,
            "fytd_miles": 9000,
            "active_assets_7d": 2,
            "utilization_pct_7d": 65.2,
            "avg_mi_asset_day_7d": 14.3,
            "faults_active_vehicle": 1,
            "faults_active_telematics": 0,
            "maint_overdue": 0,
            "maint_due_soon": 1,
            "daily_miles_60d": [],
            "monthly_fleet_miles_12m": [],
            "top_recurring_faults": [],
            "compliance": {"missing_snapshots": 0, "device_swaps_fy": 0},
        },
        "assets": [
            {
                "id": "a1",
                "name": "Vehicle-01",
                "vin": "VIN01",
                "last_known_odo": 15000,
                "miles_7d": 320,
                "active_faults": 1,
                "maint_status": "OK",
            },
            {
                "id": "a2",
                "name": "Vehicle-02",
                "vin": "VIN02",
                "last_known_odo": 7400,
                "miles_7d": 120,
                "active_faults": 0,
                "maint_status": "DUE_SOON",
            },
        ],
        "maintenance": [
            {
                "asset_name": "Vehicle-02",
                "service_type": "Oil Change",
                "last_service_date": "2025-08-01",
                "last_service_odo": 5000,
                "miles_to_due": 200,
                "days_to_due": 10,
                "status": "DUE_SOON",
            }
        ],
        "faults": [
            {
                "asset_name": "Vehicle-01",
                "code": "P0300",
                "description": "Random Misfire Detected",
                "severity": "High",
                "last_seen_utc": now_iso,
                "is_active": True,
            }
        ],
        "miles": [
            {
                "asset_name": "Vehicle-01",
                "month": "2025-08",
                "start_odo": 14000,
                "end_odo": 15000,
                "miles": 1000,
                "quality": "OK",
            },
            {
                "asset_name": "Vehicle-02",
                "month": "2025-08",
                "start_odo": 7000,
                "end_odo": 7400,
                "miles": 400,
                "quality": "OK",
            },
        ],
        "admin": {
            "fy_start_month": 7,
            "due_soon_miles": 500,
            "due_soon_days": 15,
            "utilization_threshold": 1,
            "odometer_precedence": "Engine,Transmission,ABS",
        },
    }
