"""Pydantic models for fleet payloads."""

from fleetsync.models.admin import AdminConfig
from fleetsync.models.kpis import Compliance, DailyMiles, FleetKpis, MonthlyFleetMiles, RecurringFault, TopMover
from fleetsync.models.records import Asset, AssetDetail, FaultRecord, MaintenanceRecord, MileageRecord
from fleetsync.models.snapshot import ServerInfo, Snapshot, build_snapshot, snapshot_from_document

__all__ = [
    "AdminConfig",
    "Asset",
    "AssetDetail",
    "Compliance",
    "DailyMiles",
    "FaultRecord",
    "FleetKpis",
    "MaintenanceRecord",
    "MileageRecord",
    "MonthlyFleetMiles",
    "RecurringFault",
    "ServerInfo",
    "Snapshot",
    "TopMover",
    "build_snapshot",
    "snapshot_from_document",
]
