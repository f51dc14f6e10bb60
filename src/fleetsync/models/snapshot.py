"""The unified fleet snapshot and its assembly from endpoint payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from fleetsync._normalize import object_or_empty, objects_only
from fleetsync.models._base import FleetBaseModel, FleetTimestamp
from fleetsync.models.kpis import FleetKpis
from fleetsync.models.records import Asset, FaultRecord, MaintenanceRecord, MileageRecord


class ServerInfo(FleetBaseModel):
    """Snapshot metadata from ``/api/info``."""

    last_snapshot_utc: FleetTimestamp = None
    """When the backend last pulled telematics data."""


class Snapshot(FleetBaseModel):
    """Complete, immutable fleet dataset used to render every tab.

    Every field is always present. Build instances with
    :func:`build_snapshot` so absent data is normalized in one place.
    """

    info: ServerInfo = Field(default_factory=ServerInfo)
    kpis: FleetKpis = Field(default_factory=FleetKpis)
    assets: tuple[Asset, ...] = ()
    maintenance: tuple[MaintenanceRecord, ...] = ()
    faults: tuple[FaultRecord, ...] = ()
    miles: tuple[MileageRecord, ...] = ()

    @classmethod
    def empty(cls) -> Snapshot:
        return cls()

    def find_asset(self, asset_id: str) -> Asset | None:
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None


def build_snapshot(
    *,
    info: Any,
    kpis: Any,
    assets: Any,
    maintenance: Any,
    faults: Any,
    miles: Any,
) -> Snapshot:
    """Assemble a snapshot, defaulting absent payloads to ``{}`` / ``[]``."""
    return Snapshot(
        info=ServerInfo.model_validate(object_or_empty(info, name="info")),
        kpis=FleetKpis.model_validate(object_or_empty(kpis, name="kpis")),
        assets=tuple(Asset.model_validate(item) for item in objects_only(assets, name="assets")),
        maintenance=tuple(
            MaintenanceRecord.model_validate(item) for item in objects_only(maintenance, name="maintenance")
        ),
        faults=tuple(FaultRecord.model_validate(item) for item in objects_only(faults, name="faults")),
        miles=tuple(MileageRecord.model_validate(item) for item in objects_only(miles, name="miles")),
    )


def snapshot_from_document(document: Mapping[str, Any]) -> Snapshot:
    """Assemble a snapshot from a validated substitute document."""
    return build_snapshot(
        info=document.get("info"),
        kpis=document.get("kpis"),
        assets=document.get("assets"),
        maintenance=document.get("maintenance"),
        faults=document.get("faults"),
        miles=document.get("miles"),
    )
