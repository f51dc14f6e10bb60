"""Asset and per-asset record models."""

from __future__ import annotations

from typing import Annotated

from pydantic import BeforeValidator, Field

from fleetsync.models._base import (
    FleetBaseModel,
    FleetTimestamp,
    IdentityStr,
    LenientBool,
    LenientFloat,
    LenientInt,
    LenientStr,
    object_items,
)


class Asset(FleetBaseModel):
    """A fleet asset as listed by ``/api/assets``.

    All seven fields are required by the substitute validator; the model
    itself is lenient so that live data with gaps still renders.
    """

    id: IdentityStr = ""
    name: IdentityStr = ""
    vin: IdentityStr = ""
    last_known_odo: LenientFloat = None
    """Last known odometer reading in miles."""
    miles_7d: LenientFloat = None
    """Miles driven over the trailing seven days."""
    active_faults: LenientInt = None
    maint_status: IdentityStr = ""
    """Maintenance status (``OK``, ``DUE_SOON``, ``OVERDUE`` ...)."""


class MaintenanceRecord(FleetBaseModel):
    """A maintenance item (``/api/maintenance/due`` or per-asset)."""

    asset_name: LenientStr = None
    service_type: LenientStr = None
    last_service_date: LenientStr = None
    last_service_odo: LenientFloat = None
    miles_to_due: LenientFloat = None
    days_to_due: LenientInt = None
    status: LenientStr = None


class FaultRecord(FleetBaseModel):
    """An active or historical fault."""

    asset_name: LenientStr = None
    code: LenientStr = None
    description: LenientStr = None
    severity: LenientStr = None
    last_seen_utc: FleetTimestamp = None
    is_active: LenientBool = False


class MileageRecord(FleetBaseModel):
    """A monthly mileage row."""

    asset_name: LenientStr = None
    month: LenientStr = None
    start_odo: LenientFloat = None
    end_odo: LenientFloat = None
    miles: LenientFloat = None
    quality: LenientStr = None


class AssetDetail(FleetBaseModel):
    """Per-asset drill-down: 12-month miles, fault history, upcoming services."""

    miles: Annotated[tuple[MileageRecord, ...], BeforeValidator(object_items)] = Field(default_factory=tuple)
    faults: Annotated[tuple[FaultRecord, ...], BeforeValidator(object_items)] = Field(default_factory=tuple)
    services: Annotated[tuple[MaintenanceRecord, ...], BeforeValidator(object_items)] = Field(default_factory=tuple)
