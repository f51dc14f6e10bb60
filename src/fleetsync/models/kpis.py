"""Aggregated fleet KPI model (``/api/kpis``)."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, field_validator

from fleetsync._normalize import object_or_empty
from fleetsync.models._base import FleetBaseModel, LenientFloat, LenientInt, LenientStr, object_items


class DailyMiles(FleetBaseModel):
    date: LenientStr = None
    miles: LenientFloat = None


class TopMover(FleetBaseModel):
    asset_name: LenientStr = None
    miles: LenientFloat = None


class MonthlyFleetMiles(FleetBaseModel):
    month: LenientStr = None
    miles: LenientFloat = None


class RecurringFault(FleetBaseModel):
    code: LenientStr = None
    count: LenientInt = None


class Compliance(FleetBaseModel):
    missing_snapshots: LenientInt = None
    """Assets lacking a start/end odometer snapshot this period."""
    device_swaps_fy: LenientInt = None
    """Telematics device swaps since fiscal-year start."""


class FleetKpis(FleetBaseModel):
    """Fleet-wide aggregated metrics.

    Scalar metrics default to ``None`` (rendered as zero); the nested
    collections always exist, so renderers need no null checks.
    """

    fleet_size: LenientInt = None
    mtd_miles: LenientFloat = None
    ytd_miles: LenientFloat = None
    fytd_miles: LenientFloat = None
    active_assets_7d: LenientInt = None
    utilization_pct_7d: LenientFloat = None
    avg_mi_asset_day_7d: LenientFloat = None
    maint_overdue: LenientInt = None
    maint_due_soon: LenientInt = None
    faults_active_vehicle: LenientInt = None
    faults_active_telematics: LenientInt = None

    daily_miles_60d: Annotated[tuple[DailyMiles, ...], BeforeValidator(object_items)] = Field(default_factory=tuple)
    top_movers_mtd: Annotated[tuple[TopMover, ...], BeforeValidator(object_items)] = Field(default_factory=tuple)
    monthly_fleet_miles_12m: Annotated[tuple[MonthlyFleetMiles, ...], BeforeValidator(object_items)] = Field(
        default_factory=tuple
    )
    top_recurring_faults: Annotated[tuple[RecurringFault, ...], BeforeValidator(object_items)] = Field(
        default_factory=tuple
    )
    compliance: Compliance = Field(default_factory=Compliance)

    @field_validator("compliance", mode="before")
    @classmethod
    def _default_compliance(cls, value: Any) -> Any:
        return object_or_empty(value, name="kpis.compliance")
