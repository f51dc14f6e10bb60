"""Pure view-model builders for each dashboard tab.

Nothing here touches a UI toolkit: a renderer turns these frozen
dataclasses into widgets, and a chart library only ever receives
``ChartSeries`` (parallel label/value arrays).
"""

from __future__ import annotations

import dataclasses
from collections import Counter
from collections.abc import Iterable, Sequence

from fleetsync._constants import TabId
from fleetsync.models.kpis import FleetKpis
from fleetsync.models.records import Asset, AssetDetail, FaultRecord, MaintenanceRecord, MileageRecord
from fleetsync.models.snapshot import Snapshot
from fleetsync.state.connection import ConnectionStatus

# Device swaps above this count since FY start are flagged.
DEVICE_SWAP_WARNING_THRESHOLD = 5


def format_number(value: float | int | None, decimals: int = 0) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.{decimals}f}"


def format_percent(value: float | int | None) -> str:
    return format_number(value, 1) + "%"


def _text(value: object) -> str:
    return "" if value is None else str(value)


@dataclasses.dataclass(frozen=True)
class ChartSeries:
    label: str
    labels: tuple[str, ...] = ()
    values: tuple[float, ...] = ()

    @classmethod
    def from_points(cls, label: str, points: Iterable[tuple[str, float | None]]) -> ChartSeries:
        pairs = [(x, y or 0.0) for x, y in points]
        return cls(label=label, labels=tuple(x for x, _ in pairs), values=tuple(float(y) for _, y in pairs))


@dataclasses.dataclass(frozen=True)
class TableView:
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    empty_message: str

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclasses.dataclass(frozen=True)
class KpiTile:
    key: str
    value: str
    alert: bool = False


@dataclasses.dataclass(frozen=True)
class HeaderView:
    status_label: str
    tiles: tuple[KpiTile, ...]
    freshness: str


@dataclasses.dataclass(frozen=True)
class ComplianceItem:
    label: str
    value: int
    status: str


@dataclasses.dataclass(frozen=True)
class OverviewView:
    daily_miles: ChartSeries
    top_movers: tuple[tuple[str, str], ...]
    compliance: tuple[ComplianceItem, ...]
    top_movers_empty_message: str = "No mileage data for the current period."


@dataclasses.dataclass(frozen=True)
class MilesView:
    month: str | None
    monthly_by_asset: ChartSeries
    fleet_trend: ChartSeries
    table: TableView


@dataclasses.dataclass(frozen=True)
class MaintenanceView:
    overdue: int
    due_soon: int
    upcoming: int
    table: TableView


@dataclasses.dataclass(frozen=True)
class FaultsView:
    table: TableView
    severity: ChartSeries
    top_faults: ChartSeries


@dataclasses.dataclass(frozen=True)
class AssetCard:
    id: str
    name: str
    vin: str
    odometer: str
    miles_7d: str
    active_faults: str
    maint_status: str


@dataclasses.dataclass(frozen=True)
class AssetsView:
    cards: tuple[AssetCard, ...]
    empty_message: str = "No assets found."


@dataclasses.dataclass(frozen=True)
class AdminView:
    """The admin form is filled from `AdminConfig`, not from the snapshot."""


@dataclasses.dataclass(frozen=True)
class AssetDetailView:
    title: str
    miles: ChartSeries
    faults: tuple[str, ...]
    services: tuple[str, ...]
    faults_empty_message: str = "No fault history available."
    services_empty_message: str = "No upcoming services."


TabView = OverviewView | MilesView | MaintenanceView | FaultsView | AssetsView | AdminView


def build_header(snapshot: Snapshot, status: ConnectionStatus) -> HeaderView:
    k = snapshot.kpis
    tiles = (
        KpiTile("fleetSize", format_number(k.fleet_size or 0)),
        KpiTile("mtdMiles", format_number(k.mtd_miles or 0)),
        KpiTile("ytdMiles", format_number(k.ytd_miles or 0)),
        KpiTile("fytdMiles", format_number(k.fytd_miles or 0)),
        KpiTile("activeAssets7d", format_number(k.active_assets_7d or 0)),
        KpiTile("utilizationPct7d", format_percent(k.utilization_pct_7d or 0)),
        KpiTile("avgMiAssetDay7d", format_number(k.avg_mi_asset_day_7d or 0, 1)),
        KpiTile("maintOverdue", format_number(k.maint_overdue or 0), alert=(k.maint_overdue or 0) > 0),
        KpiTile("maintDueSoon", format_number(k.maint_due_soon or 0)),
        KpiTile("faultsVehicle", format_number(k.faults_active_vehicle or 0)),
        KpiTile("faultsTelematics", format_number(k.faults_active_telematics or 0)),
    )
    freshness = ""
    last = snapshot.info.last_snapshot_utc
    if status == ConnectionStatus.ONLINE and last is not None:
        freshness = f"Last datapull: {last:%Y-%m-%d %H:%M:%S} UTC"
    return HeaderView(status_label=status.label, tiles=tiles, freshness=freshness)


def _compliance_items(kpis: FleetKpis) -> tuple[ComplianceItem, ...]:
    overdue = kpis.maint_overdue or 0
    missing = kpis.compliance.missing_snapshots or 0
    swaps = kpis.compliance.device_swaps_fy or 0
    return (
        ComplianceItem("Overdue maintenance", overdue, "overdue" if overdue > 0 else "ok"),
        ComplianceItem("Missing start/end snapshots", missing, "warning" if missing > 0 else "ok"),
        ComplianceItem(
            "Device swaps since FY start",
            swaps,
            "warning" if swaps > DEVICE_SWAP_WARNING_THRESHOLD else "ok",
        ),
    )


def build_overview(snapshot: Snapshot) -> OverviewView:
    kpis = snapshot.kpis
    return OverviewView(
        daily_miles=ChartSeries.from_points("Daily Miles", ((_text(d.date), d.miles) for d in kpis.daily_miles_60d)),
        top_movers=tuple((_text(m.asset_name), f"{format_number(m.miles)} mi") for m in kpis.top_movers_mtd),
        compliance=_compliance_items(kpis),
    )


def latest_month(rows: Sequence[MileageRecord]) -> str | None:
    months = [row.month for row in rows if row.month]
    return max(months) if months else None


def build_miles(snapshot: Snapshot) -> MilesView:
    month = latest_month(snapshot.miles)
    in_month = [row for row in snapshot.miles if month is not None and row.month == month]
    table = TableView(
        columns=("Asset", "Month", "Start Odo", "End Odo", "Miles", "Quality"),
        rows=tuple(
            (
                _text(row.asset_name),
                _text(row.month),
                format_number(row.start_odo),
                format_number(row.end_odo),
                format_number(row.miles),
                _text(row.quality),
            )
            for row in snapshot.miles
        ),
        empty_message="No mileage data available.",
    )
    return MilesView(
        month=month,
        monthly_by_asset=ChartSeries.from_points("Miles", ((_text(r.asset_name), r.miles) for r in in_month)),
        fleet_trend=ChartSeries.from_points(
            "Fleet Miles", ((_text(m.month), m.miles) for m in snapshot.kpis.monthly_fleet_miles_12m)
        ),
        table=table,
    )


def _status_count(records: Sequence[MaintenanceRecord], status: str) -> int:
    return sum(1 for record in records if record.status == status)


def build_maintenance(snapshot: Snapshot) -> MaintenanceView:
    records = snapshot.maintenance
    return MaintenanceView(
        overdue=_status_count(records, "OVERDUE"),
        due_soon=_status_count(records, "DUE_SOON"),
        upcoming=_status_count(records, "UPCOMING"),
        table=TableView(
            columns=("Asset", "Service", "Last Service", "Last Odo", "Miles to Due", "Days to Due", "Status"),
            rows=tuple(
                (
                    _text(r.asset_name),
                    _text(r.service_type),
                    _text(r.last_service_date),
                    format_number(r.last_service_odo),
                    format_number(r.miles_to_due),
                    _text(r.days_to_due),
                    _text(r.status),
                )
                for r in records
            ),
            empty_message="No maintenance data available.",
        ),
    )


def _fault_row(fault: FaultRecord) -> tuple[str, ...]:
    seen = f"{fault.last_seen_utc:%Y-%m-%d %H:%M:%S}" if fault.last_seen_utc else ""
    return (
        _text(fault.asset_name),
        _text(fault.code),
        _text(fault.description),
        _text(fault.severity),
        seen,
        "Yes" if fault.is_active else "No",
    )


def build_faults(snapshot: Snapshot) -> FaultsView:
    # Counter keeps first-seen order, so the doughnut legend is stable.
    severity = Counter(_text(fault.severity) for fault in snapshot.faults)
    return FaultsView(
        table=TableView(
            columns=("Asset", "Code", "Description", "Severity", "Last Seen", "Active"),
            rows=tuple(_fault_row(fault) for fault in snapshot.faults),
            empty_message="No active faults.",
        ),
        severity=ChartSeries.from_points("Severity", severity.items()),
        top_faults=ChartSeries.from_points(
            "Occurrences", ((_text(f.code), f.count) for f in snapshot.kpis.top_recurring_faults)
        ),
    )


def _asset_card(asset: Asset) -> AssetCard:
    return AssetCard(
        id=asset.id,
        name=asset.name,
        vin=asset.vin,
        odometer=f"{format_number(asset.last_known_odo)} mi",
        miles_7d=f"{format_number(asset.miles_7d)} mi",
        active_faults=_text(asset.active_faults),
        maint_status=asset.maint_status,
    )


def build_assets(snapshot: Snapshot) -> AssetsView:
    return AssetsView(cards=tuple(_asset_card(asset) for asset in snapshot.assets))


_BUILDERS = {
    TabId.OVERVIEW: build_overview,
    TabId.MILES: build_miles,
    TabId.MAINTENANCE: build_maintenance,
    TabId.FAULTS: build_faults,
    TabId.ASSETS: build_assets,
}


def build_tab_view(snapshot: Snapshot, tab: TabId) -> TabView:
    """View model for one tab only; other tabs are not computed."""
    builder = _BUILDERS.get(tab)
    if builder is None:
        return AdminView()
    return builder(snapshot)


def build_asset_detail(asset: Asset, detail: AssetDetail) -> AssetDetailView:
    def _fault_line(fault: FaultRecord) -> str:
        seen = f"{fault.last_seen_utc:%Y-%m-%d}" if fault.last_seen_utc else "unknown"
        return f"{_text(fault.code)}: {_text(fault.description)} ({seen})"

    def _service_line(service: MaintenanceRecord) -> str:
        return (
            f"{_text(service.service_type)} - Due in {format_number(service.miles_to_due)} miles "
            f"or {_text(service.days_to_due)} days"
        )

    return AssetDetailView(
        title=f"{asset.name} Details",
        miles=ChartSeries.from_points("Monthly Miles", ((_text(m.month), m.miles) for m in detail.miles)),
        faults=tuple(_fault_line(fault) for fault in detail.faults),
        services=tuple(_service_line(service) for service in detail.services),
    )
