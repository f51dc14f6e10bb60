from __future__ import annotations

from fleetsync._constants import TabId
from fleetsync.models import AssetDetail, build_snapshot, snapshot_from_document
from fleetsync.render.view_models import (
    AdminView,
    AssetsView,
    FaultsView,
    MaintenanceView,
    MilesView,
    OverviewView,
    build_asset_detail,
    build_header,
    build_tab_view,
    format_number,
    format_percent,
)
from fleetsync.state.connection import ConnectionStatus
from fleetsync.substitute import build_sample_document


def _snapshot(**overrides):
    payloads = {"info": {}, "kpis": {}, "assets": [], "maintenance": [], "faults": [], "miles": []}
    payloads.update(overrides)
    return build_snapshot(**payloads)


def test_format_helpers() -> None:
    assert format_number(None) == "N/A"
    assert format_number(1234567) == "1,234,567"
    assert format_number(14.3, 1) == "14.3"
    assert format_percent(65.2) == "65.2%"


def test_header_tiles_and_freshness_when_online() -> None:
    snapshot = _snapshot(
        info={"last_snapshot_utc": "2025-08-01T06:07:08Z"},
        kpis={"fleet_size": 1200, "maint_overdue": 2, "utilization_pct_7d": 50},
    )

    header = build_header(snapshot, ConnectionStatus.ONLINE)
    tiles = {tile.key: tile for tile in header.tiles}

    assert header.status_label == "Online"
    assert header.freshness == "Last datapull: 2025-08-01 06:07:08 UTC"
    assert len(header.tiles) == 11
    assert tiles["fleetSize"].value == "1,200"
    assert tiles["utilizationPct7d"].value == "50.0%"
    assert tiles["maintOverdue"].alert is True
    assert tiles["maintDueSoon"].alert is False
    # Absent metrics render as zero.
    assert tiles["mtdMiles"].value == "0"
    assert tiles["avgMiAssetDay7d"].value == "0.0"


def test_freshness_hidden_unless_online() -> None:
    snapshot = _snapshot(info={"last_snapshot_utc": "2025-08-01T06:07:08Z"})
    for status in (ConnectionStatus.OFFLINE, ConnectionStatus.SUBSTITUTE, ConnectionStatus.CONNECTING):
        assert build_header(snapshot, status).freshness == ""
    assert build_header(_snapshot(), ConnectionStatus.ONLINE).freshness == ""


def test_overview_compliance_statuses() -> None:
    snapshot = _snapshot(
        kpis={
            "maint_overdue": 1,
            "compliance": {"missing_snapshots": 0, "device_swaps_fy": 6},
            "daily_miles_60d": [{"date": "2025-08-01", "miles": 10}, {"date": "2025-08-02"}],
            "top_movers_mtd": [{"asset_name": "Truck", "miles": 1500}],
        }
    )

    view = build_tab_view(snapshot, TabId.OVERVIEW)

    assert isinstance(view, OverviewView)
    assert [item.status for item in view.compliance] == ["overdue", "ok", "warning"]
    assert view.daily_miles.labels == ("2025-08-01", "2025-08-02")
    assert view.daily_miles.values == (10.0, 0.0)
    assert view.top_movers == (("Truck", "1,500 mi"),)


def test_device_swap_threshold_is_exclusive() -> None:
    view = build_tab_view(_snapshot(kpis={"compliance": {"device_swaps_fy": 5}}), TabId.OVERVIEW)
    assert view.compliance[2].status == "ok"


def test_miles_chart_uses_latest_month() -> None:
    snapshot = _snapshot(
        miles=[
            {"asset_name": "A", "month": "2025-07", "miles": 100},
            {"asset_name": "A", "month": "2025-08", "miles": 50},
            {"asset_name": "B", "month": "2025-08", "miles": 70},
        ],
        kpis={"monthly_fleet_miles_12m": [{"month": "2025-07", "miles": 900}]},
    )

    view = build_tab_view(snapshot, TabId.MILES)

    assert isinstance(view, MilesView)
    assert view.month == "2025-08"
    assert view.monthly_by_asset.labels == ("A", "B")
    assert view.monthly_by_asset.values == (50.0, 70.0)
    assert view.fleet_trend.values == (900.0,)
    assert len(view.table.rows) == 3


def test_empty_miles() -> None:
    view = build_tab_view(_snapshot(), TabId.MILES)
    assert view.month is None
    assert view.table.is_empty
    assert view.table.empty_message == "No mileage data available."


def test_maintenance_counts() -> None:
    snapshot = _snapshot(
        maintenance=[
            {"status": "OVERDUE"},
            {"status": "OVERDUE"},
            {"status": "DUE_SOON"},
            {"status": "UPCOMING", "miles_to_due": 1500},
        ]
    )

    view = build_tab_view(snapshot, TabId.MAINTENANCE)

    assert isinstance(view, MaintenanceView)
    assert (view.overdue, view.due_soon, view.upcoming) == (2, 1, 1)
    assert view.table.rows[3][4] == "1,500"


def test_faults_severity_breakdown() -> None:
    snapshot = _snapshot(
        faults=[
            {"code": "P1", "severity": "High", "is_active": True, "last_seen_utc": "2025-08-01T01:02:03Z"},
            {"code": "P2", "severity": "Low"},
            {"code": "P3", "severity": "High"},
        ],
        kpis={"top_recurring_faults": [{"code": "P1", "count": 9}]},
    )

    view = build_tab_view(snapshot, TabId.FAULTS)

    assert isinstance(view, FaultsView)
    assert view.severity.labels == ("High", "Low")
    assert view.severity.values == (2.0, 1.0)
    assert view.top_faults.values == (9.0,)
    assert view.table.rows[0][4:] == ("2025-08-01 01:02:03", "Yes")
    assert view.table.rows[1][4:] == ("", "No")


def test_assets_cards() -> None:
    snapshot = snapshot_from_document(build_sample_document())

    view = build_tab_view(snapshot, TabId.ASSETS)

    assert isinstance(view, AssetsView)
    card = view.cards[0]
    assert (card.id, card.name, card.vin) == ("a1", "Vehicle-01", "VIN01")
    assert card.odometer == "15,000 mi"
    assert card.active_faults == "1"


def test_admin_tab_has_no_snapshot_view() -> None:
    assert build_tab_view(_snapshot(), TabId.ADMIN) == AdminView()


def test_asset_detail_lines() -> None:
    snapshot = snapshot_from_document(build_sample_document())
    asset = snapshot.assets[1]
    detail = AssetDetail(
        miles=tuple(row for row in snapshot.miles if row.asset_name == asset.name),
        services=tuple(row for row in snapshot.maintenance if row.asset_name == asset.name),
    )

    view = build_asset_detail(asset, detail)

    assert view.title == "Vehicle-02 Details"
    assert view.miles.labels == ("2025-08",)
    assert view.faults == ()
    assert view.services == ("Oil Change - Due in 200 miles or 10 days",)
