"""Renderer contract and pure view models."""

from fleetsync.render.protocol import NotifyLevel, Renderer, ViewModelRenderer
from fleetsync.render.view_models import (
    AdminView,
    AssetCard,
    AssetDetailView,
    AssetsView,
    ChartSeries,
    ComplianceItem,
    FaultsView,
    HeaderView,
    KpiTile,
    MaintenanceView,
    MilesView,
    OverviewView,
    TableView,
    TabView,
    build_asset_detail,
    build_header,
    build_tab_view,
    format_number,
    format_percent,
)

__all__ = [
    "AdminView",
    "AssetCard",
    "AssetDetailView",
    "AssetsView",
    "ChartSeries",
    "ComplianceItem",
    "FaultsView",
    "HeaderView",
    "KpiTile",
    "MaintenanceView",
    "MilesView",
    "NotifyLevel",
    "OverviewView",
    "Renderer",
    "TabView",
    "TableView",
    "ViewModelRenderer",
    "build_asset_detail",
    "build_header",
    "build_tab_view",
    "format_number",
    "format_percent",
]
