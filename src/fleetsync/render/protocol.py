"""Renderer collaborator contract and the default view-model renderer."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, Protocol

from fleetsync._constants import TabId
from fleetsync.models.admin import AdminConfig
from fleetsync.models.snapshot import Snapshot
from fleetsync.render.view_models import AssetDetailView, HeaderView, TabView, build_header, build_tab_view
from fleetsync.state.connection import ConnectionStatus

_logger = logging.getLogger(__name__)


class NotifyLevel(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARN = "warn"
    ERROR = "error"


class Renderer(Protocol):
    """Presentation collaborator driven by the controller.

    The controller never touches presentation state; it only calls these
    methods with the current snapshot, status and tab.
    """

    def render(self, snapshot: Snapshot, status: ConnectionStatus, tab: TabId) -> Any:
        """Render the panel for *tab* only."""
        ...

    def render_header(self, snapshot: Snapshot, status: ConnectionStatus) -> Any:
        """Render KPI tiles and the freshness line."""
        ...

    def show_status(self, label: str) -> None:
        ...

    def notify(self, level: NotifyLevel, message: str) -> None:
        """Transient user-visible notification."""
        ...

    def show_admin(self, config: AdminConfig) -> None:
        ...

    def show_asset_detail(self, view: AssetDetailView) -> None:
        ...


class ViewModelRenderer:
    """Renderer that builds toolkit-independent view models and keeps the latest ones.

    UI front-ends can subclass it and override the ``show_*`` hooks, or
    read ``header`` / ``views`` after each call.
    """

    def __init__(self) -> None:
        self.status_label: str = ""
        self.header: HeaderView | None = None
        self.views: dict[TabId, TabView] = {}
        self.notifications: list[tuple[NotifyLevel, str]] = []
        self.admin: AdminConfig | None = None
        self.asset_detail: AssetDetailView | None = None

    def render(self, snapshot: Snapshot, status: ConnectionStatus, tab: TabId) -> TabView:
        view = build_tab_view(snapshot, tab)
        self.views[tab] = view
        return view

    def render_header(self, snapshot: Snapshot, status: ConnectionStatus) -> HeaderView:
        self.header = build_header(snapshot, status)
        return self.header

    def show_status(self, label: str) -> None:
        self.status_label = label

    def notify(self, level: NotifyLevel, message: str) -> None:
        self.notifications.append((level, message))
        if level == NotifyLevel.ERROR:
            _logger.error("%s", message)
        elif level == NotifyLevel.WARN:
            _logger.warning("%s", message)
        else:
            _logger.info("%s", message)

    def show_admin(self, config: AdminConfig) -> None:
        self.admin = config

    def show_asset_detail(self, view: AssetDetailView) -> None:
        self.asset_detail = view
