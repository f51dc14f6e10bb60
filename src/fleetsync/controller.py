"""Dashboard controller: orchestrates sync, substitute mode and view state."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Any

import aiohttp

from fleetsync._constants import TabId
from fleetsync._transport import JsonTransport, Transport
from fleetsync.config import ApiConfig, DashboardConfig, load_api_config
from fleetsync.exceptions import (
    FleetBestEffortError,
    FleetError,
    FleetFetchError,
    FleetTransportError,
    FleetValidationError,
)
from fleetsync.fetcher import SnapshotFetcher
from fleetsync.models.admin import AdminConfig
from fleetsync.models.records import AssetDetail
from fleetsync.models.snapshot import Snapshot, snapshot_from_document
from fleetsync.render.protocol import NotifyLevel, Renderer, ViewModelRenderer
from fleetsync.render.view_models import AssetDetailView, TabView, build_asset_detail
from fleetsync.state.connection import ConnectionState, ConnectionStatus
from fleetsync.state.store import DataSource, SnapshotStore
from fleetsync.state.view_settings import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    ViewSettings,
    load_view_settings,
    save_view_settings,
)
from fleetsync.substitute import admin_section, freeze_document, read_document
from fleetsync.validation import ValidationResult

_logger = logging.getLogger(__name__)


def _substitute_admin(document: dict[str, Any]) -> AdminConfig | None:
    admin = admin_section(document)
    if admin is None:
        return None
    try:
        return AdminConfig.model_validate(admin)
    except (ValueError, ArithmeticError):
        _logger.warning("Ignoring malformed admin section in substitute data", exc_info=True)
        return None


class DashboardController:
    """Context object holding every piece of dashboard state.

    Usage::

        async with DashboardController(DashboardConfig.from_env(), renderer=ui) as dashboard:
            await dashboard.start()
            dashboard.switch_tab("maintenance")
            await dashboard.refresh()

    The controller is the only writer to its `SnapshotStore` and
    `ConnectionState`. Live sync cycles are single-flight: a `sync()`
    issued while one is outstanding joins it instead of racing it.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        *,
        renderer: Renderer | None = None,
        storage: KeyValueStorage | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or DashboardConfig()
        self._renderer: Renderer = renderer if renderer is not None else ViewModelRenderer()
        if storage is None:
            storage = JsonFileStorage(self._config.storage_path) if self._config.storage_path else MemoryStorage()
        self._storage = storage
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._api_config = ApiConfig()
        self._fetcher: SnapshotFetcher | None = None
        self._view_settings = ViewSettings()
        self._sync_task: asyncio.Task[bool] | None = None
        self._unsubscribe_status: Any = None
        self.store = SnapshotStore()
        self.connection = ConnectionState()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DashboardController:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = JsonTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        task = self._sync_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._sync_task = None
        if self._unsubscribe_status is not None:
            self._unsubscribe_status()
            self._unsubscribe_status = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def status(self) -> ConnectionStatus:
        return self.connection.status

    @property
    def snapshot(self) -> Snapshot:
        return self.store.snapshot

    @property
    def source(self) -> DataSource:
        return self.store.current_source()

    @property
    def api_base(self) -> str:
        return self._api_config.api_base

    @property
    def view_settings(self) -> ViewSettings:
        return self._view_settings

    @property
    def active_tab(self) -> TabId:
        return self._view_settings.active_tab

    @property
    def sync_in_flight(self) -> bool:
        return self._sync_task is not None and not self._sync_task.done()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FleetError("Controller not initialized. Use 'async with DashboardController(...) as dashboard:'")
        return self._transport

    def _require_fetcher(self) -> SnapshotFetcher:
        if self._fetcher is None:
            raise FleetError("Configuration not loaded. Call 'await dashboard.start()' first")
        return self._fetcher

    def _in_substitute_mode(self) -> bool:
        return self.store.current_source() == DataSource.SUBSTITUTE

    def _register_listeners(self) -> None:
        if self._unsubscribe_status is None:
            self._unsubscribe_status = self.connection.add_listener(self._renderer.show_status)

    def _persist_view_settings(self) -> None:
        try:
            save_view_settings(self._storage, self._view_settings)
        except OSError:
            _logger.warning("Could not persist view settings", exc_info=True)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Run the startup sequence.

        config -> listeners -> view settings -> initial sync -> render.
        Returns ``True`` when the initial sync succeeded and the dashboard
        was rendered.
        """
        self._renderer.show_status(self.connection.label)
        try:
            await self.load_config()
            self._register_listeners()
            self.restore_view_settings()
            loaded = await self.sync()
        except FleetError:
            _logger.exception("Failed to initialize dashboard")
            self._renderer.notify(NotifyLevel.ERROR, "Failed to load dashboard configuration")
            if self.connection.can_transition(ConnectionStatus.OFFLINE):
                self.connection.transition(ConnectionStatus.OFFLINE)
            return False

        if loaded:
            self.render_dashboard()
        else:
            _logger.warning("Dashboard initialization skipped rendering due to data load failure")
        return loaded

    async def load_config(self) -> ApiConfig:
        """Load ``API_BASE`` (primary -> sample -> defaults) and build the fetcher."""
        transport = self._require_transport()
        self._api_config = await load_api_config(transport, self._config)
        self._fetcher = SnapshotFetcher(transport, api_base=self._api_config.api_base)
        _logger.debug("Using API base %r", self._api_config.api_base)
        return self._api_config

    def restore_view_settings(self) -> ViewSettings:
        self._view_settings = load_view_settings(self._storage)
        return self._view_settings

    # ------------------------------------------------------------------
    # Live synchronization
    # ------------------------------------------------------------------

    async def sync(self) -> bool:
        """Run one live sync cycle, or join the one already in flight.

        Returns ``True`` when a fresh live snapshot was committed.
        """
        task = self._sync_task
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._run_sync_cycle())
            self._sync_task = task
        else:
            _logger.debug("Sync already in flight; joining it")
        # A cancelled caller must not cancel the cycle other callers await.
        return await asyncio.shield(task)

    async def _run_sync_cycle(self) -> bool:
        if self._in_substitute_mode():
            _logger.debug("Substitute mode active; skipping live sync")
            return False

        fetcher = self._require_fetcher()
        self.connection.transition(ConnectionStatus.CONNECTING)
        try:
            snapshot = await fetcher.fetch()
        except FleetFetchError as exc:
            if self._in_substitute_mode():
                _logger.debug("Live sync failed after substitute mode was enabled: %s", exc)
                return False
            _logger.error("Failed to load fleet data: %s", exc)
            self._renderer.notify(NotifyLevel.ERROR, "Failed to load fleet data")
            self.connection.transition(ConnectionStatus.OFFLINE)
            return False

        if self._in_substitute_mode():
            _logger.debug("Substitute mode enabled during sync; discarding live snapshot")
            return False

        self.store.replace(snapshot, DataSource.LIVE)
        self.connection.transition(ConnectionStatus.ONLINE)
        await self._load_admin_config(fetcher)
        return True

    async def _load_admin_config(self, fetcher: SnapshotFetcher) -> None:
        try:
            admin = await fetcher.fetch_admin_config()
        except FleetBestEffortError as exc:
            _logger.warning("%s", exc)
            return
        if admin is not None:
            self._renderer.show_admin(admin)

    async def refresh(self) -> bool:
        """Re-sync from the server, or re-render the substitute data.

        Live: best-effort ``POST /api/refresh-now`` then a sync cycle.
        Substitute: re-render only, with no network activity.
        """
        if self._in_substitute_mode():
            self.render_dashboard()
            return True

        fetcher = self._require_fetcher()
        try:
            await fetcher.trigger_refresh()
        except FleetBestEffortError as exc:
            _logger.warning("%s; refetching anyway", exc)
        loaded = await self.sync()
        # Offline still re-renders: last-known-good data beside the offline status.
        self.render_dashboard()
        return loaded

    # ------------------------------------------------------------------
    # Substitute mode
    # ------------------------------------------------------------------

    def load_substitute_document(self, document: Any) -> ValidationResult:
        """Validate *document* and, if valid, switch to substitute mode.

        An invalid document is rejected outright: nothing is adopted and
        the current mode is left as it was.
        """
        try:
            adopted = freeze_document(document)
        except FleetValidationError as exc:
            _logger.error("Substitute data validation failed: %s", list(exc.errors))
            self._renderer.notify(
                NotifyLevel.ERROR,
                "Substitute data invalid. Fix the JSON to match production schema.\n" + "\n".join(exc.errors),
            )
            return ValidationResult(valid=False, errors=exc.errors)

        try:
            snapshot = snapshot_from_document(adopted)
        except (ValueError, ArithmeticError) as exc:
            message = f"Substitute data could not be loaded: {exc}"
            _logger.error("%s", message)
            self._renderer.notify(NotifyLevel.ERROR, message)
            return ValidationResult(valid=False, errors=(message,))
        admin = _substitute_admin(adopted)

        self.store.replace(snapshot, DataSource.SUBSTITUTE, document=adopted)
        self.connection.transition(ConnectionStatus.SUBSTITUTE)
        if admin is not None:
            self._renderer.show_admin(admin)
        self.render_dashboard()
        self._renderer.notify(NotifyLevel.SUCCESS, "Substitute data loaded. Substitute Mode is ON for this session.")
        return ValidationResult(valid=True)

    def load_substitute_file(self, path: str | Path) -> ValidationResult:
        """Read an uploaded JSON file and hand it to `load_substitute_document`."""
        try:
            document = read_document(path)
        except (OSError, ValueError) as exc:
            message = f"Failed to parse uploaded JSON: {exc}"
            _logger.error("%s", message)
            self._renderer.notify(NotifyLevel.ERROR, message)
            return ValidationResult(valid=False, errors=(message,))
        return self.load_substitute_document(document)

    async def toggle_substitute_mode(self, on: bool) -> bool:
        """Turn substitute mode on (needs a resident document) or off.

        Returns whether substitute mode is on afterwards.
        """
        if on:
            if self.store.substitute_document is None:
                self._renderer.notify(
                    NotifyLevel.WARN,
                    "Please upload a substitute data JSON file to enable Substitute Mode.",
                )
                return False
            self.render_dashboard()
            return True

        if self._in_substitute_mode():
            # The document is session-only and unrecoverable once turned off.
            self.store.clear()
            self.connection.transition(ConnectionStatus.CONNECTING)
        await self.sync()
        self.render_dashboard()
        return False

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def switch_tab(self, tab: TabId | str) -> TabView:
        """Activate *tab*, persist it and render only that tab's panel.

        Raises
        ------
        ValueError
            *tab* is not a known tab id.
        """
        tab_id = TabId(tab)
        self._view_settings = self._view_settings.model_copy(update={"active_tab": tab_id})
        self._persist_view_settings()
        record = self.store.record
        return self._renderer.render(record.snapshot, self.connection.status, tab_id)

    def render_dashboard(self) -> None:
        """Render KPI tiles, the freshness line and the active tab."""
        record = self.store.record
        status = self.connection.status
        self._renderer.render_header(record.snapshot, status)
        self._renderer.render(record.snapshot, status, self.active_tab)

    # ------------------------------------------------------------------
    # Asset details and admin settings
    # ------------------------------------------------------------------

    async def show_asset_details(self, asset_id: str) -> AssetDetailView | None:
        """Drill down into one asset.

        Substitute mode filters the in-memory snapshot by asset name; live
        mode fetches the per-asset endpoints. ``None`` for unknown assets
        or failed fetches.
        """
        record = self.store.record
        asset = record.snapshot.find_asset(asset_id)
        if asset is None:
            _logger.debug("No asset with id %r", asset_id)
            return None

        if record.source == DataSource.SUBSTITUTE:
            snapshot = record.snapshot
            detail = AssetDetail(
                miles=tuple(row for row in snapshot.miles if row.asset_name == asset.name),
                faults=tuple(row for row in snapshot.faults if row.asset_name == asset.name),
                services=tuple(row for row in snapshot.maintenance if row.asset_name == asset.name),
            )
        else:
            try:
                detail = await self._require_fetcher().fetch_asset_detail(asset_id)
            except FleetFetchError as exc:
                _logger.error("Failed to load details for asset %s: %s", asset_id, exc)
                self._renderer.notify(NotifyLevel.ERROR, f"Failed to load details for {asset.name}")
                return None

        view = build_asset_detail(asset, detail)
        self._renderer.show_asset_detail(view)
        return view

    async def save_admin_settings(self, config: AdminConfig) -> bool:
        if self._in_substitute_mode():
            self._renderer.notify(NotifyLevel.WARN, "Admin settings cannot be saved in Substitute Mode.")
            return False
        try:
            await self._require_fetcher().save_admin_config(config)
        except FleetTransportError as exc:
            _logger.error("Failed to save settings: %s", exc)
            self._renderer.notify(NotifyLevel.ERROR, "Failed to save settings")
            return False
        self._renderer.show_admin(config)
        self._renderer.notify(NotifyLevel.SUCCESS, "Settings saved successfully")
        return True
