"""fleetsync - Async snapshot synchronization for fleet dashboards."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetsync")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetsync._constants import TabId
from fleetsync._transport import JsonTransport, Transport
from fleetsync.config import ApiConfig, DashboardConfig, load_api_config
from fleetsync.controller import DashboardController
from fleetsync.exceptions import (
    ConnectionTransitionError,
    FleetBestEffortError,
    FleetConfigError,
    FleetError,
    FleetFetchError,
    FleetTransportError,
    FleetValidationError,
)
from fleetsync.fetcher import SnapshotFetcher
from fleetsync.models import AdminConfig, Asset, AssetDetail, FleetKpis, Snapshot, build_snapshot
from fleetsync.render import NotifyLevel, Renderer, ViewModelRenderer
from fleetsync.state import (
    ConnectionState,
    ConnectionStatus,
    DataSource,
    JsonFileStorage,
    MemoryStorage,
    SnapshotStore,
    ViewSettings,
)
from fleetsync.substitute import build_sample_document
from fleetsync.validation import ValidationResult, ensure_valid, validate_substitute_document

__all__ = [
    "__version__",
    "AdminConfig",
    "ApiConfig",
    "Asset",
    "AssetDetail",
    "ConnectionState",
    "ConnectionStatus",
    "ConnectionTransitionError",
    "DashboardConfig",
    "DashboardController",
    "DataSource",
    "FleetBestEffortError",
    "FleetConfigError",
    "FleetError",
    "FleetFetchError",
    "FleetKpis",
    "FleetTransportError",
    "FleetValidationError",
    "JsonFileStorage",
    "JsonTransport",
    "MemoryStorage",
    "NotifyLevel",
    "Renderer",
    "Snapshot",
    "SnapshotFetcher",
    "SnapshotStore",
    "TabId",
    "Transport",
    "ValidationResult",
    "ViewModelRenderer",
    "ViewSettings",
    "build_sample_document",
    "build_snapshot",
    "ensure_valid",
    "load_api_config",
    "validate_substitute_document",
]
