"""State layer.

The controller is the only writer to these objects: the connection status,
the snapshot store and the persisted view settings.
"""

from fleetsync.state.connection import ConnectionState, ConnectionStatus
from fleetsync.state.store import DataSource, SnapshotStore, StoreRecord
from fleetsync.state.view_settings import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    ViewSettings,
    load_view_settings,
    save_view_settings,
)

__all__ = [
    "ConnectionState",
    "ConnectionStatus",
    "DataSource",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "SnapshotStore",
    "StoreRecord",
    "ViewSettings",
    "load_view_settings",
    "save_view_settings",
]
