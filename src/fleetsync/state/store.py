"""Snapshot store.

This is the only place the current snapshot lives. Writers swap the whole
record at once, so readers never observe a half-updated snapshot.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from fleetsync.models.snapshot import Snapshot


class DataSource(StrEnum):
    LIVE = "live"
    SUBSTITUTE = "substitute"


@dataclasses.dataclass(frozen=True)
class StoreRecord:
    snapshot: Snapshot
    source: DataSource
    document: Mapping[str, Any] | None = None
    """The substitute document backing ``snapshot``; only set for SUBSTITUTE."""


class SnapshotStore:
    """Holds exactly one snapshot and the source it came from."""

    def __init__(self) -> None:
        self._record = StoreRecord(snapshot=Snapshot.empty(), source=DataSource.LIVE)

    @property
    def record(self) -> StoreRecord:
        """The current (snapshot, source, document) triple, read in one step."""
        return self._record

    @property
    def snapshot(self) -> Snapshot:
        return self._record.snapshot

    @property
    def substitute_document(self) -> Mapping[str, Any] | None:
        return self._record.document

    def current_source(self) -> DataSource:
        return self._record.source

    def replace(
        self,
        snapshot: Snapshot,
        source: DataSource,
        *,
        document: Mapping[str, Any] | None = None,
    ) -> None:
        """Swap in a new snapshot.

        A ``LIVE`` replace always drops any substitute document.
        """
        if source == DataSource.SUBSTITUTE:
            if document is None:
                raise ValueError("A substitute snapshot requires its validated document")
            frozen: Mapping[str, Any] | None = MappingProxyType(dict(document))
        else:
            frozen = None
        self._record = StoreRecord(snapshot=snapshot, source=source, document=frozen)

    def clear(self) -> None:
        """Reset to an empty live snapshot, discarding any substitute document."""
        self._record = StoreRecord(snapshot=Snapshot.empty(), source=DataSource.LIVE)
