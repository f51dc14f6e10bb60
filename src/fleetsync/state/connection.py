"""Connection-status state machine.

The status is the whole observable contract of synchronization health:
each effective transition is reported to listeners as a single label.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from fleetsync.exceptions import ConnectionTransitionError

_logger = logging.getLogger(__name__)


class ConnectionStatus(StrEnum):
    CONNECTING = "connecting"
    ONLINE = "online"
    OFFLINE = "offline"
    SUBSTITUTE = "substitute"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_ALLOWED: dict[ConnectionStatus, frozenset[ConnectionStatus]] = {
    ConnectionStatus.CONNECTING: frozenset(
        {ConnectionStatus.ONLINE, ConnectionStatus.OFFLINE, ConnectionStatus.SUBSTITUTE}
    ),
    # A refresh or retry starts a new live cycle from CONNECTING.
    ConnectionStatus.ONLINE: frozenset({ConnectionStatus.CONNECTING, ConnectionStatus.SUBSTITUTE}),
    ConnectionStatus.OFFLINE: frozenset({ConnectionStatus.CONNECTING, ConnectionStatus.SUBSTITUTE}),
    ConnectionStatus.SUBSTITUTE: frozenset({ConnectionStatus.CONNECTING}),
}

StatusListener = Callable[[str], None]


class ConnectionState:
    """Current synchronization status with enforced transition rules."""

    def __init__(self, initial: ConnectionStatus = ConnectionStatus.CONNECTING) -> None:
        self._status = initial
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def label(self) -> str:
        return self._status.label

    def can_transition(self, target: ConnectionStatus) -> bool:
        return target == self._status or target in _ALLOWED[self._status]

    def add_listener(self, listener: StatusListener) -> Callable[[], None]:
        """Register *listener* for status labels. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def transition(self, target: ConnectionStatus) -> bool:
        """Move to *target*.

        Returns ``False`` (and reports nothing) when already in *target*.

        Raises
        ------
        ConnectionTransitionError
            The transition is not one of the legal ones.
        """
        if target == self._status:
            return False
        if target not in _ALLOWED[self._status]:
            raise ConnectionTransitionError(f"Illegal connection transition {self._status.value} -> {target.value}")
        _logger.debug("Connection status %s -> %s", self._status.value, target.value)
        self._status = target
        self._announce()
        return True

    def announce(self) -> None:
        """Report the current label without changing state (used at startup)."""
        self._announce()

    def _announce(self) -> None:
        label = self._status.label
        for listener in list(self._listeners):
            listener(label)
