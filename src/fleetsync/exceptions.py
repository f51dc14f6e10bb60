"""Custom exception hierarchy for fleetsync."""

from __future__ import annotations

from collections.abc import Sequence


class FleetError(Exception):
    """Base exception for all fleetsync errors."""


class FleetConfigError(FleetError):
    """A configuration source could not be loaded or parsed.

    Always non-fatal: the loader falls through to the next source and
    finally to empty defaults.
    """


class FleetTransportError(FleetError):
    """HTTP-level failure (network, non-2xx, invalid JSON, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FleetFetchError(FleetError):
    """A required endpoint failed, so the whole sync cycle failed.

    ``failures`` holds the transport error of every endpoint that did
    not succeed, in request order.
    """

    def __init__(self, message: str, *, failures: Sequence[FleetTransportError] = ()) -> None:
        self.failures = tuple(failures)
        super().__init__(message)

    @property
    def endpoints(self) -> tuple[str, ...]:
        return tuple(failure.endpoint for failure in self.failures)


class FleetValidationError(FleetError):
    """A substitute document does not match the production data contract."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = tuple(errors)
        super().__init__("Substitute document invalid: " + "; ".join(self.errors))


class FleetBestEffortError(FleetError):
    """An optional call failed (admin config, refresh trigger).

    Callers log it and carry on; it never changes the connection state.
    """


class ConnectionTransitionError(FleetError):
    """Illegal connection-state transition (a programming error)."""
