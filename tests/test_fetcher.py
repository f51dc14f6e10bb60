from __future__ import annotations

import asyncio
import copy
from datetime import UTC, datetime
from typing import Any

import pytest

from fleetsync.exceptions import FleetBestEffortError, FleetFetchError, FleetTransportError
from fleetsync.fetcher import REQUIRED_ENDPOINTS, SnapshotFetcher
from fleetsync.models import AdminConfig

API = "https://api.test"

LIVE: dict[str, Any] = {
    "/api/info": {"last_snapshot_utc": "2025-08-01T00:00:00Z"},
    "/api/kpis": {"fleet_size": 2, "mtd_miles": 1200},
    "/api/assets": [
        {"id": "1", "name": "Truck 1", "vin": "V1", "last_known_odo": 1000, "miles_7d": 50, "active_faults": 0,
         "maint_status": "OK"},
        {"id": "2", "name": "Truck 2", "vin": "V2", "last_known_odo": 2000, "miles_7d": 10, "active_faults": 1,
         "maint_status": "OVERDUE"},
    ],
    "/api/maintenance/due": [{"asset_name": "Truck 2", "service_type": "Oil", "status": "OVERDUE"}],
    "/api/faults/activeSummary": [{"asset_name": "Truck 2", "code": "P0300", "severity": "High", "is_active": True}],
    "/api/miles/monthly?months=12": [{"asset_name": "Truck 1", "month": "2025-07", "miles": 300}],
}


class _FakeTransport:
    """Serves canned payloads keyed by endpoint; unknown endpoints answer 404."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, str, Any]] = []

    async def _answer(self, method: str, url: str, payload: Any, endpoint: str | None) -> Any:
        self.calls.append((method, url, payload))
        key = endpoint or url
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if key not in self.routes:
            raise FleetTransportError(f"HTTP 404 from {key}", status_code=404, endpoint=key)
        value = self.routes[key]
        if isinstance(value, BaseException):
            raise value
        return copy.deepcopy(value)

    async def get_json(self, url: str, *, endpoint: str | None = None) -> Any:
        return await self._answer("GET", url, None, endpoint)

    async def post_json(self, url: str, payload: Any = None, *, endpoint: str | None = None) -> Any:
        return await self._answer("POST", url, payload, endpoint)


def _server_error(endpoint: str) -> FleetTransportError:
    return FleetTransportError(f"HTTP 500 from {endpoint}", status_code=500, endpoint=endpoint)


@pytest.mark.asyncio
async def test_fetch_assembles_snapshot_from_all_endpoints() -> None:
    transport = _FakeTransport(dict(LIVE))

    snapshot = await SnapshotFetcher(transport, api_base=API).fetch()

    assert sorted(url for _, url, _ in transport.calls) == sorted(API + e for e in REQUIRED_ENDPOINTS)
    assert snapshot.info.last_snapshot_utc == datetime(2025, 8, 1, tzinfo=UTC)
    assert snapshot.kpis.fleet_size == 2
    assert [asset.raw for asset in snapshot.assets] == LIVE["/api/assets"]
    assert snapshot.maintenance[0].service_type == "Oil"
    assert snapshot.faults[0].code == "P0300"
    assert snapshot.miles[0].miles == 300.0
    # Nested KPI collections absent from the payload still exist.
    assert snapshot.kpis.daily_miles_60d == ()
    assert snapshot.kpis.top_recurring_faults == ()


@pytest.mark.asyncio
async def test_fetch_requests_everything_before_any_response() -> None:
    transport = _FakeTransport(dict(LIVE))
    gate = asyncio.Event()
    transport.gates["/api/info"] = gate

    task = asyncio.create_task(SnapshotFetcher(transport).fetch())
    for _ in range(5):
        await asyncio.sleep(0)

    assert len(transport.calls) == len(REQUIRED_ENDPOINTS)
    assert not task.done()

    gate.set()
    snapshot = await task
    assert len(snapshot.assets) == 2


@pytest.mark.asyncio
async def test_one_failing_endpoint_fails_the_whole_fetch() -> None:
    routes = dict(LIVE)
    routes["/api/faults/activeSummary"] = _server_error("/api/faults/activeSummary")
    transport = _FakeTransport(routes)

    with pytest.raises(FleetFetchError) as excinfo:
        await SnapshotFetcher(transport).fetch()

    assert excinfo.value.endpoints == ("/api/faults/activeSummary",)
    assert excinfo.value.failures[0].status_code == 500
    # Every request still settled before the failure was reported.
    assert len(transport.calls) == len(REQUIRED_ENDPOINTS)


@pytest.mark.asyncio
async def test_every_failure_is_reported_in_request_order() -> None:
    routes = dict(LIVE)
    del routes["/api/info"]
    del routes["/api/miles/monthly?months=12"]

    with pytest.raises(FleetFetchError) as excinfo:
        await SnapshotFetcher(_FakeTransport(routes)).fetch()

    assert excinfo.value.endpoints == ("/api/info", "/api/miles/monthly?months=12")


@pytest.mark.asyncio
async def test_unexpected_errors_propagate() -> None:
    routes = dict(LIVE)
    routes["/api/kpis"] = RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await SnapshotFetcher(_FakeTransport(routes)).fetch()


@pytest.mark.asyncio
async def test_null_payloads_become_empty_defaults() -> None:
    routes = {endpoint: None for endpoint in REQUIRED_ENDPOINTS}

    snapshot = await SnapshotFetcher(_FakeTransport(routes)).fetch()

    assert snapshot.info.last_snapshot_utc is None
    assert snapshot.kpis.fleet_size is None
    assert snapshot.assets == ()
    assert snapshot.maintenance == ()
    assert snapshot.faults == ()
    assert snapshot.miles == ()


@pytest.mark.asyncio
async def test_admin_config_is_best_effort() -> None:
    fetcher = SnapshotFetcher(_FakeTransport({}))
    with pytest.raises(FleetBestEffortError):
        await fetcher.fetch_admin_config()


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, {}, []])
async def test_empty_admin_config_is_none(payload: Any) -> None:
    fetcher = SnapshotFetcher(_FakeTransport({"/api/admin/config": payload}))
    assert await fetcher.fetch_admin_config() is None


@pytest.mark.asyncio
async def test_admin_config_parses() -> None:
    fetcher = SnapshotFetcher(_FakeTransport({"/api/admin/config": {"fy_start_month": 1, "due_soon_days": 0}}))

    config = await fetcher.fetch_admin_config()

    assert config is not None
    assert config.fy_start_month == 1
    assert config.due_soon_days == 15


@pytest.mark.asyncio
async def test_trigger_refresh_posts_and_wraps_failures() -> None:
    transport = _FakeTransport({"/api/refresh-now": None})
    fetcher = SnapshotFetcher(transport, api_base=API)

    await fetcher.trigger_refresh()
    assert transport.calls == [("POST", API + "/api/refresh-now", None)]

    transport.routes["/api/refresh-now"] = _server_error("/api/refresh-now")
    with pytest.raises(FleetBestEffortError):
        await fetcher.trigger_refresh()


@pytest.mark.asyncio
async def test_save_admin_config_posts_payload() -> None:
    transport = _FakeTransport({"/api/admin/config": None})
    config = AdminConfig(fy_start_month=10)

    await SnapshotFetcher(transport).save_admin_config(config)

    method, url, payload = transport.calls[0]
    assert (method, url) == ("POST", "/api/admin/config")
    assert payload == config.to_payload()


@pytest.mark.asyncio
async def test_save_admin_config_raises_transport_errors() -> None:
    with pytest.raises(FleetTransportError):
        await SnapshotFetcher(_FakeTransport({})).save_admin_config(AdminConfig())


@pytest.mark.asyncio
async def test_fetch_asset_detail_quotes_id() -> None:
    routes = {
        "/api/miles/asset/a%2F1?months=12": [{"month": "2025-07", "miles": 12}],
        "/api/faults/history/a%2F1": [{"code": "P0001"}],
        "/api/maintenance/asset/a%2F1": [],
    }

    detail = await SnapshotFetcher(_FakeTransport(routes)).fetch_asset_detail("a/1")

    assert detail.miles[0].miles == 12.0
    assert detail.faults[0].code == "P0001"
    assert detail.services == ()


@pytest.mark.asyncio
async def test_fetch_asset_detail_all_or_nothing() -> None:
    routes = {"/api/miles/asset/7?months=12": []}
    with pytest.raises(FleetFetchError) as excinfo:
        await SnapshotFetcher(_FakeTransport(routes)).fetch_asset_detail("7")
    assert excinfo.value.endpoints == ("/api/faults/history/7", "/api/maintenance/asset/7")


@pytest.mark.asyncio
async def test_admin_config_with_odd_values_uses_defaults() -> None:
    payload = {"fy_start_month": 10**400, "due_soon_miles": "lots", "raw": "x"}
    fetcher = SnapshotFetcher(_FakeTransport({"/api/admin/config": payload}))

    config = await fetcher.fetch_admin_config()

    assert config is not None
    assert config.fy_start_month == 7
    assert config.due_soon_miles == 500


@pytest.mark.asyncio
async def test_unparseable_admin_config_is_best_effort(monkeypatch: pytest.MonkeyPatch) -> None:
    def _explode(payload: Any) -> AdminConfig:
        raise OverflowError("int too large to convert to float")

    monkeypatch.setattr(AdminConfig, "model_validate", _explode)
    fetcher = SnapshotFetcher(_FakeTransport({"/api/admin/config": {"fy_start_month": 1}}))

    with pytest.raises(FleetBestEffortError, match="Malformed admin config"):
        await fetcher.fetch_admin_config()
