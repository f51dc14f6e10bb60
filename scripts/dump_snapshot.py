#!/usr/bin/env python3
"""Dump the fleet snapshot fleetsync assembles from a live backend.

Runs the same startup sequence as the dashboard (config fallback chain,
initial all-or-nothing sync) and prints the parsed snapshot, the header
and every tab's view model so you can check what a renderer would get.

Usage
-----
::

    python scripts/dump_snapshot.py --api-base https://fleet.example.com
    FLEETSYNC_CONFIG_URL=./config.json python scripts/dump_snapshot.py --json

Options::

    --api-base URL      Override API_BASE from the config file
    --config PATH       Primary config source (file path or URL)
    --timeout SECONDS   Per-request timeout
    --json              Output as machine-readable JSON
    --output FILE       Write output to FILE instead of stdout
    -v, --verbose       Debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetsync import DashboardConfig, DashboardController, TabId, ViewModelRenderer  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _view_to_dict(view: Any) -> Any:
    if dataclasses.is_dataclass(view) and not isinstance(view, type):
        return dataclasses.asdict(view)
    return view


async def dump(config: DashboardConfig, *, json_mode: bool) -> str:
    renderer = ViewModelRenderer()
    async with DashboardController(config, renderer=renderer) as dashboard:
        loaded = await dashboard.start()
        for tab in TabId:
            dashboard.renderer.render(dashboard.snapshot, dashboard.status, tab)

        result: dict[str, Any] = {
            "api_base": dashboard.api_base,
            "status": dashboard.status.value,
            "loaded": loaded,
            "snapshot": dashboard.snapshot.model_dump(mode="json", exclude={"raw"}),
            "header": _view_to_dict(renderer.header),
            "views": {tab.value: _view_to_dict(view) for tab, view in renderer.views.items()},
            "admin": renderer.admin.to_payload() if renderer.admin else None,
            "notifications": [f"{level.value}: {message}" for level, message in renderer.notifications],
        }

    if json_mode:
        return json.dumps(result, indent=2, default=str, ensure_ascii=False)

    out: list[str] = [_section(f"STATUS {result['status']}  api_base={result['api_base']!r}")]
    for line in result["notifications"]:
        out.append(f"  !! {line}")
    snapshot = dashboard.snapshot
    out.append(_section("SNAPSHOT"))
    out.append(f"  last_snapshot_utc: {snapshot.info.last_snapshot_utc}")
    out.append(f"  assets: {len(snapshot.assets)}")
    out.append(f"  maintenance: {len(snapshot.maintenance)}")
    out.append(f"  faults: {len(snapshot.faults)}")
    out.append(f"  miles: {len(snapshot.miles)}")
    if renderer.header is not None:
        out.append(_section("HEADER"))
        for tile in renderer.header.tiles:
            flag = " (!)" if tile.alert else ""
            out.append(f"  {tile.key}: {tile.value}{flag}")
        out.append(f"  {renderer.header.freshness}")
    for tab, view in renderer.views.items():
        out.append(_section(f"TAB {tab.value}"))
        out.append(json.dumps(_view_to_dict(view), indent=2, default=str, ensure_ascii=False))
    return "\n".join(out)


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump the fleet snapshot and view models for debugging / development.",
    )
    parser.add_argument("--api-base", help="Override API_BASE")
    parser.add_argument("--config", help="Primary config source (file path or URL)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    parser.add_argument("--output", help="Write output to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.api_base is not None:
        overrides["api_base"] = args.api_base
    if args.config is not None:
        overrides["config_url"] = args.config
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    config = DashboardConfig.from_env(**overrides)

    text = await dump(config, json_mode=args.json)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    asyncio.run(main())
