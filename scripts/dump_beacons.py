#!/usr/bin/env python3
"""Dump the live V16 beacon feed.

Fetches the DGT feed once, decodes it and prints the beacons, the
render groups for a viewport and a summary.

Usage
-----
::

    python scripts/dump_beacons.py
    python scripts/dump_beacons.py --zoom 8 --lat 41.39 --lon 2.17
    python scripts/dump_beacons.py --json --output beacons.json
    python scripts/dump_beacons.py --raw-file body.txt   # decode a saved body

Options::

    --zoom N            Viewport zoom (default from config)
    --lat/--lon DEG     Viewport center (default Madrid)
    --json              Output machine-readable JSON
    --output FILE       Write output to FILE instead of stdout
    --raw-file FILE     Decode a saved response body instead of fetching
    -v, --verbose       Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyv16 import (  # noqa: E402
    BeaconMarker,
    ClusterMarker,
    V16Client,
    V16Config,
    V16Error,
    decode_payload,
)

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _group_to_dict(group: BeaconMarker | ClusterMarker) -> dict[str, Any]:
    if isinstance(group, ClusterMarker):
        return {
            "type": "cluster",
            "count": group.count,
            "has_active": group.has_active,
            "latitude": group.latitude,
            "longitude": group.longitude,
            "x": round(group.position.x, 1),
            "y": round(group.position.y, 1),
        }
    return {
        "type": "beacon",
        "id": group.beacon.id,
        "active": group.beacon.is_active,
        "latitude": group.latitude,
        "longitude": group.longitude,
        "x": round(group.position.x, 1),
        "y": round(group.position.y, 1),
    }


# ── main ─────────────────────────────────────────────────────


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dump the DGT V16 beacon feed")
    parser.add_argument("--zoom", type=int, default=None)
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--json", dest="json_mode", action="store_true")
    parser.add_argument("--output", default=None)
    parser.add_argument("--raw-file", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


async def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.zoom is not None:
        overrides["initial_zoom"] = args.zoom
    if args.lat is not None:
        overrides["initial_latitude"] = args.lat
    if args.lon is not None:
        overrides["initial_longitude"] = args.lon
    config = V16Config.from_env(**overrides)

    result: dict[str, Any] = {"timestamp": datetime.now(UTC).isoformat()}

    async with V16Client(config) as client:
        try:
            if args.raw_file:
                client.store.replace(decode_payload(Path(args.raw_file).read_bytes()))
            else:
                await client.refresh()
        except V16Error as exc:
            print(f"!! refresh failed: {exc}", file=sys.stderr)
            return 1

        viewport = client.viewport
        beacons = client.beacons
        groups = client.render_groups()
        summary = client.summary()

        result["viewport"] = {"latitude": viewport.latitude, "longitude": viewport.longitude, "zoom": viewport.zoom}
        result["beacons"] = [b.model_dump() for b in beacons]
        result["dropped"] = [
            {"id": d.record_id, "situation_id": d.situation_id, "reason": d.reason} for d in client.store.dropped
        ]
        result["groups"] = [_group_to_dict(g) for g in groups]
        result["tiles"] = [client.tile_url(t) for t in client.visible_tiles()]
        result["summary"] = summary.model_dump()

        out: list[str] = []
        out.append(_section("pyv16 dump_beacons"))
        out.append(f"  time      : {result['timestamp']}")
        out.append(
            f"  viewport  : {viewport.latitude:.4f}, {viewport.longitude:.4f} "
            f"zoom {viewport.zoom} ({viewport.zoom_level_name})"
        )

        out.append(_section(f"BEACONS ({len(beacons)})"))
        for beacon in beacons:
            state = "ACTIVA" if beacon.is_active else "inactiva"
            out.append(
                f"  {beacon.display_name:<24} {state:<8} {beacon.road} km {beacon.km_marker:g} "
                f"({beacon.orientation}) {beacon.location} · {beacon.time_since_activation()}"
            )
        for dropped in client.store.dropped:
            out.append(f"  !! dropped id={dropped.record_id}: {dropped.reason}")

        out.append(_section(f"GROUPS ({len(groups)})"))
        for group in groups:
            d = _group_to_dict(group)
            label = f"cluster x{d['count']}" if d["type"] == "cluster" else f"beacon {d['id']}"
            out.append(f"  {label:<24} at ({d['x']:>8}, {d['y']:>8})")

        out.append(_section("SUMMARY"))
        out.append(summary.to_text())

    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False) if args.json_mode else "\n".join(out)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
