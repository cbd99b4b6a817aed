#!/usr/bin/env python3
"""Reconcile the fleet roster once and print what came back.

Runs one full reconciliation pass against the configured record stores
and prints the vehicle load table, the fleet summary and every warning.

Usage
-----
Set environment variables and run::

    export FLEET_RIDER_SHARDS="CSE=https://.../cse,CSBS=https://.../csbs"
    export FLEET_OPERATOR_URL="https://.../operators"
    export FLEET_VEHICLE_URL="https://.../vehicles"
    export FLEET_ROUTE_URL="https://.../routes"
    python scripts/dump_roster.py

Options::

    --json               Output the snapshot as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --export-dir DIR     Also write one CSV per collection into DIR
    --verbose            DEBUG logging (redacted request tracing)
"""

from __future__ import annotations

import argparse
import asyncio
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

from fleetroster import RosterClient, RosterConfig, RosterSnapshot, export_csv  # noqa: E402
from fleetroster.analysis.queries import summarize  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _render_text(snapshot: RosterSnapshot) -> str:
    summary = summarize(snapshot.riders, snapshot.operators, snapshot.vehicles, snapshot.load_records)
    lines = [_section("Fleet summary")]
    for key, value in summary.model_dump().items():
        lines.append(f"  {key}: {value}")

    lines.append(_section("Vehicle load"))
    lines.append(f"  {'vehicle':<10} {'riders':>6} {'cap':>5} {'util':>6}  {'status':<14} recommendation")
    for record in snapshot.load_records:
        cap = f"{record.capacity}*" if record.capacity_defaulted else str(record.capacity)
        lines.append(
            f"  {record.vehicle_no:<10} {record.assigned_riders:>6} {cap:>5} {record.utilization:>5}%"
            f"  {record.classification:<14} {record.recommendation}"
        )
    if any(record.capacity_defaulted for record in snapshot.load_records):
        lines.append("  * fleet default capacity")

    lines.append(_section(f"Warnings ({len(snapshot.warnings)})"))
    for warning in snapshot.warnings:
        lines.append(f"  {warning}")
    return "\n".join(lines)


def _render_json(snapshot: RosterSnapshot) -> str:
    payload: dict[str, Any] = snapshot.model_dump(mode="json", exclude={"enriched_riders", "enriched_operators"})
    payload["load_records"] = [record.to_row() for record in snapshot.load_records]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _export(snapshot: RosterSnapshot, directory: Path) -> list[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    collections: dict[str, Any] = {
        "riders_data": snapshot.enriched_riders,
        "operators_data": snapshot.enriched_operators,
        "vehicles_data": snapshot.vehicles,
        "routes_data": snapshot.routes,
        "vehicle_load_analysis": snapshot.load_records,
    }
    written: list[Path] = []
    for name, records in collections.items():
        filename, text = export_csv(records, name)
        path = directory / filename
        path.write_text(text, encoding="utf-8")
        written.append(path)
    return written


# ── main ─────────────────────────────────────────────────────


async def _run(args: argparse.Namespace) -> int:
    config = RosterConfig.from_env(api_trace_enabled=args.verbose)
    async with RosterClient(config) as client:
        snapshot = await client.reconcile()

    output = _render_json(snapshot) if args.json else _render_text(snapshot)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
    else:
        print(output)

    if args.export_dir:
        for path in _export(snapshot, Path(args.export_dir)):
            print(f"wrote {path}", file=sys.stderr)

    return 0 if snapshot.riders or not snapshot.warnings else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Reconcile the fleet roster and print the load analysis.")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--output", help="Write output to FILE")
    parser.add_argument("--export-dir", help="Write one CSV per collection into DIR")
    parser.add_argument("--verbose", action="store_true", help="DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
