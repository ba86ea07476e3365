#!/usr/bin/env python3
"""Watch a device's position against the clock-in perimeters until Ctrl+C.

The position is read from a JSON fix file, e.g. one kept current by a GPS
daemon: ``{"lat": 51.51, "lng": -0.13}`` or ``{"error": "no fix"}``.
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Callable

from rich.console import Console
from sqlmodel import Session

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core import config  # noqa: E402
from db.session import engine  # noqa: E402
from models.location import LocationSample  # noqa: E402
from services.location_monitor import LocationMonitor  # noqa: E402
from services.shift_service import load_perimeters  # noqa: E402
from utils.geofence import PerimeterCheck, PerimeterStatus  # noqa: E402

console = Console()

STATUS_STYLES = {
    PerimeterStatus.WITHIN: "bold green",
    PerimeterStatus.OUTSIDE: "bold red",
    PerimeterStatus.INDETERMINATE: "bold yellow",
    PerimeterStatus.UNAVAILABLE: "bold magenta",
}


def fix_file_sensor(path: str) -> Callable[[], LocationSample]:
    """Sensor that re-reads ``path`` on every sample. A missing or bad file raises."""

    def read() -> LocationSample:
        with open(path) as f:
            return LocationSample.model_validate(json.load(f))

    return read


def db_perimeters():
    with Session(engine) as session:
        return load_perimeters(session)


def describe(sample: LocationSample, check: PerimeterCheck) -> str:
    style = STATUS_STYLES[check.status]
    line = f"[{style}]{check.status.value.upper()}[/{style}]"

    if sample.available:
        line += f"  ({sample.lat:.5f}, {sample.lng:.5f})"
    if check.matched is not None:
        line += f"  in '{check.matched.name}'"
    elif check.distance_km is not None:
        line += f"  nearest perimeter {check.distance_km:.2f} km away"
    if check.reason:
        line += f"  {check.reason}"

    line += "  clock-in allowed" if check.allows_clock_in else "  clock-in blocked"
    return line


async def main(fix_file: str, interval: int) -> None:
    monitor = LocationMonitor(
        fix_file_sensor(fix_file),
        db_perimeters,
        interval_seconds=interval,
        on_check=lambda sample, check: console.print(describe(sample, check)),
    )
    monitor.start()
    try:
        await asyncio.Event().wait()
    finally:
        await monitor.stop()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("fix_file", help="JSON file holding the latest location fix")
    parser.add_argument("--interval", type=int, default=config.LOCATION_POLL_SECONDS)
    args = parser.parse_args()

    try:
        asyncio.run(main(args.fix_file, args.interval))
    except KeyboardInterrupt:
        console.print("\n[bold cyan]Location watch stopped.[/bold cyan]")
