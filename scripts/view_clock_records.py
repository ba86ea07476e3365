#!/usr/bin/env python3
"""Script to view recent clock records (the manager staff table) in the terminal."""

import argparse
import os
import sys

from rich.console import Console
from rich.pretty import pprint
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

# This assumes the script is in the 'scripts' directory and models/db sit at the project root
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core import config  # noqa: E402
from db.session import engine  # noqa: E402
from models.clock_record import ClockRecord  # noqa: E402
from services.analytics import RecordStatusFilter, filter_records  # noqa: E402
from services.shift_service import format_duration  # noqa: E402
from utils.timezone_helpers import from_utc_to_local  # noqa: E402

console = Console()


def format_optional(value):
    return str(value) if value is not None else "-"


def format_local(dt):
    if dt is None:
        return "-"
    return from_utc_to_local(dt, config.APP_TIMEZONE).strftime("%Y-%m-%d %H:%M:%S")


def view_clock_records(limit: int, status: RecordStatusFilter, search: str | None):
    """Connects to the database and prints the most recent clock records."""
    console.print("[bold cyan]Fetching clock records...[/bold cyan]")

    try:
        with Session(engine) as session:
            records = session.exec(
                select(ClockRecord).order_by(ClockRecord.clock_in_timestamp.desc()).limit(limit)
            ).all()
    except SQLAlchemyError as e:
        console.print("[bold red]Database error occurred:[/bold red]")
        pprint(e)
        return

    records = filter_records(records, config.APP_TIMEZONE, status=status, search=search)
    if not records:
        console.print("[yellow]No clock records found.[/yellow]")
        return

    table = Table(title="[bold green]Clock Records[/bold green]", show_lines=True)
    for col in ["Name", "Clock In", "Clock Out", "Duration", "Status", "Clock-In Note", "Clock-Out Note"]:
        table.add_column(col, overflow="fold")

    for record in records:
        table.add_row(
            record.worker_display_name,
            format_local(record.clock_in_at),
            format_local(record.clock_out_at),
            format_duration(record),
            "[green]Active[/green]" if record.is_open else "Completed",
            format_optional(record.clock_in_note),
            format_optional(record.clock_out_note),
        )

    console.print(table)
    console.print(f"\n[bold cyan]Total records shown: {len(records)}[/bold cyan]")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--limit", type=int, default=50)
    parser.add_argument(
        "--status",
        choices=[choice.value for choice in RecordStatusFilter],
        default=RecordStatusFilter.ALL.value,
    )
    parser.add_argument("--search", default=None)
    args = parser.parse_args()

    view_clock_records(args.limit, RecordStatusFilter(args.status), args.search)
