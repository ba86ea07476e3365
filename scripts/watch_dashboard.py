#!/usr/bin/env python3
"""Manager dashboard in the terminal, refreshed on a fixed interval until Ctrl+C."""

import argparse
import asyncio
import os
import sys

from rich.console import Console
from rich.table import Table
from sqlmodel import Session

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api.admin_analytics_routes import fetch_records_since  # noqa: E402
from core import config  # noqa: E402
from db.session import engine  # noqa: E402
from services import analytics  # noqa: E402
from services.polling import PeriodicTask  # noqa: E402

console = Console()


def render_dashboard(days: int) -> None:
    # StoreFailure propagates to PeriodicTask, which logs it and keeps polling
    with Session(engine) as session:
        records = fetch_records_since(session, days=days)

    summary = analytics.summarize(records, config.APP_TIMEZONE)
    daily = analytics.daily_series(records, days, config.APP_TIMEZONE)
    avg_hours = analytics.daily_avg_hours_series(records, days, config.APP_TIMEZONE)
    top_staff = analytics.top_staff_by_hours(records, days, config.TOP_STAFF_DEFAULT)

    console.rule("[bold cyan]Manager Dashboard[/bold cyan]")
    console.print(
        f"Active staff: [bold]{summary.active_staff}[/bold]   "
        f"Hours today: [bold]{summary.total_hours_today:.1f}[/bold]   "
        f"Avg hours/shift: [bold]{summary.avg_hours_per_shift:.1f}[/bold]"
    )

    series_table = Table(title=f"Last {days} days")
    series_table.add_column("Day")
    series_table.add_column("Clock-ins", justify="right")
    series_table.add_column("Avg hours", justify="right")
    for count_point, hours_point in zip(daily, avg_hours):
        series_table.add_row(
            count_point.day.strftime("%a %d %b"),
            str(int(count_point.value)),
            f"{hours_point.value:.1f}",
        )
    console.print(series_table)

    staff_table = Table(title="Top staff by hours")
    staff_table.add_column("Name")
    staff_table.add_column("Hours", justify="right")
    for staff in top_staff:
        staff_table.add_row(staff.name, f"{staff.hours:.1f}")
    console.print(staff_table)


async def main(days: int, interval: int) -> None:
    task = PeriodicTask(interval, lambda: render_dashboard(days), name="dashboard-refresh")
    task.start()
    try:
        # Runs until interrupted
        await asyncio.Event().wait()
    finally:
        await task.stop()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--days", type=int, default=7, help="7 for a week, 30 for a month")
    parser.add_argument("--interval", type=int, default=config.DASHBOARD_REFRESH_SECONDS)
    args = parser.parse_args()

    try:
        asyncio.run(main(args.days, args.interval))
    except KeyboardInterrupt:
        console.print("\n[bold cyan]Dashboard stopped.[/bold cyan]")
