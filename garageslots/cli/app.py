"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.snapshot_file import SnapshotFileSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SchedulingError
from ..services.scheduling import SchedulingService

app = typer.Typer(
    name="garageslots",
    help="Resolve bookable slots and employee availability for the garage",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", "-d", help="Snapshot file (YAML/JSON) with bookings, employees and work orders")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Garage scheduling tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the config file; a missing default config means built-in defaults."""
    config_path = config_file or get_default_config_path()
    if config_file is None and not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig, data_file: Optional[Path]) -> SchedulingService:
    snapshot_path = data_file or config.snapshot_file
    if snapshot_path is None:
        console.print("[bold red]Error:[/bold red] No snapshot file given. Use --data or set snapshot_file in the config.")
        raise typer.Exit(1)

    business_hours = config.business_hours.to_business_hours() if config.business_hours else None
    source = SnapshotFileSource(snapshot_path, business_hours=business_hours)

    return SchedulingService(source, default_duration_minutes=config.default_duration_minutes)


def _fail(exc: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(1)


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Local calendar date (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    capacity: Annotated[Optional[int], typer.Option("--capacity", help="Override the per-slot capacity")] = None,
):
    """
    List the bookable slots of a day with their remaining capacity.

    Examples:

        garageslots slots 2024-11-25 --data snapshot.yaml
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        business_hours = asyncio.run(service.business_hours())
        day_slots = asyncio.run(service.slots_for_date(date, capacity=capacity))
    except (SchedulingError, FileNotFoundError) as e:
        _fail(e)

    if not day_slots:
        console.print("[yellow]No slots fit into the business hours of this day.[/yellow]")
        return

    table = Table(
        title=f"Slots for {date} ({business_hours.timezone})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Start", style="bold")
    table.add_column("End")
    table.add_column("Capacity", justify="right")
    table.add_column("Status")

    for slot in day_slots:
        local_start, local_end = slot.interval.local_bounds(business_hours.timezone)
        status = "[green]open[/green]" if slot.is_available else "[red]full[/red]"
        table.add_row(
            local_start.format("HH:mm"),
            local_end.format("HH:mm"),
            str(slot.capacity),
            status
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def availability(
    start: Annotated[Optional[str], typer.Option("--start", help="Window start (ISO-8601). Defaults to now.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Window length in minutes")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show which employees are free or busy during a time window.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        result = asyncio.run(service.employee_availability(start=start, duration_minutes=duration))
    except (SchedulingError, FileNotFoundError) as e:
        _fail(e)

    summary = result.summary
    console.print(
        f"\n[bold cyan]Window:[/bold cyan] {result.window.start.to_iso8601_string()} - "
        f"{result.window.end.to_iso8601_string()} ({result.window.duration_minutes()} min)"
    )
    console.print(
        f"[bold]{summary.available_count}[/bold] available, "
        f"[bold]{summary.busy_count}[/bold] busy of {summary.total_employees} employees\n"
    )

    available_table = Table(title="Available", header_style="bold green")
    available_table.add_column("Name", style="bold")
    available_table.add_column("Title", style="dim")
    for employee in result.available:
        available_table.add_row(employee.full_name, employee.title or "")

    busy_table = Table(title="Busy", header_style="bold red")
    busy_table.add_column("Name", style="bold")
    busy_table.add_column("Busy from")
    busy_table.add_column("Busy until")
    for entry in result.busy:
        busy_table.add_row(
            entry.employee.full_name,
            entry.busy_from.to_iso8601_string(),
            entry.busy_until.to_iso8601_string()
        )

    console.print(available_table)
    console.print(busy_table)
    console.print()


@app.command()
def check_booking(
    customer: Annotated[str, typer.Option("--customer", help="Customer id")],
    start: Annotated[str, typer.Option("--start", help="Requested start (ISO-8601)")],
    duration: Annotated[Optional[int], typer.Option("--duration", help="Total service duration in minutes")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Check whether a customer may pre-book a window.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        window = asyncio.run(
            service.check_prebooking(
                customer_id=customer,
                start=start,
                duration_minutes=duration if duration is not None else config.default_duration_minutes,
            )
        )
    except (SchedulingError, FileNotFoundError) as e:
        _fail(e)

    console.print(Panel.fit(
        f"[bold green]Pre-booking accepted[/bold green]\n\n"
        f"[bold]Customer:[/bold] {customer}\n"
        f"[bold]Window:[/bold] {window.start.to_iso8601_string()} - {window.end.to_iso8601_string()}",
        title="Booking check"
    ))


@app.command()
def walkin(
    employee: Annotated[Optional[str], typer.Option("--employee", help="Employee to assign directly")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Total service duration in minutes")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Plan a walk-in starting now.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        plan = asyncio.run(
            service.plan_walkin(
                employee_id=employee,
                duration_minutes=duration if duration is not None else config.default_duration_minutes,
            )
        )
    except (SchedulingError, FileNotFoundError) as e:
        _fail(e)

    if plan.employee_id is None:
        console.print("[cyan]No employee requested: the work order goes to the open queue.[/cyan]")
    elif plan.employee_available:
        console.print(f"[green]Employee {plan.employee_id} is free: work order ASSIGNED.[/green]")
    else:
        console.print(
            f"[yellow]Employee {plan.employee_id} is busy until "
            f"{plan.busy_until.to_iso8601_string()}: work order WAITING.[/yellow]"
        )


@app.command()
def show_config(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show the effective business hours.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, data_file)
        business_hours = asyncio.run(service.business_hours())
        business_hours.validate()
    except (SchedulingError, FileNotFoundError) as e:
        _fail(e)

    table = Table(title="Business hours", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="bold yellow")
    table.add_column("Value")
    table.add_row("Timezone", business_hours.timezone)
    table.add_row("Open", f"{business_hours.open_time} - {business_hours.close_time}")
    table.add_row("Slot", f"{business_hours.slot_minutes} min (+{business_hours.buffer_minutes} min buffer)")
    table.add_row("Capacity per slot", str(business_hours.slot_capacity))
    table.add_row("Customer booking", "enabled" if business_hours.allow_customer_booking else "disabled")

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]garageslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
