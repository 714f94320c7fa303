"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_store import JsonDataStore
from ..adapters.rest_store import RestDataStore
from ..adapters.rows import parse_time_of_day
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BarberSlotsError
from ..domain.models import ServiceSelection
from ..domain.slot_calculator import SlotAvailabilityCalculator
from ..services.availability import AvailabilityService, DataStoreProtocol

app = typer.Typer(
    name="barberslots",
    help="Find bookable appointment slots for a barber",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Barbershop slot availability.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _parse_date(value: Optional[str], tz: str) -> DateTime:
    """Parse YYYY-MM-DD in the shop's timezone, defaulting to today."""
    if not value:
        return pendulum.today(tz)

    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError as e:
        console.print(f"[red]Error parsing date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _build_data_store(config: AppConfig, mock: bool, data_file: Optional[Path]) -> DataStoreProtocol:
    """Use the JSON store for mock runs or when no backend is configured."""
    if mock or data_file or config.backend is None:
        logger.debug("Using JSON data store %s", data_file or "(bundled sample)")
        return JsonDataStore(data_file=data_file, timezone=config.timezone)

    return RestDataStore(
        base_url=config.backend.url,
        api_key=config.backend.api_key,
        timezone=config.timezone
    )


def _build_service(config: AppConfig, mock: bool, data_file: Optional[Path]) -> AvailabilityService:
    calculator = SlotAvailabilityCalculator(
        business_hours=config.business_hours.to_business_hours()
    )
    return AvailabilityService(
        data_store=_build_data_store(config, mock, data_file),
        calculator=calculator,
        tenant_id=config.tenant_id,
    )


@app.command()
def slots(
    barber: Annotated[str, typer.Argument(help="Barber id or name")],
    service: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service id or name; repeat for several.")] = None,
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Day (YYYY-MM-DD). Defaults to today.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use the bundled sample data instead of the backend.")] = False,
    data_file: Annotated[Optional[Path], typer.Option("--data", help="JSON data file to read instead of the backend.")] = None,
    only_available: Annotated[bool, typer.Option("--only-available", help="Hide unavailable slots.")] = False,
):
    """
    Show the day's slots for a barber.

    Examples:

        barberslots slots joao --service corte --date 2026-10-19 --mock

        barberslots slots b1 -s corte -s barba --only-available
    """
    try:
        config = _load_config(config_file)
        day = _parse_date(date, config.timezone)

        barber_entry = config.resolve_barber(barber)
        selection = ServiceSelection(tuple(config.resolve_services(service or [])))
        catalog = config.catalog()
        total_duration = selection.total_duration(catalog)
        total_price = selection.total_price(catalog)

        availability = _build_service(config, mock, data_file)
        day_slots = availability.find_slots(
            barber_id=barber_entry.id,
            date=day,
            total_duration=total_duration,
        )

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    console.print(f"[bold cyan]{barber_entry.name}[/bold cyan] on {day.format('dddd, DD.MM.YYYY')}")
    console.print(f"   Services: {', '.join(selection.service_ids) or '-'}")
    console.print(f"   Total duration: {total_duration} min | Total price: {total_price:.2f}")
    console.print()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold")
    table.add_column("Status")

    shown = [s for s in day_slots if s.available or not only_available]
    for slot in shown:
        status = "[green]available[/green]" if slot.available else f"[red]{slot.conflict_reason}[/red]"
        table.add_row(slot.label(), status)

    if not shown:
        console.print("[yellow]⚠ No available slots on this day.[/yellow]")
    else:
        console.print(table)

    available_count = sum(1 for s in day_slots if s.available)
    console.print(f"\n[bold green]{available_count}[/bold green] of {len(day_slots)} slot(s) available.\n")


@app.command()
def shift(
    barber: Annotated[str, typer.Argument(help="Barber id or name")],
    at: Annotated[str, typer.Argument(help="Start time (HH:mm)")],
    service: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service id or name; repeat for several.")] = None,
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Day (YYYY-MM-DD). Defaults to today.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use the bundled sample data instead of the backend.")] = False,
    data_file: Annotated[Optional[Path], typer.Option("--data", help="JSON data file to read instead of the backend.")] = None,
):
    """
    Check whether an appointment fits inside the barber's shift.
    """
    try:
        config = _load_config(config_file)
        day = _parse_date(date, config.timezone)
        start = parse_time_of_day(at)

        barber_entry = config.resolve_barber(barber)
        selection = ServiceSelection(tuple(config.resolve_services(service or [])))
        duration = selection.total_duration(config.catalog())

        availability = _build_service(config, mock, data_file)
        check = availability.check_shift(
            barber_id=barber_entry.id,
            date=day,
            at=start,
            duration_minutes=duration,
        )

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if check.available:
        console.print(f"[green]✓ {barber_entry.name} is on shift at {at} for {duration} min.[/green]")
    else:
        console.print(f"[yellow]✗ Not within shift: {check.reason}[/yellow]")
        raise typer.Exit(2)


@app.command()
def barbers(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured barbers.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.barbers:
        console.print("[yellow]No barbers defined in the config file.[/yellow]")
        return

    table = Table(title="Barbers", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold yellow")

    for entry in config.barbers:
        table.add_row(entry.id, entry.name)

    console.print()
    console.print(table)
    console.print()


@app.command()
def services(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List the service catalog.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.services:
        console.print("[yellow]No services defined in the config file.[/yellow]")
        return

    table = Table(title="Services", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Duration", justify="right")
    table.add_column("Price", justify="right")

    for entry in config.services:
        table.add_row(entry.id, entry.name, f"{entry.duration_minutes} min", f"{entry.price:.2f}")

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
