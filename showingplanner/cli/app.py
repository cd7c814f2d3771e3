"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, NoReturn, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ShowingPlannerError, TourSubmissionError
from ..domain.slot_planner import SlotPlanner
from ..adapters.api_client import ShowingApiClient
from ..adapters.mock_api_client import MockShowingApiClient
from ..services.scheduling import INDIVIDUAL, TOUR, SchedulingService

app = typer.Typer(
    name="showingplanner",
    help="Plan property showings and tours within agency business hours",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_service(ctx: typer.Context) -> tuple[AppConfig, SchedulingService]:
    """
    Load configuration and wire the scheduling service.

    The mock client replaces the REST client when ``--mock`` was given.
    """
    options = ctx.obj or {}
    config_path = options.get("config_file") or get_default_config_path()

    if options.get("mock") and not config_path.exists():
        config = AppConfig()
    else:
        config = AppConfig.load_from_yaml(config_path)

    if options.get("mock"):
        client = MockShowingApiClient(business_hours_file=config.mock.business_hours_file)
    else:
        client = ShowingApiClient(
            base_url=config.api.base_url,
            token=config.api.token,
            timeout=config.api.timeout_seconds
        )

    planner = SlotPlanner(
        slot_minutes=config.planner.slot_minutes,
        stop_minutes=config.planner.stop_minutes
    )
    return config, SchedulingService(hours_source=client, appointment_sink=client, planner=planner)


def _parse_day(value: str, tz: str) -> pendulum.Date:
    """Accept YYYY-MM-DD, 'today' or 'tomorrow' in the configured timezone."""
    keyword = value.strip().lower()
    if keyword == "today":
        return pendulum.today(tz).date()
    if keyword == "tomorrow":
        return pendulum.tomorrow(tz).date()

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def _fail(message: object) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(message))}")
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use the packaged business hours and an in-memory appointment store.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Plan property showings and tours within agency business hours.
    """
    _configure_logging(verbose)
    ctx.obj = {"config_file": config_file, "mock": mock}


@app.command()
def hours(ctx: typer.Context):
    """
    Show the weekly business-hours table.
    """
    try:
        _, service = _build_service(ctx)
        table_rows = asyncio.run(service.business_hours())
    except (FileNotFoundError, ValueError, ShowingPlannerError) as e:
        _fail(e)

    table = Table(
        title="Business hours",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Open")
    table.add_column("Close")

    for rule in table_rows:
        if rule.is_open:
            table.add_row(WEEKDAY_NAMES[rule.day_of_week], rule.open_time, rule.close_time)
        else:
            table.add_row(WEEKDAY_NAMES[rule.day_of_week], "[dim]closed[/dim]", "")

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    ctx: typer.Context,
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD, 'today' or 'tomorrow')")],
):
    """
    List the bookable windows for a date.
    """
    try:
        config, service = _build_service(ctx)
        selected = _parse_day(day, config.timezone)
        table_rows = asyncio.run(service.business_hours())
    except (FileNotFoundError, ValueError, ShowingPlannerError) as e:
        _fail(e)

    planner = service.planner
    today = pendulum.today(config.timezone).date()
    if not planner.is_bookable_date(selected, table_rows, today):
        console.print(f"[yellow]⚠ {selected.to_date_string()} cannot be booked (past date or closed day).[/yellow]")
        return

    labels = planner.format_slots(selected, table_rows)
    if not labels:
        console.print(f"[yellow]⚠ No slots available on {selected.to_date_string()}.[/yellow]")
        return

    console.print(f"[bold green]✓ {len(labels)} slot(s) on {selected.to_date_string()}:[/bold green]\n")
    for label in labels:
        console.print(f"  {label}")
    console.print()


@app.command("plan-tour")
def plan_tour(
    ctx: typer.Context,
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD, 'today' or 'tomorrow')")],
    slot: Annotated[str, typer.Argument(help="Slot as shown by 'slots', e.g. '10:00 - 11:00'")],
    properties: Annotated[List[str], typer.Argument(help="Property ids in visiting order")],
):
    """
    Check whether a tour fits a slot and show each stop's start time.
    """
    try:
        config, service = _build_service(ctx)
        selected = _parse_day(day, config.timezone)
        plan = asyncio.run(service.plan_tour(property_ids=properties, day=selected, slot_label=slot))
    except (FileNotFoundError, ValueError, ShowingPlannerError) as e:
        _fail(e)

    if not plan.valid:
        console.print(f"[bold red]✗ {plan.reason}[/bold red]")
        raise typer.Exit(1)

    # Booking a one-property tour sends a single appointment without a tour id
    if len(plan.stops) == 1:
        stop = plan.stops[0]
        console.print(
            f"[yellow]Single property: {escape(stop.property_id)} is booked as one "
            f"appointment at {stop.start_time}, without a tour id.[/yellow]"
        )
        return

    table = Table(title=f"Tour {plan.tour_group_id}", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Property", style="bold yellow")
    table.add_column("Start")
    table.add_column("Offset (min)", justify="right")

    for index, stop in enumerate(plan.stops, 1):
        table.add_row(str(index), stop.property_id, stop.start_time, str(stop.offset_minutes))

    console.print()
    console.print(table)
    console.print(f"Uses {plan.required_minutes} of {plan.available_minutes} minutes.\n")


@app.command()
def book(
    ctx: typer.Context,
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD, 'today' or 'tomorrow')")],
    slot: Annotated[str, typer.Argument(help="Slot as shown by 'slots', e.g. '10:00 - 11:00'")],
    properties: Annotated[List[str], typer.Argument(help="Property id(s); several ids with --tour")],
    tour: Annotated[bool, typer.Option("--tour", help="Book all properties as one back-to-back tour.")] = False,
    card: Annotated[Optional[str], typer.Option("--card", help="Presentation card id to attach.")] = None,
    notes: Annotated[str, typer.Option("--notes", help="Notes for the agent.")] = "",
):
    """
    Book a showing, or a tour of several properties.

    Examples:

        showingplanner book 2025-03-03 "10:00 - 11:00" prop-1

        showingplanner book 2025-03-03 "10:00 - 11:00" prop-1 prop-2 --tour
    """
    try:
        config, service = _build_service(ctx)
        selected = _parse_day(day, config.timezone)
        if selected < pendulum.today(config.timezone).date():
            _fail(f"{selected.to_date_string()} is in the past.")

        result = asyncio.run(service.book(
            property_ids=properties,
            day=selected,
            slot_label=slot,
            mode=TOUR if tour else INDIVIDUAL,
            presentation_card_id=card,
            notes=notes
        ))
    except TourSubmissionError as e:
        console.print(f"[bold red]✗ Tour incomplete:[/bold red] {escape(str(e))}")
        for property_id, error in e.failures:
            console.print(f"  [red]{escape(property_id)}[/red]: {escape(str(error))}")
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError, ShowingPlannerError) as e:
        _fail(e)

    if not result.submitted:
        console.print(f"[bold red]✗ {result.plan.reason}[/bold red]")
        raise typer.Exit(1)

    console.print(f"[bold green]✓ {len(result.appointments)} appointment(s) booked:[/bold green]")
    for request in result.requests:
        console.print(f"  {request.date} {request.time}  {request.property_id}  ({request.appointment_mode})")
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]showingplanner[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
