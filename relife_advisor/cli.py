"""
ReLIFE Advisor CLI.

Command-line interface for archetype lookup, building modification and
scenario ranking.
"""

from __future__ import annotations

import asyncio
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .baseline.catalog import ArchetypeCatalog
from .baseline.matcher import GeoMatcher
from .core.config import settings
from .core.epc import epc_description, epc_improvement
from .core.geo import Coordinates
from .core.models import ArchetypeRecord, BuildingModifications, FinancialResult, RenovationScenario
from .decision.ranker import CURRENT_SCENARIO_ID, DEFAULT_PERSONA, MCDA_PERSONAS, ScenarioRanker
from .ecm.constraints import validate_modifications
from .ecm.transformer import PayloadTransformer
from .ingest.forecasting_client import ArchetypeServiceError, ForecastingArchetypeSource, ForecastingClient
from .utils.logging_config import ensure_logging

app = typer.Typer(
    name="relife",
    help="ReLIFE Advisor - archetype matching and renovation ranking",
    add_completion=False,
)
console = Console()


@contextmanager
def open_catalog() -> Iterator[ArchetypeCatalog]:
    """Catalog backed by the configured forecasting service; closes the HTTP session on exit."""
    with ForecastingClient(config=settings) as client:
        yield ArchetypeCatalog(ForecastingArchetypeSource(client))


def _fail(message: str, code: int = 1) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override RELIFE_LOG_LEVEL"),
):
    """Configure logging before any command runs."""
    ensure_logging(log_level or settings.log_level)


@app.command()
def archetypes(
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Filter by country"),
    category: Optional[str] = typer.Option(None, "--category", "-t", help="Filter by building category"),
):
    """List the archetypes offered by the forecasting service."""
    try:
        with open_catalog() as catalog:
            records = asyncio.run(catalog.list_filtered(country=country, category=category))
    except ArchetypeServiceError as e:
        _fail(f"Could not load archetypes: {e}")

    table = Table(title=f"Archetypes ({len(records)})")
    table.add_column("Country", style="cyan")
    table.add_column("Category", style="white")
    table.add_column("Name", style="white")
    table.add_column("Period", style="dim")

    for record in records:
        table.add_row(record.country, record.category, record.name, record.construction_period or "-")

    console.print(table)


@app.command()
def options():
    """Show the country, building type and construction period choices."""
    try:
        with open_catalog() as catalog:
            building_options = asyncio.run(catalog.get_options())
    except ArchetypeServiceError as e:
        _fail(f"Could not load archetypes: {e}")

    console.print(f"[bold]Countries:[/bold] {', '.join(building_options.countries)}")
    console.print(f"[bold]Building types:[/bold] {', '.join(building_options.building_types)}")
    console.print(f"[bold]Construction periods:[/bold] {', '.join(building_options.construction_periods)}")


@app.command()
def match(
    category: str = typer.Argument(..., help="Building category, e.g. 'Single Family House'"),
    period: Optional[str] = typer.Option(None, "--period", "-p", help="Construction period, e.g. 1961-1980"),
    lat: Optional[float] = typer.Option(None, "--lat", help="Building latitude"),
    lng: Optional[float] = typer.Option(None, "--lng", help="Building longitude"),
):
    """Find the archetype that best matches a building."""
    if (lat is None) != (lng is None):
        _fail("--lat and --lng must be given together", code=2)
    coordinates = Coordinates(lat, lng) if lat is not None else None

    try:
        with open_catalog() as catalog:
            result = asyncio.run(
                GeoMatcher(catalog).find_best(category, period=period, coordinates=coordinates)
            )
    except ArchetypeServiceError as e:
        _fail(f"Could not load archetypes: {e}")

    if result is None:
        _fail(f"No archetype found for category '{category}'")

    details = result.details
    console.print(Panel.fit(
        f"[bold blue]{result.record.name}[/bold blue]\n"
        f"{result.record.category} - {result.record.country}",
        border_style="blue",
    ))

    table = Table(title="Archetype Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Candidates", str(result.selection.candidate_count))
    table.add_row("Period filter", "applied" if result.period_filter_applied else "not applied")
    if result.geography_applied:
        table.add_row("Distance", f"{result.distance_km:,.0f} km")
    table.add_row("Floor area", f"{details.floor_area:,.1f} m²")
    table.add_row("Floors", str(details.number_of_floors))
    table.add_row("Height", f"{details.building_height:.1f} m")
    table.add_row("Window area", f"{details.total_window_area:.1f} m²")
    table.add_row("Wall U-value", f"{details.thermal_properties.wall_u_value:.2f} W/m²K")
    table.add_row("Roof U-value", f"{details.thermal_properties.roof_u_value:.2f} W/m²K")
    table.add_row("Window U-value", f"{details.thermal_properties.window_u_value:.2f} W/m²K")
    table.add_row("Heating setpoint", f"{details.setpoints.heating_setpoint:.1f} °C")
    table.add_row("Cooling setpoint", f"{details.setpoints.cooling_setpoint:.1f} °C")

    console.print(table)


@app.command()
def modify(
    category: str = typer.Argument(..., help="Archetype category"),
    country: str = typer.Argument(..., help="Archetype country"),
    name: str = typer.Argument(..., help="Archetype name"),
    modifications_file: Path = typer.Argument(..., help="JSON file with building modifications"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the {bui, system} payload here"),
):
    """Apply modifications to an archetype and emit the simulation payload."""
    try:
        modifications = BuildingModifications.model_validate_json(modifications_file.read_text())
    except (OSError, ValidationError) as e:
        _fail(f"Invalid modifications file: {e}", code=2)

    record = ArchetypeRecord(category=category, country=country, name=name)
    try:
        with open_catalog() as catalog:
            details = asyncio.run(catalog.get_details(record))
    except ArchetypeServiceError as e:
        _fail(f"Could not load archetype {record.cache_key}: {e}")

    validation = validate_modifications(modifications, details)
    if not validation.is_valid:
        console.print(f"[red]{len(validation.errors)} invalid modification(s):[/red]")
        for error in validation.errors:
            console.print(f"  [yellow]{error.field}[/yellow]: {escape(error.message)}")
        raise typer.Exit(1)

    modified = PayloadTransformer().apply_all(details, modifications)
    payload = json.dumps(modified.to_dict(), indent=2)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload)
        console.print(f"[green]Saved:[/green] {output}")
    else:
        typer.echo(payload)


@app.command()
def rank(
    scenarios_file: Path = typer.Argument(..., help="JSON file with scenarios and financial results"),
    persona: str = typer.Option(DEFAULT_PERSONA, "--persona", "-p", help="Decision-maker persona"),
):
    """
    Rank renovation scenarios for a persona.

    The file holds {"scenarios": [...], "financial_results": {scenario_id: {...}}}
    or just the list of scenarios.
    """
    if persona not in MCDA_PERSONAS:
        _fail(f"Unknown persona '{persona}'. Choose from: {', '.join(MCDA_PERSONAS)}", code=2)

    try:
        data = json.loads(scenarios_file.read_text())
        if isinstance(data, list):
            data = {"scenarios": data}
        scenarios = [RenovationScenario.model_validate(s) for s in data.get("scenarios", [])]
        financial_results = {
            scenario_id: FinancialResult.model_validate(result)
            for scenario_id, result in (data.get("financial_results") or {}).items()
        }
    except (OSError, ValueError) as e:
        _fail(f"Invalid scenarios file: {e}", code=2)

    results = ScenarioRanker().rank(scenarios, financial_results, persona)
    if not results:
        console.print("[yellow]No renovation scenarios to rank[/yellow]")
        return

    by_id = {s.id: s for s in scenarios}
    current = by_id.get(CURRENT_SCENARIO_ID)

    table = Table(title=f"Ranking - {MCDA_PERSONAS[persona].name}")
    table.add_column("Rank", style="cyan", justify="right")
    table.add_column("Scenario", style="white")
    table.add_column("EPC", style="white")
    table.add_column("Score", style="green", justify="right")

    for result in results:
        scenario = by_id[result.scenario_id]
        epc = scenario.epc_class
        steps = epc_improvement(current.epc_class, epc) if current else None
        if steps is not None:
            epc = f"{epc} ({steps:+d})"
        table.add_row(str(result.rank), scenario.label or scenario.id, epc, f"{result.score:.2f}")

    console.print(table)

    best = by_id[results[0].scenario_id]
    console.print(
        f"[bold]Top scenario:[/bold] {escape(best.label or best.id)} "
        f"(EPC {best.epc_class}: {epc_description(best.epc_class)})"
    )


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"ReLIFE Advisor v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
