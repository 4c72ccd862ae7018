"""
Command-line dashboard for Huginn health trends.

Renders chart series, BMI/BMR and daily calorie projections in the terminal.
"""
from __future__ import annotations

import json as jsonlib
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from typer import Argument, Option
from typing_extensions import Annotated

from huginn_metrics.application.chart_service import ChartService, describe_chart
from huginn_metrics.application.derived_service import DerivedMetricsService
from huginn_metrics.application.exceptions import ConfigurationError
from huginn_metrics.domain.data_access import HealthDataSource
from huginn_metrics.domain.derived import project_daily_calories
from huginn_metrics.domain.entities import Series
from huginn_metrics.domain.metrics import Metric, Period, get_descriptor
from huginn_metrics.infrastructure import log_utils

console = Console()

app = typer.Typer(
    name="huginn",
    help="Health trend charts and derived body metrics from huginn.health.",
    add_completion=False,
)


def _build_source() -> HealthDataSource:
    """Lazy import so tests can swap the data source without touching the network."""
    from huginn_metrics.infrastructure.huginn_client import HuginnClient

    return HuginnClient()


def _source_or_exit() -> HealthDataSource:
    try:
        return _build_source()
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}")
        raise typer.Exit(code=1)


def _format_cell(value: Optional[float], places: int) -> str:
    if value is None:
        return "-"
    return f"{value:.{places}f}"


def render_series(series: Series) -> Table:
    descriptor = get_descriptor(series.metric)
    unit = series.display_unit or series.unit
    table = Table(title=f"{descriptor.label} ({series.period.value}, {series.chart_type.value})")
    table.add_column("Bucket")

    headers = series.legend if series.is_matrix else (f"{descriptor.label} {unit}".strip(),)
    for header in headers:
        table.add_column(header, justify="right")
    if series.zone_info is not None:
        table.add_column("Zone")

    places = 1 if series.is_matrix else descriptor.decimal_places
    for index, label in enumerate(series.labels):
        cells = [label]
        cells.extend(_format_cell(row[index], places) for row in series.rows)
        if series.zone_info is not None:
            cells.append(series.zone_info.zones[index] or "-")
        table.add_row(*cells)
    return table


@app.command()
def chart(
    metric: Annotated[Metric, Argument(help="Metric to chart.")],
    period: Annotated[Period, Option(help="Chart granularity.")] = Period.WEEK,
    json: Annotated[bool, Option("--json", help="Print the series as JSON.")] = False,
) -> None:
    """
    Fetch history for METRIC and print the bucketed series.
    """
    service = ChartService(_source_or_exit())
    series = service.build_chart(metric, period)

    if json:
        typer.echo(jsonlib.dumps(series.to_dict() if series is not None else None, indent=2))
    elif series is not None:
        if series.is_empty:
            typer.echo("No history recorded yet.")
        else:
            console.print(render_series(series))
        if series.target_value is not None:
            typer.echo(f"Target: {series.target_value}")

    typer.echo(describe_chart(metric, period, series))
    if series is None:
        raise typer.Exit(code=1)


@app.command()
def derived() -> None:
    """
    Show BMI, BMI zone and BMR from the profile and latest weight.
    """
    metrics = DerivedMetricsService(_source_or_exit()).calculate()

    table = Table(title="Derived metrics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("BMI", f"{metrics.bmi:.1f}" if metrics.bmi_available else "n/a")
    table.add_row("BMI zone", metrics.bmi_zone.value if metrics.bmi_zone else "n/a")
    table.add_row("BMR", f"{metrics.bmr} cal/day" if metrics.bmr_available else "n/a")
    console.print(table)

    for message in metrics.messages:
        typer.echo(message)


@app.command(name="calorie-needs")
def calorie_needs() -> None:
    """
    Show suggested daily calories per activity level based on BMR.
    """
    metrics = DerivedMetricsService(_source_or_exit()).calculate()
    projections = project_daily_calories(metrics.bmr)
    if not projections:
        log_utils.warn("Calorie projection requested without a usable BMR.", tag="CLI")
        for message in metrics.messages:
            typer.echo(message)
        raise typer.Exit(code=1)

    typer.echo(f"Your BMR: {metrics.bmr} cal/day")
    table = Table(title="Daily Calorie Needs by Activity Level")
    table.add_column("Activity level")
    table.add_column("Calories", justify="right")
    table.add_column("Description")
    for projection in projections:
        table.add_row(projection.name, f"{projection.calories} cal", projection.description)
    console.print(table)
