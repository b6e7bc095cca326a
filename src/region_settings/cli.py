"""Command-line interface for region_settings.

Commands:
    region-settings show     All resolved preferences
    region-settings query    Run one named query
    region-settings formats  Display patterns of one category
    region-settings lookup   Convention table entry for a region code
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from region_settings.config import ConfigError, ConfigProfile, create_reader, load_config
from region_settings.conventions import DEFAULT_TABLE
from region_settings.dispatcher import QueryDispatcher
from region_settings.log import configure_logging
from region_settings.resolver import PreferenceResolver
from region_settings.types import FormatCategory, normalize_region_code

app = typer.Typer(
    name="region-settings",
    help="Regional formatting preferences of this host.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Type Aliases
# =============================================================================

LocaleOpt = Annotated[
    Optional[str],
    typer.Option("--locale", "-l", help="Locale to resolve for (e.g. en_US, de-DE-u-fw-sun)"),
]

JsonOpt = Annotated[
    bool,
    typer.Option("--json", help="Print JSON instead of a table"),
]


# =============================================================================
# Helper Functions
# =============================================================================


def _profile(ctx: typer.Context) -> ConfigProfile:
    return ctx.obj["profile"]


def _dispatcher(ctx: typer.Context, locale_id: str | None) -> QueryDispatcher:
    try:
        reader = create_reader(_profile(ctx), locale_id=locale_id)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return QueryDispatcher(PreferenceResolver(reader))


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(value, ensure_ascii=False, indent=2))


# =============================================================================
# Commands
# =============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file (YAML, JSON or TOML)"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (debug, info, warning, error)"),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help="Log format (console, json)"),
    ] = None,
) -> None:
    """Resolve temperature unit, measurement system, week start and display patterns."""
    try:
        profile = load_config(config_path=config)
        configure_logging(
            level=log_level or profile.get_str("logging.level", "WARNING"),
            format=log_format or profile.get_str("logging.format", "console"),
        )
    except (ConfigError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    ctx.obj = {"profile": profile}


@app.command(name="show")
def show_cmd(ctx: typer.Context, locale: LocaleOpt = None, as_json: JsonOpt = False) -> None:
    """Show every resolved preference."""
    dispatcher = _dispatcher(ctx, locale)
    preferences = dispatcher.resolver.resolve_all()

    if as_json:
        _echo_json(preferences.to_dict())
        return

    table = Table(title="Region Settings")
    table.add_column("Preference", style="cyan")
    table.add_column("Value")
    table.add_row("Region", preferences.region_code or "-")
    table.add_row("Temperature unit", preferences.temperature_unit.value)
    table.add_row("Metric system", "yes" if preferences.uses_metric_system else "no")
    table.add_row("First day of week", preferences.first_day_of_week.value)
    table.add_row("Date formats", "\n".join(preferences.date_formats))
    table.add_row("Time formats", "\n".join(preferences.time_formats))
    table.add_row("Number formats", "\n".join(preferences.number_formats))
    console.print(table)


@app.command(name="query")
def query_cmd(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Query name, e.g. getFirstDayOfWeek")],
    locale: LocaleOpt = None,
) -> None:
    """Run one named query and print its JSON value."""
    result = _dispatcher(ctx, locale).dispatch(name)
    if result.not_implemented:
        typer.echo(f"Error: {result.error}", err=True)
        typer.echo(f"Supported queries: {', '.join(QueryDispatcher.supported_queries())}", err=True)
        raise typer.Exit(2)
    _echo_json(result.value)


@app.command(name="formats")
def formats_cmd(
    ctx: typer.Context,
    category: Annotated[FormatCategory, typer.Argument(help="Pattern category")],
    locale: LocaleOpt = None,
) -> None:
    """Print the display patterns of a category, one per line."""
    patterns = _dispatcher(ctx, locale).resolver.resolve_format_patterns(category)
    for pattern in patterns:
        typer.echo(pattern)


@app.command(name="lookup")
def lookup_cmd(
    region: Annotated[str, typer.Argument(help="ISO 3166-1 alpha-2 region code")],
    as_json: JsonOpt = False,
) -> None:
    """Show the convention table entry for a region.

    A malformed or empty code has no region and shows the defaults
    (metric, Monday).
    """
    code = normalize_region_code(region)
    if code is None:
        typer.echo(f"Warning: Invalid region code {region!r}, showing defaults", err=True)

    entry = {
        "region": code,
        "usesMetricSystem": not DEFAULT_TABLE.is_non_metric(code),
        "firstDayOfWeek": DEFAULT_TABLE.week_start_for(code).value,
    }
    if as_json:
        _echo_json(entry)
        return

    table = Table(title=f"Conventions for {code or 'no region'}")
    table.add_column("Convention", style="cyan")
    table.add_column("Value")
    table.add_row("Metric system", "yes" if entry["usesMetricSystem"] else "no")
    table.add_row("First day of week", entry["firstDayOfWeek"])
    console.print(table)


if __name__ == "__main__":
    app()
