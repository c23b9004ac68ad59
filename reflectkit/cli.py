"""
reflectkit CLI - inspect classes from the command line.

Targets are given as 'package.module:QualName':

    reflectkit fields game.people:Villager game.markers:Important
    reflectkit methods game.people:Villager
    reflectkit describe game.people:Villager --marker game.markers:Important --json
    reflectkit create game.people:Villager Tom Farmer
"""

import json
import logging
from typing import Any, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from reflectkit import __version__
from reflectkit.config import Settings, load_settings
from reflectkit.constructors import declared_constructors
from reflectkit.errors import ReflectionError
from reflectkit.inspector import create_instance, find_all_method_names, find_annotated_field_names
from reflectkit.loader import resolve_class
from reflectkit.report import constructor_info, describe_type, type_name

app = typer.Typer(
    name="reflectkit",
    help="Runtime class introspection: marked fields, method names, privileged construction",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


def _fail(message: str) -> None:
    console.print(f"[red]❌ Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _use_json(ctx: typer.Context, json_output: bool) -> bool:
    return json_output or _settings(ctx).output == "json"


def _print_names(title: str, names: List[str]) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column(title)
    for name in names:
        table.add_row(name)
    console.print(table)


def _parse_argument(raw: str) -> Any:
    """JSON literal when it parses, plain string otherwise."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """Load settings and configure logging for every command."""
    try:
        settings = load_settings()
    except ValidationError as e:
        _fail(f"Invalid configuration: {e}")

    _configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@app.command()
def fields(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Class to inspect, e.g. game.people:Villager"),
    marker: str = typer.Argument(..., help="Marker class, e.g. game.markers:Important"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """List fields declared on TARGET that carry MARKER."""
    try:
        names = sorted(find_annotated_field_names(resolve_class(target), resolve_class(marker)))
    except ReflectionError as e:
        _fail(str(e))

    if _use_json(ctx, json_output):
        typer.echo(json.dumps(names))
    else:
        _print_names("Field", names)


@app.command()
def methods(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Class to inspect"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """List method names of TARGET and of the contracts it implements directly."""
    try:
        names = sorted(find_all_method_names(resolve_class(target)))
    except ReflectionError as e:
        _fail(str(e))

    if _use_json(ctx, json_output):
        typer.echo(json.dumps(names))
    else:
        _print_names("Method", names)


@app.command()
def constructors(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Class to inspect"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """Show the declared constructors of TARGET in match order."""
    try:
        cls = resolve_class(target)
        ctors = declared_constructors(cls)
    except ReflectionError as e:
        _fail(str(e))

    if _use_json(ctx, json_output):
        typer.echo(json.dumps([constructor_info(ctor).model_dump() for ctor in ctors], indent=2))
        return

    table = Table(show_header=True, header_style="bold cyan", title=cls.__qualname__)
    table.add_column("#", justify="right")
    table.add_column("Constructor")
    table.add_column("Parameters")
    table.add_column("Visibility")
    for index, ctor in enumerate(ctors):
        params = ", ".join(f"{p.name}: {type_name(p.annotation)}" for p in ctor.parameters)
        visibility = "[green]public[/green]" if ctor.public else "[yellow]non-public[/yellow]"
        table.add_row(str(index), ctor.name, params, visibility)
    console.print(table)


@app.command()
def describe(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Class to inspect"),
    markers: Optional[List[str]] = typer.Option(
        None,
        "--marker",
        "-m",
        help="Marker class whose tagged fields to list (repeatable)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Print a full report for TARGET."""
    try:
        report = describe_type(resolve_class(target), [resolve_class(m) for m in markers or []])
    except ReflectionError as e:
        _fail(str(e))

    if _use_json(ctx, json_output):
        typer.echo(report.model_dump_json(indent=2))
        return

    console.print(Panel.fit(
        f"[bold cyan]{report.type_name}[/bold cyan]\n\n"
        f"Module: [yellow]{report.module}[/yellow]\n"
        f"Contracts: [yellow]{', '.join(report.contracts) or 'none'}[/yellow]\n"
        f"Methods: [yellow]{', '.join(report.method_names) or 'none'}[/yellow]",
        border_style="cyan"
    ))

    fields_table = Table(show_header=True, header_style="bold cyan")
    fields_table.add_column("Field")
    fields_table.add_column("Type")
    fields_table.add_column("Markers")
    for entry in report.fields:
        fields_table.add_row(entry.name, entry.type_name, ", ".join(entry.markers))
    console.print(fields_table)

    for marker, names in report.marked_fields.items():
        console.print(f"[bold]{marker}:[/bold] {', '.join(names) or '-'}")


@app.command()
def create(
    target: str = typer.Argument(..., help="Class to instantiate"),
    args: Optional[List[str]] = typer.Argument(
        None,
        help="Constructor arguments as JSON literals; anything else is passed as a string",
    ),
):
    """Instantiate TARGET through the first constructor matching ARGS, public or not."""
    values = [_parse_argument(raw) for raw in args or []]
    try:
        instance = create_instance(resolve_class(target), *values)
    except ReflectionError as e:
        _fail(str(e))
    except Exception as e:
        logger.debug("Constructor raised", exc_info=True)
        _fail(f"Constructor raised {type(e).__name__}: {e}")

    console.print(f"[bold green]✓[/bold green] {escape(repr(instance))}")


@app.command()
def version():
    """Show the version of reflectkit."""
    console.print(f"[bold cyan]reflectkit[/bold cyan] v{__version__}")
    console.print("Runtime class introspection tool")


if __name__ == "__main__":
    app()
