"""
Main CLI application for Knowledge Graph Engine.

Provides the primary command-line interface for:
- Adding relations to a triple file
- Displaying connections and finding paths
- Importing and exporting graphs
- Running the interactive menu shell
- Managing configuration
"""

import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kg_engine import __version__
from kg_engine.config import Settings, get_default_config_path, load_config
from kg_engine.core.exceptions import ConfigurationError, InvalidFieldError, StorageError
from kg_engine.graph_store import FuzzyResolver, GraphStore, PathFinder, PathStatus
from kg_engine.storage import export_dot, load_file, save_file
from kg_engine.cli.shell import GraphShell, make_prompt_chooser, render_connections
from kg_engine.utils.logging import get_logger, reset_logging, setup_logging

# Initialize Typer app
app = typer.Typer(
    name="kg-engine",
    help="Knowledge Graph Engine - Store triples, resolve entities, find paths",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)

DATA_OPTION_HELP = "Triple file (Source|Relationship|Target per line)"


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(
            f"[bold blue]Knowledge Graph Engine[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (default: ./config.yaml, ./config/config.yaml or ~/.kg_engine/config.yaml)",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Knowledge Graph Engine - Store and query Source|Relationship|Target triples.

    Use 'kg-engine --help' for command list.
    """
    try:
        settings = load_config(config_file or get_default_config_path())
    except (ConfigurationError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    # Logs go to stderr so they never mix with command output
    reset_logging()
    setup_logging(
        settings.logging,
        level="DEBUG" if verbose else None,
        stream=sys.stderr,
    )
    ctx.obj = settings


def _open_graph(settings: Settings, data: Optional[Path]) -> tuple[GraphStore, Path]:
    """Load the data file into a fresh store; a missing file gives an empty graph."""
    path = data or settings.files.data_file
    store = GraphStore.from_settings(settings)

    if path.exists():
        report = load_file(store, path)
        for line_number, line in report.malformed:
            console.print(
                f"[yellow]⚠ Skipping invalid line {line_number}: \"{escape(line)}\"[/yellow]"
            )
    else:
        logger.info(f"Data file '{path}' not found, starting with an empty graph")

    return store, path


@app.command("add-relation")
def add_relation(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Source entity"),
    label: str = typer.Argument(..., help="Relationship label"),
    target: str = typer.Argument(..., help="Target entity"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Add a relationship and save it to the data file.

    Example:
        kg-engine add-relation "Alice" "works at" "Acme Corp"
    """
    settings: Settings = ctx.obj

    try:
        store, path = _open_graph(settings, data)
        src, relation = store.add_relation(source, label, target)
        save_file(store, path)
    except InvalidFieldError as e:
        console.print(f"[red]✖ Invalid input:[/red] {escape(e.message)}")
        raise typer.Exit(1)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(
        f"[green]✔ Added:[/green] [cyan]\"{escape(src.name)}\"[/cyan] "
        f"--{escape(relation.label)}--> [cyan]\"{escape(relation.target.name)}\"[/cyan]"
    )


@app.command()
def show(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Entity name or part of it"),
    exact: bool = typer.Option(
        False,
        "--exact",
        help="Require the exact entity name instead of fuzzy matching",
    ),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Display the outgoing connections of an entity.

    Example:
        kg-engine show pyth
    """
    settings: Settings = ctx.obj

    try:
        store, _ = _open_graph(settings, data)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if exact:
        entity = store.find_exact(query)
    else:
        resolver = FuzzyResolver.from_settings(store, settings)
        entity = resolver.resolve(query, chooser=make_prompt_chooser(console)).entity

    if entity is None:
        console.print("[red]✖ Entity not found.[/red]")
        raise typer.Exit(1)

    render_connections(console, entity, store)


@app.command()
def path(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Source entity"),
    target: str = typer.Argument(..., help="Target entity"),
    exact: bool = typer.Option(
        False,
        "--exact",
        help="Require exact entity names instead of fuzzy matching",
    ),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Find the shortest connection path between two entities.

    Example:
        kg-engine path Alice "Acme"
    """
    settings: Settings = ctx.obj

    try:
        store, _ = _open_graph(settings, data)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    finder = PathFinder(store, FuzzyResolver.from_settings(store, settings))
    result = finder.find_path(
        source,
        target,
        fuzzy=not exact,
        chooser=make_prompt_chooser(console),
    )

    if result.status != PathStatus.FOUND:
        console.print(f"[red]✖ {escape(result.describe())}[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        escape(result.describe()),
        title=f"Path Found ({result.hops} hop(s))",
        border_style="green",
    ))


@app.command("import")
def import_file(
    ctx: typer.Context,
    source_file: Path = typer.Argument(
        ...,
        help="Triple file to merge into the data file",
        exists=True,
        dir_okay=False,
    ),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Merge the triples of another file into the data file.

    Malformed lines are reported and skipped.

    Example:
        kg-engine import more_relations.txt
    """
    settings: Settings = ctx.obj

    try:
        store, path = _open_graph(settings, data)
        report = load_file(store, source_file)
        for line_number, line in report.malformed:
            console.print(
                f"[yellow]⚠ Skipping invalid line {line_number}: \"{escape(line)}\"[/yellow]"
            )
        written = save_file(store, path)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(Panel(
        f"Loaded: [bold]{report.loaded}[/bold]\n"
        f"Skipped: [bold]{report.skipped}[/bold]\n"
        f"Relations in data file: [bold]{written}[/bold]\n"
        f"Data file: [dim]{escape(str(path))}[/dim]",
        title="Import",
        border_style="green",
    ))


@app.command()
def export(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="DOT output path",
    ),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Export the graph as a Graphviz DOT file.

    Example:
        kg-engine export --output graph.dot
    """
    settings: Settings = ctx.obj

    try:
        store, _ = _open_graph(settings, data)
        written = export_dot(store, output or settings.files.dot_file, settings.export)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✅ DOT file exported to '{escape(str(written))}'[/green]")
    console.print(
        f"[dim]Render with: dot -Tpng -Gdpi=300 {escape(str(written))} -o graph_hd.png[/dim]"
    )


@app.command()
def stats(
    ctx: typer.Context,
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Show graph statistics.
    """
    settings: Settings = ctx.obj

    try:
        store, path = _open_graph(settings, data)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    counts = store.get_stats()

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Data file", escape(str(path)))
    table.add_row("Entities", str(counts["entity_count"]))
    table.add_row("Relations", str(counts["relation_count"]))
    table.add_row("Without outgoing relations", str(counts["isolated_count"]))

    console.print(table)


@app.command()
def shell(ctx: typer.Context) -> None:
    """
    Start the interactive menu shell.

    The graph lives in memory; use the Load and Save menu entries
    to read and write triple files.
    """
    settings: Settings = ctx.obj
    GraphShell(settings, console).run()


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False,
        "--show",
        "-s",
        help="Show current configuration",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Create default configuration file",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """
    Configuration management.

    View or initialize configuration files.

    Examples:
        kg-engine config --show
        kg-engine config --init --output ./my-config.yaml
    """
    if init:
        _init_config(output)
    elif show:
        _show_config(ctx.obj)
    else:
        console.print(
            "Use --show to view config or --init to create default config")


def _show_config(settings: Settings) -> None:
    """Show current configuration."""
    config_dict = settings.model_dump(mode="json")

    console.print(Panel(
        "[bold]Current Configuration[/bold]",
        border_style="blue",
    ))

    for section, values in config_dict.items():
        console.print(f"\n[bold cyan]{section}:[/bold cyan]")
        if isinstance(values, dict):
            for key, value in values.items():
                console.print(f"  {key}: [dim]{escape(str(value))}[/dim]")
        else:
            console.print(f"  {escape(str(values))}")


def _init_config(output: Optional[Path]) -> None:
    """Create default configuration file."""
    config_dict = Settings().model_dump(mode="json")

    output_path = output or Path("config.yaml")

    if output_path.exists():
        if not typer.confirm(f"File {output_path} exists. Overwrite?"):
            raise typer.Exit(0)

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]✓[/green] Configuration saved to: {escape(str(output_path))}")


if __name__ == "__main__":
    app()
