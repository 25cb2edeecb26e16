"""
CLI Entry Point for sheetschema

Usage:
    python -m cli.export export --source <workbook> --format dbml|chartdb --output <file>
    python -m cli.export analyze --source <workbook>
    python -m cli.export validate <diagram.json>
    python -m cli.export config show
"""

import click
import json
import logging
import yaml
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax

console = Console()

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config"


def get_config_path(ctx) -> Path:
    """Get config path from context or default."""
    return ctx.obj.get("config_path") if ctx.obj else DEFAULT_CONFIG_DIR


def load_export_config(ctx):
    """Load the export config, falling back to built-in defaults when no file exists."""
    from sheetschema.config_loader import ConfigLoader, ExportConfig

    loader = ConfigLoader(get_config_path(ctx))
    try:
        return loader.load_config()
    except FileNotFoundError:
        if ctx.obj and ctx.obj.get("config_explicit"):
            raise
        console.print("[yellow]No export_config.yaml found; using built-in defaults[/yellow]")
        return ExportConfig()


@click.group()
@click.option(
    "--config-dir", "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to configuration directory"
)
@click.option("--verbose", "-v", is_flag=True, help="Log parser progress")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, config_dir: str, verbose: bool):
    """sheetschema.

    Export spreadsheet schema descriptions to DBML or ChartDB JSON.

    Use --config-dir to specify custom configuration.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config_dir:
        ctx.obj["config_path"] = Path(config_dir)
        ctx.obj["config_explicit"] = True
    else:
        ctx.obj["config_path"] = DEFAULT_CONFIG_DIR
        ctx.obj["config_explicit"] = False


# =============================================================================
# CONFIGURATION COMMANDS
# =============================================================================

@cli.group()
def config():
    """Manage export configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Display current configuration settings."""
    config = load_export_config(ctx)

    console.print(Panel(
        f"[bold]{config.config_name}[/bold] v{config.version}",
        title="Configuration"
    ))

    table = Table(title="Profiles")
    table.add_column("Profile", style="cyan")
    table.add_column("Table start", style="yellow")
    table.add_column("Enum boundary", style="yellow")
    table.add_column("Tab color", style="green")
    table.add_column("Columns (name/opt/type/rel/desc)", style="green")

    for profile in config.profiles.values():
        cols = profile.columns
        table.add_row(
            profile.name,
            profile.table_start,
            profile.enum_boundary,
            "required" if profile.require_tab_color else "optional",
            f"{cols.name}/{cols.optional}/{cols.type}/{cols.relation}/{cols.description}",
        )

    console.print(table)

    layout = config.layout
    settings = Table(title="Layout & Output")
    settings.add_column("Setting", style="cyan")
    settings.add_column("Value", style="green")
    settings.add_row("No-color marker", config.no_color)
    settings.add_row("Enum sheet keyword", config.enum_sheet_keyword)
    settings.add_row("Grid", f"{layout.tables_per_row} per row, {layout.spacing_x}x{layout.spacing_y}")
    settings.add_row("Table width", str(layout.table_width))
    settings.add_row("Database type", config.output.database_type)
    settings.add_row("Numeric default", f"({config.output.numeric_precision},{config.output.numeric_scale})")
    console.print(settings)


@config.command("validate")
@click.pass_context
def config_validate(ctx):
    """Validate configuration file."""
    from sheetschema.config_loader import ConfigLoader

    try:
        loader = ConfigLoader(get_config_path(ctx))
        config = loader.load_config()
        console.print("[green]✓[/green] Configuration is valid")
        console.print(f"  - {len(config.profiles)} profiles defined")
    except (FileNotFoundError, ValueError, KeyError, yaml.YAMLError) as e:
        console.print(f"[red]✗[/red] Configuration error: {e}")
        raise SystemExit(1)


@config.command("init")
@click.argument("output_dir", type=click.Path(), default=".")
def config_init(output_dir: str):
    """Initialize a new configuration in the specified directory."""
    import shutil

    output_path = Path(output_dir) / "config"

    if output_path.exists():
        console.print(f"[yellow]Config directory already exists at {output_path}[/yellow]")
        return

    shutil.copytree(DEFAULT_CONFIG_DIR, output_path)
    console.print(f"[green]✓[/green] Created configuration at {output_path}")
    console.print("  Edit export_config.yaml to customize settings")


# =============================================================================
# ANALYSIS COMMANDS
# =============================================================================

@cli.command()
@click.option(
    "--source", "-s",
    type=click.Path(exists=True),
    required=True,
    help="Path to .xlsx workbook or JSON/YAML grid document"
)
@click.option("--profile", "-p", default="chartdb", help="Source profile to parse with")
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format"
)
@click.pass_context
def analyze(ctx, source: str, profile: str, format: str):
    """Analyze a workbook without serializing it.

    Parses the workbook and displays tables, enums, relationships and diagnostics.
    """
    from sheetschema.pipeline import SchemaExporter

    config = load_export_config(ctx)
    workbook = _load_workbook(source)

    try:
        result = SchemaExporter(config).build(workbook, profile)
    except KeyError as e:
        console.print(f"[red]{e.args[0]}[/red]")
        raise click.Abort()

    summary = {
        "name": result.model.name,
        "processed_sheets": result.processed_sheets,
        "tables": [
            {"schema": t.schema, "name": t.name, "fields": [f.name for f in t.fields]}
            for t in result.model.tables
        ],
        "enums": {e.name: list(e.values) for e in result.model.enums},
        "relationships": len(result.model.relationships),
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }

    if format == "json":
        console.print(Syntax(json.dumps(summary, indent=2), "json"))
    elif format == "yaml":
        console.print(Syntax(yaml.dump(summary, default_flow_style=False, sort_keys=False), "yaml"))
    else:
        _display_model(result.model)
        _display_diagnostics(result.diagnostics)


def _load_workbook(source: str):
    from sheetschema.pipeline import load_workbook_grid

    try:
        return load_workbook_grid(source)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise click.Abort()


def _display_model(model):
    """Display the parsed model in rich table format."""
    console.print(Panel(f"[bold]{model.name}[/bold]", title="Workbook"))

    tables = Table(title="Tables")
    tables.add_column("Schema", style="cyan")
    tables.add_column("Table", style="cyan")
    tables.add_column("Fields", justify="right", style="green")
    tables.add_column("Primary key", style="yellow")
    tables.add_column("References", justify="right", style="magenta")

    for table in model.tables:
        tables.add_row(
            table.schema,
            table.name,
            str(len(table.fields)),
            ", ".join(f.name for f in table.primary_key_fields) or "-",
            str(len(model.relationships_from(table))),
        )
    console.print(tables)
    console.print()

    if model.enums:
        enums = Table(title="Enums")
        enums.add_column("Enum", style="cyan")
        enums.add_column("Values", style="green", max_width=60)
        for enum in model.enums:
            enums.add_row(enum.name, ", ".join(enum.values))
        console.print(enums)
        console.print()


def _display_diagnostics(diagnostics):
    """Display skipped/defaulted items."""
    if not diagnostics:
        console.print("[green]✓[/green] No diagnostics")
        return

    table = Table(title="Diagnostics")
    table.add_column("Level", style="yellow")
    table.add_column("Code", style="cyan")
    table.add_column("Where", style="green")
    table.add_column("Message", max_width=70)

    for d in diagnostics:
        level_color = "red" if d.level.value == "warning" else "white"
        where = d.sheet or "-"
        if d.row:
            where += f":{d.row}"
        table.add_row(f"[{level_color}]{d.level.value}[/{level_color}]", d.code, where, d.message)

    console.print(table)


# =============================================================================
# EXPORT COMMANDS
# =============================================================================

@cli.command("export")
@click.option("--source", "-s", type=click.Path(exists=True), required=True, help="Workbook (.xlsx, .json, .yaml)")
@click.option("--format", "-f", "output_format", type=click.Choice(["chartdb", "dbml"]), default="chartdb", help="Output format")
@click.option("--profile", "-p", default=None, help="Source profile (defaults to the output format)")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file (prints to stdout when omitted)")
@click.pass_context
def export(ctx, source: str, output_format: str, profile: str, output: str):
    """Export a workbook to DBML or ChartDB JSON."""
    from sheetschema.pipeline import SchemaExporter

    config = load_export_config(ctx)
    workbook = _load_workbook(source)

    try:
        result = SchemaExporter(config).export(workbook, output_format, profile)
    except KeyError as e:
        console.print(f"[red]{e.args[0]}[/red]")
        raise click.Abort()

    if output is None:
        click.echo(result.text, nl=False)
        return

    if Path(output).is_dir():
        extension = "dbml" if output_format == "dbml" else "json"
        output_path = Path(output) / f"{_sanitize_name(workbook.name or 'chartdb-export')}.{extension}"
    else:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(result.text)

    summary = result.summary()
    console.print(f"[green]✓[/green] Wrote {output_path}")
    console.print(f"[bold]Processed sheets:[/bold] {', '.join(result.processed_sheets) or '-'}")
    console.print(
        f"  {summary['tables']} tables, {summary['fields']} fields, "
        f"{summary['relationships']} relationships, {summary['enums']} enums"
    )
    if result.diagnostics:
        _display_diagnostics(result.diagnostics)


def _sanitize_name(name: str) -> str:
    """Convert workbook name to a file name."""
    return "_".join(name.split())


@cli.command()
@click.argument("document", type=click.Path(exists=True))
def validate(document: str):
    """Validate a ChartDB JSON document against the strict import schema."""
    from pydantic import ValidationError
    from sheetschema.conversion.chartdb_schema import parse_document

    with open(document, encoding="utf-8") as f:
        text = f.read()

    try:
        diagram = parse_document(text)
    except ValidationError as e:
        console.print(f"[red]✗[/red] {document} is not a valid ChartDB document")
        for error in e.errors()[:20]:
            location = ".".join(str(p) for p in error["loc"])
            console.print(f"  - {location}: {error['msg']}")
        raise SystemExit(1)

    console.print(f"[green]✓[/green] {document} is valid")
    console.print(
        f"  - {len(diagram.tables)} tables, {len(diagram.relationships)} relationships, "
        f"{len(diagram.custom_types)} custom types"
    )


if __name__ == "__main__":
    cli()
