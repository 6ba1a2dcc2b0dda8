"""Command Line Interface for the Pharmacopoeia catalog builder.

This module provides a CLI using Typer for validating medicine documents and
building the catalog from them, with Rich output.

Examples:
    pharmacopoeia build examples/medicins.xml
    pharmacopoeia build examples/medicins.xml --no-validate --strict
    pharmacopoeia validate examples/medicins.xml --schema pharmacopoeia/schemas/medicins.xsd
    pharmacopoeia info
"""

import logging
from pathlib import Path
from typing import FrozenSet, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from pharmacopoeia.adapters.xml_validator import XSDValidator
from pharmacopoeia.domain.medicine import Medicine, Version
from pharmacopoeia.infrastructure.logging_config import setup_logging
from pharmacopoeia.infrastructure.settings import settings
from pharmacopoeia.main import process_catalog

# Initialize Typer app and Rich console
app = typer.Typer(
    name="pharmacopoeia",
    help="Pharmacopoeia: builds a medicine catalog from XML documents",
    add_completion=False
)
console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, json_logs: bool) -> None:
    setup_logging(
        use_json=json_logs or settings.log_json,
        log_level="DEBUG" if verbose else settings.log_level
    )


def _version_node(parent: Tree, version: Version) -> None:
    node = parent.add(
        f"[bold]{escape(version.trade_name)}[/bold] "
        f"[dim]{escape(version.producer)}, {escape(version.form)}[/dim]"
    )
    certificate = version.certificate
    node.add(
        f"certificate: {escape(str(certificate.registered_by))} "
        f"({certificate.registration_date} .. {certificate.expire_date})"
    )
    node.add(f"dosage: {escape(str(version.dosage.amount))}, {escape(str(version.dosage.frequency))}")
    packs = sorted(version.packs, key=lambda p: (p.size or "", p.quantity or 0, p.price or 0.0))
    for pack in packs:
        node.add(f"pack: size={escape(str(pack.size))} quantity={pack.quantity} price={pack.price}")


def render_catalog(catalog: FrozenSet[Medicine]) -> Tree:
    """Render the catalog as a Rich tree, sorted by variant and name."""
    tree = Tree(f"[bold blue]Catalog[/bold blue] ({len(catalog)} medicines)")
    for medicine in sorted(catalog, key=lambda m: (type(m).__name__, m.name)):
        label = f"[bold]{escape(medicine.name)}[/bold] [cyan]{type(medicine).__name__}[/cyan]"
        if medicine.variant_field is not None:
            label += f" [dim]{medicine.variant_field}={escape(str(medicine.variant_value))}[/dim]"
        node = tree.add(label)
        if medicine.cas or medicine.drug_bank:
            node.add(f"cas: {escape(str(medicine.cas))}, drug-bank: {escape(str(medicine.drug_bank))}")
        node.add(f"pharm: {escape(medicine.pharm)}")
        for version in sorted(medicine.versions, key=lambda v: v.trade_name):
            _version_node(node, version)
    return tree


@app.command()
def build(
    input_file: Path = typer.Argument(..., help="XML document to build the catalog from", exists=True, dir_okay=False),
    schema: Optional[Path] = typer.Option(None, "--schema", "-s", help="XSD for the preflight check (default: bundled schema)", exists=True, dir_okay=False),
    no_validate: bool = typer.Option(False, "--no-validate", help="Skip the XSD preflight check"),
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Fail on malformed dates and numbers"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON structured logs"),
) -> None:
    """Build the medicine catalog from an XML document and print it."""
    _configure_logging(verbose, json_logs)

    console.print(f"\n[bold blue]{settings.app_name} Catalog Builder[/bold blue]")
    console.print(f"[dim]Input file:[/dim] {input_file}")
    if no_validate:
        console.print("[dim]Schema:[/dim] skipped")
    else:
        console.print(f"[dim]Schema:[/dim] {schema or settings.schema_path}")
    console.print()

    logger.debug(f"Build options: validate={not no_validate}, strict={strict}, schema={schema}")
    result = process_catalog(
        input_file,
        schema_path=schema,
        validate_schema=not no_validate,
        strict_values=strict
    )

    if result.is_failure():
        console.print(f"[red]✗[/red] Build failed ({result.error_type}): {escape(str(result.error))}")
        for key, value in sorted((result.error_details or {}).items()):
            console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
        raise typer.Exit(code=1)

    catalog = result.value
    console.print(render_catalog(catalog))

    versions = [version for medicine in catalog for version in medicine.versions]
    summary_table = Table(show_header=False, box=None, padding=(0, 2))
    summary_table.add_row("Medicines:", f"[bold]{len(catalog):,}[/bold]")
    summary_table.add_row("Versions:", f"{len(versions):,}")
    summary_table.add_row("Packs:", f"{sum(len(v.packs) for v in versions):,}")
    console.print("\n[bold]Build Summary:[/bold]")
    console.print(summary_table)
    console.print("\n[green]✓[/green] Catalog built successfully")


@app.command()
def validate(
    input_file: Path = typer.Argument(..., help="XML document to validate", exists=True, dir_okay=False),
    schema: Optional[Path] = typer.Option(None, "--schema", "-s", help="XSD to validate against (default: bundled schema)", exists=True, dir_okay=False),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Validate an XML document against an XSD."""
    _configure_logging(verbose, json_logs=False)

    schema_path = schema or settings.schema_path
    validator = XSDValidator()
    if validator.validate(input_file, schema_path):
        console.print(f"[green]✓[/green] {input_file} is valid against {schema_path}")
        return

    console.print(f"[red]✗[/red] {input_file} is invalid against {schema_path}")
    for message in validator.errors:
        console.print(f"  [dim]-[/dim] {escape(message)}")
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """Display effective configuration."""
    console.print("[bold blue]Configuration[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Version:", settings.app_version)
    info_table.add_row("Log Level:", settings.log_level)
    info_table.add_row("JSON Logs:", "Enabled" if settings.log_json else "Disabled")
    info_table.add_row("Value Policy:", "Strict" if settings.strict_values else "Lenient")
    info_table.add_row("Date Format:", settings.date_format)
    info_table.add_row("Schema:", str(settings.schema_path))
    info_table.add_row("Max Document Size:", f"{settings.max_document_size / (1024 * 1024):.0f} MB")

    console.print(info_table)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information")
) -> None:
    """Pharmacopoeia: builds a medicine catalog from XML documents."""
    if version:
        console.print(f"{settings.app_name} v{settings.app_version}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
