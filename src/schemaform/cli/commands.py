"""CLI commands for schemaform."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..api import SchemaFormAPI
from ..core.values import UNDEFINED
from ..core.widgets import Widget
from ..exceptions import CyclicSchemaError, SchemaFormError

app = typer.Typer()
console = Console()


@app.command()
def render(
    schema_file: Path = typer.Argument(..., help="Path to JSON schema file"),
    data_file: Optional[Path] = typer.Option(
        None, "--data", help="Path to JSON form data file"
    ),
    output_format: str = typer.Option(
        "pretty", "--output-format", help="Output format: json, pretty, or minimal"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
) -> None:
    """Render a schema (and optional data) as a form tree."""
    _configure_logging(verbose)

    try:
        schema = load_json(schema_file, "schema")
        form_data = load_json(data_file, "data") if data_file else UNDEFINED

        form = SchemaFormAPI().create_form(schema, form_data)

        if output_format == "json":
            print(json.dumps(form.node.to_dict(), indent=2))
        elif output_format == "minimal":
            for select in form.node.query_selector_all("select"):
                labels = ", ".join(o.label for o in select.options)
                print(f"{select.id}={select.value} [{labels}]")
        else:
            rprint(build_tree(form.node, label=f"[bold]{escape(schema_file.name)}[/bold]"))

    except SchemaFormError as e:
        _report_error(e)
        sys.exit(2)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if verbose:
            import traceback

            console.print(traceback.format_exc())
        sys.exit(2)


@app.command()
def resolve(
    schema_file: Path = typer.Argument(..., help="Path to JSON schema file"),
    data_file: Optional[Path] = typer.Option(
        None, "--data", help="Path to JSON form data file"
    ),
    output_format: str = typer.Option(
        "pretty", "--output-format", help="Output format: json or pretty"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
) -> None:
    """Show which alternative each oneOf site selects for the data."""
    _configure_logging(verbose)

    try:
        schema = load_json(schema_file, "schema")
        form_data = load_json(data_file, "data") if data_file else UNDEFINED

        form = SchemaFormAPI().create_form(schema, form_data)
        indices = form.active_indices()
        site_ids = form.engine.site_ids()

        if output_format == "json":
            print(json.dumps(indices, indent=2))
            return

        if not indices:
            rprint("[yellow]No oneOf sites in this schema[/yellow]")
            return

        table = Table(title="Active alternatives")
        table.add_column("Site")
        table.add_column("Field id")
        table.add_column("Index", justify="right")
        for site, index in indices.items():
            table.add_row(site, site_ids.get(site, ""), str(index))
        console.print(table)

    except SchemaFormError as e:
        _report_error(e)
        sys.exit(2)


@app.command()
def select(
    schema_file: Path = typer.Argument(..., help="Path to JSON schema file"),
    data_file: Optional[Path] = typer.Option(
        None, "--data", help="Path to JSON form data file"
    ),
    site: str = typer.Option("root", "--site", help="Field id of the oneOf site"),
    option: int = typer.Option(..., "--option", help="Alternative to select (0-based)"),
    output_file: Optional[Path] = typer.Option(
        None, "--output-file", help="Save the reconciled data to file"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
) -> None:
    """Switch a oneOf selector and print the reconciled form data."""
    _configure_logging(verbose)

    try:
        schema = load_json(schema_file, "schema")
        form_data = load_json(data_file, "data") if data_file else UNDEFINED
    except SchemaFormError as e:
        _report_error(e)
        sys.exit(2)

    result = SchemaFormAPI().select_option(schema, form_data, site, option)

    if not result.ok:
        console.print(f"[red]Error: {result.error_message}[/red]")
        sys.exit(2)

    print(json.dumps(result.form_data, indent=2))

    if output_file:
        save_json(result.form_data, output_file)
        if verbose:
            console.print(f"[blue]Form data saved to {output_file}[/blue]")


def load_json(path: Path, what: str) -> Any:
    """Load a JSON document from file."""
    try:
        with open(path, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        raise SchemaFormError(f"The {what} file was not found: {path}")
    except json.JSONDecodeError as e:
        raise SchemaFormError(f"Invalid JSON in {what} file {path}: {e}")


def save_json(data: Any, file_path: Path) -> None:
    """Save data to file."""
    with open(file_path, "w") as f:
        json.dump(data, f, indent=2)


def build_tree(widget: Widget, label: str = "form", tree: Optional[Tree] = None) -> Tree:
    """Convert a widget tree into a rich Tree for display."""
    if tree is None:
        tree = Tree(label)

    for child in widget.children:
        branch = tree.add(_describe(child))
        build_tree(child, tree=branch)

    return tree


def _describe(widget: Widget) -> str:
    name = f"#{escape(widget.id)}" if widget.id else ""
    title = f" [dim]{escape(widget.label)}[/dim]" if widget.label else ""

    if widget.kind == "select":
        options = " | ".join(
            f"[bold green]{escape(o.label)}[/bold green]" if o.value == widget.value else escape(o.label)
            for o in widget.options
        )
        return f"[cyan]select[/cyan]{name}{title}: {options}"

    if widget.kind == "input":
        value = "[dim]<empty>[/dim]" if widget.value is None else escape(json.dumps(widget.value))
        return f"[magenta]{widget.input_type}[/magenta]{name}{title} = {value}"

    return f"[blue]{widget.kind}[/blue]{name}{title}"


def _report_error(error: SchemaFormError) -> None:
    if isinstance(error, CyclicSchemaError):
        console.print("[red]❌ Cyclic references detected![/red]")
        console.print(f"[yellow]{error}[/yellow]")
    else:
        console.print(f"[red]Error: {error}[/red]")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
