"""Typer CLI for propeller-config.

Commands:
  fields    List every configuration field with its flag, env var and default
  defaults  Print the default configuration document
  explain   Explain a single field (against defaults or a config file)
  check     Load a configuration document and run guard rails
"""

from __future__ import annotations

import json
import logging
from pathlib import Path  # noqa: TC003 Typer evaluates type hints at runtime
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from propeller_config.controller import config_section, get_config
from propeller_config.document import (
    DocumentError,
    config_from_yaml,
    config_to_json,
    config_to_yaml,
)
from propeller_config.explain import UnknownFieldError, explain_field
from propeller_config.fields import build_field_table
from propeller_config.guard_rails import GuardRailEngine
from propeller_config.settings import get_cli_settings

if TYPE_CHECKING:
    from propeller_config.models import Config

logger = logging.getLogger("propeller_config.cli")

app = typer.Typer(
    name="propeller-config",
    help="Configuration schema tooling for the propeller workflow controller",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main() -> None:
    """Propeller configuration tooling."""
    settings = get_cli_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _output_format(explicit: str | None) -> str:
    return explicit or get_cli_settings().output_format


def _load_document(path: Path) -> Config:
    """Read a YAML or JSON config file, exiting with status 1 on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot read {escape(str(path))}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    try:
        config = config_from_yaml(text, config_section)
    except DocumentError as e:
        console.print(f"[red]Invalid configuration document {escape(str(path))}:[/red]")
        for err in e.errors or [str(e)]:
            console.print(f"  [red]✗[/red] {escape(err)}")
        raise typer.Exit(1) from None

    logger.info("Loaded configuration document %s", path)
    return config


@app.command()
def fields(
    format: Annotated[
        str | None, typer.Option("--format", "-f", help="Output format: text or json")
    ] = None,
) -> None:
    """List all configuration fields."""
    table_data = build_field_table()

    if _output_format(format) == "json":
        entries = [e.model_dump(mode="json") for e in table_data.all_entries()]
        typer.echo(_dump_json(entries))
        return

    table = Table(title=f"Configuration fields ({len(table_data)})")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Default", style="green")
    table.add_column("Env var", style="dim")
    table.add_column("Description")
    for e in table_data.all_entries():
        table.add_row(
            e.key,
            e.value_type.value,
            escape(str(e.default)),
            e.env_var,
            escape(e.description),
        )
    console.print(table)


@app.command()
def defaults(
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: yaml or json")
    ] = "yaml",
    wrap: Annotated[
        bool, typer.Option("--wrap/--no-wrap", help="Nest the document under the section key")
    ] = True,
) -> None:
    """Print the default configuration document."""
    config = get_config()
    if format == "json":
        typer.echo(config_to_json(config))
    else:
        typer.echo(config_to_yaml(config, wrap_section=wrap), nl=False)


@app.command()
def explain(
    key: Annotated[str, typer.Argument(help="Dotted field key, e.g. queue.sub-queue.rate")],
    file: Annotated[
        Path | None, typer.Option("--file", help="Config document to read values from")
    ] = None,
    format: Annotated[
        str | None, typer.Option("--format", "-f", help="Output format: text or json")
    ] = None,
) -> None:
    """Explain a single configuration field."""
    config = _load_document(file) if file else get_config()
    try:
        explanation = explain_field(key, config, build_field_table())
    except UnknownFieldError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None
    typer.echo(explanation.to_json() if _output_format(format) == "json" else explanation.to_text())


@app.command()
def check(
    path: Annotated[Path, typer.Argument(help="Config document (YAML or JSON)")],
    format: Annotated[
        str | None, typer.Option("--format", "-f", help="Output format: text or json")
    ] = None,
) -> None:
    """Load a configuration document and run guard rails against it."""
    config = _load_document(path)
    engine = GuardRailEngine()
    results = engine.evaluate(config)

    if _output_format(format) == "json":
        typer.echo(_dump_json([r.model_dump(mode="json") for r in results]))
    elif not results:
        console.print(f"[green]{escape(str(path))}: no guard rail findings[/green]")
    else:
        for gr in results:
            color = "yellow" if gr.severity == "warning" else "red"
            console.print(
                f"  [{color}]{gr.severity}[/{color}] {gr.rule_name}: {escape(gr.message)}"
            )

    if engine.has_errors(results):
        raise typer.Exit(1)


def _dump_json(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


if __name__ == "__main__":
    app()
