"""bragi-status CLI entry point."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from bragi_status.config.models import StatusConfig

app = typer.Typer(
    name="bragi-status",
    help="Bragi Status: health of Bragi and its Elasticsearch cluster",
    no_args_is_help=True,
)
console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _load(path: Path | None) -> StatusConfig:
    from bragi_status.config.loader import load_config

    try:
        return load_config(path=path)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)


def _style(value: str) -> str:
    return "green" if value == "available" else "red"


@app.command()
def status(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-status.yaml"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    """Probe Bragi and Elasticsearch once and print the report."""
    from bragi_status.probe.errors import ProbeError
    from bragi_status.probe.pipeline import StatusPipeline
    from bragi_status.probe.response import assemble_error, assemble_response

    config = _load(path)
    _configure_logging(log_level or config.log_level)

    pipeline = StatusPipeline(config)
    try:
        report = asyncio.run(pipeline.run())
    except ProbeError as exc:
        if as_json:
            console.print_json(json.dumps({"error": assemble_error(exc)}))
        else:
            state = pipeline.failed_component.value
            console.print(f"[red]{state}[/red] {exc.title} ({exc.kind}): {escape(str(exc))}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps(assemble_response(report)))
        return

    table = Table(title="Bragi Status")
    table.add_column("Service", style="bold")
    table.add_column("URL")
    table.add_column("Version")
    table.add_column("Status")
    table.add_row(
        report.label,
        report.url,
        report.version,
        f"[{_style(report.status.value)}]{report.status.value}[/{_style(report.status.value)}]",
    )
    if report.elastic:
        es = report.elastic
        label = f"{es.label} ({es.name})" if es.name else es.label
        table.add_row(
            label,
            es.url,
            es.version or "—",
            f"[{_style(es.status.value)}]{es.status.value}[/{_style(es.status.value)}]",
        )
    console.print(table)

    if report.elastic and report.elastic.indices:
        indices = Table(title=f"Indices ({report.elastic.index_prefix})")
        indices.add_column("Index", style="bold")
        indices.add_column("Place type")
        indices.add_column("Coverage")
        indices.add_column("Visibility")
        indices.add_column("Date")
        indices.add_column("Count", justify="right")
        for idx in report.elastic.indices:
            indices.add_row(
                idx.label,
                idx.place_type,
                idx.coverage,
                idx.visibility.value,
                idx.date.strftime("%Y-%m-%d %H:%M:%S"),
                str(idx.count),
            )
        console.print(indices)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind host (default: service.host)"),
    port: int | None = typer.Option(None, help="Bind port (default: service.port)"),
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-status.yaml"),
) -> None:
    """Start the bragi-status API server."""
    import uvicorn

    from bragi_status.api.app import create_app

    config = _load(path)
    _configure_logging(config.log_level)
    bind_host = host or config.service.host
    bind_port = port or config.service.port

    console.print(f"[bold]Bragi Status[/bold] starting on http://{bind_host}:{bind_port}")
    console.print(f"Probing {config.bragi.host}:{config.bragi.port}")
    uvicorn.run(create_app(config), host=bind_host, port=bind_port, reload=False)


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-status.yaml"),
) -> None:
    """Validate configuration file."""
    import yaml

    from bragi_status.config.loader import load_config
    from bragi_status.probe.errors import ConfigurationError

    try:
        config = load_config(path=path)
        console.print("[green]✓[/green] YAML parses correctly")
        console.print("[green]✓[/green] Pydantic validation passes")
    except FileNotFoundError as exc:
        console.print(f"[red]✗ {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    except yaml.YAMLError as exc:
        console.print(f"[red]✗ YAML parsing failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print("[green]✓[/green] YAML parses correctly")
        console.print(f"[red]✗ Pydantic validation failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    try:
        url = config.bragi.url
    except ConfigurationError as exc:
        console.print(f"[red]✗ {escape(str(exc))}[/red]")
        console.print("\n[red bold]1 validation error(s) found.[/red bold]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Bragi URL is {url}")
    console.print("\n[green bold]Configuration is valid.[/green bold]")


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-status.yaml"),
) -> None:
    """Print resolved configuration."""
    config = _load(path)

    console.print(f"[bold]Bragi Status[/bold] ({config.mode})\n")
    console.print(f"[bold]Service:[/bold] {config.service.host}:{config.service.port}")
    console.print(f"[bold]Bragi:[/bold] {config.bragi.host}:{config.bragi.port}")
    console.print(f"[bold]Log level:[/bold] {config.log_level}\n")

    console.print("[bold]Probe:[/bold]")
    console.print(f"  Timeout: {config.probe.timeout}s")
    console.print(f"  On elasticsearch failure: {config.probe.on_elasticsearch_failure}")
    console.print(f"  On malformed index: {config.probe.on_malformed_index}")
    console.print(f"  Default index prefix: {config.probe.default_index_prefix}")


def main() -> None:
    app()
