#!/usr/bin/env python3
"""
tex-sync CLI - SyncTeX lookups and web service launcher
"""

import asyncio
import json
import logging
import os
import socket
import sys
from pathlib import Path

import click

from tex_sync.__version__ import __version__
from tex_sync.core.exceptions import SyncTexError

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _is_port_in_use(host: str, port: int) -> bool:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.settimeout(1)
            result = s.connect_ex((host, port))
            return result == 0
    except OSError:
        return False


def _is_localhost(host: str) -> bool:
    localhost_aliases = {"localhost", "127.0.0.1", "::1"}
    if host in localhost_aliases:
        return True
    if host.startswith("127."):
        return True
    return False


def _use_directory(directory: str) -> Path:
    directory = Path(directory).resolve()
    data_dir = directory / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    os.environ["TEX_SYNC_DATABASE_URL"] = f"sqlite:///{data_dir / 'tex_sync.db'}"
    return directory


def _configure_logging(level: str) -> None:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level.upper())


def _run_lookup(coro, as_json: bool, fields: dict[str, str]):
    try:
        result = asyncio.run(coro)
    except SyncTexError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({key: getattr(result, key) for key in fields}))
    else:
        for key, label in fields.items():
            click.echo(f"{label}:{getattr(result, key)}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="tex-sync")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: WARNING, or the log_level config key for config and serve)",
)
@click.pass_context
def cli(ctx, log_level):
    """tex-sync - SyncTeX forward and backward search

    Commands:
        forward        Source line -> PDF position
        backward       PDF position -> source line
        inspect        Summary of a PDF's synctex data
        config         View or modify configuration
        serve          Start web service

    Examples:
        tex-sync forward main.pdf main.tex 42
        tex-sync backward main.pdf 1 120.5 300
        tex-sync serve .
    """
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    _configure_logging(log_level or "WARNING")


@cli.command()
@click.argument("pdf", type=click.Path(dir_okay=False))
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("line", type=int)
@click.option("--encoding", "encodings", multiple=True, help="Fallback encoding for input file names (repeatable)")
@click.option("--synctex-path", default=None, help="Run this synctex binary instead of the built-in parser")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def forward(pdf, file, line, encodings, synctex_path, as_json):
    """Find the PDF position of FILE:LINE"""
    from tex_sync.services import SyncTexLocator

    locator = SyncTexLocator(
        encodings=encodings,
        use_builtin_engine=synctex_path is None,
        synctex_path=synctex_path,
    )
    _run_lookup(locator.forward(line, file, pdf), as_json, {"page": "Page", "x": "x", "y": "y"})


@cli.command()
@click.argument("pdf", type=click.Path(dir_okay=False))
@click.argument("page", type=int)
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option("--encoding", "encodings", multiple=True, help="Fallback encoding for input file names (repeatable)")
@click.option("--synctex-path", default=None, help="Run this synctex binary instead of the built-in parser")
@click.option("--raw", is_flag=True, help="Report the input path as recorded, without checking the file system")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def backward(pdf, page, x, y, encodings, synctex_path, raw, as_json):
    """Find the source line at position X,Y on PAGE"""
    from tex_sync.services import SyncTexLocator

    locator = SyncTexLocator(
        encodings=encodings,
        resolve_input_path=not raw,
        use_builtin_engine=synctex_path is None,
        synctex_path=synctex_path,
    )
    _run_lookup(
        locator.backward(page, x, y, pdf),
        as_json,
        {"file": "Input", "line": "Line", "column": "Column"},
    )


@cli.command()
@click.argument("pdf", type=click.Path(dir_okay=False))
def inspect(pdf):
    """Show a summary of the synctex data of PDF"""
    from tex_sync.synctex import load

    try:
        document = asyncio.run(load(pdf))
    except SyncTexError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"SyncTeX Version: {document.version}")
    click.echo(f"Pages: {document.page_count}")
    click.echo(f"Offset: {document.offset.x}, {document.offset.y}")
    click.echo("Inputs:")
    for tag in sorted(document.inputs):
        path = document.inputs[tag]
        lines = document.blocks_by_file.get(path, {})
        click.echo(f"  [{tag}] {path} ({len(lines)} lines)")


@cli.command()
@click.argument("directory", type=click.Path(exists=False, file_okay=False), default=".")
@click.option("--show", "show_config", is_flag=True, help="Show current configuration")
@click.option("--set", "set_values", multiple=True, help="Set config value (key=value)")
@click.pass_context
def config(ctx, directory, show_config, set_values):
    """View or modify configuration"""
    from tex_sync.core.config import DEFAULT_CONFIG, Config, get_db

    _use_directory(directory)
    get_db().init_default_config()
    if ctx.obj["log_level"] is None:
        _configure_logging(Config.LOG_LEVEL)

    if show_config or not set_values:
        click.echo("\nCurrent Configuration:")
        click.echo("-" * 40)
        for key, value in sorted(Config.get_all_config().items()):
            click.echo(f"  {key}: {value or '(not set)'}")
        click.echo("-" * 40)
        return

    updates = {}
    for set_value in set_values:
        if "=" not in set_value:
            click.secho(f"Ignoring '{set_value}', expected key=value", fg="yellow")
            continue
        key, value = set_value.split("=", 1)
        key = key.strip()
        if key not in DEFAULT_CONFIG:
            click.secho(f"Unknown config key: {key}", fg="red")
            sys.exit(1)
        value = value.strip()
        if key == "log_level":
            value = value.upper()
            if value not in LOG_LEVELS:
                click.secho(f"Unknown log level: {value}", fg="red")
                sys.exit(1)
        updates[key] = value

    if updates:
        Config.update_config(updates)
        click.secho("\n✓ Configuration updated!", fg="green")
    else:
        click.echo("No changes")


@cli.command()
@click.argument("directory", type=click.Path(exists=False, file_okay=False), default=".")
@click.option("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
@click.option("--port", default=8002, type=int, help="Port to bind (default: 8002)")
@click.option(
    "--allow-non-localhost-access",
    is_flag=True,
    help="Allow binding to a non-localhost address",
)
@click.pass_context
def serve(ctx, directory, host, port, allow_non_localhost_access):
    """Start web service"""
    from tex_sync.core.config import Config

    directory = _use_directory(directory)

    if not _is_localhost(host) and not allow_non_localhost_access:
        click.secho("Error: Non-localhost access requires --allow-non-localhost-access", fg="red", bold=True)
        sys.exit(1)

    if _is_port_in_use(host, port):
        click.secho(f"Port {port} is in use", fg="red", bold=True)
        click.echo("Use --port to specify another port")
        sys.exit(1)

    click.echo(f"\n{'=' * 50}")
    click.echo("  tex-sync - SyncTeX service")
    click.echo(f"{'=' * 50}")
    click.echo(f"\nData directory: {directory}")
    click.echo(f"API: http://{host}:{port}/api")
    click.echo(f"API docs: http://{host}:{port}/docs")
    click.echo("\nPress Ctrl+C to stop\n")

    import uvicorn

    uvicorn.run(
        "tex_sync.web.app:app",
        host=host,
        port=port,
        log_level=(ctx.obj["log_level"] or Config.LOG_LEVEL).lower(),
    )


if __name__ == "__main__":
    cli()
