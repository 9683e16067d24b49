"""CLI entry point (Typer).

    dumb_pelican_client [--log-level LEVEL] [--retries N] object get <url> <filename>
    dumb_pelican_client [--log-level LEVEL] [--retries N] object put <filename> <url>
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from dumb_pelican_client import __version__
from dumb_pelican_client.core.config import AppSettings
from dumb_pelican_client.core.domain.models import TransferRequest, Verb
from dumb_pelican_client.core.errors import ArgumentError, PelicanClientError
from dumb_pelican_client.core.log_setup import configure_logging
from dumb_pelican_client.core.services.object_transfer import run_transfer

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dumb_pelican_client",
    no_args_is_help=True,
    help="Get and put single objects in a Pelican/OSDF federation using HTCondor tokens.",
)
object_app = typer.Typer(no_args_is_help=True, help="Single-object transfers.")
app.add_typer(object_app, name="object")

_err_console = Console(stderr=True)


@dataclass
class CliState:
    settings: AppSettings
    retries: int


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dumb_pelican_client {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="off, error, warn, info, debug or trace."
    ),
    retries: Optional[int] = typer.Option(
        None, "--retries", "-r", min=0, help="Extra origins to try after a failed attempt."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    try:
        settings = AppSettings()
    except ValidationError as exc:
        _err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc
    try:
        configure_logging(log_level or settings.log_level)
    except ArgumentError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc
    ctx.obj = CliState(
        settings=settings,
        retries=settings.retries if retries is None else retries,
    )


def _run(ctx: typer.Context, request: TransferRequest) -> None:
    state: CliState = ctx.obj
    try:
        run_transfer(request, state.settings, retries=state.retries)
    except (PelicanClientError, OSError) as exc:
        logger.debug("transfer failed: %s", exc, exc_info=True)
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc


@object_app.command("get")
def object_get(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Logical object URL (osdf://...)."),
    filename: Path = typer.Argument(..., help="Destination file."),
) -> None:
    """Download an object to a local file."""

    _run(ctx, TransferRequest(url=url, filename=filename, verb=Verb.GET))


@object_app.command("put")
def object_put(
    ctx: typer.Context,
    filename: Path = typer.Argument(..., help="Source file."),
    url: str = typer.Argument(..., help="Logical object URL (osdf://...)."),
) -> None:
    """Upload a local file as an object."""

    _run(ctx, TransferRequest(url=url, filename=filename, verb=Verb.PUT))


def run() -> None:
    app()
