"""Purge cached content."""
from __future__ import annotations

import time
from typing import NoReturn, Optional

import rich
import typer
from rich.markup import escape
from rich.table import Table
from typer import Option
from typing_extensions import Annotated

from maxcdn.client import MaxCDN
from maxcdn.models.batch import PurgeBatch, PurgeResult
from maxcdn.models.response import GenericResponse
from maxcdn.models.settings import env
from maxcdn.utils.credentials import (
    AliasOption,
    SecretOption,
    TokenOption,
    resolve_credentials,
    resolve_zones,
)
from maxcdn.utils.logs import configure_logging
from maxcdn.utils.spinners import spinner

app = typer.Typer()

ZoneOption = Annotated[
    Optional[list[str]],
    Option("--zone", "-z", help="zone to be purged (required), repeatable", show_default=False),
]
FileOption = Annotated[
    Optional[list[str]],
    Option("--file", "-f", help="cached file to be purged, repeatable", show_default=False),
]


def elapsed(start: float) -> str:
    return f"{time.monotonic() - start:.3f}s"


def fail(error: object, start: float) -> NoReturn:
    typer.echo(f"{error}.\n\nPurge failed after {elapsed(start)}.")
    raise typer.Exit(2)


def run_purge(api: MaxCDN, zones: list[int], files: list[str]) -> PurgeBatch:
    """Purge whole zones, or the given files in each zone."""
    if not files:
        return api.purge_zones(zones)

    batch = PurgeBatch()
    for zone in zones:
        batch.results.extend(api.purge_files(zone, files).results)
    return batch


def purged(response: GenericResponse) -> bool:
    return response.code == 200


def status_label(result: PurgeResult) -> str:
    if not result.ok:
        return f"[red]{escape(str(result.error))}[/red]"
    if result.response is None or not purged(result.response):
        return "[yellow]unexpected code[/yellow]"
    return "[green]ok[/green]"


def print_batch(batch: PurgeBatch):
    table = Table("target", "code", "result")
    for result in batch:
        code = str(result.response.code) if result.response else "-"
        status = status_label(result)
        table.add_row(str(result.target), code, status)
    rich.print(table)


@app.command()
def purge(
    alias: AliasOption = None,
    token: TokenOption = None,
    secret: SecretOption = None,
    zone: ZoneOption = None,
    file: FileOption = None,
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Log requests and show tracebacks")
    ] = False,
):
    """Purge zones, or files in a zone, from MaxCDN's cache."""
    if verbose:
        env.verbose = True
        configure_logging(verbose=True)

    alias, token, secret = resolve_credentials(alias, token, secret)
    zones = resolve_zones(zone)
    files = file or []

    start = time.monotonic()

    with MaxCDN(
        alias,
        token,
        secret,
        api_host=env.api_host,
        timeout=env.timeout,
        max_workers=env.max_workers,
    ) as api:
        with spinner(f"Purging {len(files) or 'all'} file(s) in {len(zones)} zone(s)"):
            batch = run_purge(api, zones, files)

    if len(batch) > 1:
        print_batch(batch)

    if not batch.ok:
        if env.verbose:
            batch.raise_for_errors()
        fail(batch.last_error, start)

    unexpected = [r for r in batch.responses if not purged(r)]
    if unexpected:
        fail(f"Unexpected response code {unexpected[-1].code}", start)

    typer.echo(f"Purge successful after: {elapsed(start)}.")


def run():
    """Entry point for the standalone maxpurge script."""
    configure_logging(env.verbose)
    app()
