"""Signed raw requests against the API, for poking at endpoints."""
from __future__ import annotations

import enum
from typing import Optional

import httpx
import rich
import typer
from rich import print as cp
from typer import Argument, Option
from typing_extensions import Annotated

from maxcdn.client import MaxCDN
from maxcdn.errors import APIError, MaxCDNError
from maxcdn.models.response import GenericResponse
from maxcdn.models.settings import env
from maxcdn.utils.credentials import AliasOption, SecretOption, TokenOption, resolve_credentials

app = typer.Typer()


class Method(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


DataOption = Annotated[
    Optional[list[str]],
    Option("--data", "-d", help="form field as key=value, repeatable", show_default=False),
]


def parse_form(data: list[str] | None) -> list[tuple[str, str]]:
    """Split key=value pairs, keys may repeat."""
    form = []
    for item in data or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="'--data'")
        form.append((key, value))
    return form


def print_headers(res: httpx.Response):
    typer.echo(f"{res.http_version} {res.status_code} {res.reason_phrase}")
    for name, value in res.headers.items():
        typer.echo(f"{name}: {value}")
    typer.echo()


@app.command()
def request(
    method: Annotated[Method, Argument(case_sensitive=False, help="http method")],
    endpoint: Annotated[str, Argument(help="endpoint below the alias, e.g. /account.json")],
    data: DataOption = None,
    headers: Annotated[bool, Option("--headers", "-i", help="Print the response status and headers")] = False,
    raw: Annotated[bool, Option("--raw", help="Print the body as received")] = False,
    alias: AliasOption = None,
    token: TokenOption = None,
    secret: SecretOption = None,
):
    """Send a signed request and print the json response."""
    alias, token, secret = resolve_credentials(alias, token, secret)
    form = parse_form(data)

    with MaxCDN(alias, token, secret, api_host=env.api_host, timeout=env.timeout) as api:
        try:
            body, res = api.do(method.value, endpoint, form)
        except (MaxCDNError, httpx.HTTPError) as e:
            if env.verbose:
                raise
            cp(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    if headers:
        print_headers(res)

    if raw:
        typer.echo(body.decode("utf-8", errors="replace"))
        return

    try:
        GenericResponse.parse(body, res)
    except APIError as e:
        rich.print_json(body.decode("utf-8"))
        cp(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except MaxCDNError as e:
        cp(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    rich.print_json(body.decode("utf-8"))
