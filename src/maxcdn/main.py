from maxcdn import config, purge, request
from maxcdn.models.settings import env
from maxcdn.utils.logs import configure_logging

import typer
from typer import Option
from typing_extensions import Annotated

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main(
    verbose: Annotated[bool, Option("--verbose", "-v", help="Log requests and show tracebacks")] = False,
):
    """MaxCDN API tools."""
    if verbose:
        env.verbose = True
    configure_logging(env.verbose)


app.command()(purge.purge)
app.command()(request.request)
app.add_typer(config.app, name="config")
