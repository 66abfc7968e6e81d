"""Configuration"""
from __future__ import annotations

from typing import Optional

import pyperclip
import rich
import typer
from typing_extensions import Annotated

from maxcdn.models.keyring_config import ConfigKey, KeyringConfig

app = typer.Typer(no_args_is_help=True)
cp = rich.print


@app.command(name="set")
def set_config(
        key: ConfigKey,
        value: Annotated[Optional[str], typer.Argument()] = None
):
    """Set a credential, or clear it when no value is given."""
    with KeyringConfig.load_from_keyring() as config:
        if value is None:
            config.pop(key, None)
        else:
            config[key] = value

    cp(f"{'Cleared' if value is None else 'Saved'} key {repr(key.value)}")


@app.command(name="set-cp")
def set_cp_config(
    key: ConfigKey
):
    """Set a credential from the clipboard."""
    value = pyperclip.paste().strip()
    if not value:
        cp("[red]Error:[/red] Clipboard is empty.")
        raise typer.Exit(1)

    with KeyringConfig.load_from_keyring() as config:
        config[key] = value

    cp(f"Saved key {repr(key.value)} from clipboard ({len(value)} chars)")


@app.command()
def show():
    """Show the stored credentials, secrets masked."""
    config = KeyringConfig.load_from_keyring()
    cp(config.to_keys_json())
