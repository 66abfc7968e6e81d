"""Credential lookup for the command line tools."""
from __future__ import annotations

from typing import Optional

import typer
from keyring.errors import KeyringError
from typer import Option
from typing_extensions import Annotated

from maxcdn.models.keyring_config import ConfigKey, KeyringConfig
from maxcdn.models.settings import env
from maxcdn.utils.logs import get_logger

logger = get_logger(__name__)

AliasOption = Annotated[
    Optional[str], Option("--alias", "-a", help="consumer alias (required)", show_default=False)
]
TokenOption = Annotated[
    Optional[str], Option("--token", "-t", help="consumer token (required)", show_default=False)
]
SecretOption = Annotated[
    Optional[str], Option("--secret", "-s", help="consumer secret (required)", show_default=False)
]


def load_keyring() -> KeyringConfig:
    """Load the keyring config, empty if no keyring backend is usable."""
    try:
        return KeyringConfig.load_from_keyring()
    except KeyringError as e:
        logger.debug("keyring.unavailable", error=str(e))
        return KeyringConfig()


def resolve_credentials(
    alias: str | None, token: str | None, secret: str | None
) -> tuple[str, str, str]:
    """
    Fill in credentials not given on the command line.
    Looks at the environment first, then the keyring.
    """
    values = {
        ConfigKey.ALIAS: alias or env.alias,
        ConfigKey.TOKEN: token or env.token,
        ConfigKey.SECRET: secret or env.secret,
    }

    if not all(values.values()):
        stored = load_keyring()
        for key, value in values.items():
            if not value:
                values[key] = stored.get(key)

    missing = [key.value for key, value in values.items() if not value]
    if missing:
        raise typer.BadParameter(
            f"missing {', '.join(missing)}. Pass them as options, set them in the "
            f"environment or run 'maxcdn config set KEY VALUE'."
        )

    return values[ConfigKey.ALIAS], values[ConfigKey.TOKEN], values[ConfigKey.SECRET]


def resolve_zones(zones: list[str] | None) -> list[int]:
    """Parse zone ids, 0x and 0o prefixes are accepted."""
    values = zones or ([env.zone] if env.zone else [])
    if not values:
        raise typer.BadParameter("a zone to purge is required", param_hint="'--zone' / ZONE")

    result = []
    for value in values:
        try:
            result.append(int(value.strip(), 0))
        except ValueError:
            raise typer.BadParameter(f"not a zone id: {value!r}", param_hint="'--zone'") from None
    return result
