import dotenv
from pydantic.v1 import BaseSettings, Field

API_HOST = "https://rws.netdna.com"


class EnvSettings(BaseSettings):
    api_host: str = API_HOST

    # credentials, the bare names are what the old maxpurge tool read
    alias: str | None = Field(None, env=["maxcdn_alias", "alias"])
    token: str | None = Field(None, env=["maxcdn_token", "token"])
    secret: str | None = Field(None, env=["maxcdn_secret", "secret"])
    zone: str | None = Field(None, env=["maxcdn_zone", "zone"])

    # http
    timeout: float = 30.0
    max_workers: int = 10

    # debug
    verbose: bool = False

    class Config:
        env_file = dotenv.find_dotenv(usecwd=True)
        env_prefix = "maxcdn_"


env = EnvSettings()
