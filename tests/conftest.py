import json
import logging

import httpx
import keyring
import pytest
import structlog

from maxcdn import purge, request
from maxcdn.client import MaxCDN
from maxcdn.models.settings import API_HOST, env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the real environment and keyring out of tests."""
    for key in ("alias", "token", "secret", "zone"):
        monkeypatch.setattr(env, key, None)
    monkeypatch.setattr(env, "api_host", API_HOST)
    monkeypatch.setattr(env, "verbose", False)
    monkeypatch.setattr(env, "max_workers", 10)
    yield
    structlog.reset_defaults()
    root = logging.getLogger("maxcdn")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture(autouse=True)
def fake_keyring(monkeypatch):
    store: dict[tuple[str, str], str] = {}

    monkeypatch.setattr(keyring, "get_password", lambda service, user: store.get((service, user)))
    monkeypatch.setattr(
        keyring, "set_password", lambda service, user, value: store.__setitem__((service, user), value)
    )
    return store


def envelope(code: int = 200, data: dict | None = None, error: dict | None = None) -> bytes:
    body = {"code": code, "data": data or {}}
    if error is not None:
        body["error"] = error
    return json.dumps(body).encode()


@pytest.fixture
def make_client():
    """Build a client whose requests are answered by handler."""
    clients = []

    def factory(handler, **kwargs) -> MaxCDN:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return MaxCDN("alias", "token", "secret", http_client=http_client, **kwargs)

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def mock_api(monkeypatch):
    """Answer requests made by the command line tools with handler."""

    def install(handler):
        transport = httpx.MockTransport(handler)

        def factory(*args, **kwargs):
            kwargs["http_client"] = httpx.Client(transport=transport)
            return MaxCDN(*args, **kwargs)

        monkeypatch.setattr(purge, "MaxCDN", factory)
        monkeypatch.setattr(request, "MaxCDN", factory)

    return install
