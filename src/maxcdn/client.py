"""MaxCDN REST API client."""
from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar
from urllib.parse import urlencode, urlsplit

import httpx

from maxcdn.errors import MaxCDNError, MissingCredentialsError, QueryStringError
from maxcdn.models.batch import PurgeBatch, PurgeResult
from maxcdn.models.response import GenericResponse
from maxcdn.models.settings import API_HOST, EnvSettings, env
from maxcdn.utils import uris
from maxcdn.utils.logs import get_logger
from maxcdn.utils.oauth import FORM_CONTENT_TYPE, OAuthSigner

USER_AGENT = "Python MaxCDN API Client"

Form = Mapping[str, Any] | Sequence[tuple[str, Any]]
T = TypeVar("T")

logger = get_logger(__name__)


class MaxCDN:
    """
    Client for MaxCDN's REST API.

    Every call is signed with the alias' OAuth consumer key and secret.
    The http client can be replaced with any httpx.Client, it is not closed
    by this class when supplied by the caller.
    """

    def __init__(
        self,
        alias: str,
        token: str,
        secret: str,
        *,
        api_host: str | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
        max_workers: int = 10,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.alias = alias
        self.api_host = api_host or API_HOST
        self.timeout = timeout
        self.max_workers = max_workers

        self._signer = OAuthSigner(token, secret)
        self._http_client = http_client
        self._owns_client = http_client is None
        self._client_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: EnvSettings | None = None, **kwargs) -> MaxCDN:
        """Create a client from environment settings."""
        settings = settings or env

        missing = [key for key in ("alias", "token", "secret") if not getattr(settings, key)]
        if missing:
            raise MissingCredentialsError(*missing)

        kwargs.setdefault("api_host", settings.api_host)
        kwargs.setdefault("timeout", settings.timeout)
        kwargs.setdefault("max_workers", settings.max_workers)
        return cls(settings.alias, settings.token, settings.secret, **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(alias={self.alias!r}, api_host={self.api_host!r})"

    def __enter__(self) -> MaxCDN:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def http_client(self) -> httpx.Client:
        with self._client_lock:
            if self._http_client is None:
                self._http_client = httpx.Client(timeout=self.timeout)
                self._owns_client = True
            return self._http_client

    @http_client.setter
    def http_client(self, client: httpx.Client):
        with self._client_lock:
            if self._owns_client and self._http_client is not None and self._http_client is not client:
                self._http_client.close()
            self._http_client = client
            self._owns_client = False

    def close(self):
        """Close the http client if this instance created it."""
        with self._client_lock:
            if self._owns_client and self._http_client is not None:
                self._http_client.close()
                self._http_client = None

    def url(self, endpoint: str) -> str:
        return uris.join(self.api_host, self.alias, endpoint)

    def do(
        self, method: str, endpoint: str, form: Form | None = None
    ) -> tuple[bytes, httpx.Response]:
        """
        Send a signed request and return the raw body with the response.

        All other request methods go through here, use it directly to map
        the json onto your own types. The form is sent as the query string
        for GET and as the body otherwise. The HTTP status is not checked,
        errors are reported inside the json envelope.
        """
        method = method.upper()
        url = self.url(endpoint)

        if method == "GET" and urlsplit(url).query:
            raise QueryStringError(url)

        body = ""
        encoded = urlencode(form, doseq=True) if form else ""
        if encoded:
            if method == "GET":
                url = f"{url}?{encoded}"
            else:
                body = encoded

        # Only post needs a signed form
        signed_body = body if method == "POST" else ""

        headers = {
            "Authorization": self._signer.authorization_header(method, url, signed_body),
            "Content-Type": FORM_CONTENT_TYPE,
            "User-Agent": USER_AGENT,
        }

        log = logger.bind(method=method, url=url)
        log.debug("request.send")
        start = time.perf_counter()

        res = self.http_client.request(
            method, url, content=body.encode("utf-8") if body else None, headers=headers
        )

        log.debug(
            "request.done",
            status=res.status_code,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return res.content, res

    def _request(self, method: str, endpoint: str, form: Form | None = None) -> GenericResponse:
        raw, res = self.do(method, endpoint, form)
        return GenericResponse.parse(raw, res)

    def get(self, endpoint: str, form: Form | None = None) -> GenericResponse:
        return self._request("GET", endpoint, form)

    def post(self, endpoint: str, form: Form | None = None) -> GenericResponse:
        return self._request("POST", endpoint, form)

    def put(self, endpoint: str, form: Form | None = None) -> GenericResponse:
        return self._request("PUT", endpoint, form)

    def delete(self, endpoint: str, form: Form | None = None) -> GenericResponse:
        return self._request("DELETE", endpoint, form)

    @staticmethod
    def cache_endpoint(zone: int) -> str:
        return f"/zones/pull.json/{zone}/cache"

    def purge_zone(self, zone: int) -> GenericResponse:
        """Purge a zone's whole cache."""
        return self.delete(self.cache_endpoint(zone))

    def purge_file(self, zone: int, file: str) -> GenericResponse:
        """Purge a single cached file from a zone."""
        return self.delete(self.cache_endpoint(zone), {"file": file})

    def purge_files_in_zone(self, zone: int, files: Iterable[str]) -> GenericResponse:
        """Purge several cached files from a zone in one request."""
        form = [("files[]", file) for file in files]
        if not form:
            raise ValueError("No files given to purge")
        return self.delete(self.cache_endpoint(zone), form)

    def purge_zones(self, zones: Iterable[int]) -> PurgeBatch[int]:
        """Purge several zones concurrently, one request per zone."""
        return self._fan_out(self.purge_zone, list(zones))

    def purge_files(self, zone: int, files: Iterable[str]) -> PurgeBatch[str]:
        """Purge several files of a zone concurrently, one request per file."""
        return self._fan_out(lambda file: self.purge_file(zone, file), list(files))

    def _fan_out(
        self, purge: Callable[[T], GenericResponse], targets: list[T]
    ) -> PurgeBatch[T]:
        if not targets:
            return PurgeBatch()

        workers = min(self.max_workers, len(targets))
        log = logger.bind(targets=len(targets), workers=workers)
        log.debug("purge.batch.start")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="maxcdn-purge") as executor:
            futures = [executor.submit(purge, target) for target in targets]

        results: list[PurgeResult[T]] = []
        for target, future in zip(targets, futures):
            try:
                results.append(PurgeResult(target, response=future.result()))
            except MaxCDNError as e:
                # api errors still carry the parsed envelope
                results.append(PurgeResult(target, response=getattr(e, "response", None), error=e))
            except httpx.HTTPError as e:
                results.append(PurgeResult(target, error=e))

        batch = PurgeBatch(results)
        if batch.ok:
            log.debug("purge.batch.done")
        else:
            log.warning("purge.batch.failed", failed=len(batch.errors), last_error=str(batch.last_error))
        return batch
