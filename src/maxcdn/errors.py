"""MaxCDN client errors."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from maxcdn.models.batch import PurgeBatch
    from maxcdn.models.response import GenericResponse


class MaxCDNError(Exception):
    """Base class for all client errors."""


class QueryStringError(MaxCDNError, ValueError):
    def __init__(self, url: str):
        super().__init__("oauth: url must not contain a query string")
        self.url = url


class ResponseParseError(MaxCDNError):
    """The API returned something that is not a JSON envelope."""

    def __init__(self, status_code: int | None, body: bytes):
        excerpt = body[:200].decode("utf-8", errors="replace")
        super().__init__(f"Could not parse response (HTTP {status_code}): {excerpt!r}")
        self.status_code = status_code
        self.body = body


class APIError(MaxCDNError):
    """The API returned an envelope with an error set."""

    def __init__(self, response: GenericResponse):
        error = response.error
        super().__init__(f"{error.type}: {error.message}")
        self.response = response
        self.code = response.code
        self.type = error.type
        self.message = error.message


class BatchPurgeError(MaxCDNError):
    def __init__(self, batch: PurgeBatch):
        failed = batch.errors
        super().__init__(
            f"{len(failed)} of {len(batch.results)} purges failed, last error: {batch.last_error}"
        )
        self.batch = batch


class MissingCredentialsError(MaxCDNError):
    def __init__(self, *keys: str):
        super().__init__(f"Missing required credentials: {', '.join(keys)}")
        self.keys = keys
