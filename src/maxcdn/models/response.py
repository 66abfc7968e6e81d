from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from maxcdn.errors import APIError, ResponseParseError


class ErrorInfo(BaseModel):
    message: str = ""
    type: str = ""


class GenericResponse(BaseModel):
    """The JSON envelope every API endpoint answers with."""

    code: int = 0
    data: dict[str, Any] = Field(default_factory=dict)
    error: ErrorInfo | None = None
    response: httpx.Response | None = Field(default=None, exclude=True)

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, value):
        return {} if value is None else value

    @property
    def ok(self) -> bool:
        return 200 <= self.code < 300 and not (self.error and self.error.message)

    @classmethod
    def parse(cls, raw: bytes, response: httpx.Response | None = None) -> GenericResponse:
        """
        Parse a raw response body.
        Raises APIError if the envelope carries an error message.
        """
        status_code = response.status_code if response is not None else None

        try:
            payload = json.loads(raw)
        except ValueError:
            raise ResponseParseError(status_code, raw) from None

        if not isinstance(payload, dict):
            raise ResponseParseError(status_code, raw)

        # some endpoints omit the code, fall back to the HTTP status
        if payload.get("code") is None and status_code is not None:
            payload["code"] = status_code

        try:
            result = cls.model_validate(payload)
        except ValidationError as e:
            raise ResponseParseError(status_code, raw) from e

        result.response = response

        if result.error is not None and result.error.message:
            raise APIError(result)

        return result

    class Config:
        arbitrary_types_allowed = True
