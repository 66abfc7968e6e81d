import httpx
import pytest

from conftest import envelope
from maxcdn.errors import APIError, ResponseParseError
from maxcdn.models.response import GenericResponse


def test_parse_success():
    res = httpx.Response(200)
    parsed = GenericResponse.parse(envelope(data={"zone": {"id": 1}}), res)

    assert parsed.code == 200
    assert parsed.data == {"zone": {"id": 1}}
    assert parsed.error is None
    assert parsed.response is res
    assert parsed.ok


def test_parse_api_error_keeps_envelope():
    raw = envelope(code=401, error={"message": "Invalid consumer key", "type": "unauthorized"})

    with pytest.raises(APIError) as exc_info:
        GenericResponse.parse(raw, httpx.Response(401))

    error = exc_info.value
    assert str(error) == "unauthorized: Invalid consumer key"
    assert error.code == 401
    assert error.type == "unauthorized"
    assert error.response.code == 401
    assert error.response.response.status_code == 401


def test_parse_empty_error_is_not_an_error():
    parsed = GenericResponse.parse(envelope(error={"message": "", "type": ""}))
    assert parsed.ok


@pytest.mark.parametrize("raw", [b"", b"<html>bad gateway</html>", b"[1, 2]", b'{"code": "abc"}'])
def test_parse_invalid(raw):
    with pytest.raises(ResponseParseError) as exc_info:
        GenericResponse.parse(raw, httpx.Response(502))
    assert exc_info.value.status_code == 502


def test_parse_missing_code_uses_http_status():
    parsed = GenericResponse.parse(b'{"data": null}', httpx.Response(201))
    assert parsed.code == 201
    assert parsed.data == {}


def test_not_ok_code():
    parsed = GenericResponse.parse(envelope(code=404))
    assert not parsed.ok


def test_dump_excludes_response():
    parsed = GenericResponse.parse(envelope(data={"a": 1}), httpx.Response(200))
    assert "response" not in parsed.model_dump()
