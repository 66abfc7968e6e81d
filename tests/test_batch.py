import threading
import time
from urllib.parse import parse_qsl

import httpx
import pytest

from conftest import envelope
from maxcdn.errors import APIError, BatchPurgeError
from maxcdn.models.batch import PurgeBatch, PurgeResult
from maxcdn.models.response import GenericResponse


def zone_of(request: httpx.Request) -> int:
    return int(request.url.path.split("/")[-2])


def test_purge_zones_keeps_input_order(make_client):
    def handler(request):
        zone = zone_of(request)
        # answer later zones first
        time.sleep(0.01 * (5 - zone))
        return httpx.Response(200, content=envelope(data={"zone": zone}))

    batch = make_client(handler).purge_zones([1, 2, 3, 4, 5])

    assert batch.ok
    assert [r.target for r in batch] == [1, 2, 3, 4, 5]
    assert [r.data["zone"] for r in batch.responses] == [1, 2, 3, 4, 5]
    assert batch.last_error is None
    assert batch.raise_for_errors() is batch


def test_purge_zones_partial_failure(make_client):
    def handler(request):
        zone = zone_of(request)
        if zone == 2:
            raise httpx.ConnectTimeout("timed out", request=request)
        if zone == 3:
            body = envelope(code=404, error={"message": "Zone not found", "type": "not_found"})
            return httpx.Response(404, content=body)
        return httpx.Response(200, content=envelope())

    batch = make_client(handler).purge_zones([1, 2, 3, 4])

    assert not batch.ok
    assert len(batch) == 4
    assert [r.target for r in batch.errors] == [2, 3]
    assert len(batch.responses) == 2

    timeout, not_found = batch.errors
    assert isinstance(timeout.error, httpx.ConnectTimeout)
    assert timeout.response is None
    assert isinstance(not_found.error, APIError)
    assert not_found.response.code == 404
    assert batch.last_error is not_found.error

    with pytest.raises(BatchPurgeError, match="2 of 4 purges failed") as exc_info:
        batch.raise_for_errors()
    assert exc_info.value.batch is batch


def test_purge_files(make_client):
    seen = []
    lock = threading.Lock()

    def handler(request):
        with lock:
            seen.append(dict(parse_qsl(request.content.decode()))["file"])
        assert request.url.path == "/alias/zones/pull.json/7/cache"
        return httpx.Response(200, content=envelope())

    batch = make_client(handler).purge_files(7, ["/a.css", "/b.js", "/c.png"])

    assert batch.ok
    assert [r.target for r in batch] == ["/a.css", "/b.js", "/c.png"]
    assert sorted(seen) == ["/a.css", "/b.js", "/c.png"]


def test_empty_batch(make_client):
    def handler(request):
        raise AssertionError("no request expected")

    batch = make_client(handler).purge_zones([])

    assert len(batch) == 0
    assert batch.ok
    assert batch.responses == []


def test_concurrency_is_bounded(make_client):
    lock = threading.Lock()
    active = 0
    peak = 0

    def handler(request):
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1
        return httpx.Response(200, content=envelope())

    batch = make_client(handler, max_workers=2).purge_zones(range(1, 9))

    assert batch.ok
    assert len(batch) == 8
    assert peak <= 2


def test_unexpected_errors_propagate(make_client):
    def handler(request):
        raise KeyError("bug")

    with pytest.raises(KeyError):
        make_client(handler).purge_zones([1, 2])


def test_result_ok():
    response = GenericResponse(code=200)
    assert PurgeResult(1, response=response).ok
    assert not PurgeResult(1, error=RuntimeError("x")).ok


def test_batch_without_errors_has_no_last_error():
    batch = PurgeBatch([PurgeResult("a", response=GenericResponse(code=200))])
    assert batch.last_error is None
    assert batch.errors == []
