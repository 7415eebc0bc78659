from __future__ import annotations

import pytest
import requests

from influxdb_linekit import transport
from influxdb_linekit.exceptions import InfluxDBTransportError


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.text = content.decode()


class FakeRequests:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: list[dict] = []

    def get(self, url, **kwargs):
        self.calls.append({"method": "GET", "url": url, **kwargs})
        return self.response

    def post(self, url, **kwargs):
        self.calls.append({"method": "POST", "url": url, **kwargs})
        return self.response


@pytest.fixture
def fake_requests(monkeypatch):
    def install(response: FakeResponse) -> FakeRequests:
        fake = FakeRequests(response)
        monkeypatch.setattr(transport.requests, "get", fake.get)
        monkeypatch.setattr(transport.requests, "post", fake.post)
        return fake

    return install


def test_manage_posts_query_form(fake_requests) -> None:
    fake = fake_requests(FakeResponse(200, b'{"results":[{"statement_id":0}]}'))
    transport.manage("http://localhost:8086", "CREATE DATABASE testdb")

    assert fake.calls[0]["method"] == "POST"
    assert fake.calls[0]["url"] == "http://localhost:8086/query"
    assert fake.calls[0]["data"] == {"q": "CREATE DATABASE testdb"}
    assert fake.calls[0]["timeout"] == transport.DEFAULT_TIMEOUT


def test_manage_requires_exactly_200(fake_requests) -> None:
    fake_requests(FakeResponse(204))
    with pytest.raises(InfluxDBTransportError) as excinfo:
        transport.manage("http://localhost:8086", "CREATE DATABASE testdb")
    assert excinfo.value.status_code == 204


def test_query_gets_with_params_and_returns_body(fake_requests) -> None:
    body = b'{"results":[{"statement_id":0}]}'
    fake = fake_requests(FakeResponse(200, body))

    assert transport.query("http://localhost:8086", "testdb", "SELECT * from foo") == body
    assert fake.calls[0]["method"] == "GET"
    assert fake.calls[0]["url"] == "http://localhost:8086/query"
    assert fake.calls[0]["params"] == {"db": "testdb", "q": "SELECT * from foo"}


def test_query_failure_carries_body(fake_requests) -> None:
    fake_requests(FakeResponse(400, b'{"error":"error parsing query"}'))
    with pytest.raises(InfluxDBTransportError, match="400 - .*error parsing query"):
        transport.query("http://localhost:8086", "testdb", "SELEC")


def test_write_posts_utf8_lines(fake_requests) -> None:
    fake = fake_requests(FakeResponse(204))
    transport.write("http://localhost:8086", "testdb", "cpu,tag1=foo temperature=42i\ncpu v=\"é\"")

    call = fake.calls[0]
    assert call["url"] == "http://localhost:8086/write"
    assert call["params"] == {"db": "testdb"}
    assert call["data"] == 'cpu,tag1=foo temperature=42i\ncpu v="é"'.encode("utf-8")


def test_write_rejects_non_2xx(fake_requests) -> None:
    fake_requests(FakeResponse(500, b"internal"))
    with pytest.raises(InfluxDBTransportError, match="Write failed: 500"):
        transport.write("http://localhost:8086", "testdb", "m v=1i")


def test_connection_errors_are_wrapped(monkeypatch) -> None:
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(transport.requests, "get", refuse)
    with pytest.raises(InfluxDBTransportError, match="connection refused") as excinfo:
        transport.query("http://localhost:1", "db", "SELECT 1")
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
