# tests/cluster/test_client.py
from __future__ import annotations

import asyncio

import pytest
import requests

from esroll.cluster.client import ClusterApiClient
from esroll.cluster.errors import ConnectivityError

URL = "http://10.0.0.1:9200"


class FakeResponse:
    def __init__(self, status_code=200, body=None, invalid_json=False):
        self.status_code = status_code
        self._body = body if body is not None else {}
        self._invalid = invalid_json

    def json(self):
        if self._invalid:
            raise ValueError("Expecting value")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.trust_env = True
        self.calls = []
        self.response = response or FakeResponse()
        self.error = error
        self.closed = False

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json, timeout))
        if self.error:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


def test_client_ignores_environment_proxies():
    session = FakeSession()
    ClusterApiClient(session=session)
    assert session.trust_env is False


def test_health_issues_get(monkeypatch):
    session = FakeSession(FakeResponse(body={"status": "green", "number_of_nodes": 3}))
    client = ClusterApiClient(timeout=5, session=session)

    assert asyncio.run(client.health(URL)) == {"status": "green", "number_of_nodes": 3}
    assert session.calls == [("GET", f"{URL}/_cluster/health", None, 5)]


def test_management_paths():
    session = FakeSession()
    client = ClusterApiClient(session=session)

    asyncio.run(client.nodes(URL))
    asyncio.run(client.shutdown_local(URL))
    asyncio.run(client.put_settings(URL, {"transient": {"x": "y"}}))

    assert [(m, u, j) for m, u, j, _ in session.calls] == [
        ("GET", f"{URL}/_nodes", None),
        ("POST", f"{URL}/_cluster/nodes/_local/_shutdown", None),
        ("PUT", f"{URL}/_cluster/settings", {"transient": {"x": "y"}}),
    ]


@pytest.mark.parametrize("status", [404, 500, 503])
def test_non_200_is_connectivity_error(status):
    client = ClusterApiClient(session=FakeSession(FakeResponse(status_code=status)))

    with pytest.raises(ConnectivityError) as ei:
        asyncio.run(client.health(URL))
    assert ei.value.status_code == status


def test_transport_error_is_connectivity_error():
    client = ClusterApiClient(session=FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(ConnectivityError) as ei:
        asyncio.run(client.health(URL))
    assert ei.value.url == f"{URL}/_cluster/health"
    assert isinstance(ei.value.__cause__, requests.ConnectionError)


def test_invalid_json_is_connectivity_error():
    client = ClusterApiClient(session=FakeSession(FakeResponse(invalid_json=True)))

    with pytest.raises(ConnectivityError):
        asyncio.run(client.health(URL))


def test_close_closes_session():
    session = FakeSession()
    ClusterApiClient(session=session).close()
    assert session.closed
