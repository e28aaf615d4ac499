# tests/conftest.py
from __future__ import annotations

from typing import Any, Dict, List

import pytest

from esroll.cluster.errors import ConnectivityError
from esroll.config.models import RollingRestartConfig


# ---- Fakes for the management API and the SSH layer ----

class FakeClusterApi:
    """
    Stands in for ClusterApiClient.

    Responses are scripted per endpoint as lists; each call consumes the
    first item and the last one is sticky. An Exception item is raised.
    Every call lands in the shared ops log.
    """

    def __init__(self, ops: List[tuple]):
        self.ops = ops
        self.health_script: Dict[str, List[Any]] = {}
        self.nodes_body: Any = {"nodes": {}}
        self.shutdown_script: Dict[str, List[Any]] = {}
        self.settings_script: Dict[str, List[Any]] = {}
        self.closed = False

    @staticmethod
    def _next(script: Dict[str, List[Any]], endpoint: str, default: Any) -> Any:
        items = script.get(endpoint)
        if not items:
            return default
        item = items.pop(0) if len(items) > 1 else items[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def health(self, endpoint):
        self.ops.append(("health", endpoint))
        return dict(self._next(self.health_script, endpoint, {"status": "green"}))

    async def nodes(self, endpoint):
        self.ops.append(("nodes", endpoint))
        if isinstance(self.nodes_body, Exception):
            raise self.nodes_body
        return self.nodes_body

    async def shutdown_local(self, endpoint):
        self.ops.append(("shutdown", endpoint))
        return self._next(self.shutdown_script, endpoint, {"nodes": {}})

    async def put_settings(self, endpoint, settings):
        value = settings["transient"]["cluster.routing.allocation.enable"]
        self.ops.append(("allocation", endpoint, value))
        return self._next(self.settings_script, endpoint, {"acknowledged": True})

    def close(self):
        self.closed = True


class FakeRunner:
    def __init__(self, ops, host, rc=0, out="", err=""):
        self.ops = ops
        self.host = host
        self.rc, self.out, self.err = rc, out, err

    def run(self, cmd, *, timeout=None):
        self.ops.append(("ssh", self.host.address, cmd))
        return self.rc, self.out, self.err

    def close(self):
        self.ops.append(("ssh_close", self.host.address))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


def unreachable(url: str) -> ConnectivityError:
    return ConnectivityError(url, reason="Connection refused")


def nodes_response(*members: tuple[str, str, str]) -> dict:
    """members: (name, http_address, host)"""
    return {
        "cluster_name": "logstash",
        "nodes": {
            f"id-{name}": {"name": name, "http_address": addr, "host": host}
            for name, addr, host in members
        },
    }


# ---- Fixtures ----

@pytest.fixture
def ops():
    return []


@pytest.fixture
def api(ops):
    return FakeClusterApi(ops)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def ssh_results():
    """host address -> (rc, stdout, stderr) for the start command"""
    return {}


@pytest.fixture
def fake_ssh(monkeypatch, ops, ssh_results):
    from esroll.remote import ssh as ssh_mod

    opened = []

    def open_ssh(host, *, connect_timeout=20.0):
        opened.append(host)
        ops.append(("ssh_connect", host.address))
        rc, out, err = ssh_results.get(host.address, (0, "", ""))
        return FakeRunner(ops, host, rc, out, err)

    monkeypatch.setattr(ssh_mod, "open_ssh", open_ssh)
    return opened


@pytest.fixture
def cfg():
    return RollingRestartConfig.model_validate(
        {
            "cluster_url": "http://es-master:9200/",
            "ssh": {"user": "logstash"},
            "settle_seconds": 10,
        }
    )
