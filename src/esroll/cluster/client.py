# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cluster/client.py

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from esroll.cluster.errors import ConnectivityError
from esroll.cluster.models import HealthSnapshot

log = logging.getLogger("esroll")


class ClusterApiClient:
    """
    Thin async wrapper over the cluster management HTTP API.

    Requests run in a worker thread so every call is an await point.
    Transport errors and any status other than 200 raise ConnectivityError.
    """

    def __init__(self, *, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        # never route cluster traffic through an environment proxy
        self.session.trust_env = False

    # -----------------------
    # HTTP helpers
    # -----------------------
    def _request(self, method: str, url: str, payload: Optional[dict] = None) -> Any:
        log.debug("%s %s", method, url)
        try:
            r = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ConnectivityError(url, reason=str(exc)) from exc

        if r.status_code != 200:
            raise ConnectivityError(url, status_code=r.status_code)

        try:
            return r.json()
        except ValueError as exc:
            raise ConnectivityError(url, reason=f"invalid JSON body: {exc}") from exc

    async def request(self, method: str, url: str, payload: Optional[dict] = None) -> Any:
        return await asyncio.to_thread(self._request, method, url, payload)

    # -----------------------
    # Management API
    # -----------------------
    async def nodes(self, endpoint: str) -> dict:
        return await self.request("GET", f"{endpoint}/_nodes")

    async def health(self, endpoint: str) -> HealthSnapshot:
        return await self.request("GET", f"{endpoint}/_cluster/health")

    async def shutdown_local(self, endpoint: str) -> dict:
        return await self.request("POST", f"{endpoint}/_cluster/nodes/_local/_shutdown")

    async def put_settings(self, endpoint: str, settings: dict) -> dict:
        return await self.request("PUT", f"{endpoint}/_cluster/settings", settings)

    def close(self) -> None:
        self.session.close()
