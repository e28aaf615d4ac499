# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cluster/allocation.py

from __future__ import annotations

import logging

from esroll.cluster.client import ClusterApiClient
from esroll.cluster.errors import AckFailureError
from esroll.cluster.models import AllocationMode

log = logging.getLogger("esroll")

ALLOCATION_SETTING = "cluster.routing.allocation.enable"


def allocation_body(mode: AllocationMode) -> dict:
    return {"transient": {ALLOCATION_SETTING: mode.setting_value}}


class ShardAllocationController:
    def __init__(self, client: ClusterApiClient):
        self.client = client

    async def set_shard_allocation(self, endpoint: str, mode: AllocationMode | str) -> dict:
        """
        Toggle cluster-wide shard allocation through a transient setting.
        A 200 without ``"acknowledged": true`` raises AckFailureError.
        """
        mode = AllocationMode(mode)
        body = await self.client.put_settings(endpoint, allocation_body(mode))
        if not isinstance(body, dict) or body.get("acknowledged") is not True:
            raise AckFailureError(
                f"{endpoint}: {ALLOCATION_SETTING}={mode.setting_value} was not acknowledged ({body!r})"
            )
        log.debug("%s: %s=%s acknowledged", endpoint, ALLOCATION_SETTING, mode.setting_value)
        return body
