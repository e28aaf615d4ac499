# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cluster/discovery.py

from __future__ import annotations

import logging
from typing import Tuple

from esroll.cluster.client import ClusterApiClient
from esroll.cluster.errors import DiscoveryError
from esroll.cluster.models import Node

log = logging.getLogger("esroll")


def management_endpoint(http_address: str, *, scheme: str = "http") -> str:
    """
    Turn a /_nodes ``http_address`` into a management URL.

    ``inet[/10.0.0.11:9200]`` -> ``http://10.0.0.11:9200``
    ``node-1/10.0.0.11:9200`` -> ``http://10.0.0.11:9200``
    ``10.0.0.11:9200``        -> ``http://10.0.0.11:9200``
    """
    address = http_address.split("/", 1)[1] if "/" in http_address else http_address
    address = address.replace("[", "").replace("]", "").strip()
    if not address:
        raise DiscoveryError(f"cannot derive an endpoint from http_address {http_address!r}")
    return f"{scheme}://{address}"


class NodeDiscovery:
    def __init__(self, client: ClusterApiClient, *, scheme: str = "http"):
        self.client = client
        self.scheme = scheme

    async def discover_nodes(self, cluster_url: str) -> Tuple[Node, ...]:
        """
        Query /_nodes once and return the members in response order.
        ConnectivityError propagates unchanged; there is no retry here.
        """
        body = await self.client.nodes(cluster_url)
        entries = (body or {}).get("nodes") or {}
        if not entries:
            raise DiscoveryError(f"{cluster_url} reported no nodes")

        nodes = []
        for node_id, info in entries.items():
            address = info.get("http_address")
            if not address:
                raise DiscoveryError(f"node {info.get('name', node_id)!r} has no http_address")
            nodes.append(
                Node(
                    name=info.get("name", node_id),
                    http=management_endpoint(address, scheme=self.scheme),
                    host=info.get("host", ""),
                )
            )

        log.info("Found %d node(s): %s", len(nodes), ", ".join(n.name for n in nodes))
        return tuple(nodes)
