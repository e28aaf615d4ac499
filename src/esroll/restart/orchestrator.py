# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/restart/orchestrator.py

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Optional

from esroll.cluster.allocation import ShardAllocationController
from esroll.cluster.client import ClusterApiClient
from esroll.cluster.discovery import NodeDiscovery
from esroll.cluster.errors import NodeRestartError, RollingRestartError
from esroll.cluster.models import AllocationMode, Node, RestartContext
from esroll.cluster.poller import ClusterStatePoller
from esroll.config.models import RollingRestartConfig
from esroll.observers.dispatcher import EventBus
from esroll.observers.events import (
    NodeRestarted,
    NodesDiscovered,
    NodeStepStarted,
    RunFailed,
    RunStarted,
    RunSucceeded,
    new_ctx,
)
from esroll.remote.process import RemoteProcessController

log = logging.getLogger("esroll")


class RollingRestartOrchestrator:
    """
    Restart every node of the cluster, one at a time.

    The first failure raises and ends the run; remaining nodes are left
    untouched. Shard allocation is not re-enabled when a step between
    disable-allocation and enable-allocation fails.
    """

    def __init__(
        self,
        cfg: RollingRestartConfig,
        *,
        client: ClusterApiClient,
        poller: ClusterStatePoller,
        discovery: NodeDiscovery,
        allocation: ShardAllocationController,
        process: RemoteProcessController,
        bus: Optional[EventBus] = None,
    ):
        self.cfg = cfg
        self.client = client
        self.poller = poller
        self.discovery = discovery
        self.allocation = allocation
        self.process = process
        self.bus = bus or EventBus()

    @classmethod
    def from_config(cls, cfg: RollingRestartConfig, *, bus: Optional[EventBus] = None) -> "RollingRestartOrchestrator":
        client = ClusterApiClient(timeout=cfg.http_timeout_s)
        return cls(
            cfg,
            client=client,
            poller=ClusterStatePoller(client, bus=bus),
            discovery=NodeDiscovery(client, scheme=cfg.scheme),
            allocation=ShardAllocationController(client),
            process=RemoteProcessController(client, process=cfg.elasticsearch, ssh_settings=cfg.ssh),
            bus=bus,
        )

    def _ctx(self, cluster: Optional[str] = None) -> dict:
        return new_ctx(cluster or self.cfg.cluster_url, self.bus.run_id)

    # -----------------------
    # Run
    # -----------------------
    async def run(self) -> RestartContext:
        started = time.monotonic()
        self.bus.emit(RunStarted(**self._ctx()))
        try:
            ctx = await self.prepare()
            for node in ctx.nodes:
                await self.restart_node(node, ctx)
        except NodeRestartError as exc:
            self.bus.emit(RunFailed(**self._ctx(), error=str(exc), node=exc.node, step=exc.step))
            raise
        except RollingRestartError as exc:
            self.bus.emit(RunFailed(**self._ctx(), error=str(exc)))
            raise
        except Exception as exc:
            self.bus.emit(RunFailed(**self._ctx(), error=f"unexpected error: {exc!r}"))
            raise

        self.bus.emit(
            RunSucceeded(
                **self._ctx(),
                restarted=len(ctx.nodes),
                duration_ms=int((time.monotonic() - started) * 1000),
            )
        )
        log.info("==== Cluster reboot is a success! ====")
        return ctx

    async def prepare(self) -> RestartContext:
        """
        Confirm the cluster is green, then capture the node list and the
        node count every rejoin check compares against.
        """
        url = self.cfg.cluster_url
        retries = self.cfg.retries

        log.info("Ensuring cluster is green...")
        await self.poller.wait_for_state(url, retries.cluster_precheck, "status", "green")

        log.info("Finding nodes in cluster...")
        nodes = await self.discovery.discover_nodes(url)

        health = await self.client.health(url)
        baseline = health.get("number_of_nodes")
        if not isinstance(baseline, int) or isinstance(baseline, bool):
            raise RollingRestartError(f"{url}: number_of_nodes missing from health ({baseline!r})")

        ctx = RestartContext(nodes=nodes, baseline_node_count=baseline)
        log.info("nodes: %s (baseline number_of_nodes=%d)", ", ".join(ctx.node_names()), baseline)
        self.bus.emit(NodesDiscovered(**self._ctx(), nodes=ctx.node_names(), baseline_node_count=baseline))
        return ctx

    async def restart_node(self, node: Node, ctx: RestartContext) -> None:
        log.info("")
        log.info('Working on node "%s" running on %s', node.name, node.host)
        log.info("-" * 61)
        started = time.monotonic()
        retries = self.cfg.retries

        steps: list[tuple[str, str, Callable[[], Awaitable[object]]]] = [
            (
                "wait_green",
                "Waiting for node to report green...",
                lambda: self.poller.wait_for_state(node.http, retries.node_precheck, "status", "green"),
            ),
            (
                "disable_allocation",
                "Disabling shard reallocation...",
                lambda: self.allocation.set_shard_allocation(node.http, AllocationMode.DISABLE),
            ),
            (
                "shutdown",
                "Shutting down node...",
                lambda: self.process.shutdown_node(node.http),
            ),
            (
                "start",
                f"Waiting {self.cfg.settle_seconds}s, then starting node...",
                lambda: self.process.start_node(node.host, self.cfg.settle_seconds),
            ),
            (
                "wait_rejoin",
                "Waiting for node to rejoin the cluster...",
                lambda: self.poller.wait_for_state(
                    node.http, retries.node_rejoin, "number_of_nodes", ctx.baseline_node_count
                ),
            ),
            (
                "enable_allocation",
                "Enabling shard reallocation...",
                lambda: self.allocation.set_shard_allocation(node.http, AllocationMode.ENABLE),
            ),
            (
                "wait_initialized",
                "Waiting for node to initialize...",
                lambda: self.poller.wait_for_state(node.http, retries.node_initialize, "status", "green"),
            ),
        ]

        for step, message, action in steps:
            log.info(message)
            self.bus.emit(NodeStepStarted(**self._ctx(node.http), node=node.name, step=step))
            try:
                await action()
            except RollingRestartError as exc:
                log.error("node %s encountered error at %s: %s", node.name, step, exc)
                raise NodeRestartError(node.name, step, exc) from exc

        self.bus.emit(
            NodeRestarted(
                **self._ctx(node.http),
                node=node.name,
                duration_ms=int((time.monotonic() - started) * 1000),
            )
        )
        log.info("--- Node restart a success ---")
