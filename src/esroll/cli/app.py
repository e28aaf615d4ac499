# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cli/app.py
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from esroll.cluster.client import ClusterApiClient
from esroll.cluster.discovery import NodeDiscovery
from esroll.cluster.errors import RollingRestartError
from esroll.config.loader import ConfigError, load_config
from esroll.config.models import RollingRestartConfig
from esroll.logging.log import init_logging
from esroll.observers.console import ConsoleObserver
from esroll.observers.dispatcher import EventBus
from esroll.observers.jsonfile import JsonFileObserver
from esroll.observers.logger import LoggerObserver
from esroll.restart.orchestrator import RollingRestartOrchestrator


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Zero-downtime rolling restart for Elasticsearch clusters")

ConfigOption = typer.Option(
    Path("esroll.yaml"),
    "--config",
    "-c",
    help="Path to the rolling restart YAML config",
)


def _load(config: Path, *, cluster_url: Optional[str] = None, ssh_user: Optional[str] = None) -> RollingRestartConfig:
    overrides: dict = {}
    if cluster_url:
        overrides["cluster_url"] = cluster_url
    if ssh_user:
        overrides["ssh"] = {"user": ssh_user}
    try:
        return load_config(config, overrides=overrides)
    except (ConfigError, ValidationError) as exc:
        typer.secho(f"Invalid configuration: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def restart(
    config: Path = ConfigOption,
    cluster_url: Optional[str] = typer.Option(None, help="Override cluster_url from the config"),
    ssh_user: Optional[str] = typer.Option(None, help="Override ssh.user from the config"),
    show_events: bool = typer.Option(False, "--show-events", help="Echo lifecycle events to the console"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug output on the console"),
):
    """
    Restart every node of the cluster, one at a time.

    \b
    For each node:
      - wait for green
      - disable shard allocation
      - shut the node down, then start it again over SSH
      - wait until the node count is back to its pre-restart value
      - enable shard allocation
      - wait for green
    """
    cfg = _load(config, cluster_url=cluster_url, ssh_user=ssh_user)
    logger, run_id, log_path = init_logging(verbose=verbose)

    observers = [
        LoggerObserver(logger),
        JsonFileObserver(log_path.parent / f"{run_id}.jsonl"),
    ]
    if show_events:
        observers.append(ConsoleObserver())
    bus = EventBus(observers=observers, run_id=run_id)

    orchestrator = RollingRestartOrchestrator.from_config(cfg, bus=bus)
    try:
        asyncio.run(orchestrator.run())
    except RollingRestartError as exc:
        logger.error("Could not complete rolling restart due to the following error:")
        logger.error(str(exc))
        if exc.__cause__ is not None:
            logger.debug("caused by: %r", exc.__cause__)
        raise typer.Exit(code=1)
    except Exception:
        logger.exception("Rolling restart aborted by an unexpected error")
        raise typer.Exit(code=1)
    finally:
        orchestrator.client.close()


@app.command()
def nodes(
    config: Path = ConfigOption,
    cluster_url: Optional[str] = typer.Option(None, help="Override cluster_url from the config"),
):
    """List the nodes a restart would touch, in restart order."""
    cfg = _load(config, cluster_url=cluster_url)
    client = ClusterApiClient(timeout=cfg.http_timeout_s)
    try:
        found = asyncio.run(NodeDiscovery(client, scheme=cfg.scheme).discover_nodes(cfg.cluster_url))
    except RollingRestartError as exc:
        typer.secho(f"Cannot list nodes: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        client.close()

    for n in found:
        typer.echo(f"{n.name}\t{n.host}\t{n.http}")


@app.command()
def health(
    config: Path = ConfigOption,
    cluster_url: Optional[str] = typer.Option(None, help="Override cluster_url from the config"),
):
    """Print the current cluster health snapshot."""
    cfg = _load(config, cluster_url=cluster_url)
    client = ClusterApiClient(timeout=cfg.http_timeout_s)
    try:
        snapshot = asyncio.run(client.health(cfg.cluster_url))
    except RollingRestartError as exc:
        typer.secho(f"Cannot read cluster health: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        client.close()

    typer.echo(json.dumps(snapshot, indent=2, sort_keys=True))


if __name__ == "__main__":
    app()
