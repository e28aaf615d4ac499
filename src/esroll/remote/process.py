# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/remote/process.py

from __future__ import annotations

import asyncio
import logging

import paramiko

from esroll.cluster.client import ClusterApiClient
from esroll.cluster.errors import RemoteExecutionError
from esroll.config.models import ElasticsearchProcess, SSHSettings
from esroll.remote import ssh
from esroll.remote.ssh import RemoteHost

log = logging.getLogger("esroll")


def start_command(proc: ElasticsearchProcess, sleep_seconds: int) -> str:
    """
    Shell line that lets a shutdown settle, then launches the node daemonized.
    """
    return " ".join(
        [
            "source .profile &&",
            f"sleep {int(sleep_seconds)} &&",
            proc.binary,
            f"--config {proc.config}",
            f"-p {proc.pid_file}",
            "-d",
        ]
    )


class RemoteProcessController:
    """
    Stops a node through its management API and starts it again over SSH.
    Neither operation is retried.
    """

    def __init__(self, client: ClusterApiClient, *, process: ElasticsearchProcess, ssh_settings: SSHSettings):
        self.client = client
        self.process = process
        self.ssh = ssh_settings

    async def shutdown_node(self, endpoint: str) -> dict:
        return await self.client.shutdown_local(endpoint)

    async def start_node(self, hostname: str, delay_seconds: int) -> tuple[int, str, str]:
        return await asyncio.to_thread(self._start_node, hostname, delay_seconds)

    def _start_node(self, hostname: str, delay_seconds: int) -> tuple[int, str, str]:
        cmd = start_command(self.process, delay_seconds)
        log.info("[%s] %s", hostname, cmd)

        host = RemoteHost(
            address=hostname,
            username=self.ssh.user,
            port=self.ssh.port,
            pkey_path=self.ssh.key_path,
        )
        try:
            runner = ssh.open_ssh(host, connect_timeout=self.ssh.connect_timeout_s)
        except (paramiko.SSHException, OSError) as exc:
            raise RemoteExecutionError(hostname, f"ssh connection failed: {exc}") from exc

        try:
            with runner:
                rc, out, err = runner.run(cmd)
        except (paramiko.SSHException, OSError) as exc:
            raise RemoteExecutionError(hostname, f"ssh command failed: {exc}") from exc

        if rc != 0:
            raise RemoteExecutionError(
                hostname,
                f"start command exited with {rc}: {err.strip() or out.strip()}",
                exit_code=rc,
                stdout=out,
                stderr=err,
            )
        return rc, out, err
