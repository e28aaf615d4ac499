# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/remote/ssh.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import paramiko


@dataclass
class RemoteHost:
    """
    A node host reached over SSH.
    """
    address: str
    username: str
    port: int = 22
    pkey_path: Optional[str] = None


class SSHRunner:
    def __init__(self, client: paramiko.SSHClient):
        self.client = client

    def run(self, cmd: str, *, timeout: Optional[int] = None) -> tuple[int, str, str]:
        stdin, stdout, stderr = self.client.exec_command(cmd, timeout=timeout)
        out = stdout.read().decode(errors="replace")
        err = stderr.read().decode(errors="replace")
        rc = stdout.channel.recv_exit_status()
        return rc, out, err

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "SSHRunner":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_ssh(
    host: RemoteHost,
    *,
    connect_timeout: float = 20.0,
) -> SSHRunner:
    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    pkey = None
    if host.pkey_path:
        for key_cls in (
            paramiko.RSAKey,
            paramiko.Ed25519Key,
            paramiko.ECDSAKey,
        ):
            try:
                pkey = key_cls.from_private_key_file(host.pkey_path)
                break
            except paramiko.SSHException:
                continue

    client.connect(
        hostname=host.address,
        port=host.port,
        username=host.username,
        pkey=pkey,
        timeout=connect_timeout,
        allow_agent=True,
        look_for_keys=True,
    )

    return SSHRunner(client)
