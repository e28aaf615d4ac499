# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cluster/errors.py

from __future__ import annotations

from typing import Any, Optional


class RollingRestartError(RuntimeError):
    """Base class for every failure that aborts a rolling restart."""


class ConnectivityError(RollingRestartError):
    """Raised when an endpoint cannot be reached or answers with a non-200 status."""

    def __init__(self, url: str, *, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else reason
        super().__init__(f"connection error to {url}: {detail}")


class StateMismatchError(RollingRestartError):
    """Raised when a health snapshot field does not hold the expected value yet."""

    def __init__(self, field: str, expected: Any, actual: Any):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"{field} is {actual!r}, expected {expected!r}")


class AckFailureError(RollingRestartError):
    """Raised when a settings write was not acknowledged by the cluster."""


class RemoteExecutionError(RollingRestartError):
    def __init__(self, host: str, message: str, *, exit_code: Optional[int] = None, stdout: str = "", stderr: str = ""):
        self.host = host
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"[{host}] {message}")


class DiscoveryError(RollingRestartError):
    """Raised when the node list cannot be turned into restart targets."""


class PollExhaustedError(RollingRestartError):
    def __init__(self, endpoint: str, field: str, expected: Any, attempts: int):
        self.endpoint = endpoint
        self.field = field
        self.expected = expected
        self.attempts = attempts
        super().__init__(
            f"{endpoint}: {field} did not become {expected!r} after {attempts} attempts"
        )


class NodeRestartError(RollingRestartError):
    def __init__(self, node: str, step: str, cause: BaseException):
        self.node = node
        self.step = step
        super().__init__(f"node {node!r} failed at step {step!r}: {cause}")
