# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cluster/poller.py

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from esroll.cluster.client import ClusterApiClient
from esroll.cluster.errors import (
    ConnectivityError,
    PollExhaustedError,
    StateMismatchError,
)
from esroll.cluster.models import HealthSnapshot
from esroll.config.models import RetryPolicy
from esroll.observers.dispatcher import EventBus
from esroll.observers.events import PollAttempt, new_ctx
from esroll.utils.backoff import Backoff

log = logging.getLogger("esroll")

Sleep = Callable[[float], Awaitable[None]]


class ClusterStatePoller:
    """
    Wait until a field of an endpoint's health snapshot equals a value.

    Polling -> Success   : field matches, snapshot returned immediately
    Polling -> Retrying  : connection error or mismatch, sleep backoff.duration()
    Polling -> Exhausted : max_attempts reached, PollExhaustedError from the last error
    """

    def __init__(
        self,
        client: ClusterApiClient,
        *,
        bus: Optional[EventBus] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.bus = bus or EventBus()
        self._sleep = sleep

    async def wait_for_state(
        self,
        endpoint: str,
        policy: RetryPolicy,
        field: str,
        expected: Any,
    ) -> HealthSnapshot:
        backoff = Backoff(min_ms=policy.min_delay_ms, max_ms=policy.max_delay_ms)
        last_exc: Exception | None = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                snapshot = await self.client.health(endpoint)
            except ConnectivityError as exc:
                log.warning("cannot connect to %s (%s)", endpoint, exc)
                last_exc = exc
            else:
                actual = snapshot.get(field)
                if _matches(actual, expected):
                    log.debug("%s: %s=%r after %d attempt(s)", endpoint, field, actual, attempt)
                    return snapshot
                log.info(
                    "Waiting on cluster state %s to be %r. Currently: %r",
                    field, expected, actual,
                )
                last_exc = StateMismatchError(field, expected, actual)

            self.bus.emit(
                PollAttempt(
                    **new_ctx(endpoint, self.bus.run_id),
                    field=field,
                    expected=str(expected),
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    error=str(last_exc),
                )
            )
            if attempt == policy.max_attempts:
                break
            await self._sleep(backoff.duration_s())

        raise PollExhaustedError(endpoint, field, expected, policy.max_attempts) from last_exc


def _matches(actual: Any, expected: Any) -> bool:
    # True == 1 in Python, keep booleans apart from numbers
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected
