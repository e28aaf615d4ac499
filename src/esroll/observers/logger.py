# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/observers/logger.py

from __future__ import annotations
import logging
from .events import BaseEvent, RunFailed


class LoggerObserver:
    """Mirror lifecycle events into the run log; failures surface on the console."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        etype = event.__class__.__name__
        msg = ", ".join(f"{k}={v}" for k, v in event.dict().items() if k not in ("ts", "run_id"))

        level = logging.WARNING if isinstance(event, RunFailed) else logging.DEBUG
        self.logger.log(level, "[EVENT] %s: %s", etype, msg)
