# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/observers/dispatcher.py
from __future__ import annotations
import logging
from typing import List, Optional
from .events import BaseEvent

log = logging.getLogger("esroll")


class EventBus:
    def __init__(self, observers: Optional[List] = None, run_id: Optional[str] = None):
        self._observers = observers or []
        self.run_id = run_id

    def emit(self, event: BaseEvent) -> None:
        for ob in self._observers:
            try:
                ob.notify(event)
            except Exception as exc:
                # observers must not break restarts
                log.debug("observer %s failed: %s", type(ob).__name__, exc)
