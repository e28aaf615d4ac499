# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single restart invocation
    cluster: str      # endpoint the event is about

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(cluster: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "cluster": cluster,
    }


# ---------------------------------------------------------------------
# Run lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class RunStarted(BaseEvent):
    pass

@dataclass(frozen=True)
class NodesDiscovered(BaseEvent):
    nodes: List[str]
    baseline_node_count: int

@dataclass(frozen=True)
class RunSucceeded(BaseEvent):
    restarted: int
    duration_ms: int

@dataclass(frozen=True)
class RunFailed(BaseEvent):
    error: str
    node: Optional[str] = None
    step: Optional[str] = None


# ---------------------------------------------------------------------
# Per-node lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class NodeStepStarted(BaseEvent):
    node: str
    step: str

@dataclass(frozen=True)
class NodeRestarted(BaseEvent):
    node: str
    duration_ms: int


# ---------------------------------------------------------------------
# Poller lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PollAttempt(BaseEvent):
    field: str
    expected: str
    attempt: int
    max_attempts: int
    error: str
