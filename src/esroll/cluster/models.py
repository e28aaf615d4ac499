# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/cluster/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

# Raw /_cluster/health body. Fetched fresh on every poll.
HealthSnapshot = Dict[str, Any]


@dataclass(frozen=True)
class Node:
    """
    A cluster member to restart.
    """
    name: str       # node name as reported by /_nodes
    http: str       # management endpoint, e.g. http://10.0.0.11:9200
    host: str       # hostname used for the SSH session


@dataclass(frozen=True)
class RestartContext:
    """
    Run state captured once, before any node is touched.
    """
    nodes: Tuple[Node, ...]
    baseline_node_count: int

    def node_names(self) -> list[str]:
        return [n.name for n in self.nodes]


class AllocationMode(str, Enum):
    ENABLE = "enable"
    DISABLE = "disable"

    @property
    def setting_value(self) -> str:
        return "all" if self is AllocationMode.ENABLE else "none"
