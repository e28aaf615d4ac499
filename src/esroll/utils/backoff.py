# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/utils/backoff.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Backoff:
    """
    Exponential backoff generator.

    duration() returns min_ms * factor**attempts capped at max_ms,
    then advances the attempt counter.
    Create one per wait; never share an instance between waits.
    """

    min_ms: int = 1000
    max_ms: int = 60000
    factor: float = 2.0
    attempts: int = 0

    def __post_init__(self) -> None:
        if self.min_ms < 0 or self.max_ms < self.min_ms:
            raise ValueError(f"invalid backoff bounds: min={self.min_ms} max={self.max_ms}")
        if self.factor < 1:
            raise ValueError(f"backoff factor must be >= 1, got {self.factor}")

    def duration(self) -> int:
        ms = min(self.min_ms * self.factor ** self.attempts, self.max_ms)
        self.attempts += 1
        return int(ms)

    def duration_s(self) -> float:
        return self.duration() / 1000
