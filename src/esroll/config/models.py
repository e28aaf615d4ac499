# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/config/models.py

from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RetryPolicy(_Frozen):
    """Bounded exponential backoff for one poll call site."""
    min_delay_ms: int = Field(1000, ge=0)
    max_delay_ms: int = Field(60000, ge=0)
    max_attempts: int = Field(..., ge=1)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.max_delay_ms < self.min_delay_ms:
            raise ValueError("max_delay_ms must be >= min_delay_ms")
        return self


class RetrySettings(_Frozen):
    cluster_precheck: RetryPolicy = RetryPolicy(max_attempts=3)
    node_precheck: RetryPolicy = RetryPolicy(max_attempts=10)
    node_rejoin: RetryPolicy = RetryPolicy(max_attempts=10)
    # full shard reinitialization can take up to an hour
    node_initialize: RetryPolicy = RetryPolicy(max_attempts=60)


class ElasticsearchProcess(_Frozen):
    binary: str = "elasticsearch/bin/elasticsearch"
    config: str = "/etc/elasticsearch/elasticsearch.yml"
    pid_file: str = "elasticsearch.pid"


class SSHSettings(_Frozen):
    user: str                                  # key-based login is expected
    port: int = 22
    key_path: Optional[str] = None
    connect_timeout_s: float = 20.0


class RollingRestartConfig(_Frozen):
    cluster_url: str                           # initial entry point, e.g. http://es-master:9200
    scheme: Literal["http", "https"] = "http"  # used to build node management endpoints
    http_timeout_s: float = 30.0
    settle_seconds: int = Field(10, ge=0)      # remote sleep before starting the node
    elasticsearch: ElasticsearchProcess = ElasticsearchProcess()
    ssh: SSHSettings
    retries: RetrySettings = RetrySettings()

    @field_validator("cluster_url")
    @classmethod
    def _strip_url(cls, v: str) -> str:
        return v.rstrip("/")
