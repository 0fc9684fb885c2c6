from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, model_validator


class HealthThresholds(BaseModel):
    """Completion-rate cut-offs for health classification."""

    healthy_min_percent: float = Field(95.0, ge=0, le=100)
    warning_min_percent: float = Field(85.0, ge=0, le=100)

    @model_validator(mode="after")
    def _ensure_order(self) -> "HealthThresholds":
        if self.warning_min_percent > self.healthy_min_percent:
            raise ValueError("warning_min_percent must not exceed healthy_min_percent")
        return self


class IssueThresholds(BaseModel):
    """Sensitivity of the issue detector."""

    timeout_rate: float = Field(0.1, ge=0, le=1)
    duration_multiplier: float = Field(2.0, gt=0)


class CachePolicy(BaseModel):
    """TTL policy for the serving layer. Not enforced by the analysis core."""

    workflow_definitions_ttl: int = 3600
    instance_list_ttl: int = 300
    health_ttl: int = 120


class MaestroHealthConfig(BaseModel):
    """Top-level configuration model."""

    health: HealthThresholds = HealthThresholds()
    issues: IssueThresholds = IssueThresholds()
    cache: CachePolicy = CachePolicy()
    refresh_interval_seconds: float = Field(30.0, gt=0)
    source_path: Optional[str] = None
    rules: Optional[List[Dict[str, Any]]] = None


def load_config(path: Optional[str] = None) -> MaestroHealthConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to MAESTRO_HEALTH_CONFIG
            env variable or 'maestro_health.yaml' in the current directory.
    """

    config_path = path or os.getenv("MAESTRO_HEALTH_CONFIG", "maestro_health.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = MaestroHealthConfig(**data)
    else:
        config = MaestroHealthConfig()

    env_source = os.getenv("MAESTRO_HEALTH_SOURCE")
    if env_source:
        config.source_path = env_source
    return config
