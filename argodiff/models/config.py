"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class FailurePolicy(StrEnum):
    """What a run does when one application's manifests cannot be fetched."""

    FAIL_FAST = "fail-fast"
    CONTINUE = "continue"


@dataclass
class ProviderConfig:
    """Argo CD API connection configuration."""

    server: str = ""
    token: str = ""
    timeout_seconds: float = 30.0


@dataclass
class RepositoryConfig:
    """Identity of the repository under test and what changed in it."""

    slug: str = ""
    host: str = "github.com"
    changelist: list[str] = field(default_factory=list)
    revision: str = ""
    base_revision: str | None = None


@dataclass
class FanOutConfig:
    """Per-application task scheduling configuration."""

    max_concurrency: int = 0  # 0 = one task per affected application, unbounded
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class ArgoDiffConfig:
    """Top-level argodiff configuration."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    fan_out: FanOutConfig = field(default_factory=FanOutConfig)
    log: LogConfig = field(default_factory=LogConfig)
