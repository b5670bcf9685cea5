"""Configuration loading from CLI overrides and environment variables.

Required values come from the CLI first, then from the GitHub Action inputs
(``INPUT_ARGOCD-SERVER``...), then from the environment names that CI
systems already export (``GITHUB_SHA``, ``GITHUB_REPOSITORY``).  Tuning
knobs live under ``ARGODIFF_*``.
"""

from __future__ import annotations

import os
import re
from urllib.parse import urlparse

from argodiff.models.config import (
    ArgoDiffConfig,
    FailurePolicy,
    FanOutConfig,
    LogConfig,
    ProviderConfig,
    RepositoryConfig,
)

_SLUG_RE = re.compile(r"^[\w.-]+/[\w.-]+$")


class ConfigurationError(ValueError):
    """Raised when a required input is missing or malformed."""


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"ARGODIFF_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"ARGODIFF_{key} must be an integer, got {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    return val


def _env_float(key: str, default: float) -> float:
    raw = _env(key, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"ARGODIFF_{key} must be a number, got {raw!r}") from exc


def _first(override: str | None, *env_keys: str, allow_blank: bool = False) -> str | None:
    """Return the override, else the first environment variable with a non-blank value.

    Blank variables fall through to the next key.  With *allow_blank*, a
    variable that is set but blank yields ``""`` when no key has a value.
    """
    if override is not None:
        return override
    present = [os.environ[key] for key in env_keys if key in os.environ]
    for value in present:
        if value.strip():
            return value
    if allow_blank and present:
        return ""
    return None


def _require(value: str | None, name: str) -> str:
    if value is None or not value.strip():
        raise ConfigurationError(f"Missing required input: {name}")
    return value.strip()


def _validate_server(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Invalid server address: {value!r}. Must be an http(s) URL")
    return value.rstrip("/")


def _validate_slug(value: str) -> str:
    if not _SLUG_RE.match(value):
        raise ConfigurationError(f"Invalid repository slug: {value!r}. Must be owner/name")
    return value


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigurationError(f"Invalid log level: {value}. Must be one of {sorted(valid)}")
    return value.lower()


def _validate_failure_policy(value: str) -> FailurePolicy:
    try:
        return FailurePolicy(value.lower())
    except ValueError as exc:
        valid = [p.value for p in FailurePolicy]
        raise ConfigurationError(f"Invalid failure policy: {value}. Must be one of {valid}") from exc


def parse_changelist(value: str) -> list[str]:
    """Split a comma-separated changelist, trimming entries and dropping blanks."""
    return [path.strip() for path in value.split(",") if path.strip()]


def load_config(
    server: str | None = None,
    token: str | None = None,
    repo_slug: str | None = None,
    changelist: str | None = None,
    revision: str | None = None,
    base_revision: str | None = None,
    repo_host: str | None = None,
    max_concurrency: int | None = None,
    failure_policy: str | None = None,
    log_level: str | None = None,
) -> ArgoDiffConfig:
    """Build the run configuration.

    Every argument overrides its environment fallback when not ``None``.

    Raises:
        ConfigurationError: if a required value is missing or any value is malformed.
    """
    raw_changelist = _first(changelist, "INPUT_CHANGELIST", "CHANGES", allow_blank=True)
    if raw_changelist is None:
        raise ConfigurationError("Missing required input: changelist")

    if max_concurrency is None:
        max_concurrency = _env_int("MAX_CONCURRENCY", 0, min_val=0)
    elif max_concurrency < 0:
        raise ConfigurationError(f"max concurrency must be >= 0, got {max_concurrency}")

    timeout = _env_float("TIMEOUT", 30.0)
    if timeout <= 0:
        raise ConfigurationError(f"ARGODIFF_TIMEOUT must be positive, got {timeout}")

    base = _first(base_revision, "ARGODIFF_BASE_REVISION")

    return ArgoDiffConfig(
        provider=ProviderConfig(
            server=_validate_server(_require(_first(server, "INPUT_ARGOCD-SERVER", "ARGOCD_SERVER"), "server")),
            token=_require(_first(token, "INPUT_ARGOCD-TOKEN", "ARGOCD_TOKEN"), "token"),
            timeout_seconds=timeout,
        ),
        repository=RepositoryConfig(
            slug=_validate_slug(_require(_first(repo_slug, "INPUT_REPO-SLUG", "GITHUB_REPOSITORY"), "repo-slug")),
            host=(repo_host or _env("REPO_HOST", "github.com")).strip().lower(),
            changelist=parse_changelist(raw_changelist),
            revision=_require(_first(revision, "GITHUB_SHA"), "revision"),
            base_revision=base.strip() if base and base.strip() else None,
        ),
        fan_out=FanOutConfig(
            max_concurrency=max_concurrency,
            failure_policy=_validate_failure_policy(failure_policy or _env("FAILURE_POLICY", "fail-fast")),
        ),
        log=LogConfig(
            level=_validate_log_level(log_level or _env("LOG_LEVEL", "info")),
        ),
    )
