"""Fixtures shared by unit and integration tests."""

from __future__ import annotations

import pytest
import structlog

_CONFIG_ENV_VARS = (
    "ARGOCD_SERVER",
    "INPUT_ARGOCD-SERVER",
    "ARGOCD_TOKEN",
    "INPUT_ARGOCD-TOKEN",
    "GITHUB_REPOSITORY",
    "INPUT_REPO-SLUG",
    "CHANGES",
    "INPUT_CHANGELIST",
    "GITHUB_SHA",
    "ARGODIFF_BASE_REVISION",
    "ARGODIFF_REPO_HOST",
    "ARGODIFF_MAX_CONCURRENCY",
    "ARGODIFF_FAILURE_POLICY",
    "ARGODIFF_TIMEOUT",
    "ARGODIFF_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CI job's own GITHUB_SHA etc. out of configuration tests."""
    for key in _CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _quiet_structlog():
    """Route log lines into the void instead of the captured report output."""
    structlog.configure(logger_factory=structlog.ReturnLoggerFactory(), cache_logger_on_first_use=False)
    yield
    structlog.reset_defaults()
