"""Shared fixtures for argodiff integration tests.

Provides an in-memory Argo CD API served through ``httpx.MockTransport``
so full runs can be exercised without a real server.
"""

from __future__ import annotations

import json
import re
from typing import Any

import httpx
import pytest

from argodiff.models.config import (
    ArgoDiffConfig,
    FailurePolicy,
    FanOutConfig,
    ProviderConfig,
    RepositoryConfig,
)

REPO_URL = "https://github.com/acme/platform.git"
REVISION = "abc123"

_MANIFESTS_PATH = re.compile(r"^/api/v1/applications/(?P<name>[^/]+)/manifests$")


# ---------------------------------------------------------------------------
# Object factory helpers
# ---------------------------------------------------------------------------


def make_app(
    name: str,
    path: str,
    namespace: str = "argocd",
    repo_url: str = REPO_URL,
    multi_source: bool = False,
) -> dict[str, Any]:
    """Build an Argo CD Application as returned by the inventory endpoint."""
    source = {"repoURL": repo_url, "path": path, "targetRevision": "HEAD"}
    spec: dict[str, Any] = {"sources": [source]} if multi_source else {"source": source}
    return {"metadata": {"name": name, "namespace": namespace}, "spec": spec}


def make_deployment(name: str = "x", namespace: str = "ns", replicas: int = 1) -> dict[str, Any]:
    return {
        "kind": "Deployment",
        "apiVersion": "apps/v1",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"replicas": replicas},
    }


def make_service(name: str = "x", namespace: str = "ns", port: int = 80) -> dict[str, Any]:
    return {
        "kind": "Service",
        "apiVersion": "v1",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"ports": [{"port": port}]},
    }


# ---------------------------------------------------------------------------
# Fake Argo CD server
# ---------------------------------------------------------------------------


class FakeArgoCD:
    """Answers the inventory and manifests endpoints from in-memory data.

    ``manifests`` is keyed by ``(app name, revision)``; a revision of None is
    the live state.  Keys listed in ``failures`` answer HTTP 500.
    """

    def __init__(self) -> None:
        self.applications: list[dict[str, Any]] = []
        self.manifests: dict[tuple[str, str | None], list[dict[str, Any]]] = {}
        self.failures: set[tuple[str, str | None]] = set()
        self.inventory_status = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/v1/applications":
            if self.inventory_status != 200:
                return httpx.Response(self.inventory_status, text="inventory unavailable")
            return httpx.Response(200, json={"items": self.applications})

        match = _MANIFESTS_PATH.match(path)
        if match:
            key = (match.group("name"), request.url.params.get("revision"))
            if key in self.failures:
                return httpx.Response(500, text="rpc error: failed to generate manifests")
            docs = self.manifests.get(key, [])
            return httpx.Response(200, json={"manifests": [json.dumps(d) for d in docs]})

        return httpx.Response(404, text=f"no route for {path}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def manifest_requests(self) -> list[tuple[str, str | None]]:
        return [
            (m.group("name"), r.url.params.get("revision"))
            for r in self.requests
            if (m := _MANIFESTS_PATH.match(r.url.path))
        ]


@pytest.fixture
def argocd() -> FakeArgoCD:
    return FakeArgoCD()


@pytest.fixture
def make_config():
    """Factory for run configurations pointing at the fake server."""

    def _make(
        changelist: list[str] | None = None,
        failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST,
        max_concurrency: int = 0,
        base_revision: str | None = None,
    ) -> ArgoDiffConfig:
        return ArgoDiffConfig(
            provider=ProviderConfig(server="https://argocd.test", token="test-token"),
            repository=RepositoryConfig(
                slug="acme/platform",
                changelist=changelist if changelist is not None else ["services/api/deploy.yaml"],
                revision=REVISION,
                base_revision=base_revision,
            ),
            fan_out=FanOutConfig(max_concurrency=max_concurrency, failure_policy=failure_policy),
        )

    return _make
