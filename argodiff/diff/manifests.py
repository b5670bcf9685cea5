"""Manifest fetching and canonical serialization."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import yaml

from argodiff.models.applications import Application
from argodiff.models.diff import ManifestSet

if TYPE_CHECKING:
    from argodiff.provider.client import ArgoCDClient


def resource_key(manifest: dict[str, Any]) -> str:
    """Return ``apiVersion/kind/namespace/name`` for one manifest.

    Cluster-scoped resources have no namespace and get an empty segment,
    e.g. ``v1/Namespace//payments``.
    """
    metadata = manifest.get("metadata") or {}
    parts = (
        manifest.get("apiVersion") or "",
        manifest.get("kind") or "",
        metadata.get("namespace") or "",
        metadata.get("name") or "",
    )
    return "/".join(str(p) for p in parts)


def serialize_manifest(manifest: dict[str, Any]) -> str:
    """Render a manifest as block-style YAML with sorted keys."""
    return yaml.safe_dump(manifest, sort_keys=True, default_flow_style=False, allow_unicode=True)


def build_manifest_set(manifests: Iterable[dict[str, Any]]) -> ManifestSet:
    """Key each manifest by resource identity.  A later duplicate key wins."""
    return {resource_key(m): serialize_manifest(m) for m in manifests}


async def fetch_manifest_set(client: ArgoCDClient, app: Application, revision: str | None) -> ManifestSet:
    """Fetch and key the rendered manifests of *app* at *revision*.

    Raises:
        ProviderError: if the manifests cannot be retrieved.
    """
    manifests = await client.get_manifests(app.name, app.namespace, revision)
    return build_manifest_set(manifests)
