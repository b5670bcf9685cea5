"""Tests for resource keys, manifest serialization and manifest-set fetching."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from argodiff.diff.manifests import build_manifest_set, fetch_manifest_set, resource_key, serialize_manifest
from argodiff.models.applications import Application
from argodiff.provider.client import ProviderError

_DEPLOYMENT = {
    "kind": "Deployment",
    "apiVersion": "apps/v1",
    "metadata": {"name": "x", "namespace": "ns"},
    "spec": {"replicas": 1},
}


class TestResourceKey:
    def test_namespaced_resource(self) -> None:
        assert resource_key(_DEPLOYMENT) == "apps/v1/Deployment/ns/x"

    def test_cluster_scoped_resource_has_empty_namespace(self) -> None:
        manifest = {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "payments"}}
        assert resource_key(manifest) == "v1/Namespace//payments"

    def test_missing_metadata(self) -> None:
        assert resource_key({"apiVersion": "v1", "kind": "List"}) == "v1/List//"


class TestSerializeManifest:
    def test_block_yaml_with_sorted_keys(self) -> None:
        assert serialize_manifest(_DEPLOYMENT) == (
            "apiVersion: apps/v1\n"
            "kind: Deployment\n"
            "metadata:\n"
            "  name: x\n"
            "  namespace: ns\n"
            "spec:\n"
            "  replicas: 1\n"
        )

    def test_key_order_does_not_change_text(self) -> None:
        reordered = {
            "spec": {"replicas": 1},
            "metadata": {"namespace": "ns", "name": "x"},
            "kind": "Deployment",
            "apiVersion": "apps/v1",
        }
        assert serialize_manifest(reordered) == serialize_manifest(_DEPLOYMENT)

    def test_round_trips_through_yaml(self) -> None:
        assert yaml.safe_load(serialize_manifest(_DEPLOYMENT)) == _DEPLOYMENT


class TestBuildManifestSet:
    def test_keys_each_manifest(self) -> None:
        service = {"apiVersion": "v1", "kind": "Service", "metadata": {"name": "x", "namespace": "ns"}}
        manifests = build_manifest_set([_DEPLOYMENT, service])
        assert list(manifests) == ["apps/v1/Deployment/ns/x", "v1/Service/ns/x"]
        assert manifests["v1/Service/ns/x"] == serialize_manifest(service)

    def test_empty(self) -> None:
        assert build_manifest_set([]) == {}


class TestFetchManifestSet:
    async def test_fetches_application_at_revision(self) -> None:
        client = MagicMock()
        client.get_manifests = AsyncMock(return_value=[_DEPLOYMENT])
        app = Application(name="api", namespace="argocd")

        manifests = await fetch_manifest_set(client, app, "abc123")

        client.get_manifests.assert_awaited_once_with("api", "argocd", "abc123")
        assert list(manifests) == ["apps/v1/Deployment/ns/x"]

    async def test_provider_error_propagates(self) -> None:
        client = MagicMock()
        client.get_manifests = AsyncMock(side_effect=ProviderError("get manifests for argocd/api", "boom", 502))

        with pytest.raises(ProviderError) as excinfo:
            await fetch_manifest_set(client, Application(name="api", namespace="argocd"), None)
        assert excinfo.value.status_code == 502
