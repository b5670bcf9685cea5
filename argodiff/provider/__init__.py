"""Argo CD deployment-state provider.

Exports:
    ArgoCDClient  -- async httpx client for the applications and manifests endpoints.
    ProviderError -- raised for every failed or malformed provider call.
"""

from argodiff.provider.client import ArgoCDClient, ProviderError

__all__ = ["ArgoCDClient", "ProviderError"]
