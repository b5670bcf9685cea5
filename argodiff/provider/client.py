"""Argo CD REST API client.

Two read-only calls are used:

    GET /api/v1/applications                     -- the application inventory
    GET /api/v1/applications/{name}/manifests    -- rendered manifests at a revision

The session token travels as the ``argocd.token`` cookie.  Every failure
(transport error, non-2xx status, malformed body) is raised as
ProviderError; nothing is retried.
"""

from __future__ import annotations

import json
from types import TracebackType
from typing import Any

import httpx

from argodiff.models.applications import Application
from argodiff.observability.logging import get_logger

_log = get_logger("provider.client")

_APPLICATION_FIELDS = ",".join(
    [
        "items.metadata.name",
        "items.metadata.namespace",
        "items.spec",
    ]
)


class ProviderError(Exception):
    """Raised when an Argo CD API call fails or returns an unusable payload."""

    def __init__(self, operation: str, detail: str, status_code: int | None = None) -> None:
        message = f"{operation} failed: {detail}"
        if status_code is not None:
            message = f"{operation} failed (HTTP {status_code}): {detail}"
        super().__init__(message)
        self.operation = operation
        self.detail = detail
        self.status_code = status_code


class ArgoCDClient:
    """Async client for the subset of the Argo CD API used by a diff run.

    Args:
        server:    Base URL of the Argo CD API server.
        token:     Argo CD session or account token.
        timeout:   HTTP request timeout in seconds. Defaults to 30.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        server: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not server:
            raise ValueError("Argo CD server must not be empty")
        self._server = server
        self._http = httpx.AsyncClient(
            base_url=server,
            headers={"Accept": "application/json", "Cookie": f"argocd.token={token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> ArgoCDClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def list_applications(self) -> list[Application]:
        """Return the full application inventory visible to the token."""
        operation = "list applications"
        body = await self._get_json(operation, "/api/v1/applications", {"fields": _APPLICATION_FIELDS})

        items = body.get("items") or []
        if not isinstance(items, list):
            raise ProviderError(operation, "'items' is not a list")
        try:
            apps = [Application.from_api(item) for item in items]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ProviderError(operation, f"malformed application item: {exc!r}") from exc

        _log.info("applications_listed", count=len(apps))
        return apps

    async def get_manifests(self, name: str, namespace: str, revision: str | None = None) -> list[dict[str, Any]]:
        """Return the rendered manifests of one application, parsed into dicts.

        A *revision* of None asks Argo CD for its default, the live state.
        """
        operation = f"get manifests for {namespace}/{name}"
        params: dict[str, str] = {"appNamespace": namespace}
        if revision:
            params["revision"] = revision

        body = await self._get_json(operation, f"/api/v1/applications/{name}/manifests", params)

        raw_manifests = body.get("manifests") or []
        if not isinstance(raw_manifests, list):
            raise ProviderError(operation, "'manifests' is not a list")

        manifests: list[dict[str, Any]] = []
        for index, raw in enumerate(raw_manifests):
            try:
                parsed = json.loads(raw) if isinstance(raw, str) else raw
            except json.JSONDecodeError as exc:
                raise ProviderError(operation, f"manifest {index} is not valid JSON: {exc}") from exc
            if not isinstance(parsed, dict):
                raise ProviderError(operation, f"manifest {index} is not a JSON object")
            metadata = parsed.get("metadata")
            if metadata is not None and not isinstance(metadata, dict):
                raise ProviderError(operation, f"manifest {index} has malformed metadata")
            manifests.append(parsed)

        _log.debug(
            "manifests_fetched",
            application=f"{namespace}/{name}",
            revision=revision or "live",
            count=len(manifests),
        )
        return manifests

    async def _get_json(self, operation: str, path: str, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = await self._http.get(path, params=params)
        except httpx.TimeoutException as exc:
            _log.warning("provider_request_timeout", operation=operation, server=self._server)
            raise ProviderError(operation, "request timed out") from exc
        except httpx.HTTPError as exc:
            _log.warning("provider_http_error", operation=operation, error=str(exc))
            raise ProviderError(operation, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            _log.warning(
                "provider_non_2xx_response",
                operation=operation,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise ProviderError(operation, response.text[:200] or response.reason_phrase, response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(operation, "response body is not JSON") from exc
        if not isinstance(body, dict):
            raise ProviderError(operation, "response body is not a JSON object")
        return body
