"""Argo CD application inventory data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Source:
    """One source declaration of an application: a repository and a path inside it."""

    repo_url: str = ""
    path: str = ""

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Source:
        return cls(
            repo_url=str(raw.get("repoURL") or ""),
            path=str(raw.get("path") or ""),
        )


@dataclass(frozen=True)
class Application:
    """Read-only snapshot of an Argo CD Application.

    Argo CD allows either ``spec.source`` or ``spec.sources`` (or both) on
    the same object.  Both shapes are folded into ``sources`` at parse time,
    the single source first, so consumers only ever see one list.
    """

    name: str
    namespace: str
    sources: tuple[Source, ...] = field(default_factory=tuple)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def repo_urls(self) -> list[str]:
        return [s.repo_url for s in self.sources if s.repo_url]

    @property
    def source_paths(self) -> list[str]:
        return [s.path for s in self.sources if s.path]

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Application:
        """Build an Application from one item of the ``/api/v1/applications`` list.

        Raises:
            KeyError: if ``metadata.name`` is missing.
        """
        metadata = raw.get("metadata") or {}
        spec = raw.get("spec") or {}

        sources: list[Source] = []
        single = spec.get("source")
        if isinstance(single, dict):
            sources.append(Source.from_api(single))
        for item in spec.get("sources") or []:
            if isinstance(item, dict):
                sources.append(Source.from_api(item))

        return cls(
            name=str(metadata["name"]),
            namespace=str(metadata.get("namespace") or ""),
            sources=tuple(sources),
        )
