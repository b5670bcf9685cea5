"""Affected-application resolution.

Filters the Argo CD inventory down to applications that are sourced from
the repository under test and whose source paths contain a changed file.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from argodiff.models.applications import Application
from argodiff.observability.logging import get_logger
from argodiff.resolver.paths import is_project_repository, normalize_path

_logger = get_logger("resolver")


def _tracks_repository(app: Application, repo_slug: str, host: str) -> bool:
    return any(is_project_repository(url, repo_slug, host) for url in app.repo_urls)


def _touched_by(app: Application, changed_paths: Sequence[str]) -> bool:
    source_paths = [normalize_path(p) for p in app.source_paths]
    return any(change.startswith(path) for path in source_paths for change in changed_paths)


def resolve_affected_applications(
    applications: Iterable[Application],
    changed_paths: Iterable[str],
    repo_slug: str,
    host: str = "github.com",
) -> list[Application]:
    """Return the applications affected by *changed_paths*, in inventory order.

    An application is affected when at least one of its source repositories
    is ``<host>/<repo_slug>`` and at least one normalized changed path starts
    with one of its normalized source paths.  Nothing matching yields ``[]``.
    """
    changes = [normalize_path(p) for p in changed_paths]
    affected: list[Application] = []

    for app in applications:
        if not _tracks_repository(app, repo_slug, host):
            _logger.debug("application_excluded", application=app.qualified_name, reason="other_repository")
            continue
        if not _touched_by(app, changes):
            _logger.debug("application_excluded", application=app.qualified_name, reason="no_path_overlap")
            continue
        affected.append(app)

    _logger.info("applications_resolved", affected=len(affected), changed_paths=len(changes))
    return affected
