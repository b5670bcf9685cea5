"""Path normalization and repository URL matching."""

from __future__ import annotations

import re
from urllib.parse import urlparse

_LEADING_DOTS_AND_SEPARATORS = re.compile(r"^[.\\/]+")

# git@github.com:owner/name.git
_SCP_LIKE_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>(?!//).*)$")


def normalize_path(path: str) -> str:
    """Strip any leading run of ``.``, ``/`` and ``\\`` characters.

    ``./app/foo``, ``/app/foo`` and ``app/foo`` all normalize to ``app/foo``.
    """
    return _LEADING_DOTS_AND_SEPARATORS.sub("", path)


def _split_repo_url(repo_url: str) -> tuple[str, str]:
    """Return ``(hostname, path)`` for URL and scp-like git remotes."""
    parsed = urlparse(repo_url)
    if parsed.scheme and parsed.netloc:
        return (parsed.hostname or "", parsed.path)
    match = _SCP_LIKE_RE.match(repo_url)
    if match:
        return (match.group("host"), "/" + match.group("path").lstrip("/"))
    return ("", "")


def is_project_repository(repo_url: str, repo_slug: str, host: str = "github.com") -> bool:
    """Return True if *repo_url* points at ``<host>/<repo_slug>.git``.

    The hostname must equal *host* (case-insensitive) and the URL path must
    end with ``/<repo_slug>.git``.
    """
    if not repo_url or not repo_slug:
        return False
    url_host, url_path = _split_repo_url(repo_url.strip())
    if url_host.lower() != host.lower():
        return False
    return url_path.endswith(f"/{repo_slug}.git")
