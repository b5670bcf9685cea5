"""Affected-application resolution.

Submodules
----------
paths    -- normalize_path and is_project_repository.
affected -- resolve_affected_applications: repository + path-prefix filtering.
"""

from argodiff.resolver.affected import resolve_affected_applications
from argodiff.resolver.paths import is_project_repository, normalize_path

__all__ = [
    "is_project_repository",
    "normalize_path",
    "resolve_affected_applications",
]
