"""Core data structures for argodiff."""

from argodiff.models.applications import Application, Source
from argodiff.models.config import ArgoDiffConfig, FailurePolicy
from argodiff.models.diff import (
    ApplicationReport,
    DiffInconsistency,
    DiffSegment,
    FileStats,
    LineStats,
    ManifestSet,
    ResourceChange,
    ResourceDiff,
    RunSummary,
    SegmentKind,
)

__all__ = [
    "Application",
    "ApplicationReport",
    "ArgoDiffConfig",
    "DiffInconsistency",
    "DiffSegment",
    "FailurePolicy",
    "FileStats",
    "LineStats",
    "ManifestSet",
    "ResourceChange",
    "ResourceDiff",
    "RunSummary",
    "SegmentKind",
    "Source",
]
