"""Diff, statistics and run outcome data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

# resource key -> serialized manifest text
ManifestSet = dict[str, str]


class DiffInconsistency(AssertionError):
    """Raised when line statistics break ``changed == added + removed``."""


class SegmentKind(StrEnum):
    """Tag of one diff segment."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class ResourceChange(StrEnum):
    """Classification of one resource within an application diff."""

    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffSegment:
    """A run of consecutive lines sharing the same tag."""

    kind: SegmentKind
    text: str


@dataclass(frozen=True)
class LineStats:
    """Segment counts of one resource diff.

    ``total`` counts diff segments, not raw lines.
    """

    total: int = 0
    changed: int = 0
    added: int = 0
    removed: int = 0

    def __post_init__(self) -> None:
        if self.changed != self.added + self.removed:
            raise DiffInconsistency(
                f"changed={self.changed} != added={self.added} + removed={self.removed}"
            )
        if self.changed > self.total:
            raise DiffInconsistency(f"changed={self.changed} exceeds total={self.total}")


@dataclass(frozen=True)
class ResourceDiff:
    """Line-level change record for one resource key."""

    key: str
    segments: tuple[DiffSegment, ...]
    stats: LineStats


@dataclass(frozen=True)
class FileStats:
    """Resource counts per change classification."""

    unchanged: int = 0
    modified: int = 0
    added: int = 0
    removed: int = 0

    def __add__(self, other: FileStats) -> FileStats:
        if not isinstance(other, FileStats):
            return NotImplemented
        return FileStats(
            unchanged=self.unchanged + other.unchanged,
            modified=self.modified + other.modified,
            added=self.added + other.added,
            removed=self.removed + other.removed,
        )

    def count(self, change: ResourceChange) -> int:
        return int(getattr(self, change.value))


@dataclass
class ApplicationReport:
    """Outcome of one application's fetch-and-diff task.

    Exactly one of ``stats`` (with ``diffs``) or ``error`` is set.
    """

    namespace: str
    name: str
    diffs: dict[str, ResourceDiff] = field(default_factory=dict)
    stats: FileStats | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.stats is None) == (self.error is None):
            raise ValueError("ApplicationReport needs exactly one of stats or error")

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RunSummary:
    """Field-wise sum of every application's FileStats for one run."""

    stats: FileStats = field(default_factory=FileStats)
    applications: int = 0
    failed_applications: tuple[str, ...] = ()

    @property
    def failed(self) -> bool:
        return bool(self.failed_applications)
