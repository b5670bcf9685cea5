"""Per-application and per-run change statistics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from argodiff.models.diff import (
    ApplicationReport,
    FileStats,
    LineStats,
    ResourceChange,
    ResourceDiff,
    RunSummary,
)


def classify(stats: LineStats) -> ResourceChange:
    """Put one resource diff into exactly one change bucket."""
    if stats.changed == 0:
        return ResourceChange.UNCHANGED
    if stats.added == stats.total:
        return ResourceChange.ADDED
    if stats.removed == stats.total:
        return ResourceChange.REMOVED
    return ResourceChange.MODIFIED


def file_stats(diffs: Mapping[str, ResourceDiff]) -> FileStats:
    counts = Counter(classify(d.stats) for d in diffs.values())
    return FileStats(
        unchanged=counts[ResourceChange.UNCHANGED],
        modified=counts[ResourceChange.MODIFIED],
        added=counts[ResourceChange.ADDED],
        removed=counts[ResourceChange.REMOVED],
    )


def summarize(reports: Iterable[ApplicationReport]) -> RunSummary:
    """Sum every successful application's FileStats and collect the failures."""
    total = FileStats()
    applications = 0
    failed: list[str] = []
    for report in reports:
        applications += 1
        if report.stats is None:
            failed.append(report.qualified_name)
            continue
        total += report.stats
    return RunSummary(stats=total, applications=applications, failed_applications=tuple(failed))
