"""Line-level manifest diffing.

Texts are compared line by line with ``difflib.SequenceMatcher``.  Each
opcode becomes one segment (a ``replace`` becomes a removed segment followed
by an added one), so statistics count changed blocks rather than lines.
"""

from __future__ import annotations

from difflib import SequenceMatcher

from argodiff.models.diff import DiffSegment, LineStats, ManifestSet, ResourceDiff, SegmentKind


def diff_lines(baseline: str, revision: str) -> list[DiffSegment]:
    """Return the ordered segments turning *baseline* into *revision*."""
    old = baseline.splitlines(keepends=True)
    new = revision.splitlines(keepends=True)

    segments: list[DiffSegment] = []
    matcher = SequenceMatcher(None, old, new, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            segments.append(DiffSegment(SegmentKind.UNCHANGED, "".join(old[i1:i2])))
            continue
        if tag in ("delete", "replace"):
            segments.append(DiffSegment(SegmentKind.REMOVED, "".join(old[i1:i2])))
        if tag in ("insert", "replace"):
            segments.append(DiffSegment(SegmentKind.ADDED, "".join(new[j1:j2])))
    return segments


def line_stats(segments: list[DiffSegment]) -> LineStats:
    added = sum(1 for s in segments if s.kind is SegmentKind.ADDED)
    removed = sum(1 for s in segments if s.kind is SegmentKind.REMOVED)
    return LineStats(total=len(segments), changed=added + removed, added=added, removed=removed)


def diff_resource(key: str, baseline: str, revision: str) -> ResourceDiff:
    segments = diff_lines(baseline, revision)
    return ResourceDiff(key=key, segments=tuple(segments), stats=line_stats(segments))


def diff_manifest_sets(baseline: ManifestSet, revision: ManifestSet) -> dict[str, ResourceDiff]:
    """Diff every resource present in either set.

    A key missing from *baseline* is diffed against ``""`` (a created
    resource); a key missing from *revision* likewise (a deleted one).
    Keys keep baseline order, followed by keys only in *revision*.
    """
    keys = list(baseline)
    keys.extend(k for k in revision if k not in baseline)
    return {key: diff_resource(key, baseline.get(key, ""), revision.get(key, "")) for key in keys}
