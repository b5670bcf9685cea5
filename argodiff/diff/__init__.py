"""Manifest fetching, diffing and aggregation.

Submodules
----------
manifests -- fetch_manifest_set: provider manifests -> keyed YAML texts.
differ    -- diff_lines / diff_manifest_sets: segment-level line diffs.
aggregate -- classify / file_stats / summarize: resource and run statistics.
"""

from argodiff.diff.aggregate import classify, file_stats, summarize
from argodiff.diff.differ import diff_lines, diff_manifest_sets
from argodiff.diff.manifests import build_manifest_set, fetch_manifest_set, resource_key, serialize_manifest

__all__ = [
    "build_manifest_set",
    "classify",
    "diff_lines",
    "diff_manifest_sets",
    "fetch_manifest_set",
    "file_stats",
    "resource_key",
    "serialize_manifest",
    "summarize",
]
