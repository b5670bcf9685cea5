"""argodiff: Argo CD manifest diffs for CI runs."""

__version__ = "0.1.0"
