"""Entry point for `python -m argodiff`.

Usage:
    python -m argodiff --revision <sha> --changelist services/api/deploy.yaml
    uv run python -m argodiff
"""

from __future__ import annotations

from argodiff.cli import cli

cli()
