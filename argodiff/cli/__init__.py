"""argodiff command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``argodiff`` script).
"""

from argodiff.cli.main import cli

__all__ = ["cli"]
