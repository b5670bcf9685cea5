"""Console reporting for argodiff runs."""

from argodiff.report.console import ConsoleReporter

__all__ = ["ConsoleReporter"]
