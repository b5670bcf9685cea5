"""Human-readable diff report written to stdout.

Each method writes a complete block in one synchronous call, so reports of
concurrently diffed applications never interleave.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import IO

import click

from argodiff.models.applications import Application
from argodiff.models.diff import ApplicationReport, DiffSegment, ResourceDiff, RunSummary, SegmentKind

_SEGMENT_STYLE: dict[SegmentKind, tuple[str, str | None]] = {
    SegmentKind.ADDED: ("+ ", "green"),
    SegmentKind.REMOVED: ("- ", "red"),
    SegmentKind.UNCHANGED: ("  ", None),
}


class ConsoleReporter:
    """Prints per-application resource diffs and the run summary.

    Args:
        file:  Output stream. Defaults to stdout.
        color: Force ANSI colors on or off. None lets click decide from the stream.
    """

    def __init__(self, file: IO[str] | None = None, color: bool | None = None) -> None:
        self._file = file
        self._color = color

    def _echo(self, lines: Sequence[str]) -> None:
        click.echo("\n".join(lines), file=self._file, color=self._color)

    def affected_applications(self, apps: Sequence[Application]) -> None:
        if not apps:
            self._echo(["No affected applications"])
            return
        self._echo([f"Application: {app.qualified_name}" for app in apps])

    def application(self, report: ApplicationReport) -> None:
        if report.failed:
            self._echo(["", click.style(f"Failed: {report.qualified_name}: {report.error}", fg="red", bold=True)])
            return
        lines: list[str] = []
        for resource_diff in report.diffs.values():
            lines.extend(self._resource_lines(report.qualified_name, resource_diff))
        if lines:
            self._echo(lines)

    def summary(self, summary: RunSummary) -> None:
        stats = summary.stats
        line = (
            "Resource summary: "
            f"unchanged {stats.unchanged}, "
            + click.style(f"modified {stats.modified}", fg="blue")
            + ", "
            + click.style(f"new {stats.added}", fg="green")
            + ", "
            + click.style(f"deleted {stats.removed}", fg="red")
        )
        if summary.failed:
            line += ", " + click.style(
                "failed applications: " + ", ".join(summary.failed_applications), fg="red", bold=True
            )
        self._echo(["", line])

    def _resource_lines(self, app_name: str, resource_diff: ResourceDiff) -> list[str]:
        stats = resource_diff.stats
        lines = ["", click.style(f"{app_name} - {resource_diff.key}", bold=True)]
        if stats.changed == 0:
            lines.append(click.style("No changes", fg="bright_black"))
            return lines

        lines.append(
            f"Lines: Total {stats.total}, "
            + click.style(f"Changed {stats.changed}", fg="blue")
            + ", "
            + click.style(f"Added {stats.added}", fg="green")
            + ", "
            + click.style(f"Removed {stats.removed}", fg="red")
        )
        for segment in resource_diff.segments:
            lines.extend(_segment_lines(segment))
        return lines


def _segment_lines(segment: DiffSegment) -> list[str]:
    prefix, fg = _SEGMENT_STYLE[segment.kind]
    return [click.style(prefix + line, fg=fg) if fg else prefix + line for line in segment.text.splitlines()]

