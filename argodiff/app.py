"""Diff run orchestration.

Order of work for one run:
    inventory → affected applications → per-application tasks
    (baseline fetch → revision fetch → diff → report) → summary

Per-application tasks run concurrently, optionally bounded by
``fan_out.max_concurrency``.  The summary is built only after every task
has finished.  A ProviderError inside a task is handled according to
``fan_out.failure_policy``:

    fail-fast  the error cancels the remaining tasks and aborts the run.
    continue   the application is reported as failed and the run goes on.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

import httpx

from argodiff.diff.aggregate import file_stats, summarize
from argodiff.diff.differ import diff_manifest_sets
from argodiff.diff.manifests import fetch_manifest_set
from argodiff.models.applications import Application
from argodiff.models.config import ArgoDiffConfig, FailurePolicy
from argodiff.models.diff import ApplicationReport, RunSummary
from argodiff.observability.logging import bind_run_context, get_logger
from argodiff.provider.client import ArgoCDClient, ProviderError
from argodiff.report.console import ConsoleReporter
from argodiff.resolver.affected import resolve_affected_applications

if TYPE_CHECKING:
    import structlog


class DiffRun:
    """One diff run over a provider client.

    The client is owned by the caller; DiffRun never closes it.
    """

    def __init__(
        self,
        config: ArgoDiffConfig,
        client: ArgoCDClient,
        reporter: ConsoleReporter,
    ) -> None:
        self.config = config
        self._client = client
        self._reporter = reporter
        self._log: structlog.stdlib.BoundLogger = get_logger("app")

    async def execute(self) -> RunSummary:
        """Resolve, diff and summarize.

        Raises:
            ProviderError: if the inventory cannot be listed, or, under the
                fail-fast policy, if any application's manifests cannot be fetched.
        """
        repo = self.config.repository

        # --- 1. Inventory -----------------------------------------------
        inventory = await self._client.list_applications()

        # --- 2. Affected applications ------------------------------------
        affected = resolve_affected_applications(inventory, repo.changelist, repo.slug, repo.host)
        self._reporter.affected_applications(affected)

        # --- 3. Fan-out ----------------------------------------------------
        reports = await self._fan_out(affected)

        # --- 4. Summary ----------------------------------------------------
        summary = summarize(reports)
        self._reporter.summary(summary)
        self._log.info(
            "run_completed",
            applications=summary.applications,
            failed=len(summary.failed_applications),
            unchanged=summary.stats.unchanged,
            modified=summary.stats.modified,
            added=summary.stats.added,
            removed=summary.stats.removed,
        )
        return summary

    # ------------------------------------------------------------------
    # Per-application tasks
    # ------------------------------------------------------------------

    async def _fan_out(self, apps: Sequence[Application]) -> list[ApplicationReport]:
        if not apps:
            return []

        width = self.config.fan_out.max_concurrency
        semaphore = asyncio.Semaphore(width) if width > 0 else None

        tasks = [
            asyncio.create_task(self._bounded(app, semaphore), name=f"diff-{app.qualified_name}")
            for app in apps
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # First failure wins; stop the siblings before propagating.
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _bounded(self, app: Application, semaphore: asyncio.Semaphore | None) -> ApplicationReport:
        if semaphore is None:
            return await self._diff_application(app)
        async with semaphore:
            return await self._diff_application(app)

    async def _diff_application(self, app: Application) -> ApplicationReport:
        repo = self.config.repository
        try:
            baseline = await fetch_manifest_set(self._client, app, repo.base_revision)
            revision = await fetch_manifest_set(self._client, app, repo.revision)
        except ProviderError as exc:
            self._log.error("application_failed", application=app.qualified_name, error=str(exc))
            if self.config.fan_out.failure_policy is FailurePolicy.FAIL_FAST:
                raise
            report = ApplicationReport(namespace=app.namespace, name=app.name, error=str(exc))
            self._reporter.application(report)
            return report

        diffs = diff_manifest_sets(baseline, revision)
        stats = file_stats(diffs)
        report = ApplicationReport(namespace=app.namespace, name=app.name, diffs=diffs, stats=stats)
        self._reporter.application(report)
        self._log.info(
            "application_diffed",
            application=app.qualified_name,
            resources=len(diffs),
            modified=stats.modified,
        )
        return report


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def run_diff(
    config: ArgoDiffConfig,
    reporter: ConsoleReporter | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunSummary:
    """Open a provider client for *config* and execute one diff run."""
    bind_run_context(config.repository.slug, config.repository.revision)
    async with ArgoCDClient(
        server=config.provider.server,
        token=config.provider.token,
        timeout=config.provider.timeout_seconds,
        transport=transport,
    ) as client:
        run = DiffRun(config, client, reporter or ConsoleReporter())
        return await run.execute()
