"""``argodiff`` command.

Example:
    $ argodiff --server https://argocd.example.com --revision "$GITHUB_SHA" \\
        --changelist "services/api/deploy.yaml,services/api/values.yaml"

Every option falls back to its environment variable, so inside a CI job
the command usually runs with no arguments at all.
"""

from __future__ import annotations

import asyncio

import click

from argodiff import __version__
from argodiff.app import run_diff
from argodiff.config import ConfigurationError, load_config
from argodiff.models.config import FailurePolicy
from argodiff.observability.logging import get_logger, setup_logging
from argodiff.provider.client import ProviderError
from argodiff.report.console import ConsoleReporter


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="argodiff")
@click.option("--server", help="Argo CD API server URL. [env: ARGOCD_SERVER]")
@click.option("--token", help="Argo CD auth token. [env: ARGOCD_TOKEN]")
@click.option("--repo-slug", help="Repository under test as owner/name. [env: GITHUB_REPOSITORY]")
@click.option("--changelist", help="Comma-separated changed file paths. [env: CHANGES]")
@click.option("--revision", help="Revision to diff against the baseline. [env: GITHUB_SHA]")
@click.option(
    "--base-revision",
    help="Baseline revision. Defaults to the live state. [env: ARGODIFF_BASE_REVISION]",
)
@click.option("--repo-host", help="Code hosting domain of the repository. [env: ARGODIFF_REPO_HOST]")
@click.option(
    "--max-concurrency",
    type=click.IntRange(min=0),
    help="Applications diffed at once, 0 for no limit. [env: ARGODIFF_MAX_CONCURRENCY]",
)
@click.option(
    "--failure-policy",
    type=click.Choice([p.value for p in FailurePolicy]),
    help="Abort on the first failed application, or report it and go on. [env: ARGODIFF_FAILURE_POLICY]",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Log level for stderr. [env: ARGODIFF_LOG_LEVEL]",
)
@click.option("--color/--no-color", default=None, help="Force colored output on or off.")
def cli(
    server: str | None,
    token: str | None,
    repo_slug: str | None,
    changelist: str | None,
    revision: str | None,
    base_revision: str | None,
    repo_host: str | None,
    max_concurrency: int | None,
    failure_policy: str | None,
    log_level: str | None,
    color: bool | None,
) -> None:
    """Print the rendered manifest changes a revision makes to affected Argo CD applications."""
    try:
        config = load_config(
            server=server,
            token=token,
            repo_slug=repo_slug,
            changelist=changelist,
            revision=revision,
            base_revision=base_revision,
            repo_host=repo_host,
            max_concurrency=max_concurrency,
            failure_policy=failure_policy,
            log_level=log_level,
        )
    except ConfigurationError as exc:
        raise click.ClickException(f"Configuration error: {exc}") from exc

    setup_logging(config.log.level)
    log = get_logger("cli")

    try:
        summary = asyncio.run(run_diff(config, ConsoleReporter(color=color)))
    except ProviderError as exc:
        log.error("run_failed", operation=exc.operation, status_code=exc.status_code, error=exc.detail)
        raise click.ClickException(f"Failed to retrieve diff: {exc}") from exc

    if summary.failed:
        raise click.ClickException(
            f"{len(summary.failed_applications)} application(s) could not be diffed: "
            + ", ".join(summary.failed_applications)
        )
