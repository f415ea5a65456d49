"""Command line entrypoint: ``dev``.

Accounts are defined in a TOML file as a list of ``[[account]]`` tables::

    [[account]]
    namespace = "SomeDataProcessingProgram"
    region = "us-east-1"
    role_arn = "arn:aws:iam::111111111111:role/MetricsObserver"

Examples::

    # validate the accounts config
    dev config accounts.toml

    # retry counts graph for the last six months, ItemDPP accounts only
    dev images --period 3600 --pattern ItemDPP -s 4320H ./resources/traffic.json accounts.toml

    # dump every alarm of every account to describe-alarms.json
    dev alarms accounts.toml
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from aws_dev_cli import __version__, cloudwatch
from aws_dev_cli.aws_credentials import CredentialBroker, CredentialError
from aws_dev_cli.cloudwatch import CloudWatchServiceError
from aws_dev_cli.config import load_settings
from aws_dev_cli.inventory import (
    AccountRecord,
    InventoryConfigError,
    InventoryNotFoundError,
)
from aws_dev_cli.logging_utils import configure_logging, get_logger
from aws_dev_cli.orchestrator import RunOrchestrator, RunReport, WidgetRequest

_pattern_option = click.option(
    "-f",
    "--pattern",
    default=None,
    help="Only use accounts whose namespace contains PATTERN.",
)
_config_path_argument = click.argument(
    "config_path",
    metavar="CONFIG_PATH",
    type=click.Path(dir_okay=False, path_type=Path),
)


def _orchestrator() -> RunOrchestrator:
    settings = load_settings()
    return RunOrchestrator(
        settings=settings,
        broker=CredentialBroker(settings),
        logger=get_logger("aws_dev_cli.run"),
    )


def _select_accounts(
    orchestrator: RunOrchestrator,
    config_path: Path,
    pattern: str | None,
) -> list[AccountRecord]:
    try:
        return orchestrator.check_config(config_path, pattern)
    except InventoryConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    except InventoryNotFoundError as exc:
        raise click.ClickException(f"No accounts config found at {config_path}") from exc


def _echo_report(report: RunReport) -> None:
    for outcome in report.outcomes:
        if outcome.failure is not None:
            click.echo(f"FAILED  {outcome.failure.describe()}")
        else:
            click.echo(f"OK      {outcome.account.namespace} ({outcome.account.region})")
    click.echo(report.summary())


@click.group()
@click.version_option(__version__, prog_name="dev")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """Dev CLI for repetitive AWS account tasks."""
    configure_logging("DEBUG" if verbose else None)


@cli.command()
@click.option("-r", "--region", default=None, help="AWS region (e.g. us-east-1, eu-west-1).")
@click.option("-s", "--start-time", "--start", "start", default="4320H", show_default=True)
@click.option("-e", "--end-time", "--end", "end", default="0H", show_default=True)
@click.option("-p", "--period", default="3600", show_default=True)
@click.option(
    "--title",
    default="metric",
    show_default=True,
    help="Title to identify the image downloaded.",
)
@_pattern_option
@click.option(
    "-o",
    "--output-path",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for downloaded images.",
)
@click.argument("template_path", type=click.Path(dir_okay=False, path_type=Path))
@_config_path_argument
def images(
    region: str | None,
    start: str,
    end: str,
    period: str,
    title: str,
    pattern: str | None,
    output_path: Path | None,
    template_path: Path,
    config_path: Path,
) -> None:
    """Download metric widget images from CloudWatch."""
    orchestrator = _orchestrator()
    accounts = _select_accounts(orchestrator, config_path, pattern)
    request = WidgetRequest(
        template_path=template_path,
        title=title,
        start=start,
        end=end,
        period=period,
        region=region,
    )
    report = asyncio.run(orchestrator.download_images(accounts, request, output_path))
    _echo_report(report)


@cli.command()
@_pattern_option
@click.option(
    "-o",
    "--output-path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON file for the alarm report.",
)
@_config_path_argument
def alarms(pattern: str | None, output_path: Path | None, config_path: Path) -> None:
    """Describe alarms for all accounts."""
    orchestrator = _orchestrator()
    accounts = _select_accounts(orchestrator, config_path, pattern)
    report = asyncio.run(orchestrator.describe_alarms(accounts, output_path))
    _echo_report(report)
    if report.output_error is not None:
        click.echo(f"error writing alarms: {report.output_error}", err=True)
    else:
        click.echo(f"saved alarms to {report.output_path}")


@cli.command()
@_pattern_option
@_config_path_argument
def config(pattern: str | None, config_path: Path) -> None:
    """Validate and display the config file for your accounts."""
    accounts = _select_accounts(_orchestrator(), config_path, pattern)
    for account in accounts:
        click.echo(repr(account))
    click.echo(f"{len(accounts)} account(s)")


@cli.command()
@click.option("-r", "--region", default=None, help="Defaults to the configured default region.")
@click.option("-n", "--namespace", default=None, help="Only list metrics in this namespace.")
def show(region: str | None, namespace: str | None) -> None:
    """Show metrics for the account of the current credentials."""
    settings = load_settings()
    broker = CredentialBroker(settings)

    async def _list() -> list[cloudwatch.MetricDescriptor]:
        client = await broker.base_cloudwatch_client(region or settings.aws.default_region)
        return await cloudwatch.list_metrics(client, namespace)

    try:
        metrics = asyncio.run(_list())
    except (CloudWatchServiceError, CredentialError) as exc:
        raise click.ClickException(f"encountered error getting metrics: {exc}") from exc

    for metric in metrics:
        dimensions = ", ".join(f"{name}={value}" for name, value in metric.dimensions)
        click.echo(f"{metric.namespace}  {metric.metric_name}  [{dimensions}]")
    click.echo(f"{len(metrics)} metric(s)")


def main() -> None:
    cli()
