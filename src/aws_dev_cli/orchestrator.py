"""Per-account run loop.

Accounts are processed one at a time. Every failure that belongs to a single
account (role assumption, template, CloudWatch call, file write) is caught
at the account boundary and recorded on the run report; the loop then moves
on to the next account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from aws_dev_cli import cloudwatch
from aws_dev_cli.alarms import AlarmRecord, write_alarm_records
from aws_dev_cli.artifacts import MetricImageArtifact, image_file_name
from aws_dev_cli.aws_credentials import CredentialBroker, CredentialError
from aws_dev_cli.cloudwatch import CloudWatchServiceError
from aws_dev_cli.config import Settings, load_settings
from aws_dev_cli.inventory import AccountRecord, filter_accounts, load_inventory
from aws_dev_cli.templates import (
    TemplateParseError,
    parse_widget_definition,
    render_template,
)


class FailureStage(str, Enum):
    ASSUME_ROLE = "assume_role"
    TEMPLATE_READ = "template_read"
    TEMPLATE_PARSE = "template_parse"
    SERVICE_CALL = "service_call"
    IMAGE_EMPTY = "image_empty"
    WRITE_IMAGE = "write_image"


@dataclass(frozen=True)
class AccountFailure:
    account: AccountRecord
    stage: FailureStage
    cause: Exception | None = None

    def describe(self) -> str:
        detail = f": {self.cause}" if self.cause is not None else ""
        return (
            f"{self.account.namespace} ({self.account.region}, {self.account.role_arn}) "
            f"failed at {self.stage.value}{detail}"
        )


@dataclass(frozen=True)
class AccountOutcome:
    account: AccountRecord
    artifact: Any = None
    failure: AccountFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class RunReport:
    outcomes: list[AccountOutcome] = field(default_factory=list)
    output_path: Path | None = None
    output_error: Exception | None = None

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def failures(self) -> list[AccountFailure]:
        return [outcome.failure for outcome in self.outcomes if outcome.failure is not None]

    def summary(self) -> str:
        return f"{self.succeeded} succeeded, {self.failed} failed"


@dataclass(frozen=True)
class WidgetRequest:
    """Run-wide options of ``dev images``."""

    template_path: Path
    title: str = "metric"
    start: str = "4320H"
    end: str = "0H"
    period: str = "3600"
    region: str | None = None


@dataclass(frozen=True)
class WidgetProps:
    title: str
    region: str
    namespace: str
    role_arn: str
    template_path: Path
    start: str
    end: str
    period: str

    @classmethod
    def for_account(cls, account: AccountRecord, request: WidgetRequest) -> WidgetProps:
        return cls(
            title=request.title,
            region=request.region or account.region,
            namespace=account.namespace,
            role_arn=account.role_arn,
            template_path=request.template_path,
            start=request.start,
            end=request.end,
            period=request.period,
        )


class RunOrchestrator:
    def __init__(
        self,
        settings: Settings | None = None,
        broker: CredentialBroker | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._broker = broker or CredentialBroker(self._settings)
        self._logger = logger or logging.getLogger(__name__)

    def check_config(self, config_path: str | Path, pattern: str | None) -> list[AccountRecord]:
        """Load and filter the inventory without touching AWS."""
        accounts = filter_accounts(pattern, load_inventory(config_path))
        self._logger.info("Accounts config %s: %d account(s) selected", config_path, len(accounts))
        return accounts

    async def download_images(
        self,
        accounts: list[AccountRecord],
        request: WidgetRequest,
        output_dir: str | Path | None = None,
    ) -> RunReport:
        target_dir = Path(output_dir or self._settings.output.image_dir)
        report = RunReport()
        for account in accounts:
            props = WidgetProps.for_account(account, request)
            outcome = await self._download_image(account, props, target_dir)
            self._log_outcome(outcome)
            report.outcomes.append(outcome)
        self._logger.info("Image download finished: %s", report.summary())
        return report

    async def describe_alarms(
        self,
        accounts: list[AccountRecord],
        output_path: str | Path | None = None,
    ) -> RunReport:
        all_alarms: list[AlarmRecord] = []
        report = RunReport()
        for account in accounts:
            self._logger.info("Describing alarms for %s (%s)", account.namespace, account.region)
            outcome = await self._describe_account_alarms(account)
            self._log_outcome(outcome)
            if outcome.ok:
                all_alarms.extend(outcome.artifact)
            report.outcomes.append(outcome)

        path = Path(output_path or self._settings.output.alarms_path)
        try:
            report.output_path = write_alarm_records(path, all_alarms)
        except OSError as exc:
            self._logger.error("Error writing alarms to %s: %s", path, exc)
            report.output_error = exc
        self._logger.info("Describe alarms finished: %s", report.summary())
        return report

    async def _download_image(
        self,
        account: AccountRecord,
        props: WidgetProps,
        output_dir: Path,
    ) -> AccountOutcome:
        try:
            scoped = await self._broker.scoped_client(props.region, props.role_arn)
        except CredentialError as exc:
            return self._failed(account, FailureStage.ASSUME_ROLE, exc)

        widget_json = render_template(
            props.template_path,
            region=props.region,
            namespace=props.namespace,
            start=props.start,
            end=props.end,
            period=props.period,
        )
        if widget_json is None:
            return self._failed(account, FailureStage.TEMPLATE_READ)
        try:
            parse_widget_definition(widget_json, path=str(props.template_path))
        except TemplateParseError as exc:
            return self._failed(account, FailureStage.TEMPLATE_PARSE, exc)

        try:
            image = await cloudwatch.get_metric_widget_image(scoped.client, widget_json)
        except CloudWatchServiceError as exc:
            return self._failed(account, FailureStage.SERVICE_CALL, exc)
        if image is None:
            return self._failed(account, FailureStage.IMAGE_EMPTY)

        artifact = MetricImageArtifact(
            name=image_file_name(props.namespace, props.title, props.region, props.start),
            content=image,
        )
        try:
            path = artifact.write(output_dir)
        except OSError as exc:
            return self._failed(account, FailureStage.WRITE_IMAGE, exc)
        return AccountOutcome(account=account, artifact=path)

    async def _describe_account_alarms(self, account: AccountRecord) -> AccountOutcome:
        try:
            scoped = await self._broker.scoped_client(account.region, account.role_arn)
        except CredentialError as exc:
            return self._failed(account, FailureStage.ASSUME_ROLE, exc)

        try:
            alarms = await cloudwatch.describe_alarms(scoped.client)
        except CloudWatchServiceError as exc:
            return self._failed(account, FailureStage.SERVICE_CALL, exc)

        records = [AlarmRecord.from_metric_alarm(account.namespace, alarm) for alarm in alarms]
        return AccountOutcome(account=account, artifact=records)

    @staticmethod
    def _failed(
        account: AccountRecord,
        stage: FailureStage,
        cause: Exception | None = None,
    ) -> AccountOutcome:
        return AccountOutcome(
            account=account,
            failure=AccountFailure(account=account, stage=stage, cause=cause),
        )

    def _log_outcome(self, outcome: AccountOutcome) -> None:
        if outcome.failure is not None:
            self._logger.error("Account %s", outcome.failure.describe())
            return
        if isinstance(outcome.artifact, list):
            detail = f"{len(outcome.artifact)} alarm(s)"
        else:
            detail = str(outcome.artifact)
        self._logger.info(
            "Account %s (%s) succeeded: %s",
            outcome.account.namespace,
            outcome.account.region,
            detail,
        )
