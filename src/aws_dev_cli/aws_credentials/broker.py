"""STS AssumeRole credential broker.

Each account in the inventory is reached through an IAM role. The broker builds
a plain STS client from the caller's own credentials, assumes the account role
and hands back a CloudWatch client bound to the account region and the
temporary credentials. Credentials are never cached: every account gets a
fresh session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from aws_dev_cli.config import Settings, load_settings
from aws_dev_cli.regions import resolve_region
from aws_dev_cli.utils.time import utc_now

logger = logging.getLogger(__name__)

_ASSUME_ROLE_ERROR_CODES = {
    "AccessDenied": "access_denied",
    "ExpiredTokenException": "token_expired",
    "RegionDisabledException": "region_disabled",
    "MalformedPolicyDocument": "policy_error",
    "PackedPolicyTooLarge": "policy_too_large",
    "ValidationError": "invalid_request",
}


@dataclass(frozen=True)
class ScopedCredentials:
    """Immutable temporary AWS credentials from STS."""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expires_at: datetime

    def __repr__(self) -> str:
        return (
            f"ScopedCredentials(access_key_id={self.access_key_id[:8]}***, "
            f"expires_at={self.expires_at.isoformat()})"
        )


@dataclass(frozen=True)
class ScopedClient:
    """CloudWatch client bound to one region and one assumed role."""

    region: str
    role_arn: str
    credentials: ScopedCredentials
    client: Any = field(repr=False, compare=False)


class CredentialError(Exception):
    """Raised when role assumption fails for an account."""

    def __init__(self, message: str, code: str, role_arn: str, region: str) -> None:
        super().__init__(message)
        self.code = code
        self.role_arn = role_arn
        self.region = region


class CredentialBroker:
    """Builds identity and role-scoped clients for inventory accounts."""

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: Callable[..., Any] = boto3.Session,
    ) -> None:
        self._settings = settings or load_settings()
        self._session_factory = session_factory

    @property
    def session_name(self) -> str:
        return self._settings.aws.role_session_name

    def resolve_region(self, region: str) -> str:
        return resolve_region(region, default=self._settings.aws.default_region)

    async def base_client(self, region: str, role_arn: str = "") -> Any:
        """STS client using the caller's own credentials."""
        return await asyncio.to_thread(
            self._create_client, "sts", self.resolve_region(region), role_arn=role_arn
        )

    async def base_cloudwatch_client(self, region: str) -> Any:
        """CloudWatch client using the caller's own credentials."""
        return await asyncio.to_thread(
            self._create_client, "cloudwatch", self.resolve_region(region)
        )

    async def assume(self, region: str, role_arn: str, identity_client: Any) -> ScopedClient:
        """
        Assume ``role_arn`` and build a CloudWatch client for ``region``.

        Args:
            region: Free-form region of the account
            role_arn: The ARN of the role to assume
            identity_client: STS client from ``base_client``

        Returns:
            ScopedClient bound to the resolved region

        Raises:
            CredentialError: If the STS call fails or returns no credentials
        """
        return await asyncio.to_thread(
            self._assume_sync, self.resolve_region(region), role_arn, identity_client
        )

    async def scoped_client(self, region: str, role_arn: str) -> ScopedClient:
        identity_client = await self.base_client(region, role_arn=role_arn)
        return await self.assume(region, role_arn, identity_client)

    def _assume_sync(self, region: str, role_arn: str, identity_client: Any) -> ScopedClient:
        duration = self._settings.aws.credential_duration_seconds
        try:
            response = identity_client.assume_role(
                RoleArn=role_arn,
                RoleSessionName=self.session_name,
                DurationSeconds=duration,
            )
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code", "Unknown")
            error_message = exc.response.get("Error", {}).get("Message", str(exc))
            logger.warning(
                "AssumeRole failed: role=%s, region=%s, error=%s: %s",
                role_arn,
                region,
                error_code,
                error_message,
            )
            raise CredentialError(
                error_message,
                code=_ASSUME_ROLE_ERROR_CODES.get(error_code, "sts_error"),
                role_arn=role_arn,
                region=region,
            ) from exc
        except BotoCoreError as exc:
            logger.warning("AssumeRole failed: role=%s, region=%s: %s", role_arn, region, exc)
            raise CredentialError(
                str(exc), code="sdk_error", role_arn=role_arn, region=region
            ) from exc

        issued_at = utc_now()
        credentials = self._extract_credentials(response, role_arn, region, issued_at)
        client = self._create_client("cloudwatch", region, credentials, role_arn=role_arn)

        logger.info(
            "Assumed role: %s, session=%s, region=%s", role_arn, self.session_name, region
        )
        return ScopedClient(
            region=region,
            role_arn=role_arn,
            credentials=credentials,
            client=client,
        )

    def _extract_credentials(
        self,
        response: dict[str, Any],
        role_arn: str,
        region: str,
        issued_at: datetime,
    ) -> ScopedCredentials:
        creds = response.get("Credentials") or {}
        missing = [
            key
            for key in ("AccessKeyId", "SecretAccessKey", "SessionToken")
            if not creds.get(key)
        ]
        if missing:
            raise CredentialError(
                f"AssumeRole response is missing {', '.join(missing)}",
                code="missing_credentials",
                role_arn=role_arn,
                region=region,
            )

        return ScopedCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expires_at=issued_at
            + timedelta(seconds=self._settings.aws.credential_duration_seconds),
        )

    def _create_client(
        self,
        service: str,
        region: str,
        credentials: ScopedCredentials | None = None,
        role_arn: str = "",
    ) -> Any:
        try:
            return self._build_client(service, region, credentials)
        except BotoCoreError as exc:
            # e.g. ProfileNotFound, NoRegionError while building the session
            logger.warning(
                "Failed to build %s client: role=%s, region=%s: %s", service, role_arn, region, exc
            )
            raise CredentialError(
                str(exc), code="sdk_error", role_arn=role_arn, region=region
            ) from exc

    def _build_client(
        self,
        service: str,
        region: str,
        credentials: ScopedCredentials | None,
    ) -> Any:
        if credentials is None:
            session = self._session_factory(
                profile_name=self._settings.aws.profile,
                region_name=region,
            )
        else:
            session = self._session_factory(
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key,
                aws_session_token=credentials.session_token,
                region_name=region,
            )
        return session.client(service, config=self._client_config())

    def _client_config(self) -> Config:
        timeout = self._settings.execution.sdk_timeout_seconds
        return Config(read_timeout=timeout, connect_timeout=timeout)
