"""AWS credential utilities."""

from aws_dev_cli.aws_credentials.broker import (
    CredentialBroker,
    CredentialError,
    ScopedClient,
    ScopedCredentials,
)

__all__ = [
    "CredentialBroker",
    "CredentialError",
    "ScopedClient",
    "ScopedCredentials",
]
