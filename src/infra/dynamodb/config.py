"""DynamoDB connection configuration.

Explicit constructor values win; from_env() fills gaps from the environment.
A blank region defers to boto3's own resolution (AWS_REGION, profile, ...).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.shared.errors import ConfigurationError


class AmazonCredentialType(Enum):
    """How the DynamoDB client obtains credentials."""

    BASIC_CREDENTIALS = "basic_credentials"
    BASIC_SESSION_CREDENTIALS = "basic_session_credentials"
    DEFAULT_PROVIDER_CHAIN = "default_provider_chain"


@dataclass(frozen=True)
class DynamoDBConfiguration:
    """Settings for one DynamoDB connection.

    Attributes:
        credential_type: Credential mode (default: boto3 provider chain).
        access_key: Access key id for the basic credential modes.
        secret_key: Secret access key for the basic credential modes.
        session_token: Session token for BASIC_SESSION_CREDENTIALS.
        region: AWS region name; blank falls back to the environment.
        endpoint: Custom endpoint URL (DynamoDB Local, LocalStack).
    """

    credential_type: AmazonCredentialType = AmazonCredentialType.DEFAULT_PROVIDER_CHAIN
    access_key: str | None = None
    secret_key: str | None = None
    session_token: str | None = None
    region: str | None = None
    endpoint: str | None = None

    @classmethod
    def from_env(cls) -> DynamoDBConfiguration:
        """Load configuration from environment variables.

        Environment variables:
            - DYNAMODB_CREDENTIAL_TYPE -> credential_type (enum value or name)
            - AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY / AWS_SESSION_TOKEN
            - DYNAMODB_REGION / AWS_REGION / AWS_DEFAULT_REGION -> region
            - DYNAMODB_ENDPOINT / AWS_ENDPOINT_URL -> endpoint
        """
        raw_type = os.environ.get("DYNAMODB_CREDENTIAL_TYPE", "")
        return cls(
            credential_type=_parse_credential_type(raw_type),
            access_key=os.environ.get("AWS_ACCESS_KEY_ID"),
            secret_key=os.environ.get("AWS_SECRET_ACCESS_KEY"),
            session_token=os.environ.get("AWS_SESSION_TOKEN"),
            region=os.environ.get("DYNAMODB_REGION")
            or os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION"),
            endpoint=os.environ.get("DYNAMODB_ENDPOINT") or os.environ.get("AWS_ENDPOINT_URL"),
        )

    def validate(self) -> None:
        """Raise ConfigurationError if the settings cannot produce a client."""
        basic = (
            AmazonCredentialType.BASIC_CREDENTIALS,
            AmazonCredentialType.BASIC_SESSION_CREDENTIALS,
        )
        if self.credential_type in basic:
            if not self.access_key:
                msg = f"{self.credential_type.name} requires an access key"
                raise ConfigurationError(msg, setting="access_key")
            if not self.secret_key:
                msg = f"{self.credential_type.name} requires a secret key"
                raise ConfigurationError(msg, setting="secret_key")
        if (
            self.credential_type is AmazonCredentialType.BASIC_SESSION_CREDENTIALS
            and not self.session_token
        ):
            msg = "BASIC_SESSION_CREDENTIALS requires a session token"
            raise ConfigurationError(msg, setting="session_token")
        if self.endpoint is not None and self.endpoint.strip():
            if not self.endpoint.startswith(("http://", "https://")):
                msg = f"Endpoint must be an http(s) URL: {self.endpoint!r}"
                raise ConfigurationError(msg, setting="endpoint")

    def to_boto3_kwargs(self) -> dict[str, Any]:
        """Build kwargs for ``boto3.client("dynamodb", ...)``."""
        kwargs: dict[str, Any] = {}
        if self.credential_type is not AmazonCredentialType.DEFAULT_PROVIDER_CHAIN:
            kwargs["aws_access_key_id"] = self.access_key
            kwargs["aws_secret_access_key"] = self.secret_key
        if self.credential_type is AmazonCredentialType.BASIC_SESSION_CREDENTIALS:
            kwargs["aws_session_token"] = self.session_token
        if self.region and self.region.strip():
            kwargs["region_name"] = self.region.strip()
        if self.endpoint and self.endpoint.strip():
            kwargs["endpoint_url"] = self.endpoint.strip()
        return kwargs


def _parse_credential_type(raw: str) -> AmazonCredentialType:
    if not raw.strip():
        return AmazonCredentialType.DEFAULT_PROVIDER_CHAIN
    normalized = raw.strip().lower()
    for member in AmazonCredentialType:
        if normalized in (member.value, member.name.lower()):
            return member
    msg = f"Unknown DYNAMODB_CREDENTIAL_TYPE: {raw!r}"
    raise ConfigurationError(msg, setting="credential_type")
