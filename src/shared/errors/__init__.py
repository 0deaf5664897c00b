"""Unified error hierarchy for actor state storage.

All storage errors inherit from ActorStoreError. Port implementations
translate backend-specific failures (botocore ClientError, etc.) into
these types so callers never depend on a concrete store client.
"""

from __future__ import annotations


class ActorStoreError(Exception):
    """Base error for all actor state storage exceptions."""

    def __init__(self, message: str, code: str = "ACTOR_STORE_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Configuration / lifecycle errors --


class ConfigurationError(ActorStoreError):
    """Storage configuration is invalid (credentials, endpoint, region)."""

    def __init__(self, message: str, setting: str = "") -> None:
        self.setting = setting
        super().__init__(message, code="CONFIGURATION")


class StorageNotStartedError(ActorStoreError):
    """A storage operation was attempted before start() completed."""

    def __init__(self, extension_name: str) -> None:
        self.extension_name = extension_name
        super().__init__(
            f"Storage extension {extension_name!r} is not started",
            code="NOT_STARTED",
        )


# -- Document store errors (raised by DocumentStorePort implementations) --


class DocumentStoreError(ActorStoreError):
    """The document store rejected or failed an operation."""

    def __init__(self, operation: str, message: str = "", aws_code: str = "") -> None:
        self.operation = operation
        self.aws_code = aws_code
        super().__init__(
            message or f"Document store operation {operation} failed",
            code="DOCUMENT_STORE",
        )


class TableNotFoundError(ActorStoreError):
    """The requested table does not exist."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table not found: {table_name}", code="TABLE_NOT_FOUND")


class TableInUseError(ActorStoreError):
    """The table is already being created (or otherwise busy) in the store."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table already in use: {table_name}", code="TABLE_IN_USE")


# -- Provisioning errors --


class ProvisioningError(ActorStoreError):
    """A table could not be made ready for use."""

    def __init__(self, table_name: str, message: str = "", code: str = "PROVISIONING") -> None:
        self.table_name = table_name
        super().__init__(message or f"Failed to provision table: {table_name}", code=code)


class ProvisioningTimeoutError(ProvisioningError):
    """A table never reported ACTIVE within the wait bound."""

    def __init__(self, table_name: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            table_name,
            f"Hit max retry attempts ({attempts}) while waiting for table "
            f"to become active: {table_name}",
            code="PROVISIONING_TIMEOUT",
        )


# -- Payload errors --


class CodecError(ActorStoreError):
    """Actor state could not be encoded to, or decoded from, a payload."""

    def __init__(self, message: str, state_type: str = "") -> None:
        self.state_type = state_type
        super().__init__(message, code="CODEC")


# -- Contract errors --


class ValidationError(ActorStoreError):
    """Input validation failed."""

    def __init__(self, message: str, field: str = "", code: str = "VALIDATION") -> None:
        self.field = field
        super().__init__(message, code=code)


class StateTypeMismatchError(ValidationError):
    """State object's runtime type differs from the declared state type."""

    def __init__(self, expected: type, actual: type) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"State object of type {actual.__qualname__} does not match "
            f"declared state type {expected.__qualname__}",
            field="state",
            code="STATE_TYPE_MISMATCH",
        )


__all__ = [
    "ActorStoreError",
    "CodecError",
    "ConfigurationError",
    "DocumentStoreError",
    "ProvisioningError",
    "ProvisioningTimeoutError",
    "StateTypeMismatchError",
    "StorageNotStartedError",
    "TableInUseError",
    "TableNotFoundError",
    "ValidationError",
]
