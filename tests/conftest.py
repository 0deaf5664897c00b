"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit        - No external deps
    @pytest.mark.integration - Needs a running DynamoDB (Local)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from src.actor_storage.addressing import StateTypeRegistry
from src.actor_storage.provisioning import ProvisioningPolicy
from src.infra.dynamodb.config import AmazonCredentialType, DynamoDBConfiguration
from src.infra.dynamodb.connection import DynamoDBConnection
from src.infra.dynamodb.extension import DynamoDBStorageExtension
from src.shared.types import ActorReference
from tests.fakes import FakeDocumentStore, Hello

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

DEFAULT_TABLE_NAME = "orbit-test"


@pytest.fixture
def fake_store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def connection(fake_store: FakeDocumentStore) -> DynamoDBConnection:
    return DynamoDBConnection(fake_store)


@pytest.fixture
def fast_policy() -> ProvisioningPolicy:
    """Wait loop without real sleeps."""
    return ProvisioningPolicy(max_attempts=5, retry_delay=0.0)


@pytest.fixture
def registry() -> StateTypeRegistry:
    return StateTypeRegistry()


@pytest.fixture
def dummy_configuration() -> DynamoDBConfiguration:
    return DynamoDBConfiguration(
        credential_type=AmazonCredentialType.BASIC_CREDENTIALS,
        access_key="dummy",
        secret_key="dummy",
        region="us-east-1",
        endpoint="http://localhost:35458/",
    )


@pytest.fixture
def hello_ref() -> ActorReference:
    return ActorReference(interface_type=Hello, identity="actor-1")


@pytest.fixture
async def extension(
    fake_store: FakeDocumentStore,
    registry: StateTypeRegistry,
    fast_policy: ProvisioningPolicy,
    dummy_configuration: DynamoDBConfiguration,
) -> AsyncGenerator[DynamoDBStorageExtension, None]:
    """Started extension backed by the in-memory store."""
    ext = DynamoDBStorageExtension(
        dummy_configuration,
        default_table_name=DEFAULT_TABLE_NAME,
        registry=registry,
        policy=fast_policy,
        connection_factory=lambda _cfg: DynamoDBConnection(fake_store),
    )
    await ext.start()
    yield ext
    await ext.stop()
