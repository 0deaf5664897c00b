"""Integration test conftest - fixtures requiring a live DynamoDB.

Requires:
    - DynamoDB Local (or LocalStack) reachable at DYNAMODB_ENDPOINT

Usage:
    docker run -p 8000:8000 amazon/dynamodb-local
    DYNAMODB_ENDPOINT=http://localhost:8000 pytest tests/integration/ -m integration
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import pytest

from src.actor_storage.addressing import StateTypeRegistry
from src.actor_storage.provisioning import ProvisioningPolicy
from src.infra.dynamodb.config import AmazonCredentialType, DynamoDBConfiguration
from src.infra.dynamodb.extension import DynamoDBStorageExtension
from src.infra.dynamodb.store import Boto3DocumentStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

DYNAMODB_ENDPOINT = os.environ.get("DYNAMODB_ENDPOINT", "")


@pytest.fixture(scope="session")
def live_configuration() -> DynamoDBConfiguration:
    if not DYNAMODB_ENDPOINT:
        pytest.skip("DYNAMODB_ENDPOINT not set")
    return DynamoDBConfiguration(
        credential_type=AmazonCredentialType.BASIC_CREDENTIALS,
        access_key="dummy",
        secret_key="dummy",
        region=os.environ.get("DYNAMODB_REGION", "us-east-1"),
        endpoint=DYNAMODB_ENDPOINT,
    )


@pytest.fixture
def table_prefix() -> str:
    return f"inttest-{uuid4().hex[:8]}"


@pytest.fixture
def live_registry() -> StateTypeRegistry:
    return StateTypeRegistry()


@pytest.fixture
async def live_extension(
    live_configuration: DynamoDBConfiguration,
    live_registry: StateTypeRegistry,
    table_prefix: str,
) -> AsyncGenerator[DynamoDBStorageExtension, None]:
    """Started extension on a fresh default table; drops its tables afterwards."""
    ext = DynamoDBStorageExtension(
        live_configuration,
        default_table_name=f"{table_prefix}-orbit",
        registry=live_registry,
        policy=ProvisioningPolicy(max_attempts=66, retry_delay=0.2),
    )
    await ext.start()
    store = ext.connection.store
    assert isinstance(store, Boto3DocumentStore)
    client: Any = store.client
    yield ext

    tables = [name for name in client.list_tables()["TableNames"] if name.startswith(table_prefix)]
    for name in tables:
        client.delete_table(TableName=name)
    await ext.stop()
