"""DynamoDBConnection unit tests."""

from __future__ import annotations

from uuid import UUID

import pytest

from src.infra.dynamodb.config import AmazonCredentialType, DynamoDBConfiguration
from src.infra.dynamodb.connection import DynamoDBConnection
from src.infra.dynamodb.store import Boto3DocumentStore
from src.shared.errors import ConfigurationError
from tests.fakes import FakeDocumentStore


@pytest.mark.unit
class TestDynamoDBConnection:
    def test_unique_ids(self, fake_store: FakeDocumentStore) -> None:
        first = DynamoDBConnection(fake_store)
        second = DynamoDBConnection(fake_store)
        assert isinstance(first.connection_id, UUID)
        assert first.connection_id != second.connection_id
        assert first.table_cache is not second.table_cache

    def test_explicit_id(self, fake_store: FakeDocumentStore) -> None:
        cid = UUID("00000000-0000-0000-0000-000000000001")
        assert DynamoDBConnection(fake_store, cid).connection_id == cid

    async def test_close_clears_cache_and_store(self, fake_store: FakeDocumentStore) -> None:
        connection = DynamoDBConnection(fake_store)
        connection.table_cache.put_if_absent("orbit", fake_store.get_table("orbit"))
        await connection.close()
        assert len(connection.table_cache) == 0
        assert fake_store.closed

    def test_from_configuration(self, dummy_configuration: DynamoDBConfiguration) -> None:
        connection = DynamoDBConnection.from_configuration(dummy_configuration)
        store = connection.store
        assert isinstance(store, Boto3DocumentStore)
        assert store.client.meta.region_name == "us-east-1"
        assert store.client.meta.endpoint_url.startswith("http://localhost:35458")

    def test_from_invalid_configuration(self) -> None:
        config = DynamoDBConfiguration(credential_type=AmazonCredentialType.BASIC_CREDENTIALS)
        with pytest.raises(ConfigurationError):
            DynamoDBConnection.from_configuration(config)
