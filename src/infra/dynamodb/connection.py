"""DynamoDB connection: one configured client session plus its table cache.

Each connection gets its own connection_id and TableCache, so independently
configured extensions never share provisioning state even when they point
at the same physical tables.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import boto3
from botocore.exceptions import BotoCoreError

from src.actor_storage.provisioning import TableCache
from src.infra.dynamodb.store import Boto3DocumentStore
from src.shared.errors import ConfigurationError

if TYPE_CHECKING:
    from src.infra.dynamodb.config import DynamoDBConfiguration
    from src.ports.document_store_port import DocumentStorePort

logger = logging.getLogger(__name__)


class DynamoDBConnection:
    """A live session with the document store."""

    def __init__(self, store: DocumentStorePort, connection_id: UUID | None = None) -> None:
        self._connection_id = connection_id or uuid4()
        self._store = store
        self._table_cache = TableCache()

    @classmethod
    def from_configuration(cls, configuration: DynamoDBConfiguration) -> DynamoDBConnection:
        """Create a boto3-backed connection.

        Raises:
            ConfigurationError: The settings are invalid or boto3 rejects them.
        """
        configuration.validate()
        try:
            client = boto3.client("dynamodb", **configuration.to_boto3_kwargs())
        except BotoCoreError as e:
            msg = f"Cannot create DynamoDB client: {e}"
            raise ConfigurationError(msg) from e

        connection = cls(Boto3DocumentStore(client))
        logger.info(
            "DynamoDB connection %s opened (region=%s, endpoint=%s)",
            connection.connection_id,
            client.meta.region_name,
            configuration.endpoint or "default",
        )
        return connection

    @property
    def connection_id(self) -> UUID:
        return self._connection_id

    @property
    def store(self) -> DocumentStorePort:
        return self._store

    @property
    def table_cache(self) -> TableCache:
        return self._table_cache

    async def close(self) -> None:
        """Discard cached tables and release the client."""
        self._table_cache.clear()
        await self._store.close()
        logger.info("DynamoDB connection %s closed", self._connection_id)
