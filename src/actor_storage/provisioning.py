"""Table provisioning: discover, create, wait for ACTIVE, cache.

States per (connection_id, table_name):
  UNRESOLVED -> DISCOVERING -> FOUND_ACTIVE | FOUND_CREATING | NOT_FOUND
  NOT_FOUND -> CREATING -> WAITING_ACTIVE -> CACHED
  FOUND_CREATING -> WAITING_ACTIVE -> CACHED
  FOUND_ACTIVE -> CACHED

- A cached table is returned without I/O for the rest of the connection's life
- Concurrent resolvers may race; a create that loses the race (TableInUseError)
  restarts resolution from DISCOVERING
- The wait loop is a fixed number of attempts at a fixed delay (no backoff)
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from src.ports.document_store_port import (
    KeySchemaElement,
    ProvisionedCapacity,
    TableStatus,
)
from src.shared.errors import (
    ActorStoreError,
    ProvisioningError,
    ProvisioningTimeoutError,
    TableInUseError,
    TableNotFoundError,
)
from src.shared.logging.error_handler import log_structured_error
from src.shared.types import FIELD_NAME_PRIMARY_ID

if TYPE_CHECKING:
    from uuid import UUID

    from src.ports.document_store_port import (
        DocumentStorePort,
        TableDescription,
        TableHandlePort,
    )

logger = logging.getLogger(__name__)

WAITING_FOR_ACTIVE_TABLE_STATUS_MAX_ATTEMPTS = 66
WAITING_FOR_ACTIVE_TABLE_STATUS_RETRY_DELAY = 0.6  # seconds


@dataclass(frozen=True)
class ProvisioningPolicy:
    """Bounds for the active-wait loop and capacity for created tables."""

    max_attempts: int = WAITING_FOR_ACTIVE_TABLE_STATUS_MAX_ATTEMPTS
    retry_delay: float = WAITING_FOR_ACTIVE_TABLE_STATUS_RETRY_DELAY
    read_capacity_units: int = 1
    write_capacity_units: int = 1


class TableCache:
    """Insert-if-absent map of table name -> handle, owned by one connection."""

    def __init__(self) -> None:
        self._tables: dict[str, TableHandlePort] = {}
        self._lock = threading.Lock()

    def get(self, table_name: str) -> TableHandlePort | None:
        return self._tables.get(table_name)

    def put_if_absent(self, table_name: str, handle: TableHandlePort) -> TableHandlePort:
        """Insert ``handle`` unless an entry exists; return the entry that won."""
        with self._lock:
            return self._tables.setdefault(table_name, handle)

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._tables

    def __len__(self) -> int:
        return len(self._tables)


class ProvisioningConnection(Protocol):
    """What the provisioner needs from a connection."""

    @property
    def connection_id(self) -> UUID: ...

    @property
    def store(self) -> DocumentStorePort: ...

    @property
    def table_cache(self) -> TableCache: ...


def table_cache_id(connection: ProvisioningConnection, table_name: str) -> str:
    return f"{connection.connection_id}/{table_name}"


class TableProvisioner:
    """Resolves table names to ready-to-use handles."""

    def __init__(self, policy: ProvisioningPolicy | None = None) -> None:
        self._policy = policy or ProvisioningPolicy()

    @property
    def policy(self) -> ProvisioningPolicy:
        return self._policy

    async def resolve(self, connection: ProvisioningConnection, table_name: str) -> TableHandlePort:
        """Return a handle for ``table_name``, provisioning the table if needed.

        Raises:
            ProvisioningTimeoutError: The table never became ACTIVE in time.
            ProvisioningError: The table exists in an unusable status.
            DocumentStoreError: The store failed for an unrelated reason.
        """
        cached = connection.table_cache.get(table_name)
        if cached is not None:
            return cached

        logger.debug("Table cache miss: %s", table_cache_id(connection, table_name))
        try:
            return await self._provision(connection, table_name)
        except ActorStoreError as e:
            log_structured_error(
                logger,
                e,
                connection_id=str(connection.connection_id),
                table_name=table_name,
            )
            raise

    async def _provision(self, connection: ProvisioningConnection, table_name: str) -> TableHandlePort:
        store = connection.store
        while True:
            try:
                description = await store.describe_table(table_name)
            except TableNotFoundError:
                try:
                    await self._create_table(store, table_name)
                except TableInUseError:
                    # Another creator won the race; discover its table instead.
                    logger.info("Table %s is already being created, re-resolving", table_name)
                    continue
                description = await self._wait_for_active(store, table_name)
            else:
                if description.status is TableStatus.CREATING:
                    description = await self._wait_for_active(store, table_name)
                elif not description.status.is_usable:
                    msg = f"Table {table_name} is not usable (status {description.status.value})"
                    raise ProvisioningError(table_name, msg)

            handle = store.get_table(description.table_name)
            return connection.table_cache.put_if_absent(table_name, handle)

    async def _create_table(self, store: DocumentStorePort, table_name: str) -> None:
        await store.create_table(
            table_name,
            key_schema=[KeySchemaElement(attribute_name=FIELD_NAME_PRIMARY_ID)],
            capacity=ProvisionedCapacity(
                read_capacity_units=self._policy.read_capacity_units,
                write_capacity_units=self._policy.write_capacity_units,
            ),
        )
        logger.info("Created table: %s", table_name)

    async def _wait_for_active(self, store: DocumentStorePort, table_name: str) -> TableDescription:
        for attempt in range(1, self._policy.max_attempts + 1):
            try:
                description = await store.describe_table(table_name)
            except TableNotFoundError:
                # A freshly created table may not be visible to describe yet.
                description = None
            if description is not None and description.status is TableStatus.ACTIVE:
                logger.info("Table %s is active after %d attempt(s)", table_name, attempt)
                return description
            logger.debug(
                "Waiting for table %s to become active (attempt %d/%d)",
                table_name,
                attempt,
                self._policy.max_attempts,
            )
            await asyncio.sleep(self._policy.retry_delay)

        raise ProvisioningTimeoutError(table_name, self._policy.max_attempts)
