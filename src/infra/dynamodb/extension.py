"""DynamoDB storage extension: actor state read / write / clear.

Every operation goes through the same path:
  DocumentAddresser (table + key) -> TableProvisioner (handle) -> store I/O
  -> PayloadCodec (encode on write, decode on read)
so the key and table for a write always match the read and clear of the
same actor and state type, across calls and across restarts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from src.actor_storage.addressing import DocumentAddresser, StateTypeRegistry
from src.actor_storage.codec import PayloadCodec
from src.actor_storage.provisioning import ProvisioningPolicy, TableProvisioner
from src.infra.dynamodb.config import DynamoDBConfiguration
from src.infra.dynamodb.connection import DynamoDBConnection
from src.ports.storage_extension_port import StorageExtensionPort
from src.shared.errors import (
    CodecError,
    StateTypeMismatchError,
    StorageNotStartedError,
    ValidationError,
)
from src.shared.logging.error_handler import log_structured_error
from src.shared.types import Document

if TYPE_CHECKING:
    from collections.abc import Callable

    from src.ports.document_store_port import TableHandlePort
    from src.shared.types import ActorReference, ActorState

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION_NAME = "default"
DEFAULT_TABLE_NAME = "orbit"


class DynamoDBStorageExtension(StorageExtensionPort):
    """Persists actor state as one DynamoDB document per actor and state type.

    Args:
        configuration: Connection settings (default: from environment).
        name: Extension name reported to the actor runtime.
        default_table_name: Table used when a state type has no override.
        registry: Per-state-type overrides (default: process-wide registry).
        codec: Payload codec (default: PayloadCodec()).
        policy: Provisioning wait bounds and capacity.
        connection_factory: Builds the connection on start(); tests inject
            an in-memory store through this.
    """

    def __init__(
        self,
        configuration: DynamoDBConfiguration | None = None,
        *,
        name: str = DEFAULT_EXTENSION_NAME,
        default_table_name: str = DEFAULT_TABLE_NAME,
        registry: StateTypeRegistry | None = None,
        codec: PayloadCodec | None = None,
        policy: ProvisioningPolicy | None = None,
        connection_factory: Callable[[DynamoDBConfiguration], DynamoDBConnection] | None = None,
    ) -> None:
        self._configuration = configuration
        self._name = name
        self._default_table_name = default_table_name
        self._registry = registry
        self._codec = codec or PayloadCodec()
        self._provisioner = TableProvisioner(policy)
        self._connection_factory = connection_factory or DynamoDBConnection.from_configuration
        self._addresser = DocumentAddresser(default_table_name, registry)
        self._connection: DynamoDBConnection | None = None
        self._lifecycle_lock = asyncio.Lock()

    # -- Configuration --

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def default_table_name(self) -> str:
        return self._default_table_name

    @default_table_name.setter
    def default_table_name(self, value: str) -> None:
        if self._connection is not None:
            msg = "default_table_name cannot change after start()"
            raise RuntimeError(msg)
        self._default_table_name = value
        self._addresser = DocumentAddresser(value, self._registry)

    @property
    def connection(self) -> DynamoDBConnection:
        if self._connection is None:
            raise StorageNotStartedError(self._name)
        return self._connection

    # -- Lifecycle --

    async def start(self) -> None:
        """Open the connection and provision the default table eagerly.

        Concurrent calls share one connection: the first caller builds it,
        the rest wait on the lifecycle lock and return.
        """
        async with self._lifecycle_lock:
            if self._connection is not None:
                return
            configuration = self._configuration or DynamoDBConfiguration.from_env()
            connection = self._connection_factory(configuration)
            try:
                await self._provisioner.resolve(connection, self._default_table_name)
            except BaseException:
                await connection.close()
                raise
            self._connection = connection
        logger.info(
            "Storage extension %s started (default table %s)",
            self._name,
            self._default_table_name,
        )

    async def stop(self) -> None:
        async with self._lifecycle_lock:
            if self._connection is None:
                return
            connection, self._connection = self._connection, None
            await connection.close()
        logger.info("Storage extension %s stopped", self._name)

    # -- Addressing --

    def get_table_name(self, reference_type: type, state_type: type | None) -> str:
        return self._addresser.table_name(reference_type, state_type)

    def generate_document_id(
        self,
        reference: ActorReference,
        state_type: type | None = None,
    ) -> str:
        return self._addresser.document_key(
            reference.identity, reference.interface_type, state_type
        )

    # -- State operations --

    async def read_state(
        self,
        reference: ActorReference,
        state: ActorState,
        state_type: type[ActorState] | None = None,
    ) -> bool:
        effective_type = _check_state_type(state, state_type)
        table, key = await self._locate(reference, effective_type)

        document = await table.get_item(key, consistent_read=True)
        if document is None:
            return False
        if document.payload is not None:
            try:
                self._codec.decode(document.payload, state)
            except CodecError as e:
                log_structured_error(
                    logger,
                    e,
                    connection_id=str(self.connection.connection_id),
                    table_name=table.table_name,
                    document_key=key,
                )
                raise
        return True

    async def write_state(
        self,
        reference: ActorReference,
        state: ActorState | None,
        state_type: type[ActorState] | None = None,
    ) -> None:
        effective_type = _check_state_type(state, state_type)
        payload = self._codec.encode(state) if state is not None else None
        table, key = await self._locate(reference, effective_type)

        await table.put_item(
            Document(key=key, owning_type=reference.interface_name, payload=payload)
        )

    async def clear_state(
        self,
        reference: ActorReference,
        state: ActorState | None,
        state_type: type[ActorState] | None = None,
    ) -> None:
        effective_type = _check_state_type(state, state_type)
        table, key = await self._locate(reference, effective_type)
        await table.delete_item(key)

    async def _locate(
        self,
        reference: ActorReference,
        state_type: type | None,
    ) -> tuple[TableHandlePort, str]:
        connection = self.connection
        table_name = self._addresser.table_name(reference.interface_type, state_type)
        key = self._addresser.document_key(reference.identity, reference.interface_type, state_type)
        table = await self._provisioner.resolve(connection, table_name)
        return table, key


def _check_state_type(
    state: ActorState | None,
    state_type: type[ActorState] | None,
) -> type:
    """Return the state type used for addressing, enforcing the declared type.

    Without a state object the declared type is the only source of the table
    and key, so it is required.
    """
    if state is None:
        if state_type is None:
            msg = "state_type is required when state is None"
            raise ValidationError(msg, field="state_type")
        return state_type
    if state_type is not None and type(state) is not state_type:
        raise StateTypeMismatchError(expected=state_type, actual=type(state))
    return type(state)
