"""DocumentStorePort - Remote key-value document store interface.

Encapsulates the table-level primitives the actor storage core needs:
describe, create and open tables, then point get/put/delete by key.

Underlying implementation: DynamoDB via boto3 (swappable; tests use an
in-memory fake).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.shared.types import Document


class TableStatus(Enum):
    """Table lifecycle status as reported by the store."""

    CREATING = "CREATING"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    ACTIVE = "ACTIVE"
    INACCESSIBLE_ENCRYPTION_CREDENTIALS = "INACCESSIBLE_ENCRYPTION_CREDENTIALS"
    ARCHIVING = "ARCHIVING"
    ARCHIVED = "ARCHIVED"

    @property
    def is_usable(self) -> bool:
        """Reads and writes are accepted in this status."""
        return self in (TableStatus.ACTIVE, TableStatus.UPDATING)


@dataclass(frozen=True)
class KeySchemaElement:
    """A single primary-key attribute (hash key, string typed)."""

    attribute_name: str
    key_type: str = "HASH"
    attribute_type: str = "S"


@dataclass(frozen=True)
class ProvisionedCapacity:
    """Read/write capacity units requested at table creation."""

    read_capacity_units: int = 1
    write_capacity_units: int = 1


@dataclass(frozen=True)
class TableDescription:
    """Result of a describe-table or create-table call."""

    table_name: str
    status: TableStatus


class TableHandlePort(ABC):
    """Port: point operations on one table."""

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Name of the table this handle addresses."""

    @abstractmethod
    async def get_item(self, key: str, consistent_read: bool = True) -> Document | None:
        """Fetch one document by primary key.

        Args:
            key: Primary key value.
            consistent_read: Request a strongly consistent read.

        Returns:
            The document, or None if no document has this key.
        """

    @abstractmethod
    async def put_item(self, document: Document) -> None:
        """Unconditionally create or overwrite a document."""

    @abstractmethod
    async def delete_item(self, key: str) -> None:
        """Delete a document by key (no-op if absent)."""


class DocumentStorePort(ABC):
    """Port: table lifecycle primitives of a document store."""

    @abstractmethod
    async def describe_table(self, table_name: str) -> TableDescription:
        """Describe a table.

        Raises:
            TableNotFoundError: The table does not exist.
            DocumentStoreError: Any other store failure.
        """

    @abstractmethod
    async def create_table(
        self,
        table_name: str,
        key_schema: list[KeySchemaElement],
        capacity: ProvisionedCapacity,
    ) -> TableDescription:
        """Request creation of a table.

        Returns immediately; the table is usually still CREATING.

        Raises:
            TableInUseError: The table already exists or is being created.
            DocumentStoreError: Any other store failure.
        """

    @abstractmethod
    def get_table(self, table_name: str) -> TableHandlePort:
        """Return a handle for a table (no I/O)."""

    @abstractmethod
    async def close(self) -> None:
        """Release client resources."""
