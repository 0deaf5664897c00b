"""Port interfaces - Layer boundary contracts.

Ports:
    DocumentStorePort    - Table lifecycle of the remote document store
    TableHandlePort      - Point get/put/delete on one table
    StorageExtensionPort - Actor runtime storage lifecycle
"""

from src.ports.document_store_port import (
    DocumentStorePort,
    KeySchemaElement,
    ProvisionedCapacity,
    TableDescription,
    TableHandlePort,
    TableStatus,
)
from src.ports.storage_extension_port import StorageExtensionPort

__all__ = [
    "DocumentStorePort",
    "KeySchemaElement",
    "ProvisionedCapacity",
    "StorageExtensionPort",
    "TableDescription",
    "TableHandlePort",
    "TableStatus",
]
