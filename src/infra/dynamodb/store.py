"""DynamoDB implementation of DocumentStorePort.

boto3 is synchronous; every client call runs in a worker thread via
asyncio.to_thread so the event loop is never blocked on network I/O.

The JSON payload is stored as a native DynamoDB map in the ``_state``
attribute (numbers as Decimal), and turned back into JSON text on read.
"""

from __future__ import annotations

import asyncio
import json
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from src.ports.document_store_port import (
    DocumentStorePort,
    KeySchemaElement,
    ProvisionedCapacity,
    TableDescription,
    TableHandlePort,
    TableStatus,
)
from src.shared.errors import (
    CodecError,
    DocumentStoreError,
    TableInUseError,
    TableNotFoundError,
)
from src.shared.types import (
    FIELD_NAME_DATA,
    FIELD_NAME_OWNING_ACTOR_TYPE,
    FIELD_NAME_PRIMARY_ID,
    Document,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


async def _call(
    operation: str,
    table_name: str,
    fn: Callable[..., dict[str, Any]],
    **kwargs: Any,
) -> dict[str, Any]:
    """Run a blocking client call off the event loop, translating errors."""
    try:
        return await asyncio.to_thread(fn, **kwargs)
    except ClientError as e:
        error = e.response.get("Error", {})
        code = error.get("Code", "")
        if code == "ResourceNotFoundException":
            raise TableNotFoundError(table_name) from e
        if code == "ResourceInUseException":
            raise TableInUseError(table_name) from e
        msg = f"DynamoDB {operation} on {table_name} failed: {code} {error.get('Message', '')}".rstrip()
        raise DocumentStoreError(operation, msg, aws_code=code) from e
    except BotoCoreError as e:
        msg = f"DynamoDB {operation} on {table_name} failed: {e}"
        raise DocumentStoreError(operation, msg) from e


def _to_json_value(value: Any) -> Any:
    """Convert a deserialized DynamoDB value tree to plain JSON types."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, list | set):
        return [_to_json_value(v) for v in value]
    return value


def payload_to_attribute(payload: str) -> dict[str, Any]:
    """JSON text -> DynamoDB attribute value (a map for a JSON object)."""
    try:
        return _serializer.serialize(json.loads(payload, parse_float=Decimal))
    except (TypeError, ValueError) as e:
        msg = f"Payload cannot be stored as a DynamoDB value: {e}"
        raise CodecError(msg) from e


def attribute_to_payload(attribute: dict[str, Any]) -> str:
    """DynamoDB attribute value -> JSON text."""
    return json.dumps(_to_json_value(_deserializer.deserialize(attribute)))


class Boto3TableHandle(TableHandlePort):
    """Point operations on one DynamoDB table."""

    def __init__(self, client: Any, table_name: str) -> None:
        self._client = client
        self._table_name = table_name

    @property
    def table_name(self) -> str:
        return self._table_name

    async def get_item(self, key: str, consistent_read: bool = True) -> Document | None:
        resp = await _call(
            "GetItem",
            self._table_name,
            self._client.get_item,
            TableName=self._table_name,
            Key={FIELD_NAME_PRIMARY_ID: {"S": key}},
            ConsistentRead=consistent_read,
        )
        item = resp.get("Item")
        if item is None:
            return None

        payload = None
        if FIELD_NAME_DATA in item:
            payload = attribute_to_payload(item[FIELD_NAME_DATA])
        return Document(
            key=item[FIELD_NAME_PRIMARY_ID]["S"],
            owning_type=item.get(FIELD_NAME_OWNING_ACTOR_TYPE, {}).get("S", ""),
            payload=payload,
        )

    async def put_item(self, document: Document) -> None:
        item: dict[str, Any] = {
            FIELD_NAME_PRIMARY_ID: {"S": document.key},
            FIELD_NAME_OWNING_ACTOR_TYPE: {"S": document.owning_type},
        }
        if document.payload is not None:
            item[FIELD_NAME_DATA] = payload_to_attribute(document.payload)

        await _call(
            "PutItem",
            self._table_name,
            self._client.put_item,
            TableName=self._table_name,
            Item=item,
        )

    async def delete_item(self, key: str) -> None:
        await _call(
            "DeleteItem",
            self._table_name,
            self._client.delete_item,
            TableName=self._table_name,
            Key={FIELD_NAME_PRIMARY_ID: {"S": key}},
        )


class Boto3DocumentStore(DocumentStorePort):
    """DocumentStorePort backed by a boto3 DynamoDB client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    async def describe_table(self, table_name: str) -> TableDescription:
        resp = await _call(
            "DescribeTable",
            table_name,
            self._client.describe_table,
            TableName=table_name,
        )
        return _table_description(resp["Table"])

    async def create_table(
        self,
        table_name: str,
        key_schema: list[KeySchemaElement],
        capacity: ProvisionedCapacity,
    ) -> TableDescription:
        resp = await _call(
            "CreateTable",
            table_name,
            self._client.create_table,
            TableName=table_name,
            KeySchema=[
                {"AttributeName": k.attribute_name, "KeyType": k.key_type} for k in key_schema
            ],
            AttributeDefinitions=[
                {"AttributeName": k.attribute_name, "AttributeType": k.attribute_type}
                for k in key_schema
            ],
            ProvisionedThroughput={
                "ReadCapacityUnits": capacity.read_capacity_units,
                "WriteCapacityUnits": capacity.write_capacity_units,
            },
        )
        return _table_description(resp["TableDescription"])

    def get_table(self, table_name: str) -> Boto3TableHandle:
        return Boto3TableHandle(self._client, table_name)

    async def close(self) -> None:
        self._client.close()
        logger.info("DynamoDB client closed")


def _table_description(table: dict[str, Any]) -> TableDescription:
    return TableDescription(
        table_name=table["TableName"],
        status=TableStatus(table["TableStatus"]),
    )
