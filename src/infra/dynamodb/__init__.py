"""DynamoDB adapters: configuration, connection, DocumentStorePort, storage extension."""

from src.infra.dynamodb.config import AmazonCredentialType, DynamoDBConfiguration
from src.infra.dynamodb.connection import DynamoDBConnection
from src.infra.dynamodb.extension import DynamoDBStorageExtension
from src.infra.dynamodb.store import Boto3DocumentStore, Boto3TableHandle

__all__ = [
    "AmazonCredentialType",
    "Boto3DocumentStore",
    "Boto3TableHandle",
    "DynamoDBConfiguration",
    "DynamoDBConnection",
    "DynamoDBStorageExtension",
]
