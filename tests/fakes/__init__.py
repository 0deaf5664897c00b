"""Shared Fake adapters for testing without unittest.mock.

All Fake implementations follow the Port DI adapter pattern:
real Python classes with in-memory state, no AsyncMock/MagicMock.
"""

from tests.fakes.actors import Greeter, Hello, HelloState, NestedState, OtherState
from tests.fakes.document_store import (
    FailingDocumentStore,
    FakeDocumentStore,
    FakeTable,
    FakeTableHandle,
)

__all__ = [
    "FailingDocumentStore",
    "FakeDocumentStore",
    "FakeTable",
    "FakeTableHandle",
    "Greeter",
    "Hello",
    "HelloState",
    "NestedState",
    "OtherState",
]
