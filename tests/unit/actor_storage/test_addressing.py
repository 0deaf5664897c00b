"""DocumentAddresser and StateTypeRegistry unit tests."""

from __future__ import annotations

from uuid import UUID

import pytest

from src.actor_storage.addressing import (
    DOCUMENT_ID_DECORATION_SEPARATOR,
    DocumentAddresser,
    StateTypeOptions,
    StateTypeRegistry,
    default_registry,
    register_state_type,
)
from tests.fakes import Greeter, Hello, HelloState, OtherState

_HELLO_FQN = "tests.fakes.actors.Hello"


@pytest.fixture
def addresser(registry: StateTypeRegistry) -> DocumentAddresser:
    return DocumentAddresser("orbit", registry)


@pytest.mark.unit
class TestTableName:
    def test_default_table(self, addresser: DocumentAddresser) -> None:
        assert addresser.table_name(Hello, HelloState) == "orbit"

    def test_no_state_type_uses_default(self, addresser: DocumentAddresser) -> None:
        assert addresser.table_name(Hello, None) == "orbit"

    def test_override(self, addresser: DocumentAddresser, registry: StateTypeRegistry) -> None:
        registry.register(HelloState, StateTypeOptions(table_name="alt"))
        assert addresser.table_name(Hello, HelloState) == "alt"
        assert addresser.table_name(Hello, OtherState) == "orbit"

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_override_ignored(
        self,
        addresser: DocumentAddresser,
        registry: StateTypeRegistry,
        blank: str | None,
    ) -> None:
        registry.register(HelloState, StateTypeOptions(table_name=blank))
        assert addresser.table_name(Hello, HelloState) == "orbit"


@pytest.mark.unit
class TestDocumentKey:
    def test_format(self, addresser: DocumentAddresser) -> None:
        assert DOCUMENT_ID_DECORATION_SEPARATOR == "/"
        assert addresser.document_key("actor-1", Hello, HelloState) == f"actor-1/{_HELLO_FQN}"

    def test_stable(self, addresser: DocumentAddresser) -> None:
        first = addresser.document_key("actor-1", Hello, HelloState)
        second = addresser.document_key("actor-1", Hello, HelloState)
        assert first == second

    def test_differs_by_identity(self, addresser: DocumentAddresser) -> None:
        assert addresser.document_key("actor-1", Hello, HelloState) != addresser.document_key(
            "actor-2", Hello, HelloState
        )

    def test_interfaces_sharing_identity_do_not_collide(self, addresser: DocumentAddresser) -> None:
        assert addresser.document_key("actor-1", Hello, HelloState) != addresser.document_key(
            "actor-1", Greeter, HelloState
        )

    def test_non_string_identity(self, addresser: DocumentAddresser) -> None:
        uid = UUID("12345678-1234-5678-1234-567812345678")
        assert addresser.document_key(uid, Hello, None) == f"{uid}/{_HELLO_FQN}"
        assert addresser.document_key(42, Hello, None) == f"42/{_HELLO_FQN}"

    def test_decoration_override(
        self, addresser: DocumentAddresser, registry: StateTypeRegistry
    ) -> None:
        before = addresser.document_key("actor-1", Hello, HelloState)
        registry.register(HelloState, StateTypeOptions(id_decoration="hello-v2"))
        after = addresser.document_key("actor-1", Hello, HelloState)
        assert after == "actor-1/hello-v2"
        assert before != after

    def test_blank_decoration_uses_interface_name(
        self, addresser: DocumentAddresser, registry: StateTypeRegistry
    ) -> None:
        registry.register(HelloState, StateTypeOptions(id_decoration=" "))
        assert addresser.id_decoration(Hello, HelloState) == _HELLO_FQN


@pytest.mark.unit
class TestStateTypeRegistry:
    def test_unregistered_returns_none(self, registry: StateTypeRegistry) -> None:
        assert registry.options_for(HelloState) is None
        assert registry.options_for(None) is None

    def test_subclass_inherits_registration(self, registry: StateTypeRegistry) -> None:
        registry.register(HelloState, StateTypeOptions(table_name="alt"))

        class DerivedState(HelloState):
            pass

        options = registry.options_for(DerivedState)
        assert options is not None
        assert options.table_name == "alt"

    def test_unregister(self, registry: StateTypeRegistry) -> None:
        registry.register(HelloState, StateTypeOptions(table_name="alt"))
        registry.unregister(HelloState)
        assert registry.options_for(HelloState) is None

    def test_decorator(self, registry: StateTypeRegistry) -> None:
        @registry.state_type(table_name="inventory", id_decoration="inv")
        class InventoryState(HelloState):
            pass

        assert registry.options_for(InventoryState) == StateTypeOptions(
            table_name="inventory", id_decoration="inv"
        )

    def test_module_level_decorator_uses_default_registry(self) -> None:
        @register_state_type(table_name="global-alt")
        class GlobalState(HelloState):
            pass

        try:
            options = default_registry.options_for(GlobalState)
            assert options is not None
            assert options.table_name == "global-alt"
        finally:
            default_registry.unregister(GlobalState)
