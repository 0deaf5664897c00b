"""Document addressing: which table and which key hold an actor's state.

Key format (persisted, do not change without a migration)::

    <identity>/<id_decoration>

The decoration defaults to the actor interface's fully qualified name so two
interfaces sharing an identity string never collide. State types may override
the table and the decoration by registering StateTypeOptions.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from src.shared.types import qualified_name

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T", bound=type)

DOCUMENT_ID_DECORATION_SEPARATOR = "/"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class StateTypeOptions:
    """Per-state-type storage overrides. Blank values mean "use the default"."""

    table_name: str | None = None
    id_decoration: str | None = None


class StateTypeRegistry:
    """Maps state types to their StateTypeOptions.

    Lookup walks the MRO, so a subclass inherits its base's registration
    unless it registers its own.
    """

    def __init__(self) -> None:
        self._options: dict[type, StateTypeOptions] = {}
        self._lock = threading.Lock()

    def register(self, state_type: type, options: StateTypeOptions) -> None:
        with self._lock:
            self._options[state_type] = options

    def unregister(self, state_type: type) -> None:
        with self._lock:
            self._options.pop(state_type, None)

    def options_for(self, state_type: type | None) -> StateTypeOptions | None:
        if state_type is None:
            return None
        for klass in state_type.__mro__:
            options = self._options.get(klass)
            if options is not None:
                return options
        return None

    def state_type(
        self,
        *,
        table_name: str | None = None,
        id_decoration: str | None = None,
    ) -> Callable[[T], T]:
        """Class decorator registering overrides for the decorated state type.

        Usage::

            @registry.state_type(table_name="inventory")
            class InventoryState(ActorState):
                items: list[str] = []
        """

        def decorator(cls: T) -> T:
            self.register(cls, StateTypeOptions(table_name=table_name, id_decoration=id_decoration))
            return cls

        return decorator


default_registry = StateTypeRegistry()


def register_state_type(
    *,
    table_name: str | None = None,
    id_decoration: str | None = None,
) -> Callable[[T], T]:
    """Register overrides on the process-wide default registry."""
    return default_registry.state_type(table_name=table_name, id_decoration=id_decoration)


class DocumentAddresser:
    """Computes table names and document keys. Pure: no I/O, no mutable state."""

    def __init__(
        self,
        default_table_name: str,
        registry: StateTypeRegistry | None = None,
    ) -> None:
        self._default_table_name = default_table_name
        self._registry = registry if registry is not None else default_registry

    @property
    def default_table_name(self) -> str:
        return self._default_table_name

    def table_name(self, reference_type: type, state_type: type | None) -> str:
        options = self._registry.options_for(state_type)
        if options is not None and not _is_blank(options.table_name):
            return options.table_name  # type: ignore[return-value]
        return self._default_table_name

    def id_decoration(self, reference_type: type, state_type: type | None) -> str:
        options = self._registry.options_for(state_type)
        if options is not None and not _is_blank(options.id_decoration):
            return options.id_decoration  # type: ignore[return-value]
        return qualified_name(reference_type)

    def document_key(self, identity: Any, reference_type: type, state_type: type | None) -> str:
        decoration = self.id_decoration(reference_type, state_type)
        return f"{identity}{DOCUMENT_ID_DECORATION_SEPARATOR}{decoration}"
