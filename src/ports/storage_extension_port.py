"""StorageExtensionPort - Actor runtime storage extension interface.

The actor runtime drives a storage extension through this lifecycle:
start() once, then any number of read/write/clear calls, then stop().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.shared.types import ActorReference, ActorState


class StorageExtensionPort(ABC):
    """Port: Durable per-actor state persistence."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Extension name the runtime uses to select a storage provider."""

    @abstractmethod
    async def start(self) -> None:
        """Connect to the store and prepare the default table."""

    @abstractmethod
    async def stop(self) -> None:
        """Release the store connection."""

    @abstractmethod
    async def read_state(
        self,
        reference: ActorReference,
        state: ActorState,
        state_type: type[ActorState] | None = None,
    ) -> bool:
        """Load persisted state into ``state`` in place.

        Args:
            reference: Actor whose state is read.
            state: Mutable state object to populate.
            state_type: Declared state type; must match ``type(state)`` if given.

        Returns:
            True if a document was found, False otherwise.
        """

    @abstractmethod
    async def write_state(
        self,
        reference: ActorReference,
        state: ActorState | None,
        state_type: type[ActorState] | None = None,
    ) -> None:
        """Persist ``state``, overwriting any previous document.

        With ``state`` None a key-only document is written; ``state_type`` is
        then required to address it.

        Raises:
            ValidationError: ``state`` and ``state_type`` are both None, or
                they disagree.
        """

    @abstractmethod
    async def clear_state(
        self,
        reference: ActorReference,
        state: ActorState | None,
        state_type: type[ActorState] | None = None,
    ) -> None:
        """Delete the persisted document (no-op if absent).

        ``state_type`` is required when ``state`` is None.
        """
