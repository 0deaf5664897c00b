"""Shared domain types used across layers.

These types flow through Port interfaces and must remain stable.
Document field names are part of the persisted layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

# -- Persisted layout (never rename) --

FIELD_NAME_PRIMARY_ID = "_id"
FIELD_NAME_DATA = "_state"
FIELD_NAME_OWNING_ACTOR_TYPE = "_owningType"


def qualified_name(cls: type) -> str:
    """Fully qualified name of a class, e.g. ``game.actors.Player``."""
    return f"{cls.__module__}.{cls.__qualname__}"


class ActorState(BaseModel):
    """Base class for persistable actor state.

    Bytes are carried as base64 text in JSON so binary fields survive the
    document payload. Unknown payload fields are ignored on read.
    """

    model_config = ConfigDict(
        ser_json_bytes="base64",
        val_json_bytes="base64",
        extra="ignore",
    )


@dataclass(frozen=True)
class ActorReference:
    """Address of an actor: its declared interface plus its logical identity."""

    interface_type: type
    identity: Any

    @property
    def interface_name(self) -> str:
        return qualified_name(self.interface_type)


@dataclass(frozen=True)
class Document:
    """One persisted actor-state document.

    payload is the encoded JSON state; None means a key-only document.
    """

    key: str
    owning_type: str
    payload: str | None = None
