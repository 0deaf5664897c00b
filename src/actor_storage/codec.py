"""Actor state <-> JSON payload codec.

DynamoDB historically rejected empty strings and empty binary values inside
stored maps, so every empty value is written as a fixed placeholder and
turned back into an empty value on read. The substitution is a generic walk
over the value tree, so nested lists, sets, maps and models are covered
uniformly.

The placeholders embed UUIDs so genuine application data is not expected to
collide with them. A collision is an accepted risk; there is no runtime check.

Bytes are carried as base64 text. Every model in a state tree must read and
write JSON bytes that way (any ActorState subclass does); other models are
rejected with CodecError instead of silently decoding the base64 text.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, get_args, get_origin

from pydantic import BaseModel
from pydantic_core import from_json, to_json

from src.shared.errors import CodecError
from src.shared.types import ActorState, qualified_name

logger = logging.getLogger(__name__)

# Do not change these values. They are persisted in place of empty values.
EMPTY_STRING_PLACEHOLDER = "OrbitEmptyString.2f748e4e-c8ef-4129-8dbc-206fe8e72e64"
EMPTY_BYTES_PLACEHOLDER = b"OrbitEmptyByteArray.a643e4a1-96dc-45b3-9606-479bae6bb3f2"

_BYTES_MODE = "base64"

# JSON text form of EMPTY_BYTES_PLACEHOLDER, as produced by the encoder.
_EMPTY_BYTES_PLACEHOLDER_TEXT: str = from_json(
    to_json(EMPTY_BYTES_PLACEHOLDER, bytes_mode=_BYTES_MODE)
)


def substitute_placeholders(value: Any) -> Any:
    """Replace empty strings and empty bytes with placeholders, recursively."""
    if isinstance(value, str):
        return EMPTY_STRING_PLACEHOLDER if value == "" else value
    if isinstance(value, bytes | bytearray):
        return EMPTY_BYTES_PLACEHOLDER if len(value) == 0 else bytes(value)
    if isinstance(value, dict):
        return {k: substitute_placeholders(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [substitute_placeholders(v) for v in value]
    return value


def restore_placeholders(value: Any) -> Any:
    """Inverse of substitute_placeholders over a decoded JSON tree.

    Both placeholders become ``""``: a ``str`` field keeps it as is and a
    ``bytes`` field decodes the empty base64 text to ``b""``.
    """
    if isinstance(value, str):
        if value in (EMPTY_STRING_PLACEHOLDER, _EMPTY_BYTES_PLACEHOLDER_TEXT):
            return ""
        return value
    if isinstance(value, dict):
        return {k: restore_placeholders(v) for k, v in value.items()}
    if isinstance(value, list):
        return [restore_placeholders(v) for v in value]
    return value


def _model_types(annotation: Any) -> list[type[BaseModel]]:
    """Model classes referenced by a field annotation (through unions, containers)."""
    if inspect.isclass(annotation) and get_origin(annotation) is None:
        return [annotation] if issubclass(annotation, BaseModel) else []
    return [model for arg in get_args(annotation) for model in _model_types(arg)]


@functools.cache
def _check_bytes_mode(model_type: type[BaseModel]) -> None:
    """Require base64 bytes in JSON for ``model_type`` and every nested model.

    Payload bytes are always written as base64; a nested model that reads
    JSON bytes as UTF-8 would get the base64 text back instead of its data.
    """
    pending = [model_type]
    seen: set[type[BaseModel]] = set()
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        config = current.model_config
        if (
            config.get("ser_json_bytes") != _BYTES_MODE
            or config.get("val_json_bytes") != _BYTES_MODE
        ):
            msg = (
                f"{current.__qualname__} must carry bytes as base64 in JSON "
                "(derive it from ActorState)"
            )
            raise CodecError(msg, state_type=qualified_name(model_type))
        for field in current.model_fields.values():
            pending.extend(_model_types(field.annotation))


class PayloadCodec:
    """Serializes actor state to a JSON payload and back."""

    def encode(self, state: BaseModel) -> str:
        """Encode a state object to JSON text with placeholders applied.

        Fields set to None are omitted.
        """
        if not isinstance(state, BaseModel):
            msg = f"Cannot encode state of type {type(state).__qualname__}"
            raise CodecError(msg, state_type=qualified_name(type(state)))
        _check_bytes_mode(type(state))

        try:
            tree = state.model_dump(mode="python", by_alias=True, exclude_none=True)
            return to_json(substitute_placeholders(tree), bytes_mode=_BYTES_MODE).decode("utf-8")
        except ValueError as e:
            msg = f"Failed to encode {type(state).__qualname__}: {e}"
            raise CodecError(msg, state_type=qualified_name(type(state))) from e

    def decode(self, payload: str, into_state: ActorState) -> None:
        """Decode ``payload`` into ``into_state`` in place.

        Only fields present in the payload are overwritten. The full object is
        validated before any field is assigned, so a failed decode leaves
        ``into_state`` untouched.
        """
        state_type = type(into_state)
        _check_bytes_mode(state_type)
        try:
            restored = restore_placeholders(from_json(payload))
            if not isinstance(restored, dict):
                msg = f"Payload for {state_type.__qualname__} is not a JSON object"
                raise CodecError(msg, state_type=qualified_name(state_type))

            merged = from_json(into_state.model_dump_json(by_alias=True))
            merged.update(restored)
            decoded = state_type.model_validate_json(to_json(merged))
        except ValueError as e:
            msg = f"Failed to decode {state_type.__qualname__}: {e}"
            raise CodecError(msg, state_type=qualified_name(state_type)) from e

        for name, field in state_type.model_fields.items():
            if (field.alias or name) in restored:
                setattr(into_state, name, getattr(decoded, name))
        logger.debug("Decoded %d fields into %s", len(restored), state_type.__qualname__)
